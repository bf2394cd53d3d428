"""Automation targets registered alongside a generated project."""

from __future__ import annotations

from .schema import ProjectDescriptor, TargetDescriptor

__all__ = ["build_targets"]


def build_targets(descriptor: ProjectDescriptor) -> dict[str, TargetDescriptor]:
    """Return the lock/add/update/remove/build/install targets plus lint and test when enabled."""

    root = descriptor.project_root
    targets: dict[str, TargetDescriptor] = {
        "lock": TargetDescriptor(
            executor="run-commands",
            options={"command": "poetry lock --no-update", "cwd": root},
        ),
        "add": TargetDescriptor(executor="monoscaffold:add"),
        "update": TargetDescriptor(executor="monoscaffold:update"),
        "remove": TargetDescriptor(executor="monoscaffold:remove"),
        "build": TargetDescriptor(
            executor="monoscaffold:build",
            outputs=["{projectRoot}/dist"],
            options={
                "outputPath": f"{root}/dist",
                "publish": descriptor.publishable,
                "lockedVersions": descriptor.build_locked_versions,
                "bundleLocalDependencies": descriptor.build_bundle_local_dependencies,
            },
        ),
        "install": TargetDescriptor(
            executor="monoscaffold:install",
            options={
                "silent": False,
                "args": "",
                "cacheDir": ".cache/pypoetry",
                "verbose": False,
                "debug": False,
            },
        ),
    }

    if descriptor.linter == "flake8":
        targets["lint"] = TargetDescriptor(
            executor="monoscaffold:flake8",
            outputs=[f"{{workspaceRoot}}/reports/{root}/pylint.txt"],
            options={"outputFile": f"reports/{root}/pylint.txt"},
        )

    if descriptor.unit_test_runner == "pytest":
        targets["test"] = TargetDescriptor(
            executor="run-commands",
            outputs=[
                f"{{workspaceRoot}}/reports/{root}/unittests",
                f"{{workspaceRoot}}/coverage/{root}",
            ],
            options={"command": "poetry run pytest tests/", "cwd": root},
        )

    return targets
