from __future__ import annotations

from monoscaffold.context import WorkspaceContext
from monoscaffold.normalize import normalize_options
from monoscaffold.schema import ProjectOptions
from monoscaffold.targets import build_targets


def test_default_targets(context: WorkspaceContext):
    descriptor = normalize_options(ProjectOptions(name="svc", publishable=True), context)
    targets = build_targets(descriptor)

    assert set(targets) == {"lock", "add", "update", "remove", "build", "install", "lint", "test"}
    assert targets["lock"].options == {"command": "poetry lock --no-update", "cwd": "apps/svc"}
    assert targets["build"].outputs == ["{projectRoot}/dist"]
    assert targets["build"].options == {
        "outputPath": "apps/svc/dist",
        "publish": True,
        "lockedVersions": True,
        "bundleLocalDependencies": True,
    }
    assert targets["install"].options["cacheDir"] == ".cache/pypoetry"


def test_lint_and_test_outputs_are_namespaced_by_project_root(context: WorkspaceContext):
    options = ProjectOptions(name="core", directory="shared", project_type="library")
    targets = build_targets(normalize_options(options, context))

    assert targets["lint"].executor == "monoscaffold:flake8"
    assert targets["lint"].outputs == ["{workspaceRoot}/reports/libs/shared/core/pylint.txt"]
    assert targets["lint"].options == {"outputFile": "reports/libs/shared/core/pylint.txt"}
    assert targets["test"].outputs == [
        "{workspaceRoot}/reports/libs/shared/core/unittests",
        "{workspaceRoot}/coverage/libs/shared/core",
    ]
    assert targets["test"].options["cwd"] == "libs/shared/core"


def test_lint_and_test_are_optional(context: WorkspaceContext):
    options = ProjectOptions(
        name="svc",
        linter="none",
        unit_test_runner="none",
        build_locked_versions=False,
        build_bundle_local_dependencies=False,
    )
    targets = build_targets(normalize_options(options, context))

    assert "lint" not in targets
    assert "test" not in targets
    assert targets["build"].options["lockedVersions"] is False
    assert targets["build"].options["bundleLocalDependencies"] is False
    assert targets["build"].options["publish"] is False
