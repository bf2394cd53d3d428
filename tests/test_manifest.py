from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
import tomlkit

from monoscaffold.context import WorkspaceContext
from monoscaffold.dependencies import reconcile
from monoscaffold.errors import ManifestParseError
from monoscaffold.manifest import apply_dependencies
from monoscaffold.normalize import normalize_options
from monoscaffold.schema import ProjectDescriptor, ProjectOptions

SVC_PATH_DEPENDENCY = {"path": "apps/svc", "develop": True}


def _descriptor(context: WorkspaceContext, **options: Any) -> ProjectDescriptor:
    return normalize_options(ProjectOptions(name="svc", **options), context)


def _load(context: WorkspaceContext, path: str = "pyproject.toml") -> dict[str, Any]:
    return tomlkit.parse(context.tree.read(path)).unwrap()


def test_root_manifest_receives_path_dependency_and_dev_tools(context: WorkspaceContext):
    descriptor = _descriptor(context, code_coverage=True, code_coverage_html_report=False)

    written = apply_dependencies(context.tree, context.registry, descriptor)

    assert written == ["pyproject.toml"]
    poetry = _load(context)["tool"]["poetry"]
    assert poetry["dependencies"]["svc"] == SVC_PATH_DEPENDENCY
    assert poetry["group"]["dev"]["dependencies"] == {
        "flake8": "6.0.0",
        "autopep8": "2.0.2",
        "pytest": "7.3.1",
        "pytest-sugar": "0.9.7",
        "pytest-cov": "4.1.0",
    }


def test_second_run_changes_nothing(context: WorkspaceContext):
    descriptor = _descriptor(context, code_coverage=True, code_coverage_html_report=False)
    apply_dependencies(context.tree, context.registry, descriptor)
    first = context.tree.read("pyproject.toml")

    dev_dependencies = _load(context)["tool"]["poetry"]["group"]["dev"]["dependencies"]
    assert reconcile(dev_dependencies, descriptor).changed is False

    apply_dependencies(context.tree, context.registry, descriptor)
    assert context.tree.read("pyproject.toml") == first


def test_unrelated_content_survives_round_trip(context: WorkspaceContext):
    apply_dependencies(context.tree, context.registry, _descriptor(context))
    text = context.tree.read("pyproject.toml")

    assert text.startswith("# Workspace level manifest\n")
    assert 'requires = ["poetry-core"]' in text
    document = _load(context)
    assert document["tool"]["poetry"]["description"] == "Shared workspace"
    assert document["tool"]["poetry"]["group"]["build"] == {"optional": True, "dependencies": {"wheel": "0.40.0"}}


def test_named_group_keeps_existing_entries(context: WorkspaceContext):
    descriptor = _descriptor(context, root_pyproject_dependency_group="build")

    apply_dependencies(context.tree, context.registry, descriptor)

    poetry = _load(context)["tool"]["poetry"]
    assert poetry["group"]["build"]["optional"] is True
    assert poetry["group"]["build"]["dependencies"] == {"wheel": "0.40.0", "svc": SVC_PATH_DEPENDENCY}
    assert "svc" not in poetry["dependencies"]
    assert "dev" in poetry["group"]


def test_new_named_group_is_created(context: WorkspaceContext):
    descriptor = _descriptor(context, root_pyproject_dependency_group="services", linter="none", unit_test_runner="none")

    apply_dependencies(context.tree, context.registry, descriptor)

    groups = _load(context)["tool"]["poetry"]["group"]
    assert groups["services"] == {"dependencies": {"svc": SVC_PATH_DEPENDENCY}}
    assert groups["build"]["dependencies"] == {"wheel": "0.40.0"}
    assert groups["dev"]["dependencies"] == {"autopep8": "2.0.2"}


def test_existing_dev_group_entries_are_preserved(workspace: Path, context: WorkspaceContext):
    (workspace / "pyproject.toml").write_text(
        "[tool.poetry]\n"
        'name = "workspace"\n'
        'version = "1.0.0"\n'
        "\n"
        "[tool.poetry.dependencies]\n"
        'python = ">=3.9,<3.11"\n'
        "\n"
        "[tool.poetry.group.dev]\n"
        "optional = true\n"
        "\n"
        "[tool.poetry.group.dev.dependencies]\n"
        'black = "23.1.0"\n'
        'pytest = "^8.0"\n',
        encoding="utf-8",
    )

    apply_dependencies(context.tree, context.registry, _descriptor(context))

    dev = _load(context)["tool"]["poetry"]["group"]["dev"]
    assert dev["optional"] is True
    assert dev["dependencies"]["black"] == "23.1.0"
    assert dev["dependencies"]["pytest"] == "^8.0"
    assert dev["dependencies"]["autopep8"] == "2.0.2"


def test_shared_dev_project_receives_tooling(context: WorkspaceContext, dev_project: str):
    descriptor = _descriptor(context, dev_dependencies_project=dev_project)

    written = apply_dependencies(context.tree, context.registry, descriptor)

    assert written == ["libs/dev-deps/pyproject.toml", "pyproject.toml"]
    dev_dependencies = _load(context, "libs/dev-deps/pyproject.toml")["tool"]["poetry"]["dependencies"]
    assert dev_dependencies["pytest"] == "7.0.0"
    assert dev_dependencies["pytest-sugar"] == "0.9.7"
    assert dev_dependencies["python"] == ">=3.9,<3.11"

    root = _load(context)["tool"]["poetry"]
    assert root["dependencies"]["svc"] == SVC_PATH_DEPENDENCY
    assert "dev" not in root["group"]


def test_shared_dev_project_is_not_rewritten_when_unchanged(context: WorkspaceContext, dev_project: str):
    descriptor = _descriptor(context, dev_dependencies_project=dev_project)
    apply_dependencies(context.tree, context.registry, descriptor)

    assert apply_dependencies(context.tree, context.registry, descriptor) == ["pyproject.toml"]


def test_isolated_workspace_touches_nothing(isolated_context: WorkspaceContext):
    descriptor = _descriptor(isolated_context)

    assert apply_dependencies(isolated_context.tree, isolated_context.registry, descriptor) == []
    assert isolated_context.tree.changes() == []


def test_invalid_root_manifest(workspace: Path, context: WorkspaceContext):
    descriptor = _descriptor(context)
    (workspace / "pyproject.toml").write_text("[tool.poetry\nname = ", encoding="utf-8")

    with pytest.raises(ManifestParseError) as excinfo:
        apply_dependencies(context.tree, context.registry, descriptor)
    assert excinfo.value.path == "pyproject.toml"
    assert context.tree.changes() == []


def test_root_manifest_without_poetry_table(workspace: Path, context: WorkspaceContext):
    descriptor = _descriptor(context)
    (workspace / "pyproject.toml").write_text('[project]\nname = "workspace"\n', encoding="utf-8")

    with pytest.raises(ManifestParseError, match=r"\[tool.poetry\]"):
        apply_dependencies(context.tree, context.registry, descriptor)
