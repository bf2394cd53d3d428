"""Expansion of raw :class:`ProjectOptions` into a :class:`ProjectDescriptor`."""

from __future__ import annotations

from typing import Any

from .config import (
    DEFAULT_DEPENDENCY_GROUP,
    DEFAULT_DESCRIPTION,
    DEFAULT_PYENV_PYTHON_VERSION,
    DEFAULT_PYPROJECT_PYTHON_DEPENDENCY,
)
from .context import WorkspaceContext
from .errors import OptionsValidationError
from .naming import file_name, normalize_module_name, offset_from_root, relative_path
from .schema import ProjectDescriptor, ProjectOptions

__all__ = ["build_pytest_addopts", "normalize_options", "parse_tags"]


_TEST_REPORT_FIELDS = (
    "unit_test_html_report",
    "unit_test_junit_report",
    "code_coverage",
    "code_coverage_html_report",
    "code_coverage_xml_report",
)


def parse_tags(tags: str | None) -> list[str]:
    """Split a comma separated tag string, dropping blank entries."""

    if not tags:
        return []
    return [tag.strip() for tag in tags.split(",") if tag.strip()]


def build_pytest_addopts(values: dict[str, Any], project_root: str) -> str:
    """Return the pytest argument string for the coverage and report toggles.

    Report paths are relative to the project directory, pointing back into the
    workspace level ``coverage/`` and ``reports/`` trees.
    """

    offset = offset_from_root(project_root)
    args: list[str] = []
    if values.get("code_coverage"):
        args.append("--cov")
    if values.get("code_coverage_threshold"):
        args.append(f"--cov-fail-under={values['code_coverage_threshold']}")
    if values.get("code_coverage") and values.get("code_coverage_html_report"):
        args.append(f"--cov-report html:'{offset}coverage/{project_root}/html'")
    if values.get("code_coverage") and values.get("code_coverage_xml_report"):
        args.append(f"--cov-report xml:'{offset}coverage/{project_root}/coverage.xml'")
    if values.get("unit_test_html_report"):
        args.append(f"--html='{offset}reports/{project_root}/unittests/html/index.html'")
    if values.get("unit_test_junit_report"):
        args.append(f"--junitxml='{offset}reports/{project_root}/unittests/junit.xml'")
    return " ".join(args)


def normalize_options(options: ProjectOptions, context: WorkspaceContext) -> ProjectDescriptor:
    """Resolve every derived and defaulted field of the project to generate.

    The result depends only on ``options``, the presence of a root manifest
    and the registry entry of the shared dev dependency project, if any.
    """

    name = file_name(options.name)
    if not name:
        raise OptionsValidationError(f"project name '{options.name}' does not contain any usable characters")

    project_directory = name
    if options.directory:
        directory = file_name(options.directory)
        if not directory:
            raise OptionsValidationError(f"directory '{options.directory}' does not contain any usable characters")
        project_directory = f"{directory}/{name}"
    project_name = project_directory.replace("/", "-")
    project_root = f"{context.layout.root_for(options.project_type)}/{project_directory}"

    # defaults first, then whatever the caller actually set
    values: dict[str, Any] = {
        "pyproject_python_dependency": DEFAULT_PYPROJECT_PYTHON_DEPENDENCY,
        "pyenv_python_version": DEFAULT_PYENV_PYTHON_VERSION,
        "module_name": normalize_module_name(project_name),
        "package_name": project_name,
        "description": DEFAULT_DESCRIPTION,
        "root_pyproject_dependency_group": DEFAULT_DEPENDENCY_GROUP,
    }
    values.update(options.model_dump(exclude_none=True))

    dev_dependencies_project_path = None
    if options.dev_dependencies_project:
        dev_project = context.registry.lookup(options.dev_dependencies_project)
        dev_dependencies_project_path = relative_path(project_root, dev_project.root)

    python_addopts = None
    if options.unit_test_runner == "pytest":
        python_addopts = build_pytest_addopts(values, project_root)

    if options.unit_test_runner == "none":
        for field in _TEST_REPORT_FIELDS:
            values[field] = False
        values["code_coverage_threshold"] = None

    values.update(
        dev_dependencies_project=options.dev_dependencies_project or "",
        project_name=project_name,
        project_root=project_root,
        project_directory=project_directory,
        individual_package=not context.has_root_manifest(),
        dev_dependencies_project_path=dev_dependencies_project_path,
        python_addopts=python_addopts,
        parsed_tags=parse_tags(options.tags),
    )
    return ProjectDescriptor.model_validate(values)
