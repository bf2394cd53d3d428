"""Command line interface for the monoscaffold generator."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Sequence

from pydantic import ValidationError

from .context import WorkspaceContext
from .errors import OptionsValidationError, ScaffoldError
from .generator import generate_project
from .schema import ProjectOptions

LOGGER = logging.getLogger(__name__)

# argparse destination -> ProjectOptions field
_OPTION_FIELDS = (
    "name",
    "directory",
    "project_type",
    "template_dir",
    "description",
    "package_name",
    "module_name",
    "pyproject_python_dependency",
    "pyenv_python_version",
    "linter",
    "unit_test_runner",
    "code_coverage",
    "code_coverage_threshold",
    "code_coverage_html_report",
    "code_coverage_xml_report",
    "unit_test_html_report",
    "unit_test_junit_report",
    "publishable",
    "build_locked_versions",
    "build_bundle_local_dependencies",
    "dev_dependencies_project",
    "root_pyproject_dependency_group",
    "tags",
)


def _add_toggle(parser: argparse.ArgumentParser, flag: str, help_text: str) -> None:
    parser.add_argument(flag, action=argparse.BooleanOptionalAction, default=None, help=help_text)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate poetry projects inside a monorepo workspace")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    project = subparsers.add_parser("project", help="create a new poetry project")
    project.add_argument("name", help="Name of the new project")
    project.add_argument(
        "-w",
        "--workspace",
        type=Path,
        default=Path.cwd(),
        help="Workspace root containing workspace.json and the root pyproject.toml",
    )
    project.add_argument("-d", "--directory", help="Directory, below the apps or libs root, for the project")
    project.add_argument(
        "--type",
        dest="project_type",
        choices=["application", "library"],
        help="Kind of project to create (default: application)",
    )
    project.add_argument("--template-dir", help="Render this directory instead of the bundled templates")
    project.add_argument("--description", help="Project description")
    project.add_argument("--package-name", help="Override the distributable package name")
    project.add_argument("--module-name", help="Override the importable module name")
    project.add_argument("--python-dependency", dest="pyproject_python_dependency", help="Python version constraint")
    project.add_argument("--pyenv-version", dest="pyenv_python_version", help="Interpreter pinned in .python-version")
    project.add_argument("--linter", choices=["flake8", "none"], help="Linter (default: flake8)")
    project.add_argument("--unit-test-runner", choices=["pytest", "none"], help="Test runner (default: pytest)")
    _add_toggle(project, "--code-coverage", "Collect coverage while testing")
    project.add_argument("--code-coverage-threshold", type=int, help="Minimum coverage percentage")
    _add_toggle(project, "--code-coverage-html-report", "Write an HTML coverage report")
    _add_toggle(project, "--code-coverage-xml-report", "Write an XML coverage report")
    _add_toggle(project, "--unit-test-html-report", "Write an HTML unit test report")
    _add_toggle(project, "--unit-test-junit-report", "Write a JUnit XML unit test report")
    _add_toggle(project, "--publishable", "Publish the package when building")
    _add_toggle(project, "--build-locked-versions", "Use locked versions when building")
    _add_toggle(project, "--build-bundle-local-dependencies", "Bundle local dependencies when building")
    project.add_argument("--dev-dependencies-project", help="Project holding the shared dev dependencies")
    project.add_argument(
        "--root-group",
        dest="root_pyproject_dependency_group",
        help="Root pyproject.toml dependency group receiving the project (default: main)",
    )
    project.add_argument("--tags", help="Comma separated tags")
    project.add_argument("--dry-run", action="store_true", help="Report the files without writing them")
    project.add_argument("--skip-lock", action="store_true", help="Do not update the root poetry.lock")

    return parser


def _options_from_args(args: argparse.Namespace) -> ProjectOptions:
    raw: dict[str, Any] = {}
    for field in _OPTION_FIELDS:
        value = getattr(args, field, None)
        if value is not None:
            raw[field] = value
    try:
        return ProjectOptions.model_validate(raw)
    except ValidationError as exc:
        raise OptionsValidationError(f"invalid options for project '{args.name}':\n{exc}") from exc


def _handle_project(args: argparse.Namespace) -> int:
    options = _options_from_args(args)
    context = WorkspaceContext.open(args.workspace)
    result = generate_project(context, options)

    if args.dry_run:
        for path in result.files:
            print(f"CREATE/UPDATE {path}")
        print("Dry run: no files were written.")
        return 0

    deferred_action = result.commit()
    descriptor = result.descriptor
    print(f"Project {descriptor.project_name} created at {descriptor.project_root}")
    if not args.skip_lock:
        deferred_action()
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format="%(message)s")
    try:
        if args.command == "project":
            return _handle_project(args)
    except ScaffoldError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    parser.error("no command provided")
    return 2


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
