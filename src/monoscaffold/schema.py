"""Pydantic models describing generator inputs, outputs and registry records."""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

ProjectType = Literal["application", "library"]
Linter = Literal["flake8", "none"]
UnitTestRunner = Literal["pytest", "none"]


class ProjectOptions(BaseModel):
    """Raw, partially specified options supplied by the caller.

    Optional fields left as ``None`` (or given as an empty string) are treated
    as unset and receive a default during normalisation.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str = Field(..., min_length=1, description="Name of the project to generate.")
    directory: Optional[str] = Field(None, description="Directory, relative to the layout root, holding the project.")
    project_type: ProjectType = Field("application", description="Whether the project is an application or a library.")
    template_dir: Optional[str] = Field(None, description="Directory whose templates replace the bundled ones.")
    description: Optional[str] = Field(None, description="Description written to the project manifest.")
    package_name: Optional[str] = Field(None, description="Distributable package name.")
    module_name: Optional[str] = Field(None, description="Importable module name.")
    pyproject_python_dependency: Optional[str] = Field(None, description="Python version constraint.")
    pyenv_python_version: Optional[str] = Field(None, description="Interpreter pinned in .python-version.")
    linter: Linter = Field("flake8", description="Linter to configure.")
    unit_test_runner: UnitTestRunner = Field("pytest", description="Test runner to configure.")
    code_coverage: bool = Field(True, description="Collect coverage while running tests.")
    code_coverage_threshold: Optional[int] = Field(None, ge=0, le=100, description="Minimum coverage percentage.")
    code_coverage_html_report: bool = Field(True, description="Write an HTML coverage report.")
    code_coverage_xml_report: bool = Field(True, description="Write an XML coverage report.")
    unit_test_html_report: bool = Field(True, description="Write an HTML unit test report.")
    unit_test_junit_report: bool = Field(True, description="Write a JUnit XML unit test report.")
    publishable: bool = Field(False, description="Publish the package when building.")
    build_locked_versions: bool = Field(True, description="Use locked versions when building.")
    build_bundle_local_dependencies: bool = Field(True, description="Bundle local path dependencies when building.")
    dev_dependencies_project: Optional[str] = Field(None, description="Project that owns shared dev dependencies.")
    root_pyproject_dependency_group: Optional[str] = Field(None, description="Root manifest group for the new project.")
    tags: Optional[str] = Field(None, description="Comma separated project tags.")

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("project name must not be empty")
        return value

    @field_validator(
        "directory",
        "template_dir",
        "description",
        "package_name",
        "module_name",
        "pyproject_python_dependency",
        "pyenv_python_version",
        "dev_dependencies_project",
        "root_pyproject_dependency_group",
        "tags",
    )
    @classmethod
    def _blank_is_unset(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            return None
        return value


class ProjectDescriptor(BaseModel):
    """Fully normalised description of the project to generate."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    directory: Optional[str] = None
    project_type: ProjectType
    template_dir: Optional[str] = None
    description: str
    package_name: str
    module_name: str
    pyproject_python_dependency: str
    pyenv_python_version: str
    linter: Linter
    unit_test_runner: UnitTestRunner
    code_coverage: bool
    code_coverage_threshold: Optional[int] = None
    code_coverage_html_report: bool
    code_coverage_xml_report: bool
    unit_test_html_report: bool
    unit_test_junit_report: bool
    publishable: bool
    build_locked_versions: bool
    build_bundle_local_dependencies: bool
    dev_dependencies_project: str = Field("", description="Shared dev dependency project, empty when none.")
    root_pyproject_dependency_group: str
    tags: Optional[str] = None

    project_name: str = Field(..., description="Unique project identifier.")
    project_root: str = Field(..., description="Workspace relative project root.")
    project_directory: str = Field(..., description="Project directory relative to the layout root.")
    individual_package: bool = Field(..., description="True when the workspace has no root manifest.")
    dev_dependencies_project_path: Optional[str] = Field(None, description="Path from the project to the dev project.")
    python_addopts: Optional[str] = Field(None, description="Arguments passed to pytest.")
    parsed_tags: List[str] = Field(default_factory=list)

    @property
    def source_root(self) -> str:
        return f"{self.project_root}/{self.module_name}"


class TargetDescriptor(BaseModel):
    """Automation task attached to a registered project."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    executor: str = Field(..., description="Identifier of the executor running the target.")
    outputs: List[str] = Field(default_factory=list, description="Paths produced by the target.")
    options: Dict[str, Any] = Field(default_factory=dict, description="Static executor options.")


class ProjectConfiguration(BaseModel):
    """Registration record stored in the workspace registry.

    Records use camelCase keys like the rest of ``workspace.json``. Keys written
    by other tooling are ignored when reading.
    """

    model_config = ConfigDict(extra="ignore", frozen=True, alias_generator=to_camel, populate_by_name=True)

    root: str
    project_type: ProjectType = "library"
    source_root: Optional[str] = None
    targets: Dict[str, TargetDescriptor] = Field(default_factory=dict)
    tags: List[str] = Field(default_factory=list)


__all__ = [
    "Linter",
    "ProjectConfiguration",
    "ProjectDescriptor",
    "ProjectOptions",
    "ProjectType",
    "TargetDescriptor",
    "UnitTestRunner",
]
