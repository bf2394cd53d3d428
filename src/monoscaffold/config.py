"""Configuration helpers shared by the generator, registry and CLI."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Mapping

from .errors import OptionsValidationError

if TYPE_CHECKING:
    from .tree import Tree

__all__ = [
    "DEFAULT_DESCRIPTION",
    "DEFAULT_DEPENDENCY_GROUP",
    "DEFAULT_PYENV_PYTHON_VERSION",
    "DEFAULT_PYPROJECT_PYTHON_DEPENDENCY",
    "PINNED_VERSIONS",
    "ROOT_MANIFEST",
    "WORKSPACE_FILE",
    "WorkspaceLayout",
]


ROOT_MANIFEST = "pyproject.toml"
WORKSPACE_FILE = "workspace.json"

DEFAULT_PYPROJECT_PYTHON_DEPENDENCY = ">=3.9,<3.11"
DEFAULT_PYENV_PYTHON_VERSION = "3.9.5"
DEFAULT_DESCRIPTION = "Automatically generated by monoscaffold."
DEFAULT_DEPENDENCY_GROUP = "main"

PINNED_VERSIONS: Mapping[str, str] = {
    "flake8": "6.0.0",
    "autopep8": "2.0.2",
    "pytest": "7.3.1",
    "pytest-sugar": "0.9.7",
    "pytest-cov": "4.1.0",
    "pytest-html": "3.2.0",
}


@dataclass(slots=True, frozen=True)
class WorkspaceLayout:
    """Directories under which new applications and libraries are created.

    Attributes
    ----------
    apps_dir:
        Workspace-relative directory holding projects of kind ``application``.
    libs_dir:
        Workspace-relative directory holding projects of kind ``library``.
    """

    apps_dir: str = "apps"
    libs_dir: str = "libs"

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "WorkspaceLayout":
        """Build a layout from the ``layout`` object of ``workspace.json``."""

        data = data or {}
        apps_dir = str(data.get("appsDir") or "apps").strip("/")
        libs_dir = str(data.get("libsDir") or "libs").strip("/")
        return cls(apps_dir=apps_dir, libs_dir=libs_dir)

    @classmethod
    def from_tree(cls, tree: "Tree") -> "WorkspaceLayout":
        """Read the layout from the workspace file, falling back to defaults."""

        if not tree.exists(WORKSPACE_FILE):
            return cls()
        try:
            data = json.loads(tree.read(WORKSPACE_FILE))
        except json.JSONDecodeError as exc:
            raise OptionsValidationError(f"{WORKSPACE_FILE}: invalid JSON ({exc})") from exc
        if not isinstance(data, dict):
            raise OptionsValidationError(f"{WORKSPACE_FILE}: expected a JSON object")
        return cls.from_mapping(data.get("layout"))

    def root_for(self, project_type: str) -> str:
        """Return the layout directory used for ``project_type``."""

        return self.apps_dir if project_type == "application" else self.libs_dir
