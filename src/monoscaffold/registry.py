"""Workspace project registry persisted in ``workspace.json``."""

from __future__ import annotations

import json
from typing import Any, cast

from pydantic import ValidationError

from .config import WORKSPACE_FILE
from .errors import OptionsValidationError, ProjectNotFoundError
from .schema import ProjectConfiguration
from .tree import Tree

__all__ = ["ProjectRegistry"]


class ProjectRegistry:
    """Read and register projects through a :class:`~monoscaffold.tree.Tree`.

    The registry file keeps unrelated top level keys (such as ``layout``)
    untouched when a project is added.
    """

    def __init__(self, tree: Tree, path: str = WORKSPACE_FILE):
        self._tree = tree
        self._path = path

    def _load(self) -> dict[str, Any]:
        if not self._tree.exists(self._path):
            return {"version": 1, "projects": {}}
        try:
            data = json.loads(self._tree.read(self._path))
        except json.JSONDecodeError as exc:
            raise OptionsValidationError(f"{self._path}: invalid JSON ({exc})") from exc
        if not isinstance(data, dict):
            raise OptionsValidationError(f"{self._path}: expected a JSON object")
        data.setdefault("projects", {})
        return cast(dict[str, Any], data)

    def _parse(self, identifier: str, entry: Any) -> ProjectConfiguration:
        try:
            return ProjectConfiguration.model_validate(entry)
        except ValidationError as exc:
            raise OptionsValidationError(f"{self._path}: invalid entry for project '{identifier}': {exc}") from exc

    def projects(self) -> dict[str, ProjectConfiguration]:
        """Return every registered project keyed by identifier."""

        return {name: self._parse(name, entry) for name, entry in self._load()["projects"].items()}

    def lookup(self, identifier: str) -> ProjectConfiguration:
        """Return the configuration registered under ``identifier``."""

        entry = self._load()["projects"].get(identifier)
        if entry is None:
            raise ProjectNotFoundError(identifier)
        return self._parse(identifier, entry)

    def register(self, identifier: str, configuration: ProjectConfiguration) -> None:
        """Add ``identifier`` to the registry, refusing to replace an existing entry."""

        data = self._load()
        if identifier in data["projects"]:
            raise OptionsValidationError(f"project '{identifier}' already exists in {self._path}")
        data["projects"][identifier] = configuration.model_dump(mode="json", by_alias=True, exclude_none=True)
        self._tree.write(self._path, json.dumps(data, indent=2) + "\n")
