"""File tree abstraction staging every change in memory until it is committed."""

from __future__ import annotations

import logging
import posixpath
from abc import ABC, abstractmethod
from pathlib import Path

__all__ = ["StagedTree", "Tree", "normalize_tree_path"]


LOGGER = logging.getLogger(__name__)


def normalize_tree_path(path: str) -> str:
    """Return ``path`` as a normalised, workspace relative POSIX path."""

    normalized = posixpath.normpath(path.replace("\\", "/")).lstrip("/")
    if normalized == ".." or normalized.startswith("../"):
        raise ValueError(f"path '{path}' escapes the workspace root")
    return normalized


class Tree(ABC):
    """Workspace file tree addressed by workspace relative paths."""

    @abstractmethod
    def exists(self, path: str) -> bool:
        """Return ``True`` when ``path`` holds a file."""

    @abstractmethod
    def read(self, path: str) -> str:
        """Return the text content of ``path``."""

    @abstractmethod
    def write(self, path: str, content: str) -> None:
        """Replace the content of ``path`` with ``content``."""


class StagedTree(Tree):
    """Tree reading through to ``root`` while keeping writes in memory.

    Nothing touches the disk until :meth:`commit` is called, so a failed
    generation leaves the workspace exactly as it was.
    """

    def __init__(self, root: Path | str):
        self._root = Path(root)
        self._staged: dict[str, str] = {}

    @property
    def root(self) -> Path:
        """Directory backing this tree."""

        return self._root

    def exists(self, path: str) -> bool:
        key = normalize_tree_path(path)
        return key in self._staged or (self._root / key).is_file()

    def read(self, path: str) -> str:
        key = normalize_tree_path(path)
        if key in self._staged:
            return self._staged[key]
        target = self._root / key
        if not target.is_file():
            raise FileNotFoundError(target)
        return target.read_text(encoding="utf-8")

    def write(self, path: str, content: str) -> None:
        key = normalize_tree_path(path)
        LOGGER.debug("staging %s", key)
        self._staged[key] = content

    def changes(self) -> list[str]:
        """Return the staged paths in a stable order."""

        return sorted(self._staged)

    def commit(self) -> list[str]:
        """Flush every staged file to disk and return the written paths."""

        written: list[str] = []
        for key in self.changes():
            target = self._root / key
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(self._staged[key], encoding="utf-8")
            written.append(key)
        self._staged.clear()
        return written
