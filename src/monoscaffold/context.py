"""Explicit workspace context handed to every generator component."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .config import ROOT_MANIFEST, WorkspaceLayout
from .poetry import PoetryRunner
from .registry import ProjectRegistry
from .tree import StagedTree

__all__ = ["WorkspaceContext"]


@dataclass(slots=True)
class WorkspaceContext:
    """Shared workspace state: staged tree, registry, layout and lock tool."""

    tree: StagedTree
    registry: ProjectRegistry
    layout: WorkspaceLayout
    poetry: PoetryRunner

    @classmethod
    def open(cls, root: Path | str, *, poetry: PoetryRunner | None = None) -> "WorkspaceContext":
        """Create a context for the workspace rooted at ``root``."""

        tree = StagedTree(root)
        return cls(
            tree=tree,
            registry=ProjectRegistry(tree),
            layout=WorkspaceLayout.from_tree(tree),
            poetry=poetry or PoetryRunner(cwd=tree.root),
        )

    def has_root_manifest(self) -> bool:
        return self.tree.exists(ROOT_MANIFEST)
