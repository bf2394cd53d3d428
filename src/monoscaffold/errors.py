"""Custom exception types raised while generating projects."""

from __future__ import annotations

from typing import Sequence

__all__ = [
    "ExternalToolError",
    "ManifestParseError",
    "OptionsValidationError",
    "ProjectNotFoundError",
    "ScaffoldError",
]


class ScaffoldError(RuntimeError):
    """Base class for every error surfaced by the generator."""


class OptionsValidationError(ScaffoldError):
    """Raised when the generator options are malformed or cannot be resolved."""


class ProjectNotFoundError(OptionsValidationError):
    """Raised when a project is not present in the workspace registry."""

    def __init__(self, project: str) -> None:
        super().__init__(f"cannot find configuration for project '{project}'")
        self.project = project


class ManifestParseError(ScaffoldError):
    """Raised when an existing manifest document cannot be used."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class ExternalToolError(ScaffoldError):
    """Raised when an external executable is missing or exits abnormally."""

    def __init__(self, message: str, *, argv: Sequence[str] = (), returncode: int | None = None) -> None:
        super().__init__(message)
        self.argv = tuple(argv)
        self.returncode = returncode
