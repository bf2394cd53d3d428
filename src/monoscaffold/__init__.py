"""Generate poetry projects inside a monorepo and keep the root manifest in sync.

The package normalises sparse project options into a complete descriptor,
renders the project templates, registers the project with the workspace and
merges its dependencies into the shared root ``pyproject.toml`` without
disturbing existing entries.
"""

from __future__ import annotations

from .context import WorkspaceContext
from .dependencies import ReconcileResult, reconcile
from .errors import (
    ExternalToolError,
    ManifestParseError,
    OptionsValidationError,
    ProjectNotFoundError,
    ScaffoldError,
)
from .generator import GenerationResult, generate_project
from .manifest import apply_dependencies
from .normalize import normalize_options
from .schema import ProjectConfiguration, ProjectDescriptor, ProjectOptions, TargetDescriptor
from .targets import build_targets

__all__ = [
    "ExternalToolError",
    "GenerationResult",
    "ManifestParseError",
    "OptionsValidationError",
    "ProjectConfiguration",
    "ProjectDescriptor",
    "ProjectNotFoundError",
    "ProjectOptions",
    "ReconcileResult",
    "ScaffoldError",
    "TargetDescriptor",
    "WorkspaceContext",
    "apply_dependencies",
    "build_targets",
    "generate_project",
    "normalize_options",
    "reconcile",
]

__version__ = "0.1.0"
