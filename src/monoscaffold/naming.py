"""String and path normalisation utilities used throughout the project."""

from __future__ import annotations

import posixpath
import re

__all__ = ["file_name", "normalize_module_name", "offset_from_root", "relative_path"]


_CAMEL_BOUNDARY = re.compile(r"([a-z\d])([A-Z])")
_SEPARATORS = re.compile(r"[\s_]+")
_INVALID_IDENTIFIER = re.compile(r"[^0-9a-zA-Z_]")
_MULTIPLE_UNDERSCORES = re.compile(r"_+")


def file_name(value: str) -> str:
    """Convert ``value`` into a kebab-case, filesystem friendly name.

    ``camelCase`` boundaries, whitespace and underscores become dashes. Path
    separators are kept so nested directories survive the conversion::

        >>> file_name("MyLib")
        'my-lib'
        >>> file_name("shared/DataAccess")
        'shared/data-access'
    """

    segments = []
    for segment in value.strip().strip("/").split("/"):
        segment = _CAMEL_BOUNDARY.sub(r"\1-\2", segment.strip())
        segment = _SEPARATORS.sub("-", segment).lower()
        if segment:
            segments.append(segment)
    return "/".join(segments)


def normalize_module_name(name: str) -> str:
    """Return a valid Python module identifier from a project identifier."""

    candidate = name.replace("-", "_")
    candidate = _INVALID_IDENTIFIER.sub("_", candidate)
    candidate = _MULTIPLE_UNDERSCORES.sub("_", candidate)
    candidate = candidate.strip("_")

    if not candidate:
        candidate = "project"

    if candidate[0].isdigit():
        candidate = f"_{candidate}"

    return candidate


def offset_from_root(project_root: str) -> str:
    """Return the ``../`` prefix leading from ``project_root`` back to the workspace root."""

    parts = [part for part in posixpath.normpath(project_root).split("/") if part not in ("", ".")]
    return "../" * len(parts) if parts else "./"


def relative_path(start: str, target: str) -> str:
    """Relative POSIX path from the workspace path ``start`` to ``target``."""

    return posixpath.relpath(posixpath.normpath(target), posixpath.normpath(start))
