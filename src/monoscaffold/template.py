"""Lightweight templating used to materialise new projects."""

from __future__ import annotations

import posixpath
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Mapping, MutableMapping

import tomlkit

from .tree import Tree

__all__ = [
    "TEMPLATES_DIR",
    "TemplateRenderer",
    "TemplateRenderingError",
    "render_path",
]


TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"
TEMPLATE_SUFFIX = ".template"

_PLACEHOLDER_PATTERN = re.compile(r"{{\s*(?P<expression>[^{}]+?)\s*}}")
_PATH_TOKEN_PATTERN = re.compile(r"__(?P<key>[a-z][a-z0-9_]*?)__")


class TemplateRenderingError(RuntimeError):
    """Raised when the renderer cannot evaluate a placeholder."""


def _apply_filter(value: Any, filter_name: str, filters: Mapping[str, Callable[[Any], Any]]) -> Any:
    try:
        filter_func = filters[filter_name]
    except KeyError as exc:
        raise TemplateRenderingError(f"unknown filter '{filter_name}'") from exc

    return filter_func(value)


def render_path(relative: str, context: Mapping[str, Any]) -> str:
    """Substitute ``__key__`` tokens in a template path and drop the template suffix.

    ``__dot__`` renders as ``.`` so dotfiles can ship as package data. Tokens
    without a context value, such as ``__init__``, are kept verbatim.
    """

    def substitute(match: re.Match[str]) -> str:
        key = match.group("key")
        if key == "dot":
            return "."
        if key not in context:
            return match.group(0)
        return str(context[key])

    rendered = _PATH_TOKEN_PATTERN.sub(substitute, relative)
    if rendered.endswith(TEMPLATE_SUFFIX):
        rendered = rendered[: -len(TEMPLATE_SUFFIX)]
    return rendered


@dataclass(slots=True)
class TemplateRenderer:
    """Render templates with ``{{ placeholder|filters }}`` expressions."""

    filters: MutableMapping[str, Callable[[Any], Any]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.filters:
            self.filters.update(
                {
                    "strip": lambda value: str(value).strip(),
                    "toml": lambda value: tomlkit.string(str(value)).as_string(),
                }
            )

    def render_string(
        self,
        template: str,
        context: Mapping[str, Any],
        *,
        missing: str = "keep",
    ) -> str:
        """Render ``template`` using ``context``.

        Parameters
        ----------
        template:
            The template string to evaluate.
        context:
            Mapping providing values for placeholders.
        missing:
            Controls what happens when a placeholder cannot be resolved. The
            supported policies are ``"keep"`` (return the placeholder unchanged)
            and ``"error"`` (raise :class:`TemplateRenderingError`).
        """

        if missing not in {"keep", "error"}:
            raise ValueError("missing must be 'keep' or 'error'")

        def substitute(match: re.Match[str]) -> str:
            expression = match.group("expression")
            parts = [part.strip() for part in expression.split("|") if part.strip()]
            if not parts:
                return match.group(0)

            key, *filters = parts
            if key not in context:
                if missing == "keep":
                    return match.group(0)
                raise TemplateRenderingError(f"missing value for '{key}'")
            value = context[key]

            for filter_name in filters:
                value = _apply_filter(value, filter_name, self.filters)

            return str(value)

        return _PLACEHOLDER_PATTERN.sub(substitute, template)

    def render_directory(
        self,
        tree: Tree,
        template_dir: str | Path,
        target_root: str,
        context: Mapping[str, Any],
        *,
        missing: str = "error",
    ) -> list[str]:
        """Render every file of ``template_dir`` into ``tree`` below ``target_root``.

        Returns the workspace relative paths that were written.
        """

        template_dir = Path(template_dir)
        if not template_dir.is_dir():
            raise FileNotFoundError(template_dir)

        written: list[str] = []
        for source in sorted(template_dir.rglob("*")):
            if not source.is_file() or "__pycache__" in source.parts:
                continue
            relative = render_path(source.relative_to(template_dir).as_posix(), context)
            destination = posixpath.join(target_root, relative)
            text = source.read_text(encoding="utf-8")
            tree.write(destination, self.render_string(text, context, missing=missing))
            written.append(destination)
        return written
