"""Poetry project generator tying normalisation, templates and manifests together."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import partial
from pathlib import Path
from typing import Any, Callable, Mapping

import tomlkit

from .context import WorkspaceContext
from .dependencies import required_dev_dependencies
from .manifest import apply_dependencies
from .naming import offset_from_root
from .normalize import normalize_options
from .poetry import refresh_lock
from .schema import ProjectConfiguration, ProjectDescriptor, ProjectOptions
from .targets import build_targets
from .template import TEMPLATES_DIR, TemplateRenderer
from .tree import StagedTree, Tree

__all__ = ["GenerationResult", "add_files", "generate_project", "template_context"]


LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class GenerationResult:
    """Staged outcome of a generation run.

    ``tree`` holds every file change in memory. ``deferred_action`` refreshes
    the root lock file and must only run once :meth:`commit` has flushed the
    tree to disk.
    """

    descriptor: ProjectDescriptor
    tree: StagedTree
    deferred_action: Callable[[], None]

    @property
    def files(self) -> list[str]:
        return self.tree.changes()

    def commit(self) -> Callable[[], None]:
        """Write the staged files and hand back the post-commit action."""

        written = self.tree.commit()
        LOGGER.info("Generated %s (%d files written)", self.descriptor.project_name, len(written))
        return self.deferred_action


def _dev_group(entries: Mapping[str, Any]) -> str:
    lines = [
        f"  {tomlkit.key(name).as_string()} = {tomlkit.item(value).as_string()}" for name, value in entries.items()
    ]
    return "\n  [tool.poetry.group.dev.dependencies]\n" + "\n".join(lines) + "\n"


def _dev_dependencies_section(descriptor: ProjectDescriptor) -> str:
    if descriptor.dev_dependencies_project:
        entry = tomlkit.inline_table()
        entry.update({"path": descriptor.dev_dependencies_project_path, "develop": True})
        return _dev_group({descriptor.dev_dependencies_project: entry})
    if descriptor.individual_package:
        return _dev_group(required_dev_dependencies(descriptor))
    return ""


def template_context(descriptor: ProjectDescriptor) -> dict[str, Any]:
    """Values exposed to project templates; unset values render as empty strings."""

    context = {key: "" if value is None else value for key, value in descriptor.model_dump().items()}
    context.update(
        offset_from_root=offset_from_root(descriptor.project_root),
        source_root=descriptor.source_root,
        dev_dependencies_section=_dev_dependencies_section(descriptor),
    )
    return context


def add_files(tree: Tree, descriptor: ProjectDescriptor, renderer: TemplateRenderer | None = None) -> list[str]:
    """Render the project templates into ``tree`` under the project root.

    A caller supplied template directory replaces the bundled templates.
    """

    renderer = renderer or TemplateRenderer()
    context = template_context(descriptor)

    if descriptor.template_dir:
        return renderer.render_directory(
            tree, Path(descriptor.template_dir), descriptor.project_root, context, missing="keep"
        )

    template_sets = ["base"]
    if descriptor.unit_test_runner == "pytest":
        template_sets.append("pytest")
    if descriptor.linter == "flake8":
        template_sets.append("flake8")

    written: list[str] = []
    for name in template_sets:
        written.extend(renderer.render_directory(tree, TEMPLATES_DIR / name, descriptor.project_root, context))
    return written


def generate_project(context: WorkspaceContext, options: ProjectOptions) -> GenerationResult:
    """Stage a new poetry project in ``context`` and return it uncommitted."""

    context.poetry.check()

    descriptor = normalize_options(options, context)
    LOGGER.debug("normalized %s to %s", options.name, descriptor.project_root)

    context.registry.register(
        descriptor.project_name,
        ProjectConfiguration(
            root=descriptor.project_root,
            project_type=descriptor.project_type,
            source_root=descriptor.source_root,
            targets=build_targets(descriptor),
            tags=descriptor.parsed_tags,
        ),
    )
    add_files(context.tree, descriptor)
    apply_dependencies(context.tree, context.registry, descriptor)

    return GenerationResult(
        descriptor=descriptor,
        tree=context.tree,
        deferred_action=partial(refresh_lock, context.tree, descriptor, context.poetry),
    )
