"""Poetry manifest updates for the workspace root and the shared dev project."""

from __future__ import annotations

import logging
import posixpath
from typing import Any, Mapping, MutableMapping

import tomlkit
from tomlkit.exceptions import TOMLKitError
from tomlkit.toml_document import TOMLDocument

from .config import ROOT_MANIFEST
from .dependencies import reconcile
from .errors import ManifestParseError
from .registry import ProjectRegistry
from .schema import ProjectDescriptor
from .tree import Tree

__all__ = [
    "apply_dependencies",
    "dependency_table",
    "path_dependency",
    "read_manifest",
]


LOGGER = logging.getLogger(__name__)


def read_manifest(tree: Tree, path: str) -> TOMLDocument:
    """Parse the manifest at ``path`` keeping its formatting for round trips."""

    if not tree.exists(path):
        raise ManifestParseError(path, "manifest does not exist")
    try:
        return tomlkit.parse(tree.read(path))
    except TOMLKitError as exc:
        raise ManifestParseError(path, f"invalid TOML: {exc}") from exc


def _poetry_table(document: TOMLDocument, path: str) -> MutableMapping[str, Any]:
    tool = document.get("tool")
    poetry = tool.get("poetry") if isinstance(tool, Mapping) else None
    if not isinstance(poetry, MutableMapping):
        raise ManifestParseError(path, "missing [tool.poetry] table")
    return poetry


def _child_table(
    parent: MutableMapping[str, Any], key: str, path: str, *, super_table: bool = False
) -> MutableMapping[str, Any]:
    if key not in parent:
        parent[key] = tomlkit.table(is_super_table=super_table)
    child = parent[key]
    if not isinstance(child, MutableMapping):
        raise ManifestParseError(path, f"'{key}' must be a table")
    return child


def _existing_dependencies(poetry: Mapping[str, Any], group: str) -> Mapping[str, Any]:
    if group == "main":
        dependencies = poetry.get("dependencies", {})
    else:
        dependencies = poetry.get("group", {}).get(group, {}).get("dependencies", {})
    return dependencies if isinstance(dependencies, Mapping) else {}


def dependency_table(poetry: MutableMapping[str, Any], group: str, path: str) -> MutableMapping[str, Any]:
    """Return the dependency table of ``group``, creating missing containers.

    Existing groups and their other keys are left as they are.
    """

    if group == "main":
        return _child_table(poetry, "dependencies", path)
    groups = _child_table(poetry, "group", path, super_table=True)
    group_table = _child_table(groups, group, path, super_table=True)
    return _child_table(group_table, "dependencies", path)


def path_dependency(descriptor: ProjectDescriptor) -> Any:
    """Editable path dependency pointing at the new project."""

    entry = tomlkit.inline_table()
    entry.update({"path": descriptor.project_root, "develop": True})
    return entry


def _merge_dev_dependencies(
    poetry: MutableMapping[str, Any], group: str, descriptor: ProjectDescriptor, path: str
) -> bool:
    existing = _existing_dependencies(poetry, group)
    result = reconcile(existing, descriptor)
    if not result.changed:
        return False
    additions = result.additions(existing)
    table = dependency_table(poetry, group, path)
    for name, version in additions.items():
        table[name] = version
    LOGGER.debug("%s: adding %s to %s dependencies", path, ", ".join(additions), group)
    return True


def apply_dependencies(tree: Tree, registry: ProjectRegistry, descriptor: ProjectDescriptor) -> list[str]:
    """Register ``descriptor`` with the root manifest and add its tooling.

    Tooling goes to the shared dev dependency project when one is named,
    otherwise to the root manifest's ``dev`` group. The shared project is
    rewritten only when it changes; the root manifest is always rewritten.
    Both documents are parsed before anything is written. Returns the paths
    written.
    """

    pending: list[tuple[str, TOMLDocument]] = []

    if descriptor.dev_dependencies_project:
        dev_project = registry.lookup(descriptor.dev_dependencies_project)
        dev_manifest_path = posixpath.join(dev_project.root, "pyproject.toml")
        dev_document = read_manifest(tree, dev_manifest_path)
        dev_poetry = _poetry_table(dev_document, dev_manifest_path)
        if _merge_dev_dependencies(dev_poetry, "main", descriptor, dev_manifest_path):
            pending.append((dev_manifest_path, dev_document))

    if not descriptor.individual_package:
        root_document = read_manifest(tree, ROOT_MANIFEST)
        root_poetry = _poetry_table(root_document, ROOT_MANIFEST)

        group = descriptor.root_pyproject_dependency_group
        table = dependency_table(root_poetry, group, ROOT_MANIFEST)
        table[descriptor.package_name] = path_dependency(descriptor)

        if not descriptor.dev_dependencies_project:
            _merge_dev_dependencies(root_poetry, "dev", descriptor, ROOT_MANIFEST)

        pending.append((ROOT_MANIFEST, root_document))

    written: list[str] = []
    for path, document in pending:
        LOGGER.debug("rewriting %s", path)
        tree.write(path, tomlkit.dumps(document))
        written.append(path)
    return written
