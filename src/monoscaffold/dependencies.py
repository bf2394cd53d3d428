"""Non-destructive reconciliation of development dependencies."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Mapping

from .config import PINNED_VERSIONS
from .schema import ProjectDescriptor

__all__ = ["ReconcileResult", "reconcile", "required_dev_dependencies"]


def _uses_pytest(descriptor: ProjectDescriptor) -> bool:
    return descriptor.unit_test_runner == "pytest"


_RULES: tuple[tuple[str, Callable[[ProjectDescriptor], bool]], ...] = (
    ("flake8", lambda d: d.linter == "flake8"),
    ("autopep8", lambda d: True),
    ("pytest", _uses_pytest),
    ("pytest-sugar", _uses_pytest),
    ("pytest-cov", lambda d: _uses_pytest(d) and d.code_coverage),
    ("pytest-html", lambda d: _uses_pytest(d) and d.code_coverage_html_report),
)


@dataclass(slots=True, frozen=True)
class ReconcileResult:
    """Outcome of :func:`reconcile`.

    ``dependencies`` is the full merged mapping; ``changed`` tells callers
    whether the manifest needs to be written at all.
    """

    changed: bool
    dependencies: dict[str, Any] = field(default_factory=dict)

    def additions(self, existing: Mapping[str, Any]) -> dict[str, Any]:
        """Return the entries of :attr:`dependencies` missing from ``existing``."""

        return {name: value for name, value in self.dependencies.items() if name not in existing}


def required_dev_dependencies(descriptor: ProjectDescriptor) -> dict[str, str]:
    """Return the pinned tools ``descriptor`` needs, in a stable order."""

    return {name: PINNED_VERSIONS[name] for name, applies in _RULES if applies(descriptor)}


def reconcile(existing: Mapping[str, Any], descriptor: ProjectDescriptor) -> ReconcileResult:
    """Add the tooling ``descriptor`` requires to ``existing`` without touching present entries."""

    original = dict(existing)
    merged = dict(original)
    for name, version in required_dev_dependencies(descriptor).items():
        if name not in merged:
            merged[name] = version
    return ReconcileResult(changed=merged != original, dependencies=merged)
