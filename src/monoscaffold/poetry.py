"""Poetry executable wrapper and the post-commit lock refresh."""

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path
from typing import TYPE_CHECKING, Sequence

from .config import ROOT_MANIFEST
from .errors import ExternalToolError

if TYPE_CHECKING:
    from .schema import ProjectDescriptor
    from .tree import Tree

__all__ = ["PoetryRunner", "refresh_lock"]


LOGGER = logging.getLogger(__name__)

_INSTALL_HINT = "Install it from https://python-poetry.org/docs/#installation"


class PoetryRunner:
    """Invoke the ``poetry`` executable from the workspace root."""

    def __init__(self, cwd: Path | str | None = None, executable: str = "poetry"):
        self.cwd = Path(cwd) if cwd is not None else None
        self.executable = executable

    def check(self) -> None:
        """Fail with :class:`ExternalToolError` when poetry is not installed."""

        if shutil.which(self.executable) is None:
            raise ExternalToolError(
                f"'{self.executable}' is not installed. {_INSTALL_HINT}",
                argv=[self.executable],
            )

    def run(self, args: Sequence[str], *, log: bool = True) -> int:
        """Run ``poetry`` with ``args``; non-zero exit raises :class:`ExternalToolError`."""

        argv = [self.executable, *args]
        if log:
            LOGGER.info("Running %s", " ".join(argv))
        try:
            result = subprocess.run(
                argv,
                cwd=self.cwd,
                text=True,
                check=False,
                capture_output=not log,
            )
        except FileNotFoundError as exc:
            raise ExternalToolError(
                f"'{self.executable}' is not installed. {_INSTALL_HINT}", argv=argv
            ) from exc
        except OSError as exc:
            raise ExternalToolError(f"failed to execute {argv[0]!r}: {exc}", argv=argv) from exc

        if result.returncode != 0:
            detail = (result.stderr or "").strip() if not log else ""
            message = f"{' '.join(argv)} exited with status {result.returncode}"
            if detail:
                message = f"{message}: {detail}"
            raise ExternalToolError(message, argv=argv, returncode=result.returncode)
        return result.returncode


def refresh_lock(tree: "Tree", descriptor: "ProjectDescriptor", runner: PoetryRunner) -> None:
    """Update the root lock file for the new package once files are on disk.

    Does nothing for workspaces without a root manifest. Failures propagate.
    """

    if not tree.exists(ROOT_MANIFEST):
        return

    LOGGER.info("Updating root poetry.lock...")
    runner.run(["update", descriptor.package_name], log=False)
    LOGGER.info("poetry.lock updated.")
