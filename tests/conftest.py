from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Sequence

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from monoscaffold.context import WorkspaceContext  # noqa: E402
from monoscaffold.errors import ExternalToolError  # noqa: E402
from monoscaffold.poetry import PoetryRunner  # noqa: E402


ROOT_PYPROJECT = """\
# Workspace level manifest
[tool.poetry]
name = "workspace"
version = "1.0.0"
description = "Shared workspace"
authors = []

[tool.poetry.dependencies]
python = ">=3.9,<3.11"

[tool.poetry.group.build]
optional = true

[tool.poetry.group.build.dependencies]
wheel = "0.40.0"

[build-system]
requires = ["poetry-core"]
build-backend = "poetry.core.masonry.api"
"""


class FakePoetryRunner(PoetryRunner):
    """Records poetry invocations instead of spawning processes."""

    def __init__(self, returncode: int = 0):
        super().__init__()
        self.calls: list[list[str]] = []
        self.checked = False
        self.returncode = returncode

    def check(self) -> None:
        self.checked = True

    def run(self, args: Sequence[str], *, log: bool = True) -> int:
        self.calls.append(list(args))
        if self.returncode != 0:
            raise ExternalToolError("poetry failed", argv=["poetry", *args], returncode=self.returncode)
        return 0


@pytest.fixture()
def poetry() -> FakePoetryRunner:
    return FakePoetryRunner()


@pytest.fixture()
def workspace(tmp_path: Path) -> Path:
    """Workspace with a root manifest and an empty registry."""

    (tmp_path / "pyproject.toml").write_text(ROOT_PYPROJECT, encoding="utf-8")
    (tmp_path / "workspace.json").write_text(
        json.dumps({"version": 1, "layout": {"appsDir": "apps", "libsDir": "libs"}, "projects": {}}),
        encoding="utf-8",
    )
    return tmp_path


@pytest.fixture()
def context(workspace: Path, poetry: FakePoetryRunner) -> WorkspaceContext:
    return WorkspaceContext.open(workspace, poetry=poetry)


@pytest.fixture()
def isolated_context(tmp_path: Path, poetry: FakePoetryRunner) -> WorkspaceContext:
    """Workspace without a root manifest."""

    return WorkspaceContext.open(tmp_path, poetry=poetry)


@pytest.fixture(autouse=True)
def no_real_poetry(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the CLI from looking up or spawning the real poetry executable."""

    monkeypatch.setattr("monoscaffold.poetry.shutil.which", lambda name: f"/usr/bin/{name}")


DEV_PYPROJECT = """\
[tool.poetry]
name = "dev-deps"
version = "1.0.0"
description = "Shared development dependencies"
authors = []

[tool.poetry.dependencies]
python = ">=3.9,<3.11"
pytest = "7.0.0"
"""


@pytest.fixture()
def dev_project(workspace: Path) -> str:
    """Register ``libs/dev-deps`` as the shared dev dependency project."""

    (workspace / "libs" / "dev-deps").mkdir(parents=True)
    (workspace / "libs" / "dev-deps" / "pyproject.toml").write_text(DEV_PYPROJECT, encoding="utf-8")
    registry_path = workspace / "workspace.json"
    data = json.loads(registry_path.read_text(encoding="utf-8"))
    data["projects"]["dev-deps"] = {"root": "libs/dev-deps", "projectType": "library"}
    registry_path.write_text(json.dumps(data), encoding="utf-8")
    return "dev-deps"
