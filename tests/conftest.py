"""Pytest configuration and fixtures for IncludeGraph tests."""

import shutil
import tempfile
from pathlib import Path
from typing import Callable, Dict, Generator, List

import pytest

from includegraph.models import SourceFile


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path: Path, monkeypatch):
    """Point the config file at a temporary location for every test."""
    base_dir = tmp_path / "includegraph_home"
    monkeypatch.setattr("includegraph.config.BASE_DIR", base_dir)
    monkeypatch.setattr("includegraph.config.CONFIG_FILE", base_dir / "config.toml")


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    tmp = Path(tempfile.mkdtemp())
    yield tmp
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture
def sample_project_path() -> Path:
    """Get path to sample C++ project."""
    return Path(__file__).parent / "fixtures" / "sample_project"


@pytest.fixture
def make_files() -> Callable[[Dict[str, str]], List[SourceFile]]:
    """Build SourceFiles from a ``{path: content}`` mapping, preserving order."""

    def _make(sources: Dict[str, str]) -> List[SourceFile]:
        return [SourceFile.from_content(path, content) for path, content in sources.items()]

    return _make


@pytest.fixture
def layered_files(make_files) -> List[SourceFile]:
    """A small layered code base: app -> core -> util, plus a system include."""
    return make_files({
        "app/main.cpp": '#include "../core/engine.h"\n#include <vector>\n',
        "core/engine.h": '#include "../util/log.h"\n#include "../util/strings.h"\n',
        "core/engine.cpp": '#include "engine.h"\n',
        "util/log.h": "// logging\n",
        "util/strings.h": '#include "log.h"\n',
        "tools/cli.cpp": '#include "../core/engine.h"\n',
    })


@pytest.fixture
def write_project(temp_dir: Path) -> Callable[[Dict[str, str]], Path]:
    """Write a ``{relative path: content}`` mapping under a temp directory."""

    def _write(sources: Dict[str, str]) -> Path:
        for rel_path, content in sources.items():
            target = temp_dir / rel_path
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        return temp_dir

    return _write
