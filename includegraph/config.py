"""Configuration paths and defaults for IncludeGraph."""

from __future__ import annotations

import os
from pathlib import Path

BASE_DIR = Path(os.environ.get("INCLUDEGRAPH_HOME", str(Path.home() / ".includegraph"))).expanduser()
CONFIG_FILE = BASE_DIR / "config.toml"

CPP_EXTENSIONS = (".cpp", ".h", ".hpp", ".cc", ".cxx", ".hxx", ".c", ".hh", ".inl")

SKIP_DIRS = {
    ".git", ".svn", ".hg", "build", "cmake-build-debug", "cmake-build-release",
    "node_modules", "__pycache__", ".venv", "venv", "dist", ".includegraph",
}

DEFAULT_MAX_FILES = 3000
DEFAULT_DEPTH = 1
DEFAULT_DIRECTION = "all"
DEFAULT_TIE_BREAK = "first"
DEFAULT_CHURN_COMMITS = 10


def ensure_base_dirs() -> None:
    """Create the base directory for local settings if needed."""
    BASE_DIR.mkdir(parents=True, exist_ok=True)
