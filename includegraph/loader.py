"""Load C/C++ sources from a local checkout into SourceFile values."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable, List, Optional

from . import config
from .models import SourceFile

logger = logging.getLogger(__name__)


def iter_source_paths(
    root: Path,
    extensions: Iterable[str] = config.CPP_EXTENSIONS,
    scope: str = "",
) -> List[Path]:
    """Matching files under *root* (optionally under the *scope* subfolder), sorted."""
    exts = tuple(e.lower() for e in extensions)
    base = root / scope if scope else root
    found: List[Path] = []
    for dirpath, dirnames, filenames in os.walk(base):
        dirnames[:] = sorted(d for d in dirnames if d not in config.SKIP_DIRS)
        for filename in sorted(filenames):
            if filename.lower().endswith(exts):
                found.append(Path(dirpath) / filename)
    return found


def load_directory(
    root: Path,
    extensions: Iterable[str] = config.CPP_EXTENSIONS,
    max_files: Optional[int] = config.DEFAULT_MAX_FILES,
    scope: str = "",
) -> List[SourceFile]:
    """Read every C/C++ source under *root*.

    Paths are made repository-relative with forward slashes.  At most
    *max_files* files are loaded; unreadable files are skipped with a warning.
    """
    root = root.resolve()
    paths = iter_source_paths(root, extensions, scope)
    if max_files is not None and len(paths) > max_files:
        logger.warning(
            "Truncating analysis to the first %d of %d files", max_files, len(paths),
        )
        paths = paths[:max_files]

    files: List[SourceFile] = []
    for file_path in paths:
        rel_path = file_path.relative_to(root).as_posix()
        try:
            raw = file_path.read_bytes()
        except OSError as exc:
            logger.warning("Failed to read %s: %s", rel_path, exc)
            continue
        content = raw.decode("utf-8", errors="replace")
        files.append(SourceFile.from_content(rel_path, content, size=len(raw)))

    logger.debug("Loaded %d source files from %s", len(files), root)
    return files
