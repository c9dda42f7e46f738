"""Commit-history churn for heatmapping.

Churn is the number of recent commits that touched a file.  It only drives
display colouring and never affects the graph itself.
"""

from __future__ import annotations

import logging
import subprocess
from collections import Counter
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional

from . import config
from .errors import ChurnError
from .models import SourceFile

logger = logging.getLogger(__name__)

# Upper bounds (exclusive) of heat levels 0..3; anything larger is level 4.
HEAT_THRESHOLDS = (1, 5, 10, 20)
HEAT_COLORS = ("#27272a", "#3b82f6", "#eab308", "#f97316", "#ef4444")


def collect_churn(
    repo_root: Path,
    max_commits: int = config.DEFAULT_CHURN_COMMITS,
    timeout: float = 30,
) -> Dict[str, int]:
    """Count how many of the last *max_commits* commits touched each path."""
    cmd = [
        "git", "-C", str(repo_root), "log",
        f"-n{max_commits}", "--relative", "--name-only", "--pretty=format:",
    ]
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, timeout=timeout)
    except (OSError, subprocess.TimeoutExpired) as exc:
        raise ChurnError(f"Could not run git: {exc}") from exc
    if result.returncode != 0:
        raise ChurnError(result.stderr.strip() or "git log failed")

    counts: Counter = Counter()
    for line in result.stdout.splitlines():
        line = line.strip()
        if line:
            counts[line] += 1
    logger.debug("Churn collected for %d paths over %d commits", len(counts), max_commits)
    return dict(counts)


def apply_churn(files: Iterable[SourceFile], counts: Mapping[str, int]) -> List[SourceFile]:
    """New SourceFiles with churn set; untouched files get 0."""
    return [source.with_churn(counts.get(source.path, 0)) for source in files]


def heat_level(churn: Optional[int]) -> int:
    """Bucket churn into 0 (cold) .. 4 (hot)."""
    value = churn or 0
    for level, bound in enumerate(HEAT_THRESHOLDS):
        if value < bound:
            return level
    return len(HEAT_THRESHOLDS)


def heat_color(churn: Optional[int]) -> str:
    return HEAT_COLORS[heat_level(churn)]
