"""Map literal include targets to files in a known file set.

Resolution tries three strategies in order and stops at the first hit:

1. **Relative path** - the target joined onto the declaring directory and
   normalized, the target taken verbatim as a repository path, or any path
   ending with the target.
2. **Filename** - any file sharing the target's final segment.  Several
   candidates are tie-broken by the configured policy.
3. **Case-insensitive suffix** - last resort for mismatched casing.

An include that matches nothing (``<vector>``, third-party headers outside the
file set) resolves to ``None``; that is a normal outcome, never an error.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional

from .errors import ConfigError
from .models import IncludeDirective

logger = logging.getLogger(__name__)

TIE_BREAK_FIRST = "first"
TIE_BREAK_NEAREST = "nearest"
TIE_BREAKS = (TIE_BREAK_FIRST, TIE_BREAK_NEAREST)


def normalize_path(path: str) -> str:
    """Collapse ``.`` and ``..`` segments textually.

    A ``..`` with nothing left to pop is kept, so ``../x.h`` at the top level
    stays ``../x.h`` and simply fails to match.
    """
    parts: List[str] = []
    for token in path.split("/"):
        if token in ("", "."):
            continue
        if token == "..":
            if parts and parts[-1] != "..":
                parts.pop()
            else:
                parts.append(token)
            continue
        parts.append(token)
    return "/".join(parts)


def join_path(directory: str, target: str) -> str:
    return normalize_path(f"{directory}/{target}" if directory else target)


def dirname(path: str) -> str:
    return path.rsplit("/", 1)[0] if "/" in path else ""


def basename(path: str) -> str:
    return path.rsplit("/", 1)[-1]


def path_distance(from_dir: str, to_dir: str) -> int:
    """Hops between two directories through their closest common ancestor."""
    a = [p for p in from_dir.split("/") if p]
    b = [p for p in to_dir.split("/") if p]
    common = 0
    for left, right in zip(a, b):
        if left != right:
            break
        common += 1
    return (len(a) - common) + (len(b) - common)


class PathResolver:
    """Resolve include targets against one snapshot of file paths.

    The resolver indexes *paths* once; build a new one whenever the file set
    changes (for instance after a simulated move).
    """

    def __init__(self, paths: Iterable[str], tie_break: str = TIE_BREAK_FIRST) -> None:
        if tie_break not in TIE_BREAKS:
            raise ConfigError(
                f"Unknown tie-break policy '{tie_break}'. Expected one of: {', '.join(TIE_BREAKS)}"
            )
        self.tie_break = tie_break
        self._paths: List[str] = list(dict.fromkeys(paths))
        self._path_set = set(self._paths)
        self._order = {p: idx for idx, p in enumerate(self._paths)}
        self._by_name: Dict[str, List[str]] = {}
        for path in self._paths:
            self._by_name.setdefault(basename(path), []).append(path)
        self._lowered = [(p.lower(), p) for p in self._paths]

    def __contains__(self, path: str) -> bool:
        return path in self._path_set

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def resolve(self, target: str, directory: str = "") -> Optional[str]:
        """Best-matching path for *target* declared in *directory*, or ``None``."""
        if not target:
            return None
        return (
            self.match_relative(target, directory)
            or self.match_filename(target, directory)
            or self.match_case_insensitive(target)
        )

    def resolve_anchored(self, target: str, directory: str = "") -> Optional[str]:
        """Strict resolution: the directory-relative path or the verbatim path only."""
        if not target:
            return None
        candidate = join_path(directory, target)
        if candidate in self._path_set:
            return candidate
        if target in self._path_set:
            return target
        return None

    def resolve_directive(self, directive: IncludeDirective, directory: str = "") -> Optional[str]:
        """Quoted includes must resolve anchored; angle includes use the full chain."""
        if directive.quoted:
            return self.resolve_anchored(directive.target, directory)
        return self.resolve(directive.target, directory)

    # ------------------------------------------------------------------
    # Strategies
    # ------------------------------------------------------------------

    def match_relative(self, target: str, directory: str = "") -> Optional[str]:
        anchored = self.resolve_anchored(target, directory)
        if anchored is not None:
            return anchored
        for path in self._paths:
            if path.endswith(target):
                return path
        return None

    def match_filename(self, target: str, directory: str = "") -> Optional[str]:
        candidates = self._by_name.get(basename(target))
        if not candidates:
            return None
        if len(candidates) > 1:
            logger.debug("Ambiguous include '%s': %d candidates", target, len(candidates))
            if self.tie_break == TIE_BREAK_NEAREST:
                return min(
                    candidates,
                    key=lambda p: (path_distance(directory, dirname(p)), self._order[p]),
                )
        return candidates[0]

    def match_case_insensitive(self, target: str) -> Optional[str]:
        lowered = target.lower()
        for path_lower, path in self._lowered:
            if path_lower.endswith(lowered):
                return path
        return None
