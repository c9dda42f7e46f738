"""Lexical scanners for C/C++ sources: include directives and documentation comments.

Scanning is purely textual. There is no preprocessor: an include line inside
a ``#if 0`` block or a comment that happens to start a line is still reported,
and includes produced by macro expansion are never seen.
"""

from __future__ import annotations

import re
from typing import Iterator, List

from .models import IncludeDirective

INCLUDE_RE = re.compile(r'^[ \t]*#[ \t]*include[ \t]+(?:"([^"\n]+)"|<([^>\n]+)>)', re.MULTILINE)
BLOCK_COMMENT_RE = re.compile(r"/\*(.*?)\*/", re.DOTALL)
LEADING_STARS_RE = re.compile(r"^\*+")
LEADING_SLASHES_RE = re.compile(r"^//+")


# ===================================================================
# Include directives
# ===================================================================

def scan_directives(content: str) -> Iterator[IncludeDirective]:
    """Yield every include directive in *content*, in file order."""
    line, offset = 1, 0
    for match in INCLUDE_RE.finditer(content):
        line += content.count("\n", offset, match.start())
        offset = match.start()
        quoted_target, angle_target = match.group(1), match.group(2)
        if quoted_target is not None:
            yield IncludeDirective(target=quoted_target, quoted=True, line=line)
        else:
            yield IncludeDirective(target=angle_target, quoted=False, line=line)


def extract_includes(content: str) -> List[str]:
    """Literal include targets of *content* without their delimiters."""
    return [d.target for d in scan_directives(content)]


# ===================================================================
# Comments
# ===================================================================

def extract_comments(content: str) -> List[str]:
    """Documentation fragments from block comments and runs of line comments.

    Block comments come first (in file order) followed by the line-comment
    runs; identical fragments are reported once.
    """
    fragments: List[str] = []

    for match in BLOCK_COMMENT_RE.finditer(content):
        cleaned_lines = []
        for raw in match.group(1).split("\n"):
            text = LEADING_STARS_RE.sub("", raw.strip()).strip()
            if text:
                cleaned_lines.append(text)
        if cleaned_lines:
            fragments.append("\n".join(cleaned_lines))

    block: List[str] = []
    for raw in content.split("\n"):
        stripped = raw.strip()
        if stripped.startswith("//"):
            block.append(LEADING_SLASHES_RE.sub("", stripped).strip())
            continue
        if block:
            fragments.append("\n".join(block))
            block = []
    if block:
        fragments.append("\n".join(block))

    return list(dict.fromkeys(f for f in fragments if f.strip()))


def extract_documentation(content: str) -> str:
    """All comment fragments of *content* joined by blank lines."""
    return "\n\n".join(extract_comments(content))
