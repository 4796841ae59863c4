"""ANSI-aware measurement and clipping for tree rows.

Escape sequences occupy no columns. Wide CJK characters, common in
knowledge-base document names, occupy two.
"""

from __future__ import annotations

import re
import unicodedata

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
_TOKEN_RE = re.compile(rf"({ANSI_ESCAPE_RE.pattern})")


def cell_width(ch: str) -> int:
    """Terminal cells used by one printable character."""
    if unicodedata.combining(ch):
        return 0
    return 2 if unicodedata.east_asian_width(ch) in ("W", "F") else 1


def clip_ansi_line(text: str, max_cols: int) -> str:
    """Cut ``text`` to ``max_cols`` cells, keeping every escape sequence.

    Escapes after the cut are still emitted so a trailing reset is never
    lost. A wide character that would straddle the edge is dropped whole.
    """
    if max_cols <= 0:
        return ""
    pieces: list[str] = []
    used = 0
    clipped = False
    for token in _TOKEN_RE.split(text):
        if ANSI_ESCAPE_RE.fullmatch(token):
            pieces.append(token)
            continue
        if clipped:
            continue
        for ch in token:
            width = cell_width(ch)
            if used + width > max_cols:
                clipped = True
                break
            pieces.append(ch)
            used += width
    return "".join(pieces)
