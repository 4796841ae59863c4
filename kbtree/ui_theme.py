"""ANSI palettes for the terminal tree renderer."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by renderers."""

    name: str
    reverse: str
    reset: str
    tree_marker: str
    tree_dir: str
    tree_file_markdown: str
    tree_file_default: str
    tree_badge: str
    tree_match: str
    tree_modified: str
    tree_drop_indicator: str
    tree_status: str
    tree_error: str


DEFAULT_THEME = UITheme(
    name="default",
    reverse="\033[7m",
    reset="\033[0m",
    tree_marker="\033[38;5;44m",
    tree_dir="\033[1;34m",
    tree_file_markdown="\033[38;5;110m",
    tree_file_default="\033[38;5;252m",
    tree_badge="\033[2;38;5;109m",
    tree_match="\033[7;1m",
    tree_modified="\033[38;5;214m",
    tree_drop_indicator="\033[1;38;5;81m",
    tree_status="\033[2;38;5;250m",
    tree_error="\033[38;5;203m",
)

PLAIN_THEME = UITheme(
    name="plain",
    reverse="",
    reset="",
    tree_marker="",
    tree_dir="",
    tree_file_markdown="",
    tree_file_default="",
    tree_badge="",
    tree_match="",
    tree_modified="",
    tree_drop_indicator="",
    tree_status="",
    tree_error="",
)


def resolve_theme(*, no_color: bool = False) -> UITheme:
    """Return concrete theme for the requested color mode."""
    return PLAIN_THEME if no_color else DEFAULT_THEME


__all__ = [
    "UITheme",
    "DEFAULT_THEME",
    "PLAIN_THEME",
    "resolve_theme",
]
