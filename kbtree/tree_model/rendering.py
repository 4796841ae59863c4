"""Row view-models and ANSI formatting for tree rows.

``build_row_view_models`` is a pure projection from rows plus view state;
``format_row`` is one renderer for those view-models and can be swapped out
without touching flattening or windowing.
"""

from __future__ import annotations

from collections.abc import Set
from dataclasses import dataclass

from ..ui_theme import DEFAULT_THEME, UITheme
from .types import FlatRow, Node

INDENT = "  "

_FILE_ICONS: dict[str, tuple[str, str]] = {
    "md": ("MD", "icon-markdown"),
    "markdown": ("MD", "icon-markdown"),
    "yml": ("YML", "icon-config"),
    "yaml": ("YML", "icon-config"),
    "json": ("JSON", "icon-config"),
    "txt": ("TXT", "icon-text"),
    "js": ("JS", "icon-script"),
    "ts": ("TS", "icon-script"),
    "css": ("CSS", "icon-style"),
    "html": ("HTML", "icon-markup"),
}


def file_icon_info(node: Node, expanded: bool = False) -> tuple[str, str]:
    """Return ``(label, css_class)`` for a node's icon badge."""
    if node.is_dir:
        return ("OPEN" if expanded else "DIR", "icon-folder")
    ext = node.name.rsplit(".", 1)[-1].lower() if "." in node.name else ""
    return _FILE_ICONS.get(ext, ("FILE", "icon-file"))


@dataclass(frozen=True)
class RowViewModel:
    """Everything a renderer needs to draw one row."""

    index: int
    path: str
    label: str
    depth: int
    parent_path: str
    is_dir: bool
    expanded: bool
    icon_label: str
    icon_class: str
    selected: bool = False
    modified: bool = False
    draggable: bool = True
    top: int | None = None
    drop_position: str | None = None
    dragging: bool = False


def build_row_view_models(
    rows: list[FlatRow],
    start: int,
    end: int,
    *,
    expanded: Set[str],
    row_height: int | None = None,
    selected_path: str | None = None,
    modified_paths: Set[str] = frozenset(),
    draggable: bool = True,
    dragging_path: str | None = None,
    drop_indicator: tuple[str, bool] | None = None,
) -> list[RowViewModel]:
    """Project rows ``[start, end)`` into view-models.

    ``row_height`` set means windowed mode: each model carries its absolute
    ``top`` offset. ``None`` means natural flow with no positioning.
    """
    out: list[RowViewModel] = []
    for index in range(max(0, start), min(end, len(rows))):
        row = rows[index]
        node = row.node
        is_expanded = node.is_dir and node.path in expanded
        icon_label, icon_class = file_icon_info(node, is_expanded)
        drop_position: str | None = None
        if drop_indicator is not None and drop_indicator[0] == node.path:
            drop_position = "after" if drop_indicator[1] else "before"
        out.append(
            RowViewModel(
                index=index,
                path=node.path,
                label=node.label,
                depth=row.depth,
                parent_path=row.parent_path,
                is_dir=node.is_dir,
                expanded=is_expanded,
                icon_label=icon_label,
                icon_class=icon_class,
                selected=not node.is_dir and node.path == selected_path,
                modified=not node.is_dir and node.path in modified_paths,
                draggable=draggable,
                top=index * row_height if row_height is not None else None,
                drop_position=drop_position,
                dragging=node.path == dragging_path,
            )
        )
    return out


def highlight_substring(text: str, query: str, theme: UITheme) -> str:
    """Highlight first case-insensitive substring match in ``text``."""
    query = query.strip()
    if not query or not theme.tree_match:
        return text
    idx = text.casefold().find(query.casefold())
    if idx < 0:
        return text
    end = idx + len(query)
    return text[:idx] + theme.tree_match + text[idx:end] + theme.reset + text[end:]


def format_row(model: RowViewModel, search_query: str = "", theme: UITheme | None = None) -> str:
    """Render one view-model as ANSI-styled display text."""
    active_theme = theme or DEFAULT_THEME
    reset = active_theme.reset
    indent = INDENT * model.depth
    name = highlight_substring(model.label, search_query, active_theme)
    badge = f" {active_theme.tree_badge}[{model.icon_label}]{reset}"

    if model.is_dir:
        marker = "▾ " if model.expanded else "▸ "
        text = f"{indent}{active_theme.tree_marker}{marker}{reset}{active_theme.tree_dir}{name}/{reset}{badge}"
    else:
        color = active_theme.tree_file_markdown if model.icon_label == "MD" else active_theme.tree_file_default
        modified = f"{active_theme.tree_modified} ●{reset}" if model.modified else ""
        text = f"{indent}  {color}{name}{reset}{badge}{modified}"

    if model.drop_position == "before":
        text = f"{active_theme.tree_drop_indicator}↑{reset}" + text
    elif model.drop_position == "after":
        text = f"{active_theme.tree_drop_indicator}↓{reset}" + text
    if model.selected and reset:
        # Keep reverse video active even when the text contains internal resets.
        text = active_theme.reverse + text.replace(reset, reset + active_theme.reverse) + reset
    return text
