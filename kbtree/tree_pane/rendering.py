"""Terminal renderer for tree-pane view-models.

Consumes ``RowViewModel`` lists and never touches tree or window state, so
any other renderer can take its place.
"""

from __future__ import annotations

from ..ansi import clip_ansi_line
from ..tree_model import STATUS_FAILED, STATUS_LOADING, RowViewModel, format_row
from ..ui_theme import DEFAULT_THEME, UITheme

LOADING_MESSAGE = "Loading..."
EMPTY_TREE_MESSAGE = "No documents"
NO_MATCHES_MESSAGE = "No matches"


def status_message(status: str, error: str | None, has_tree: bool, row_count: int, query: str) -> str | None:
    """Return the placeholder text to show instead of rows, if any.

    A failed load always wins; an empty tree and a query with zero results
    are told apart by whether a query is active.
    """
    if status == STATUS_FAILED:
        return f"Failed to load: {error or 'unknown error'}"
    if not has_tree:
        return LOADING_MESSAGE if status == STATUS_LOADING else None
    if row_count > 0:
        return None
    return NO_MATCHES_MESSAGE if query.strip() else EMPTY_TREE_MESSAGE


class TreePaneRenderer:
    """Render the tree pane into ANSI lines clipped to ``width`` columns."""

    def __init__(self, width: int, theme: UITheme | None = None) -> None:
        self.width = width
        self.theme = theme or DEFAULT_THEME

    def render_status(self, message: str, *, is_error: bool = False) -> list[str]:
        color = self.theme.tree_error if is_error else self.theme.tree_status
        return [clip_ansi_line(f"{color}{message}{self.theme.reset}", self.width)]

    def render_rows(self, models: list[RowViewModel], search_query: str = "") -> list[str]:
        return [clip_ansi_line(format_row(model, search_query, self.theme), self.width) for model in models]

    def render(
        self,
        models: list[RowViewModel],
        *,
        status: str,
        error: str | None,
        has_tree: bool,
        row_count: int,
        search_query: str = "",
    ) -> list[str]:
        message = status_message(status, error, has_tree, row_count, search_query)
        if message is not None:
            return self.render_status(message, is_error=status == STATUS_FAILED)
        return self.render_rows(models, search_query)
