"""Tree-to-row flattening honoring expansion and search state."""

from __future__ import annotations

from collections.abc import Set

from .matching import normalize_query, subtree_match_map
from .types import FlatRow, Node


def flatten(root: Node | None, expanded: Set[str], query: str = "") -> list[FlatRow]:
    """Return visible rows in depth-first pre-order.

    Children of ``root`` are emitted at depth 0. Without a query a directory's
    children appear only when its path is in ``expanded``. With a query every
    directory is traversed, and a node is kept only when its label matches or
    a descendant matches. Sibling order is taken from the tree as-is.
    """
    if root is None:
        return []

    folded = normalize_query(query)
    included = subtree_match_map(root, folded) if folded else None
    rows: list[FlatRow] = []
    stack: list[tuple[Node, int, str]] = [(child, 0, root.path) for child in reversed(root.children)]
    while stack:
        node, depth, parent_path = stack.pop()
        if included is not None and not included.get(node.path, False):
            continue
        rows.append(FlatRow(node, depth, parent_path))
        if node.is_dir and (included is not None or node.path in expanded):
            stack.extend((child, depth + 1, node.path) for child in reversed(node.children))
    return rows


def find_row_index(rows: list[FlatRow], path: str) -> int | None:
    """Return the index of the row for ``path`` or ``None`` when not visible."""
    for idx, row in enumerate(rows):
        if row.node.path == path:
            return idx
    return None
