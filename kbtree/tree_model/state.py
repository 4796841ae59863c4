"""Owned tree-view state and its pure transitions.

``TreeViewState`` is an immutable value. Every transition takes the current
state and returns a new one, so flattening and windowing can be tested in
isolation from any renderer.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from .matching import directories_with_matches, normalize_query
from .types import Node

STATUS_IDLE = "idle"
STATUS_LOADING = "loading"
STATUS_READY = "ready"
STATUS_FAILED = "failed"


@dataclass(frozen=True)
class TreeViewState:
    """Node tree, expansion set, committed query, and load status."""

    root: Node | None = None
    expanded: frozenset[str] = field(default_factory=frozenset)
    query: str = ""
    status: str = STATUS_IDLE
    error: str | None = None

    @property
    def search_active(self) -> bool:
        return bool(normalize_query(self.query))


def find_node(root: Node | None, path: str) -> Node | None:
    """Return the node with ``path`` under ``root`` (inclusive)."""
    if root is None:
        return None
    for node in root.iter_subtree():
        if node.path == path:
            return node
    return None


def begin_loading(state: TreeViewState) -> TreeViewState:
    """Mark a fetch in flight; the current tree stays visible until it resolves."""
    return replace(state, status=STATUS_LOADING, error=None)


def with_tree(state: TreeViewState, root: Node) -> TreeViewState:
    """Replace the tree wholesale after a successful fetch.

    Expansion entries survive the reload; entries that no longer name a
    directory are harmless since flattening only consults directories.
    """
    return replace(state, root=root, status=STATUS_READY, error=None)


def with_load_error(state: TreeViewState, message: str) -> TreeViewState:
    """Enter the terminal failed state; no stale tree is kept."""
    return replace(state, root=None, status=STATUS_FAILED, error=message)


def toggle_directory(state: TreeViewState, path: str) -> TreeViewState:
    """Flip ``path`` in the expansion set.

    Paths that do not name a directory in the current tree (stale rows after
    a reload, files) leave the state unchanged.
    """
    node = find_node(state.root, path)
    if node is None or not node.is_dir or node is state.root:
        return state
    if path in state.expanded:
        return replace(state, expanded=state.expanded - {path})
    return replace(state, expanded=state.expanded | {path})


def commit_query(state: TreeViewState, query: str) -> TreeViewState:
    """Commit a search query and auto-expand directories containing matches.

    Clearing the query keeps the expansion set as it is.
    """
    committed = query.strip()
    expanded = state.expanded
    if committed and state.root is not None:
        expanded = expanded | directories_with_matches(state.root, committed)
    return replace(state, query=committed, expanded=expanded)
