"""Tree-model types, flattening, search matching, and row formatting.

Defines ``Node``/``FlatRow`` and the owned ``TreeViewState`` with its pure
transitions. Also projects rows into renderer-agnostic view-models.
"""

from __future__ import annotations

from .flatten import find_row_index, flatten
from .matching import directories_with_matches, label_matches, normalize_query, subtree_match_map
from .rendering import RowViewModel, build_row_view_models, file_icon_info, format_row
from .reorder import OrderChange, child_names, reorder_siblings, restore_child_order
from .state import (
    STATUS_FAILED,
    STATUS_IDLE,
    STATUS_LOADING,
    STATUS_READY,
    TreeViewState,
    begin_loading,
    commit_query,
    find_node,
    toggle_directory,
    with_load_error,
    with_tree,
)
from .types import DIRECTORY, FILE, IMAGE, FlatRow, Node, node_from_payload

__all__ = [
    "Node",
    "FlatRow",
    "DIRECTORY",
    "FILE",
    "IMAGE",
    "node_from_payload",
    "flatten",
    "find_row_index",
    "normalize_query",
    "label_matches",
    "subtree_match_map",
    "directories_with_matches",
    "TreeViewState",
    "STATUS_IDLE",
    "STATUS_LOADING",
    "STATUS_READY",
    "STATUS_FAILED",
    "begin_loading",
    "with_tree",
    "with_load_error",
    "toggle_directory",
    "commit_query",
    "find_node",
    "OrderChange",
    "child_names",
    "reorder_siblings",
    "restore_child_order",
    "RowViewModel",
    "build_row_view_models",
    "file_icon_info",
    "format_row",
]
