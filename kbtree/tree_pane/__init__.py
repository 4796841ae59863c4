"""Tree-pane UI components."""

from .drag import DragReorder, DragSession, DropIndicator, RowBounds
from .pane import CONTEXT_ACTIONS, FileTreeView
from .rendering import TreePaneRenderer, status_message
from .search import TreeSearch
from .virtualizer import TreeVirtualizer, VirtualizerConfig, VisibleWindow, compute_window

__all__ = [
    "CONTEXT_ACTIONS",
    "DragReorder",
    "DragSession",
    "DropIndicator",
    "FileTreeView",
    "RowBounds",
    "TreePaneRenderer",
    "TreeSearch",
    "TreeVirtualizer",
    "VirtualizerConfig",
    "VisibleWindow",
    "compute_window",
    "status_message",
]
