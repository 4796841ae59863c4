"""Tree pane façade used by the host application.

``FileTreeView`` owns the ``TreeViewState`` value and the derived row list and
window, and exposes the pane's operations. Collaborators (tab opening, file
mutation UI, storage) are injected at construction; nothing is looked up
globally.

Every structural change (load, toggle, committed search, reorder) rebuilds
the row list wholesale and then the window; scrolling only touches the
window. Storage calls run on a ``StorageWorker`` and their results are
applied when the host loop calls ``process_pending``.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable

from ..config import PersistFailurePolicy, TreeViewSettings
from ..storage import SaveOrderJob, StorageResult, StorageWorker, TreeStorageClient
from ..tree_model import (
    FlatRow,
    Node,
    OrderChange,
    RowViewModel,
    TreeViewState,
    begin_loading,
    build_row_view_models,
    child_names,
    commit_query,
    find_node,
    find_row_index,
    flatten,
    restore_child_order,
    toggle_directory,
    with_load_error,
    with_tree,
)
from ..ui_theme import UITheme
from .drag import DragReorder, RowBounds
from .rendering import TreePaneRenderer
from .search import TreeSearch
from .virtualizer import TreeVirtualizer, VirtualizerConfig, VisibleWindow

logger = logging.getLogger(__name__)

CONTEXT_ACTIONS = frozenset({"rename", "delete", "new_file", "new_folder"})


class FileTreeView:
    """Searchable, virtualized, reorderable document tree."""

    def __init__(
        self,
        *,
        client: TreeStorageClient | None = None,
        on_open_file: Callable[[str], None],
        on_context_action: Callable[[Node, str], None],
        on_toggle_directory: Callable[[str, bool], None] | None = None,
        on_reorder: Callable[[OrderChange], None] | None = None,
        settings: TreeViewSettings | None = None,
        worker: StorageWorker | None = None,
        monotonic: Callable[[], float] = time.monotonic,
    ) -> None:
        """Create a pane bound to its collaborators.

        Args:
            client: Storage client; only used to build the default worker.
            on_open_file: Called with a file path when a file row is activated.
            on_context_action: Called with ``(node, action)`` for rename,
                delete, and create actions.
            on_toggle_directory: Optional notification after a directory
                opens or closes.
            on_reorder: Optional notification after a successful local reorder.
            settings: Tuning and persistence policy; defaults when omitted.
            worker: Storage worker; built from ``client`` when omitted.
            monotonic: Clock for search debouncing.
        """
        if worker is None:
            if client is None:
                raise ValueError("FileTreeView needs either a client or a worker")
            worker = StorageWorker(client)
        self.settings = settings or TreeViewSettings()
        self.state = TreeViewState()
        self.rows: list[FlatRow] = []
        self.virtualizer = TreeVirtualizer(
            VirtualizerConfig(
                row_height=self.settings.row_height,
                buffer_rows=self.settings.buffer_rows,
                enable_threshold=self.settings.enable_threshold,
            )
        )
        self.search = TreeSearch(self.settings.search_debounce_seconds, monotonic=monotonic)
        self.drag = DragReorder()
        self.worker = worker
        self.selected_path: str | None = None
        self.modified_paths: frozenset[str] = frozenset()
        self.dirty = True
        self._on_open_file = on_open_file
        self._on_context_action = on_context_action
        self._on_toggle_directory = on_toggle_directory
        self._on_reorder = on_reorder
        self._latest_load_id: int | None = None
        # Per parent path: the child order the backend last confirmed, and
        # the request id of the newest save still in flight.
        self._acked_orders: dict[str, tuple[str, ...]] = {}
        self._pending_saves: dict[str, int] = {}
        self._issued_saves: set[int] = set()

    # -- structure -------------------------------------------------------

    @property
    def window(self) -> VisibleWindow:
        return self.virtualizer.window

    def _rebuild(self) -> None:
        self.rows = flatten(self.state.root, self.state.expanded, self.state.query)
        self.virtualizer.set_row_count(len(self.rows))
        self.dirty = True

    def _row_for(self, path: str) -> tuple[int, FlatRow] | None:
        idx = find_row_index(self.rows, path)
        if idx is None:
            return None
        return idx, self.rows[idx]

    # -- loading ---------------------------------------------------------

    def refresh(self) -> int:
        """Schedule a tree fetch; only the newest fetch is applied."""
        self.state = begin_loading(self.state)
        self._latest_load_id = self.worker.schedule_load()
        self.dirty = True
        return self._latest_load_id

    def set_tree(self, root: Node) -> None:
        """Install a tree directly, bypassing the storage worker."""
        self._install_tree(root)

    def _install_tree(self, root: Node) -> None:
        self.state = with_tree(self.state, root)
        # A fresh tree is the backend's order; earlier saves no longer apply to it.
        self._acked_orders.clear()
        self._pending_saves.clear()
        self._issued_saves.clear()
        self._rebuild()

    def _apply_load_result(self, result: StorageResult) -> None:
        if result.job.request_id != self._latest_load_id:
            logger.debug("Dropping superseded tree load %d", result.job.request_id)
            return
        self._latest_load_id = None
        if result.ok and result.tree is not None:
            self._install_tree(result.tree)
            return
        logger.error("Failed to load tree: %s", result.error)
        self.state = with_load_error(self.state, str(result.error))
        self.drag.end()
        self._rebuild()

    def _apply_save_result(self, job: SaveOrderJob, result: StorageResult) -> None:
        parent_path = job.parent_path
        if result.ok:
            logger.debug("Saved order for %r", parent_path)
        else:
            logger.warning("Failed to save order for %r: %s", parent_path, result.error)
        if job.request_id not in self._issued_saves:
            # Issued against a tree that has since been replaced.
            return
        self._issued_saves.discard(job.request_id)
        newest = self._pending_saves.get(parent_path) == job.request_id
        if newest:
            del self._pending_saves[parent_path]
        if result.ok:
            self._acked_orders[parent_path] = job.order
            return
        if self.settings.persist_failure_policy is not PersistFailurePolicy.ROLLBACK:
            return
        if not newest:
            # A later save for this parent is still in flight; its outcome decides.
            logger.info("Not rolling back %r: a newer save is pending", parent_path)
            return
        acked = self._acked_orders.get(parent_path)
        root = self.state.root
        parent = find_node(root, parent_path)
        if acked is None or root is None or parent is None or child_names(parent) != job.order:
            return
        restore_child_order(root, parent_path, acked)
        logger.info("Rolled back order for %r to the last saved order", parent_path)
        self._rebuild()

    def process_pending(self) -> bool:
        """Apply storage results, due search input, and a pending scroll frame.

        Returns whether the pane needs a redraw.
        """
        for result in self.worker.drain_results():
            if isinstance(result.job, SaveOrderJob):
                self._apply_save_result(result.job, result)
            else:
                self._apply_load_result(result)
        query = self.search.poll()
        if query is not None:
            self._commit_query(query)
        if self.virtualizer.run_frame() is not None:
            self.dirty = True
        return self.dirty

    # -- activation ------------------------------------------------------

    def toggle(self, path: str) -> bool:
        """Open or close a directory; unknown paths are ignored."""
        updated = toggle_directory(self.state, path)
        if updated is self.state:
            return False
        self.state = updated
        self._rebuild()
        if self._on_toggle_directory is not None:
            self._on_toggle_directory(path, path in self.state.expanded)
        return True

    def activate(self, path: str) -> None:
        """Handle a click: directories toggle, files open in a tab."""
        node = find_node(self.state.root, path)
        if node is None or node is self.state.root:
            return
        if node.is_dir:
            self.toggle(path)
            return
        self.select(path)
        self._on_open_file(path)

    def context_action(self, path: str, action: str) -> bool:
        """Forward a context-menu action for ``path`` to the host."""
        if action not in CONTEXT_ACTIONS:
            raise ValueError(f"unknown context action: {action!r}")
        node = find_node(self.state.root, path)
        if node is None:
            return False
        self._on_context_action(node, action)
        return True

    def select(self, path: str | None) -> None:
        if path != self.selected_path:
            self.selected_path = path
            self.dirty = True

    def set_modified_paths(self, paths: Iterable[str]) -> None:
        self.modified_paths = frozenset(paths)
        self.dirty = True

    # -- search ----------------------------------------------------------

    def on_search_input(self, text: str) -> None:
        self.search.on_input(text)

    def commit_search_now(self) -> None:
        query = self.search.flush()
        if query is not None:
            self._commit_query(query)

    def _commit_query(self, query: str) -> None:
        if query == self.state.query:
            return
        self.state = commit_query(self.state, query)
        if self.state.search_active:
            self.drag.end()
        self._rebuild()

    # -- scrolling -------------------------------------------------------

    def on_scroll(self, scroll_top: float, viewport_height: float) -> None:
        """Record a scroll event; applied on the next ``process_pending``."""
        self.virtualizer.on_scroll(scroll_top, viewport_height)

    def set_viewport(self, scroll_top: float, viewport_height: float) -> None:
        """Apply a scroll position or resize immediately."""
        if self.virtualizer.set_viewport(scroll_top, viewport_height) is not None:
            self.dirty = True

    def scroll_to_path(self, path: str) -> float | None:
        """Scroll so ``path``'s row is at the top; ``None`` if not visible."""
        idx = find_row_index(self.rows, path)
        if idx is None:
            return None
        scroll_top = float(self.virtualizer.scroll_top_for_index(idx))
        self.set_viewport(scroll_top, self.virtualizer.viewport_height)
        return scroll_top

    # -- drag and drop ---------------------------------------------------

    def _bounds_for(self, index: int) -> RowBounds:
        row_height = self.settings.row_height
        return RowBounds(top=index * row_height, height=row_height)

    def drag_start(self, path: str) -> bool:
        found = self._row_for(path)
        if found is None:
            return False
        _idx, row = found
        started = self.drag.start(path, row.parent_path, search_active=self.state.search_active)
        self.dirty = True
        return started

    def drag_over(self, target_path: str, pointer_y: float, bounds: RowBounds | None = None) -> bool:
        """Move the drop indicator; returns whether the target accepts a drop.

        ``bounds`` defaults to the row's slot in the full row list, in the
        same coordinates as ``scroll_top``.
        """
        found = self._row_for(target_path)
        if found is None:
            return False
        idx, row = found
        indicator = self.drag.over(target_path, row.parent_path, pointer_y, bounds or self._bounds_for(idx))
        if indicator is None:
            return False
        self.dirty = True
        return True

    def drag_leave(self, target_path: str) -> None:
        self.drag.leave(target_path)
        self.dirty = True

    def drop(self, target_path: str, pointer_y: float, bounds: RowBounds | None = None) -> OrderChange | None:
        """Reorder locally, then persist the new order with one request."""
        found = self._row_for(target_path)
        if found is None or self.state.search_active:
            return None
        idx, row = found
        change = self.drag.drop(
            self.state.root,
            target_path,
            row.parent_path,
            pointer_y,
            bounds or self._bounds_for(idx),
        )
        if change is None:
            return None
        self._rebuild()
        self._acked_orders.setdefault(change.parent_path, change.previous_order)
        request_id = self.worker.schedule_save(change.parent_path, change.order, change.previous_order)
        self._pending_saves[change.parent_path] = request_id
        self._issued_saves.add(request_id)
        if self._on_reorder is not None:
            self._on_reorder(change)
        return change

    def drag_end(self) -> None:
        self.drag.end()
        self.dirty = True

    # -- output ----------------------------------------------------------

    def view_models(self) -> list[RowViewModel]:
        """Project the current window into renderer view-models."""
        window = self.virtualizer.window
        session = self.drag.session
        indicator = self.drag.indicator
        return build_row_view_models(
            self.rows,
            window.start,
            window.end,
            expanded=self.state.expanded,
            row_height=self.settings.row_height if window.windowed else None,
            selected_path=self.selected_path,
            modified_paths=self.modified_paths,
            draggable=not self.state.search_active,
            dragging_path=session.dragged_path if session is not None else None,
            drop_indicator=(indicator.path, indicator.insert_after) if indicator is not None else None,
        )

    def render_lines(self, width: int, theme: UITheme | None = None) -> list[str]:
        """Render the pane as ANSI lines and clear the dirty flag."""
        renderer = TreePaneRenderer(width, theme)
        lines = renderer.render(
            self.view_models(),
            status=self.state.status,
            error=self.state.error,
            has_tree=self.state.root is not None,
            row_count=len(self.rows),
            search_query=self.state.query,
        )
        self.dirty = False
        return lines

    def stats(self) -> dict[str, object]:
        return self.virtualizer.stats()
