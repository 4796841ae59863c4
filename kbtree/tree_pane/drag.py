"""Drag-and-drop sibling reordering for the tree pane.

At most one ``DragSession`` is live. Hovering only moves a drop indicator;
the node tree changes on ``drop`` and nowhere else. Drags are refused while
a search query is active, since the filtered projection does not show every
sibling, and targets under a different parent are ignored.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from ..tree_model import Node, OrderChange, reorder_siblings


@dataclass(frozen=True)
class RowBounds:
    """Vertical extent of a target row in pointer coordinates."""

    top: float
    height: float

    @property
    def midpoint(self) -> float:
        return self.top + self.height / 2


@dataclass(frozen=True)
class DragSession:
    dragged_path: str
    dragged_parent_path: str
    target_path: str | None = None
    insert_after: bool = False


@dataclass(frozen=True)
class DropIndicator:
    path: str
    insert_after: bool


class DragReorder:
    """State machine for one drag gesture at a time."""

    def __init__(self) -> None:
        self.session: DragSession | None = None

    @property
    def active(self) -> bool:
        return self.session is not None

    @property
    def indicator(self) -> DropIndicator | None:
        session = self.session
        if session is None or session.target_path is None:
            return None
        return DropIndicator(session.target_path, session.insert_after)

    def start(self, path: str, parent_path: str, *, search_active: bool) -> bool:
        """Begin dragging ``path``; refused while a search is active."""
        if search_active:
            self.session = None
            return False
        self.session = DragSession(dragged_path=path, dragged_parent_path=parent_path)
        return True

    def _accepts(self, target_path: str, target_parent_path: str) -> bool:
        session = self.session
        return (
            session is not None
            and target_parent_path == session.dragged_parent_path
            and target_path != session.dragged_path
        )

    def over(
        self,
        target_path: str,
        target_parent_path: str,
        pointer_y: float,
        bounds: RowBounds,
    ) -> DropIndicator | None:
        """Update the drop indicator for a hovered row.

        Pointer above the row's midpoint means insert-before, below means
        insert-after. Ignored targets leave the indicator untouched.
        """
        if not self._accepts(target_path, target_parent_path):
            return None
        assert self.session is not None
        self.session = replace(
            self.session,
            target_path=target_path,
            insert_after=pointer_y > bounds.midpoint,
        )
        return self.indicator

    def leave(self, target_path: str) -> None:
        """Clear the indicator when the pointer leaves its row."""
        if self.session is not None and self.session.target_path == target_path:
            self.session = replace(self.session, target_path=None, insert_after=False)

    def drop(
        self,
        root: Node | None,
        target_path: str,
        target_parent_path: str,
        pointer_y: float,
        bounds: RowBounds,
    ) -> OrderChange | None:
        """Apply the reorder to ``root`` in place and return the new order.

        The session stays alive until ``end`` so a late drag-end event finds
        a consistent state; the indicator is cleared.
        """
        if root is None or not self._accepts(target_path, target_parent_path):
            return None
        session = self.session
        assert session is not None
        change = reorder_siblings(
            root,
            session.dragged_parent_path,
            session.dragged_path,
            target_path,
            insert_after=pointer_y > bounds.midpoint,
        )
        self.session = replace(session, target_path=None, insert_after=False)
        return change

    def end(self) -> None:
        """Destroy the session (drop finished, cancelled, or drag ended)."""
        self.session = None
