"""Tests for the drag-reorder state machine."""

from __future__ import annotations

import unittest

from kbtree.tree_model import child_names, find_node, node_from_payload
from kbtree.tree_pane import DragReorder, DropIndicator, RowBounds

ROW = RowBounds(top=100, height=28)
ABOVE_MID = 105
BELOW_MID = 120


def siblings_tree():
    return node_from_payload(
        {
            "name": "src",
            "path": "",
            "type": "directory",
            "children": [
                {"name": "A", "path": "A"},
                {"name": "B", "path": "B"},
                {"name": "C", "path": "C"},
                {"name": "D", "path": "D"},
                {
                    "name": "sub",
                    "path": "sub",
                    "type": "directory",
                    "children": [{"name": "x", "path": "sub/x"}, {"name": "y", "path": "sub/y"}],
                },
            ],
        }
    )


class DragReorderTests(unittest.TestCase):
    def test_drag_a_after_c(self) -> None:
        root = siblings_tree()
        drag = DragReorder()

        self.assertTrue(drag.start("A", "", search_active=False))
        change = drag.drop(root, "C", "", BELOW_MID, ROW)

        self.assertEqual(child_names(root), ("B", "C", "A", "D", "sub"))
        assert change is not None
        self.assertEqual(change.order, ("B", "C", "A", "D", "sub"))

    def test_pointer_above_midpoint_inserts_before(self) -> None:
        root = siblings_tree()
        drag = DragReorder()
        drag.start("D", "", search_active=False)

        drag.drop(root, "B", "", ABOVE_MID, ROW)

        self.assertEqual(child_names(root), ("A", "D", "B", "C", "sub"))

    def test_hover_moves_indicator_without_mutating_tree(self) -> None:
        root = siblings_tree()
        drag = DragReorder()
        drag.start("A", "", search_active=False)

        self.assertEqual(drag.over("C", "", ABOVE_MID, ROW), DropIndicator("C", insert_after=False))
        self.assertEqual(drag.over("C", "", BELOW_MID, ROW), DropIndicator("C", insert_after=True))
        self.assertEqual(child_names(root), ("A", "B", "C", "D", "sub"))

        drag.leave("B")
        self.assertEqual(drag.indicator, DropIndicator("C", insert_after=True))
        drag.leave("C")
        self.assertIsNone(drag.indicator)

    def test_cross_parent_targets_are_ignored(self) -> None:
        root = siblings_tree()
        drag = DragReorder()
        drag.start("A", "", search_active=False)

        self.assertIsNone(drag.over("sub/x", "sub", BELOW_MID, ROW))
        self.assertIsNone(drag.drop(root, "sub/x", "sub", BELOW_MID, ROW))

        self.assertEqual(child_names(root), ("A", "B", "C", "D", "sub"))
        sub = find_node(root, "sub")
        assert sub is not None
        self.assertEqual(child_names(sub), ("x", "y"))

    def test_self_target_is_ignored(self) -> None:
        drag = DragReorder()
        drag.start("A", "", search_active=False)

        self.assertIsNone(drag.over("A", "", BELOW_MID, ROW))

    def test_drag_refused_while_search_is_active(self) -> None:
        root = siblings_tree()
        drag = DragReorder()

        self.assertFalse(drag.start("A", "", search_active=True))
        self.assertFalse(drag.active)
        self.assertIsNone(drag.drop(root, "C", "", BELOW_MID, ROW))

    def test_end_destroys_session(self) -> None:
        drag = DragReorder()
        drag.start("A", "", search_active=False)
        drag.over("B", "", BELOW_MID, ROW)

        drag.end()

        self.assertFalse(drag.active)
        self.assertIsNone(drag.indicator)
        self.assertIsNone(drag.over("B", "", BELOW_MID, ROW))

    def test_drop_without_tree_is_ignored(self) -> None:
        drag = DragReorder()
        drag.start("A", "", search_active=False)

        self.assertIsNone(drag.drop(None, "B", "", BELOW_MID, ROW))


if __name__ == "__main__":
    unittest.main()
