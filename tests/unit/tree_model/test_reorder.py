"""Tests for in-place sibling reordering and order restoration."""

from __future__ import annotations

import unittest

from kbtree.tree_model import child_names, find_node, node_from_payload, reorder_siblings, restore_child_order


def siblings_tree():
    return node_from_payload(
        {
            "name": "src",
            "path": "",
            "type": "directory",
            "children": [
                {"name": "A", "path": "A", "type": "file"},
                {"name": "B", "path": "B", "type": "file"},
                {"name": "C", "path": "C", "type": "file"},
                {"name": "D", "path": "D", "type": "file"},
                {
                    "name": "sub",
                    "path": "sub",
                    "type": "directory",
                    "children": [
                        {"name": "x", "path": "sub/x", "type": "file"},
                        {"name": "y", "path": "sub/y", "type": "file"},
                    ],
                },
            ],
        }
    )


class ReorderSiblingsTests(unittest.TestCase):
    def test_moving_earlier_node_after_later_target_has_no_off_by_one(self) -> None:
        root = siblings_tree()

        change = reorder_siblings(root, "", "A", "C", insert_after=True)

        self.assertEqual(child_names(root), ("B", "C", "A", "D", "sub"))
        assert change is not None
        self.assertEqual(change.order, ("B", "C", "A", "D", "sub"))
        self.assertEqual(change.previous_order, ("A", "B", "C", "D", "sub"))
        self.assertEqual(change.parent_path, "")

    def test_moving_later_node_before_earlier_target(self) -> None:
        root = siblings_tree()

        reorder_siblings(root, "", "D", "B", insert_after=False)

        self.assertEqual(child_names(root), ("A", "D", "B", "C", "sub"))

    def test_insert_before_target_that_follows_dragged(self) -> None:
        root = siblings_tree()

        reorder_siblings(root, "", "A", "C", insert_after=False)

        self.assertEqual(child_names(root), ("B", "A", "C", "D", "sub"))

    def test_nested_parent_reorder(self) -> None:
        root = siblings_tree()

        reorder_siblings(root, "sub", "sub/y", "sub/x", insert_after=False)

        sub = find_node(root, "sub")
        assert sub is not None
        self.assertEqual(child_names(sub), ("y", "x"))

    def test_cross_parent_reorder_leaves_both_parents_unchanged(self) -> None:
        root = siblings_tree()

        change = reorder_siblings(root, "", "A", "sub/x", insert_after=True)

        self.assertIsNone(change)
        self.assertEqual(child_names(root), ("A", "B", "C", "D", "sub"))
        sub = find_node(root, "sub")
        assert sub is not None
        self.assertEqual(child_names(sub), ("x", "y"))

    def test_dropping_on_itself_or_missing_parent_is_ignored(self) -> None:
        root = siblings_tree()

        self.assertIsNone(reorder_siblings(root, "", "A", "A", insert_after=True))
        self.assertIsNone(reorder_siblings(root, "missing", "A", "B", insert_after=True))
        self.assertEqual(child_names(root), ("A", "B", "C", "D", "sub"))


class RestoreChildOrderTests(unittest.TestCase):
    def test_restore_puts_children_back_in_named_order(self) -> None:
        root = siblings_tree()
        change = reorder_siblings(root, "", "A", "D", insert_after=True)
        assert change is not None

        self.assertTrue(restore_child_order(root, "", change.previous_order))

        self.assertEqual(child_names(root), ("A", "B", "C", "D", "sub"))

    def test_unnamed_children_keep_relative_order_at_end(self) -> None:
        root = siblings_tree()

        restore_child_order(root, "", ("C", "A"))

        self.assertEqual(child_names(root), ("C", "A", "B", "D", "sub"))

    def test_restore_missing_parent_reports_false(self) -> None:
        self.assertFalse(restore_child_order(siblings_tree(), "nope", ("A",)))


if __name__ == "__main__":
    unittest.main()
