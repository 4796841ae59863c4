"""In-place sibling reordering on the node tree."""

from __future__ import annotations

from dataclasses import dataclass

from .state import find_node
from .types import Node


@dataclass(frozen=True)
class OrderChange:
    """Child-name order of one parent before and after a reorder."""

    parent_path: str
    order: tuple[str, ...]
    previous_order: tuple[str, ...]


def child_names(parent: Node) -> tuple[str, ...]:
    return tuple(child.name for child in parent.children)


def reorder_siblings(
    root: Node,
    parent_path: str,
    dragged_path: str,
    target_path: str,
    insert_after: bool,
) -> OrderChange | None:
    """Move ``dragged_path`` next to ``target_path`` within one parent.

    The dragged node is removed first and the target index is looked up in
    the shortened list, so moving a node that preceded the target does not
    land one slot too far. Returns ``None`` and leaves the tree untouched when
    either node is not a child of ``parent_path``.
    """
    if dragged_path == target_path:
        return None
    parent = find_node(root, parent_path)
    if parent is None or not parent.is_dir:
        return None
    siblings = parent.children
    dragged_idx = next((i for i, child in enumerate(siblings) if child.path == dragged_path), None)
    if dragged_idx is None:
        return None
    if not any(child.path == target_path for child in siblings):
        return None

    previous = child_names(parent)
    dragged = siblings.pop(dragged_idx)
    target_idx = next(i for i, child in enumerate(siblings) if child.path == target_path)
    siblings.insert(target_idx + 1 if insert_after else target_idx, dragged)
    return OrderChange(parent_path=parent_path, order=child_names(parent), previous_order=previous)


def restore_child_order(root: Node, parent_path: str, order: tuple[str, ...]) -> bool:
    """Reorder ``parent_path``'s children to match ``order`` by name.

    Children missing from ``order`` keep their relative order after the
    named ones. Returns whether the parent was found.
    """
    parent = find_node(root, parent_path)
    if parent is None or not parent.is_dir:
        return False
    rank = {name: idx for idx, name in enumerate(order)}
    parent.children.sort(key=lambda child: rank.get(child.name, len(rank)))
    return True
