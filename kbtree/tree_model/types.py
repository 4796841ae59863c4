"""Node and row datatypes shared by tree-model and tree-pane modules."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

DIRECTORY = "directory"
FILE = "file"
IMAGE = "image"
NODE_TYPES = frozenset({DIRECTORY, FILE, IMAGE})


@dataclass(eq=False)
class Node:
    """One file or directory in the knowledge-base tree.

    ``path`` is the identity key. ``children`` order is the render order and
    is only ever changed by explicit reorder operations.
    """

    name: str
    path: str
    type: str = FILE
    children: list[Node] = field(default_factory=list)
    display_name: str | None = None

    @property
    def is_dir(self) -> bool:
        return self.type == DIRECTORY

    @property
    def label(self) -> str:
        """Text shown for the row and used for search matching."""
        return self.display_name or self.name

    def iter_subtree(self) -> Iterator[Node]:
        """Yield this node and all descendants in pre-order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))


@dataclass(frozen=True)
class FlatRow:
    """One visible row produced by flattening."""

    node: Node
    depth: int
    parent_path: str


def _basename(path: str) -> str:
    return path.rstrip("/").rsplit("/", 1)[-1] if path else ""


def node_from_payload(payload: object, parent_path: str = "") -> Node:
    """Build a ``Node`` tree from decoded backend JSON.

    Never raises on malformed input: bad fields fall back to a childless
    node with a best-effort name. Non-object children are skipped, and a
    path seen earlier in the same tree (in pre-order) is dropped so the
    result stays a tree. Nesting depth is bounded only by memory.
    """
    if not isinstance(payload, dict):
        return Node(name="", path=parent_path, type=DIRECTORY)
    # The top-level node is always the container directory.
    root, raw_children = _make_node({**payload, "type": DIRECTORY}, parent_path)
    seen = {root.path}
    stack = [(root, raw) for raw in reversed(raw_children)]
    while stack:
        parent, raw = stack.pop()
        node, grandchildren = _make_node(raw, parent.path)
        if node.path in seen:
            continue
        seen.add(node.path)
        parent.children.append(node)
        stack.extend((node, child) for child in reversed(grandchildren))
    return root


def _make_node(payload: dict, parent_path: str) -> tuple[Node, list[dict]]:
    """Return the childless node for ``payload`` and its object children."""
    raw_path = payload.get("path")
    raw_name = payload.get("name")
    name = raw_name if isinstance(raw_name, str) else ""
    if isinstance(raw_path, str):
        path = raw_path
    elif name and parent_path:
        path = f"{parent_path}/{name}"
    else:
        path = name
    if not name:
        name = _basename(path)

    raw_type = payload.get("type")
    node_type = raw_type if raw_type in NODE_TYPES else FILE

    raw_display = payload.get("displayName")
    display_name = raw_display if isinstance(raw_display, str) and raw_display else None

    node = Node(name=name, path=path, type=node_type, display_name=display_name)
    raw_children = payload.get("children")
    if node_type != DIRECTORY or not isinstance(raw_children, list):
        return node, []
    return node, [child for child in raw_children if isinstance(child, dict)]
