"""Search predicate shared by flattening and search auto-expansion.

Both callers must go through these helpers so the rows a query shows and the
directories it expands can never disagree.
"""

from __future__ import annotations

from .types import Node


def normalize_query(query: str) -> str:
    """Return the casefolded, whitespace-trimmed form used for matching."""
    return query.strip().casefold()


def label_matches(node: Node, folded_query: str) -> bool:
    """Return whether ``node``'s own label contains ``folded_query``."""
    return folded_query in node.label.casefold()


def subtree_match_map(root: Node, folded_query: str) -> dict[str, bool]:
    """Map every path under ``root`` to whether it is included by the query.

    A node is included when its label matches or, for a directory, when any
    descendant is included. Computed bottom-up in one O(n) pass over the
    reversed pre-order, so children are always settled before their parent.
    """
    included: dict[str, bool] = {}
    for node in reversed(list(root.iter_subtree())):
        hit = label_matches(node, folded_query)
        if not hit and node.is_dir:
            hit = any(included.get(child.path, False) for child in node.children)
        included[node.path] = hit
    return included


def directories_with_matches(root: Node, query: str) -> set[str]:
    """Return directory paths whose subtree, the directory included, matches.

    The root container itself is not part of the result; its children are
    always rendered at the top level.
    """
    folded = normalize_query(query)
    if not folded:
        return set()
    included = subtree_match_map(root, folded)
    return {
        node.path
        for node in root.iter_subtree()
        if node is not root and node.is_dir and included.get(node.path, False)
    }
