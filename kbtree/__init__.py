"""kbtree: the document tree of a knowledge-base editor.

The library lives in ``kbtree.tree_model`` (pure data and transitions) and
``kbtree.tree_pane`` (the interactive view). ``main`` runs the CLI.
"""

from __future__ import annotations


def main(argv=None):
    """Run the ``kbtree`` command; the CLI module is imported on first use."""
    from .cli import main as cli_main

    return cli_main(argv)

__all__ = ["main"]
