"""Command-line front door for kbtree.

Fetches a knowledge-base tree (from the editor backend or a JSON file),
applies expansion, search, and scroll options, and prints the rendered rows
through the same pane code paths the interactive view uses.
"""

from __future__ import annotations

import argparse
import json
import logging
import shutil
import sys
import time
from dataclasses import replace
from pathlib import Path

from .config import load_settings, parse_failure_policy, save_settings
from .storage import HttpTreeStorageClient, TreeStorageError, unwrap_tree_payload
from .tree_model import STATUS_LOADING, node_from_payload
from .tree_pane import FileTreeView
from .ui_theme import resolve_theme

logger = logging.getLogger(__name__)

LOAD_POLL_SECONDS = 0.01


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def _nonnegative_float(value: str) -> float:
    """argparse type for non-negative offsets."""
    try:
        parsed = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}") from exc
    if parsed < 0:
        raise argparse.ArgumentTypeError("value must be >= 0")
    return parsed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Print a knowledge-base document tree.")
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--base-url", default=None, help="Editor backend URL (default: from config).")
    source.add_argument("--file", type=Path, default=None, help="Read the tree JSON from a file instead.")
    parser.add_argument("--search", default="", help="Filter rows by case-insensitive substring.")
    parser.add_argument("--expand", action="append", default=[], metavar="PATH", help="Expand a directory (repeatable).")
    parser.add_argument("--expand-all", action="store_true", help="Expand every directory.")
    parser.add_argument("--scroll-top", type=_nonnegative_float, default=0.0, help="Scroll offset in row units.")
    parser.add_argument(
        "--viewport-height",
        type=_nonnegative_float,
        default=None,
        help="Viewport height in row units (default: terminal height).",
    )
    parser.add_argument("--max-cols", type=_positive_int, default=None, help="Clip rows to this width.")
    parser.add_argument("--on-save-failure", choices=("keep", "rollback"), default=None)
    parser.add_argument("--no-color", action="store_true", help="Disable color output.")
    parser.add_argument("--stats", action="store_true", help="Print window statistics to stderr.")
    parser.add_argument(
        "--save-settings",
        action="store_true",
        help="Store --base-url and --on-save-failure as the new defaults.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    return parser


def _wait_for_load(view: FileTreeView) -> None:
    while True:
        view.process_pending()
        if view.state.status != STATUS_LOADING:
            return
        time.sleep(LOAD_POLL_SECONDS)


def _load_file_tree(view: FileTreeView, path: Path) -> None:
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
        view.set_tree(node_from_payload(unwrap_tree_payload(payload)))
    except (OSError, ValueError, TreeStorageError) as exc:
        raise SystemExit(f"Cannot read tree from {path}: {exc}") from exc


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments, load the tree, and print the visible rows."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    settings = load_settings()
    if args.base_url:
        settings = replace(settings, base_url=args.base_url.rstrip("/"))
    if args.on_save_failure:
        settings = replace(settings, persist_failure_policy=parse_failure_policy(args.on_save_failure))
    if args.save_settings:
        save_settings(settings)

    client = HttpTreeStorageClient(settings.base_url, timeout=settings.request_timeout_seconds)
    try:
        view = FileTreeView(
            client=client,
            on_open_file=lambda path: logger.info("open %s", path),
            on_context_action=lambda node, action: logger.info("%s %s", action, node.path),
            settings=settings,
        )
        if args.file is not None:
            _load_file_tree(view, args.file)
        else:
            view.refresh()
            _wait_for_load(view)

        if args.expand_all and view.state.root is not None:
            for node in view.state.root.iter_subtree():
                if node.is_dir and node.path not in view.state.expanded:
                    view.toggle(node.path)
        for path in args.expand:
            if path not in view.state.expanded:
                view.toggle(path)
        if args.search:
            view.on_search_input(args.search)
            view.commit_search_now()

        term = shutil.get_terminal_size((80, 24))
        row_height = settings.row_height
        viewport_rows = args.viewport_height if args.viewport_height is not None else float(term.lines)
        view.set_viewport(args.scroll_top * row_height, viewport_rows * row_height)

        max_cols = args.max_cols if args.max_cols is not None else max(1, term.columns)
        lines = view.render_lines(max_cols, resolve_theme(no_color=args.no_color))
    finally:
        client.close()

    sys.stdout.write("".join(line + "\n" for line in lines))
    if args.stats:
        sys.stderr.write(json.dumps(view.stats()) + "\n")
    if view.state.error is not None:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
