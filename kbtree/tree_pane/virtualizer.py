"""Windowed rendering math for the tree pane.

Small trees render every row in natural flow. Past ``enable_threshold`` rows
only the rows around the viewport (plus ``buffer_rows`` on each side) are
materialized, absolutely positioned at ``index * row_height`` inside a spacer
of ``row_count * row_height``.

Scroll events are coalesced: ``on_scroll`` only records the newest position
and raises a frame request, and ``run_frame`` performs at most one recompute
per frame. Recomputing is a pure function of (row count, scroll position,
viewport height), so a stale frame simply recomputes current values.
"""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class VirtualizerConfig:
    row_height: int = 28
    buffer_rows: int = 10
    enable_threshold: int = 100


@dataclass(frozen=True)
class VisibleWindow:
    """Half-open row range ``[start, end)`` to materialize."""

    start: int
    end: int
    windowed: bool

    def __len__(self) -> int:
        return max(0, self.end - self.start)

    def __contains__(self, index: object) -> bool:
        return isinstance(index, int) and self.start <= index < self.end


def compute_window(
    row_count: int,
    scroll_top: float,
    viewport_height: float,
    config: VirtualizerConfig,
) -> VisibleWindow:
    """Return the rows to materialize for one scroll position."""
    row_count = max(0, row_count)
    if row_count <= config.enable_threshold:
        return VisibleWindow(0, row_count, windowed=False)

    scroll_top = max(0.0, scroll_top)
    viewport_height = max(0.0, viewport_height)
    row_height = max(1, config.row_height)
    start = max(0, math.floor(scroll_top / row_height) - config.buffer_rows)
    end = min(row_count, math.ceil((scroll_top + viewport_height) / row_height) + config.buffer_rows)
    # Scrolled past the end (e.g. rows removed): keep the window non-inverted.
    start = min(start, end)
    return VisibleWindow(start, end, windowed=True)


class TreeVirtualizer:
    """Track the current window and decide when the renderer must redraw."""

    def __init__(self, config: VirtualizerConfig | None = None) -> None:
        self.config = config or VirtualizerConfig()
        self.row_count = 0
        self.scroll_top = 0.0
        self.viewport_height = 0.0
        self.window = VisibleWindow(0, 0, windowed=False)
        self._frame_requested = False
        self._pending_scroll: tuple[float, float] | None = None

    @property
    def enabled(self) -> bool:
        return self.row_count > self.config.enable_threshold

    @property
    def frame_requested(self) -> bool:
        return self._frame_requested

    @property
    def spacer_height(self) -> int | None:
        """Total scroll height in windowed mode, ``None`` in natural flow."""
        if not self.enabled:
            return None
        return self.row_count * self.config.row_height

    def row_top(self, index: int) -> int | None:
        """Absolute offset for row ``index``; ``None`` when not windowed."""
        if not self.enabled:
            return None
        return index * self.config.row_height

    def scroll_top_for_index(self, index: int) -> int:
        """Scroll offset that puts row ``index`` at the top of the viewport."""
        return max(0, index) * self.config.row_height

    def _recompute(self, *, force: bool) -> VisibleWindow | None:
        window = compute_window(self.row_count, self.scroll_top, self.viewport_height, self.config)
        if not force and window == self.window:
            return None
        self.window = window
        return window

    def set_row_count(self, row_count: int) -> VisibleWindow:
        """Adopt a regenerated row list and always recompute the window.

        Absolute indices shift on structural change even when the scroll
        position did not, so the renderer must redraw unconditionally.
        """
        self.row_count = max(0, row_count)
        window = self._recompute(force=True)
        assert window is not None
        return window

    def set_viewport(self, scroll_top: float, viewport_height: float) -> VisibleWindow | None:
        """Apply a scroll position immediately.

        Returns the new window, or ``None`` when it is identical to the
        previous one and no redraw is needed.
        """
        self.scroll_top = max(0.0, float(scroll_top))
        self.viewport_height = max(0.0, float(viewport_height))
        return self._recompute(force=False)

    def on_scroll(self, scroll_top: float, viewport_height: float) -> None:
        """Record a scroll event; the recompute waits for ``run_frame``."""
        self._pending_scroll = (scroll_top, viewport_height)
        self._frame_requested = True

    def run_frame(self) -> VisibleWindow | None:
        """Perform the single coalesced recompute for this frame."""
        if not self._frame_requested:
            return None
        self._frame_requested = False
        pending = self._pending_scroll
        self._pending_scroll = None
        if pending is None:
            return None
        return self.set_viewport(*pending)

    def stats(self) -> dict[str, object]:
        return {
            "total_rows": self.row_count,
            "visible_rows": len(self.window),
            "enabled": self.enabled,
            "threshold": self.config.enable_threshold,
        }
