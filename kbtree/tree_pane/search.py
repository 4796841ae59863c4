"""Debounced search-box input for the tree pane."""

from __future__ import annotations

import time
from collections.abc import Callable


class TreeSearch:
    """Single-slot debounce between raw keystrokes and a committed query.

    Every ``on_input`` replaces the pending text and pushes the deadline out,
    so only the last input of a burst is committed. The owner polls from its
    loop; nothing here runs on a timer thread.
    """

    def __init__(
        self,
        debounce_seconds: float = 0.3,
        monotonic: Callable[[], float] = time.monotonic,
    ) -> None:
        self.debounce_seconds = debounce_seconds
        self._monotonic = monotonic
        self._pending: str | None = None
        self._deadline = 0.0
        self.committed = ""

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def on_input(self, text: str) -> None:
        self._pending = text.strip()
        self._deadline = self._monotonic() + self.debounce_seconds

    def poll(self) -> str | None:
        """Return the query once its quiet period has elapsed, else ``None``."""
        if self._pending is None or self._monotonic() < self._deadline:
            return None
        return self.flush()

    def flush(self) -> str | None:
        """Commit pending input now (e.g. on Enter)."""
        if self._pending is None:
            return None
        query = self._pending
        self._pending = None
        self.committed = query
        return query

    def cancel(self) -> None:
        self._pending = None
