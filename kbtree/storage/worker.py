"""Background worker that runs storage calls off the UI loop."""

from __future__ import annotations

import logging
import threading
from collections import deque
from dataclasses import dataclass
from queue import Empty, Queue

from ..tree_model import Node
from .client import TreeStorageClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoadTreeJob:
    """Fetch the whole tree."""

    request_id: int


@dataclass(frozen=True)
class SaveOrderJob:
    """Persist one parent's child order."""

    request_id: int
    parent_path: str
    order: tuple[str, ...]
    previous_order: tuple[str, ...]


StorageJob = LoadTreeJob | SaveOrderJob


@dataclass(frozen=True)
class StorageResult:
    """Completed job; ``error`` is set instead of raising on failure."""

    job: StorageJob
    tree: Node | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class StorageWorker:
    """Single-threaded FIFO executor for storage jobs.

    Jobs run one at a time in submission order, so two saves for the same
    parent reach the backend in the order they were issued. Results queue up
    until the UI loop drains them.
    """

    def __init__(self, client: TreeStorageClient) -> None:
        self._client = client
        self._lock = threading.Lock()
        self._jobs: deque[StorageJob] = deque()
        self._running = False
        self._next_request_id = 1
        self._results: Queue[StorageResult] = Queue()

    def _run(self, job: StorageJob) -> StorageResult:
        try:
            if isinstance(job, LoadTreeJob):
                return StorageResult(job=job, tree=self._client.fetch_tree())
            self._client.save_order(job.parent_path, job.order)
            return StorageResult(job=job)
        except Exception as exc:
            logger.debug("Storage job %r failed", job, exc_info=True)
            return StorageResult(job=job, error=exc)

    def _worker(self) -> None:
        while True:
            with self._lock:
                if not self._jobs:
                    self._running = False
                    return
                job = self._jobs.popleft()
            self._results.put(self._run(job))

    def _allocate_request_id(self) -> int:
        with self._lock:
            request_id = self._next_request_id
            self._next_request_id += 1
            return request_id

    def _submit(self, job: StorageJob) -> None:
        with self._lock:
            self._jobs.append(job)
            if self._running:
                return
            self._running = True

        worker = threading.Thread(
            target=self._worker,
            name="kbtree-storage",
            daemon=True,
        )
        worker.start()

    def schedule_load(self) -> int:
        """Queue a tree fetch and return its request id."""
        job = LoadTreeJob(request_id=self._allocate_request_id())
        self._submit(job)
        return job.request_id

    def schedule_save(
        self,
        parent_path: str,
        order: tuple[str, ...],
        previous_order: tuple[str, ...] = (),
    ) -> int:
        """Queue an order save and return its request id."""
        job = SaveOrderJob(
            request_id=self._allocate_request_id(),
            parent_path=parent_path,
            order=tuple(order),
            previous_order=tuple(previous_order),
        )
        self._submit(job)
        return job.request_id

    def idle(self) -> bool:
        """Whether no job is queued or running."""
        with self._lock:
            return not self._running and not self._jobs

    def drain_results(self) -> list[StorageResult]:
        """Drain all completed results."""
        out: list[StorageResult] = []
        while True:
            try:
                out.append(self._results.get_nowait())
            except Empty:
                break
        return out


__all__ = [
    "LoadTreeJob",
    "SaveOrderJob",
    "StorageJob",
    "StorageResult",
    "StorageWorker",
]
