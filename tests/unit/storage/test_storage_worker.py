"""Tests for the background storage worker."""

from __future__ import annotations

import threading
import time
import unittest

from kbtree.storage import LoadTreeJob, SaveOrderJob, StorageWorker, TreeStorageError
from kbtree.tree_model import Node, node_from_payload


def _wait_for_results(
    worker: StorageWorker,
    *,
    expected_count: int,
    timeout_seconds: float = 1.0,
) -> list:
    deadline = time.monotonic() + timeout_seconds
    out: list = []
    while time.monotonic() < deadline:
        out.extend(worker.drain_results())
        if len(out) >= expected_count:
            break
        time.sleep(0.01)
    return out


class RecordingBackend:
    """Stores the last order per parent, like the editor backend does."""

    def __init__(self) -> None:
        self.orders: dict[str, tuple[str, ...]] = {}
        self.calls: list[tuple[str, tuple[str, ...]]] = []
        self.first_save_started = threading.Event()
        self.release_first_save = threading.Event()
        self.block_first_save = False
        self.fail_paths: set[str] = set()

    def fetch_tree(self) -> Node:
        return node_from_payload({"name": "src", "path": "", "type": "directory", "children": []})

    def save_order(self, parent_path: str, order) -> None:
        order = tuple(order)
        if self.block_first_save and not self.calls:
            self.calls.append((parent_path, order))
            self.first_save_started.set()
            self.release_first_save.wait(timeout=1.0)
        else:
            self.calls.append((parent_path, order))
        if parent_path in self.fail_paths:
            raise TreeStorageError(f"cannot save {parent_path}")
        self.orders[parent_path] = order


class StorageWorkerTests(unittest.TestCase):
    def test_load_runs_in_background_and_returns_tree(self) -> None:
        worker = StorageWorker(RecordingBackend())

        request_id = worker.schedule_load()
        results = _wait_for_results(worker, expected_count=1)

        self.assertEqual(len(results), 1)
        self.assertIsInstance(results[0].job, LoadTreeJob)
        self.assertEqual(results[0].job.request_id, request_id)
        self.assertTrue(results[0].ok)
        assert results[0].tree is not None
        self.assertTrue(results[0].tree.is_dir)

    def test_saves_for_same_parent_reach_backend_in_issue_order(self) -> None:
        backend = RecordingBackend()
        backend.block_first_save = True
        worker = StorageWorker(backend)

        worker.schedule_save("docs", ("b", "a"), ("a", "b"))
        self.assertTrue(backend.first_save_started.wait(timeout=1.0))
        worker.schedule_save("docs", ("a", "b"), ("b", "a"))

        time.sleep(0.05)
        self.assertEqual(len(backend.calls), 1)
        self.assertFalse(worker.idle())

        backend.release_first_save.set()
        results = _wait_for_results(worker, expected_count=2)

        self.assertEqual([result.job.order for result in results], [("b", "a"), ("a", "b")])
        self.assertEqual(backend.orders["docs"], ("a", "b"))

    def test_failed_job_is_reported_and_worker_keeps_running(self) -> None:
        backend = RecordingBackend()
        backend.fail_paths.add("broken")
        worker = StorageWorker(backend)

        worker.schedule_save("broken", ("x",))
        worker.schedule_save("docs", ("y",))
        results = _wait_for_results(worker, expected_count=2)

        self.assertEqual(len(results), 2)
        failed, succeeded = results
        self.assertIsInstance(failed.job, SaveOrderJob)
        self.assertFalse(failed.ok)
        self.assertIsInstance(failed.error, TreeStorageError)
        self.assertTrue(succeeded.ok)
        self.assertEqual(backend.orders, {"docs": ("y",)})

    def test_request_ids_increase_across_job_kinds(self) -> None:
        worker = StorageWorker(RecordingBackend())

        first = worker.schedule_load()
        second = worker.schedule_save("", ())
        third = worker.schedule_load()

        self.assertLess(first, second)
        self.assertLess(second, third)
        _wait_for_results(worker, expected_count=3)

    def test_worker_is_idle_after_draining(self) -> None:
        worker = StorageWorker(RecordingBackend())
        worker.schedule_load()

        _wait_for_results(worker, expected_count=1)
        deadline = time.monotonic() + 1.0
        while not worker.idle() and time.monotonic() < deadline:
            time.sleep(0.01)

        self.assertTrue(worker.idle())
        self.assertEqual(worker.drain_results(), [])


if __name__ == "__main__":
    unittest.main()
