"""Backend storage access for the tree view."""

from .client import (
    ORDER_ENDPOINT,
    TREE_ENDPOINT,
    HttpTreeStorageClient,
    TreeStorageClient,
    TreeStorageError,
    unwrap_tree_payload,
)
from .worker import LoadTreeJob, SaveOrderJob, StorageResult, StorageWorker

__all__ = [
    "TREE_ENDPOINT",
    "ORDER_ENDPOINT",
    "HttpTreeStorageClient",
    "TreeStorageClient",
    "TreeStorageError",
    "unwrap_tree_payload",
    "LoadTreeJob",
    "SaveOrderJob",
    "StorageResult",
    "StorageWorker",
]
