"""Backend client for fetching the document tree and saving sibling order."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any, Protocol

import httpx

from ..tree_model import Node, node_from_payload

logger = logging.getLogger(__name__)

TREE_ENDPOINT = "/api/editor/tree"
ORDER_ENDPOINT = "/api/editor/tree/order"


class TreeStorageError(Exception):
    """Raised when the backend cannot serve or store tree data."""


class TreeStorageClient(Protocol):
    def fetch_tree(self) -> Node: ...

    def save_order(self, parent_path: str, order: Sequence[str]) -> None: ...


def unwrap_tree_payload(payload: object) -> object:
    """Return the tree node from either a bare node or the API envelope.

    The editor API answers ``{"success": bool, "data": {"tree": ...},
    "error": str}``; a bare node object is accepted as-is.
    """
    if not isinstance(payload, dict) or "success" not in payload:
        return payload
    if not payload.get("success"):
        raise TreeStorageError(str(payload.get("error") or "backend reported failure"))
    data = payload.get("data")
    if isinstance(data, dict) and "tree" in data:
        return data["tree"]
    return data


class HttpTreeStorageClient:
    """``TreeStorageClient`` backed by the editor's HTTP API."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._client = httpx.Client(base_url=base_url, timeout=timeout, transport=transport)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> HttpTreeStorageClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _request_json(self, method: str, url: str, **kwargs: Any) -> object:
        try:
            response = self._client.request(method, url, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise TreeStorageError(f"{method} {url} failed with HTTP {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise TreeStorageError(f"{method} {url} failed: {exc}") from exc
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise TreeStorageError(f"{method} {url} returned invalid JSON") from exc

    def fetch_tree(self) -> Node:
        payload = unwrap_tree_payload(self._request_json("GET", TREE_ENDPOINT))
        root = node_from_payload(payload)
        logger.debug("Fetched tree with %d nodes", sum(1 for _ in root.iter_subtree()))
        return root

    def save_order(self, parent_path: str, order: Sequence[str]) -> None:
        payload = self._request_json(
            "POST",
            ORDER_ENDPOINT,
            json={"parentPath": parent_path, "order": list(order)},
        )
        if isinstance(payload, dict) and payload.get("success") is False:
            raise TreeStorageError(str(payload.get("error") or "backend rejected order"))
