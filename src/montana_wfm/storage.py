from __future__ import annotations

import hmac
import json
import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Protocol, Union

logger = logging.getLogger(__name__)

DEFAULT_WORKSPACE = "montana"
TOKEN_HEADER = "x-wfm-token"

CORS_HEADERS: Dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET,PUT,OPTIONS",
    "Access-Control-Allow-Headers": f"Content-Type,{TOKEN_HEADER}",
}

_WORKSPACE_RE = re.compile(r"^[A-Za-z0-9_-]+$")


class StoreError(RuntimeError):
    """Raised when the blob store cannot read or write a snapshot."""


class BlobStore(Protocol):
    def get_json(self, key: str) -> Optional[Any]: ...

    def set_json(self, key: str, payload: Any) -> None: ...


# -----------------------------
# File-backed store
# -----------------------------
class FileBlobStore:
    """One JSON document per key under `root`."""

    def __init__(self, root: Union[str, os.PathLike]) -> None:
        self.root = Path(root)

    def _path(self, key: str) -> Path:
        return self.root / key

    def get_json(self, key: str) -> Optional[Any]:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise StoreError(f"Could not read {key}: {e}") from e

    def set_json(self, key: str, payload: Any) -> None:
        path = self._path(key)
        tmp = path.with_suffix(path.suffix + ".tmp")
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps(payload), encoding="utf-8")
            os.replace(tmp, path)
        except (OSError, TypeError, ValueError) as e:
            raise StoreError(f"Could not write {key}: {e}") from e


# -----------------------------
# Request handling
# -----------------------------
@dataclass(frozen=True)
class StoreResponse:
    status: int
    payload: Optional[Any] = None
    headers: Dict[str, str] = field(default_factory=lambda: dict(CORS_HEADERS))

    @property
    def body(self) -> str:
        return "" if self.payload is None else json.dumps(self.payload)


def _error(status: int, message: str, detail: Optional[str] = None) -> StoreResponse:
    payload: Dict[str, Any] = {"error": message}
    if detail is not None:
        payload["detail"] = detail
    return StoreResponse(status=status, payload=payload)


def _token_ok(expected: Optional[str], provided: Optional[str]) -> bool:
    if not expected:
        return True
    return provided is not None and hmac.compare_digest(expected.encode("utf-8"), provided.encode("utf-8"))


def handle_schedule(
    method: str,
    workspace: Optional[str],
    body: Optional[Union[str, bytes]],
    token: Optional[str],
    *,
    store: Optional[BlobStore],
    write_token: Optional[str] = None,
) -> StoreResponse:
    """
    GET/PUT of one JSON snapshot per workspace.

    PUT requests are authorised before the body is looked at or the store is
    touched. Every response carries CORS_HEADERS.
    """
    method = (method or "GET").upper()
    if method == "OPTIONS":
        return StoreResponse(status=200)
    if method not in ("GET", "PUT"):
        return _error(405, "Method not allowed")

    name = workspace or DEFAULT_WORKSPACE
    if not _WORKSPACE_RE.match(name):
        return _error(400, "Invalid workspace")
    key = f"{name}.json"

    if method == "PUT" and not _token_ok(write_token, token):
        logger.warning("Rejected write to %s: bad token", key)
        return _error(401, "Unauthorized")

    if store is None:
        logger.error("Schedule store is not configured")
        return _error(500, "Missing store configuration", "WFM_STORE_DIR not set")

    try:
        if method == "GET":
            data = store.get_json(key)
            return StoreResponse(status=200, payload=data or {})

        if not body:
            return _error(400, "Missing body")
        try:
            text = body.decode("utf-8") if isinstance(body, bytes) else body
            payload = json.loads(text)
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            return _error(400, "Invalid JSON body", str(e))

        store.set_json(key, payload)
        logger.info("Saved snapshot %s", key)
        return StoreResponse(status=200, payload={"ok": True})

    except StoreError as e:
        logger.error("Schedule store error: %s", e)
        return _error(500, "Internal error", str(e))


__all__ = [
    "DEFAULT_WORKSPACE",
    "TOKEN_HEADER",
    "CORS_HEADERS",
    "StoreError",
    "BlobStore",
    "FileBlobStore",
    "StoreResponse",
    "handle_schedule",
]
