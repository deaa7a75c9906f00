from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, Literal, Optional, TypeAlias

import httpx

from .storage import DEFAULT_WORKSPACE, TOKEN_HEADER

logger = logging.getLogger(__name__)

SaveStatus: TypeAlias = Literal["idle", "saving", "saved", "error"]


class SaveError(RuntimeError):
    """Raised when a snapshot could not be written to the schedule endpoint."""


# -----------------------------
# HTTP client
# -----------------------------
class ScheduleClient:
    def __init__(
        self,
        base_url: str,
        workspace: str = DEFAULT_WORKSPACE,
        token: Optional[str] = None,
        client: Optional[httpx.Client] = None,
        timeout: float = 10.0,
    ) -> None:
        self.workspace = workspace
        self.token = token
        self._client = client or httpx.Client(base_url=base_url, timeout=timeout)

    def _params(self) -> Dict[str, str]:
        return {"workspace": self.workspace}

    def load(self) -> Dict[str, Any]:
        """Stored snapshot, or {} when nothing is stored or the load fails."""
        try:
            res = self._client.get("/schedule", params=self._params())
            res.raise_for_status()
            data = res.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("[cloud load] error: %s", e)
            return {}
        return data if isinstance(data, dict) else {}

    def save(self, snapshot: Dict[str, Any]) -> None:
        headers = {TOKEN_HEADER: self.token} if self.token else {}
        try:
            res = self._client.put("/schedule", params=self._params(), json=snapshot, headers=headers)
        except httpx.HTTPError as e:
            raise SaveError(f"Schedule save failed: {e}") from e
        if res.status_code // 100 != 2:
            raise SaveError(f"Schedule save failed with status {res.status_code}")

    def close(self) -> None:
        self._client.close()


# -----------------------------
# Debounced autosave
# -----------------------------
class DebouncedSaver:
    """
    Latest-wins autosave.

    Each submit() replaces the pending snapshot and restarts the timer, so only
    the newest snapshot within a debounce window is sent. Saves run one at a
    time in submit order; a snapshot older than one already sent is dropped.
    A failed save only changes `status`; nothing is retried until the next
    submit().
    """

    def __init__(self, save_fn: Callable[[Dict[str, Any]], None], delay: float = 0.8) -> None:
        self._save_fn = save_fn
        self._delay = float(delay)
        self._lock = threading.Lock()
        self._send_lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        self._pending: Optional[Dict[str, Any]] = None
        self._seq = 0
        self._sent_seq = 0
        self.status: SaveStatus = "idle"
        self.last_error: Optional[Exception] = None

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._pending is not None

    def submit(self, snapshot: Dict[str, Any]) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._pending = snapshot
            self._seq += 1
            self._timer = threading.Timer(self._delay, self.flush)
            self._timer.daemon = True
            self._timer.start()

    def cancel(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = None
            self._pending = None

    def flush(self) -> SaveStatus:
        """Sends the pending snapshot now, if any."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = None
            snapshot, self._pending = self._pending, None
            seq = self._seq

        if snapshot is None:
            return self.status

        with self._send_lock:
            if seq <= self._sent_seq:
                return self.status
            self.status = "saving"
            try:
                self._save_fn(snapshot)
            except SaveError as e:
                logger.warning("[cloud save] error: %s", e)
                self.last_error = e
                self.status = "error"
            else:
                self.last_error = None
                self.status = "saved"
            self._sent_seq = seq
        return self.status


__all__ = [
    "SaveStatus",
    "SaveError",
    "ScheduleClient",
    "DebouncedSaver",
]
