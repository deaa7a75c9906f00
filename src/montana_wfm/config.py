from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from .kv import read_write_token
from .storage import DEFAULT_WORKSPACE

DEFAULT_API_BASE = "http://localhost:8000"
DEFAULT_DEBOUNCE_SECONDS = 0.8


@dataclass(frozen=True)
class Settings:
    write_token: Optional[str] = None
    store_dir: Optional[str] = None
    workspace: str = DEFAULT_WORKSPACE
    api_base: str = DEFAULT_API_BASE
    debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS


def _env(name: str) -> Optional[str]:
    value = os.getenv(name, "").strip()
    return value or None


def load_settings() -> Settings:
    """
    Environment:
      WFM_TOKEN             shared write token (x-wfm-token header)
      WFM_STORE_DIR         directory for the file blob store
      WFM_WORKSPACE         workspace name (default "montana")
      WFM_API_BASE          base URL of the schedule endpoint
      WFM_DEBOUNCE_SECONDS  autosave debounce window
      KEYVAULT_NAME         optional; token is read from Key Vault when WFM_TOKEN is unset
    """
    token = _env("WFM_TOKEN")
    if token is None and _env("KEYVAULT_NAME"):
        token = read_write_token()

    debounce_raw = _env("WFM_DEBOUNCE_SECONDS")
    try:
        debounce = float(debounce_raw) if debounce_raw is not None else DEFAULT_DEBOUNCE_SECONDS
    except ValueError as e:
        raise ValueError(f"WFM_DEBOUNCE_SECONDS must be a number (got {debounce_raw!r})") from e
    if debounce < 0:
        raise ValueError("WFM_DEBOUNCE_SECONDS must be >= 0")

    return Settings(
        write_token=token,
        store_dir=_env("WFM_STORE_DIR"),
        workspace=_env("WFM_WORKSPACE") or DEFAULT_WORKSPACE,
        api_base=(_env("WFM_API_BASE") or DEFAULT_API_BASE).rstrip("/"),
        debounce_seconds=debounce,
    )
