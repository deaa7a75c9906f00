# kv.py
from __future__ import annotations

import logging
import os
from typing import Optional

from azure.core.exceptions import AzureError
from azure.identity import DefaultAzureCredential
from azure.keyvault.secrets import SecretClient

logger = logging.getLogger(__name__)

WRITE_TOKEN_SECRET = "wfm-write-token"


def kv_uri_from_env() -> Optional[str]:
    """
    KEYVAULT_NAME in App Service configuration (or local env).
    Example: KEYVAULT_NAME = montana-wfm-kv
    """
    name = os.getenv("KEYVAULT_NAME", "").strip()
    if not name:
        return None
    return f"https://{name}.vault.azure.net/"


def _secret(client: SecretClient, name: str) -> Optional[str]:
    """
    Return a secret value or None if it doesn't exist or is inaccessible.
    Keep this tolerant so the app can still run with partial configuration.
    """
    try:
        return client.get_secret(name).value
    except AzureError as e:
        logger.warning("Key Vault secret %s unavailable: %s", name, e)
        return None


def read_write_token(*, kv_uri: Optional[str] = None, secret_name: str = WRITE_TOKEN_SECRET) -> Optional[str]:
    """
    Reads the storage write token from Key Vault.

    Uses Managed Identity in Azure (DefaultAzureCredential) and also works
    locally via Azure CLI login, VS Code credentials, etc.
    """
    uri = kv_uri or kv_uri_from_env()
    if not uri:
        return None

    credential = DefaultAzureCredential(
        exclude_interactive_browser_credential=True  # Streamlit shouldn't pop browsers in prod
    )
    client = SecretClient(vault_url=uri, credential=credential)
    return _secret(client, secret_name)
