import pytest

from montana_wfm import config
from montana_wfm.config import load_settings

ENV_VARS = ["WFM_TOKEN", "WFM_STORE_DIR", "WFM_WORKSPACE", "WFM_API_BASE", "WFM_DEBOUNCE_SECONDS", "KEYVAULT_NAME"]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    s = load_settings()
    assert s.write_token is None
    assert s.workspace == "montana"
    assert s.debounce_seconds == 0.8


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("WFM_TOKEN", "s3cret")
    monkeypatch.setenv("WFM_STORE_DIR", "/tmp/wfm")
    monkeypatch.setenv("WFM_API_BASE", "https://wfm.example.com/")
    monkeypatch.setenv("WFM_DEBOUNCE_SECONDS", "1.5")

    s = load_settings()
    assert s.write_token == "s3cret"
    assert s.store_dir == "/tmp/wfm"
    assert s.api_base == "https://wfm.example.com"
    assert s.debounce_seconds == 1.5


def test_token_from_key_vault(monkeypatch):
    monkeypatch.setenv("KEYVAULT_NAME", "montana-wfm-kv")
    monkeypatch.setattr(config, "read_write_token", lambda: "from-kv")
    assert load_settings().write_token == "from-kv"


def test_bad_debounce(monkeypatch):
    monkeypatch.setenv("WFM_DEBOUNCE_SECONDS", "soon")
    with pytest.raises(ValueError):
        load_settings()
