from __future__ import annotations

import logging

import streamlit as st

from montana_wfm.config import Settings, load_settings
from montana_wfm.state import PlannerState, from_snapshot, to_snapshot
from montana_wfm.sync import DebouncedSaver, ScheduleClient

logger = logging.getLogger(__name__)

_STATE_KEY = "planner_state"
_SAVER_KEY = "planner_saver"

_STATUS_LABELS = {
    "saving": "💾 Saving...",
    "saved": "✅ Saved to cloud",
    "error": "⚠️ Save failed",
    "idle": "☁️ Cloud idle",
}


@st.cache_resource
def _settings() -> Settings:
    return load_settings()


@st.cache_resource
def _client() -> ScheduleClient:
    s = _settings()
    return ScheduleClient(s.api_base, workspace=s.workspace, token=s.write_token)


def _saver() -> DebouncedSaver:
    if _SAVER_KEY not in st.session_state:
        st.session_state[_SAVER_KEY] = DebouncedSaver(_client().save, delay=_settings().debounce_seconds)
    return st.session_state[_SAVER_KEY]


def get_state() -> PlannerState:
    """Planner state for this session, loaded from the schedule store on first use."""
    if _STATE_KEY not in st.session_state:
        try:
            state = from_snapshot(_client().load())
        except ValueError as e:
            logger.warning("[cloud load] ignoring stored snapshot: %s", e)
            st.warning(f"Stored schedule could not be read, starting fresh: {e}")
            state = PlannerState()
        st.session_state[_STATE_KEY] = state
    return st.session_state[_STATE_KEY]


def set_state(state: PlannerState) -> None:
    """Replaces the session state and schedules an autosave."""
    st.session_state[_STATE_KEY] = state
    _saver().submit(to_snapshot(state))


def save_status() -> str:
    return _STATUS_LABELS[_saver().status]
