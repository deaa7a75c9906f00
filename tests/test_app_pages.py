from pathlib import Path

from streamlit.testing.v1 import AppTest

from montana_wfm.forecast import ForecastParams
from montana_wfm.state import PlannerState

APP_DIR = Path(__file__).resolve().parents[1] / "app"


def test_forecast_page_renders_params_outside_default_widget_range(monkeypatch):
    monkeypatch.syspath_prepend(str(APP_DIR))
    monkeypatch.setenv("WFM_API_BASE", "http://127.0.0.1:9")

    at = AppTest.from_file(str(APP_DIR / "pages" / "2_Forecast.py"), default_timeout=30)
    at.session_state["planner_state"] = PlannerState(
        params=ForecastParams(aht_min=0.5, occupancy=0.98, service_buffer=12)
    )
    at.run()

    assert not at.exception
    assert at.sidebar.number_input[0].value == 0.5
    assert at.sidebar.slider[0].value == 98
    assert at.sidebar.number_input[1].value == 12
