from __future__ import annotations

from dataclasses import replace

import pandas as pd
import streamlit as st

from montana_wfm.coverage import compute_coverage, interval_table
from montana_wfm.forecast import HOURLY_LOAD_PCT_DEFAULT, ForecastParams, forecast_day
from montana_wfm.timeutils import WEEKDAYS
from wfm_session import get_state, save_status, set_state

st.set_page_config(page_title="Forecast", layout="wide")
st.title("Forecast")
st.caption("Required agents per half hour = ceil(volume × AHT / (30 × occupancy)) + buffer.")

state = get_state()
params = state.params

# -----------------------------
# Sidebar controls
# -----------------------------
with st.sidebar:
    st.header("Assumptions")
    # bounds stretch to fit whatever a stored snapshot holds
    aht0 = float(params.aht_min)
    occ0 = int(round(params.occupancy * 100))
    buf0 = int(params.service_buffer)
    aht_min = st.number_input("AHT (min)", min_value=min(1.0, aht0), max_value=max(60.0, aht0), value=aht0, step=0.5)
    occ_pct = st.slider("Occupancy target (%)", min(50, occ0), max(95, occ0), occ0, 1)
    buffer = st.number_input("Buffer (extra agents / 30-min)", min_value=0, max_value=max(10, buf0), value=buf0, step=1)

    st.divider()
    day = st.selectbox("Day", WEEKDAYS, index=WEEKDAYS.index(state.day))
    daily = st.number_input(f"Daily tickets ({day})", min_value=0.0, value=params.daily_avg_for(day), step=10.0)

    st.caption(save_status())


# -----------------------------
# Hourly profile
# -----------------------------
st.subheader(f"Hourly ticket profile · {day}")

profile = pd.DataFrame({"hour": [f"{h:02d}:00" for h in range(24)], "pct": list(params.hourly_for(day))})
edited = st.data_editor(profile, disabled=["hour"], hide_index=True, use_container_width=True, key=f"profile_{day}")

c1, c2 = st.columns(2)
c1.metric("Profile total (%)", f"{edited['pct'].sum():.1f}")
reset = c2.button("Reset to Montana profile")

hourly = tuple(HOURLY_LOAD_PCT_DEFAULT) if reset else tuple(float(v) for v in edited["pct"].fillna(0.0))

try:
    new_params = ForecastParams(
        aht_min=float(aht_min),
        occupancy=occ_pct / 100.0,
        service_buffer=int(buffer),
        daily_avg={**params.daily_avg, day: float(daily)},
        hourly_pct_by_day={**params.hourly_pct_by_day, day: hourly},
    )
except ValueError as e:
    st.error(str(e))
    st.stop()

if new_params != params:
    state = replace(state, params=new_params)
    set_state(state)


# -----------------------------
# Results
# -----------------------------
fc = forecast_day(state.params, day)
coverage = compute_coverage(state.roster, state.agents, day, state.selected_date, state.vacations)
table = interval_table(coverage, fc.expected, fc.required, fc.load_pct)

st.subheader("Expected tickets and required agents per half hour")
st.bar_chart(table.set_index("label")[["required", "coverage"]])
st.dataframe(table, use_container_width=True, hide_index=True)

st.download_button(
    "Download interval table (CSV)",
    data=table.to_csv(index=False).encode("utf-8"),
    file_name=f"montana_required_{day.lower()}.csv",
    mime="text/csv",
)
