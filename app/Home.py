import streamlit as st

from wfm_session import get_state, save_status

st.set_page_config(page_title="Montana CS WFM", layout="wide")

st.title("Montana CS WFM: half-hour staffing")
st.write(
    """
This app compares **scheduled coverage** with **required agents** for every half hour of the day.

Included:
- Schedule: agent roster per weekday (shifts + breaks), CSV import/export, auto plan
- Forecast: hourly ticket profile, daily volume, AHT, occupancy target and buffer
- Vacations: date ranges per agent (overlapping/adjacent ranges are merged)

Saudi timezone. Montana ticket profile applied to all days unless edited.
"""
)

state = get_state()

c1, c2, c3 = st.columns(3)
c1.metric("Agents", f"{len(state.agents)}")
c2.metric("Selected day", f"{state.day} · {state.selected_date.isoformat()}")
c3.metric("Cloud", save_status())

st.info("Use the left sidebar to navigate to the schedule, forecast or vacations page.")
