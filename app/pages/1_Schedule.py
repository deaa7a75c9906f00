from __future__ import annotations

from dataclasses import replace

import pandas as pd
import streamlit as st

from montana_wfm.coverage import agent_timeline, compute_coverage, interval_table
from montana_wfm.forecast import forecast_day
from montana_wfm.io import SchemaError, export_roster_csv, import_roster_csv, roster_to_frame, row_to_block
from montana_wfm.roster import LEVELS, Agent, DuplicateAgent, add_agent, auto_plan, filter_agents, remove_agent, resolve_block
from montana_wfm.state import with_date
from montana_wfm.timeutils import WEEKDAYS, bucket_label
from montana_wfm.vacations import is_on_vacation
from wfm_session import get_state, save_status, set_state

st.set_page_config(page_title="Schedule", layout="wide")
st.title("Schedule")

state = get_state()

# -----------------------------
# Sidebar controls
# -----------------------------
with st.sidebar:
    st.header("Day")
    picked = st.date_input("Date", value=state.selected_date)
    if picked != state.selected_date:
        state = with_date(state, picked)
        set_state(state)

    day = st.selectbox("Weekday", WEEKDAYS, index=WEEKDAYS.index(state.day))
    if day != state.day:
        state = replace(state, selected_day=day)
        set_state(state)

    st.divider()
    st.header("Filter")
    level = st.radio("Level", ["all", *LEVELS], horizontal=True)

    st.divider()
    st.header("Roster CSV")
    uploaded = st.file_uploader("Import CSV", type=["csv"])
    if uploaded is not None and st.button("Apply import"):
        try:
            res = import_roster_csv(uploaded, state.agents, state.roster)
        except SchemaError as e:
            st.error(str(e))
        else:
            state = replace(state, agents=tuple(res.agents), roster=res.roster)
            set_state(state)
            st.success(f"Imported {res.applied} rows ({res.skipped} skipped).")

    st.download_button(
        "Export CSV",
        data=export_roster_csv(state.roster, state.agents),
        file_name="Montana_CS_Roster.csv",
        mime="text/csv",
    )

    if st.button("Auto plan"):
        state = replace(state, roster=auto_plan(state.agents, state.roster))
        set_state(state)

    st.caption(save_status())


# -----------------------------
# Coverage vs required
# -----------------------------
fc = forecast_day(state.params, state.day)
coverage = compute_coverage(state.roster, state.agents, state.day, state.selected_date, state.vacations)
table = interval_table(coverage, fc.expected, fc.required, fc.load_pct)

st.subheader(f"Demand vs Required vs Coverage (half-hour · {state.day})")
st.line_chart(table.set_index("label")[["coverage", "required", "load"]])

short = table[table["gap"] < 0]
c1, c2, c3 = st.columns(3)
c1.metric("Agents working", f"{int(sum(1 for a in state.agents if not is_on_vacation(state.vacations, a.name, state.selected_date)))}")
c2.metric("Understaffed half-hours", f"{len(short)}")
c3.metric("Worst gap", f"{int(table['gap'].min())}")


# -----------------------------
# Roster editor
# -----------------------------
st.subheader(f"Shifts for {state.selected_date.isoformat()} · {state.day}")
st.caption("Agents on vacation for the selected date are hidden. Times are HH:MM.")

visible = [
    a for a in filter_agents(state.agents, level)
    if not is_on_vacation(state.vacations, a.name, state.selected_date)
]
frame = roster_to_frame(state.roster, visible)
frame = frame[frame["day"] == state.day].reset_index(drop=True)
frame["active"] = frame["active"] == "1"

edited = st.data_editor(
    frame,
    disabled=["agent", "day"],
    hide_index=True,
    use_container_width=True,
    key=f"roster_editor_{state.day}",
)

if not edited.equals(frame):
    roster = {n: dict(week) for n, week in state.roster.items()}
    for row in edited.to_dict("records"):
        row["active"] = "1" if row["active"] else "0"
        roster.setdefault(row["agent"], {})[state.day] = row_to_block(row)
    state = replace(state, roster=roster)
    set_state(state)

with st.expander("Timeline (work / break / off per half-hour)", expanded=False):
    glyph = {"work": "█", "break": "▒", "off": "·"}
    rows = {
        a.name: "".join(glyph[s] for s in agent_timeline(resolve_block(state.roster, a.name, state.day)))
        for a in visible
    }
    st.text("\n".join(f"{name:<20} {line}" for name, line in rows.items()))
    st.caption(f"{bucket_label(0)} … {bucket_label(47)}")


# -----------------------------
# Manage agents
# -----------------------------
st.subheader("Manage agents")

with st.form("add_agent", clear_on_submit=True):
    c1, c2, c3 = st.columns(3)
    name = c1.text_input("Name")
    country = c2.text_input("Country", value="SA")
    new_level = c3.selectbox("Level", LEVELS)
    c4, c5, c6 = st.columns(3)
    remote = c4.checkbox("Remote", value=True)
    friday = c5.checkbox("Friday allowed", value=True)
    break_pref = c6.selectbox("Break", ["60", "none"])
    if st.form_submit_button("Add agent"):
        try:
            agents, roster = add_agent(
                state.agents,
                state.roster,
                Agent(name=name, country=country, remote=remote, level=new_level, friday_allowed=friday, break_pref=break_pref),
            )
        except (DuplicateAgent, ValueError) as e:
            st.error(str(e))
        else:
            state = replace(state, agents=tuple(agents), roster=roster)
            set_state(state)

if state.agents:
    agents_df = pd.DataFrame(
        [{"name": a.name, "level": a.level, "remote": a.remote, "country": a.country} for a in state.agents]
    )
    st.dataframe(agents_df, use_container_width=True, hide_index=True)

    who = st.selectbox("Remove agent", [a.name for a in state.agents])
    if st.button(f"Remove {who}", type="secondary"):
        agents, roster, vacations = remove_agent(state.agents, state.roster, state.vacations, who)
        state = replace(state, agents=tuple(agents), roster=roster, vacations=vacations)
        set_state(state)
        st.rerun()
