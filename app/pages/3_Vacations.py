from __future__ import annotations

from dataclasses import replace
from datetime import date

import streamlit as st

from montana_wfm.vacations import InvalidRange, add_range, agents_on_vacation, clear_agent, remove_range
from wfm_session import get_state, save_status, set_state

st.set_page_config(page_title="Vacations", layout="wide")
st.title("Vacations")
st.caption("Ranges are inclusive. Overlapping or back-to-back ranges are merged.")

state = get_state()
names = [a.name for a in state.agents]

if not names:
    st.info("No agents yet. Add agents on the Schedule page first.")
    st.stop()

# -----------------------------
# Add range
# -----------------------------
with st.form("add_vacation"):
    c1, c2, c3 = st.columns(3)
    who = c1.selectbox("Agent", names)
    start = c2.date_input("Start", value=date.today())
    end = c3.date_input("End", value=date.today())
    if st.form_submit_button("Add vacation"):
        try:
            vacations = add_range(state.vacations, who, start, end)
        except InvalidRange as e:
            st.error(str(e))
        else:
            state = replace(state, vacations=vacations)
            set_state(state)

# -----------------------------
# Who is off
# -----------------------------
st.subheader("Who is off")
view = st.date_input("View date", value=state.selected_date, key="vacation_view_date")
off = agents_on_vacation(state.vacations, names, view)
st.write(", ".join(off) if off else "Nobody is on vacation that day.")

# -----------------------------
# Ranges per agent
# -----------------------------
st.subheader("Ranges")
for name in sorted(n for n in names if state.vacations.get(n)):
    with st.expander(name, expanded=False):
        for idx, r in enumerate(state.vacations[name]):
            c1, c2 = st.columns([4, 1])
            c1.write(f"{r.start.isoformat()} → {r.end.isoformat()}")
            if c2.button("Remove", key=f"rm_{name}_{idx}"):
                state = replace(state, vacations=remove_range(state.vacations, name, idx))
                set_state(state)
                st.rerun()
        if st.button("Clear all", key=f"clear_{name}"):
            state = replace(state, vacations=clear_agent(state.vacations, name))
            set_state(state)
            st.rerun()

st.caption(save_status())
