import io

import pytest

from montana_wfm.io import (
    REQUIRED_COLUMNS,
    SchemaError,
    export_roster_csv,
    import_roster_csv,
    read_roster_csv,
)
from montana_wfm.roster import Agent, DayBlock, add_agent, resolve_block, set_block
from montana_wfm.timeutils import WEEKDAYS


def _csv(text: str) -> io.StringIO:
    return io.StringIO(text.strip() + "\n")


def test_export_layout():
    agents, roster = add_agent([], {}, Agent(name="Sara", friday_allowed=False))
    text = export_roster_csv(roster, agents)
    lines = text.strip().split("\n")

    assert lines[0] == ",".join(REQUIRED_COLUMNS)
    assert len(lines) == 1 + len(WEEKDAYS)
    assert lines[1] == "Sara,Saturday,1,09:00,17:00,13:00,60"
    assert lines[-1] == "Sara,Friday,0,09:00,17:00,13:00,60"


def test_export_uses_default_block_for_missing_days():
    text = export_roster_csv({}, [Agent(name="Omar")])
    assert "Omar,Monday,1,09:00,17:00,13:00,60" in text


def test_missing_column_rejects_whole_import():
    data = _csv("agent,day,active,start,end,break_start\nSara,Monday,1,09:00,17:00,13:00")
    with pytest.raises(SchemaError):
        import_roster_csv(data, [], {})


def test_import_is_header_order_independent_and_trims():
    data = _csv(
        """
day , agent,break_minutes,break_start,end,start,active
Monday, Sara ,30,12:00,18:00,10:00, TRUE
"""
    )
    res = import_roster_csv(data, [], {})

    assert res.applied == 1
    blk = res.roster["Sara"]["Monday"]
    assert blk == DayBlock(active=True, start_min=600, end_min=1080, break_start_min=720, break_mins=30)


def test_import_skips_bad_day_and_empty_agent():
    data = _csv(
        """
agent,day,active,start,end,break_start,break_minutes
Sara,Funday,1,09:00,17:00,13:00,60
,Monday,1,09:00,17:00,13:00,60
Sara,monday,1,09:00,17:00,13:00,60
Sara,Monday,1,09:00,17:00,13:00,60
"""
    )
    res = import_roster_csv(data, [], {})
    assert res.applied == 1
    assert res.skipped == 3
    assert list(res.roster["Sara"]) == ["Monday"]


def test_import_field_leniency():
    data = _csv(
        """
agent,day,active,start,end,break_start,break_minutes
Sara,Monday,yes,ab:00,,13:00,abc
Sara,Tuesday,1,25:70,08:5x,,45
Sara,Wednesday,0,09:00,17:00,14:00,-30
Sara,Thursday,true,07:00,15:00,11:00,30min
"""
    )
    res = import_roster_csv(data, [], {})
    week = res.roster["Sara"]

    assert week["Monday"] == DayBlock(active=False, start_min=540, end_min=1020)
    # no parseable break start -> no break
    assert week["Tuesday"] == DayBlock(active=True, start_min=23 * 60 + 59, end_min=8 * 60 + 5)
    assert week["Wednesday"] == DayBlock(active=False, start_min=540, end_min=1020)
    assert week["Thursday"] == DayBlock(active=True, start_min=420, end_min=900, break_start_min=660, break_mins=30)


def test_import_auto_creates_agents_with_defaults():
    existing = [Agent(name="Omar", level="senior")]
    data = _csv(
        """
agent,day,active,start,end,break_start,break_minutes
Omar,Monday,1,09:00,17:00,,0
Lina,Monday,1,09:00,17:00,,0
Lina,Tuesday,1,09:00,17:00,,0
"""
    )
    res = import_roster_csv(data, existing, {})

    assert [a.name for a in res.agents] == ["Omar", "Lina"]
    lina = res.agents[1]
    assert lina == Agent(name="Lina", country="SA", remote=True, level="junior", friday_allowed=True, break_pref="60")
    # row values win over the default break preference
    assert res.roster["Lina"]["Monday"].break_mins == 0
    assert existing == [Agent(name="Omar", level="senior")]


def test_import_overwrites_and_leaves_inputs_alone():
    agents, roster = add_agent([], {}, Agent(name="Sara"))
    data = _csv(
        """
agent,day,active,start,end,break_start,break_minutes
Sara,Monday,0,06:00,10:00,,0
"""
    )
    res = import_roster_csv(data, agents, roster)

    assert res.roster["Sara"]["Monday"] == DayBlock(active=False, start_min=360, end_min=600)
    assert res.roster["Sara"]["Tuesday"] == roster["Sara"]["Tuesday"]
    assert roster["Sara"]["Monday"].active is True


def test_export_import_round_trip():
    agents, roster = add_agent([], {}, Agent(name="Sara"))
    agents, roster = add_agent(agents, roster, Agent(name="Omar", break_pref="none", friday_allowed=False))
    roster = set_block(roster, "Sara", "Monday", start_min=420, end_min=930, break_start_min=690, break_mins=45)
    roster = set_block(roster, "Omar", "Sunday", active=False)

    text = export_roster_csv(roster, agents)
    res = import_roster_csv(io.StringIO(text), [], {})

    assert [a.name for a in res.agents] == ["Sara", "Omar"]
    for a in agents:
        for d in WEEKDAYS:
            assert res.roster[a.name][d] == resolve_block(roster, a.name, d)


def test_read_roster_csv_empty_file():
    with pytest.raises(SchemaError):
        read_roster_csv(io.StringIO(""))


def test_import_drops_cells_past_header_width():
    data = _csv(
        """
agent,day,active,start,end,break_start,break_minutes
Sara,Monday,1,10:00,18:00,13:00,30,extra
Omar,Tuesday,1,08:00,16:00,,0
"""
    )
    res = import_roster_csv(data, [], {})

    assert res.applied == 2
    assert res.roster["Sara"]["Monday"] == DayBlock(
        active=True, start_min=600, end_min=1080, break_start_min=780, break_mins=30
    )
    assert res.roster["Omar"]["Tuesday"].start_min == 480


def test_read_roster_csv_bytes_with_bom():
    data = io.BytesIO("\ufeffagent,day,active,start,end,break_start,break_minutes\nSara,Monday,1,09:00,17:00,,0\n".encode("utf-8"))
    df = read_roster_csv(data)
    assert list(df.columns) == REQUIRED_COLUMNS
    assert df.loc[0, "agent"] == "Sara"


def test_read_roster_csv_rejects_non_utf8_bytes():
    with pytest.raises(SchemaError):
        read_roster_csv(io.BytesIO(b"agent,day\n\xff\xfe,Monday\n"))
