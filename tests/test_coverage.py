import numpy as np

from montana_wfm.coverage import agent_timeline, compute_coverage, interval_table
from montana_wfm.roster import Agent, DayBlock
from montana_wfm.vacations import add_range

DAY = "2024-06-10"  # Monday

LUNCH_BLOCK = DayBlock(active=True, start_min=540, end_min=1020, break_start_min=780, break_mins=60)


def _roster(block):
    return {"Sara": {"Monday": block}}


def test_standard_block_with_lunch_break():
    cov = compute_coverage(_roster(LUNCH_BLOCK), [Agent(name="Sara")], "Monday", DAY, {})

    expected = np.zeros(48, dtype=int)
    expected[18:34] = 1
    expected[26] = 0
    expected[27] = 0
    assert cov.tolist() == expected.tolist()


def test_degenerate_block_covers_nothing():
    blk = DayBlock(active=True, start_min=1020, end_min=540)
    cov = compute_coverage(_roster(blk), ["Sara"], "Monday", DAY, {})
    assert cov.sum() == 0

    blk = DayBlock(active=True, start_min=600, end_min=600)
    assert compute_coverage(_roster(blk), ["Sara"], "Monday", DAY, {}).sum() == 0


def test_inactive_block_covers_nothing():
    blk = DayBlock(active=False, start_min=540, end_min=1020)
    assert compute_coverage(_roster(blk), ["Sara"], "Monday", DAY, {}).sum() == 0


def test_vacation_excludes_agent_for_whole_day():
    vac = add_range({}, "Sara", "2024-06-08", DAY)
    cov = compute_coverage(_roster(LUNCH_BLOCK), ["Sara"], "Monday", DAY, vac)
    assert cov.sum() == 0

    cov_next = compute_coverage(_roster(LUNCH_BLOCK), ["Sara"], "Monday", "2024-06-17", vac)
    assert cov_next.sum() > 0


def test_partial_bucket_counts_as_full_head():
    blk = DayBlock(active=True, start_min=541, end_min=542)
    cov = compute_coverage(_roster(blk), ["Sara"], "Monday", DAY, {})
    assert cov[18] == 1
    assert cov.sum() == 1


def test_missing_block_uses_default_day():
    cov = compute_coverage({}, ["Omar"], "Tuesday", "2024-06-11", {})
    assert cov[18] == 1
    assert cov[26] == 0
    assert cov[34] == 0


def test_coverage_sums_agents():
    roster = {
        "Sara": {"Monday": LUNCH_BLOCK},
        "Omar": {"Monday": DayBlock(active=True, start_min=720, end_min=1200)},
    }
    cov = compute_coverage(roster, ["Sara", "Omar"], "Monday", DAY, {})
    assert cov[20] == 1
    assert cov[24] == 2
    assert cov[26] == 1
    assert cov[38] == 1


def test_break_outside_window_is_not_clamped():
    # break overlaps a bucket the agent only partly works; net presence goes to zero
    blk = DayBlock(active=True, start_min=540, end_min=555, break_start_min=540, break_mins=30)
    cov = compute_coverage(_roster(blk), ["Sara"], "Monday", DAY, {})
    assert cov.sum() == 0


def test_agent_timeline_segments():
    segs = agent_timeline(LUNCH_BLOCK)
    assert len(segs) == 48
    assert segs[17] == "off"
    assert segs[18] == "work"
    assert segs[26] == "break"
    assert segs[27] == "break"
    assert segs[33] == "work"
    assert segs[34] == "off"


def test_interval_table_columns_and_gap():
    cov = np.zeros(48, dtype=int)
    cov[20] = 3
    req = np.ones(48, dtype=int)
    expected = np.full(48, 2.0)
    load = np.ones(48)

    df = interval_table(cov, expected, req, load)

    assert list(df.columns) == ["bucket", "label", "coverage", "expected_volume", "required", "gap", "load"]
    assert len(df) == 48
    assert df.loc[20, "gap"] == 2
    assert df.loc[0, "gap"] == -1
    assert df.loc[26, "label"] == "13:00"
    # flat load is scaled to the top of the headcount axis
    assert df["load"].max() == 3.0
