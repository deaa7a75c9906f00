from __future__ import annotations

from typing import List, Literal, Mapping, Sequence, TypeAlias, Union

import numpy as np
import pandas as pd

from .roster import Agent, DayBlock, resolve_block
from .timeutils import BUCKETS, DateLike, Weekday, bucket_bounds, bucket_label, to_date
from .vacations import Vacations, is_on_vacation

SegmentType: TypeAlias = Literal["work", "break", "off"]


# -----------------------------
# Helpers
# -----------------------------
def _overlap(a_start: int, a_end: int, b_start: int, b_end: int) -> int:
    return max(0, min(a_end, b_end) - max(a_start, b_start))


def _bucket_minutes(block: DayBlock, k: int) -> tuple[int, int]:
    """Returns (work, brk) minutes of block inside bucket k."""
    hs, he = bucket_bounds(k)
    work = _overlap(block.start_min, block.end_min, hs, he)

    brk = 0
    if block.has_break:
        bs = int(block.break_start_min)  # type: ignore[arg-type]
        brk = _overlap(bs, bs + block.break_mins, hs, he)

    return work, brk


def _names(agents: Sequence[Union[Agent, str]]) -> List[str]:
    return [a.name if isinstance(a, Agent) else str(a) for a in agents]


# -----------------------------
# Public API
# -----------------------------
def block_presence(block: DayBlock) -> np.ndarray:
    """0/1 per bucket: 1 when net presence (work minus break) is positive."""
    out = np.zeros(BUCKETS, dtype=int)
    if not block.active:
        return out

    for k in range(BUCKETS):
        work, brk = _bucket_minutes(block, k)
        if work - brk > 0:
            out[k] = 1
    return out


def compute_coverage(
    roster: Mapping[str, Mapping[Weekday, DayBlock]],
    agents: Sequence[Union[Agent, str]],
    weekday: Weekday,
    date: DateLike,
    vacations: Vacations,
) -> np.ndarray:
    """
    Headcount covering each half-hour bucket of `date`.

    Agents on vacation that day are skipped; missing roster entries resolve to
    the default block. An agent counts as one full head in any bucket where it
    has at least one minute of net presence.
    """
    day = to_date(date)
    cov = np.zeros(BUCKETS, dtype=int)

    for name in _names(agents):
        if is_on_vacation(vacations, name, day):
            continue
        cov += block_presence(resolve_block(roster, name, weekday))

    return cov


def agent_timeline(block: DayBlock) -> List[SegmentType]:
    """Per-bucket state of one block: work, break or off."""
    out: List[SegmentType] = []
    for k in range(BUCKETS):
        work, brk = _bucket_minutes(block, k)
        net = work - brk
        if net > 0:
            out.append("work")
        elif brk > 0:
            out.append("break")
        else:
            out.append("off")
    return out


def interval_table(
    coverage: np.ndarray,
    expected: np.ndarray,
    required: np.ndarray,
    load_pct: np.ndarray,
) -> pd.DataFrame:
    """
    Zips the engines' outputs per bucket for charts and gap analysis.

    `load` is the normalised half-hour load rescaled so that its peak sits at
    the top of the headcount axis.
    """
    for label, arr in (("coverage", coverage), ("expected", expected), ("required", required), ("load_pct", load_pct)):
        if len(arr) != BUCKETS:
            raise ValueError(f"{label} must have {BUCKETS} values (got {len(arr)})")

    cov = np.asarray(coverage, dtype=int)
    req = np.asarray(required, dtype=int)
    pct = np.asarray(load_pct, dtype=float)

    total = float(pct.sum()) or 1.0
    share = pct / total
    peak = float(share.max())
    top = max(1, int(cov.max()), int(req.max()))
    load = np.round(share * (top / peak), 2) if peak > 0 else np.zeros(BUCKETS)

    return pd.DataFrame(
        {
            "bucket": np.arange(BUCKETS),
            "label": [bucket_label(k) for k in range(BUCKETS)],
            "coverage": cov,
            "expected_volume": np.asarray(expected, dtype=float),
            "required": req,
            "gap": cov - req,
            "load": load,
        }
    )


__all__ = [
    "SegmentType",
    "block_presence",
    "compute_coverage",
    "agent_timeline",
    "interval_table",
]
