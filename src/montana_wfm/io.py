from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from io import StringIO
from typing import IO, List, Mapping, Sequence, Union

import pandas as pd

from .roster import (
    DEFAULT_END_MIN,
    DEFAULT_START_MIN,
    Agent,
    DayBlock,
    Roster,
    find_agent,
    resolve_block,
)
from .timeutils import WEEKDAYS, Weekday, is_weekday, parse_hhmm, parse_leading_int, to_hhmm

logger = logging.getLogger(__name__)


REQUIRED_COLUMNS = ["agent", "day", "active", "start", "end", "break_start", "break_minutes"]


class SchemaError(ValueError):
    """Raised when a roster CSV lacks one or more required columns."""


@dataclass(frozen=True)
class ImportResult:
    agents: List[Agent]
    roster: Roster
    applied: int
    skipped: int


# -----------------------------
# Export
# -----------------------------
def roster_to_frame(roster: Mapping[str, Mapping[Weekday, DayBlock]], agents: Sequence[Agent]) -> pd.DataFrame:
    """One row per (agent, weekday), agents in list order, weekdays in site order."""
    rows = []
    for a in agents:
        for d in WEEKDAYS:
            blk = resolve_block(roster, a.name, d)
            rows.append(
                {
                    "agent": a.name,
                    "day": d,
                    "active": "1" if blk.active else "0",
                    "start": to_hhmm(blk.start_min),
                    "end": to_hhmm(blk.end_min),
                    "break_start": to_hhmm(blk.break_start_min) if blk.break_start_min is not None else "",
                    "break_minutes": str(int(blk.break_mins or 0)),
                }
            )
    return pd.DataFrame(rows, columns=REQUIRED_COLUMNS)


def export_roster_csv(roster: Mapping[str, Mapping[Weekday, DayBlock]], agents: Sequence[Agent]) -> str:
    return roster_to_frame(roster, agents).to_csv(index=False, lineterminator="\n")


# -----------------------------
# Import
# -----------------------------
def read_roster_csv(file: Union[str, os.PathLike, IO[bytes], IO[str]]) -> pd.DataFrame:
    """
    Reads a roster CSV as strings.

    Headers and cells are trimmed; empty cells are kept as "".
    Column order does not matter, only header names. Cells past the header
    width are dropped.
    """
    text = _read_text(file)
    try:
        width = len(pd.read_csv(StringIO(text), nrows=0).columns)
        df = pd.read_csv(
            StringIO(text),
            dtype=str,
            keep_default_na=False,
            engine="python",
            on_bad_lines=lambda cells: cells[:width],
        )
    except pd.errors.EmptyDataError as e:
        raise SchemaError(f"Roster CSV is empty. Required columns: {REQUIRED_COLUMNS}") from e
    except pd.errors.ParserError as e:
        raise SchemaError(f"Roster CSV could not be parsed: {e}") from e

    df = df.copy()
    df.columns = [str(c).strip() for c in df.columns]
    _check_columns(df)

    df = df.fillna("")
    for c in df.columns:
        df[c] = df[c].astype(str).str.strip()
    return df


def _read_text(file: Union[str, os.PathLike, IO[bytes], IO[str]]) -> str:
    if hasattr(file, "read"):
        raw = file.read()
    else:
        with open(file, "rb") as fh:
            raw = fh.read()
    if isinstance(raw, bytes):
        try:
            return raw.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise SchemaError(f"Roster CSV is not UTF-8 text: {e}") from e
    return raw


def _check_columns(df: pd.DataFrame) -> None:
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise SchemaError(f"Missing required columns: {missing}. Required: {REQUIRED_COLUMNS}")


def _parse_active(raw: str) -> bool:
    return raw == "1" or raw.strip().lower() == "true"


def row_to_block(row: Mapping[str, str]) -> DayBlock:
    """
    Maps one CSV row to a DayBlock.

    Bad or missing start/end fall back to 09:00/17:00. A break is kept only
    when break_minutes > 0 and break_start parses.
    """
    start = parse_hhmm(row.get("start"))
    end = parse_hhmm(row.get("end"))
    break_start = parse_hhmm(row.get("break_start"))

    break_mins = parse_leading_int(row.get("break_minutes") or "0") or 0
    break_mins = max(0, break_mins)
    if break_mins == 0 or break_start is None:
        break_start, break_mins = None, 0

    return DayBlock(
        active=_parse_active(str(row.get("active", ""))),
        start_min=start if start is not None else DEFAULT_START_MIN,
        end_min=end if end is not None else DEFAULT_END_MIN,
        break_start_min=break_start,
        break_mins=break_mins,
    )


def import_roster_rows(
    df: pd.DataFrame,
    agents: Sequence[Agent],
    roster: Mapping[str, Mapping[Weekday, DayBlock]],
) -> ImportResult:
    """
    Applies roster rows on top of the current agents and roster.

    Rows with an unknown day or an empty agent are skipped. Unknown agents are
    created with default attributes. Each row replaces the (agent, day) block.
    Inputs are not mutated.
    """
    _check_columns(df)

    out_agents = list(agents)
    out_roster: Roster = {n: dict(week) for n, week in roster.items()}
    applied = 0
    skipped = 0

    for row in df.to_dict("records"):
        name = str(row.get("agent", "") or "").strip()
        day = str(row.get("day", "") or "").strip()
        if not name or not is_weekday(day):
            skipped += 1
            continue

        if find_agent(out_agents, name) is None:
            out_agents.append(Agent(name=name))
            logger.info("Import created agent %s", name)

        out_roster.setdefault(name, {})[day] = row_to_block(row)  # type: ignore[index]
        applied += 1

    logger.info("Roster import: %d rows applied, %d skipped", applied, skipped)
    return ImportResult(agents=out_agents, roster=out_roster, applied=applied, skipped=skipped)


def import_roster_csv(
    file: Union[str, os.PathLike, IO[bytes], IO[str]],
    agents: Sequence[Agent],
    roster: Mapping[str, Mapping[Weekday, DayBlock]],
) -> ImportResult:
    return import_roster_rows(read_roster_csv(file), agents, roster)


__all__ = [
    "REQUIRED_COLUMNS",
    "SchemaError",
    "ImportResult",
    "roster_to_frame",
    "export_roster_csv",
    "read_roster_csv",
    "row_to_block",
    "import_roster_rows",
    "import_roster_csv",
]
