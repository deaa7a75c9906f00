from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from .forecast import ForecastParams
from .roster import Agent, DayBlock, Roster
from .timeutils import DateLike, Weekday, is_weekday, to_date, weekday_of
from .vacations import VacationRange, Vacations, merge_ranges

BRAND = "Montana"
SNAPSHOT_VERSION = 1


@dataclass(frozen=True)
class PlannerState:
    """Everything the planner persists, passed explicitly to the engines."""
    agents: Tuple[Agent, ...] = ()
    roster: Roster = field(default_factory=dict)
    vacations: Vacations = field(default_factory=dict)
    params: ForecastParams = field(default_factory=ForecastParams)
    selected_date: date = field(default_factory=date.today)
    selected_day: Optional[Weekday] = None

    def __post_init__(self) -> None:
        if self.selected_day is None:
            object.__setattr__(self, "selected_day", weekday_of(self.selected_date))

    @property
    def day(self) -> Weekday:
        return self.selected_day or weekday_of(self.selected_date)


def with_date(state: PlannerState, d: DateLike) -> PlannerState:
    """Moves the planner to another date; the weekday follows the date."""
    day = to_date(d)
    return replace(state, selected_date=day, selected_day=weekday_of(day))


# -----------------------------
# Encoding
# -----------------------------
def agent_to_dict(agent: Agent) -> Dict[str, Any]:
    return {
        "name": agent.name,
        "country": agent.country,
        "remote": agent.remote,
        "level": agent.level,
        "fridayAllowed": agent.friday_allowed,
        "breakPref": agent.break_pref,
    }


def block_to_dict(block: DayBlock) -> Dict[str, Any]:
    out: Dict[str, Any] = {
        "active": block.active,
        "startMin": block.start_min,
        "endMin": block.end_min,
        "breakMins": block.break_mins,
    }
    if block.break_start_min is not None:
        out["breakStartMin"] = block.break_start_min
    return out


def to_snapshot(state: PlannerState, saved_at: Optional[datetime] = None) -> Dict[str, Any]:
    """Flat JSON-ready snapshot of the planner state."""
    ts = saved_at or datetime.now(timezone.utc)
    params = state.params
    return {
        "agents": [agent_to_dict(a) for a in state.agents],
        "roster": {
            name: {day: block_to_dict(blk) for day, blk in week.items()}
            for name, week in state.roster.items()
        },
        "dailyAvg": {day: float(v) for day, v in params.daily_avg.items()},
        "hourlyPctByDay": {day: [float(v) for v in hourly] for day, hourly in params.hourly_pct_by_day.items()},
        "ahtMin": float(params.aht_min),
        "occupancy": float(params.occupancy),
        "serviceBuffer": int(params.service_buffer),
        "selectedDate": state.selected_date.isoformat(),
        "selectedDay": state.day,
        "vacations": {
            name: [{"start": r.start.isoformat(), "end": r.end.isoformat()} for r in ranges]
            for name, ranges in state.vacations.items()
            if ranges
        },
        "brand": BRAND,
        "version": SNAPSHOT_VERSION,
        "savedAt": ts.isoformat(),
    }


# -----------------------------
# Decoding
# -----------------------------
def _is_number(v: Any) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool)


def agent_from_dict(d: Mapping[str, Any]) -> Agent:
    name = str(d.get("name", "")).strip()
    if not name:
        raise ValueError("Agent record is missing a name")
    return Agent(
        name=name,
        country=str(d.get("country", "SA")),
        remote=bool(d.get("remote", True)),
        level=d.get("level", "junior"),
        friday_allowed=bool(d.get("fridayAllowed", True)),
        break_pref=str(d.get("breakPref", "60")),  # type: ignore[arg-type]
    )


def block_from_dict(d: Mapping[str, Any]) -> DayBlock:
    """A stored break length without a break start is read as no break."""
    break_start = d.get("breakStartMin")
    break_mins = max(0, int(d.get("breakMins") or 0))
    if break_start is None:
        break_mins = 0
    return DayBlock(
        active=bool(d.get("active", False)),
        start_min=int(d["startMin"]),
        end_min=int(d["endMin"]),
        break_start_min=int(break_start) if break_start is not None else None,
        break_mins=break_mins,
    )


def _roster_from_json(data: Mapping[str, Any]) -> Roster:
    out: Roster = {}
    for name, week in data.items():
        if not isinstance(week, Mapping):
            raise ValueError(f"Roster entry for {name!r} must be an object")
        out[name] = {day: block_from_dict(blk) for day, blk in week.items() if is_weekday(day)}
    return out


def _vacations_from_json(data: Mapping[str, Any]) -> Vacations:
    out: Vacations = {}
    for name, ranges in data.items():
        parsed: List[VacationRange] = []
        for r in ranges or []:
            start, end = to_date(r["start"]), to_date(r["end"])
            if start > end:
                raise ValueError(f"Vacation range for {name!r} ends before it starts: {r}")
            parsed.append(VacationRange(start=start, end=end))
        if parsed:
            out[name] = merge_ranges(parsed)
    return out


def _params_from_json(data: Mapping[str, Any], base: ForecastParams) -> ForecastParams:
    changes: Dict[str, Any] = {}

    if _is_number(data.get("ahtMin")):
        changes["aht_min"] = float(data["ahtMin"])
    if _is_number(data.get("occupancy")):
        changes["occupancy"] = float(data["occupancy"])
    if _is_number(data.get("serviceBuffer")):
        changes["service_buffer"] = int(data["serviceBuffer"])

    if isinstance(data.get("dailyAvg"), Mapping):
        merged = dict(base.daily_avg)
        merged.update({d: float(v) for d, v in data["dailyAvg"].items() if is_weekday(d) and _is_number(v)})
        changes["daily_avg"] = merged

    if isinstance(data.get("hourlyPctByDay"), Mapping):
        merged_h: Dict[Weekday, Sequence[float]] = dict(base.hourly_pct_by_day)
        for d, hourly in data["hourlyPctByDay"].items():
            if is_weekday(d) and isinstance(hourly, list):
                merged_h[d] = tuple(float(v) for v in hourly)
        changes["hourly_pct_by_day"] = merged_h

    return replace(base, **changes) if changes else base


def from_snapshot(data: Mapping[str, Any], base: Optional[PlannerState] = None) -> PlannerState:
    """
    Rebuilds a PlannerState from a stored snapshot.

    Keys that are absent or of the wrong JSON type keep the value from `base`.
    Malformed nested records raise ValueError.
    """
    state = base or PlannerState()
    if not data:
        return state

    changes: Dict[str, Any] = {}

    if isinstance(data.get("agents"), list):
        changes["agents"] = tuple(agent_from_dict(a) for a in data["agents"])
    if isinstance(data.get("roster"), Mapping):
        changes["roster"] = _roster_from_json(data["roster"])
    if isinstance(data.get("vacations"), Mapping):
        changes["vacations"] = _vacations_from_json(data["vacations"])

    changes["params"] = _params_from_json(data, state.params)

    if isinstance(data.get("selectedDate"), str):
        selected = to_date(data["selectedDate"])
        changes["selected_date"] = selected
        changes["selected_day"] = weekday_of(selected)
    if is_weekday(data.get("selectedDay")):
        changes["selected_day"] = data["selectedDay"]

    return replace(state, **changes)


__all__ = [
    "BRAND",
    "SNAPSHOT_VERSION",
    "PlannerState",
    "with_date",
    "agent_to_dict",
    "block_to_dict",
    "to_snapshot",
    "agent_from_dict",
    "block_from_dict",
    "from_snapshot",
]
