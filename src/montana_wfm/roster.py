from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict, List, Literal, Mapping, Optional, Sequence, Tuple, TypeAlias

from .timeutils import WEEKDAYS, Weekday
from .vacations import Vacations, clear_agent

Level: TypeAlias = Literal["junior", "mid", "senior"]
BreakPref: TypeAlias = Literal["none", "60"]

LEVELS: Tuple[Level, ...] = ("junior", "mid", "senior")
BREAK_PREFS: Tuple[BreakPref, ...] = ("none", "60")


class DuplicateAgent(ValueError):
    """Raised when adding an agent whose name is already taken."""


# -----------------------------
# Data models
# -----------------------------
@dataclass(frozen=True)
class DayBlock:
    """
    One agent's working window for one weekday.

    Minutes are counted from local midnight. A block with end_min <= start_min
    is a degenerate empty interval and covers nothing.
    """
    active: bool
    start_min: int
    end_min: int
    break_start_min: Optional[int] = None
    break_mins: int = 0

    def __post_init__(self) -> None:
        if self.break_mins < 0:
            raise ValueError("break_mins must be >= 0")
        if self.break_mins > 0 and self.break_start_min is None:
            raise ValueError("break_start_min is required when break_mins > 0")

    @property
    def has_break(self) -> bool:
        return self.break_mins > 0 and self.break_start_min is not None


@dataclass(frozen=True)
class Agent:
    name: str
    country: str = "SA"
    remote: bool = True
    level: Level = "junior"
    friday_allowed: bool = True
    break_pref: BreakPref = "60"

    def __post_init__(self) -> None:
        if self.level not in LEVELS:
            raise ValueError(f"Unsupported level: {self.level}")
        if self.break_pref not in BREAK_PREFS:
            raise ValueError(f"Unsupported break_pref: {self.break_pref}")


Roster: TypeAlias = Dict[str, Dict[Weekday, DayBlock]]

DEFAULT_START_MIN: int = 9 * 60
DEFAULT_END_MIN: int = 17 * 60
DEFAULT_BREAK_START_MIN: int = 13 * 60
DEFAULT_BREAK_MINS: int = 60

DEFAULT_DAY = DayBlock(
    active=True,
    start_min=DEFAULT_START_MIN,
    end_min=DEFAULT_END_MIN,
    break_start_min=DEFAULT_BREAK_START_MIN,
    break_mins=DEFAULT_BREAK_MINS,
)


# -----------------------------
# Lookups
# -----------------------------
def resolve_block(roster: Mapping[str, Mapping[Weekday, DayBlock]], agent: str, weekday: Weekday) -> DayBlock:
    """Stored block for (agent, weekday), or DEFAULT_DAY when absent."""
    return roster.get(agent, {}).get(weekday, DEFAULT_DAY)


def agent_names(agents: Sequence[Agent]) -> List[str]:
    return [a.name for a in agents]


def find_agent(agents: Sequence[Agent], name: str) -> Optional[Agent]:
    for a in agents:
        if a.name == name:
            return a
    return None


def filter_agents(agents: Sequence[Agent], level: str = "all") -> List[Agent]:
    if level == "all":
        return list(agents)
    return [a for a in agents if a.level == level]


# -----------------------------
# Week seeding
# -----------------------------
def default_week(agent: Agent) -> Dict[Weekday, DayBlock]:
    """09:00-17:00 every day; Friday only if allowed; lunch break if preferred."""
    with_break = agent.break_pref == "60"
    week: Dict[Weekday, DayBlock] = {}
    for d in WEEKDAYS:
        week[d] = DayBlock(
            active=agent.friday_allowed if d == "Friday" else True,
            start_min=DEFAULT_START_MIN,
            end_min=DEFAULT_END_MIN,
            break_start_min=DEFAULT_BREAK_START_MIN if with_break else None,
            break_mins=DEFAULT_BREAK_MINS if with_break else 0,
        )
    return week


def auto_plan(agents: Sequence[Agent], roster: Mapping[str, Mapping[Weekday, DayBlock]]) -> Roster:
    """Re-seeds every listed agent's week; other roster entries are kept."""
    out: Roster = {name: dict(week) for name, week in roster.items()}
    for a in agents:
        out[a.name] = default_week(a)
    return out


# -----------------------------
# Agent management
# -----------------------------
def add_agent(
    agents: Sequence[Agent],
    roster: Mapping[str, Mapping[Weekday, DayBlock]],
    agent: Agent,
) -> Tuple[List[Agent], Roster]:
    name = agent.name.strip()
    if not name:
        raise ValueError("Agent name must not be empty")
    if find_agent(agents, name) is not None:
        raise DuplicateAgent(f"Agent with this name already exists: {name}")

    if name != agent.name:
        agent = replace(agent, name=name)

    out_roster: Roster = {n: dict(week) for n, week in roster.items()}
    out_roster[name] = default_week(agent)
    return [*agents, agent], out_roster


def remove_agent(
    agents: Sequence[Agent],
    roster: Mapping[str, Mapping[Weekday, DayBlock]],
    vacations: Vacations,
    name: str,
) -> Tuple[List[Agent], Roster, Vacations]:
    """Drops the agent and cascades to its roster and vacation entries."""
    out_agents = [a for a in agents if a.name != name]
    out_roster: Roster = {n: dict(week) for n, week in roster.items() if n != name}
    return out_agents, out_roster, clear_agent(vacations, name)


def set_block(
    roster: Mapping[str, Mapping[Weekday, DayBlock]],
    agent: str,
    weekday: Weekday,
    **changes: Any,
) -> Roster:
    """
    Replaces one day's block, starting from the resolved block.

    Example: set_block(roster, "Sara", "Monday", start_min=600)
    """
    block = replace(resolve_block(roster, agent, weekday), **changes)
    out: Roster = {n: dict(week) for n, week in roster.items()}
    out.setdefault(agent, {})[weekday] = block
    return out


__all__ = [
    "Level",
    "BreakPref",
    "LEVELS",
    "BREAK_PREFS",
    "DuplicateAgent",
    "DayBlock",
    "Agent",
    "Roster",
    "DEFAULT_DAY",
    "resolve_block",
    "agent_names",
    "find_agent",
    "filter_agents",
    "default_week",
    "auto_plan",
    "add_agent",
    "remove_agent",
    "set_block",
]
