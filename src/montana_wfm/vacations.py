from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, List, Mapping, Tuple, TypeAlias

from .timeutils import DateLike, add_days, to_date


class InvalidRange(ValueError):
    """Raised when a vacation range ends before it starts."""


@dataclass(frozen=True)
class VacationRange:
    """Inclusive date range [start, end]."""
    start: date
    end: date

    def contains(self, d: date) -> bool:
        return self.start <= d <= self.end


Vacations: TypeAlias = Dict[str, Tuple[VacationRange, ...]]


# -----------------------------
# Queries
# -----------------------------
def is_on_vacation(vacations: Mapping[str, Iterable[VacationRange]], agent: str, d: DateLike) -> bool:
    day = to_date(d)
    for r in vacations.get(agent, ()):
        if r.contains(day):
            return True
    return False


def agents_on_vacation(
    vacations: Mapping[str, Iterable[VacationRange]],
    agents: Iterable[str],
    d: DateLike,
) -> List[str]:
    day = to_date(d)
    return sorted(name for name in agents if is_on_vacation(vacations, name, day))


# -----------------------------
# Merge
# -----------------------------
def merge_ranges(ranges: Iterable[VacationRange]) -> Tuple[VacationRange, ...]:
    """
    Sorts by start and merges overlapping or adjacent ranges.
    Adjacent means B.start == A.end + 1 day.
    """
    ordered = sorted(ranges, key=lambda r: (r.start, r.end))
    out: List[VacationRange] = []

    for r in ordered:
        if not out:
            out.append(r)
            continue
        last = out[-1]
        if r.start <= add_days(last.end, 1):
            if r.end > last.end:
                out[-1] = VacationRange(start=last.start, end=r.end)
        else:
            out.append(r)

    return tuple(out)


# -----------------------------
# Updates (all return a new mapping)
# -----------------------------
def add_range(vacations: Mapping[str, Tuple[VacationRange, ...]], agent: str, start: DateLike, end: DateLike) -> Vacations:
    s, e = to_date(start), to_date(end)
    if s > e:
        raise InvalidRange(f"End date must be on or after start date (start={s.isoformat()}, end={e.isoformat()})")

    out: Vacations = dict(vacations)
    out[agent] = merge_ranges([*vacations.get(agent, ()), VacationRange(start=s, end=e)])
    return out


def remove_range(vacations: Mapping[str, Tuple[VacationRange, ...]], agent: str, index: int) -> Vacations:
    ranges = list(vacations.get(agent, ()))
    if not (0 <= index < len(ranges)):
        raise IndexError(f"No vacation range at index {index} for agent {agent!r}")

    del ranges[index]

    out: Vacations = dict(vacations)
    if ranges:
        out[agent] = tuple(ranges)
    else:
        out.pop(agent, None)
    return out


def clear_agent(vacations: Mapping[str, Tuple[VacationRange, ...]], agent: str) -> Vacations:
    out: Vacations = dict(vacations)
    out.pop(agent, None)
    return out


__all__ = [
    "InvalidRange",
    "VacationRange",
    "Vacations",
    "is_on_vacation",
    "agents_on_vacation",
    "merge_ranges",
    "add_range",
    "remove_range",
    "clear_agent",
]
