from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Mapping, Sequence, Tuple

import numpy as np

from .timeutils import BUCKET_MINUTES, BUCKETS, WEEKDAYS, Weekday


# Montana hourly ticket share (24h), used for every weekday unless edited.
HOURLY_LOAD_PCT_DEFAULT: Tuple[float, ...] = (
    3.0, 1.5, 1.0, 0.8, 0.8, 0.9, 1.2, 2.0,
    3.5, 4.0, 5.0, 6.0, 6.5, 6.8, 7.0, 7.2,
    7.0, 6.5, 6.0, 5.0, 4.0, 3.0, 2.0, 1.5,
)

MONTANA_DAILY_AVG: float = 650.0

# Denominator floor for the agents-per-bucket conversion.
MIN_CAPACITY_MINUTES: float = 0.1


def _default_daily_avg() -> Dict[Weekday, float]:
    return {d: MONTANA_DAILY_AVG for d in WEEKDAYS}


def _default_hourly() -> Dict[Weekday, Tuple[float, ...]]:
    return {d: HOURLY_LOAD_PCT_DEFAULT for d in WEEKDAYS}


# -----------------------------
# Data models
# -----------------------------
@dataclass(frozen=True)
class ForecastParams:
    aht_min: float = 6.0
    occupancy: float = 0.85
    service_buffer: int = 0
    daily_avg: Mapping[Weekday, float] = field(default_factory=_default_daily_avg)
    hourly_pct_by_day: Mapping[Weekday, Sequence[float]] = field(default_factory=_default_hourly)

    def __post_init__(self) -> None:
        _validate_params(self)

    def daily_avg_for(self, weekday: Weekday) -> float:
        return float(self.daily_avg.get(weekday, MONTANA_DAILY_AVG))

    def hourly_for(self, weekday: Weekday) -> Sequence[float]:
        return self.hourly_pct_by_day.get(weekday, HOURLY_LOAD_PCT_DEFAULT)


@dataclass(frozen=True)
class DayForecast:
    load_pct: np.ndarray
    expected: np.ndarray
    required: np.ndarray


# -----------------------------
# Internal helpers
# -----------------------------
def _validate_params(params: ForecastParams) -> None:
    if params.aht_min <= 0:
        raise ValueError("aht_min must be > 0")

    if params.occupancy < 0:
        raise ValueError("occupancy must be >= 0")

    if int(params.service_buffer) != params.service_buffer or params.service_buffer < 0:
        raise ValueError("service_buffer must be an integer >= 0")

    for day, v in params.daily_avg.items():
        if v < 0:
            raise ValueError(f"daily_avg for {day} must be >= 0")

    for day, hourly in params.hourly_pct_by_day.items():
        _validate_hourly(hourly, label=str(day))


def _validate_hourly(hourly: Sequence[float], label: str = "hourly") -> np.ndarray:
    arr = np.asarray(hourly, dtype=float)
    if arr.shape != (24,):
        raise ValueError(f"{label}: hourly load profile must have 24 values (got {arr.size})")
    if np.isnan(arr).any():
        raise ValueError(f"{label}: hourly load profile must be numeric")
    if (arr < 0).any():
        raise ValueError(f"{label}: hourly load percentages must be nonnegative")
    return arr


# -----------------------------
# Public API
# -----------------------------
def half_hour_load_pct(hourly: Sequence[float]) -> np.ndarray:
    """
    Splits each hourly share evenly into its two half-hour buckets.
    Assumes a uniform arrival rate within the hour.
    """
    arr = _validate_hourly(hourly)
    return np.repeat(arr / 2.0, 2)


def expected_volume(hourly: Sequence[float], daily_avg: float) -> np.ndarray:
    """
    Expected tickets per half-hour bucket.

    The profile does not need to sum to 100; it is normalised by its own sum
    (a zero sum is replaced by 1 so the result is all zeros).
    """
    if daily_avg < 0:
        raise ValueError("daily_avg must be >= 0")

    pct = half_hour_load_pct(hourly)
    total = float(pct.sum()) or 1.0
    return float(daily_avg) * (pct / total)


def required_agents(
    expected: np.ndarray,
    aht_min: float,
    occupancy: float,
    service_buffer: int = 0,
) -> np.ndarray:
    """
    Agents needed per bucket:

      ceil(volume * AHT / max(0.1, 30 * occupancy)) + buffer

    volume * AHT is the work demanded in the bucket (minutes); one agent at the
    target occupancy supplies 30 * occupancy productive minutes.
    """
    if aht_min <= 0:
        raise ValueError("aht_min must be > 0")
    if service_buffer < 0:
        raise ValueError("service_buffer must be >= 0")

    vols = np.asarray(expected, dtype=float)
    capacity = max(MIN_CAPACITY_MINUTES, BUCKET_MINUTES * float(occupancy))
    need = np.ceil(vols * float(aht_min) / capacity)
    return need.astype(int) + int(service_buffer)


def forecast_day(params: ForecastParams, weekday: Weekday) -> DayForecast:
    hourly = params.hourly_for(weekday)
    load = half_hour_load_pct(hourly)
    expected = expected_volume(hourly, params.daily_avg_for(weekday))
    required = required_agents(expected, params.aht_min, params.occupancy, params.service_buffer)

    assert len(expected) == BUCKETS
    return DayForecast(load_pct=load, expected=expected, required=required)


__all__ = [
    "HOURLY_LOAD_PCT_DEFAULT",
    "MONTANA_DAILY_AVG",
    "ForecastParams",
    "DayForecast",
    "half_hour_load_pct",
    "expected_volume",
    "required_agents",
    "forecast_day",
]
