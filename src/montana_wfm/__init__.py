from __future__ import annotations

# -----------------------------
# Time / buckets
# -----------------------------
from .timeutils import (
    Weekday,
    WEEKDAYS,
    BUCKETS,
    compare_date,
    add_days,
    weekday_of,
    bucket_label,
)

# -----------------------------
# Vacations
# -----------------------------
from .vacations import (
    InvalidRange,
    VacationRange,
    Vacations,
    is_on_vacation,
    add_range,
    remove_range,
    clear_agent,
)

# -----------------------------
# Roster / agents
# -----------------------------
from .roster import (
    Agent,
    DayBlock,
    DuplicateAgent,
    Roster,
    DEFAULT_DAY,
    resolve_block,
    default_week,
    add_agent,
    remove_agent,
    auto_plan,
    set_block,
)

# -----------------------------
# Engines
# -----------------------------
from .coverage import compute_coverage, agent_timeline, interval_table
from .forecast import (
    ForecastParams,
    DayForecast,
    HOURLY_LOAD_PCT_DEFAULT,
    half_hour_load_pct,
    expected_volume,
    required_agents,
    forecast_day,
)

# -----------------------------
# CSV + snapshot
# -----------------------------
from .io import SchemaError, ImportResult, export_roster_csv, import_roster_csv
from .state import PlannerState, to_snapshot, from_snapshot, with_date

__all__ = [
    # Time
    "Weekday",
    "WEEKDAYS",
    "BUCKETS",
    "compare_date",
    "add_days",
    "weekday_of",
    "bucket_label",
    # Vacations
    "InvalidRange",
    "VacationRange",
    "Vacations",
    "is_on_vacation",
    "add_range",
    "remove_range",
    "clear_agent",
    # Roster
    "Agent",
    "DayBlock",
    "DuplicateAgent",
    "Roster",
    "DEFAULT_DAY",
    "resolve_block",
    "default_week",
    "add_agent",
    "remove_agent",
    "auto_plan",
    "set_block",
    # Engines
    "compute_coverage",
    "agent_timeline",
    "interval_table",
    "ForecastParams",
    "DayForecast",
    "HOURLY_LOAD_PCT_DEFAULT",
    "half_hour_load_pct",
    "expected_volume",
    "required_agents",
    "forecast_day",
    # CSV + snapshot
    "SchemaError",
    "ImportResult",
    "export_roster_csv",
    "import_roster_csv",
    "PlannerState",
    "to_snapshot",
    "from_snapshot",
    "with_date",
]
