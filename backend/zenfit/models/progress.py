"""
Progress Schemas
================
Aggregates derived from the session store for the dashboard, the
progress charts and the calendar grid. Nothing here is persisted.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class RunningPoint(BaseModel):
    """One running session on the distance/time chart."""
    date: str
    distance: float
    time_minutes: int


class ExerciseVolume(BaseModel):
    """Summed reps x weight for every exercise sharing a name."""
    name: str
    volume: float


class ActivityCounts(BaseModel):
    total: int = 0
    gym: int = 0
    running: int = 0


class ProgressSummary(BaseModel):
    """Everything the progress view renders for one time window."""
    window_days: int
    running_series: list[RunningPoint]
    exercise_volumes: list[ExerciseVolume]
    counts: ActivityCounts


class CalendarDay(BaseModel):
    date: str
    day: int
    session_count: int = 0
    has_gym: bool = False
    has_running: bool = False
    is_today: bool = False


class CalendarMonth(BaseModel):
    """A month laid out Monday-first, as the calendar grid draws it."""
    year: int
    month: int = Field(..., ge=1, le=12)
    leading_blank_days: int = Field(
        ...,
        ge=0,
        le=6,
        description="Empty cells before day 1 when weeks start on Monday.",
    )
    days: list[CalendarDay]
