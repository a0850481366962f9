"""
Derivation Service
==================
Pure functions that turn stored sessions into what the views render:

  chronological:      every session, oldest date first
  filter_by_recency:  sessions inside the last N calendar days
  exercise_volumes:   reps x weight summed per exercise name, largest first
  running_series:     (date, distance, time) per run for the line chart
  interval_totals:    auto-computed total of an interval run
  month_calendar:     Monday-first month grid with per-day activity flags

Nothing here caches. Callers recompute from the current store state each
time, so results always reflect the latest mutation. ``today`` defaults
to the wall-clock date at call time, which means a result can change
across midnight without any data changing.
"""

from __future__ import annotations

import calendar
import math
from datetime import date, timedelta
from typing import TYPE_CHECKING, Iterable, Optional

import pandas as pd

from zenfit.models.progress import (
    ActivityCounts,
    CalendarDay,
    CalendarMonth,
    ExerciseVolume,
    ProgressSummary,
    RunningPoint,
)

if TYPE_CHECKING:
    from zenfit.models.workout import RunningActivity, WorkoutSession
    from zenfit.services.session_store import SessionStore

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

SUPPORTED_WINDOWS = (7, 30, 90)
DEFAULT_WINDOW_DAYS = 30
TOP_EXERCISES = 8
ADVISORY_SESSION_COUNT = 8


# ---------------------------------------------------------------------------
# Session lists
# ---------------------------------------------------------------------------

def chronological(store: SessionStore) -> list[WorkoutSession]:
    return store.list_all()


def recent_sessions(store: SessionStore, count: int = ADVISORY_SESSION_COUNT) -> list[WorkoutSession]:
    """The last *count* sessions in chronological order (the advisory input)."""
    return chronological(store)[-count:]


def filter_by_recency(
    sessions: Iterable[WorkoutSession],
    window_days: int,
    today: Optional[date] = None,
) -> list[WorkoutSession]:
    """Keep sessions dated on or after ``today - window_days``.

    The lower bound is inclusive: with a 7-day window on the 15th, a
    session on the 8th is kept and one on the 7th is not.
    """
    if window_days < 1:
        raise ValueError(f"window_days must be a positive integer, got {window_days}")
    today = today or date.today()
    # ISO dates compare correctly as strings
    cutoff = (today - timedelta(days=window_days)).isoformat()
    return [s for s in sessions if s.date >= cutoff]


def activity_counts(sessions: Iterable[WorkoutSession]) -> ActivityCounts:
    counts = ActivityCounts()
    for s in sessions:
        counts.total += 1
        if s.type == "gym":
            counts.gym += 1
        else:
            counts.running += 1
    return counts


# ---------------------------------------------------------------------------
# Chart series
# ---------------------------------------------------------------------------

def exercise_volumes(
    sessions: Iterable[WorkoutSession],
    limit: Optional[int] = None,
) -> list[ExerciseVolume]:
    """Total volume per exercise name across every gym session given.

    Sorted by volume, largest first. Equal volumes keep the order in which
    the names were first seen.
    """
    rows = [
        {"name": ex.name, "volume": ex.volume}
        for s in sessions
        if s.type == "gym" and s.gym is not None
        for ex in s.gym.exercises
    ]
    if not rows:
        return []

    df = pd.DataFrame(rows)
    totals = df.groupby("name", sort=False)["volume"].sum().reset_index()
    # groupby(sort=False) keeps first-appearance order; pin it for the tie-break
    totals["first_seen"] = range(len(totals))
    totals = totals.sort_values(["volume", "first_seen"], ascending=[False, True])
    if limit is not None:
        totals = totals.head(limit)

    return [
        ExerciseVolume(name=str(row.name), volume=float(row.volume))
        for row in totals.itertuples(index=False)
    ]


def running_series(sessions: Iterable[WorkoutSession]) -> list[RunningPoint]:
    """One point per running session, in the order given (no re-sort)."""
    return [
        RunningPoint(
            date=s.date,
            distance=s.running.distance,
            time_minutes=s.running.time_minutes,
        )
        for s in sessions
        if s.type == "running" and s.running is not None
    ]


def progress_summary(
    sessions: Iterable[WorkoutSession],
    window_days: int = DEFAULT_WINDOW_DAYS,
    today: Optional[date] = None,
) -> ProgressSummary:
    """Bundle the progress view's data for one window over chronological *sessions*."""
    recent = filter_by_recency(sessions, window_days, today=today)
    return ProgressSummary(
        window_days=window_days,
        running_series=running_series(recent),
        exercise_volumes=exercise_volumes(recent, limit=TOP_EXERCISES),
        counts=activity_counts(recent),
    )


# ---------------------------------------------------------------------------
# Interval running
# ---------------------------------------------------------------------------

def interval_totals(
    is_interval: bool,
    interval_count: Optional[int],
    interval_value: Optional[float],
    interval_type: Optional[str],
) -> Optional[tuple[str, float | int]]:
    """Return ``(field, total)`` for the derived side of an interval run.

    ``field`` is ``"distance"`` (km, 2 decimals) or ``"time_minutes"``
    (whole minutes, half rounds up). Continuous runs derive nothing and
    get ``None``.
    """
    if not is_interval:
        return None
    total = (interval_count or 0) * (interval_value or 0.0)
    if interval_type == "time":
        return "time_minutes", int(math.floor(total + 0.5))
    return "distance", round(total, 2)


def apply_interval_totals(activity: RunningActivity) -> RunningActivity:
    """Copy of *activity* with its derived total recomputed. Only one field changes."""
    derived = interval_totals(
        activity.is_interval,
        activity.interval_count,
        activity.interval_value,
        activity.interval_type,
    )
    if derived is None:
        return activity
    field, value = derived
    return activity.model_copy(update={field: value})


# ---------------------------------------------------------------------------
# Calendar
# ---------------------------------------------------------------------------

def month_calendar(
    store: SessionStore,
    year: int,
    month: int,
    today: Optional[date] = None,
) -> CalendarMonth:
    """Lay out *month* Monday-first and mark which days have gym / running sessions."""
    first_weekday, num_days = calendar.monthrange(year, month)
    today_str = (today or date.today()).isoformat()

    days: list[CalendarDay] = []
    for day in range(1, num_days + 1):
        day_str = date(year, month, day).isoformat()
        day_sessions = store.list_sessions(day_str)
        days.append(
            CalendarDay(
                date=day_str,
                day=day,
                session_count=len(day_sessions),
                has_gym=any(s.type == "gym" for s in day_sessions),
                has_running=any(s.type == "running" for s in day_sessions),
                is_today=day_str == today_str,
            )
        )

    return CalendarMonth(
        year=year,
        month=month,
        # monthrange() already counts weekdays from Monday = 0
        leading_blank_days=first_weekday,
        days=days,
    )
