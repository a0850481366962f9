"""
Progress Router
===============
GET /api/v1/progress?days=30              — Chart data for the last N days.
GET /api/v1/progress/counts               — Dashboard totals over all sessions.
GET /api/v1/progress/calendar?year=&month= — Month grid with activity flags.

Everything is recomputed from the session store on each request. The
progress view offers 7 / 30 / 90 day windows but any positive number of
days is accepted.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Query

from zenfit.models.progress import ActivityCounts, CalendarMonth, ProgressSummary
from zenfit.services.derivation import (
    DEFAULT_WINDOW_DAYS,
    activity_counts,
    chronological,
    month_calendar,
    progress_summary,
)
from zenfit.services.session_store import get_session_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/progress", tags=["progress"])


@router.get(
    "",
    response_model=ProgressSummary,
    summary="Running series and top exercise volumes for a time window",
    description=(
        "Running sessions as (date, distance, time) points in chronological "
        "order, plus the 8 exercises with the most volume (reps x weight) "
        "inside the window."
    ),
)
async def get_progress(
    days: int = Query(DEFAULT_WINDOW_DAYS, ge=1, description="Window size in calendar days"),
) -> ProgressSummary:
    sessions = chronological(get_session_store())
    return progress_summary(sessions, window_days=days)


@router.get(
    "/counts",
    response_model=ActivityCounts,
    summary="Total, gym and running session counts",
)
async def get_counts() -> ActivityCounts:
    return activity_counts(get_session_store().list_all())


@router.get(
    "/calendar",
    response_model=CalendarMonth,
    summary="Month calendar with per-day activity",
)
async def get_calendar(
    year: Optional[int] = Query(None, ge=1, le=9999),
    month: Optional[int] = Query(None, ge=1, le=12),
) -> CalendarMonth:
    today = date.today()
    return month_calendar(
        get_session_store(),
        year or today.year,
        month or today.month,
        today=today,
    )
