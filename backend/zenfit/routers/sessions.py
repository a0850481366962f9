"""
Sessions Router
===============
GET    /api/v1/sessions                     — Every session, oldest first.
GET    /api/v1/sessions/{date}              — Sessions logged on one day.
POST   /api/v1/sessions                     — Log a session.
DELETE /api/v1/sessions/{date}/{session_id} — Delete a session (idempotent).

Running payloads have their interval total recomputed before saving, so
a stored interval run always carries count x value on its derived side.
Gym payloads with no exercises are refused with ``empty_workout``.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Path, Response, status

from zenfit.models.api import SessionCreate
from zenfit.models.workout import (
    DATE_PATTERN,
    GymActivity,
    RunningActivity,
    TaggedActivity,
    WorkoutSession,
)
from zenfit.services.derivation import apply_interval_totals
from zenfit.services.session_store import get_session_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/sessions", tags=["sessions"])


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def check_activity_payload(
    body: TaggedActivity,
) -> tuple[Optional[RunningActivity], Optional[GymActivity]]:
    """Validate the submitted payload and return the (running, gym) pair to store.

    Raises HTTPException 422 when a gym payload has no exercises.
    """
    if body.type == "gym":
        if not body.gym or not body.gym.exercises:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail={"message": "A gym workout needs at least one exercise", "code": "empty_workout"},
            )
        return None, body.gym
    return apply_interval_totals(body.running), None


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get(
    "",
    response_model=list[WorkoutSession],
    response_model_exclude_none=True,
    summary="List every session chronologically",
)
async def list_all_sessions() -> list[WorkoutSession]:
    return get_session_store().list_all()


@router.get(
    "/{date}",
    response_model=list[WorkoutSession],
    response_model_exclude_none=True,
    summary="List the sessions of one day",
    description="Returns an empty list for a day with nothing logged.",
)
async def list_day_sessions(
    date: str = Path(..., pattern=DATE_PATTERN, description="YYYY-MM-DD"),
) -> list[WorkoutSession]:
    return get_session_store().list_sessions(date)


@router.post(
    "",
    response_model=WorkoutSession,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    summary="Log a workout session",
    responses={
        201: {"description": "Session stored"},
        422: {"description": "Validation error (empty gym workout, payload/type mismatch, bad date)"},
    },
)
async def add_session(body: SessionCreate) -> WorkoutSession:
    running, gym = check_activity_payload(body)

    session = WorkoutSession(
        date=body.date,
        type=body.type,
        running=running,
        gym=gym,
        notes=body.notes,
    )
    get_session_store().add_session(session)
    logger.info("Logged %s session on %s", session.type, session.date)
    return session


@router.delete(
    "/{date}/{session_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete a session",
    description="Deleting a session that does not exist is a no-op.",
)
async def delete_session(
    session_id: str,
    date: str = Path(..., pattern=DATE_PATTERN, description="YYYY-MM-DD"),
) -> Response:
    get_session_store().delete_session(date, session_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
