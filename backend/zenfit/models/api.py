"""
API Schemas
===========
Request and response bodies of the HTTP layer that don't map one-to-one
onto a stored model. Stored models (WorkoutSession, Routine) are
returned as-is.

Ids are always assigned server-side, never accepted from the client.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from zenfit.models.workout import (
    ActivityType,
    CalendarDate,
    CamelModel,
    GymActivity,
    RunningActivity,
    TaggedActivity,
)


# ---------------------------------------------------------------------------
# Request
# ---------------------------------------------------------------------------

class SessionCreate(TaggedActivity):
    """Payload for logging a session on a day."""

    date: CalendarDate
    notes: Optional[str] = Field(default=None, max_length=1000)


class RoutineCreate(TaggedActivity):
    """Payload for saving a routine.

    ``name`` is checked in the router rather than here so a blank name
    gets the ``routine_name_required`` error code instead of a generic
    validation error.
    """

    name: str = ""


# ---------------------------------------------------------------------------
# Response
# ---------------------------------------------------------------------------

class RoutineDraft(CamelModel):
    """A routine's payload copied out for pre-filling a new session."""

    routine_id: str
    type: ActivityType
    running: Optional[RunningActivity] = None
    gym: Optional[GymActivity] = None


class AdvisoryResponse(BaseModel):
    insight: Optional[str] = None
    busy: bool = False

