"""
Routines Router
===============
GET    /api/v1/routines                    — Saved routines, in save order.
POST   /api/v1/routines                    — Save a routine.
DELETE /api/v1/routines/{routine_id}       — Delete a routine (idempotent).
GET    /api/v1/routines/{routine_id}/draft — Copy a routine out to pre-fill a session.

Deleting a routine never touches sessions created from it: those hold
their own copy of the payload.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Response, status

from zenfit.models.api import RoutineCreate, RoutineDraft
from zenfit.models.workout import GymActivity, Routine
from zenfit.routers.sessions import check_activity_payload
from zenfit.services.routine_catalog import get_routine_catalog

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/routines", tags=["routines"])


@router.get(
    "",
    response_model=list[Routine],
    response_model_exclude_none=True,
    summary="List saved routines",
)
async def list_routines() -> list[Routine]:
    return get_routine_catalog().list_routines()


@router.post(
    "",
    response_model=Routine,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    summary="Save a routine",
    responses={
        201: {"description": "Routine saved"},
        422: {"description": "Blank name, empty gym workout, or payload/type mismatch"},
    },
)
async def add_routine(body: RoutineCreate) -> Routine:
    if not body.name.strip():
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"message": "Give the routine a name", "code": "routine_name_required"},
        )
    running, gym = check_activity_payload(body)

    routine = Routine(name=body.name, type=body.type, running=running, gym=gym)
    get_routine_catalog().add_routine(routine)
    logger.info("Saved %s routine %r", routine.type, routine.name)
    return routine


@router.delete(
    "/{routine_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete a routine",
)
async def delete_routine(routine_id: str) -> Response:
    get_routine_catalog().delete_routine(routine_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/{routine_id}/draft",
    response_model=RoutineDraft,
    response_model_exclude_none=True,
    summary="Copy a routine into a new session draft",
    responses={404: {"description": "No routine with this id"}},
)
async def routine_draft(routine_id: str) -> RoutineDraft:
    catalog = get_routine_catalog()
    routine = catalog.get_routine(routine_id)
    if routine is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"message": "Routine not found", "code": "routine_not_found"},
        )

    payload = catalog.materialize(routine)
    if isinstance(payload, GymActivity):
        return RoutineDraft(routine_id=routine.id, type="gym", gym=payload)
    return RoutineDraft(routine_id=routine.id, type="running", running=payload)
