"""
Advisory Router
===============
POST   /api/v1/advisory — Ask for a coaching tip on the last 8 sessions.
GET    /api/v1/advisory — Current tip and busy flag.
DELETE /api/v1/advisory — Drop any request still in flight.

A POST while a request is already running does not start a second one;
it returns the current state with ``busy=true``. The tip is always a
displayable string: failures fall back to a fixed message (see
AdvisoryService).
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Response, status

from zenfit.models.api import AdvisoryResponse
from zenfit.services.advisory import get_advisory_tracker
from zenfit.services.derivation import recent_sessions
from zenfit.services.session_store import get_session_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/advisory", tags=["advisory"])


@router.post(
    "",
    response_model=AdvisoryResponse,
    summary="Generate a coaching tip",
)
async def request_advisory() -> AdvisoryResponse:
    tracker = get_advisory_tracker()
    if tracker.busy:
        logger.debug("Advisory already in flight, not starting another")
        return AdvisoryResponse(insight=tracker.insight, busy=True)

    await tracker.run(recent_sessions(get_session_store()))
    return AdvisoryResponse(insight=tracker.insight, busy=tracker.busy)


@router.get(
    "",
    response_model=AdvisoryResponse,
    summary="Latest coaching tip",
)
async def get_advisory() -> AdvisoryResponse:
    tracker = get_advisory_tracker()
    return AdvisoryResponse(insight=tracker.insight, busy=tracker.busy)


@router.delete(
    "",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Discard any pending tip",
)
async def discard_advisory() -> Response:
    get_advisory_tracker().discard_pending()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
