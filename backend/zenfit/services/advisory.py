"""
Advisory Service
================
Turns the most recent sessions into a one- or two-sentence coaching tip
using the Gemini API.

FAILURE CONTRACT:
    The advisory is a nice-to-have. Whatever goes wrong on the way
    (network error, timeout, non-2xx status, malformed body, no text)
    the caller still gets a displayable string: one of two fixed
    fallback tips. Nothing is retried and nothing is raised.

The only data sent out is the JSON of the last few sessions. Notes are
part of a session and go with it.

AdvisoryTracker holds the UI-facing state: a busy flag and the latest
tip. A result is only applied if no newer request was started (and
nothing was discarded) while it was in flight, so a slow stale response
can never overwrite a newer one.
"""

from __future__ import annotations

import json
import logging
from typing import Optional, Sequence

import httpx

from zenfit.config import Settings, get_settings
from zenfit.models.workout import WorkoutSession

logger = logging.getLogger(__name__)

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"

# Shown when the model answers but says nothing usable.
EMPTY_RESPONSE_ADVISORY = "Sigue dándolo todo, la constancia es la clave del éxito."
# Shown when the call itself fails.
FAILED_REQUEST_ADVISORY = "Tu progreso es excelente. ¡La regularidad vence al talento!"

FALLBACK_ADVISORIES = (EMPTY_RESPONSE_ADVISORY, FAILED_REQUEST_ADVISORY)

_PROMPT_TEMPLATE = """\
Analiza mi progreso de entrenamiento basado en estas sesiones: {sessions}.
Fíjate especialmente en si estoy alternando running y gimnasio.
Dame un consejo motivador corto y minimalista para mejorar mi rendimiento. \
Máximo 2 frases en español."""


def build_prompt(recent_sessions: Sequence[WorkoutSession]) -> str:
    serialized = json.dumps(
        [s.to_json_dict() for s in recent_sessions],
        ensure_ascii=False,
    )
    return _PROMPT_TEMPLATE.format(sessions=serialized)


class AdvisoryService:
    """Requests a short coaching tip from Gemini, falling back on any failure."""

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or get_settings()

    async def request_advisory(self, recent_sessions: Sequence[WorkoutSession]) -> str:
        """Return the model's tip (stripped) or a fixed fallback. Never raises."""
        if not self._settings.enable_ai_advisory or not self._settings.gemini_api_key:
            logger.info("AI advisory disabled or no API key configured, using fallback")
            return FAILED_REQUEST_ADVISORY

        prompt = build_prompt(recent_sessions)

        try:
            text = await self._call_gemini_api(prompt)
        except Exception:
            logger.exception("Gemini API call failed for advisory")
            return FAILED_REQUEST_ADVISORY

        text = (text or "").strip()
        if not text:
            logger.warning("Gemini returned no advisory text, using fallback")
            return EMPTY_RESPONSE_ADVISORY
        return text

    async def _call_gemini_api(self, prompt: str) -> str:
        """POST the prompt to generateContent and return the concatenated text parts."""
        url = f"{GEMINI_BASE_URL}/models/{self._settings.gemini_model}:generateContent"
        headers = {
            "x-goog-api-key": self._settings.gemini_api_key,
            "content-type": "application/json",
        }
        payload = {"contents": [{"parts": [{"text": prompt}]}]}

        async with httpx.AsyncClient(timeout=self._settings.advisory_timeout_seconds) as client:
            response = await client.post(url, headers=headers, json=payload)
            response.raise_for_status()

        return extract_text(response.json())


def extract_text(data: dict) -> str:
    """Pull the text parts out of a generateContent response body.

    Raises KeyError / TypeError / IndexError on a body that is not shaped
    like a generateContent response.
    """
    candidates = data["candidates"]
    parts = candidates[0]["content"].get("parts", [])
    return "".join(part.get("text", "") for part in parts)


# ---------------------------------------------------------------------------
# UI-facing state
# ---------------------------------------------------------------------------

class AdvisoryTracker:
    """Busy flag + latest insight, with stale results dropped."""

    def __init__(self, service: AdvisoryService | None = None) -> None:
        self._service = service
        self.busy = False
        self.insight: Optional[str] = None
        self._generation = 0

    @property
    def service(self) -> AdvisoryService:
        if self._service is None:
            self._service = get_advisory_service()
        return self._service

    async def run(self, recent_sessions: Sequence[WorkoutSession]) -> str:
        """Request an advisory and store it unless a newer request superseded it.

        Always returns the string this call produced, applied or not.
        """
        self._generation += 1
        generation = self._generation
        self.busy = True
        try:
            text = await self.service.request_advisory(recent_sessions)
        finally:
            if generation == self._generation:
                self.busy = False

        if generation == self._generation:
            self.insight = text
        else:
            logger.debug("Dropping stale advisory result (generation %d)", generation)
        return text

    def discard_pending(self) -> None:
        """Forget any in-flight request, e.g. when the user leaves the view."""
        self._generation += 1
        self.busy = False


# ---------------------------------------------------------------------------
# Singletons
# ---------------------------------------------------------------------------

_default_service: AdvisoryService | None = None
_default_tracker: AdvisoryTracker | None = None


def get_advisory_service() -> AdvisoryService:
    global _default_service
    if _default_service is None:
        _default_service = AdvisoryService()
    return _default_service


def get_advisory_tracker() -> AdvisoryTracker:
    global _default_tracker
    if _default_tracker is None:
        _default_tracker = AdvisoryTracker()
    return _default_tracker
