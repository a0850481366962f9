"""
Routine Catalog
===============
Named, reusable workout templates, persisted as a JSON array under the
``zenfit_routines`` key.

A routine is never linked to the sessions created from it. ``materialize``
hands out a deep copy with fresh ids, so editing the new session's sets
cannot reach back into the template, and deleting the routine later
leaves those sessions alone.
"""

from __future__ import annotations

import json
import logging
from typing import Optional

from pydantic import TypeAdapter, ValidationError

from zenfit.db.kv_store import KeyValueStore, get_kv_store
from zenfit.models.workout import (
    ActivityPayload,
    Exercise,
    ExerciseSet,
    GymActivity,
    Routine,
    new_id,
)
from zenfit.services.session_store import DuplicateIdError

logger = logging.getLogger(__name__)

ROUTINES_KEY = "zenfit_routines"

_routine_list_adapter = TypeAdapter(list[Routine])


class RoutineCatalog:
    """Insertion-ordered routines, unique by id."""

    def __init__(self, kv: KeyValueStore) -> None:
        self._kv = kv
        self._routines: list[Routine] = []
        self.load()

    def load(self) -> None:
        try:
            raw = self._kv.get(ROUTINES_KEY)
            if raw is None:
                self._routines = []
                return
            self._routines = _routine_list_adapter.validate_json(raw)
        except ValidationError as exc:
            self._discard_unreadable(f"{exc.error_count()} errors")
        except UnicodeDecodeError as exc:
            self._discard_unreadable(exc.reason)

    def _discard_unreadable(self, reason: str) -> None:
        logger.warning("Stored %s could not be read, starting empty (%s)", ROUTINES_KEY, reason)
        self._routines = []

    def save(self) -> None:
        self._write(self._routines)

    def _write(self, routines: list[Routine]) -> None:
        payload = [r.to_json_dict() for r in routines]
        self._kv.set(ROUTINES_KEY, json.dumps(payload, ensure_ascii=False))

    def add_routine(self, routine: Routine) -> Routine:
        if self.get_routine(routine.id) is not None:
            raise DuplicateIdError("routine", routine.id)
        routines = [*self._routines, routine]
        self._write(routines)
        self._routines = routines
        logger.debug("Saved %s routine %r (%s)", routine.type, routine.name, routine.id)
        return routine

    def delete_routine(self, routine_id: str) -> bool:
        remaining = [r for r in self._routines if r.id != routine_id]
        if len(remaining) == len(self._routines):
            return False
        self._write(remaining)
        self._routines = remaining
        return True

    def list_routines(self) -> list[Routine]:
        return list(self._routines)

    def get_routine(self, routine_id: str) -> Optional[Routine]:
        return next((r for r in self._routines if r.id == routine_id), None)

    @staticmethod
    def materialize(routine: Routine) -> ActivityPayload:
        """Detached copy of the routine's payload, ready to pre-fill a session draft.

        Gym payloads get new ids for every exercise and set so nothing in
        the draft shares identity with the template.
        """
        source = routine.activity
        if not isinstance(source, GymActivity):
            return source.model_copy(deep=True)
        return GymActivity(
            exercises=[
                Exercise(
                    id=new_id(),
                    name=ex.name,
                    sets=[ExerciseSet(reps=s.reps, weight=s.weight) for s in ex.sets],
                )
                for ex in source.exercises
            ]
        )


# ---------------------------------------------------------------------------
# Singleton
# ---------------------------------------------------------------------------

_default_catalog: RoutineCatalog | None = None


def get_routine_catalog() -> RoutineCatalog:
    global _default_catalog
    if _default_catalog is None:
        _default_catalog = RoutineCatalog(get_kv_store())
    return _default_catalog
