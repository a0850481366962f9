"""
Session Store
=============
Owns the date -> sessions mapping (``DailyData``) and persists it under
the ``zenfit_sessions`` key.

Rules:
- A date key exists iff it has at least one session. Deleting the last
  session of a day drops the key.
- Deleting something that is not there is a no-op, never an error.
- Every mutation rewrites the whole mapping to the backing store before
  returning (write-through, no batching). Fine at personal-use scale;
  large histories would want incremental writes.
- Persisted state is read once, at construction. A value that does not
  parse resets the store to empty with a warning rather than failing.
"""

from __future__ import annotations

import json
import logging

from pydantic import TypeAdapter, ValidationError

from zenfit.db.kv_store import KeyValueStore, get_kv_store
from zenfit.models.workout import DailyData, WorkoutSession

logger = logging.getLogger(__name__)

SESSIONS_KEY = "zenfit_sessions"

_daily_data_adapter = TypeAdapter(DailyData)


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class DuplicateIdError(ValueError):
    """An entry with this id is already stored."""

    def __init__(self, kind: str, entry_id: str) -> None:
        self.kind = kind
        self.entry_id = entry_id
        super().__init__(f"{kind} with id {entry_id!r} already exists")


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------


class SessionStore:
    """Workout sessions grouped by calendar date."""

    def __init__(self, kv: KeyValueStore) -> None:
        self._kv = kv
        self._days: DailyData = {}
        self.load()

    # -- persistence -------------------------------------------------------

    def load(self) -> None:
        try:
            raw = self._kv.get(SESSIONS_KEY)
            if raw is None:
                self._days = {}
                return
            days = _daily_data_adapter.validate_json(raw)
        except ValidationError as exc:
            self._discard_unreadable(f"{exc.error_count()} errors")
            return
        except UnicodeDecodeError as exc:
            self._discard_unreadable(exc.reason)
            return
        # Empty days are never written, but drop any that slipped in.
        self._days = {d: sessions for d, sessions in days.items() if sessions}

    def _discard_unreadable(self, reason: str) -> None:
        logger.warning("Stored %s could not be read, starting empty (%s)", SESSIONS_KEY, reason)
        self._days = {}

    def save(self) -> None:
        self._write(self._days)

    def _write(self, days: DailyData) -> None:
        payload = {
            d: [s.to_json_dict() for s in sessions]
            for d, sessions in days.items()
        }
        self._kv.set(SESSIONS_KEY, json.dumps(payload, ensure_ascii=False))

    # -- mutations ---------------------------------------------------------
    # New state is written first and only then swapped in.

    def add_session(self, session: WorkoutSession) -> WorkoutSession:
        """Append *session* to its date, creating the day if needed."""
        if self._find(session.id) is not None:
            raise DuplicateIdError("session", session.id)
        days = dict(self._days)
        days[session.date] = [*days.get(session.date, []), session]
        self._write(days)
        self._days = days
        logger.debug("Added %s session %s on %s", session.type, session.id, session.date)
        return session

    def delete_session(self, date: str, session_id: str) -> bool:
        """Remove a session. Returns False (and writes nothing) if it was not there."""
        day = self._days.get(date)
        if not day:
            return False
        remaining = [s for s in day if s.id != session_id]
        if len(remaining) == len(day):
            return False
        days = dict(self._days)
        if remaining:
            days[date] = remaining
        else:
            del days[date]
        self._write(days)
        self._days = days
        logger.debug("Deleted session %s on %s", session_id, date)
        return True

    # -- queries -----------------------------------------------------------

    def list_sessions(self, date: str) -> list[WorkoutSession]:
        return list(self._days.get(date, []))

    def list_all(self) -> list[WorkoutSession]:
        """Every session, oldest date first; same-day sessions keep insertion order."""
        flat = [s for sessions in self._days.values() for s in sessions]
        # sorted() is stable, so ties keep the order above
        return sorted(flat, key=lambda s: s.date)

    def dates(self) -> list[str]:
        return list(self._days)

    def _find(self, session_id: str) -> WorkoutSession | None:
        for sessions in self._days.values():
            for s in sessions:
                if s.id == session_id:
                    return s
        return None


# ---------------------------------------------------------------------------
# Singleton
# ---------------------------------------------------------------------------

_default_store: SessionStore | None = None


def get_session_store() -> SessionStore:
    global _default_store
    if _default_store is None:
        _default_store = SessionStore(get_kv_store())
    return _default_store
