"""
Tests for the progress, advisory and health endpoints
=====================================================
Covers:
- GET /api/v1/progress: default 30-day window, running series, top volumes
- GET /api/v1/progress?days=N: window boundary inclusive; days < 1 rejected
- GET /api/v1/progress/counts: totals over every session
- GET /api/v1/progress/calendar: explicit month and default (current) month
- POST /api/v1/advisory: passes the last 8 chronological sessions; stores tip
- POST /api/v1/advisory: failing Gemini call -> fallback tip, busy back to idle
- POST while busy does not start another request
- GET / DELETE /api/v1/advisory
- GET /api/v1/health

Run: pytest tests/test_progress_api.py -v
"""

from __future__ import annotations

from datetime import date, timedelta
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from zenfit.db.kv_store import InMemoryKeyValueStore
from zenfit.models.workout import (
    Exercise,
    ExerciseSet,
    GymActivity,
    RunningActivity,
    WorkoutSession,
)
from zenfit.services.advisory import FALLBACK_ADVISORIES, AdvisoryTracker
from zenfit.services.session_store import SessionStore

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


def _days_ago(n: int) -> str:
    return (date.today() - timedelta(days=n)).isoformat()


def _run(d: str, km: float) -> WorkoutSession:
    return WorkoutSession(date=d, type="running", running=RunningActivity(distance=km, time_minutes=int(km * 6)))


def _gym(d: str, name: str, reps: int, weight: float) -> WorkoutSession:
    return WorkoutSession(
        date=d,
        type="gym",
        gym=GymActivity(exercises=[Exercise(name=name, sets=[ExerciseSet(reps=reps, weight=weight)])]),
    )


@pytest.fixture
def store() -> SessionStore:
    return SessionStore(InMemoryKeyValueStore())


@pytest.fixture
def tracker() -> AdvisoryTracker:
    service = MagicMock()
    service.request_advisory = AsyncMock(return_value="Alterna fuerza y carrera.")
    return AdvisoryTracker(service=service)


@pytest.fixture
def client(store, tracker):
    with (
        patch("zenfit.routers.progress.get_session_store", return_value=store),
        patch("zenfit.routers.advisory.get_session_store", return_value=store),
        patch("zenfit.routers.advisory.get_advisory_tracker", return_value=tracker),
    ):
        from zenfit.main import app
        yield TestClient(app)


# ---------------------------------------------------------------------------
# Progress
# ---------------------------------------------------------------------------

class TestProgress:

    def test_default_window(self, client, store):
        store.add_session(_run(_days_ago(45), km=20))
        store.add_session(_run(_days_ago(10), km=5))
        store.add_session(_gym(_days_ago(5), "Press Banca", 10, 50))
        store.add_session(_gym(_days_ago(2), "Press Banca", 8, 55))
        store.add_session(_run(_days_ago(1), km=7.5))

        resp = client.get("/api/v1/progress")

        assert resp.status_code == 200
        data = resp.json()
        assert data["window_days"] == 30
        assert [p["distance"] for p in data["running_series"]] == [5, 7.5]
        assert data["exercise_volumes"] == [{"name": "Press Banca", "volume": 940}]
        assert data["counts"] == {"total": 4, "gym": 2, "running": 2}

    def test_window_boundary(self, client, store):
        store.add_session(_run(_days_ago(7), km=3))
        store.add_session(_run(_days_ago(8), km=4))

        data = client.get("/api/v1/progress", params={"days": 7}).json()
        assert [p["distance"] for p in data["running_series"]] == [3]

    def test_top_eight_volumes(self, client, store):
        for i in range(1, 11):
            store.add_session(_gym(_days_ago(1), f"E{i}", 1, float(i)))
        data = client.get("/api/v1/progress", params={"days": 90}).json()
        assert [v["name"] for v in data["exercise_volumes"]] == [f"E{i}" for i in range(10, 2, -1)]

    @pytest.mark.parametrize("days", [0, -1])
    def test_non_positive_window_rejected(self, client, days):
        assert client.get("/api/v1/progress", params={"days": days}).status_code == 422

    def test_empty_store(self, client):
        data = client.get("/api/v1/progress").json()
        assert data["running_series"] == []
        assert data["exercise_volumes"] == []
        assert data["counts"]["total"] == 0

    def test_counts_cover_all_time(self, client, store):
        store.add_session(_run("2019-05-01", km=10))
        store.add_session(_gym(_days_ago(1), "Remo", 10, 40))
        data = client.get("/api/v1/progress/counts").json()
        assert data == {"total": 2, "gym": 1, "running": 1}


class TestCalendar:

    def test_explicit_month(self, client, store):
        store.add_session(_run("2026-03-02", km=5))
        store.add_session(_gym("2026-03-02", "Remo", 10, 40))

        data = client.get("/api/v1/progress/calendar", params={"year": 2026, "month": 3}).json()

        assert data["leading_blank_days"] == 6
        assert len(data["days"]) == 31
        day2 = data["days"][1]
        assert day2["session_count"] == 2
        assert day2["has_gym"] and day2["has_running"]

    def test_defaults_to_current_month(self, client):
        today = date.today()
        data = client.get("/api/v1/progress/calendar").json()
        assert (data["year"], data["month"]) == (today.year, today.month)
        assert [d["day"] for d in data["days"] if d["is_today"]] == [today.day]

    def test_bad_month_rejected(self, client):
        assert client.get("/api/v1/progress/calendar", params={"month": 13}).status_code == 422


# ---------------------------------------------------------------------------
# Advisory
# ---------------------------------------------------------------------------

class TestAdvisory:

    def test_uses_last_eight_sessions(self, client, store, tracker):
        sessions = [_run(_days_ago(20 - i), km=float(i + 1)) for i in range(12)]
        for s in sessions:
            store.add_session(s)

        resp = client.post("/api/v1/advisory")

        assert resp.status_code == 200
        assert resp.json() == {"insight": "Alterna fuerza y carrera.", "busy": False}
        sent = tracker.service.request_advisory.await_args.args[0]
        assert [s.id for s in sent] == [s.id for s in sessions[-8:]]

    def test_failing_call_returns_fallback(self, client, store):
        from zenfit.config import Settings
        from zenfit.services.advisory import AdvisoryService

        service = AdvisoryService(settings=Settings(gemini_api_key="k", enable_ai_advisory=True))
        failing_tracker = AdvisoryTracker(service=service)
        store.add_session(_run(_days_ago(1), km=5))

        with (
            patch("zenfit.routers.advisory.get_advisory_tracker", return_value=failing_tracker),
            patch.object(service, "_call_gemini_api", AsyncMock(side_effect=TimeoutError("slow"))),
        ):
            resp = client.post("/api/v1/advisory")

        assert resp.status_code == 200
        assert resp.json()["insight"] in FALLBACK_ADVISORIES
        assert resp.json()["busy"] is False

    def test_busy_does_not_start_another(self, client, tracker):
        tracker.busy = True
        tracker.insight = "anterior"

        resp = client.post("/api/v1/advisory")

        assert resp.json() == {"insight": "anterior", "busy": True}
        tracker.service.request_advisory.assert_not_awaited()

    def test_get_state(self, client):
        assert client.get("/api/v1/advisory").json() == {"insight": None, "busy": False}
        client.post("/api/v1/advisory")
        assert client.get("/api/v1/advisory").json()["insight"] == "Alterna fuerza y carrera."

    def test_discard(self, client, tracker):
        tracker.busy = True
        assert client.delete("/api/v1/advisory").status_code == 204
        assert tracker.busy is False


class TestHealth:

    def test_health(self, client):
        assert client.get("/api/v1/health").json() == {"status": "ok", "service": "zenfit-api"}
