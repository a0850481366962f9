"""
Workout Drafts
==============
Editable state behind the "new session" / "new routine" forms.

GymDraft
    Exercises and their set rows. An exercise always keeps at least one
    set: removing the last one swaps in a fresh zero set. Submitting an
    empty draft returns None so the save is simply not attempted.

RunningDraft
    Continuous or interval runs. Any change to the interval inputs
    (mode, count, per-repetition value, type) recomputes the derived
    total straight away; the other total stays user-entered. Switching
    interval mode off keeps whatever totals were last computed as plain
    editable values.

Form inputs arrive as text, so setters accept strings and treat anything
unparseable as 0, the way the number inputs behave.
"""

from __future__ import annotations

import logging
import math
from typing import Literal, Optional

from zenfit.models.workout import (
    Exercise,
    ExerciseSet,
    GymActivity,
    IntervalType,
    RunningActivity,
)
from zenfit.services.derivation import interval_totals

logger = logging.getLogger(__name__)


def parse_number(value: object) -> float:
    """Lenient numeric parse: blank, junk, NaN and negatives all become 0."""
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(number) or math.isinf(number) or number < 0:
        return 0.0
    return number


# ---------------------------------------------------------------------------
# Gym
# ---------------------------------------------------------------------------

class GymDraft:
    """Exercise list being edited before it becomes a GymActivity."""

    def __init__(self, initial: Optional[GymActivity] = None) -> None:
        self.exercises: list[Exercise] = (
            [ex.model_copy(deep=True) for ex in initial.exercises] if initial else []
        )

    def add_exercise(self, name: str) -> Optional[Exercise]:
        """Append a new exercise with one zero set. Blank names are ignored."""
        if not name or not name.strip():
            return None
        exercise = Exercise(name=name)
        self.exercises.append(exercise)
        return exercise

    def remove_exercise(self, exercise_id: str) -> None:
        self.exercises = [ex for ex in self.exercises if ex.id != exercise_id]

    def add_set(self, exercise_id: str) -> Optional[ExerciseSet]:
        exercise = self._exercise(exercise_id)
        if exercise is None:
            return None
        new_set = ExerciseSet()
        exercise.sets.append(new_set)
        return new_set

    def update_set(
        self,
        exercise_id: str,
        set_id: str,
        field: Literal["reps", "weight"],
        value: object,
    ) -> None:
        exercise = self._exercise(exercise_id)
        if exercise is None:
            return
        number = parse_number(value)
        for i, s in enumerate(exercise.sets):
            if s.id != set_id:
                continue
            if field == "reps":
                exercise.sets[i] = ExerciseSet(id=s.id, reps=int(number), weight=s.weight)
            else:
                exercise.sets[i] = ExerciseSet(id=s.id, reps=s.reps, weight=number)
            return

    def remove_set(self, exercise_id: str, set_id: str) -> None:
        exercise = self._exercise(exercise_id)
        if exercise is None:
            return
        remaining = [s for s in exercise.sets if s.id != set_id]
        exercise.sets = remaining or [ExerciseSet()]

    def submit(self) -> Optional[GymActivity]:
        """The finished activity, or None while there are no exercises."""
        if not self.exercises:
            return None
        return GymActivity(exercises=[ex.model_copy(deep=True) for ex in self.exercises])

    def _exercise(self, exercise_id: str) -> Optional[Exercise]:
        return next((ex for ex in self.exercises if ex.id == exercise_id), None)


# ---------------------------------------------------------------------------
# Running
# ---------------------------------------------------------------------------

class RunningDraft:
    """Running form state with live interval totals."""

    def __init__(self, initial: Optional[RunningActivity] = None) -> None:
        initial = initial or RunningActivity()
        self._is_interval = initial.is_interval
        self._interval_count = initial.interval_count or 1
        self._interval_value = initial.interval_value or 0.0
        self._interval_type: IntervalType = initial.interval_type or "distance"
        self.description = initial.description
        self.distance = initial.distance
        self.time_minutes = initial.time_minutes
        self._recompute()

    # -- interval inputs (each change recomputes) --------------------------

    @property
    def is_interval(self) -> bool:
        return self._is_interval

    @is_interval.setter
    def is_interval(self, enabled: bool) -> None:
        self._is_interval = bool(enabled)
        self._recompute()

    @property
    def interval_count(self) -> int:
        return self._interval_count

    @interval_count.setter
    def interval_count(self, value: object) -> None:
        self._interval_count = int(parse_number(value))
        self._recompute()

    @property
    def interval_value(self) -> float:
        return self._interval_value

    @interval_value.setter
    def interval_value(self, value: object) -> None:
        self._interval_value = parse_number(value)
        self._recompute()

    @property
    def interval_type(self) -> IntervalType:
        return self._interval_type

    @interval_type.setter
    def interval_type(self, value: IntervalType) -> None:
        if value not in ("distance", "time"):
            raise ValueError(f"unknown interval type: {value!r}")
        self._interval_type = value
        self._recompute()

    def toggle_interval_type(self) -> None:
        self.interval_type = "time" if self._interval_type == "distance" else "distance"

    # -- totals ------------------------------------------------------------

    @property
    def distance_locked(self) -> bool:
        return self._is_interval and self._interval_type == "distance"

    @property
    def time_locked(self) -> bool:
        return self._is_interval and self._interval_type == "time"

    def set_distance(self, value: object) -> None:
        """User edit of the distance box. Ignored while it is the derived total."""
        if self.distance_locked:
            logger.debug("Ignoring distance edit while it is derived from intervals")
            return
        self.distance = round(parse_number(value), 2)

    def set_time_minutes(self, value: object) -> None:
        if self.time_locked:
            logger.debug("Ignoring time edit while it is derived from intervals")
            return
        self.time_minutes = int(parse_number(value))

    def _recompute(self) -> None:
        derived = interval_totals(
            self._is_interval,
            self._interval_count,
            self._interval_value,
            self._interval_type,
        )
        if derived is None:
            return
        field, total = derived
        setattr(self, field, total)

    def submit(self) -> Optional[RunningActivity]:
        """The finished activity, or None if interval mode has no repetitions."""
        if self._is_interval and self._interval_count < 1:
            return None
        if not self._is_interval:
            return RunningActivity(
                description=self.description,
                distance=self.distance,
                time_minutes=self.time_minutes,
            )
        return RunningActivity(
            is_interval=True,
            interval_count=self._interval_count,
            interval_value=self._interval_value,
            interval_type=self._interval_type,
            description=self.description,
            distance=self.distance,
            time_minutes=self.time_minutes,
        )
