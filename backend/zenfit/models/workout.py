"""
Workout Data Model
==================
Pydantic models for everything ZenFit persists: sessions logged against
a calendar date, and reusable routines.

Key design decisions:
- Attributes are snake_case in Python but serialise with the camelCase
  names the stored JSON has always used (isInterval, timeMinutes, ...).
  Use ``to_json_dict()`` / ``model_dump(by_alias=True)`` when writing.
- A session or routine is a tagged variant: ``type`` picks exactly one of
  ``running`` / ``gym``. This is checked at construction so a record can
  never carry both payloads or neither.
- Interval totals are NOT derived here. The draft and derivation layers
  own that rule; the model only clears interval fields when the run is
  continuous.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Annotated, Literal, Optional, Union

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel


# ---------------------------------------------------------------------------
# Allowed values
# ---------------------------------------------------------------------------

ActivityType = Literal["running", "gym"]
IntervalType = Literal["distance", "time"]

DATE_FORMAT = "%Y-%m-%d"
DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"


def new_id() -> str:
    return str(uuid.uuid4())


class CamelModel(BaseModel):
    """Base for every persisted model: camelCase on the wire, snake_case in code."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json_dict(self) -> dict:
        """Dump the way the backing store expects it: aliased, no null keys."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


# ---------------------------------------------------------------------------
# Gym
# ---------------------------------------------------------------------------

class ExerciseSet(CamelModel):
    """One row of an exercise: repetitions at a weight (kg)."""

    id: str = Field(default_factory=new_id)
    reps: int = Field(default=0, ge=0)
    weight: float = Field(default=0.0, ge=0)


class Exercise(CamelModel):
    """A named exercise with at least one set. New exercises start with one zero set."""

    id: str = Field(default_factory=new_id)
    name: str
    sets: list[ExerciseSet] = Field(default_factory=lambda: [ExerciseSet()], min_length=1)

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("exercise name must not be blank")
        return value

    @property
    def volume(self) -> float:
        """Training load proxy: sum of reps x weight across all sets."""
        return sum(s.reps * s.weight for s in self.sets)


class GymActivity(CamelModel):
    """Ordered exercises of a strength session. Empty is only valid as a draft."""

    exercises: list[Exercise] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Running
# ---------------------------------------------------------------------------

class RunningActivity(CamelModel):
    """A run, either continuous or built from repeated intervals.

    For interval runs, one of ``distance`` / ``time_minutes`` is the
    derived total (count x value) selected by ``interval_type``; the other
    stays user-entered.
    """

    is_interval: bool = False
    interval_count: Optional[int] = Field(default=None, ge=1)
    interval_value: Optional[float] = Field(default=None, ge=0)
    interval_type: Optional[IntervalType] = None
    description: str = ""
    distance: float = Field(default=0.0, ge=0, description="Kilometres.")
    time_minutes: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def _normalise_interval_fields(self) -> RunningActivity:
        if self.is_interval:
            if self.interval_count is None:
                self.interval_count = 1
            if self.interval_value is None:
                self.interval_value = 0.0
            if self.interval_type is None:
                self.interval_type = "distance"
        else:
            self.interval_count = None
            self.interval_value = None
            self.interval_type = None
        return self


ActivityPayload = Union[RunningActivity, GymActivity]


# ---------------------------------------------------------------------------
# Sessions and routines
# ---------------------------------------------------------------------------

class TaggedActivity(CamelModel):
    """``type`` discriminant plus exactly one matching payload."""

    type: ActivityType
    running: Optional[RunningActivity] = None
    gym: Optional[GymActivity] = None

    @model_validator(mode="after")
    def _payload_matches_type(self) -> TaggedActivity:
        if self.type == "running":
            if self.running is None or self.gym is not None:
                raise ValueError("a running entry needs a running payload and no gym payload")
        elif self.gym is None or self.running is not None:
            raise ValueError("a gym entry needs a gym payload and no running payload")
        return self

    @property
    def activity(self) -> ActivityPayload:
        return self.running if self.type == "running" else self.gym


def validate_calendar_date(value: str) -> str:
    """Reject strings that match YYYY-MM-DD but are not real dates (2026-02-30)."""
    datetime.strptime(value, DATE_FORMAT)
    return value


CalendarDate = Annotated[
    str,
    Field(pattern=DATE_PATTERN, description="YYYY-MM-DD"),
    AfterValidator(validate_calendar_date),
]


class WorkoutSession(TaggedActivity):
    """One recorded workout on a calendar date."""

    id: str = Field(default_factory=new_id)
    date: CalendarDate
    notes: Optional[str] = None


class Routine(TaggedActivity):
    """A named workout template, not tied to any date."""

    id: str = Field(default_factory=new_id)
    name: str

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("routine name must not be blank")
        return value


DailyData = dict[str, list[WorkoutSession]]
