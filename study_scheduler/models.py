# study_scheduler/models.py
from dataclasses import dataclass, field
from typing import Iterable, List, Mapping, Optional

import pandas as pd


PRIORITY_ORDER = {"critical": 0, "high": 1, "medium": 2, "low": 3}
TOPIC_STATUSES = ("not-started", "in-progress", "completed", "skipped")
SESSION_TYPES = ("study", "review", "break", "exam", "assignment")
DONE_STATUSES = ("completed", "skipped")

# shortest session the allocator will ever emit
MIN_SESSION_MINUTES = 15


class SchedulingConfigError(ValueError):
    """Raised when SchedulingOptions cannot describe a usable study window."""


def priority_rank(priority: str) -> int:
    # unknown priorities go after "low"
    return PRIORITY_ORDER.get(priority, len(PRIORITY_ORDER))


def _as_timestamp(value, name: str) -> pd.Timestamp:
    if value is None:
        raise ValueError(f"{name} is required")
    ts = pd.Timestamp(value)
    if pd.isna(ts):
        raise ValueError(f"{name} is not a valid timestamp: {value!r}")
    return ts


@dataclass
class SchedulingOptions:
    preferred_start_hour: int = 9
    preferred_end_hour: int = 21
    session_duration: int = 45      # minutes
    break_duration: int = 10        # minutes, enforced after every booking/session
    days_ahead: int = 7

    def validate(self) -> "SchedulingOptions":
        if not 0 <= self.preferred_start_hour <= 23:
            raise SchedulingConfigError(
                f"preferred_start_hour must be within 0-23, got {self.preferred_start_hour}"
            )
        # 24 means "until midnight"
        if not 1 <= self.preferred_end_hour <= 24:
            raise SchedulingConfigError(
                f"preferred_end_hour must be within 1-24, got {self.preferred_end_hour}"
            )
        if self.preferred_start_hour >= self.preferred_end_hour:
            raise SchedulingConfigError(
                "preferred_start_hour must be before preferred_end_hour "
                f"({self.preferred_start_hour} >= {self.preferred_end_hour})"
            )
        if self.session_duration <= 0:
            raise SchedulingConfigError(
                f"session_duration must be positive, got {self.session_duration}"
            )
        if self.break_duration < 0:
            raise SchedulingConfigError(
                f"break_duration cannot be negative, got {self.break_duration}"
            )
        if self.days_ahead < 1:
            raise SchedulingConfigError(
                f"days_ahead must be at least 1, got {self.days_ahead}"
            )
        return self

    @classmethod
    def from_preferences(cls, prefs: Optional[Mapping] = None, **overrides) -> "SchedulingOptions":
        """
        Build options from the planner's user-preference document.

        Recognised keys: defaultStudyDuration, breakDuration, preferredStartHour,
        preferredEndHour, daysAhead. Keyword overrides win over the document.
        """
        prefs = prefs or {}
        defaults = cls()
        values = {
            "preferred_start_hour": prefs.get("preferredStartHour", defaults.preferred_start_hour),
            "preferred_end_hour": prefs.get("preferredEndHour", defaults.preferred_end_hour),
            "session_duration": prefs.get("defaultStudyDuration", defaults.session_duration),
            "break_duration": prefs.get("breakDuration", defaults.break_duration),
            "days_ahead": prefs.get("daysAhead", defaults.days_ahead),
        }
        values.update(overrides)
        return cls(**values).validate()

    @property
    def session_delta(self) -> pd.Timedelta:
        return pd.Timedelta(minutes=self.session_duration)

    @property
    def break_delta(self) -> pd.Timedelta:
        return pd.Timedelta(minutes=self.break_duration)


@dataclass
class TimeSlot:
    start: pd.Timestamp
    end: pd.Timestamp

    def __post_init__(self):
        self.start = _as_timestamp(self.start, "start")
        self.end = _as_timestamp(self.end, "end")
        if self.start >= self.end:
            raise ValueError(f"slot start {self.start} must be before end {self.end}")

    def duration_minutes(self) -> float:
        return (self.end - self.start).total_seconds() / 60.0


@dataclass
class Booking:
    start: pd.Timestamp
    end: pd.Timestamp
    id: Optional[str] = None
    label: str = ""

    def __post_init__(self):
        self.start = _as_timestamp(self.start, "start")
        self.end = _as_timestamp(self.end, "end")
        if self.end < self.start:
            raise ValueError(f"booking {self.id or ''} ends before it starts")


@dataclass
class Topic:
    id: str
    title: str
    description: str = ""
    estimated_hours: float = 1.0
    priority: str = "medium"
    status: str = "not-started"
    order: int = 0

    def __post_init__(self):
        if self.status not in TOPIC_STATUSES:
            raise ValueError(f"unknown topic status {self.status!r} for topic {self.id}")

    def required_minutes(self) -> float:
        return float(self.estimated_hours or 0) * 60.0

    def is_incomplete(self) -> bool:
        return self.status not in DONE_STATUSES


@dataclass
class SchedulingContext:
    subject_id: Optional[str] = None
    syllabus_id: Optional[str] = None


@dataclass
class ProposedSession:
    title: str
    description: str
    subject_id: Optional[str]
    syllabus_id: Optional[str]
    topic_id: Optional[str]
    start_time: pd.Timestamp
    end_time: pd.Timestamp
    type: str = "study"

    def __post_init__(self):
        if self.type not in SESSION_TYPES:
            raise ValueError(f"unknown session type {self.type!r}")

    def duration_minutes(self) -> float:
        return (self.end_time - self.start_time).total_seconds() / 60.0


@dataclass
class StudyPlan:
    sessions: List[ProposedSession] = field(default_factory=list)
    slots: List[TimeSlot] = field(default_factory=list)
    summary: Optional[pd.DataFrame] = None


def incomplete_topics(topics: Iterable[Topic]) -> List[Topic]:
    return [t for t in topics if t.is_incomplete()]


def total_estimated_hours(topics: Iterable[Topic]) -> float:
    return sum(t.estimated_hours or 0 for t in topics)


def remaining_hours(topics: Iterable[Topic]) -> float:
    """Estimated hours still owed by topics that are neither completed nor skipped."""
    return total_estimated_hours(incomplete_topics(topics))


def syllabus_progress(topics: Iterable[Topic]) -> int:
    topics = list(topics)
    if not topics:
        return 0
    done = sum(1 for t in topics if t.status == "completed")
    return round(done / len(topics) * 100)
