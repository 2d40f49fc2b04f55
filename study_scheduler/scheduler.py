# study_scheduler/scheduler.py
import logging
from datetime import datetime
from typing import Iterable, List, Optional

from prometheus_client import Counter, Summary

from .allocator import allocate
from .models import (
    Booking,
    ProposedSession,
    SchedulingContext,
    SchedulingOptions,
    StudyPlan,
    Topic,
)
from .slot_finder import bookings_in_horizon, find_slots
from .validation import allocation_summary, underallocated_topics

logger = logging.getLogger(__name__)

PLAN_TIME = Summary(
    "study_plan_generation_seconds",
    "Time spent generating a study plan",
)
SESSIONS_PROPOSED = Counter(
    "study_sessions_proposed_total",
    "Study sessions proposed by the scheduler",
)
TOPICS_UNDERALLOCATED = Counter(
    "study_topics_underallocated_total",
    "Topics that did not receive all of their estimated study time",
)


@PLAN_TIME.time()
def generate_study_plan(horizon_start: datetime,
                        options: SchedulingOptions,
                        bookings: Iterable[Booking],
                        topics: List[Topic],
                        context: Optional[SchedulingContext] = None) -> StudyPlan:
    """
    Find free slots over the horizon and fill them with study sessions.

    horizon_start: the first day of the horizon (time of day is ignored).
                   Pass it explicitly; the clock is never consulted.
    bookings: existing commitments; anything outside the horizon is dropped.

    Raises SchedulingConfigError before doing any work if `options` is invalid.
    Under-allocation is reported through `StudyPlan.summary`, not raised.
    """
    options.validate()

    relevant = bookings_in_horizon(bookings, options, horizon_start)
    slots = find_slots(relevant, options, horizon_start)
    sessions = allocate(slots, topics, options, context)

    summary = allocation_summary(sessions, [t for t in topics if t.is_incomplete()])
    short = underallocated_topics(summary)

    SESSIONS_PROPOSED.inc(len(sessions))
    if short:
        TOPICS_UNDERALLOCATED.inc(len(short))
        logger.warning("%d topic(s) could not be fully scheduled: %s",
                       len(short), ", ".join(short))
    logger.info("Planned %d session(s) in %d free slot(s) over %d day(s)",
                len(sessions), len(slots), options.days_ahead)

    return StudyPlan(sessions=sessions, slots=slots, summary=summary)


def sessions_as_bookings(sessions: Iterable[ProposedSession]) -> List[Booking]:
    """Treat proposed sessions as commitments for a follow-up run."""
    return [
        Booking(start=s.start_time, end=s.end_time, id=s.topic_id, label=s.title)
        for s in sessions
    ]
