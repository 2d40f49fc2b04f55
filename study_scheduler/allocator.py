# study_scheduler/allocator.py
import logging
from dataclasses import replace
from typing import List, Optional

import pandas as pd

from .models import (
    MIN_SESSION_MINUTES,
    ProposedSession,
    SchedulingContext,
    SchedulingOptions,
    TimeSlot,
    Topic,
    incomplete_topics,
    priority_rank,
)

logger = logging.getLogger(__name__)


def allocate(slots: List[TimeSlot],
             topics: List[Topic],
             options: SchedulingOptions,
             context: Optional[SchedulingContext] = None) -> List[ProposedSession]:
    """
    Greedily carve study sessions out of `slots` for `topics`.

    Topics are served in priority order (critical first, input order on ties)
    and share one left-to-right pass over the slots: time handed to a topic is
    never given back, and a slot whose remainder drops below one session is
    abandoned rather than offered to the next topic.

    Sessions come back grouped by topic, so they are not globally sorted by
    start time; use `sessions_to_frame` for a chronological view. Topics that
    do not fit are simply under-allocated.

    Raises SchedulingConfigError if `options` is invalid.
    """
    options.validate()
    context = context or SchedulingContext()
    todo = sorted(incomplete_topics(topics), key=lambda t: priority_rank(t.priority))
    if not todo:
        return []

    # working copies: shrinking a slot must not leak into the caller's list
    free = [replace(s) for s in slots]
    pause = options.break_delta
    session_delta = options.session_delta

    sessions: List[ProposedSession] = []
    slot_idx = 0
    for topic in todo:
        required = topic.required_minutes()
        scheduled = 0.0

        while scheduled < required and slot_idx < len(free):
            slot = free[slot_idx]
            minutes = min(float(options.session_duration),
                          slot.duration_minutes(),
                          required - scheduled)
            if minutes < MIN_SESSION_MINUTES:
                # the sliver is dropped, never handed to another topic
                slot_idx += 1
                continue

            start = slot.start
            end = start + pd.Timedelta(minutes=minutes)
            sessions.append(ProposedSession(
                title=topic.title,
                description=topic.description,
                subject_id=context.subject_id,
                syllabus_id=context.syllabus_id,
                topic_id=topic.id,
                start_time=start,
                end_time=end,
                type="study",
            ))
            scheduled += minutes

            slot.start = end + pause
            if slot.end - slot.start < session_delta:
                slot_idx += 1

        logger.debug("topic %s (%s): %.0f/%.0f min scheduled",
                     topic.id, topic.priority, scheduled, required)

    return sessions


def sessions_to_frame(sessions: List[ProposedSession]) -> pd.DataFrame:
    """Sessions as a dataframe ordered by start time."""
    columns = ["topic_id", "title", "start", "end", "minutes", "type"]
    if not sessions:
        return pd.DataFrame(columns=columns)
    df = pd.DataFrame([{
        "topic_id": s.topic_id,
        "title": s.title,
        "start": s.start_time,
        "end": s.end_time,
        "minutes": s.duration_minutes(),
        "type": s.type,
    } for s in sessions], columns=columns)
    return df.sort_values("start", kind="stable").reset_index(drop=True)
