# study_scheduler/validation.py
from typing import Iterable, List

import numpy as np
import pandas as pd

from .models import MIN_SESSION_MINUTES, Booking, ProposedSession, Topic, priority_rank

_EPS_MINUTES = 1e-6


def _ns(ts: pd.Timestamp) -> int:
    return pd.Timestamp(ts).value


def overlaps_ok(sessions: List[ProposedSession],
                bookings: Iterable[Booking],
                break_duration: float) -> bool:
    """
    True when no session overlaps another session or a booking, and every
    session starts at least `break_duration` minutes after anything that
    started before it has ended.
    """
    if not sessions:
        return True
    bookings = list(bookings)
    starts = np.array([_ns(s.start_time) for s in sessions] + [_ns(b.start) for b in bookings],
                      dtype=np.int64)
    ends = np.array([_ns(s.end_time) for s in sessions] + [_ns(b.end) for b in bookings],
                    dtype=np.int64)
    gap = int(pd.Timedelta(minutes=break_duration).value)

    for i in range(len(sessions)):
        others = np.ones(len(starts), dtype=bool)
        others[i] = False
        if np.any(others & (starts < ends[i]) & (ends > starts[i])):
            return False
        before = others & (starts <= starts[i])
        if np.any(starts[i] - ends[before] < gap):
            return False
    return True


def capacity_ok(sessions: List[ProposedSession], topics: Iterable[Topic]) -> bool:
    required = {t.id: t.required_minutes() for t in topics}
    used = {}
    for s in sessions:
        used[s.topic_id] = used.get(s.topic_id, 0.0) + s.duration_minutes()
    return all(minutes <= required.get(tid, 0.0) + _EPS_MINUTES for tid, minutes in used.items())


def min_length_ok(sessions: List[ProposedSession]) -> bool:
    return all(s.duration_minutes() >= MIN_SESSION_MINUTES - _EPS_MINUTES for s in sessions)


def allocation_summary(sessions: List[ProposedSession], topics: Iterable[Topic]) -> pd.DataFrame:
    """Required vs. scheduled minutes per topic, highest priority first."""
    columns = ["topic_id", "title", "priority", "required_minutes",
               "scheduled_minutes", "shortfall_minutes", "sessions"]
    topics = list(topics)
    if not topics:
        return pd.DataFrame(columns=columns)

    per_topic = {}
    for s in sessions:
        minutes, count = per_topic.get(s.topic_id, (0.0, 0))
        per_topic[s.topic_id] = (minutes + s.duration_minutes(), count + 1)

    rows = []
    for t in sorted(topics, key=lambda t: priority_rank(t.priority)):
        minutes, count = per_topic.get(t.id, (0.0, 0))
        required = t.required_minutes()
        rows.append({
            "topic_id": t.id,
            "title": t.title,
            "priority": t.priority,
            "required_minutes": required,
            "scheduled_minutes": minutes,
            "shortfall_minutes": max(0.0, required - minutes),
            "sessions": count,
        })
    return pd.DataFrame(rows, columns=columns)


def underallocated_topics(summary: pd.DataFrame) -> List[str]:
    if summary.empty:
        return []
    return summary.loc[summary["shortfall_minutes"] > _EPS_MINUTES, "topic_id"].tolist()
