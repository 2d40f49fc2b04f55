# study_scheduler/records.py
"""Plain-dict conversions for the planner's storage and API layers (camelCase, ISO-8601)."""
from typing import Any, Dict, Iterable, List, Mapping

import pandas as pd

from .models import Booking, ProposedSession, Topic


def session_to_record(session: ProposedSession) -> Dict[str, Any]:
    return {
        "title": session.title,
        "description": session.description,
        "subjectId": session.subject_id,
        "syllabusId": session.syllabus_id,
        "topicId": session.topic_id,
        "startTime": pd.Timestamp(session.start_time).isoformat(),
        "endTime": pd.Timestamp(session.end_time).isoformat(),
        "type": session.type,
    }


def sessions_to_records(sessions: Iterable[ProposedSession]) -> List[Dict[str, Any]]:
    return [session_to_record(s) for s in sessions]


def booking_from_record(record: Mapping[str, Any]) -> Booking:
    """Accepts a stored session (startTime/endTime) or a bare interval (start/end)."""
    start = record.get("startTime", record.get("start"))
    end = record.get("endTime", record.get("end"))
    return Booking(
        start=start,
        end=end,
        id=record.get("id"),
        label=record.get("title", record.get("label", "")),
    )


def bookings_from_records(records: Iterable[Mapping[str, Any]]) -> List[Booking]:
    return [booking_from_record(r) for r in records]


def topic_from_record(record: Mapping[str, Any]) -> Topic:
    return Topic(
        id=str(record["id"]),
        title=record.get("title", ""),
        description=record.get("description", ""),
        estimated_hours=float(record.get("estimatedHours") or 0),
        priority=record.get("priority", "medium"),
        status=record.get("status", "not-started"),
        order=int(record.get("order", 0)),
    )


def topics_from_records(records: Iterable[Mapping[str, Any]]) -> List[Topic]:
    return [topic_from_record(r) for r in records]
