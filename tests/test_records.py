import json

import pandas as pd
import pytest

from study_scheduler.models import ProposedSession
from study_scheduler.records import (
    booking_from_record,
    bookings_from_records,
    session_to_record,
    sessions_to_records,
    topics_from_records,
)


def test_session_record_is_json_ready():
    s = ProposedSession(title="Paging", description="", subject_id="os",
                        syllabus_id="mid", topic_id="t1",
                        start_time=pd.Timestamp("2025-11-03 09:00"),
                        end_time=pd.Timestamp("2025-11-03 09:45"))
    record = session_to_record(s)
    assert record["startTime"] == "2025-11-03T09:00:00"
    assert record["endTime"] == "2025-11-03T09:45:00"
    assert record["topicId"] == "t1"
    assert record["type"] == "study"
    json.dumps(sessions_to_records([s]))


def test_booking_from_stored_session_or_interval():
    stored = booking_from_record({"id": "s1", "title": "Lecture",
                                  "startTime": "2025-11-03T10:00:00",
                                  "endTime": "2025-11-03T11:00:00"})
    assert stored.id == "s1"
    assert stored.label == "Lecture"
    assert stored.end == pd.Timestamp("2025-11-03 11:00")

    [bare] = bookings_from_records([{"start": "2025-11-03T12:00", "end": "2025-11-03T13:00"}])
    assert bare.start == pd.Timestamp("2025-11-03 12:00")


def test_booking_record_without_times_is_rejected():
    with pytest.raises(ValueError):
        booking_from_record({"id": "broken"})


def test_topics_from_syllabus_records():
    topics = topics_from_records([
        {"id": "t1", "title": "Sets", "estimatedHours": 4, "priority": "high",
         "status": "in-progress", "order": 0},
        {"id": 2, "title": "Logic"},
    ])
    assert topics[0].estimated_hours == 4.0
    assert topics[0].priority == "high"
    assert topics[1].id == "2"
    assert topics[1].priority == "medium"
    assert topics[1].status == "not-started"
    assert topics[1].estimated_hours == 0.0
