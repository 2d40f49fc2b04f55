import pandas as pd

from study_scheduler.models import Booking, ProposedSession, Topic
from study_scheduler.validation import (
    allocation_summary,
    capacity_ok,
    min_length_ok,
    overlaps_ok,
    underallocated_topics,
)


def at(hm):
    return pd.Timestamp(f"2025-11-03 {hm}")


def session(topic_id, a, b):
    return ProposedSession(title=topic_id, description="", subject_id=None,
                           syllabus_id=None, topic_id=topic_id,
                           start_time=at(a), end_time=at(b))


def test_overlaps_ok_accepts_spaced_sessions():
    sessions = [session("a", "09:00", "09:45"), session("a", "10:00", "10:45")]
    bookings = [Booking(at("11:00"), at("12:00"))]
    assert overlaps_ok(sessions, bookings, 15)


def test_session_may_end_right_when_a_booking_starts():
    sessions = [session("a", "09:15", "10:00")]
    assert overlaps_ok(sessions, [Booking(at("10:00"), at("11:00"))], 15)


def test_overlaps_ok_rejects_overlap_with_booking():
    sessions = [session("a", "10:30", "11:15")]
    assert not overlaps_ok(sessions, [Booking(at("10:00"), at("11:00"))], 0)


def test_overlaps_ok_rejects_overlapping_sessions():
    sessions = [session("a", "09:00", "09:45"), session("b", "09:30", "10:15")]
    assert not overlaps_ok(sessions, [], 0)


def test_overlaps_ok_rejects_missing_break():
    sessions = [session("a", "11:05", "11:50")]
    assert not overlaps_ok(sessions, [Booking(at("10:00"), at("11:00"))], 15)
    assert overlaps_ok(sessions, [Booking(at("10:00"), at("11:00"))], 5)


def test_capacity_ok():
    topics = [Topic("a", "A", estimated_hours=1)]
    assert capacity_ok([session("a", "09:00", "09:45"), session("a", "10:00", "10:15")], topics)
    assert not capacity_ok([session("a", "09:00", "09:45"), session("a", "10:00", "10:30")], topics)


def test_min_length_ok():
    assert min_length_ok([session("a", "09:00", "09:15")])
    assert not min_length_ok([session("a", "09:00", "09:10")])


def test_allocation_summary_reports_shortfall():
    topics = [Topic("low", "Low", estimated_hours=1, priority="low"),
              Topic("crit", "Crit", estimated_hours=1, priority="critical")]
    sessions = [session("crit", "09:00", "09:45"), session("crit", "10:00", "10:15")]
    summary = allocation_summary(sessions, topics)

    assert summary["topic_id"].tolist() == ["crit", "low"]
    assert summary["scheduled_minutes"].tolist() == [60.0, 0.0]
    assert summary["shortfall_minutes"].tolist() == [0.0, 60.0]
    assert summary["sessions"].tolist() == [2, 0]
    assert underallocated_topics(summary) == ["low"]


def test_allocation_summary_empty():
    summary = allocation_summary([], [])
    assert summary.empty
    assert underallocated_topics(summary) == []
