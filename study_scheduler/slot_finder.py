# study_scheduler/slot_finder.py
import logging
from datetime import datetime
from typing import Iterable, List, Optional, Tuple

import pandas as pd

from .models import Booking, SchedulingOptions, TimeSlot

logger = logging.getLogger(__name__)


def _at_hour(day: pd.Timestamp, hour: int, tz=None) -> pd.Timestamp:
    """
    Wall-clock `hour`:00 on the naive date `day`; 24 means the following midnight.

    With a timezone, an hour skipped by a DST change moves forward to the first
    valid instant, and a repeated hour resolves to its first occurrence.
    """
    wall = day + pd.Timedelta(hours=hour)
    if tz is None:
        return wall
    return wall.tz_localize(tz, ambiguous=True, nonexistent="shift_forward")


def _horizon_days(horizon_start: datetime,
                  days_ahead: int) -> Tuple[Optional[object], List[pd.Timestamp]]:
    """The horizon's timezone and its days as naive local midnights."""
    first = pd.Timestamp(horizon_start)
    tz = first.tz
    if tz is not None:
        first = first.tz_localize(None)
    first = first.normalize()
    return tz, [first + pd.Timedelta(days=offset) for offset in range(days_ahead)]


def horizon_bounds(options: SchedulingOptions,
                   horizon_start: datetime) -> Tuple[pd.Timestamp, pd.Timestamp]:
    """First and last instant any slot of the horizon can touch."""
    tz, days = _horizon_days(horizon_start, options.days_ahead)
    return (_at_hour(days[0], options.preferred_start_hour, tz),
            _at_hour(days[-1], options.preferred_end_hour, tz))


def bookings_in_horizon(bookings: Iterable[Booking],
                        options: SchedulingOptions,
                        horizon_start: datetime) -> List[Booking]:
    """Bookings that overlap the horizon or whose break runs into it."""
    start, end = horizon_bounds(options, horizon_start)
    pause = options.break_delta
    return [b for b in bookings if b.start <= end and b.end + pause >= start]


def find_slots(bookings: Iterable[Booking],
               options: SchedulingOptions,
               horizon_start: datetime) -> List[TimeSlot]:
    """
    Free intervals inside the preferred daily window for each day of the horizon.

    Bookings may be unsorted and may fall outside the horizon; a booking only
    blocks the days whose window it (or the break after it) reaches. After every
    booking the next slot starts no earlier than `break_duration` minutes later.
    Slots shorter than one session are dropped and days are never merged across
    midnight.

    Raises SchedulingConfigError if `options` is invalid.
    """
    options.validate()
    bookings = list(bookings)
    session = options.session_delta
    pause = options.break_delta

    tz, days = _horizon_days(horizon_start, options.days_ahead)
    slots: List[TimeSlot] = []
    for day in days:
        day_start = _at_hour(day, options.preferred_start_hour, tz)
        day_end = _at_hour(day, options.preferred_end_hour, tz)

        todays = sorted(
            (b for b in bookings if b.start <= day_end and b.end + pause >= day_start),
            key=lambda b: b.start,
        )

        cursor = day_start
        day_slots = []
        for b in todays:
            if b.start - cursor >= session:
                day_slots.append(TimeSlot(cursor, b.start))
            # overlapping bookings must not pull the cursor back
            cursor = max(cursor, b.end + pause)

        if day_end - cursor >= session:
            day_slots.append(TimeSlot(cursor, day_end))

        logger.debug("%s: %d booking(s), %d free slot(s)",
                     day.date(), len(todays), len(day_slots))
        slots.extend(day_slots)

    return slots


def slots_to_frame(slots: List[TimeSlot]) -> pd.DataFrame:
    if not slots:
        return pd.DataFrame(columns=["start", "end", "minutes", "day"])
    return pd.DataFrame([{
        "start": s.start,
        "end": s.end,
        "minutes": s.duration_minutes(),
        "day": s.start.date(),
    } for s in slots])
