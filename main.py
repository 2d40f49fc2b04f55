# main.py
import logging

import pandas as pd
import matplotlib.pyplot as plt

from study_scheduler.models import (
    Booking,
    SchedulingContext,
    SchedulingOptions,
    Topic,
)
from study_scheduler.scheduler import generate_study_plan
from study_scheduler.allocator import sessions_to_frame


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    horizon_start = pd.Timestamp("2025-11-03")

    options = SchedulingOptions.from_preferences(
        {"defaultStudyDuration": 45, "breakDuration": 15},
        preferred_start_hour=9,
        preferred_end_hour=21,
        days_ahead=5,
    )

    bookings = [
        Booking(id="class-os", label="OS Class",
                start=pd.Timestamp("2025-11-03 12:50"),
                end=pd.Timestamp("2025-11-03 14:45")),
        Booking(id="team-sync", label="Team Sync",
                start=pd.Timestamp("2025-11-04 18:30"),
                end=pd.Timestamp("2025-11-04 19:30")),
        Booking(id="lab", label="Networks Lab",
                start=pd.Timestamp("2025-11-05 09:00"),
                end=pd.Timestamp("2025-11-05 17:00")),
    ]

    topics = [
        Topic(id="t1", title="Process scheduling", estimated_hours=4, priority="high"),
        Topic(id="t2", title="Virtual memory", estimated_hours=5, priority="critical"),
        Topic(id="t3", title="File systems", estimated_hours=8, priority="medium"),
        Topic(id="t4", title="Intro & history", estimated_hours=2, priority="low",
              status="completed"),
        Topic(id="t5", title="Deadlocks", estimated_hours=6, priority="low"),
    ]

    plan = generate_study_plan(
        horizon_start=horizon_start,
        options=options,
        bookings=bookings,
        topics=topics,
        context=SchedulingContext(subject_id="os", syllabus_id="os-midterm"),
    )

    schedule_df = sessions_to_frame(plan.sessions)

    print("=== Schedule ===")
    print(schedule_df)
    print()
    print("=== Allocation ===")
    print(plan.summary)

    # Study minutes per day
    if not schedule_df.empty:
        daily = schedule_df.groupby(schedule_df["start"].dt.date)["minutes"].sum()
        plt.figure(figsize=(8, 3))
        plt.bar([str(d) for d in daily.index], daily.values)
        plt.title("Planned Study Minutes per Day")
        plt.xlabel("Day")
        plt.ylabel("Minutes")
        plt.tight_layout()
        plt.show()


if __name__ == "__main__":
    main()
