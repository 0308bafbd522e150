import polars as pl

from gamelytics.transforms.cohorts import (
    OBSERVATION_WINDOW_DAYS,
    assign_cohorts,
    map_activity,
)
from gamelytics.transforms.retention import build_retention_curve


def build_retention_reports(
    users: pl.DataFrame,
    events: pl.DataFrame,
    max_day_offset: int = OBSERVATION_WINDOW_DAYS,
) -> dict[str, pl.DataFrame]:
    cohort_size = assign_cohorts(users)
    cohort_activity = map_activity(users, events, max_day_offset=max_day_offset)
    retention_curve = build_retention_curve(cohort_activity, cohort_size)

    print(f"  Cohorts: {cohort_size.height}")
    print(f"  Activity records in window: {cohort_activity.height}")

    return {
        "cohort_size": cohort_size,
        "cohort_activity": cohort_activity,
        "retention_curve": retention_curve,
    }
