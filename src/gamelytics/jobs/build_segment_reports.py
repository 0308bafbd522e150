import polars as pl

from gamelytics.transforms.retention import segment_retention_depth
from gamelytics.evaluation.segments import (
    join_value_by_segment,
    summarize_cohort_segments,
    summarize_segments,
)


def build_segment_reports(
    cohort_activity: pl.DataFrame, user_revenue: pl.DataFrame
) -> dict[str, pl.DataFrame]:
    user_retention_bucket = segment_retention_depth(cohort_activity)
    user_value_by_segment = join_value_by_segment(user_retention_bucket, user_revenue)
    segment_summary = summarize_segments(user_value_by_segment)

    print("Retention segments:")
    for row in segment_summary.iter_rows(named=True):
        print(
            f"  {row['retention_segment']}: {row['users']} users, "
            f"avg LTV {row['avg_ltv']:.2f}, payer rate {row['payer_rate']:.3f}"
        )

    return {
        "user_retention_bucket": user_retention_bucket,
        "user_value_by_segment": user_value_by_segment,
        "segment_summary": segment_summary,
        "cohort_segment_matrix": summarize_cohort_segments(user_value_by_segment),
    }
