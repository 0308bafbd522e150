import polars as pl


def join_value_by_segment(
    segments: pl.DataFrame, user_revenue: pl.DataFrame
) -> pl.DataFrame:
    """
    Attach lifetime revenue to every segmented user.
    Segments drive the join: segmented users without revenue get 0, users with
    revenue but no activity are left out.
    Args:
        segments (pl.DataFrame): Output of segment_retention_depth.
        user_revenue (pl.DataFrame): Output of aggregate_user_revenue.

    Returns:
        pl.DataFrame: user_id, cohort_date, retention_segment and lifetime_revenue.
    """
    return (
        segments.join(
            user_revenue.select("user_id", "revenue"), on="user_id", how="left"
        )
        .with_columns(lifetime_revenue=pl.col("revenue").fill_null(0.0))
        .select("user_id", "cohort_date", "retention_segment", "lifetime_revenue")
    )


def _segment_metrics() -> list[pl.Expr]:
    return [
        pl.len().alias("users"),
        pl.col("lifetime_revenue").mean().round(2).alias("avg_ltv"),
        (pl.col("lifetime_revenue") > 0).mean().round(3).alias("payer_rate"),
        pl.col("lifetime_revenue").sum().round(2).alias("total_revenue"),
    ]


def summarize_segments(segment_values: pl.DataFrame) -> pl.DataFrame:
    """
    Monetization per retention segment, in lifecycle order (D0 only to D15+).
    Segments without users have no row, so the result can hold fewer than
    five rows.
    Args:
        segment_values (pl.DataFrame): Output of join_value_by_segment.

    Returns:
        pl.DataFrame: retention_segment, users, avg_ltv, payer_rate and total_revenue.
    """
    return (
        segment_values.group_by("retention_segment")
        .agg(_segment_metrics())
        .sort("retention_segment")
    )


def summarize_cohort_segments(segment_values: pl.DataFrame) -> pl.DataFrame:
    """
    Monetization per cohort and retention segment, ordered by cohort then
    lifecycle order. Each row is one cell of a cohort x segment heatmap.
    Args:
        segment_values (pl.DataFrame): Output of join_value_by_segment.

    Returns:
        pl.DataFrame: cohort_date, retention_segment, users, avg_ltv, payer_rate
        and total_revenue.
    """
    return (
        segment_values.group_by(["cohort_date", "retention_segment"])
        .agg(_segment_metrics())
        .sort(["cohort_date", "retention_segment"])
    )
