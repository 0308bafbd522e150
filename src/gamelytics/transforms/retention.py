import polars as pl

SEGMENT_LABELS = ["D0 only", "D1–D3", "D4–D7", "D8–D14", "D15+"]
RetentionSegment = pl.Enum(SEGMENT_LABELS)


def build_retention_curve(
    activity: pl.DataFrame, cohort_sizes: pl.DataFrame
) -> pl.DataFrame:
    """
    Build the retention curve of every cohort.
    active_users is the number of distinct users seen on a given day since
    install. Every active user belongs to its cohort, so a cohort with activity
    has cohort_size >= 1 and the rate needs no zero guard. Activity whose cohort
    is missing from cohort_sizes breaks that guarantee and raises.
    Args:
        activity (pl.DataFrame): Output of map_activity.
        cohort_sizes (pl.DataFrame): Output of assign_cohorts.

    Returns:
        pl.DataFrame: cohort_date, day_offset, active_users, cohort_size and
        retention_rate (percent, 2 decimals), sorted by cohort and day.
    """
    active_users = activity.group_by(["cohort_date", "day_offset"]).agg(
        active_users=pl.col("user_id").n_unique()
    )
    orphans = active_users.join(cohort_sizes, on="cohort_date", how="anti")
    if orphans.height > 0:
        raise ValueError(
            f"Activity found for cohorts without a cohort size: "
            f"{orphans['cohort_date'].unique().sort().to_list()}"
        )
    return (
        active_users.join(cohort_sizes, on="cohort_date", how="inner")
        .with_columns(
            retention_rate=(
                100.0 * pl.col("active_users") / pl.col("cohort_size")
            ).round(2)
        )
        .select(
            "cohort_date", "day_offset", "active_users", "cohort_size", "retention_rate"
        )
        .sort(["cohort_date", "day_offset"])
    )


def segment_retention_depth(activity: pl.DataFrame) -> pl.DataFrame:
    """
    Bucket every active user by the last day since install they were seen.
    Buckets are closed intervals evaluated in order: 0, 1-3, 4-7, 8-14, 15+.
    Users without activity have no depth and do not appear.
    Args:
        activity (pl.DataFrame): Output of map_activity.

    Returns:
        pl.DataFrame: user_id, cohort_date, max_day_offset and
        retention_segment (ordered enum).
    """
    return (
        activity.group_by(["user_id", "cohort_date"])
        .agg(max_day_offset=pl.col("day_offset").max())
        .with_columns(
            retention_segment=pl.when(pl.col("max_day_offset") == 0)
            .then(pl.lit("D0 only"))
            .when(pl.col("max_day_offset").is_between(1, 3))
            .then(pl.lit("D1–D3"))
            .when(pl.col("max_day_offset").is_between(4, 7))
            .then(pl.lit("D4–D7"))
            .when(pl.col("max_day_offset").is_between(8, 14))
            .then(pl.lit("D8–D14"))
            .otherwise(pl.lit("D15+"))
            .cast(RetentionSegment)
        )
        .sort(["cohort_date", "user_id"])
    )
