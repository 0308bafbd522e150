import polars as pl

OBSERVATION_WINDOW_DAYS = 30


def unique_users(users: pl.DataFrame) -> pl.DataFrame:
    """
    Collapse users to one row per user_id, keeping the earliest reg_date as the
    user's cohort. Every user-level join goes through this so it cannot fan out.
    Args:
        users (pl.DataFrame): Users with user_id and reg_date.

    Returns:
        pl.DataFrame: One row per user with user_id and cohort_date.
    """
    return users.group_by("user_id").agg(cohort_date=pl.col("reg_date").min())


def assign_cohorts(users: pl.DataFrame) -> pl.DataFrame:
    """
    Count distinct registered users per registration date.
    Args:
        users (pl.DataFrame): Users with user_id and reg_date.

    Returns:
        pl.DataFrame: cohort_date and cohort_size, sorted by cohort_date.
    """
    return (
        unique_users(users)
        .group_by("cohort_date")
        .agg(cohort_size=pl.col("user_id").n_unique())
        .sort("cohort_date")
    )


def map_activity(
    users: pl.DataFrame,
    events: pl.DataFrame,
    max_day_offset: int = OBSERVATION_WINDOW_DAYS,
) -> pl.DataFrame:
    """
    Map authentication events to their user's cohort and days since install.
    Users without events produce no rows. Events before registration or after
    the observation window are dropped.
    Args:
        users (pl.DataFrame): Users with user_id and reg_date.
        events (pl.DataFrame): Events with user_id and auth_date.
        max_day_offset (int): Last day since install kept in the window.

    Returns:
        pl.DataFrame: user_id, cohort_date, auth_date and day_offset.
    """
    return (
        unique_users(users)
        .join(events.select("user_id", "auth_date"), on="user_id", how="inner")
        .with_columns(
            day_offset=(pl.col("auth_date") - pl.col("cohort_date"))
            .dt.total_days()
            .cast(pl.Int64)
        )
        .filter(pl.col("day_offset").is_between(0, max_day_offset))
        .select("user_id", "cohort_date", "auth_date", "day_offset")
        .sort(["cohort_date", "user_id", "auth_date"])
    )
