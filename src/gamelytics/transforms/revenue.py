import polars as pl

from gamelytics.transforms.cohorts import unique_users


def sum_revenue_per_user(revenue: pl.DataFrame) -> pl.DataFrame:
    """
    Reduce raw transactions to one total per user.
    A user's testgroup is the first non-null label among their transactions.
    Args:
        revenue (pl.DataFrame): Transactions with user_id, revenue and testgroup.

    Returns:
        pl.DataFrame: One row per user with user_id, revenue and testgroup.
    """
    return revenue.group_by("user_id", maintain_order=True).agg(
        revenue=pl.col("revenue").sum(),
        testgroup=pl.col("testgroup").drop_nulls().first(),
    )


def aggregate_user_revenue(users: pl.DataFrame, revenue: pl.DataFrame) -> pl.DataFrame:
    """
    Attach lifetime revenue and test group to every registered user.
    Revenue is summed per user before the join, so the result keeps exactly one
    row per user. Users without transactions get 0 revenue and a null testgroup.
    Args:
        users (pl.DataFrame): Users with user_id and reg_date.
        revenue (pl.DataFrame): Transactions with user_id, revenue and testgroup.

    Returns:
        pl.DataFrame: user_id, cohort_date, revenue and testgroup, sorted by user_id.
    """
    return (
        unique_users(users)
        .join(sum_revenue_per_user(revenue), on="user_id", how="left")
        .with_columns(pl.col("revenue").fill_null(0.0))
        .select("user_id", "cohort_date", "revenue", "testgroup")
        .sort("user_id")
    )
