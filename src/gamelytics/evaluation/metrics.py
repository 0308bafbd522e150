import polars as pl
from typing import Optional, Tuple

NO_TEST_GROUP = "no_test"
UPLIFT_METRICS = ["arpu", "payer_rate", "arppu"]


def summarize_monetization(
    user_revenue: pl.DataFrame, by: str, payer_rate_decimals: int = 3
) -> pl.DataFrame:
    """
    Aggregate per-user revenue into monetization KPIs for each group.
    Every group holds at least one user, so payer_rate and arpu always have a
    denominator. arppu is null for groups without payers.
    Args:
        user_revenue (pl.DataFrame): Output of aggregate_user_revenue.
        by (str): Grouping column.
        payer_rate_decimals (int): Rounding of payer_rate.

    Returns:
        pl.DataFrame: users, payers, total_revenue, payer_rate, arpu and arppu
        per group, sorted by the grouping column.
    """
    return (
        user_revenue.group_by(by)
        .agg(
            users=pl.col("user_id").n_unique(),
            payers=pl.col("user_id").filter(pl.col("revenue") > 0).n_unique(),
            total_revenue=pl.col("revenue").sum(),
        )
        .with_columns(
            payer_rate=(pl.col("payers") / pl.col("users")).round(payer_rate_decimals),
            arpu=(pl.col("total_revenue") / pl.col("users")).round(2),
            arppu=pl.when(pl.col("payers") > 0)
            .then(pl.col("total_revenue") / pl.col("payers"))
            .otherwise(None)
            .round(2),
        )
        .sort(by)
    )


def compute_cohort_kpis(user_revenue: pl.DataFrame) -> pl.DataFrame:
    """Monetization KPIs per registration cohort"""
    return summarize_monetization(user_revenue, by="cohort_date", payer_rate_decimals=3)


def compute_testgroup_kpis(user_revenue: pl.DataFrame) -> pl.DataFrame:
    """Monetization KPIs per test group, users outside any test grouped as no_test"""
    return summarize_monetization(
        user_revenue.with_columns(pl.col("testgroup").fill_null(NO_TEST_GROUP)),
        by="testgroup",
        payer_rate_decimals=3,
    )


def compute_ab_core_kpis(
    user_revenue: pl.DataFrame, variants: Tuple[str, str] = ("a", "b")
) -> pl.DataFrame:
    """
    Monetization KPIs restricted to the A/B variants.
    Users with another or no label are left out rather than defaulted.
    payer_rate keeps 4 decimals since uplift ratios amplify rounding error.
    """
    return summarize_monetization(
        user_revenue.filter(pl.col("testgroup").is_in(list(variants))),
        by="testgroup",
        payer_rate_decimals=4,
    )


def compute_cohort_ltv(user_revenue: pl.DataFrame) -> pl.DataFrame:
    """Lifetime revenue per cohort, total and per user"""
    return (
        user_revenue.group_by("cohort_date")
        .agg(
            users=pl.col("user_id").n_unique(),
            total_revenue=pl.col("revenue").sum(),
        )
        .with_columns(ltv=(pl.col("total_revenue") / pl.col("users")).round(2))
        .sort("cohort_date")
    )


def uplift_pct(control: Optional[float], treatment: Optional[float]) -> Optional[float]:
    """Relative difference of treatment over control in percent, None when undefined"""
    if control is None or treatment is None or control == 0:
        return None
    return round(100.0 * (treatment - control) / control, 2)


def compute_ab_uplift(
    core_kpis: pl.DataFrame, control: str = "a", treatment: str = "b"
) -> pl.DataFrame:
    """
    Compare the treatment variant against the control variant.
    A metric whose uplift cannot be computed (variant missing, metric null or
    control value 0) is null, never 0.
    Args:
        core_kpis (pl.DataFrame): Output of compute_ab_core_kpis.
        control (str): Control variant label.
        treatment (str): Treatment variant label.

    Returns:
        pl.DataFrame: A single row with comparison and one *_uplift_pct column
        per metric.
    """
    control_rows = core_kpis.filter(pl.col("testgroup") == control)
    treatment_rows = core_kpis.filter(pl.col("testgroup") == treatment)

    row = {"comparison": [f"{treatment.upper()} vs {control.upper()}"]}
    for metric in UPLIFT_METRICS:
        control_value = control_rows[metric].item() if control_rows.height == 1 else None
        treatment_value = (
            treatment_rows[metric].item() if treatment_rows.height == 1 else None
        )
        row[f"{metric}_uplift_pct"] = [uplift_pct(control_value, treatment_value)]

    schema = {"comparison": pl.String}
    schema.update({f"{metric}_uplift_pct": pl.Float64 for metric in UPLIFT_METRICS})
    return pl.DataFrame(row, schema=schema)


def has_uplift(uplift: pl.DataFrame) -> bool:
    """Whether at least one uplift metric could be computed"""
    return any(
        uplift[f"{metric}_uplift_pct"].is_not_null().any() for metric in UPLIFT_METRICS
    )
