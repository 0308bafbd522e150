import polars as pl

from gamelytics.transforms.revenue import aggregate_user_revenue
from gamelytics.evaluation.metrics import (
    compute_ab_core_kpis,
    compute_ab_uplift,
    compute_cohort_kpis,
    compute_cohort_ltv,
    compute_testgroup_kpis,
    has_uplift,
)


def build_monetization_reports(
    users: pl.DataFrame,
    revenue: pl.DataFrame,
    control: str = "a",
    treatment: str = "b",
) -> dict[str, pl.DataFrame]:
    user_revenue = aggregate_user_revenue(users, revenue)
    ab_monetization_core = compute_ab_core_kpis(
        user_revenue, variants=(control, treatment)
    )
    ab_uplift = compute_ab_uplift(
        ab_monetization_core, control=control, treatment=treatment
    )

    if not has_uplift(ab_uplift):
        print(
            f"Warning: No comparison available between variants "
            f"'{treatment}' and '{control}', uplift left undefined"
        )

    return {
        "user_revenue": user_revenue,
        "cohort_ltv": compute_cohort_ltv(user_revenue),
        "monetization_kpis": compute_cohort_kpis(user_revenue),
        "ab_monetization": compute_testgroup_kpis(user_revenue),
        "ab_monetization_core": ab_monetization_core,
        "ab_uplift": ab_uplift,
    }
