from pathlib import Path

import mlflow
import polars as pl

from gamelytics.evaluation.metrics import UPLIFT_METRICS


def setup_mlflow(experiment_name: str = "gamelytics", tracking_uri: str = "./mlruns"):
    """Setup MLflow experiment"""
    mlflow.set_tracking_uri(tracking_uri)
    mlflow.set_experiment(experiment_name)


def collect_report_metrics(
    reports: dict[str, pl.DataFrame], skipped: dict[str, int]
) -> dict[str, float]:
    """Flatten headline report values into MLflow metrics, dropping undefined ones"""
    metrics = {f"skipped_{name}": float(count) for name, count in skipped.items()}

    uplift = reports["ab_uplift"]
    for metric in UPLIFT_METRICS:
        value = uplift[f"{metric}_uplift_pct"].item()
        if value is not None:
            metrics[f"{metric}_uplift_pct"] = value

    for row in reports["ab_monetization_core"].iter_rows(named=True):
        metrics[f"payer_rate_{row['testgroup']}"] = row["payer_rate"]
        metrics[f"arpu_{row['testgroup']}"] = row["arpu"]

    for row in reports["segment_summary"].iter_rows(named=True):
        # mlflow metric names only allow [A-Za-z0-9_\-. /]
        segment = (
            row["retention_segment"]
            .replace(" ", "_")
            .replace("–", "_")
            .replace("+", "_plus")
        )
        metrics[f"users_{segment}"] = float(row["users"])
        metrics[f"avg_ltv_{segment}"] = row["avg_ltv"]

    return metrics


def log_report_metrics(
    reports: dict[str, pl.DataFrame],
    skipped: dict[str, int],
    reports_dir: Path,
    experiment_name: str = "gamelytics",
):
    """Log headline metrics and the written report tables to a new MLflow run"""
    setup_mlflow(experiment_name=experiment_name)
    with mlflow.start_run(run_name="retention_monetization_report"):
        mlflow.log_metrics(collect_report_metrics(reports, skipped))
        mlflow.log_artifacts(str(reports_dir), artifact_path="reports")
