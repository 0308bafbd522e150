from pathlib import Path
import polars as pl
import yaml

from gamelytics.jobs.build_monetization_reports import build_monetization_reports
from gamelytics.jobs.build_retention_reports import build_retention_reports
from gamelytics.jobs.build_segment_reports import build_segment_reports
from gamelytics.pipelines.preprocessing import SKIPPED_RECORDS_FILE
from gamelytics.utils.config_loader import load_config
from gamelytics.utils.mlflow_utils import log_report_metrics


def load_skipped_counts(processed_dir: Path) -> dict[str, int]:
    skipped_path = processed_dir / SKIPPED_RECORDS_FILE
    if not skipped_path.exists():
        return {}
    with open(skipped_path, "r") as f:
        return yaml.safe_load(f) or {}


def run_reporting(params: dict) -> dict[str, pl.DataFrame]:
    processed_dir = Path(params["processed_data_path"])
    print("Loading processed datasets...")
    users = pl.read_parquet(processed_dir / "users.parquet")
    events = pl.read_parquet(processed_dir / "events.parquet")
    revenue = pl.read_parquet(processed_dir / "revenue.parquet")

    print("Building retention reports...")
    reports = build_retention_reports(
        users, events, max_day_offset=params["max_day_offset"]
    )
    print("Building monetization reports...")
    reports.update(
        build_monetization_reports(
            users,
            revenue,
            control=params["ab_control_group"],
            treatment=params["ab_treatment_group"],
        )
    )
    print("Building retention segment reports...")
    reports.update(
        build_segment_reports(reports["cohort_activity"], reports["user_revenue"])
    )

    print("Saving reports...")
    reports_dir = Path(params["reports_path"])
    reports_dir.mkdir(parents=True, exist_ok=True)
    for name, report in reports.items():
        report.write_parquet(reports_dir / f"{name}.parquet")
    print(f"Reports saved in {reports_dir}.")

    if params["track_with_mlflow"]:
        print("Logging report metrics to MLflow...")
        log_report_metrics(
            reports,
            skipped=load_skipped_counts(processed_dir),
            reports_dir=reports_dir,
            experiment_name=params["mlflow_experiment"],
        )
    return reports


def main():
    print("Starting reporting pipeline...")
    # load parameters from confs/params.yml
    params = load_config()
    run_reporting(params)
    print("Reporting pipeline completed.")


if __name__ == "__main__":
    main()
