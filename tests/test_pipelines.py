from datetime import date

import polars as pl
import pytest

from gamelytics.jobs.preprocess_input_data import preprocess_input_data, read_table
from gamelytics.pipelines import reporting
from gamelytics.pipelines.preprocessing import run_preprocessing
from gamelytics.pipelines.reporting import load_skipped_counts, run_reporting

REPORT_NAMES = {
    "cohort_size",
    "cohort_activity",
    "retention_curve",
    "user_revenue",
    "cohort_ltv",
    "monetization_kpis",
    "ab_monetization",
    "ab_monetization_core",
    "ab_uplift",
    "user_retention_bucket",
    "user_value_by_segment",
    "segment_summary",
    "cohort_segment_matrix",
}


@pytest.fixture
def params(tmp_path) -> dict:
    raw_dir = tmp_path / "raw"
    raw_dir.mkdir()
    (raw_dir / "reg_data.csv").write_text(
        "reg_ts;uid\n"
        "2024-01-01;1\n"
        "2024-01-01;2\n"
        "2024-01-02;3\n"
        "broken;4\n"
    )
    (raw_dir / "auth_data.csv").write_text(
        "auth_ts;uid\n"
        "2024-01-01;1\n"
        "2024-01-03;1\n"
        "2024-01-01;2\n"
        "2024-01-02;3\n"
        "2024-01-20;3\n"
    )
    (raw_dir / "ab_test.csv").write_text(
        "user_id;revenue;testgroup\n"
        "1;10.0;a\n"
        "2;0.0;a\n"
        "3;30.0;b\n"
        "4;-5.0;b\n"
    )
    return {
        "users_path": str(raw_dir / "reg_data.csv"),
        "events_path": str(raw_dir / "auth_data.csv"),
        "revenue_path": str(raw_dir / "ab_test.csv"),
        "csv_separator": ";",
        "processed_data_path": str(tmp_path / "processed"),
        "reports_path": str(tmp_path / "reports"),
        "max_day_offset": 30,
        "ab_control_group": "a",
        "ab_treatment_group": "b",
        "track_with_mlflow": False,
        "mlflow_experiment": "gamelytics-test",
    }


def test_read_table_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_table(str(tmp_path / "missing.csv"))


def test_preprocess_input_data_reports_skipped_records(users, events):
    revenue = pl.DataFrame(
        {"user_id": [1, 2], "revenue": [5.0, None], "testgroup": ["a", "b"]}
    )

    frames, skipped = preprocess_input_data(users=users, events=events, revenue=revenue)

    assert skipped == {"users": 0, "events": 0, "revenue": 1}
    assert frames["revenue"].height == 1


def test_run_preprocessing_writes_processed_data(params, tmp_path):
    skipped = run_preprocessing(params)

    assert skipped == {"users": 1, "events": 0, "revenue": 1}
    users = pl.read_parquet(tmp_path / "processed" / "users.parquet")
    assert users.schema["reg_date"] == pl.Date
    assert load_skipped_counts(tmp_path / "processed") == skipped


def test_run_reporting_end_to_end(params, tmp_path):
    run_preprocessing(params)

    reports = run_reporting(params)

    assert set(reports) == REPORT_NAMES
    for name in REPORT_NAMES:
        assert (tmp_path / "reports" / f"{name}.parquet").exists()

    curve = reports["retention_curve"]
    assert curve.filter(pl.col("cohort_date") == date(2024, 1, 1)).rows() == [
        (date(2024, 1, 1), 0, 2, 2, 100.0),
        (date(2024, 1, 1), 2, 1, 2, 50.0),
    ]
    assert reports["ab_uplift"].row(0, named=True) == {
        "comparison": "B vs A",
        "arpu_uplift_pct": 500.0,
        "payer_rate_uplift_pct": 100.0,
        "arppu_uplift_pct": 200.0,
    }
    assert reports["segment_summary"]["users"].sum() == 3


def test_run_reporting_logs_to_mlflow_when_enabled(params, monkeypatch):
    logged = {}

    def fake_log_report_metrics(reports, skipped, reports_dir, experiment_name):
        logged["skipped"] = skipped
        logged["experiment_name"] = experiment_name

    monkeypatch.setattr(reporting, "log_report_metrics", fake_log_report_metrics)
    run_preprocessing(params)

    run_reporting({**params, "track_with_mlflow": True})

    assert logged == {
        "skipped": {"users": 1, "events": 0, "revenue": 1},
        "experiment_name": "gamelytics-test",
    }
