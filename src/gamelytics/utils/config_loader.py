from pathlib import Path
import yaml

REQUIRED_KEYS = [
    "users_path",
    "events_path",
    "revenue_path",
    "processed_data_path",
    "reports_path",
]

DEFAULT_PARAMS = {
    "csv_separator": ",",
    "max_day_offset": 30,
    "ab_control_group": "a",
    "ab_treatment_group": "b",
    "track_with_mlflow": False,
    "mlflow_experiment": "gamelytics",
}


def load_config(config_path: str = "confs/params.yml") -> dict:
    """Load and parse configuration file, filling optional keys with defaults"""
    with open(Path(config_path), 'r') as f:
        params = yaml.safe_load(f) or {}

    missing = [key for key in REQUIRED_KEYS if key not in params]
    if missing:
        raise ValueError(f"Missing keys {missing} in configuration file {config_path}")

    return {**DEFAULT_PARAMS, **params}
