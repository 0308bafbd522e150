from pathlib import Path
import yaml

from gamelytics.jobs.preprocess_input_data import preprocess_input_data, read_table
from gamelytics.utils.config_loader import load_config

SKIPPED_RECORDS_FILE = "skipped_records.yml"


def run_preprocessing(params: dict) -> dict[str, int]:
    print("Loading raw users, events and revenue...")
    separator = params["csv_separator"]
    users = read_table(params["users_path"], separator=separator)
    events = read_table(params["events_path"], separator=separator)
    revenue = read_table(params["revenue_path"], separator=separator)

    print("Cleaning raw records...")
    frames, skipped = preprocess_input_data(users=users, events=events, revenue=revenue)

    print("Saving processed datasets...")
    output_dir = Path(params["processed_data_path"])
    output_dir.mkdir(parents=True, exist_ok=True)
    for name, frame in frames.items():
        frame.write_parquet(output_dir / f"{name}.parquet")
    with open(output_dir / SKIPPED_RECORDS_FILE, "w") as f:
        yaml.safe_dump(skipped, f)

    print(f"Processed datasets saved in {output_dir}.")
    return skipped


def main():
    print("Starting preprocessing pipeline...")
    # load parameters from confs/params.yml
    params = load_config()
    run_preprocessing(params)
    print("Preprocessing pipeline completed.")


if __name__ == "__main__":
    main()
