from pathlib import Path
import polars as pl

from gamelytics.transforms.preprocessing import (
    clean_events,
    clean_revenue,
    clean_users,
)


def read_table(data_path: str, separator: str = ",") -> pl.DataFrame:
    data_path = Path(data_path)
    if not data_path.exists():
        raise FileNotFoundError(f"Input file not found: {data_path}")
    if data_path.suffix == ".parquet":
        return pl.read_parquet(data_path)
    return pl.read_csv(data_path, separator=separator)


def preprocess_input_data(
    users: pl.DataFrame, events: pl.DataFrame, revenue: pl.DataFrame
) -> tuple[dict[str, pl.DataFrame], dict[str, int]]:
    clean_user_df, skipped_users = clean_users(users)
    clean_event_df, skipped_events = clean_events(events)
    clean_revenue_df, skipped_revenue = clean_revenue(revenue)

    frames = {
        "users": clean_user_df,
        "events": clean_event_df,
        "revenue": clean_revenue_df,
    }
    skipped = {
        "users": skipped_users,
        "events": skipped_events,
        "revenue": skipped_revenue,
    }
    for name, count in skipped.items():
        if count > 0:
            print(f"Warning: skipped {count} malformed {name} records")
    return frames, skipped
