import polars as pl

RAW_COLUMN_ALIASES = {
    "uid": "user_id",
    "reg_ts": "reg_date",
    "auth_ts": "auth_date",
    "amount": "revenue",
}


def require_columns(pl_df: pl.DataFrame, columns: list[str], table_name: str) -> None:
    missing = [col for col in columns if col not in pl_df.columns]
    if missing:
        raise ValueError(
            f"Missing columns {missing} in {table_name}. Available columns: {pl_df.columns}"
        )


def rename_columns(pl_df: pl.DataFrame, aliases: dict[str, str]) -> pl.DataFrame:
    """
    Rename raw column aliases to their canonical names.
    Aliases whose canonical name is already present are left untouched.
    Args:
        pl_df (pl.DataFrame): Raw input DataFrame.
        aliases (dict[str, str]): Mapping of raw name to canonical name.

    Returns:
        pl.DataFrame: DataFrame with canonical column names.
    """
    renames = {
        raw: canonical
        for raw, canonical in aliases.items()
        if raw in pl_df.columns and canonical not in pl_df.columns
    }
    return pl_df.rename(renames)


def coerce_date_column(pl_df: pl.DataFrame, column: str) -> pl.DataFrame:
    """
    Cast a date-like column to pl.Date.
    Datetimes are truncated to their calendar day, integers and floats are read
    as Unix epoch seconds and strings are parsed non-strictly, so unparseable
    values become null instead of failing the whole frame.
    Args:
        pl_df (pl.DataFrame): Input DataFrame.
        column (str): Name of the date column.

    Returns:
        pl.DataFrame: DataFrame with the column cast to pl.Date.
    """
    dtype = pl_df.schema[column]
    if dtype == pl.Date:
        return pl_df
    if dtype == pl.Datetime:
        expr = pl.col(column).dt.date()
    elif dtype.is_integer():
        expr = pl.from_epoch(pl.col(column), time_unit="s").dt.date()
    elif dtype.is_float():
        # NaN epochs cast to null
        expr = pl.from_epoch(
            pl.col(column).cast(pl.Int64, strict=False), time_unit="s"
        ).dt.date()
    elif dtype == pl.String:
        expr = pl.col(column).str.strip_chars().str.to_date(strict=False)
    else:
        expr = pl.col(column).cast(pl.Date, strict=False)
    return pl_df.with_columns(expr.alias(column))


def drop_malformed_records(
    pl_df: pl.DataFrame, required_cols: list[str]
) -> tuple[pl.DataFrame, int]:
    """
    Drop records with a null value in any of the required columns.
    Args:
        pl_df (pl.DataFrame): Input DataFrame.
        required_cols (list[str]): Columns that must be populated.

    Returns:
        tuple[pl.DataFrame, int]: Cleaned DataFrame and number of dropped records.
    """
    cleaned = pl_df.drop_nulls(subset=required_cols)
    return cleaned, pl_df.height - cleaned.height


def clean_users(pl_df: pl.DataFrame) -> tuple[pl.DataFrame, int]:
    """
    Clean raw user registrations.
    Args:
        pl_df (pl.DataFrame): Raw users with user_id and reg_date.

    Returns:
        tuple[pl.DataFrame, int]: Users with a pl.Date reg_date and the number
        of malformed records dropped.
    """
    pl_df = rename_columns(pl_df, RAW_COLUMN_ALIASES)
    require_columns(pl_df, ["user_id", "reg_date"], "users")
    pl_df = coerce_date_column(pl_df.select("user_id", "reg_date"), "reg_date")
    return drop_malformed_records(pl_df, ["user_id", "reg_date"])


def clean_events(pl_df: pl.DataFrame) -> tuple[pl.DataFrame, int]:
    """
    Clean raw authentication events.
    Args:
        pl_df (pl.DataFrame): Raw events with user_id and auth_date.

    Returns:
        tuple[pl.DataFrame, int]: Events with a pl.Date auth_date and the number
        of malformed records dropped.
    """
    pl_df = rename_columns(pl_df, RAW_COLUMN_ALIASES)
    require_columns(pl_df, ["user_id", "auth_date"], "events")
    pl_df = coerce_date_column(pl_df.select("user_id", "auth_date"), "auth_date")
    return drop_malformed_records(pl_df, ["user_id", "auth_date"])


def clean_revenue(pl_df: pl.DataFrame) -> tuple[pl.DataFrame, int]:
    """
    Clean raw revenue transactions.
    Amounts that are missing, non-numeric, NaN, infinite or negative count as
    malformed.
    A feed without test groups gets a null testgroup column.
    Args:
        pl_df (pl.DataFrame): Raw transactions with user_id, revenue (or amount)
            and an optional testgroup.

    Returns:
        tuple[pl.DataFrame, int]: Transactions and the number of malformed
        records dropped.
    """
    pl_df = rename_columns(pl_df, RAW_COLUMN_ALIASES)
    require_columns(pl_df, ["user_id", "revenue"], "revenue")
    if "testgroup" not in pl_df.columns:
        pl_df = pl_df.with_columns(testgroup=pl.lit(None, dtype=pl.String))
    pl_df = pl_df.select(
        pl.col("user_id"),
        pl.col("revenue").cast(pl.Float64, strict=False).fill_nan(None),
        pl.col("testgroup").cast(pl.String),
    )
    cleaned, skipped = drop_malformed_records(pl_df, ["user_id", "revenue"])
    non_negative = cleaned.filter(
        (pl.col("revenue") >= 0) & pl.col("revenue").is_finite()
    )
    return non_negative, skipped + cleaned.height - non_negative.height
