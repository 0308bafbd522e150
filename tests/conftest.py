from datetime import date

import polars as pl
import pytest


@pytest.fixture
def users() -> pl.DataFrame:
    return pl.DataFrame(
        {
            "user_id": [1, 2, 3, 4, 5, 6],
            "reg_date": [
                date(2024, 1, 1),
                date(2024, 1, 1),
                date(2024, 1, 1),
                date(2024, 1, 2),
                date(2024, 1, 2),
                date(2024, 1, 2),
            ],
        }
    )


@pytest.fixture
def events() -> pl.DataFrame:
    return pl.DataFrame(
        {
            "user_id": [1, 1, 1, 2, 2, 4, 4, 5, 5, 5],
            "auth_date": [
                date(2024, 1, 1),
                date(2024, 1, 2),
                date(2024, 1, 6),
                date(2024, 1, 1),
                date(2024, 1, 1),
                date(2024, 1, 2),
                date(2024, 1, 22),
                date(2024, 1, 2),
                date(2024, 1, 12),
                date(2024, 3, 1),
            ],
        }
    )


@pytest.fixture
def revenue() -> pl.DataFrame:
    return pl.DataFrame(
        {
            "user_id": [1, 1, 2, 4, 5, 6],
            "revenue": [10.0, 5.0, 0.0, 20.0, 0.0, 7.0],
            "testgroup": ["a", "a", "a", "b", "b", None],
        }
    )
