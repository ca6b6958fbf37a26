"""Test fixtures for green-challenge.

Provides fixtures for:
- Building weekly readings from compact per-hall tuples
- A four-hall, two-week history with known scores
- Test configurations writing into a temp directory
"""

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

from green_challenge.config import Config
from green_challenge.models import Resource, WeeklyReading

WEEK_ONE = datetime(2024, 1, 8, tzinfo=UTC)

MakeWeek = Callable[..., WeeklyReading]


@pytest.fixture
def make_week() -> MakeWeek:
    """Factory for WeeklyReading from ``{hall: (electricity, gas, water)}``.

    Week ``n`` starts ``7 * (n - 1)`` days after 2024-01-08 and ends six days
    later, so consecutive weeks are contiguous.
    """

    def _make(values: dict[str, tuple[float, float, float]], week: int = 1) -> WeeklyReading:
        start = WEEK_ONE + timedelta(days=7 * (week - 1))
        readings = {
            hall: {Resource.ELECTRICITY: e, Resource.GAS: g, Resource.WATER: w}
            for hall, (e, g, w) in values.items()
        }
        return WeeklyReading(start=start, end=start + timedelta(days=6), values=readings)

    return _make


@pytest.fixture
def week_one(make_week: MakeWeek) -> WeeklyReading:
    """Week 1: totals A=7, B=6, C=5, D=0 (halls have no size entry)."""
    return make_week(
        {
            "A": (100, 10, 50),
            "B": (200, 5, 60),
            "C": (300, 20, 40),
            "D": (400, 30, 70),
        },
        week=1,
    )


@pytest.fixture
def week_two(make_week: MakeWeek) -> WeeklyReading:
    """Week 2: totals B=7, C=6, D=5, A=0."""
    return make_week(
        {
            "A": (400, 30, 70),
            "B": (100, 10, 50),
            "C": (200, 5, 60),
            "D": (300, 20, 40),
        },
        week=2,
    )


@pytest.fixture
def two_weeks(week_one: WeeklyReading, week_two: WeeklyReading) -> list[WeeklyReading]:
    """Two contiguous weeks. Cumulative: A=7, B=13, C=11, D=5."""
    return [week_one, week_two]


@pytest.fixture
def config(tmp_path: Path) -> Config:
    """Create test configuration."""
    return Config.model_validate(
        {
            "storage": {"history_path": str(tmp_path / "history.json")},
            "report": {"output_dir": str(tmp_path / "site"), "top_n": 3},
        }
    )
