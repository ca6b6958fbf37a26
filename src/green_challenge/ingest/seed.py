"""Seed history generation.

The competition opens with a history of weekly readings for every hall,
from the first competition week through ``until``. Each reading varies
randomly around a per-hall baseline:

    - electricity: baseline 100000-150000 kW
    - gas: baseline 2000-5000 therm
    - water: baseline 20000-80000 US gal/min

and each week lands within +/-20% of the baseline, rounded to an integer.
Pass ``seed`` for reproducible output.
"""

import logging
import random
from collections.abc import Sequence
from datetime import UTC, date, datetime, time, timedelta

from green_challenge.buildings import HALL_ORDER
from green_challenge.models import Resource, WeeklyReading

logger = logging.getLogger(__name__)

SEED_START = date(2024, 1, 8)
SEED_UNTIL = date(2024, 3, 31)

# (minimum, spread) of the per-hall baseline
BASELINES: dict[Resource, tuple[float, float]] = {
    Resource.ELECTRICITY: (100000, 50000),
    Resource.GAS: (2000, 3000),
    Resource.WATER: (20000, 60000),
}


def generate_historical_data(
    start: date = SEED_START,
    until: date = SEED_UNTIL,
    halls: Sequence[str] = HALL_ORDER,
    seed: int | None = None,
) -> list[WeeklyReading]:
    """Generate weekly readings from ``start`` through ``until``.

    Args:
        start: First week's start date.
        until: Last date a week may start on.
        halls: Halls to generate readings for.
        seed: Random seed.

    Returns:
        One WeeklyReading per week, each spanning six days.
    """
    rng = random.Random(seed)
    weeks: list[WeeklyReading] = []

    week_start = datetime.combine(start, time(), tzinfo=UTC)
    last_start = datetime.combine(until, time(), tzinfo=UTC)

    while week_start <= last_start:
        values: dict[str, dict[Resource, float]] = {}
        for hall in halls:
            values[hall] = {}
            for resource, (minimum, spread) in BASELINES.items():
                baseline = minimum + rng.random() * spread
                values[hall][resource] = float(round(baseline * (0.8 + rng.random() * 0.4)))
        weeks.append(WeeklyReading(start=week_start, end=week_start + timedelta(days=6), values=values))
        week_start += timedelta(days=7)

    logger.info("Generated %d weeks of seed data for %d halls", len(weeks), len(halls))
    return weeks
