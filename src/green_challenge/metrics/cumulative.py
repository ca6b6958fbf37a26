"""Cumulative scores, leaderboard and chart series.

Every call recomputes from the full history; nothing is updated in place.
The tracked hall set defaults to the halls of the first week, so a hall that
starts reporting later is not tracked unless an explicit ``halls`` list is
passed.
"""

import logging
from collections.abc import Mapping, Sequence

from green_challenge.metrics.weekly import POINTS_BY_RANK, score_week_by_resource
from green_challenge.models import ChartPoint, CumulativeRecord, LeaderboardEntry, WeeklyReading

logger = logging.getLogger(__name__)


def calculate_cumulative_scores(
    readings: Sequence[WeeklyReading],
    halls: Sequence[str] | None = None,
    sizes: Mapping[str, float] | None = None,
    points_by_rank: Sequence[int] = POINTS_BY_RANK,
) -> dict[str, CumulativeRecord]:
    """Fold weekly scores into running totals per hall.

    Args:
        readings: Ordered weekly readings.
        halls: Halls to track. Defaults to the halls of the first week.
        sizes: Building size table for normalization.
        points_by_rank: Points for positions 0, 1, 2, ...

    Returns:
        Mapping of hall name to its record. Entry ``i`` of ``weekly_scores`` is
        the running total after week ``i + 1``.
    """
    if not readings:
        return {}

    tracked = list(halls) if halls is not None else readings[0].halls
    running: dict[str, list[int]] = {hall: [] for hall in tracked}

    for reading in readings:
        week_scores = score_week_by_resource(reading, sizes, points_by_rank)
        for hall, scores in running.items():
            weekly = week_scores[hall].total if hall in week_scores else 0
            previous = scores[-1] if scores else 0
            scores.append(previous + weekly)

    logger.debug("Accumulated %d weeks for %d halls", len(readings), len(running))
    return {hall: CumulativeRecord(name=hall, weekly_scores=scores) for hall, scores in running.items()}


def build_leaderboard(records: Mapping[str, CumulativeRecord]) -> list[LeaderboardEntry]:
    """Order halls by final cumulative points.

    Ties are broken by hall name so the ordering is deterministic.

    Args:
        records: Output of calculate_cumulative_scores.

    Returns:
        Leaderboard entries, highest points first.
    """
    entries = [LeaderboardEntry(name=record.name, points=record.points) for record in records.values()]
    return sorted(entries, key=lambda entry: (-entry.points, entry.name))


def top_halls(leaderboard: Sequence[LeaderboardEntry], n: int = 5) -> list[LeaderboardEntry]:
    """First ``n`` leaderboard entries."""
    return list(leaderboard[:n])


def generate_chart_data(
    readings: Sequence[WeeklyReading],
    hall_name: str,
    sizes: Mapping[str, float] | None = None,
    points_by_rank: Sequence[int] = POINTS_BY_RANK,
) -> list[ChartPoint]:
    """Cumulative points of one hall after each week.

    Unlike calculate_cumulative_scores this does not depend on the first
    week's hall set; weeks where the hall is absent add 0 points.

    Args:
        readings: Ordered weekly readings.
        hall_name: Hall to chart.
        sizes: Building size table for normalization.
        points_by_rank: Points for positions 0, 1, 2, ...

    Returns:
        One ChartPoint per week, dated by the week's start.
    """
    points: list[ChartPoint] = []
    total = 0
    for index, reading in enumerate(readings):
        week_scores = score_week_by_resource(reading, sizes, points_by_rank)
        weekly = week_scores[hall_name].total if hall_name in week_scores else 0
        total += weekly
        points.append(ChartPoint(week_number=index + 1, date=reading.start, points=total))
    return points
