"""Weekly scoring.

Each week, halls are ranked per resource by normalized consumption (lower is
better) and awarded points by position:

    - 1st place: 3 points
    - 2nd place: 2 points
    - 3rd place: 1 point
    - everyone else: 0 points

A hall's weekly total is the sum over electricity, gas and water (0-9).
Rankings use a stable sort, so tied halls keep the order in which they
appear in the reading.
"""

import logging
from collections.abc import Mapping, Sequence

from green_challenge.buildings import normalize
from green_challenge.models import RESOURCES, Resource, ResourcePoints, WeeklyReading

logger = logging.getLogger(__name__)

POINTS_BY_RANK: tuple[int, ...] = (3, 2, 1)


def points_for_position(position: int, points_by_rank: Sequence[int] = POINTS_BY_RANK) -> int:
    """Points awarded for a 0-based rank position.

    Args:
        position: 0-based position in the ranking, or -1 when unranked.
        points_by_rank: Points for positions 0, 1, 2, ...

    Returns:
        Points for the position, 0 outside the table.
    """
    if 0 <= position < len(points_by_rank):
        return points_by_rank[position]
    return 0


def rank_resource(
    reading: WeeklyReading,
    resource: Resource,
    sizes: Mapping[str, float] | None = None,
) -> list[tuple[str, float]]:
    """Rank halls that reported a resource, lowest normalized value first.

    Args:
        reading: Week of readings.
        resource: Resource to rank.
        sizes: Building size table for normalization.

    Returns:
        List of ``(hall, normalized_value)`` in rank order.
    """
    entries: list[tuple[str, float]] = []
    for hall, readings in reading.values.items():
        raw = readings.get(resource)
        if raw is None:
            continue
        entries.append((hall, normalize(hall, raw, sizes)))

    return sorted(entries, key=lambda entry: entry[1])


def score_week_by_resource(
    reading: WeeklyReading,
    sizes: Mapping[str, float] | None = None,
    points_by_rank: Sequence[int] = POINTS_BY_RANK,
) -> dict[str, ResourcePoints]:
    """Score every hall in a week, per resource.

    Args:
        reading: Week of readings.
        sizes: Building size table for normalization.
        points_by_rank: Points for positions 0, 1, 2, ...

    Returns:
        Mapping of hall name to its points for the week. ``total`` is the sum
        of the three resources.
    """
    by_resource: dict[Resource, dict[str, int]] = {}
    for resource in RESOURCES:
        ranking = rank_resource(reading, resource, sizes)
        by_resource[resource] = {
            hall: points_for_position(position, points_by_rank)
            for position, (hall, _) in enumerate(ranking)
        }

    scores: dict[str, ResourcePoints] = {}
    for hall in reading.halls:
        points = {resource.value: by_resource[resource].get(hall, 0) for resource in RESOURCES}
        scores[hall] = ResourcePoints(**points, total=sum(points.values()))
    return scores


def score_week(
    reading: WeeklyReading,
    hall_name: str,
    sizes: Mapping[str, float] | None = None,
    points_by_rank: Sequence[int] = POINTS_BY_RANK,
) -> int:
    """Total points a hall earned in one week.

    A hall missing from a resource's ranking scores 0 for that resource.

    Args:
        reading: Week of readings.
        hall_name: Hall to score.
        sizes: Building size table for normalization.
        points_by_rank: Points for positions 0, 1, 2, ...

    Returns:
        Weekly total in the range 0-9 with the default points table.
    """
    points = score_week_by_resource(reading, sizes, points_by_rank).get(hall_name)
    if points is None:
        return 0
    return points.total
