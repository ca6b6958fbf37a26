"""Dashboard data builder.

Builds the per-hall view the dashboard renders:

    - current-week normalized electricity, gas and water
    - current-week points per resource, from a ranking of the latest week only;
      halls without a reading for a resource show 0 and score 0 for it
    - cumulative total points
    - weekly history of normalized metrics and cumulative totals

Weekly history entries carry the cumulative total only; their per-resource
points stay 0 unless ``history_resource_points`` is set.
"""

import logging
from collections.abc import Mapping, Sequence

from green_challenge.buildings import normalize
from green_challenge.metrics.weekly import (
    POINTS_BY_RANK,
    points_for_position,
    rank_resource,
    score_week_by_resource,
)
from green_challenge.models import (
    RESOURCES,
    HallSnapshot,
    Resource,
    ResourceMetrics,
    ResourcePoints,
    WeeklyHistoryEntry,
    WeeklyReading,
)

logger = logging.getLogger(__name__)


def _normalized_metrics(
    reading: WeeklyReading,
    hall: str,
    sizes: Mapping[str, float] | None,
) -> ResourceMetrics:
    values = {}
    for resource in RESOURCES:
        raw = reading.value(hall, resource)
        values[resource.value] = normalize(hall, raw or 0.0, sizes)
    return ResourceMetrics(**values)


def process_data(
    readings: Sequence[WeeklyReading],
    halls: Sequence[str] | None = None,
    sizes: Mapping[str, float] | None = None,
    points_by_rank: Sequence[int] = POINTS_BY_RANK,
    history_resource_points: bool = False,
) -> dict[str, HallSnapshot]:
    """Build the dashboard snapshot for every hall.

    Args:
        readings: Ordered weekly readings. The last one is the current week.
        halls: Halls to include. Defaults to the halls of the latest week.
        sizes: Building size table for normalization.
        points_by_rank: Points for positions 0, 1, 2, ...
        history_resource_points: Fill per-resource points in weekly history
            from each week's ranking instead of leaving them at 0.

    Returns:
        Mapping of hall name to HallSnapshot. Empty when there are no readings.
    """
    if not readings:
        return {}

    current = readings[-1]
    hall_set = list(halls) if halls is not None else current.halls

    current_metrics = {hall: _normalized_metrics(current, hall, sizes) for hall in hall_set}

    # Separate ranking of the latest week, limited to the snapshot's halls that
    # reported the resource
    current_points: dict[str, dict[str, int]] = {hall: {} for hall in hall_set}
    for resource in RESOURCES:
        ranking = rank_resource(current, resource, sizes)
        ordered = [hall for hall, _ in ranking if hall in current_points]
        for position, hall in enumerate(ordered):
            current_points[hall][resource.value] = points_for_position(position, points_by_rank)

    weekly_scores = [score_week_by_resource(reading, sizes, points_by_rank) for reading in readings]

    snapshot: dict[str, HallSnapshot] = {}
    for hall in hall_set:
        history: list[WeeklyHistoryEntry] = []
        total = 0
        for index, reading in enumerate(readings):
            week_points = weekly_scores[index].get(hall, ResourcePoints())
            total += week_points.total
            if history_resource_points:
                points = ResourcePoints(
                    electricity=week_points.electricity,
                    gas=week_points.gas,
                    water=week_points.water,
                    total=total,
                )
            else:
                points = ResourcePoints(total=total)
            history.append(
                WeeklyHistoryEntry(
                    week_number=index + 1,
                    start_date=reading.start,
                    end_date=reading.end,
                    metrics=_normalized_metrics(reading, hall, sizes),
                    points=points,
                )
            )

        metrics = current_metrics[hall]
        snapshot[hall] = HallSnapshot(
            electricity=metrics.electricity,
            gas=metrics.gas,
            water=metrics.water,
            points=ResourcePoints(**current_points[hall], total=total),
            weekly_history=history,
        )

    logger.debug("Built snapshot for %d halls over %d weeks", len(snapshot), len(readings))
    return snapshot


def rank_halls(snapshot: Mapping[str, HallSnapshot], resource: Resource) -> list[tuple[str, float]]:
    """Halls ordered by current normalized value for one resource, lowest first."""
    entries = [(hall, data.value(resource)) for hall, data in snapshot.items()]
    return sorted(entries, key=lambda entry: entry[1])


def resource_ranges(history: Sequence[WeeklyHistoryEntry]) -> dict[Resource, tuple[float, float]]:
    """Minimum and maximum normalized value per resource across a hall's history.

    Returns:
        Mapping of resource to ``(min, max)``. Empty for an empty history.
    """
    if not history:
        return {}
    ranges: dict[Resource, tuple[float, float]] = {}
    for resource in RESOURCES:
        values = [entry.metrics.get(resource) for entry in history]
        ranges[resource] = (min(values), max(values))
    return ranges
