"""Hall set discovery.

The aggregator tracks the halls of the first week and the dashboard builder
shows the halls of the latest week. ``resolve_halls`` applies one named
policy so a caller can use a single hall set for every stage.
"""

from collections.abc import Sequence
from typing import Literal

from green_challenge.models import WeeklyReading

HallSetPolicy = Literal["first_week", "latest_week", "union"]


def resolve_halls(readings: Sequence[WeeklyReading], policy: HallSetPolicy) -> list[str]:
    """Resolve the hall set for a reading history.

    Args:
        readings: Ordered weekly readings.
        policy: ``first_week`` for the halls of week 1, ``latest_week`` for the
            halls of the most recent week, ``union`` for every hall that ever
            reported, in first-seen order.

    Returns:
        Hall names. Empty when there are no readings.

    Raises:
        ValueError: If the policy is unknown.
    """
    if not readings:
        return []

    if policy == "first_week":
        return readings[0].halls
    if policy == "latest_week":
        return readings[-1].halls
    if policy == "union":
        seen: dict[str, None] = {}
        for reading in readings:
            for hall in reading.halls:
                seen.setdefault(hall, None)
        return list(seen)

    msg = f"Unknown hall set policy: {policy}"
    raise ValueError(msg)
