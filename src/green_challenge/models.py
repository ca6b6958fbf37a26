"""Data model for weekly utility readings and scoring outputs.

A weekly reading arrives as a flat record, the shape the dashboard and the
admin form exchange::

    {
        "startDateTime": "2024-01-08T00:00:00+00:00",
        "endDateTime": "2024-01-14T00:00:00+00:00",
        "Darnall Hall - Electricity : kW": 118250,
        "Darnall Hall - Gas : therm": 3120,
        "Darnall Hall - Water : US gal/min": 40211,
        ...
    }

Records are decoded once into :class:`WeeklyReading`, which holds a nested
``hall -> {resource -> value}`` mapping in record order. Scoring never parses
key strings again.

Output records (:class:`HallSnapshot`, :class:`TimelineEvent`, ...) are frozen
dataclasses with ``to_dict()`` methods producing the camelCase keys the
presentation layer reads.
"""

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any

logger = logging.getLogger(__name__)

HALL_SEPARATOR = " - "
UNIT_SEPARATOR = " : "
START_KEY = "startDateTime"
END_KEY = "endDateTime"


class Resource(str, Enum):
    """Independently ranked consumption metric."""

    ELECTRICITY = "electricity"
    GAS = "gas"
    WATER = "water"

    @property
    def label(self) -> str:
        """Capitalized metric name used in reading keys."""
        return self.value.capitalize()

    @property
    def unit(self) -> str:
        """Raw reading unit."""
        return _RAW_UNITS[self]

    @property
    def normalized_unit(self) -> str:
        """Display unit after per-square-foot normalization."""
        return _NORMALIZED_UNITS[self]

    @classmethod
    def from_label(cls, label: str) -> "Resource | None":
        """Look up a resource by its key label (case-sensitive)."""
        for resource in cls:
            if resource.label == label:
                return resource
        return None


_RAW_UNITS = {
    Resource.ELECTRICITY: "kW",
    Resource.GAS: "therm",
    Resource.WATER: "US gal/min",
}

_NORMALIZED_UNITS = {
    Resource.ELECTRICITY: "kW/sq ft",
    Resource.GAS: "therm/sq ft",
    Resource.WATER: "gal/min/sq ft",
}

RESOURCES: tuple[Resource, ...] = (Resource.ELECTRICITY, Resource.GAS, Resource.WATER)


def reading_key(hall: str, resource: Resource) -> str:
    """Build the flat record key for a hall and resource."""
    return f"{hall}{HALL_SEPARATOR}{resource.label}{UNIT_SEPARATOR}{resource.unit}"


def parse_reading_key(key: str) -> tuple[str, Resource] | None:
    """Split a flat record key into hall name and resource.

    Args:
        key: Key such as ``"Darnall Hall - Gas : therm"``.

    Returns:
        ``(hall, resource)``, or None when the key is not a reading key or
        names an unknown metric.
    """
    if HALL_SEPARATOR not in key:
        return None

    hall, _, resource_info = key.partition(HALL_SEPARATOR)
    label = resource_info.split(UNIT_SEPARATOR)[0]
    resource = Resource.from_label(label)
    if resource is None:
        logger.debug("Skipping key with unknown metric: %s", key)
        return None
    return hall, resource


def _parse_timestamp(value: Any, key: str) -> datetime:
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str):
        msg = f"{key} must be an ISO 8601 string, got {value!r}"
        raise ValueError(msg)
    return datetime.fromisoformat(value)


def _parse_value(value: Any, key: str) -> float:
    if isinstance(value, bool):
        msg = f"Reading {key!r} must be numeric, got {value!r}"
        raise ValueError(msg)
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        msg = f"Reading {key!r} must be numeric, got {value!r}"
        raise ValueError(msg) from e
    if math.isnan(number):
        msg = f"Reading {key!r} is NaN"
        raise ValueError(msg)
    return number


@dataclass(frozen=True)
class WeeklyReading:
    """One week of raw readings for every hall and resource.

    ``values`` is wrapped in read-only mappings on construction.
    """

    start: datetime
    end: datetime
    values: Mapping[str, Mapping[Resource, float]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        frozen = {hall: MappingProxyType(dict(readings)) for hall, readings in self.values.items()}
        object.__setattr__(self, "values", MappingProxyType(frozen))

    @property
    def halls(self) -> list[str]:
        """Hall names in record order."""
        return list(self.values)

    def value(self, hall: str, resource: Resource) -> float | None:
        """Raw reading for a hall and resource, or None when absent."""
        return self.values.get(hall, {}).get(resource)

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "WeeklyReading":
        """Decode a flat record.

        Args:
            record: Mapping with ``startDateTime``, ``endDateTime`` and
                ``"<Hall> - <Metric> : <Unit>"`` keys.

        Returns:
            Decoded reading.

        Raises:
            ValueError: If a timestamp is missing or a value is not numeric.
        """
        for key in (START_KEY, END_KEY):
            if key not in record:
                msg = f"Weekly record missing {key}"
                raise ValueError(msg)

        values: dict[str, dict[Resource, float]] = {}
        for key, raw in record.items():
            parsed = parse_reading_key(key)
            if parsed is None:
                continue
            hall, resource = parsed
            values.setdefault(hall, {})[resource] = _parse_value(raw, key)

        return cls(
            start=_parse_timestamp(record[START_KEY], START_KEY),
            end=_parse_timestamp(record[END_KEY], END_KEY),
            values=values,
        )

    def to_record(self) -> dict[str, Any]:
        """Encode back to the flat record shape."""
        record: dict[str, Any] = {
            START_KEY: self.start.isoformat(),
            END_KEY: self.end.isoformat(),
        }
        for hall, readings in self.values.items():
            for resource, value in readings.items():
                record[reading_key(hall, resource)] = value
        return record


@dataclass(frozen=True)
class ResourceMetrics:
    """Normalized consumption for the three resources."""

    electricity: float = 0.0
    gas: float = 0.0
    water: float = 0.0

    def get(self, resource: Resource) -> float:
        return getattr(self, resource.value)

    def to_dict(self) -> dict[str, float]:
        return {"electricity": self.electricity, "gas": self.gas, "water": self.water}


@dataclass(frozen=True)
class ResourcePoints:
    """Points per resource plus a total.

    For weekly scoring the total is the sum of the three resources. In a
    :class:`HallSnapshot` the total is the cumulative score instead.
    """

    electricity: int = 0
    gas: int = 0
    water: int = 0
    total: int = 0

    def get(self, resource: Resource) -> int:
        return getattr(self, resource.value)

    def to_dict(self) -> dict[str, int]:
        return {
            "electricity": self.electricity,
            "gas": self.gas,
            "water": self.water,
            "total": self.total,
        }


@dataclass(frozen=True)
class WeeklyHistoryEntry:
    """One week of a hall's history."""

    week_number: int
    start_date: datetime
    end_date: datetime
    metrics: ResourceMetrics
    points: ResourcePoints

    def to_dict(self) -> dict[str, Any]:
        return {
            "weekNumber": self.week_number,
            "startDate": self.start_date.isoformat(),
            "endDate": self.end_date.isoformat(),
            "metrics": self.metrics.to_dict(),
            "points": self.points.to_dict(),
        }


@dataclass(frozen=True)
class HallSnapshot:
    """Dashboard view of a single hall."""

    electricity: float
    gas: float
    water: float
    points: ResourcePoints
    weekly_history: list[WeeklyHistoryEntry] = field(default_factory=list)

    def value(self, resource: Resource) -> float:
        return getattr(self, resource.value)

    def to_dict(self) -> dict[str, Any]:
        return {
            "electricity": self.electricity,
            "gas": self.gas,
            "water": self.water,
            "points": self.points.to_dict(),
            "weeklyHistory": [entry.to_dict() for entry in self.weekly_history],
        }


@dataclass(frozen=True)
class CumulativeRecord:
    """Running point totals for one hall."""

    name: str
    weekly_scores: list[int] = field(default_factory=list)

    @property
    def points(self) -> int:
        """Final total: last running total, or 0 with no weeks."""
        return self.weekly_scores[-1] if self.weekly_scores else 0

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "points": self.points, "weeklyScores": list(self.weekly_scores)}


@dataclass(frozen=True)
class LeaderboardEntry:
    """Leaderboard row."""

    name: str
    points: int

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "points": self.points}


@dataclass(frozen=True)
class ChartPoint:
    """Cumulative points of a hall at the end of one week."""

    week_number: int
    date: datetime
    points: int

    def to_dict(self) -> dict[str, Any]:
        return {"weekNumber": self.week_number, "date": self.date.isoformat(), "points": self.points}
