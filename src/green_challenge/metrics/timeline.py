"""Competition timeline and reading history integrity checks.

The timeline is the fixed calendar of competition weeks. Its length depends
only on the competition window and the week length. Data only decides which
weeks are in the future. Weeks are included while the whole week fits inside
the window, so the default Spring 2024 window (2024-01-08 to 2024-05-07)
has 17 weeks.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import UTC, date, datetime, timedelta
from typing import Any

from green_challenge.models import WeeklyReading

logger = logging.getLogger(__name__)

COMPETITION_START = date(2024, 1, 8)
COMPETITION_END = date(2024, 5, 7)
WEEK_LENGTH_DAYS = 7
MAX_GAP = timedelta(days=1)


@dataclass(frozen=True)
class TimelineEvent:
    """A week of the competition calendar."""

    week_number: int
    start_date: date
    end_date: date
    is_current_week: bool
    is_future: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "weekNumber": self.week_number,
            "startDate": self.start_date.isoformat(),
            "endDate": self.end_date.isoformat(),
            "isCurrentWeek": self.is_current_week,
            "isFuture": self.is_future,
        }


@dataclass(frozen=True)
class TimelineGap:
    """Gap between two consecutive weeks of readings."""

    week_number: int
    previous_end: datetime
    start: datetime

    @property
    def gap(self) -> timedelta:
        return self.start - self.previous_end

    def __str__(self) -> str:
        """Format gap for display."""
        return (
            f"Week {self.week_number} starts {self.gap} after week "
            f"{self.week_number - 1} ends ({self.previous_end.isoformat()} -> "
            f"{self.start.isoformat()})"
        )


@dataclass
class TimelineIntegrityResult:
    """Result of checking that reading weeks are contiguous."""

    valid: bool = True
    weeks_checked: int = 0
    errors: list[TimelineGap] = field(default_factory=list)

    def add_error(self, gap: TimelineGap) -> None:
        """Record a gap and mark the result invalid."""
        self.errors.append(gap)
        self.valid = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "valid": self.valid,
            "weeksChecked": self.weeks_checked,
            "errors": [str(error) for error in self.errors],
        }


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def generate_timeline(
    weeks_with_data: int,
    now: datetime,
    start: date = COMPETITION_START,
    end: date = COMPETITION_END,
    week_length_days: int = WEEK_LENGTH_DAYS,
) -> list[TimelineEvent]:
    """Generate the competition calendar.

    Args:
        weeks_with_data: Number of weeks with submitted readings.
        now: Current time, used to flag the current week.
        start: First day of week 1.
        end: Last day of the competition window.
        week_length_days: Stride between week starts.

    Returns:
        One TimelineEvent per week that fits in the window.
    """
    today = now.date()
    stride = timedelta(days=week_length_days)
    span = timedelta(days=week_length_days - 1)

    events: list[TimelineEvent] = []
    week_start = start
    week_number = 1
    while week_start + span <= end:
        week_end = week_start + span
        events.append(
            TimelineEvent(
                week_number=week_number,
                start_date=week_start,
                end_date=week_end,
                is_current_week=week_start <= today <= week_end,
                is_future=week_number > weeks_with_data,
            )
        )
        week_start += stride
        week_number += 1

    return events


def find_current_week(readings: Sequence[WeeklyReading], now: datetime) -> int | None:
    """Index of the reading whose week contains ``now``.

    Naive datetimes are treated as UTC.

    Returns:
        0-based index into ``readings``, or None when no week contains ``now``.
    """
    moment = _as_utc(now)
    for index, reading in enumerate(readings):
        if _as_utc(reading.start) <= moment <= _as_utc(reading.end):
            return index
    return None


def is_competition_complete(weeks_with_data: int, timeline: Sequence[TimelineEvent]) -> bool:
    """True once every timeline week has data."""
    return bool(timeline) and weeks_with_data >= len(timeline)


def validate_timeline(
    readings: Sequence[WeeklyReading],
    max_gap: timedelta = MAX_GAP,
) -> TimelineIntegrityResult:
    """Check that consecutive reading weeks leave no gap longer than ``max_gap``.

    Gaps are reported in the result rather than raised so the rest of the
    dashboard can still be built.

    Args:
        readings: Ordered weekly readings.
        max_gap: Largest allowed time between one week's end and the next
            week's start.

    Returns:
        TimelineIntegrityResult listing every gap found.
    """
    result = TimelineIntegrityResult(weeks_checked=len(readings))

    for index in range(1, len(readings)):
        previous_end = _as_utc(readings[index - 1].end)
        start = _as_utc(readings[index].start)
        if start - previous_end > max_gap:
            result.add_error(TimelineGap(week_number=index + 1, previous_end=previous_end, start=start))

    if not result.valid:
        logger.warning("Timeline data contains %d gap(s) between weeks", len(result.errors))

    return result
