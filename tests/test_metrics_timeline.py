"""Tests for the competition timeline and integrity checks."""

from datetime import UTC, date, datetime, timedelta

import pytest

from green_challenge.metrics.timeline import (
    TimelineEvent,
    find_current_week,
    generate_timeline,
    is_competition_complete,
    validate_timeline,
)
from green_challenge.models import WeeklyReading

NOW = datetime(2024, 2, 14, 12, 0, 0, tzinfo=UTC)


class TestGenerateTimeline:
    """Tests for generate_timeline."""

    @pytest.mark.parametrize("weeks_with_data", [0, 5, 17, 40])
    def test_fixed_event_count(self, weeks_with_data: int) -> None:
        """Test the default window always yields 17 weeks."""
        assert len(generate_timeline(weeks_with_data, NOW)) == 17

    def test_week_boundaries(self) -> None:
        """Test first and last week dates and numbering."""
        events = generate_timeline(0, NOW)

        assert events[0].start_date == date(2024, 1, 8)
        assert events[0].end_date == date(2024, 1, 14)
        assert events[-1].week_number == 17
        assert events[-1].start_date == date(2024, 4, 29)
        assert events[-1].end_date == date(2024, 5, 5)
        for previous, current in zip(events, events[1:], strict=False):
            assert current.start_date - previous.start_date == timedelta(days=7)

    def test_future_weeks(self) -> None:
        """Test weeks past the data count are flagged future."""
        events = generate_timeline(12, NOW)

        assert [event.is_future for event in events[:12]] == [False] * 12
        assert [event.is_future for event in events[12:]] == [True] * 5

    def test_current_week(self) -> None:
        """Test the week containing now is flagged current."""
        events = generate_timeline(12, NOW)
        current = [event.week_number for event in events if event.is_current_week]
        assert current == [6]

    def test_no_current_week_outside_window(self) -> None:
        """Test no week is current after the competition."""
        events = generate_timeline(17, datetime(2024, 6, 1, tzinfo=UTC))
        assert not any(event.is_current_week for event in events)

    def test_custom_window(self) -> None:
        """Test a custom window and stride."""
        events = generate_timeline(
            1,
            NOW,
            start=date(2024, 3, 1),
            end=date(2024, 3, 31),
            week_length_days=10,
        )
        assert [event.start_date for event in events] == [
            date(2024, 3, 1),
            date(2024, 3, 11),
            date(2024, 3, 21),
        ]

    def test_to_dict(self) -> None:
        """Test the presentation keys."""
        event = TimelineEvent(
            week_number=1,
            start_date=date(2024, 1, 8),
            end_date=date(2024, 1, 14),
            is_current_week=False,
            is_future=True,
        )
        assert event.to_dict() == {
            "weekNumber": 1,
            "startDate": "2024-01-08",
            "endDate": "2024-01-14",
            "isCurrentWeek": False,
            "isFuture": True,
        }


class TestValidateTimeline:
    """Tests for validate_timeline."""

    def test_contiguous_weeks_are_valid(self, two_weeks: list[WeeklyReading]) -> None:
        """Test a one-day step between end and next start is allowed."""
        result = validate_timeline(two_weeks)
        assert result.valid is True
        assert result.weeks_checked == 2
        assert result.errors == []

    def test_empty_history_is_valid(self) -> None:
        """Test no readings is not an error."""
        assert validate_timeline([]).valid is True

    def test_gap_is_reported(self, make_week, week_one: WeeklyReading) -> None:
        """Test a skipped week is reported, not raised."""
        week_three = make_week({"A": (1, 1, 1)}, week=3)
        result = validate_timeline([week_one, week_three])

        assert result.valid is False
        assert len(result.errors) == 1
        assert result.errors[0].week_number == 2
        assert result.errors[0].gap == timedelta(days=8)
        assert "Week 2" in str(result.errors[0])
        assert result.to_dict()["valid"] is False

    def test_custom_max_gap(self, make_week, week_one: WeeklyReading) -> None:
        """Test a wider tolerance accepts the gap."""
        week_three = make_week({"A": (1, 1, 1)}, week=3)
        result = validate_timeline([week_one, week_three], max_gap=timedelta(days=8))
        assert result.valid is True


class TestFindCurrentWeek:
    """Tests for find_current_week."""

    def test_inside_a_week(self, two_weeks: list[WeeklyReading]) -> None:
        """Test the index of the week containing now."""
        assert find_current_week(two_weeks, datetime(2024, 1, 16, tzinfo=UTC)) == 1

    def test_outside_all_weeks(self, two_weeks: list[WeeklyReading]) -> None:
        """Test None when no week contains now."""
        assert find_current_week(two_weeks, datetime(2024, 3, 1, tzinfo=UTC)) is None

    def test_naive_now_treated_as_utc(self, two_weeks: list[WeeklyReading]) -> None:
        """Test naive datetimes compare against aware readings."""
        assert find_current_week(two_weeks, datetime(2024, 1, 9)) == 0


class TestIsCompetitionComplete:
    """Tests for is_competition_complete."""

    def test_complete_once_all_weeks_have_data(self) -> None:
        """Test completion against the timeline length."""
        events = generate_timeline(0, NOW)
        assert is_competition_complete(16, events) is False
        assert is_competition_complete(17, events) is True

    def test_empty_timeline_is_never_complete(self) -> None:
        """Test an empty timeline."""
        assert is_competition_complete(3, []) is False
