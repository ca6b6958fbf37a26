"""Tests for the dashboard orchestrator."""

from datetime import UTC, datetime

import pytest

from green_challenge.config import Config
from green_challenge.metrics.halls import resolve_halls
from green_challenge.metrics.orchestrator import build_dashboard
from green_challenge.models import WeeklyReading

NOW = datetime(2024, 1, 16, 9, 0, 0, tzinfo=UTC)


class TestBuildDashboard:
    """Tests for build_dashboard."""

    def test_all_stages_complete(self, two_weeks: list[WeeklyReading], config: Config) -> None:
        """Test a clean run populates every output."""
        dashboard = build_dashboard(two_weeks, config, NOW)

        assert dashboard["stats"]["stages_completed"] == ["timeline", "snapshot", "leaderboard", "charts"]
        assert dashboard["stats"]["errors"] == []
        assert set(dashboard["halls"]) == {"A", "B", "C", "D"}
        assert [entry.name for entry in dashboard["leaderboard"]] == ["B", "C", "A", "D"]
        assert [entry.name for entry in dashboard["top_halls"]] == ["B", "C", "A"]
        assert [point.points for point in dashboard["charts"]["B"]] == [6, 13]
        assert len(dashboard["timeline"]) == 17
        assert dashboard["timeline_integrity"].valid is True
        assert dashboard["warnings"] == []

    def test_week_counts(self, two_weeks: list[WeeklyReading], config: Config) -> None:
        """Test week bookkeeping and the current week index."""
        dashboard = build_dashboard(two_weeks, config, NOW)

        assert dashboard["selected_week"] == 2
        assert dashboard["weeks_with_data"] == 2
        assert dashboard["current_week"] == 1
        assert dashboard["competition_complete"] is False
        assert [event.is_future for event in dashboard["timeline"][:3]] == [False, False, True]

    def test_selected_week(self, two_weeks: list[WeeklyReading], config: Config) -> None:
        """Test viewing an earlier week scores only the weeks up to it."""
        dashboard = build_dashboard(two_weeks, config, NOW, week=1)

        assert dashboard["selected_week"] == 1
        assert dashboard["weeks_with_data"] == 2
        assert dashboard["halls"]["A"].points.total == 7
        assert dashboard["leaderboard"][0].name == "A"
        # Timeline still reflects the full history
        assert dashboard["timeline"][1].is_future is False

    def test_week_zero_is_empty(self, two_weeks: list[WeeklyReading], config: Config) -> None:
        """Test week 0 renders empty results instead of failing."""
        dashboard = build_dashboard(two_weeks, config, NOW, week=0)
        assert dashboard["halls"] == {}
        assert dashboard["leaderboard"] == []
        assert dashboard["charts"] == {}

    def test_week_out_of_range(self, two_weeks: list[WeeklyReading], config: Config) -> None:
        """Test selecting a week past the history raises."""
        with pytest.raises(ValueError, match="outside the history"):
            build_dashboard(two_weeks, config, NOW, week=3)

    def test_empty_history(self, config: Config) -> None:
        """Test first load with no data."""
        dashboard = build_dashboard([], config, NOW)

        assert dashboard["halls"] == {}
        assert dashboard["leaderboard"] == []
        assert len(dashboard["timeline"]) == 17
        assert all(event.is_future for event in dashboard["timeline"])
        assert dashboard["stats"]["errors"] == []

    def test_gap_adds_warning_and_keeps_scores(
        self, make_week, week_one: WeeklyReading, config: Config
    ) -> None:
        """Test a timeline gap is a warning, not a failure."""
        week_three = make_week({"A": (1, 1, 1), "B": (2, 2, 2)}, week=3)
        dashboard = build_dashboard([week_one, week_three], config, NOW)

        assert dashboard["timeline_integrity"].valid is False
        assert len(dashboard["warnings"]) == 1
        assert "gaps between weeks" in dashboard["warnings"][0]
        assert dashboard["leaderboard"]

    def test_union_hall_set(self, make_week, week_one: WeeklyReading, config: Config) -> None:
        """Test one hall set applied to every stage."""
        late = make_week({"A": (5, 5, 5), "E": (1, 1, 1)}, week=2)
        config.scoring.hall_set = "union"
        dashboard = build_dashboard([week_one, late], config, NOW)

        names = {entry.name for entry in dashboard["leaderboard"]}
        assert names == {"A", "B", "C", "D", "E"}
        assert set(dashboard["halls"]) == names
        assert set(dashboard["charts"]) == names

        halls = dashboard["halls"]
        assert halls["E"].points.electricity == 3
        assert halls["A"].points.electricity == 2
        for absent in ("B", "C", "D"):
            assert halls[absent].electricity == 0
            assert halls[absent].points.electricity == 0
            assert halls[absent].points.gas == 0
            assert halls[absent].points.water == 0

    def test_custom_points_table(self, two_weeks: list[WeeklyReading], config: Config) -> None:
        """Test configured points flow into every stage."""
        config.scoring.points_by_rank = [1]
        dashboard = build_dashboard(two_weeks, config, NOW)

        assert dashboard["halls"]["B"].points.total == 2
        assert dashboard["charts"]["B"][-1].points == 2


class TestResolveHalls:
    """Tests for resolve_halls."""

    @pytest.fixture
    def history(self, make_week) -> list[WeeklyReading]:
        return [
            make_week({"A": (1, 1, 1), "B": (1, 1, 1)}, week=1),
            make_week({"B": (1, 1, 1), "C": (1, 1, 1)}, week=2),
        ]

    def test_first_week(self, history: list[WeeklyReading]) -> None:
        assert resolve_halls(history, "first_week") == ["A", "B"]

    def test_latest_week(self, history: list[WeeklyReading]) -> None:
        assert resolve_halls(history, "latest_week") == ["B", "C"]

    def test_union(self, history: list[WeeklyReading]) -> None:
        assert resolve_halls(history, "union") == ["A", "B", "C"]

    def test_empty(self) -> None:
        assert resolve_halls([], "union") == []

    def test_unknown_policy(self, history: list[WeeklyReading]) -> None:
        with pytest.raises(ValueError, match="Unknown hall set policy"):
            resolve_halls(history, "everything")  # type: ignore[arg-type]
