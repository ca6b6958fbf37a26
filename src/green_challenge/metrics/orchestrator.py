"""Orchestrator for dashboard calculation.

Runs every scoring stage over a reading history and collects the outputs the
presentation layer needs. The whole pipeline is recomputed on every call.
"""

import logging
from collections.abc import Callable, Sequence
from datetime import UTC, datetime, timedelta
from typing import Any

from green_challenge.config import Config
from green_challenge.metrics.cumulative import (
    build_leaderboard,
    calculate_cumulative_scores,
    generate_chart_data,
    top_halls,
)
from green_challenge.metrics.halls import resolve_halls
from green_challenge.metrics.snapshot import process_data
from green_challenge.metrics.timeline import (
    find_current_week,
    generate_timeline,
    is_competition_complete,
    validate_timeline,
)
from green_challenge.models import WeeklyReading

logger = logging.getLogger(__name__)

# (full history, selected history, hall set, config, now) -> dashboard fields
Stage = Callable[
    [Sequence[WeeklyReading], Sequence[WeeklyReading], list[str] | None, Config, datetime],
    dict[str, Any],
]


def build_dashboard(
    readings: Sequence[WeeklyReading],
    config: Config,
    now: datetime,
    week: int | None = None,
) -> dict[str, Any]:
    """Run all dashboard stages.

    Scoring stages see the history up to the selected week. The timeline and
    its integrity check always see the full history.

    Args:
        readings: Full ordered reading history.
        config: Application configuration.
        now: Current time.
        week: 1-based week to view, or None for the latest week.

    Returns:
        Dictionary with:
        - halls: hall name -> HallSnapshot
        - leaderboard: list of LeaderboardEntry
        - top_halls: first ``report.top_n`` leaderboard entries
        - charts: hall name -> list of ChartPoint
        - timeline: list of TimelineEvent
        - timeline_integrity: TimelineIntegrityResult
        - current_week, selected_week, weeks_with_data, competition_complete
        - warnings: user-visible warning messages
        - stats: run statistics, including per-stage errors

    Raises:
        ValueError: If ``week`` is outside the history.
    """
    start_time = datetime.now(UTC)

    if week is not None and not 0 <= week <= len(readings):
        msg = f"Week {week} is outside the history (0-{len(readings)})"
        raise ValueError(msg)

    selected = list(readings if week is None else readings[:week])
    policy = config.scoring.hall_set
    halls = None if policy == "per_stage" else resolve_halls(selected, policy)  # type: ignore[arg-type]

    logger.info(
        "Building dashboard for week %d of %d (hall set: %s)",
        len(selected),
        len(readings),
        policy,
    )

    dashboard: dict[str, Any] = {
        "halls": {},
        "leaderboard": [],
        "top_halls": [],
        "charts": {},
        "timeline": [],
        "timeline_integrity": None,
        "current_week": None,
        "selected_week": len(selected),
        "weeks_with_data": len(readings),
        "competition_complete": False,
        "warnings": [],
    }
    stats: dict[str, Any] = {
        "start_time": start_time.isoformat(),
        "stages_completed": [],
        "errors": [],
    }

    stages: list[tuple[str, Stage]] = [
        ("timeline", _run_timeline),
        ("snapshot", _run_snapshot),
        ("leaderboard", _run_leaderboard),
        ("charts", _run_charts),
    ]

    for name, stage_fn in stages:
        try:
            dashboard.update(stage_fn(readings, selected, halls, config, now))
            stats["stages_completed"].append(name)
        except Exception as e:
            stats["errors"].append(f"{name}: {e!s}")
            logger.exception("Failed to build %s", name)

    integrity = dashboard["timeline_integrity"]
    if integrity is not None and not integrity.valid:
        dashboard["warnings"].append(
            "Timeline data contains gaps between weeks. "
            "Please contact the administrator to resolve this issue."
        )

    end_time = datetime.now(UTC)
    stats["end_time"] = end_time.isoformat()
    stats["duration_seconds"] = (end_time - start_time).total_seconds()
    dashboard["stats"] = stats

    logger.info(
        "Dashboard complete: %d halls, %d stages, %d errors",
        len(dashboard["halls"]),
        len(stats["stages_completed"]),
        len(stats["errors"]),
    )
    return dashboard


def _run_timeline(
    readings: Sequence[WeeklyReading],
    selected: Sequence[WeeklyReading],
    halls: list[str] | None,
    config: Config,
    now: datetime,
) -> dict[str, Any]:
    competition = config.competition
    timeline = generate_timeline(
        len(readings),
        now,
        start=competition.start_date,
        end=competition.end_date,
        week_length_days=competition.week_length_days,
    )
    integrity = validate_timeline(readings, max_gap=timedelta(days=competition.max_gap_days))
    return {
        "timeline": timeline,
        "timeline_integrity": integrity,
        "current_week": find_current_week(readings, now),
        "competition_complete": is_competition_complete(len(readings), timeline),
    }


def _run_snapshot(
    readings: Sequence[WeeklyReading],
    selected: Sequence[WeeklyReading],
    halls: list[str] | None,
    config: Config,
    now: datetime,
) -> dict[str, Any]:
    snapshot = process_data(
        selected,
        halls=halls,
        sizes=config.buildings.sizes,
        points_by_rank=config.scoring.points_by_rank,
        history_resource_points=config.scoring.history_resource_points,
    )
    return {"halls": snapshot}


def _run_leaderboard(
    readings: Sequence[WeeklyReading],
    selected: Sequence[WeeklyReading],
    halls: list[str] | None,
    config: Config,
    now: datetime,
) -> dict[str, Any]:
    records = calculate_cumulative_scores(
        selected,
        halls=halls,
        sizes=config.buildings.sizes,
        points_by_rank=config.scoring.points_by_rank,
    )
    leaderboard = build_leaderboard(records)
    return {"leaderboard": leaderboard, "top_halls": top_halls(leaderboard, config.report.top_n)}


def _run_charts(
    readings: Sequence[WeeklyReading],
    selected: Sequence[WeeklyReading],
    halls: list[str] | None,
    config: Config,
    now: datetime,
) -> dict[str, Any]:
    chart_halls = halls if halls is not None else (selected[-1].halls if selected else [])
    charts = {
        hall: generate_chart_data(
            selected,
            hall,
            sizes=config.buildings.sizes,
            points_by_rank=config.scoring.points_by_rank,
        )
        for hall in chart_halls
    }
    return {"charts": charts}
