"""Scoring pipeline: weekly points, cumulative scores, timeline and dashboard data."""

from green_challenge.metrics.cumulative import (
    build_leaderboard,
    calculate_cumulative_scores,
    generate_chart_data,
    top_halls,
)
from green_challenge.metrics.halls import resolve_halls
from green_challenge.metrics.orchestrator import build_dashboard
from green_challenge.metrics.snapshot import process_data, rank_halls, resource_ranges
from green_challenge.metrics.timeline import generate_timeline, validate_timeline
from green_challenge.metrics.weekly import score_week, score_week_by_resource

__all__ = [
    "build_dashboard",
    "build_leaderboard",
    "calculate_cumulative_scores",
    "generate_chart_data",
    "generate_timeline",
    "process_data",
    "rank_halls",
    "resolve_halls",
    "resource_ranges",
    "score_week",
    "score_week_by_resource",
    "top_halls",
    "validate_timeline",
]
