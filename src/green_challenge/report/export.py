"""Export dashboard data to JSON for the frontend.

Output structure:
    <output_dir>/
        halls.json - per-hall snapshot with weekly history
        leaderboard.json - cumulative leaderboard and top halls
        timeline.json - competition calendar and integrity result
        charts.json - cumulative points per week per hall
        summary.json - run summary and warnings
        weekly_history.csv - long-format normalized metrics, one row per
            week, hall and resource
"""

import json
import logging
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import pandas as pd

from green_challenge.buildings import normalize
from green_challenge.config import Config
from green_challenge.models import RESOURCES, WeeklyReading

logger = logging.getLogger(__name__)

HISTORY_COLUMNS = [
    "week_number",
    "start_date",
    "end_date",
    "hall",
    "resource",
    "raw_value",
    "normalized_value",
    "unit",
]


def history_frame(
    readings: Sequence[WeeklyReading],
    sizes: Mapping[str, float] | None = None,
) -> pd.DataFrame:
    """Build a long-format frame of every reading.

    Args:
        readings: Ordered weekly readings.
        sizes: Building size table for normalization.

    Returns:
        DataFrame with HISTORY_COLUMNS, sorted by week, hall and resource.
    """
    rows: list[dict[str, Any]] = []
    for index, reading in enumerate(readings):
        for hall, values in reading.values.items():
            for resource in RESOURCES:
                raw = values.get(resource)
                if raw is None:
                    continue
                rows.append(
                    {
                        "week_number": index + 1,
                        "start_date": reading.start.isoformat(),
                        "end_date": reading.end.isoformat(),
                        "hall": hall,
                        "resource": resource.value,
                        "raw_value": raw,
                        "normalized_value": normalize(hall, raw, sizes),
                        "unit": resource.normalized_unit,
                    }
                )

    if not rows:
        return pd.DataFrame(columns=HISTORY_COLUMNS)

    df = pd.DataFrame(rows, columns=HISTORY_COLUMNS)
    return df.sort_values(["week_number", "hall", "resource"]).reset_index(drop=True)


def export_dashboard(
    dashboard: dict[str, Any],
    readings: Sequence[WeeklyReading],
    config: Config,
    output_dir: Path,
) -> dict[str, Any]:
    """Write dashboard outputs to ``output_dir``.

    Args:
        dashboard: Output of build_dashboard.
        readings: History the dashboard was built from.
        config: Application configuration.
        output_dir: Directory to write into. Created if missing.

    Returns:
        Dictionary with export statistics:
            - files_written: List of output file paths
            - total_size_bytes: Total size of exported files
            - record_counts: Dict mapping filename to record count
    """
    output_dir.mkdir(parents=True, exist_ok=True)

    stats: dict[str, Any] = {
        "files_written": [],
        "total_size_bytes": 0,
        "record_counts": {},
    }

    integrity = dashboard.get("timeline_integrity")
    documents: dict[str, tuple[Any, int]] = {
        "halls.json": (
            {hall: snapshot.to_dict() for hall, snapshot in dashboard["halls"].items()},
            len(dashboard["halls"]),
        ),
        "leaderboard.json": (
            {
                "leaderboard": [entry.to_dict() for entry in dashboard["leaderboard"]],
                "top_halls": [entry.to_dict() for entry in dashboard["top_halls"]],
            },
            len(dashboard["leaderboard"]),
        ),
        "timeline.json": (
            {
                "events": [event.to_dict() for event in dashboard["timeline"]],
                "integrity": integrity.to_dict() if integrity is not None else None,
                "current_week": dashboard["current_week"],
            },
            len(dashboard["timeline"]),
        ),
        "charts.json": (
            {
                hall: [point.to_dict() for point in points]
                for hall, points in dashboard["charts"].items()
            },
            len(dashboard["charts"]),
        ),
        "summary.json": (
            {
                "title": config.report.title,
                "competition": config.competition.name,
                "season": config.competition.season,
                "selected_week": dashboard["selected_week"],
                "weeks_with_data": dashboard["weeks_with_data"],
                "competition_complete": dashboard["competition_complete"],
                "warnings": dashboard["warnings"],
                "stats": dashboard.get("stats", {}),
            },
            1,
        ),
    }

    for filename, (data, count) in documents.items():
        filepath = output_dir / filename
        with filepath.open("w") as f:
            json.dump(data, f, indent=2, default=str)
        _record(stats, filepath, count)

    frame = history_frame(readings[: dashboard["selected_week"]], config.buildings.sizes)
    csv_path = output_dir / "weekly_history.csv"
    frame.to_csv(csv_path, index=False)
    _record(stats, csv_path, len(frame))

    logger.info(
        "Exported %d files (%d bytes) to %s",
        len(stats["files_written"]),
        stats["total_size_bytes"],
        output_dir,
    )
    return stats


def _record(stats: dict[str, Any], path: Path, count: int) -> None:
    stats["files_written"].append(str(path))
    stats["total_size_bytes"] += path.stat().st_size
    stats["record_counts"][path.name] = count
