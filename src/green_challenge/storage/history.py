"""JSON file holding the weekly reading history.

The file is a JSON array of flat weekly records in week order. It stands in
for the external store the dashboard reads from. Writes replace the whole
file, since the history is only ever appended to and recomputed in full.
"""

import json
import logging
from collections.abc import Sequence
from pathlib import Path

from green_challenge.models import WeeklyReading

logger = logging.getLogger(__name__)


def load_history(path: Path) -> list[WeeklyReading]:
    """Load the reading history.

    Args:
        path: History JSON file.

    Returns:
        Weekly readings in file order. Empty when the file doesn't exist.

    Raises:
        ValueError: If the file is not a JSON array of weekly records.
    """
    if not path.exists():
        logger.info("No history at %s, starting empty", path)
        return []

    with path.open() as f:
        try:
            records = json.load(f)
        except json.JSONDecodeError as e:
            msg = f"History file {path} is not valid JSON: {e}"
            raise ValueError(msg) from e

    if not isinstance(records, list):
        msg = f"History file {path} must contain a JSON array"
        raise ValueError(msg)

    readings: list[WeeklyReading] = []
    for index, record in enumerate(records):
        if not isinstance(record, dict):
            msg = f"{path}: week {index + 1} is not an object"
            raise ValueError(msg)
        try:
            readings.append(WeeklyReading.from_record(record))
        except ValueError as e:
            msg = f"{path}: week {index + 1}: {e}"
            raise ValueError(msg) from e

    logger.debug("Loaded %d weeks from %s", len(readings), path)
    return readings


def save_history(path: Path, readings: Sequence[WeeklyReading]) -> None:
    """Write the reading history, creating parent directories.

    Args:
        path: History JSON file.
        readings: Weekly readings in week order.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w") as f:
        json.dump([reading.to_record() for reading in readings], f, indent=2)
    logger.info("Wrote %d weeks to %s", len(readings), path)
