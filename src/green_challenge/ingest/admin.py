"""Admin submission of a new week of readings.

Admins paste one comma-separated line of values, three per hall in hall
order (electricity, gas, water). The line is validated in full before a
WeeklyReading is built, so a rejected submission leaves the history
untouched.

Submitting requires an AdminCapability, obtained from grant_admin with the
token supplied by the session collaborator.
"""

import hmac
import logging
import math
import re
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta

from green_challenge.buildings import HALL_ORDER
from green_challenge.models import RESOURCES, Resource, WeeklyReading

logger = logging.getLogger(__name__)

WEEK_SPAN = timedelta(days=6)

# Decimal or exponent notation only
NUMBER_PATTERN = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


class InputValidationError(ValueError):
    """Raised when submitted readings are malformed."""


class AuthorizationError(PermissionError):
    """Raised when a submission is attempted without admin rights."""


@dataclass(frozen=True)
class AdminCapability:
    """Proof that the holder may submit new weeks."""

    subject: str
    granted_at: datetime


def grant_admin(
    token: str | None,
    expected_token: str | None,
    now: datetime,
    subject: str = "admin",
) -> AdminCapability:
    """Exchange an admin token for a submission capability.

    Args:
        token: Token presented by the caller.
        expected_token: Configured admin token.
        now: Grant time.
        subject: Name recorded on the capability.

    Returns:
        AdminCapability for the caller.

    Raises:
        AuthorizationError: If no admin token is configured or the token does
            not match.
    """
    if not expected_token:
        msg = "Admin submissions are disabled: no admin token configured"
        raise AuthorizationError(msg)
    if not token or not hmac.compare_digest(token.encode(), expected_token.encode()):
        msg = "Invalid admin token"
        raise AuthorizationError(msg)

    logger.info("Granted admin capability to %s", subject)
    return AdminCapability(subject=subject, granted_at=now)


def parse_week_values(text: str, hall_order: Sequence[str] = HALL_ORDER) -> list[float]:
    """Parse and validate a comma-separated line of readings.

    Args:
        text: Values separated by commas, three per hall.
        hall_order: Halls in input order.

    Returns:
        Parsed values in input order.

    Raises:
        InputValidationError: If the count is wrong, a value is not a finite
            number, or a value is negative.
    """
    parts = [part.strip() for part in text.strip().split(",")]
    expected = len(hall_order) * len(RESOURCES)

    if len(parts) != expected:
        msg = f"Expected {expected} values (3 per hall), but got {len(parts)}"
        raise InputValidationError(msg)

    values: list[float] = []
    for part in parts:
        value = float(part) if NUMBER_PATTERN.fullmatch(part) else math.nan
        if not math.isfinite(value):
            msg = "All values must be valid numbers"
            raise InputValidationError(msg)
        values.append(value)

    if any(value < 0 for value in values):
        msg = "All values must be non-negative numbers"
        raise InputValidationError(msg)

    return values


def build_week(
    values: Sequence[float],
    now: datetime,
    hall_order: Sequence[str] = HALL_ORDER,
) -> WeeklyReading:
    """Build a WeeklyReading from validated values.

    The week starts at ``now`` and ends six days later.

    Args:
        values: Hall-major values, electricity, gas, water per hall.
        now: Submission time.
        hall_order: Halls in input order.

    Returns:
        The new week.
    """
    readings: dict[str, dict[Resource, float]] = {}
    for index, hall in enumerate(hall_order):
        base = index * len(RESOURCES)
        readings[hall] = {
            resource: values[base + offset] for offset, resource in enumerate(RESOURCES)
        }
    return WeeklyReading(start=now, end=now + WEEK_SPAN, values=readings)


def submit_week(
    history: Sequence[WeeklyReading],
    text: str,
    capability: AdminCapability,
    now: datetime,
    hall_order: Sequence[str] = HALL_ORDER,
) -> tuple[WeeklyReading, ...]:
    """Validate a submission and append it to the history.

    Args:
        history: Existing weekly readings. Not modified.
        text: Comma-separated values from the admin form.
        capability: Capability from grant_admin.
        now: Submission time.
        hall_order: Halls in input order.

    Returns:
        New history with the submitted week appended.

    Raises:
        AuthorizationError: If ``capability`` is not an AdminCapability.
        InputValidationError: If the values are malformed.
    """
    if not isinstance(capability, AdminCapability):
        msg = "Submitting a week requires an admin capability"
        raise AuthorizationError(msg)

    values = parse_week_values(text, hall_order)
    week = build_week(values, now, hall_order)

    logger.info(
        "Week %d submitted by %s (%s to %s)",
        len(history) + 1,
        capability.subject,
        week.start.isoformat(),
        week.end.isoformat(),
    )
    return (*history, week)
