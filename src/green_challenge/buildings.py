"""Residence hall floor areas and per-square-foot normalization."""

from collections.abc import Mapping

# Floor area in square feet.
BUILDING_SIZES: dict[str, float] = {
    "Darnall Hall": 130000,
    "Harbin Hall": 120000,
    "New South Hall": 175000,
    "Village C West": 115000,
    "Village C East": 115000,
    "Copley Hall": 140000,
    "Kennedy Hall": 75000,
    "McCarthy Hall": 160000,
    "Reynolds Hall": 115000,
    "Ryan Hall": 100000,
    "Pedro Arrupe Hall": 220000,
    "Henle Village": 130000,
    "LXR": 90000,
    "Nevils": 85000,
    "Alumni Square": 80000,
    "Village A": 100000,
    "Village B": 80000,
    "Magis Row": 15000,
    "Ida Ryan Hall": 20000,
    "Isaac Hawkins Hall": 40000,
}

# Order of halls in the admin CSV input (hall-major, electricity/gas/water).
HALL_ORDER: list[str] = list(BUILDING_SIZES)


def normalize(
    hall_name: str,
    raw_value: float,
    sizes: Mapping[str, float] | None = None,
) -> float:
    """Convert a raw reading into a per-square-foot value.

    Halls without a size entry are passed through unnormalized.

    Args:
        hall_name: Hall the reading belongs to.
        raw_value: Raw consumption value.
        sizes: Hall to floor area table. Defaults to BUILDING_SIZES.

    Returns:
        ``raw_value / size`` for a known hall, otherwise ``raw_value``.
    """
    table = BUILDING_SIZES if sizes is None else sizes
    size = table.get(hall_name)
    if not size:
        return raw_value
    return raw_value / size
