"""Configuration loading and validation."""

from datetime import date
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from green_challenge.buildings import BUILDING_SIZES, HALL_ORDER
from green_challenge.models import HALL_SEPARATOR


class CompetitionConfig(BaseModel):
    """Competition window configuration."""

    name: str = "Georgetown Green Challenge"
    season: str = "Spring 2024"
    start_date: date = date(2024, 1, 8)
    end_date: date = date(2024, 5, 7)
    week_length_days: int = Field(default=7, ge=1)
    max_gap_days: float = Field(default=1.0, ge=0, description="Largest allowed gap between weeks")

    @model_validator(mode="after")
    def validate_window(self) -> "CompetitionConfig":
        """Validate that the window starts before it ends."""
        if self.start_date >= self.end_date:
            msg = "start_date must be before end_date"
            raise ValueError(msg)
        return self


class BuildingsConfig(BaseModel):
    """Participating halls and their floor areas."""

    sizes: dict[str, float] = Field(default_factory=lambda: dict(BUILDING_SIZES))
    hall_order: list[str] = Field(default_factory=lambda: list(HALL_ORDER))

    @field_validator("hall_order")
    @classmethod
    def validate_hall_names(cls, v: list[str]) -> list[str]:
        """Validate that hall names can be parsed back out of reading keys."""
        for name in v:
            if HALL_SEPARATOR in name:
                msg = f"Hall name must not contain '{HALL_SEPARATOR}': {name!r}"
                raise ValueError(msg)
        if len(set(v)) != len(v):
            msg = "hall_order contains duplicate halls"
            raise ValueError(msg)
        return v

    @field_validator("sizes")
    @classmethod
    def validate_sizes(cls, v: dict[str, float]) -> dict[str, float]:
        """Validate that every floor area is positive."""
        for name, size in v.items():
            if size <= 0:
                msg = f"Building size for {name!r} must be positive, got {size}"
                raise ValueError(msg)
        return v


class ScoringConfig(BaseModel):
    """Scoring configuration."""

    points_by_rank: list[int] = Field(default_factory=lambda: [3, 2, 1], min_length=1)
    hall_set: str = Field(
        default="per_stage",
        pattern=r"^(per_stage|first_week|latest_week|union)$",
        description="Which weeks decide the tracked halls",
    )
    history_resource_points: bool = False


class AdminConfig(BaseModel):
    """Admin submission configuration."""

    token_env: str = "GREEN_CHALLENGE_ADMIN_TOKEN"


class StorageConfig(BaseModel):
    """Reading history file configuration."""

    history_path: Path = Field(default=Path("./data/history.json"))


class ReportConfig(BaseModel):
    """Report configuration section."""

    title: str = "Georgetown Green Challenge"
    output_dir: Path = Field(default=Path("./site/data"))
    top_n: int = Field(default=5, ge=1)


class Config(BaseModel):
    """Root configuration model."""

    competition: CompetitionConfig = Field(default_factory=CompetitionConfig)
    buildings: BuildingsConfig = Field(default_factory=BuildingsConfig)
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    admin: AdminConfig = Field(default_factory=AdminConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)


def load_config(path: Path) -> Config:
    """Load and validate configuration from YAML file.

    Args:
        path: Path to the YAML configuration file.

    Returns:
        Validated Config object.

    Raises:
        FileNotFoundError: If the config file doesn't exist.
        ValidationError: If the config is invalid.
    """
    if not path.exists():
        msg = f"Config file not found: {path}"
        raise FileNotFoundError(msg)

    with path.open() as f:
        raw_config: dict[str, Any] | None = yaml.safe_load(f)

    return Config.model_validate(raw_config or {})
