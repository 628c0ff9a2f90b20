"""
Progression configuration.

Every tunable of the engine in one validated model. Load it from JSON
or build it in code:

    config = ProgressionConfig.from_file("game/data/progression.json")
    config = ProgressionConfig(max_level=30, curve=CurveConfig(kind="linear"))
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, model_validator


class CurveKind(str, Enum):
    """Available level curves."""
    LINEAR = "linear"
    EXPONENTIAL = "exponential"


class CurveConfig(BaseModel):
    """
    Level curve parameters.

    Attributes:
        kind: Which curve to use
        step: Linear curve - EXP per level (level L needs step * L)
        base: Exponential curve - base EXP
        multiplier: Exponential curve - growth per level
    """
    model_config = ConfigDict(extra='forbid')

    kind: CurveKind = CurveKind.EXPONENTIAL
    step: int = Field(default=100, ge=1)
    base: int = Field(default=50, ge=1)
    multiplier: float = Field(default=1.15, ge=1.0)


class ProgressionConfig(BaseModel):
    """
    Engine configuration.

    Attributes:
        curve: Level curve parameters
        max_level: Level cap; EXP earned at the cap is ignored
        max_unlock_level: Highest level generated unlock tables spread buildings over
        persist_consumed_ids: Keep consumed reward ids in save files, so
                              date-keyed rewards cannot be claimed twice
                              across sessions
        min_construction_minutes: Build time of the earliest building
        max_construction_minutes: Build time of the latest building
        data_path: Root of the static data (schemas/ and database/)
        save_path: Directory for save files
    """
    model_config = ConfigDict(extra='forbid')

    curve: CurveConfig = Field(default_factory=CurveConfig)
    max_level: int = Field(default=50, ge=1)
    max_unlock_level: int = Field(default=40, ge=1)
    persist_consumed_ids: bool = True
    min_construction_minutes: float = Field(default=1.0, gt=0)
    max_construction_minutes: float = Field(default=360.0, gt=0)
    data_path: Path = Path("game/data")
    save_path: Path = Path("game/saves")

    @model_validator(mode='after')
    def _check_construction_bounds(self) -> ProgressionConfig:
        if self.min_construction_minutes > self.max_construction_minutes:
            raise ValueError(
                "min_construction_minutes must not exceed max_construction_minutes"
            )
        return self

    @classmethod
    def from_file(cls, path: Path | str) -> ProgressionConfig:
        """Load configuration from a JSON file."""
        with open(path, 'r', encoding='utf-8') as f:
            return cls.model_validate_json(f.read())
