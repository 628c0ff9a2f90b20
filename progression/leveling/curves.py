"""
Level curves - pure functions from level to the EXP needed to leave it.

A curve must be identical across every call site and every save file:
stored progress (level + EXP within level) is only meaningful against
the curve it was earned under.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from progression.config import CurveConfig, CurveKind


class LevelCurve(ABC):
    """Maps a level to the EXP required to advance past it."""

    @abstractmethod
    def _required(self, level: int) -> int:
        ...

    def exp_required(self, level: int) -> int:
        """
        EXP required to advance from `level` to `level + 1`.

        Raises:
            ValueError: If level < 1
        """
        if level < 1:
            raise ValueError(f"Level must be >= 1, got {level}")
        return max(1, self._required(level))

    def total_exp_to_reach(self, level: int) -> int:
        """Cumulative EXP needed to go from level 1 to `level`."""
        return sum(self.exp_required(lvl) for lvl in range(1, level))


@dataclass(frozen=True)
class LinearCurve(LevelCurve):
    """Level L requires step * L EXP."""
    step: int = 100

    def _required(self, level: int) -> int:
        return self.step * level


@dataclass(frozen=True)
class ExponentialCurve(LevelCurve):
    """
    Level L requires round(base * multiplier ** L) EXP.

    With the defaults each level needs roughly 15% more EXP than the
    one before it.
    """
    base: int = 50
    multiplier: float = 1.15

    def _required(self, level: int) -> int:
        return round(self.base * self.multiplier ** level)


def build_curve(config: CurveConfig) -> LevelCurve:
    """Create the curve described by a CurveConfig."""
    if config.kind == CurveKind.LINEAR:
        return LinearCurve(step=config.step)
    return ExponentialCurve(base=config.base, multiplier=config.multiplier)
