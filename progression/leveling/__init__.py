"""
Leveling - level curves and the experience ledger.
"""

from progression.leveling.curves import (
    LevelCurve,
    LinearCurve,
    ExponentialCurve,
    build_curve,
)
from progression.leveling.ledger import (
    ExperienceLedger,
    LevelChangeResult,
    CARRY_EXP_REMAINDER,
)

__all__ = [
    "LevelCurve",
    "LinearCurve",
    "ExponentialCurve",
    "build_curve",
    "ExperienceLedger",
    "LevelChangeResult",
    "CARRY_EXP_REMAINDER",
]
