"""
Reward events - one occurrence of something that grants EXP.
"""

from __future__ import annotations

from enum import Enum, auto

from pydantic import Field

from unlock_engine.core.component import StaticData


class Difficulty(Enum):
    """Reward difficulty, used to scale quest EXP and tint feedback."""
    EASY = auto()
    MEDIUM = auto()
    HARD = auto()
    EXPERT = auto()


class RewardSource(Enum):
    """What produced a reward."""
    QUEST = auto()
    DAILY_QUEST = auto()
    CUSTOM_QUEST = auto()
    BUILDING_PLACED = auto()
    DECORATION_PLACED = auto()
    MANUAL = auto()


class RewardEvent(StaticData):
    """
    A single reward occurrence.

    Attributes:
        source_id: Unique per occurrence (e.g. quest instance id or
                   date-keyed daily quest id); used for de-duplication
        exp_amount: EXP to grant; negatives are rejected by the pipeline
        difficulty: Difficulty tag, passed through to the apply result
        source: Kind of action that produced the reward
    """
    source_id: str = Field(min_length=1)
    exp_amount: int
    difficulty: Difficulty = Difficulty.MEDIUM
    source: RewardSource = RewardSource.MANUAL
