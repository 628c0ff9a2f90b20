"""
Rewards - at-most-once EXP intake and the EXP reward table.
"""

from progression.rewards.pipeline import RewardPipeline, ApplyResult, RewardStatus
from progression.rewards.calculator import (
    quest_exp,
    building_placement_exp,
    quest_reward,
    building_reward,
    decoration_reward,
    DECORATION_EXP,
)

__all__ = [
    "RewardPipeline",
    "ApplyResult",
    "RewardStatus",
    "quest_exp",
    "building_placement_exp",
    "quest_reward",
    "building_reward",
    "decoration_reward",
    "DECORATION_EXP",
]
