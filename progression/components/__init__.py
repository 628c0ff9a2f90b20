"""
Progression records (data-only, Pydantic models).
"""

from progression.components.progress import PlayerProgress
from progression.components.world import Region, Building
from progression.components.rewards import RewardEvent, Difficulty, RewardSource

__all__ = [
    "PlayerProgress",
    "Region",
    "Building",
    "RewardEvent",
    "Difficulty",
    "RewardSource",
]
