"""
EXP reward table.

Quests pay by difficulty, with a small bonus for daily and custom
quests. Buildings pay more the later they unlock; decorations pay a
flat amount.
"""

from __future__ import annotations

from progression.components.rewards import Difficulty, RewardEvent, RewardSource


QUEST_BASE_EXP: dict[Difficulty, int] = {
    Difficulty.EASY: 5,
    Difficulty.MEDIUM: 10,
    Difficulty.HARD: 15,
    Difficulty.EXPERT: 20,
}

QUEST_SOURCE_BONUS: dict[RewardSource, int] = {
    RewardSource.DAILY_QUEST: 2,
    RewardSource.CUSTOM_QUEST: 1,
}

QUEST_SOURCES = frozenset({
    RewardSource.QUEST,
    RewardSource.DAILY_QUEST,
    RewardSource.CUSTOM_QUEST,
})

BUILDING_BASE_EXP = 10
BUILDING_EXP_MULTIPLIER = 1.2
DECORATION_EXP = 5


def quest_exp(difficulty: Difficulty, source: RewardSource = RewardSource.QUEST) -> int:
    """EXP for completing a quest of the given difficulty and kind."""
    return QUEST_BASE_EXP[difficulty] + QUEST_SOURCE_BONUS.get(source, 0)


def building_placement_exp(
    unlock_level: int,
    base: int = BUILDING_BASE_EXP,
    multiplier: float = BUILDING_EXP_MULTIPLIER,
) -> int:
    """EXP for placing a building: base * round(multiplier ** (unlock_level - 1))."""
    if unlock_level < 1:
        raise ValueError(f"Unlock level must be >= 1, got {unlock_level}")
    return base * round(multiplier ** (unlock_level - 1))


def quest_reward(
    source_id: str,
    difficulty: Difficulty = Difficulty.MEDIUM,
    source: RewardSource = RewardSource.QUEST,
) -> RewardEvent:
    """Reward for completing a quest."""
    if source not in QUEST_SOURCES:
        raise ValueError(f"Not a quest source: {source.name}")
    return RewardEvent(
        source_id=source_id,
        exp_amount=quest_exp(difficulty, source),
        difficulty=difficulty,
        source=source,
    )


def building_reward(source_id: str, unlock_level: int) -> RewardEvent:
    """Reward for placing a building that unlocks at `unlock_level`."""
    return RewardEvent(
        source_id=source_id,
        exp_amount=building_placement_exp(unlock_level),
        difficulty=Difficulty.MEDIUM,
        source=RewardSource.BUILDING_PLACED,
    )


def decoration_reward(source_id: str) -> RewardEvent:
    """Reward for placing a decoration."""
    return RewardEvent(
        source_id=source_id,
        exp_amount=DECORATION_EXP,
        difficulty=Difficulty.EASY,
        source=RewardSource.DECORATION_PLACED,
    )
