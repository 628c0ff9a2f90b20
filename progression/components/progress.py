"""
Player progress record.
"""

from __future__ import annotations

from pydantic import Field

from unlock_engine.core.component import Component


class PlayerProgress(Component):
    """
    Level and experience of the player.

    Owned and mutated exclusively by the ExperienceLedger. The EXP needed
    for the next level is deliberately not stored here; the ledger derives
    it from the level curve so the two can never disagree.

    Attributes:
        level: Current level (1-based)
        current_exp: EXP accumulated within the current level
        total_exp: EXP credited over the player's lifetime
    """
    level: int = Field(default=1, ge=1)
    current_exp: int = Field(default=0, ge=0)
    total_exp: int = Field(default=0, ge=0)
