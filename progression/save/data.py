"""
Save data layout.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


SAVE_VERSION = "1.0"


class ProgressionSaveData(BaseModel):
    """
    Everything needed to resume progression.

    Attributes:
        version: Save format version
        level: Player level
        current_exp: EXP within the level
        total_exp: Lifetime EXP
        consumed_reward_source_ids: Reward ids already applied (empty when
                                    consumed ids are session-scoped)
        catalog: Region/building records, kept when unlock levels were
                 generated for this player rather than read from static data
    """
    model_config = ConfigDict(extra='ignore')

    version: str = SAVE_VERSION
    level: int = Field(default=1, ge=1)
    current_exp: int = Field(default=0, ge=0)
    total_exp: int = Field(default=0, ge=0)
    consumed_reward_source_ids: list[str] = Field(default_factory=list)
    catalog: Optional[list[dict[str, Any]]] = None
