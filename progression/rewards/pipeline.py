"""
Reward pipeline - validated, at-most-once EXP intake.

UI call sites (quest completion, building placement) may fire more than
once for the same occurrence. Each reward carries a source id; the
pipeline applies a given source id once and rejects every repeat.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterable, Optional

from unlock_engine.core.errors import DuplicateReward, InvalidRewardAmount, ProgressionError
from progression.components.rewards import Difficulty, RewardEvent
from progression.leveling.ledger import ExperienceLedger, LevelChangeResult

logger = logging.getLogger(__name__)


class RewardStatus(Enum):
    """Outcome of a reward submission."""
    APPLIED = auto()
    DUPLICATE = auto()
    INVALID_AMOUNT = auto()


@dataclass(frozen=True)
class ApplyResult:
    """
    Result of RewardPipeline.submit().

    Attributes:
        status: Whether the reward was applied or why it was rejected
        event: The submitted reward
        level_change: Ledger result (None when rejected)
        error: The rejection, for callers that want to log or raise it
    """
    status: RewardStatus
    event: RewardEvent
    level_change: Optional[LevelChangeResult] = None
    error: Optional[ProgressionError] = None

    @property
    def applied(self) -> bool:
        return self.status == RewardStatus.APPLIED

    @property
    def difficulty(self) -> Difficulty:
        """Difficulty of the originating reward (for feedback styling)."""
        return self.event.difficulty

    def raise_for_status(self) -> None:
        """Raise the rejection error, if any."""
        if self.error is not None:
            raise self.error


class RewardPipeline:
    """
    Validates rewards and forwards them to the ledger.

    Steps for each submission:
    1. Reject if the source id was already applied (DUPLICATE)
    2. Reject if the EXP amount is negative (INVALID_AMOUNT)
    3. Otherwise add the EXP and mark the source id consumed

    Rejections never touch player state.
    """

    def __init__(self, ledger: ExperienceLedger, consumed: Iterable[str] = ()):
        self._ledger = ledger
        self._consumed: set[str] = set(consumed)

    def submit(self, event: RewardEvent) -> ApplyResult:
        """
        Apply a reward at most once.

        Args:
            event: The reward to apply

        Returns:
            ApplyResult with the ledger's LevelChangeResult when applied
        """
        if event.source_id in self._consumed:
            logger.debug(f"Duplicate reward ignored: '{event.source_id}'")
            return ApplyResult(
                status=RewardStatus.DUPLICATE,
                event=event,
                error=DuplicateReward(event.source_id),
            )

        if event.exp_amount < 0:
            logger.warning(
                f"Rejected reward '{event.source_id}': negative EXP {event.exp_amount}"
            )
            return ApplyResult(
                status=RewardStatus.INVALID_AMOUNT,
                event=event,
                error=InvalidRewardAmount(event.exp_amount, event.source_id),
            )

        # Mark consumed first: handlers notified during add_exp may resubmit
        self._consumed.add(event.source_id)
        try:
            level_change = self._ledger.add_exp(event.exp_amount)
        except Exception:
            self._consumed.discard(event.source_id)
            raise

        logger.debug(
            f"Applied reward '{event.source_id}' ({event.source.name}, "
            f"{event.difficulty.name}): +{event.exp_amount} EXP"
        )
        return ApplyResult(
            status=RewardStatus.APPLIED,
            event=event,
            level_change=level_change,
        )

    def is_consumed(self, source_id: str) -> bool:
        return source_id in self._consumed

    @property
    def consumed_source_ids(self) -> frozenset[str]:
        return frozenset(self._consumed)

    def restore_consumed(self, source_ids: Iterable[str]) -> None:
        """Replace the consumed set (loading a save)."""
        self._consumed = set(source_ids)

    def reset(self) -> None:
        self._consumed.clear()
