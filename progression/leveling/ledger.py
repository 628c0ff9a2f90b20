"""
Experience ledger - the single writer of PlayerProgress.

add_exp() runs the whole level-up loop on local values, commits the
outcome in one step, and only then hands the result to the notification
dispatcher. One large grant can cross several levels; every crossed
level is reported so per-level unlocks are never skipped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from unlock_engine.core.errors import InvalidRewardAmount, SaveDataError
from progression.components.progress import PlayerProgress
from progression.components.world import Building, Region
from progression.leveling.curves import LevelCurve

if TYPE_CHECKING:
    from progression.notifications import NotificationDispatcher
    from progression.unlocks.resolver import UnlockResolver

logger = logging.getLogger(__name__)

# EXP left over after a level-up carries into the next level.
# When False, the leftover is discarded (and reported as exp_discarded).
CARRY_EXP_REMAINDER = True


@dataclass(frozen=True)
class LevelChangeResult:
    """
    Outcome of one add_exp() call.

    EXP is conserved:
        start_exp + exp_added == exp_consumed + current_exp + exp_discarded

    Attributes:
        start_level: Level before the grant
        end_level: Level after the grant
        levels_crossed: Every level reached, in order (empty if none)
        start_exp: EXP within the level before the grant
        exp_added: EXP requested
        exp_consumed: EXP spent crossing level thresholds
        exp_discarded: EXP ignored (level cap reached)
        current_exp: EXP within the level after the grant
        exp_required_for_next_level: Threshold of the final level
        unlocked_regions: Regions newly unlocked, ascending unlock level
        region_unlock_levels: Unlock level of each entry in unlocked_regions
        unlocked_buildings: Buildings newly unlocked, ascending unlock level
    """
    start_level: int
    end_level: int
    levels_crossed: tuple[int, ...]
    start_exp: int
    exp_added: int
    exp_consumed: int
    exp_discarded: int
    current_exp: int
    exp_required_for_next_level: int
    unlocked_regions: tuple[Region, ...] = ()
    region_unlock_levels: tuple[int, ...] = ()
    unlocked_buildings: tuple[Building, ...] = ()

    @property
    def exp_credited(self) -> int:
        """EXP that actually counted toward progress."""
        return self.exp_added - self.exp_discarded

    @property
    def leveled_up(self) -> bool:
        return bool(self.levels_crossed)

    @property
    def changed(self) -> bool:
        """Whether the grant changed player progress at all."""
        return self.exp_credited > 0


class ExperienceLedger:
    """
    Owns level and EXP.

    Features:
    - Multi-level jumps in a single grant
    - Carry-forward of excess EXP
    - Level cap (EXP at the cap is ignored without error)
    - Unlock detection through an UnlockResolver
    - Settle-then-notify through a NotificationDispatcher

    Usage:
        ledger = ExperienceLedger(LinearCurve(), resolver=resolver, max_level=50)
        result = ledger.add_exp(250)
        result.levels_crossed   # (2,)
    """

    def __init__(
        self,
        curve: LevelCurve,
        resolver: Optional[UnlockResolver] = None,
        max_level: Optional[int] = None,
        dispatcher: Optional[NotificationDispatcher] = None,
        progress: Optional[PlayerProgress] = None,
    ):
        if max_level is not None and max_level < 1:
            raise ValueError(f"max_level must be >= 1, got {max_level}")

        self.curve = curve
        self.resolver = resolver
        self.dispatcher = dispatcher
        self._max_level = max_level
        self._progress = progress.clone() if progress else PlayerProgress()

        if max_level is not None and self._progress.level > max_level:
            raise ValueError(
                f"Starting level {self._progress.level} exceeds max level {max_level}"
            )

    # Queries

    @property
    def level(self) -> int:
        return self._progress.level

    @property
    def current_exp(self) -> int:
        return self._progress.current_exp

    @property
    def total_exp(self) -> int:
        return self._progress.total_exp

    @property
    def max_level(self) -> Optional[int]:
        return self._max_level

    @property
    def is_max_level(self) -> bool:
        return self._at_cap(self._progress.level)

    @property
    def exp_required_for_next_level(self) -> int:
        """Threshold of the current level, always derived from the curve."""
        return self.curve.exp_required(self._progress.level)

    @property
    def progress(self) -> float:
        """Progress toward the next level (0-1); 1.0 at the level cap."""
        if self.is_max_level:
            return 1.0
        return self._progress.current_exp / self.exp_required_for_next_level

    def snapshot(self) -> PlayerProgress:
        """Copy of the current progress record."""
        return self._progress.clone()

    def _at_cap(self, level: int) -> bool:
        return self._max_level is not None and level >= self._max_level

    # Mutation

    def add_exp(self, amount: int) -> LevelChangeResult:
        """
        Add experience points.

        Args:
            amount: EXP to add (>= 0)

        Returns:
            LevelChangeResult describing every level crossed

        Raises:
            InvalidRewardAmount: If amount is negative (no state change)
        """
        if amount < 0:
            raise InvalidRewardAmount(amount)

        start_level = level = self._progress.level
        start_exp = self._progress.current_exp
        exp = start_exp + amount
        consumed = 0
        discarded = 0
        crossed: list[int] = []

        while not self._at_cap(level):
            required = self.curve.exp_required(level)
            if exp < required:
                break
            exp -= required
            consumed += required
            level += 1
            crossed.append(level)
            if not CARRY_EXP_REMAINDER:
                discarded += exp
                exp = 0

        if self._at_cap(level) and exp:
            discarded += exp
            exp = 0

        regions: tuple[Region, ...] = ()
        region_levels: tuple[int, ...] = ()
        buildings: tuple[Building, ...] = ()
        if self.resolver is not None and level > start_level:
            regions = self.resolver.newly_unlocked_regions(start_level, level)
            region_levels = tuple(self.resolver.get_region_unlock_level(r.id) for r in regions)
            buildings = self.resolver.newly_unlocked_buildings(start_level, level)

        # Commit in one step; everything above worked on locals
        self._progress = PlayerProgress(
            level=level,
            current_exp=exp,
            total_exp=self._progress.total_exp + amount - discarded,
        )

        result = LevelChangeResult(
            start_level=start_level,
            end_level=level,
            levels_crossed=tuple(crossed),
            start_exp=start_exp,
            exp_added=amount,
            exp_consumed=consumed,
            exp_discarded=discarded,
            current_exp=exp,
            exp_required_for_next_level=self.curve.exp_required(level),
            unlocked_regions=regions,
            region_unlock_levels=region_levels,
            unlocked_buildings=buildings,
        )

        if crossed:
            logger.info(f"Level up: {start_level} -> {level}")
        for region in regions:
            logger.info(f"Region unlocked: {region.id}")
        if discarded:
            logger.debug(f"Discarded {discarded} EXP (level {level})")

        if self.dispatcher is not None:
            self.dispatcher.notify(result)

        return result

    def restore(self, level: int, current_exp: int, total_exp: Optional[int] = None) -> None:
        """
        Replace progress with saved values. Emits no events.

        A level above the cap is clamped to the cap. EXP that would
        already complete the saved level means the save was made under a
        different curve and is rejected.

        Raises:
            SaveDataError: If the values are out of range or inconsistent
        """
        if level < 1 or current_exp < 0:
            raise SaveDataError(f"Invalid saved progress: level={level}, exp={current_exp}")

        if self._at_cap(level):
            if level > self._max_level:
                logger.warning(f"Saved level {level} above cap, clamping to {self._max_level}")
            level = self._max_level
            current_exp = 0
        elif current_exp >= self.curve.exp_required(level):
            raise SaveDataError(
                f"Saved EXP {current_exp} already completes level {level} "
                f"(requires {self.curve.exp_required(level)})"
            )

        minimum_total = self.curve.total_exp_to_reach(level) + current_exp
        if total_exp is None or total_exp < minimum_total:
            total_exp = minimum_total

        self._progress = PlayerProgress(level=level, current_exp=current_exp, total_exp=total_exp)
        logger.info(f"Progress restored: level {level}, {current_exp} EXP")

    def reset(self) -> None:
        """Back to level 1 with no EXP. Emits no events."""
        self._progress = PlayerProgress()
        logger.info("Progress reset")
