"""
Progression context - the composition root.

Builds the resolver, ledger, reward pipeline and dispatcher once and
wires them together. Create one at game start and hand it to every
consumer that needs progression; there is no global instance.

Usage:
    context = ProgressionContext.from_data(config)
    context.subscribe(ProgressionEvent.REGION_UNLOCKED, shop.on_region_unlocked)

    # Handlers are held weakly; keep lambdas alive with weak=False
    context.subscribe(ProgressionEvent.LEVEL_UP, lambda e: hud.flash(), weak=False)

    result = context.complete_quest("quest-42", Difficulty.HARD)
    if result.applied:
        popup.show(result.level_change.exp_credited, result.difficulty)
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence

from unlock_engine.core.events import EventBus, EventHandler
from unlock_engine.resources.database import Database
from progression.components.rewards import Difficulty, RewardEvent, RewardSource
from progression.components.world import Building, Region
from progression.config import ProgressionConfig
from progression.leveling.curves import build_curve
from progression.leveling.ledger import ExperienceLedger
from progression.notifications import NotificationDispatcher, ProgressionEvent
from progression.rewards.calculator import building_reward, decoration_reward, quest_reward
from progression.rewards.pipeline import ApplyResult, RewardPipeline
from progression.save.data import ProgressionSaveData
from progression.unlocks.catalog import UnlockCatalog, assign_unlock_levels, order_regions
from progression.unlocks.resolver import UnlockResolver

logger = logging.getLogger(__name__)


class ProgressionContext:
    """
    Query, command and event surface of the progression engine.

    Attributes:
        config: Engine configuration
        event_bus: Bus carrying ProgressionEvents (shareable with other systems)
        resolver: Pure unlock queries
        dispatcher: Settle-then-notify publisher
        ledger: Level/EXP owner
        rewards: At-most-once reward intake
    """

    def __init__(
        self,
        catalog: UnlockCatalog,
        config: Optional[ProgressionConfig] = None,
        event_bus: Optional[EventBus] = None,
        generated_catalog: bool = False,
    ):
        self.config = config or ProgressionConfig()
        self.event_bus = event_bus or EventBus()
        self.generated_catalog = generated_catalog

        self.resolver = self._build_resolver(catalog)
        self.dispatcher = NotificationDispatcher(self.event_bus)
        self.ledger = ExperienceLedger(
            build_curve(self.config.curve),
            resolver=self.resolver,
            max_level=self.config.max_level,
            dispatcher=self.dispatcher,
        )
        self.rewards = RewardPipeline(self.ledger)

    def _build_resolver(self, catalog: UnlockCatalog) -> UnlockResolver:
        return UnlockResolver(
            catalog,
            min_construction_minutes=self.config.min_construction_minutes,
            max_construction_minutes=self.config.max_construction_minutes,
        )

    @classmethod
    def from_data(
        cls,
        config: Optional[ProgressionConfig] = None,
        event_bus: Optional[EventBus] = None,
    ) -> ProgressionContext:
        """Create a context from the static data under config.data_path."""
        config = config or ProgressionConfig()
        database = Database(config.data_path)
        database.load_all()
        return cls(UnlockCatalog.from_database(database), config, event_bus)

    @classmethod
    def for_new_game(
        cls,
        region_buildings: Mapping[str, Sequence[str]],
        starting_region: str,
        quiz_scores: Optional[Mapping[str, int]] = None,
        region_names: Optional[Mapping[str, str]] = None,
        config: Optional[ProgressionConfig] = None,
        event_bus: Optional[EventBus] = None,
    ) -> ProgressionContext:
        """
        Create a context whose unlock levels are generated for this player.

        Regions unlock starting with the chosen region, then by descending
        quiz score; buildings are spread over 1..config.max_unlock_level.
        """
        config = config or ProgressionConfig()
        order = order_regions(list(region_buildings), starting_region, quiz_scores)
        catalog = assign_unlock_levels(
            order,
            region_buildings,
            max_unlock_level=config.max_unlock_level,
            region_names=region_names,
        )
        logger.info(f"New game unlock order: {' -> '.join(order)}")
        return cls(catalog, config, event_bus, generated_catalog=True)

    # Queries

    @property
    def catalog(self) -> UnlockCatalog:
        return self.resolver.catalog

    @property
    def level(self) -> int:
        return self.ledger.level

    @property
    def current_exp(self) -> int:
        return self.ledger.current_exp

    @property
    def total_exp(self) -> int:
        return self.ledger.total_exp

    @property
    def exp_required_for_next_level(self) -> int:
        return self.ledger.exp_required_for_next_level

    @property
    def progress(self) -> float:
        return self.ledger.progress

    @property
    def is_max_level(self) -> bool:
        return self.ledger.is_max_level

    def unlocked_regions(self) -> tuple[Region, ...]:
        return self.resolver.get_unlocked_regions(self.level)

    def locked_regions(self) -> tuple[Region, ...]:
        return self.resolver.get_locked_regions(self.level)

    def next_region_to_unlock(self) -> Optional[Region]:
        return self.resolver.get_next_region_to_unlock(self.level)

    def starting_region(self) -> Region:
        return self.resolver.get_starting_region()

    def is_region_unlocked(self, region_id: str) -> bool:
        return self.resolver.is_region_unlocked(region_id, self.level)

    def get_region_unlock_level(self, region_id: str) -> int:
        return self.resolver.get_region_unlock_level(region_id)

    def unlocked_buildings(self) -> tuple[Building, ...]:
        return self.resolver.get_unlocked_buildings(self.level)

    def is_building_unlocked(self, building_id: str) -> bool:
        return self.resolver.is_building_unlocked(building_id, self.level)

    def get_unlock_level(self, building_id: str) -> int:
        return self.resolver.get_unlock_level(building_id)

    def construction_minutes(self, building_id: str) -> float:
        return self.resolver.get_construction_minutes(building_id)

    # Commands

    def submit_reward(self, event: RewardEvent) -> ApplyResult:
        return self.rewards.submit(event)

    def complete_quest(
        self,
        source_id: str,
        difficulty: Difficulty = Difficulty.MEDIUM,
        source: RewardSource = RewardSource.QUEST,
    ) -> ApplyResult:
        """Grant the table EXP for a completed quest."""
        return self.submit_reward(quest_reward(source_id, difficulty, source))

    def place_building(self, source_id: str, building_id: str) -> ApplyResult:
        """
        Grant EXP for placing a building.

        Raises:
            UnknownBuilding: If building_id is not in the catalog
        """
        unlock_level = self.resolver.get_unlock_level(building_id)
        return self.submit_reward(building_reward(source_id, unlock_level))

    def place_decoration(self, source_id: str) -> ApplyResult:
        return self.submit_reward(decoration_reward(source_id))

    def grant_exp(
        self,
        source_id: str,
        amount: int,
        difficulty: Difficulty = Difficulty.MEDIUM,
    ) -> ApplyResult:
        """Manual/custom EXP grant."""
        return self.submit_reward(RewardEvent(
            source_id=source_id,
            exp_amount=amount,
            difficulty=difficulty,
            source=RewardSource.MANUAL,
        ))

    # Events

    def subscribe(
        self,
        event_type: ProgressionEvent,
        handler: EventHandler,
        priority: int = 0,
        weak: bool = True,
    ) -> None:
        """
        Register a handler for a progression event.

        Handlers are held weakly by default: a bound method stops firing
        once its owner is destroyed, and a lambda or closure with no other
        reference is collected right away and never fires. Pass
        weak=False for those.
        """
        self.dispatcher.subscribe(event_type, handler, priority=priority, weak=weak)

    def unsubscribe(self, event_type: ProgressionEvent, handler: EventHandler) -> None:
        self.dispatcher.unsubscribe(event_type, handler)

    # Persistence

    def snapshot(self) -> ProgressionSaveData:
        """Current state in save layout."""
        consumed: list[str] = []
        if self.config.persist_consumed_ids:
            consumed = sorted(self.rewards.consumed_source_ids)

        return ProgressionSaveData(
            level=self.ledger.level,
            current_exp=self.ledger.current_exp,
            total_exp=self.ledger.total_exp,
            consumed_reward_source_ids=consumed,
            catalog=self.catalog.to_records() if self.generated_catalog else None,
        )

    def restore(self, data: ProgressionSaveData | Mapping[str, Any]) -> None:
        """
        Resume from save data. Emits no events.

        A save that carries its own catalog (generated unlock levels)
        replaces the current one before progress is applied.

        Raises:
            SaveDataError: If the saved progress does not fit the level curve
            InvalidCatalog: If the saved catalog is inconsistent
        """
        if not isinstance(data, ProgressionSaveData):
            data = ProgressionSaveData.model_validate(data)

        resolver = None
        if data.catalog is not None:
            resolver = self._build_resolver(UnlockCatalog.from_records(data.catalog))

        self.ledger.restore(data.level, data.current_exp, data.total_exp)

        if resolver is not None:
            self.resolver = resolver
            self.ledger.resolver = resolver
            self.generated_catalog = True
        self.rewards.restore_consumed(data.consumed_reward_source_ids)

    def reset(self) -> None:
        """Start over at level 1 with no consumed rewards."""
        self.ledger.reset()
        self.rewards.reset()
