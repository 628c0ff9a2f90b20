"""
Unlock resolver - pure level -> unlock queries.

Nothing here holds player state: every query takes the level it should
answer for. Views can call these as often as they like without caching
or racing each other; the answer is always recomputed from the one
source of truth, the ledger's current level.
"""

from __future__ import annotations

from typing import Optional

from progression.components.world import Building, Region
from progression.unlocks.catalog import UnlockCatalog, construction_minutes


class UnlockResolver:
    """
    Stateless queries against an UnlockCatalog.

    Usage:
        resolver = UnlockResolver(catalog)
        resolver.get_unlocked_regions(level=5)
        resolver.get_next_region_to_unlock(level=5)
    """

    def __init__(
        self,
        catalog: UnlockCatalog,
        min_construction_minutes: float = 1.0,
        max_construction_minutes: float = 360.0,
    ):
        self._catalog = catalog
        self._min_minutes = min_construction_minutes
        self._max_minutes = max_construction_minutes

    @property
    def catalog(self) -> UnlockCatalog:
        return self._catalog

    # Regions

    def get_unlocked_regions(self, level: int) -> tuple[Region, ...]:
        """All regions unlocked at `level`, in unlock order."""
        return tuple(
            r for r in self._catalog.regions
            if self._catalog.region_unlock_level(r.id) <= level
        )

    def get_locked_regions(self, level: int) -> tuple[Region, ...]:
        """All regions still locked at `level`, in unlock order."""
        return tuple(
            r for r in self._catalog.regions
            if self._catalog.region_unlock_level(r.id) > level
        )

    def get_next_region_to_unlock(self, level: int) -> Optional[Region]:
        """The lowest-unlock-level region still locked, or None."""
        for region in self._catalog.regions:
            if self._catalog.region_unlock_level(region.id) > level:
                return region
        return None

    def get_starting_region(self) -> Region:
        """The region with the lowest unlock level."""
        return self._catalog.regions[0]

    def get_region_unlock_level(self, region_id: str) -> int:
        """
        Raises:
            UnknownRegion: If region_id is not in the catalog
        """
        return self._catalog.region_unlock_level(region_id)

    def is_region_unlocked(self, region_id: str, level: int) -> bool:
        return self.get_region_unlock_level(region_id) <= level

    def are_all_regions_unlocked(self, level: int) -> bool:
        return self.get_next_region_to_unlock(level) is None

    def get_region_buildings(self, region_id: str) -> tuple[Building, ...]:
        """Buildings of a region, in declared (= unlock) order."""
        region = self._catalog.get_region(region_id)
        return tuple(self._catalog.get_building(bid) for bid in region.building_ids)

    # Buildings

    def get_unlock_level(self, building_id: str) -> int:
        """
        Raises:
            UnknownBuilding: If building_id is not in the catalog
        """
        return self._catalog.get_building(building_id).unlock_level

    def is_building_unlocked(self, building_id: str, level: int) -> bool:
        return self.get_unlock_level(building_id) <= level

    def get_unlocked_buildings(self, level: int) -> tuple[Building, ...]:
        """All buildings unlocked at `level`, in unlock order."""
        return tuple(b for b in self._catalog.buildings if b.unlock_level <= level)

    def get_construction_minutes(self, building_id: str) -> float:
        """Build time of a building, scaled by how late it unlocks."""
        return construction_minutes(
            self.get_unlock_level(building_id),
            self._catalog.min_unlock_level,
            self._catalog.max_unlock_level,
            self._min_minutes,
            self._max_minutes,
        )

    # Level transitions

    def newly_unlocked_regions(self, old_level: int, new_level: int) -> tuple[Region, ...]:
        """Regions whose unlock level lies in (old_level, new_level], in unlock order."""
        return tuple(
            r for r in self._catalog.regions
            if old_level < self._catalog.region_unlock_level(r.id) <= new_level
        )

    def newly_unlocked_buildings(self, old_level: int, new_level: int) -> tuple[Building, ...]:
        """Buildings whose unlock level lies in (old_level, new_level], in unlock order."""
        return tuple(
            b for b in self._catalog.buildings
            if old_level < b.unlock_level <= new_level
        )
