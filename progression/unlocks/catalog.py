"""
Unlock catalog - validated static region/building configuration.

A region unlocks at the unlock level of its first building. Rather than
trusting declaration order, the catalog refuses any region whose
buildings are not listed in non-decreasing unlock-level order, so the
first building is always the cheapest one.

Also provides the generators used when a new game is set up:
- order_regions: region unlock order from a starting pick and quiz scores
- assign_unlock_levels: spread every building over levels 1..max
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Optional, Sequence

from unlock_engine.core.errors import InvalidCatalog, UnknownBuilding, UnknownRegion
from unlock_engine.resources.database import Database
from progression.components.world import Building, Region

logger = logging.getLogger(__name__)


class UnlockCatalog:
    """
    Immutable set of regions and buildings.

    Regions and buildings are exposed in unlock order: ascending unlock
    level, ties broken by declaration order.
    """

    def __init__(self, regions: Iterable[Region], buildings: Iterable[Building]):
        declared_regions = list(regions)
        declared_buildings = list(buildings)

        if not declared_regions:
            raise InvalidCatalog("Catalog must contain at least one region")

        self._buildings: dict[str, Building] = {}
        for building in declared_buildings:
            if building.id in self._buildings:
                raise InvalidCatalog(f"Duplicate building id '{building.id}'")
            self._buildings[building.id] = building

        self._regions: dict[str, Region] = {}
        self._region_levels: dict[str, int] = {}
        listed: set[str] = set()

        for region in declared_regions:
            if region.id in self._regions:
                raise InvalidCatalog(f"Duplicate region id '{region.id}'")
            self._validate_region(region, listed)
            self._regions[region.id] = region
            self._region_levels[region.id] = self._buildings[region.building_ids[0]].unlock_level

        orphans = [b.id for b in declared_buildings if b.id not in listed]
        if orphans:
            raise InvalidCatalog(f"Buildings not listed by any region: {', '.join(orphans)}")

        # sorted() is stable, so declaration order breaks ties
        self._ordered_regions = tuple(
            sorted(self._regions.values(), key=lambda r: self._region_levels[r.id])
        )
        self._ordered_buildings = tuple(
            sorted(self._buildings.values(), key=lambda b: b.unlock_level)
        )

    def _validate_region(self, region: Region, listed: set[str]) -> None:
        if not region.building_ids:
            raise InvalidCatalog(f"Region '{region.id}' has no buildings")

        previous_level = 0
        for building_id in region.building_ids:
            building = self._buildings.get(building_id)
            if building is None:
                raise InvalidCatalog(
                    f"Region '{region.id}' lists unknown building '{building_id}'"
                )
            if building.region_id != region.id:
                raise InvalidCatalog(
                    f"Building '{building_id}' belongs to '{building.region_id}' "
                    f"but is listed by '{region.id}'"
                )
            if building_id in listed:
                raise InvalidCatalog(f"Building '{building_id}' is listed twice")
            if building.unlock_level < previous_level:
                raise InvalidCatalog(
                    f"Region '{region.id}' buildings are not in ascending unlock "
                    f"level order ('{building_id}' unlocks at {building.unlock_level}, "
                    f"after a building at {previous_level})"
                )
            previous_level = building.unlock_level
            listed.add(building_id)

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> UnlockCatalog:
        """
        Build a catalog from plain region records.

        Record shape (the on-disk JSON format):
            {"id": "HealthHarbor", "display_name": "Health Harbor",
             "buildings": [{"id": "clinic", "unlock_level": 1}, ...]}
        """
        regions: list[Region] = []
        buildings: list[Building] = []

        for record in records:
            region_id = record['id']
            building_records = record.get('buildings', [])
            for building_data in building_records:
                buildings.append(Building(
                    id=building_data['id'],
                    region_id=region_id,
                    unlock_level=building_data['unlock_level'],
                    display_name=building_data.get('display_name', building_data['id']),
                ))
            regions.append(Region(
                id=region_id,
                display_name=record.get('display_name', region_id),
                building_ids=tuple(b['id'] for b in building_records),
            ))

        return cls(regions, buildings)

    @classmethod
    def from_database(cls, database: Database) -> UnlockCatalog:
        """Build a catalog from a loaded Database."""
        return cls.from_records(database.regions.values())

    # Lookups

    @property
    def regions(self) -> tuple[Region, ...]:
        """All regions in unlock order."""
        return self._ordered_regions

    @property
    def buildings(self) -> tuple[Building, ...]:
        """All buildings in unlock order."""
        return self._ordered_buildings

    def has_building(self, building_id: str) -> bool:
        return building_id in self._buildings

    def has_region(self, region_id: str) -> bool:
        return region_id in self._regions

    def get_building(self, building_id: str) -> Building:
        building = self._buildings.get(building_id)
        if building is None:
            logger.error(f"Unknown building requested: '{building_id}'")
            raise UnknownBuilding(building_id)
        return building

    def get_region(self, region_id: str) -> Region:
        region = self._regions.get(region_id)
        if region is None:
            logger.error(f"Unknown region requested: '{region_id}'")
            raise UnknownRegion(region_id)
        return region

    def region_unlock_level(self, region_id: str) -> int:
        """Unlock level of a region (that of its first building)."""
        self.get_region(region_id)
        return self._region_levels[region_id]

    @property
    def min_unlock_level(self) -> int:
        return self._ordered_buildings[0].unlock_level

    @property
    def max_unlock_level(self) -> int:
        return self._ordered_buildings[-1].unlock_level

    def to_records(self) -> list[dict[str, Any]]:
        """Inverse of from_records, in declaration order."""
        return [
            {
                'id': region.id,
                'display_name': region.display_name,
                'buildings': [
                    {
                        'id': b.id,
                        'display_name': b.display_name,
                        'unlock_level': b.unlock_level,
                    }
                    for b in (self._buildings[bid] for bid in region.building_ids)
                ],
            }
            for region in self._regions.values()
        ]

    def __len__(self) -> int:
        return len(self._regions)


def order_regions(
    region_ids: Sequence[str],
    starting_region: str,
    quiz_scores: Optional[Mapping[str, int]] = None,
) -> list[str]:
    """
    Decide the order in which regions unlock.

    The starting region always comes first. The rest follow by
    descending quiz score when scores are given (missing scores count
    as 0, ties keep the declared order), otherwise in declared order.

    Raises:
        UnknownRegion: If starting_region is not one of region_ids
    """
    if starting_region not in region_ids:
        logger.error(f"Unknown starting region: '{starting_region}'")
        raise UnknownRegion(starting_region)

    rest = [r for r in region_ids if r != starting_region]
    if quiz_scores:
        rest.sort(key=lambda r: quiz_scores.get(r, 0), reverse=True)

    return [starting_region, *rest]


def assign_unlock_levels(
    region_order: Sequence[str],
    region_buildings: Mapping[str, Sequence[str]],
    max_unlock_level: int = 40,
    region_names: Optional[Mapping[str, str]] = None,
) -> UnlockCatalog:
    """
    Spread buildings over unlock levels 1..max_unlock_level.

    Buildings of all regions are concatenated in region order; the i-th
    of N buildings unlocks at round(1 + i * max / N), clamped to the
    valid range. Earlier regions therefore unlock earlier, and each
    region's buildings come out in ascending order.

    Args:
        region_order: Region ids, first to unlock first
        region_buildings: Building ids per region, in display order
        max_unlock_level: Highest unlock level to hand out
        region_names: Optional display names per region

    Returns:
        A validated UnlockCatalog
    """
    if max_unlock_level < 1:
        raise ValueError(f"max_unlock_level must be >= 1, got {max_unlock_level}")

    region_names = region_names or {}
    sequence = [
        (region_id, building_id)
        for region_id in region_order
        for building_id in region_buildings.get(region_id, ())
    ]
    total = len(sequence)

    buildings: list[Building] = []
    for i, (region_id, building_id) in enumerate(sequence):
        unlock_level = round(1 + (i * max_unlock_level) / total)
        unlock_level = min(max(unlock_level, 1), max_unlock_level)
        buildings.append(Building(
            id=building_id,
            region_id=region_id,
            unlock_level=unlock_level,
            display_name=building_id,
        ))

    regions = [
        Region(
            id=region_id,
            display_name=region_names.get(region_id, region_id),
            building_ids=tuple(region_buildings.get(region_id, ())),
        )
        for region_id in region_order
    ]

    logger.info(
        f"Assigned unlock levels to {total} buildings across "
        f"{len(regions)} regions (max level {max_unlock_level})"
    )
    return UnlockCatalog(regions, buildings)


def construction_minutes(
    unlock_level: int,
    min_level: int,
    max_level: int,
    min_minutes: float = 1.0,
    max_minutes: float = 360.0,
) -> float:
    """
    Build time for a building, interpolated linearly on its unlock level.

    The earliest building takes min_minutes, the latest max_minutes. When
    every building shares one unlock level the midpoint is used.
    """
    if max_level == min_level:
        return (min_minutes + max_minutes) / 2
    progress = (unlock_level - min_level) / (max_level - min_level)
    return min_minutes + progress * (max_minutes - min_minutes)
