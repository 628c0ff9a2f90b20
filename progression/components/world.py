"""
Static world configuration - regions and buildings.
"""

from __future__ import annotations

from pydantic import Field

from unlock_engine.core.component import StaticData


class Building(StaticData):
    """A placeable building, gated behind a player level."""
    id: str = Field(min_length=1)
    region_id: str
    unlock_level: int = Field(ge=1)
    display_name: str = ""


class Region(StaticData):
    """
    A themed cluster of buildings.

    A region unlocks together with its first building; building_ids are
    therefore kept in ascending unlock-level order (checked when the
    catalog is built).
    """
    id: str = Field(min_length=1)
    display_name: str = ""
    building_ids: tuple[str, ...] = ()
