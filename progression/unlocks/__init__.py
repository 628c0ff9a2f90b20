"""
Unlocks - static region/building catalog and pure unlock queries.
"""

from progression.unlocks.catalog import (
    UnlockCatalog,
    order_regions,
    assign_unlock_levels,
    construction_minutes,
)
from progression.unlocks.resolver import UnlockResolver

__all__ = [
    "UnlockCatalog",
    "order_regions",
    "assign_unlock_levels",
    "construction_minutes",
    "UnlockResolver",
]
