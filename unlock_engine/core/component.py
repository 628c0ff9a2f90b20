"""
Base classes for data-only records.

Records are pure data containers with NO logic beyond derived,
read-only properties. All mutation lives in the manager that owns a
record (e.g. the experience ledger owns PlayerProgress). This keeps:
- Serialization trivial
- Ownership of mutable state explicit
- Testing easy

Two flavors:
    Component  - mutable runtime state, validated on every assignment
    StaticData - immutable configuration (regions, buildings, reward events)

Usage:
    class PlayerProgress(Component):
        level: int = Field(default=1, ge=1)
        current_exp: int = Field(default=0, ge=0)

    class Building(StaticData):
        id: str
        unlock_level: int = Field(ge=1)
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Component(BaseModel):
    """
    Base class for mutable state records.

    Uses Pydantic for:
    - Automatic validation (also on assignment)
    - JSON serialization
    - Default values

    IMPORTANT: Do NOT add methods that modify state.
    Mutation belongs to the owning manager.
    """

    model_config = ConfigDict(
        validate_assignment=True,
        extra='forbid',
    )

    def clone(self) -> Component:
        """Create a deep copy of this record."""
        return self.model_copy(deep=True)


class StaticData(BaseModel):
    """
    Base class for immutable configuration records.

    Frozen after validation, hashable, and safe to share between every
    reader without defensive copies.
    """

    model_config = ConfigDict(
        frozen=True,
        extra='forbid',
    )
