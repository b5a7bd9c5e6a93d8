# =============================================================================
# Strategy Search Core - Data Structures
# =============================================================================
"""
Core data structures for representing map elements.
These are the immutable building blocks of a planning state.
"""

from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Tuple, Any

from .enums import ResourceType


# =============================================================================
# Position
# =============================================================================

@dataclass(frozen=True, order=True)
class Position:
    """
    A tile on the 2D map grid.

    Attributes:
        x: Column index (0-based)
        y: Row index (0-based)
    """
    x: int
    y: int

    def chebyshev_distance(self, other: 'Position') -> int:
        """Grid distance where diagonal steps cost the same as straight ones"""
        return max(abs(self.x - other.x), abs(self.y - other.y))

    def is_adjacent(self, other: 'Position') -> bool:
        """Check if the other tile is one of the 8 neighbours of this one"""
        return self.chebyshev_distance(other) == 1

    def adjacent_positions(self) -> List['Position']:
        """All 8 neighbouring tiles (may lie outside the map)"""
        return [
            Position(self.x + dx, self.y + dy)
            for dy in (-1, 0, 1)
            for dx in (-1, 0, 1)
            if dx or dy
        ]

    def in_bounds(self, x_extent: int, y_extent: int) -> bool:
        """Check if the tile lies on a map of the given extents"""
        return 0 <= self.x < x_extent and 0 <= self.y < y_extent

    def as_tuple(self) -> Tuple[int, int]:
        return (self.x, self.y)

    def __str__(self) -> str:
        return f"({self.x}, {self.y})"


# =============================================================================
# Units
# =============================================================================

@dataclass(frozen=True)
class Peasant:
    """
    A mobile worker that moves, harvests and deposits.

    A peasant carries at most one cargo type. Loading and unloading are
    atomic: the cargo amount is either 0 or a full load, and the cargo type
    is None whenever the amount is 0.
    """
    id: int
    position: Position
    cargo_type: Optional[ResourceType] = None
    cargo_amount: int = 0

    def __post_init__(self):
        """Normalize cargo so an empty peasant never reports a type"""
        if self.cargo_amount < 0:
            raise ValueError(f"Peasant {self.id} has negative cargo")
        if self.cargo_amount == 0 and self.cargo_type is not None:
            object.__setattr__(self, "cargo_type", None)
        if self.cargo_amount > 0 and self.cargo_type is None:
            raise ValueError(f"Peasant {self.id} carries cargo without a type")

    @property
    def has_cargo(self) -> bool:
        """Check if the peasant is carrying anything"""
        return self.cargo_amount > 0

    def moved_to(self, position: Position) -> 'Peasant':
        """Copy of this peasant standing on another tile"""
        return replace(self, position=position)

    def loaded(self, resource: ResourceType, amount: int) -> 'Peasant':
        """Copy of this peasant carrying a full load"""
        return replace(self, cargo_type=resource, cargo_amount=amount)

    def unloaded(self) -> 'Peasant':
        """Copy of this peasant with empty hands"""
        return replace(self, cargo_type=None, cargo_amount=0)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            "id": self.id,
            "position": self.position.as_tuple(),
            "cargo_type": self.cargo_type.name.lower() if self.cargo_type else None,
            "cargo_amount": self.cargo_amount,
        }


@dataclass(frozen=True)
class Townhall:
    """A fixed depot where peasants bank their cargo"""
    id: int
    position: Position

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {"id": self.id, "position": self.position.as_tuple()}


# =============================================================================
# Resource Node
# =============================================================================

@dataclass(frozen=True)
class ResourceNode:
    """
    A harvestable map feature (tree or gold mine).

    Nodes with nothing left are removed from the pool rather than kept
    around with a zero amount.
    """
    id: int
    resource_type: ResourceType
    position: Position
    amount_remaining: int

    def harvested(self, load_amount: int) -> Optional['ResourceNode']:
        """
        Copy of this node after one load has been taken from it.

        Returns:
            The depleted node, or None if nothing is left
        """
        remaining = self.amount_remaining - load_amount
        if remaining <= 0:
            return None
        return replace(self, amount_remaining=remaining)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            "id": self.id,
            "type": self.resource_type.name.lower(),
            "position": self.position.as_tuple(),
            "amount_remaining": self.amount_remaining,
        }
