# =============================================================================
# Strategy Search Core - Enumerations
# =============================================================================
"""
All enumeration types used by the planner and the adversarial search.
These define the discrete values for units, resources and actions.
"""

from enum import Enum, auto
from typing import Optional


class ResourceType(Enum):
    """
    Kinds of harvestable resources.
    Each node on the map yields exactly one kind.
    """
    GOLD = auto()    # Gold mine
    WOOD = auto()    # Tree

    def __str__(self) -> str:
        return self.name.lower()

    @property
    def node_name(self) -> str:
        """Name of the map feature that yields this resource"""
        names = {
            ResourceType.GOLD: "gold_mine",
            ResourceType.WOOD: "tree",
        }
        return names.get(self, "unknown")

    @classmethod
    def parse(cls, value: str) -> 'ResourceType':
        """
        Parse a resource type from a user/environment supplied string.
        Accepts both the resource name ("gold") and the node name ("gold_mine").
        """
        key = value.strip().lower()
        for member in cls:
            if key in (member.name.lower(), member.node_name):
                return member
        raise ValueError(f"Unknown resource type: {value!r}")


class StripsActionType(Enum):
    """
    Closed set of planner action variants.
    Movement variants cost their Chebyshev distance; the rest cost a fixed amount.
    """
    MOVE_TO_GOLD = auto()     # Walk from the base to the nearest gold mine
    MOVE_TO_WOOD = auto()     # Walk from the base to the nearest tree
    MOVE_TO_BASE = auto()     # Walk back next to the townhall
    HARVEST_GOLD = auto()     # Load a full cargo of gold
    HARVEST_WOOD = auto()     # Load a full cargo of wood
    DEPOSIT = auto()          # Unload cargo at the townhall

    def __str__(self) -> str:
        return self.name.lower()

    @property
    def label(self) -> str:
        """Short CamelCase label used in plans and logs"""
        labels = {
            StripsActionType.MOVE_TO_GOLD: "MoveToMine",
            StripsActionType.MOVE_TO_WOOD: "MoveToWood",
            StripsActionType.MOVE_TO_BASE: "MoveToBase",
            StripsActionType.HARVEST_GOLD: "Harvest",
            StripsActionType.HARVEST_WOOD: "Harvest",
            StripsActionType.DEPOSIT: "Deposit",
        }
        return labels.get(self, self.name)

    @property
    def is_movement(self) -> bool:
        """Whether this action relocates the unit"""
        return self in (
            StripsActionType.MOVE_TO_GOLD,
            StripsActionType.MOVE_TO_WOOD,
            StripsActionType.MOVE_TO_BASE,
        )

    @property
    def resource(self) -> Optional[ResourceType]:
        """Resource this action targets, if any"""
        targets = {
            StripsActionType.MOVE_TO_GOLD: ResourceType.GOLD,
            StripsActionType.MOVE_TO_WOOD: ResourceType.WOOD,
            StripsActionType.HARVEST_GOLD: ResourceType.GOLD,
            StripsActionType.HARVEST_WOOD: ResourceType.WOOD,
        }
        return targets.get(self)

    @classmethod
    def move_to(cls, resource: ResourceType) -> 'StripsActionType':
        """Movement variant for a resource type"""
        if resource == ResourceType.GOLD:
            return cls.MOVE_TO_GOLD
        return cls.MOVE_TO_WOOD

    @classmethod
    def harvest(cls, resource: ResourceType) -> 'StripsActionType':
        """Harvest variant for a resource type"""
        if resource == ResourceType.GOLD:
            return cls.HARVEST_GOLD
        return cls.HARVEST_WOOD


class PlayerRole(Enum):
    """
    The two sides of an adversarial search.
    MAX is the agent the search is run for.
    """
    MAX = auto()
    MIN = auto()

    def __str__(self) -> str:
        return self.name.lower()

    @property
    def opponent(self) -> 'PlayerRole':
        """The other side"""
        if self == PlayerRole.MAX:
            return PlayerRole.MIN
        return PlayerRole.MAX
