# =============================================================================
# Strategy Search Core - Planning State
# =============================================================================
"""
The planner's view of the world.

A PlanningState is an immutable value. It is created once from the live
snapshot (cost 0, empty history) and afterwards only produced by applying a
StripsAction to an existing state. Successors share every unchanged peasant,
townhall and resource node with their parent; only the tuple slots that an
action touches are rebuilt.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

from .enums import ResourceType
from .data_structures import Peasant, Position, ResourceNode, Townhall
from .exceptions import SearchConfigurationError


# =============================================================================
# Plan History
# =============================================================================

@dataclass(frozen=True)
class PlanStep:
    """
    One link of an immutable action history.

    Each state points at the step that produced it; the step points at the
    step before it. Walking back from a goal state yields the plan in
    reverse order without ever copying a growing list.
    """
    action: Any  # StripsAction
    previous: Optional['PlanStep'] = None
    length: int = 1

    def __iter__(self) -> Iterator[Any]:
        """Iterate actions from the most recent back to the first"""
        step: Optional[PlanStep] = self
        while step is not None:
            yield step.action
            step = step.previous

    def to_list(self) -> List[Any]:
        """Actions in execution order"""
        actions = list(self)
        actions.reverse()
        return actions


# =============================================================================
# Planning State
# =============================================================================

@dataclass(frozen=True, eq=False)
class PlanningState:
    """
    One node of the planner's search space.

    Equality and hashing use `key`, a structural summary of the configuration
    (unit roster with positions and cargo, banked and required totals, the
    remaining resource pool). Path cost and history are not part of it, so
    two paths reaching the same configuration compare equal.
    """

    # ==========================================================================
    # Map
    # ==========================================================================
    x_extent: int
    y_extent: int
    townhalls: Tuple[Townhall, ...]

    # ==========================================================================
    # Mutable parts of the world (rebuilt per action)
    # ==========================================================================
    peasants: Tuple[Peasant, ...]
    resources: Tuple[ResourceNode, ...]

    # ==========================================================================
    # Goal bookkeeping
    # ==========================================================================
    required_gold: int = 0
    required_wood: int = 0
    gold_amount: int = 0
    wood_amount: int = 0

    # ==========================================================================
    # Search bookkeeping
    # ==========================================================================
    cost: float = 0.0
    history: Optional[PlanStep] = None

    _key: Tuple = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        """Sort rosters by id and cache the structural key"""
        object.__setattr__(self, "peasants", tuple(sorted(self.peasants, key=lambda p: p.id)))
        object.__setattr__(self, "resources", tuple(sorted(self.resources, key=lambda r: r.id)))
        object.__setattr__(self, "townhalls", tuple(self.townhalls))
        object.__setattr__(self, "_key", (
            tuple((p.id, p.position.x, p.position.y, p.cargo_type, p.cargo_amount)
                  for p in self.peasants),
            self.gold_amount,
            self.wood_amount,
            self.required_gold,
            self.required_wood,
            tuple((r.id, r.amount_remaining) for r in self.resources),
        ))

    # ==========================================================================
    # Construction
    # ==========================================================================

    @classmethod
    def from_snapshot(
        cls,
        x_extent: int,
        y_extent: int,
        units: Iterable[Dict[str, Any]],
        resources: Iterable[Dict[str, Any]],
        required_gold: int = 0,
        required_wood: int = 0,
        gold_amount: int = 0,
        wood_amount: int = 0,
        load_amount: Optional[int] = None,
    ) -> 'PlanningState':
        """
        Build the initial search node from a plain snapshot of the live game.

        Args:
            x_extent: Map width
            y_extent: Map height
            units: Dicts with "id", "type" ("peasant" or "townhall"), "x", "y"
                and optionally "cargo_type" / "cargo_amount" for peasants
            resources: Dicts with "id", "type" ("gold"/"gold_mine" or
                "wood"/"tree"), "x", "y" and "amount"
            required_gold: Gold that must be banked
            required_wood: Wood that must be banked
            gold_amount: Gold already banked
            wood_amount: Wood already banked
            load_amount: Size of a full load; when given, carried cargo must
                be empty or exactly one load

        Raises:
            SearchConfigurationError: If the snapshot is malformed
        """
        peasants: List[Peasant] = []
        townhalls: List[Townhall] = []
        for unit in units:
            kind = str(unit.get("type", "")).lower()
            position = Position(int(unit["x"]), int(unit["y"]))
            if kind == "townhall":
                townhalls.append(Townhall(id=int(unit["id"]), position=position))
            elif kind == "peasant":
                cargo = unit.get("cargo_type")
                try:
                    peasants.append(Peasant(
                        id=int(unit["id"]),
                        position=position,
                        cargo_type=ResourceType.parse(cargo) if cargo else None,
                        cargo_amount=int(unit.get("cargo_amount", 0)),
                    ))
                except ValueError as exc:
                    raise SearchConfigurationError(str(exc)) from exc
            # Other unit kinds (footmen, barracks...) play no part in planning

        nodes: List[ResourceNode] = []
        for resource in resources:
            amount = int(resource["amount"])
            if amount <= 0:
                continue
            try:
                resource_type = ResourceType.parse(str(resource["type"]))
            except ValueError as exc:
                raise SearchConfigurationError(str(exc)) from exc
            nodes.append(ResourceNode(
                id=int(resource["id"]),
                resource_type=resource_type,
                position=Position(int(resource["x"]), int(resource["y"])),
                amount_remaining=amount,
            ))

        state = cls(
            x_extent=x_extent,
            y_extent=y_extent,
            townhalls=tuple(townhalls),
            peasants=tuple(peasants),
            resources=tuple(nodes),
            required_gold=required_gold,
            required_wood=required_wood,
            gold_amount=gold_amount,
            wood_amount=wood_amount,
        )
        state.validate(load_amount)
        return state

    def validate(self, load_amount: Optional[int] = None):
        """
        Check the snapshot-level invariants.

        Raises:
            SearchConfigurationError: If any invariant is violated
        """
        if self.x_extent <= 0 or self.y_extent <= 0:
            raise SearchConfigurationError(
                f"Map extents must be positive, got {self.x_extent}x{self.y_extent}"
            )
        if not self.townhalls:
            raise SearchConfigurationError("Snapshot contains no townhall to deposit at")
        if self.required_gold < 0 or self.required_wood < 0:
            raise SearchConfigurationError(
                f"Required amounts must be non-negative, got "
                f"gold={self.required_gold} wood={self.required_wood}"
            )
        for element in (*self.townhalls, *self.peasants, *self.resources):
            if not element.position.in_bounds(self.x_extent, self.y_extent):
                raise SearchConfigurationError(
                    f"{type(element).__name__} {element.id} at {element.position} "
                    f"is outside the {self.x_extent}x{self.y_extent} map"
                )
        ids = [p.id for p in self.peasants]
        if len(ids) != len(set(ids)):
            raise SearchConfigurationError("Duplicate peasant ids in snapshot")
        if load_amount is not None:
            for peasant in self.peasants:
                if peasant.cargo_amount not in (0, load_amount):
                    raise SearchConfigurationError(
                        f"Peasant {peasant.id} carries {peasant.cargo_amount}; "
                        f"cargo must be empty or a full load of {load_amount}"
                    )

    # ==========================================================================
    # Properties
    # ==========================================================================

    @property
    def key(self) -> Tuple:
        """Structural identity used for equality and deduplication"""
        return self._key

    @property
    def base(self) -> Townhall:
        """The primary townhall; resource distances are measured from it"""
        return self.townhalls[0]

    @property
    def golds(self) -> List[ResourceNode]:
        """Gold mines still holding gold"""
        return self.resources_of(ResourceType.GOLD)

    @property
    def woods(self) -> List[ResourceNode]:
        """Trees still holding wood"""
        return self.resources_of(ResourceType.WOOD)

    @property
    def remaining_gold(self) -> int:
        """Gold still missing from the bank"""
        return max(0, self.required_gold - self.gold_amount)

    @property
    def remaining_wood(self) -> int:
        """Wood still missing from the bank"""
        return max(0, self.required_wood - self.wood_amount)

    @property
    def plan_length(self) -> int:
        return self.history.length if self.history else 0

    # ==========================================================================
    # Queries
    # ==========================================================================

    def is_goal(self) -> bool:
        """
        Check if both banked totals meet their requirements.
        Unit positions and what is left on the map do not matter.
        """
        return (self.gold_amount >= self.required_gold
                and self.wood_amount >= self.required_wood)

    def resources_of(self, resource_type: ResourceType) -> List[ResourceNode]:
        """Get all remaining nodes of a given type"""
        return [r for r in self.resources if r.resource_type == resource_type]

    def get_peasant(self, unit_id: int) -> Optional[Peasant]:
        """Get a peasant by ID"""
        for peasant in self.peasants:
            if peasant.id == unit_id:
                return peasant
        return None

    def get_resource(self, node_id: int) -> Optional[ResourceNode]:
        """Get a remaining resource node by ID"""
        for node in self.resources:
            if node.id == node_id:
                return node
        return None

    def get_townhall(self, townhall_id: int) -> Optional[Townhall]:
        """Get a townhall by ID"""
        for townhall in self.townhalls:
            if townhall.id == townhall_id:
                return townhall
        return None

    def adjacent_townhall(self, position: Position) -> Optional[Townhall]:
        """First townhall next to the given tile, if any"""
        for townhall in self.townhalls:
            if position.is_adjacent(townhall.position):
                return townhall
        return None

    def is_occupied(self, position: Position) -> bool:
        """Check if a townhall or resource node stands on the tile"""
        return (any(t.position == position for t in self.townhalls)
                or any(r.position == position for r in self.resources))

    def banked(self, resource_type: ResourceType) -> int:
        """Amount of a resource already banked"""
        if resource_type == ResourceType.GOLD:
            return self.gold_amount
        return self.wood_amount

    def required(self, resource_type: ResourceType) -> int:
        """Amount of a resource that must be banked"""
        if resource_type == ResourceType.GOLD:
            return self.required_gold
        return self.required_wood

    def obtainable(self, resource_type: ResourceType, load_amount: Optional[int] = None) -> int:
        """
        Banked + carried + still on the map for one resource type.

        With a load amount, each node counts as the full loads it can
        still yield (a node with 150 left gives two loads of 100).
        """
        carried = sum(p.cargo_amount for p in self.peasants if p.cargo_type == resource_type)
        nodes = self.resources_of(resource_type)
        if load_amount:
            on_map = sum(-(-r.amount_remaining // load_amount) * load_amount for r in nodes)
        else:
            on_map = sum(r.amount_remaining for r in nodes)
        return self.banked(resource_type) + carried + on_map

    # ==========================================================================
    # Successor Builders
    # ==========================================================================

    def with_requirements(self, required_gold: int, required_wood: int) -> 'PlanningState':
        """Copy of this state aiming for different totals"""
        state = replace(self, required_gold=required_gold, required_wood=required_wood)
        state.validate()
        return state

    def successor(self, action: Any, **changes: Any) -> 'PlanningState':
        """
        Build the state produced by applying `action` to this one.

        The action's cost is added to the path cost and the action is linked
        onto the history; `changes` replace fields of the copy.
        """
        step = PlanStep(action=action, previous=self.history, length=self.plan_length + 1)
        return replace(self, cost=self.cost + action.cost, history=step, **changes)

    def peasants_with(self, peasant: Peasant) -> Tuple[Peasant, ...]:
        """Peasant roster with one entry swapped for an updated copy"""
        return tuple(peasant if p.id == peasant.id else p for p in self.peasants)

    def resources_with(self, node_id: int, node: Optional[ResourceNode]) -> Tuple[ResourceNode, ...]:
        """Resource pool with one node replaced, or dropped when `node` is None"""
        updated = []
        for existing in self.resources:
            if existing.id != node_id:
                updated.append(existing)
            elif node is not None:
                updated.append(node)
        return tuple(updated)

    def actions(self) -> List[Any]:
        """Actions applied to reach this state, in execution order"""
        if self.history is None:
            return []
        return self.history.to_list()

    # ==========================================================================
    # Dunder
    # ==========================================================================

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PlanningState):
            return NotImplemented
        return self._key == other._key

    def __hash__(self) -> int:
        return hash(self._key)

    def __repr__(self) -> str:
        return (f"PlanningState(gold={self.gold_amount}/{self.required_gold}, "
                f"wood={self.wood_amount}/{self.required_wood}, "
                f"cost={self.cost}, steps={self.plan_length})")

    # ==========================================================================
    # Serialization
    # ==========================================================================

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            "x_extent": self.x_extent,
            "y_extent": self.y_extent,
            "townhalls": [t.to_dict() for t in self.townhalls],
            "peasants": [p.to_dict() for p in self.peasants],
            "resources": [r.to_dict() for r in self.resources],
            "required_gold": self.required_gold,
            "required_wood": self.required_wood,
            "gold_amount": self.gold_amount,
            "wood_amount": self.wood_amount,
            "cost": self.cost,
            "plan_length": self.plan_length,
        }
