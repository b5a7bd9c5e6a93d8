# =============================================================================
# Strategy Search Core - Actions Module
# =============================================================================
"""
STRIPS actions for the resource-gathering planner.

An action is plain data tagged with its StripsActionType. Behaviour lives in
two dispatch tables keyed on that tag:

    ActionGenerator -> ActionValidator (preconditions) -> ActionExecutor (effects)

The executor never mutates the state it is given; it returns a successor
built with PlanningState.successor().
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from .enums import ResourceType, StripsActionType
from .data_structures import Position
from .exceptions import StrategySearchError
from .planning_state import PlanningState

logger = logging.getLogger(__name__)


class ActionPreconditionError(StrategySearchError):
    """An action was executed against a state that does not allow it"""


# =============================================================================
# Strips Action
# =============================================================================

@dataclass(frozen=True)
class StripsAction:
    """
    A single planner action.

    Attributes:
        action_type: Which variant this is
        unit_id: The acting peasant
        cost: Non-negative cost added to the path cost when applied
        target_id: Resource node (move/harvest) or townhall (move/deposit) id
        destination: Tile the peasant ends on (movement variants only)
        amount: Load size picked up by a harvest
    """
    action_type: StripsActionType
    unit_id: int
    cost: float
    target_id: Optional[int] = None
    destination: Optional[Position] = None
    amount: int = 0

    def __post_init__(self):
        if self.cost < 0:
            raise ValueError(f"Action cost must be non-negative, got {self.cost}")

    @property
    def label(self) -> str:
        return self.action_type.label

    @property
    def resource(self) -> Optional[ResourceType]:
        return self.action_type.resource

    def preconditions_met(self, state: PlanningState) -> bool:
        """Check if this action may be applied to the state"""
        return _VALIDATOR.preconditions_met(self, state)

    def apply(self, state: PlanningState) -> PlanningState:
        """Produce the successor state; the given state is left untouched"""
        return _EXECUTOR.apply(self, state)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            "action_type": self.action_type.name,
            "label": self.label,
            "unit_id": self.unit_id,
            "cost": self.cost,
            "target_id": self.target_id,
            "destination": self.destination.as_tuple() if self.destination else None,
            "amount": self.amount,
        }

    def __str__(self) -> str:
        parts = [f"{self.label}(unit {self.unit_id}"]
        if self.target_id is not None:
            parts.append(f"target {self.target_id}")
        if self.destination is not None:
            parts.append(f"to {self.destination}")
        return ", ".join(parts) + f", cost {self.cost:g})"


# =============================================================================
# Tile Selection
# =============================================================================

def approach_tile(state: PlanningState, target: Position, origin: Position) -> Optional[Position]:
    """
    Pick the tile next to `target` that is closest to `origin`.

    Tiles off the map are never chosen; tiles holding a townhall or a resource
    node are only used when nothing else is free. Ties go to the first
    neighbour in row-major order, which keeps plans reproducible.
    """
    candidates = [p for p in target.adjacent_positions()
                  if p.in_bounds(state.x_extent, state.y_extent)]
    if not candidates:
        return None
    free = [p for p in candidates if not state.is_occupied(p)]
    pool = free or candidates
    return min(pool, key=lambda p: p.chebyshev_distance(origin))


def nearest_resource(state: PlanningState, resource_type: ResourceType, origin: Position):
    """Remaining node of a type closest to `origin` (lowest id wins ties)"""
    nodes = state.resources_of(resource_type)
    if not nodes:
        return None
    return min(nodes, key=lambda r: r.position.chebyshev_distance(origin))


# =============================================================================
# Action Generation
# =============================================================================

class ActionGenerator:
    """
    Builds candidate actions for every peasant.

    Candidates are built against the current state and are not guaranteed to
    be applicable; ActionValidator decides that.
    """

    def __init__(self, load_amount: int = 100, harvest_cost: float = 1.0,
                 deposit_cost: float = 1.0):
        self.load_amount = load_amount
        self.harvest_cost = harvest_cost
        self.deposit_cost = deposit_cost
        self.validator = ActionValidator()
        self.executor = ActionExecutor()

    def move_to_resource(self, state: PlanningState, unit_id: int,
                         resource_type: ResourceType) -> Optional[StripsAction]:
        """
        Walk from the base to the nearest node of a resource type.

        "Nearest" is measured from the townhall the peasant stands next to,
        not from the peasant itself: every trip to a resource starts at the base.
        """
        peasant = state.get_peasant(unit_id)
        if peasant is None:
            return None
        base = state.adjacent_townhall(peasant.position) or state.base
        node = nearest_resource(state, resource_type, base.position)
        if node is None:
            return None
        destination = approach_tile(state, node.position, base.position)
        if destination is None:
            return None
        return StripsAction(
            action_type=StripsActionType.move_to(resource_type),
            unit_id=unit_id,
            cost=peasant.position.chebyshev_distance(destination),
            target_id=node.id,
            destination=destination,
        )

    def move_to_base(self, state: PlanningState, unit_id: int) -> Optional[StripsAction]:
        """Walk back to the townhall closest to the peasant"""
        peasant = state.get_peasant(unit_id)
        if peasant is None:
            return None
        townhall = min(state.townhalls,
                       key=lambda t: t.position.chebyshev_distance(peasant.position))
        destination = approach_tile(state, townhall.position, peasant.position)
        if destination is None:
            return None
        return StripsAction(
            action_type=StripsActionType.MOVE_TO_BASE,
            unit_id=unit_id,
            cost=peasant.position.chebyshev_distance(destination),
            target_id=townhall.id,
            destination=destination,
        )

    def harvest(self, unit_id: int, node_id: int, resource_type: ResourceType) -> StripsAction:
        """Load a full cargo from a specific node"""
        return StripsAction(
            action_type=StripsActionType.harvest(resource_type),
            unit_id=unit_id,
            cost=self.harvest_cost,
            target_id=node_id,
            amount=self.load_amount,
        )

    def deposit(self, unit_id: int, townhall_id: int) -> StripsAction:
        """Unload at a specific townhall"""
        return StripsAction(
            action_type=StripsActionType.DEPOSIT,
            unit_id=unit_id,
            cost=self.deposit_cost,
            target_id=townhall_id,
        )

    def candidates(self, state: PlanningState) -> List[StripsAction]:
        """Every action variant for every peasant, applicable or not"""
        actions: List[StripsAction] = []
        for peasant in state.peasants:
            for resource_type in (ResourceType.WOOD, ResourceType.GOLD):
                move = self.move_to_resource(state, peasant.id, resource_type)
                if move is not None:
                    actions.append(move)
            move_home = self.move_to_base(state, peasant.id)
            if move_home is not None:
                actions.append(move_home)
            for node in state.resources:
                actions.append(self.harvest(peasant.id, node.id, node.resource_type))
            for townhall in state.townhalls:
                actions.append(self.deposit(peasant.id, townhall.id))
        return actions

    def get_valid_actions(self, state: PlanningState) -> List[StripsAction]:
        """Candidates whose preconditions hold in the state"""
        return [a for a in self.candidates(state)
                if self.validator.preconditions_met(a, state)]

    def successors(self, state: PlanningState) -> List[Tuple[StripsAction, PlanningState]]:
        """Expand a state into (action, successor) pairs"""
        return [(action, self.executor.apply(action, state))
                for action in self.get_valid_actions(state)]


# =============================================================================
# Action Validation
# =============================================================================

class ActionValidator:
    """
    Checks STRIPS preconditions.

    Checks:
    - The acting peasant exists
    - The peasant stands where the action starts (base or resource)
    - Cargo state fits the action
    - Harvesting stops once the banked total reaches its requirement
    """

    def __init__(self):
        self._validators: Dict[StripsActionType, Callable[..., Tuple[bool, str]]] = {
            StripsActionType.MOVE_TO_GOLD: self._validate_move_to_resource,
            StripsActionType.MOVE_TO_WOOD: self._validate_move_to_resource,
            StripsActionType.MOVE_TO_BASE: self._validate_move_to_base,
            StripsActionType.HARVEST_GOLD: self._validate_harvest,
            StripsActionType.HARVEST_WOOD: self._validate_harvest,
            StripsActionType.DEPOSIT: self._validate_deposit,
        }

    def validate(self, action: StripsAction, state: PlanningState) -> Tuple[bool, str]:
        """
        Validate if an action can be applied.

        Returns:
            Tuple of (is_valid, error_message)
        """
        peasant = state.get_peasant(action.unit_id)
        if peasant is None:
            return False, f"Unit {action.unit_id} does not exist"

        validator = self._validators.get(action.action_type)
        if validator is None:
            return False, f"Unknown action type: {action.action_type}"

        return validator(action, state)

    def preconditions_met(self, action: StripsAction, state: PlanningState) -> bool:
        return self.validate(action, state)[0]

    def _validate_move_to_resource(self, action: StripsAction,
                                   state: PlanningState) -> Tuple[bool, str]:
        """Validate MOVE_TO_GOLD / MOVE_TO_WOOD"""
        peasant = state.get_peasant(action.unit_id)
        if state.adjacent_townhall(peasant.position) is None:
            return False, "Unit must start next to a townhall"

        node = state.get_resource(action.target_id)
        if node is None or node.resource_type != action.resource:
            return False, f"No {action.resource} node {action.target_id} left"

        if action.destination is None or not action.destination.in_bounds(
                state.x_extent, state.y_extent):
            return False, "Destination is off the map"

        if peasant.position == action.destination:
            return False, "Unit is already at the destination"

        return True, ""

    def _validate_move_to_base(self, action: StripsAction,
                               state: PlanningState) -> Tuple[bool, str]:
        """Validate MOVE_TO_BASE"""
        peasant = state.get_peasant(action.unit_id)
        if state.adjacent_townhall(peasant.position) is not None:
            return False, "Unit is already next to a townhall"

        if state.get_townhall(action.target_id) is None:
            return False, f"Townhall {action.target_id} does not exist"

        if action.destination is None or not action.destination.in_bounds(
                state.x_extent, state.y_extent):
            return False, "Destination is off the map"

        return True, ""

    def _validate_harvest(self, action: StripsAction,
                          state: PlanningState) -> Tuple[bool, str]:
        """Validate HARVEST_GOLD / HARVEST_WOOD"""
        peasant = state.get_peasant(action.unit_id)
        node = state.get_resource(action.target_id)
        if node is None or node.resource_type != action.resource:
            return False, f"No {action.resource} node {action.target_id} left"

        if not peasant.position.is_adjacent(node.position):
            return False, "Unit must stand next to the resource"

        if peasant.has_cargo:
            return False, "Unit is already carrying cargo"

        if state.banked(action.resource) >= state.required(action.resource):
            return False, f"Enough {action.resource} has been banked"

        return True, ""

    def _validate_deposit(self, action: StripsAction,
                          state: PlanningState) -> Tuple[bool, str]:
        """Validate DEPOSIT"""
        peasant = state.get_peasant(action.unit_id)
        townhall = state.get_townhall(action.target_id)
        if townhall is None:
            return False, f"Townhall {action.target_id} does not exist"

        if not peasant.position.is_adjacent(townhall.position):
            return False, "Unit must stand next to the townhall"

        if not peasant.has_cargo:
            return False, "Unit has nothing to deposit"

        return True, ""


# =============================================================================
# Action Execution
# =============================================================================

class ActionExecutor:
    """
    Applies action effects.

    `apply` trusts the caller to have checked preconditions (the planner
    always has); `execute` checks them first and raises on violation.
    """

    def __init__(self):
        self.validator = ActionValidator()
        self._executors: Dict[StripsActionType, Callable[..., PlanningState]] = {
            StripsActionType.MOVE_TO_GOLD: self._execute_move,
            StripsActionType.MOVE_TO_WOOD: self._execute_move,
            StripsActionType.MOVE_TO_BASE: self._execute_move,
            StripsActionType.HARVEST_GOLD: self._execute_harvest,
            StripsActionType.HARVEST_WOOD: self._execute_harvest,
            StripsActionType.DEPOSIT: self._execute_deposit,
        }

    def apply(self, action: StripsAction, state: PlanningState) -> PlanningState:
        """Produce the successor state for an action"""
        executor = self._executors.get(action.action_type)
        if executor is None:
            raise ActionPreconditionError(f"Unknown action type: {action.action_type}")
        return executor(action, state)

    def execute(self, action: StripsAction, state: PlanningState) -> PlanningState:
        """
        Validate then apply an action.

        Raises:
            ActionPreconditionError: If the preconditions do not hold
        """
        is_valid, reason = self.validator.validate(action, state)
        if not is_valid:
            raise ActionPreconditionError(f"Cannot apply {action}: {reason}")
        return self.apply(action, state)

    def _execute_move(self, action: StripsAction, state: PlanningState) -> PlanningState:
        """Relocate the peasant"""
        peasant = state.get_peasant(action.unit_id)
        moved = peasant.moved_to(action.destination)
        return state.successor(action, peasants=state.peasants_with(moved))

    def _execute_harvest(self, action: StripsAction, state: PlanningState) -> PlanningState:
        """Load a full cargo and deplete the node"""
        peasant = state.get_peasant(action.unit_id)
        node = state.get_resource(action.target_id)
        loaded = peasant.loaded(node.resource_type, action.amount)
        depleted = node.harvested(action.amount)
        if depleted is None:
            logger.debug("Resource node %d exhausted", node.id)
        return state.successor(
            action,
            peasants=state.peasants_with(loaded),
            resources=state.resources_with(node.id, depleted),
        )

    def _execute_deposit(self, action: StripsAction, state: PlanningState) -> PlanningState:
        """Bank the cargo"""
        peasant = state.get_peasant(action.unit_id)
        changes: Dict[str, Any] = {"peasants": state.peasants_with(peasant.unloaded())}
        if peasant.cargo_type == ResourceType.GOLD:
            changes["gold_amount"] = state.gold_amount + peasant.cargo_amount
        elif peasant.cargo_type == ResourceType.WOOD:
            changes["wood_amount"] = state.wood_amount + peasant.cargo_amount
        return state.successor(action, **changes)


_VALIDATOR = ActionValidator()
_EXECUTOR = ActionExecutor()
