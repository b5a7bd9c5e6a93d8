# =============================================================================
# Core Search Module
# =============================================================================
"""
Core components shared by both search engines:
- Map elements and planning state
- STRIPS actions (generation, validation, execution)
- Adversarial game nodes
- Error taxonomy
"""

from .enums import ResourceType, StripsActionType, PlayerRole
from .data_structures import Position, Peasant, Townhall, ResourceNode
from .exceptions import (
    StrategySearchError, SearchConfigurationError,
    PlanNotFoundError, UnreachableGoalError
)
from .planning_state import PlanningState, PlanStep
from .actions import (
    StripsAction, ActionGenerator, ActionValidator, ActionExecutor,
    ActionPreconditionError, approach_tile, nearest_resource
)
from .game_tree import ActionMap, AdversarialState, GameNode, ExplicitGameState

__all__ = [
    # Enums
    "ResourceType", "StripsActionType", "PlayerRole",
    # Data structures
    "Position", "Peasant", "Townhall", "ResourceNode",
    # Errors
    "StrategySearchError", "SearchConfigurationError",
    "PlanNotFoundError", "UnreachableGoalError", "ActionPreconditionError",
    # Planning
    "PlanningState", "PlanStep",
    "StripsAction", "ActionGenerator", "ActionValidator", "ActionExecutor",
    "approach_tile", "nearest_resource",
    # Adversarial
    "ActionMap", "AdversarialState", "GameNode", "ExplicitGameState",
]
