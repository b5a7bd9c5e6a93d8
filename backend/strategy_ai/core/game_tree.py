# =============================================================================
# Strategy Search Core - Game Tree
# =============================================================================
"""
The adversarial side of the core.

The environment owns the rules of the game. It hands the search an object
satisfying AdversarialState; the search wraps states in GameNodes as it
descends and throws them away again once a frame has been evaluated.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, List, Mapping, Optional, Protocol, Tuple, runtime_checkable

from .exceptions import SearchConfigurationError

# Per-unit action map, e.g. {unit_id: action}
ActionMap = Dict[int, Any]


@runtime_checkable
class AdversarialState(Protocol):
    """Protocol the environment's game state must satisfy"""

    def is_terminal(self) -> bool:
        """Check if the game is over in this state"""
        ...

    def utility(self) -> float:
        """Static evaluation from the maximizing player's perspective"""
        ...

    def successors(self) -> Iterable[Tuple[ActionMap, 'AdversarialState']]:
        """Legal (action map, resulting state) pairs for the side to move"""
        ...


# =============================================================================
# Game Node
# =============================================================================

@dataclass(frozen=True)
class GameNode:
    """
    A state, the action map that produced it, and its cached utility.

    Nodes hold no parent reference. `value` is the backed-up search value;
    it equals the static utility except on the node a root search returns.
    """
    state: AdversarialState
    action: ActionMap = field(default_factory=dict)
    utility: float = 0.0
    value: Optional[float] = None

    def __post_init__(self):
        if self.value is None:
            object.__setattr__(self, "value", self.utility)

    @classmethod
    def from_state(cls, state: AdversarialState, action: Optional[ActionMap] = None) -> 'GameNode':
        """Wrap a state, evaluating its utility once"""
        return cls(state=state, action=dict(action or {}), utility=float(state.utility()))

    def is_terminal(self) -> bool:
        return self.state.is_terminal()

    def children(self) -> List['GameNode']:
        """Fresh child nodes, in the order the environment generates them"""
        return [GameNode.from_state(child, action) for action, child in self.state.successors()]

    def with_value(self, value: float) -> 'GameNode':
        """Copy of this node carrying a backed-up value"""
        return replace(self, value=value)


# =============================================================================
# Explicit Game Tree
# =============================================================================

class ExplicitGameState:
    """
    A game given as a literal tree.

    Useful for analysing positions exported from another engine and for
    checking search behaviour on hand-built trees. Each child edge is a move
    label; the resulting action map is {unit_id: label}.
    """

    def __init__(self, utility: float = 0.0,
                 children: Optional[Mapping[str, 'ExplicitGameState']] = None,
                 terminal: bool = False, unit_id: int = 0, name: str = ""):
        self._utility = float(utility)
        self.children: Dict[str, ExplicitGameState] = dict(children or {})
        self.terminal = terminal
        self.unit_id = unit_id
        self.name = name

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], unit_id: int = 0, name: str = "root") -> 'ExplicitGameState':
        """
        Build a tree from nested dictionaries.

        Format:
            {"utility": 1.0, "terminal": false,
             "children": {"left": {...}, "right": {...}}}

        A bare number is shorthand for a terminal leaf with that utility.

        Raises:
            SearchConfigurationError: If a node is neither a number nor a
                mapping, its children are not a mapping, or its utility is
                not numeric
        """
        if isinstance(data, (int, float)) and not isinstance(data, bool):
            return cls(utility=data, terminal=True, unit_id=unit_id, name=name)
        if not isinstance(data, Mapping):
            raise SearchConfigurationError(
                f"Tree node {name!r} must be a number or a mapping, got {type(data).__name__}"
            )

        raw_children = data.get("children") or {}
        if not isinstance(raw_children, Mapping):
            raise SearchConfigurationError(
                f"Children of {name!r} must map move names to nodes, "
                f"got {type(raw_children).__name__}"
            )
        utility = data.get("utility", 0.0)
        if isinstance(utility, bool) or not isinstance(utility, (int, float)):
            raise SearchConfigurationError(f"Utility of {name!r} must be a number, got {utility!r}")

        children = {
            move: cls.from_dict(child, unit_id=unit_id, name=f"{name}/{move}")
            for move, child in raw_children.items()
        }
        return cls(
            utility=utility,
            children=children,
            terminal=bool(data.get("terminal", False)),
            unit_id=unit_id,
            name=name,
        )

    def is_terminal(self) -> bool:
        return self.terminal

    def utility(self) -> float:
        return self._utility

    def successors(self) -> List[Tuple[ActionMap, 'ExplicitGameState']]:
        return [({self.unit_id: move}, child) for move, child in self.children.items()]

    def __repr__(self) -> str:
        return f"ExplicitGameState({self.name!r}, utility={self._utility})"
