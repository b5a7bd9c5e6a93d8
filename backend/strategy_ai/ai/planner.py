# =============================================================================
# Strategy Search Core - Forward Planner
# =============================================================================
"""
Best-first (A*-like) forward planner over STRIPS actions.

The frontier is ordered by f = g + h, where g is the path cost of a state and
h is a distance-based estimate of the work left. Ties are broken by insertion
order so that identical inputs always produce identical plans.
"""

import heapq
import itertools
import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

import numpy as np

from strategy_ai.config import PlannerSettings, get_planner_settings
from strategy_ai.core import (
    ActionGenerator, PlanningState, PlanNotFoundError, ResourceType,
    SearchConfigurationError, StripsAction, UnreachableGoalError
)

logger = logging.getLogger(__name__)

Heuristic = Callable[[PlanningState], float]


# =============================================================================
# Heuristic
# =============================================================================

def max_resource_distance(state: PlanningState, resource_type: ResourceType) -> int:
    """Largest Chebyshev distance from the base to a remaining node of a type"""
    nodes = state.resources_of(resource_type)
    if not nodes:
        return 0
    coords = np.array([n.position.as_tuple() for n in nodes], dtype=np.int64)
    base = np.array(state.base.position.as_tuple(), dtype=np.int64)
    return int(np.abs(coords - base).max(axis=1).max())


def resource_heuristic(state: PlanningState) -> float:
    """
    Round-trip estimate of the work left.

    h = 2 * maxDistGold * goldStillNeeded + 2 * maxDistWood * woodStillNeeded

    The distance is the farthest remaining node of each type, scaled by the
    raw amount still needed. This is not a strict lower bound when node
    distances vary, so plans are good rather than guaranteed optimal.
    """
    gold_term = 2 * max_resource_distance(state, ResourceType.GOLD) * state.remaining_gold
    wood_term = 2 * max_resource_distance(state, ResourceType.WOOD) * state.remaining_wood
    return float(gold_term + wood_term)


# =============================================================================
# Planner
# =============================================================================

@dataclass
class PlanStats:
    """Statistics for one planning run"""
    expansions: int = 0
    generated: int = 0
    duplicates: int = 0
    frontier_peak: int = 0
    time_ms: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return {
            "expansions": self.expansions,
            "generated": self.generated,
            "duplicates": self.duplicates,
            "frontier_peak": self.frontier_peak,
            "time_ms": self.time_ms,
        }


@dataclass
class PlanResult:
    """A found plan together with the goal state it reaches"""
    actions: List[StripsAction]
    goal_state: PlanningState
    stats: PlanStats = field(default_factory=PlanStats)

    @property
    def cost(self) -> float:
        return self.goal_state.cost


class ForwardPlanner:
    """
    Plans a sequence of peasant actions that banks the required resources.

    Example usage:
        planner = ForwardPlanner()
        actions = planner.plan(initial_state, required_gold=200, required_wood=0)
    """

    def __init__(self, settings: Optional[PlannerSettings] = None,
                 heuristic: Heuristic = resource_heuristic):
        """
        Args:
            settings: Load size, action costs and search budget
            heuristic: Estimate of the remaining cost of a state
        """
        self.settings = settings or get_planner_settings()
        self.heuristic = heuristic
        self.generator = ActionGenerator(
            load_amount=self.settings.load_amount,
            harvest_cost=self.settings.harvest_cost,
            deposit_cost=self.settings.deposit_cost,
        )
        self.last_stats: Optional[PlanStats] = None

    def plan(self, initial_state: PlanningState, required_gold: int,
             required_wood: int) -> List[StripsAction]:
        """
        Find an ordered action list that reaches the resource goal.

        Raises:
            SearchConfigurationError: If the requirements are negative or a
                peasant carries a partial load
            UnreachableGoalError: If the map cannot supply the requirements
            PlanNotFoundError: If the search ran out of states or budget
        """
        return self.search(initial_state, required_gold, required_wood).actions

    def search(self, initial_state: PlanningState, required_gold: int,
               required_wood: int) -> PlanResult:
        """Run the search and return the plan with its goal state and stats"""
        if required_gold < 0 or required_wood < 0:
            raise SearchConfigurationError(
                f"Required amounts must be non-negative, got gold={required_gold} wood={required_wood}"
            )
        start_state = initial_state.with_requirements(required_gold, required_wood)
        start_state.validate(self.settings.load_amount)
        stats = PlanStats()
        self.last_stats = stats
        started = time.time()

        if self.settings.fail_fast_on_unreachable:
            self._check_reachable(start_state, stats)

        counter = itertools.count()
        frontier: List[Tuple[float, int, PlanningState]] = []
        best_cost: Dict[PlanningState, float] = {start_state: start_state.cost}
        closed = set()
        heapq.heappush(frontier, (self._priority(start_state), next(counter), start_state))

        while frontier:
            _, _, state = heapq.heappop(frontier)
            if state in closed:
                continue

            if state.is_goal():
                stats.time_ms = (time.time() - started) * 1000
                actions = state.actions()
                logger.info(
                    "Plan found: %d actions, cost %.1f, %d expansions (%.1fms)",
                    len(actions), state.cost, stats.expansions, stats.time_ms,
                )
                return PlanResult(actions=actions, goal_state=state, stats=stats)

            if (self.settings.max_expansions is not None
                    and stats.expansions >= self.settings.max_expansions):
                stats.time_ms = (time.time() - started) * 1000
                logger.warning("Expansion budget of %d spent without reaching the goal",
                               self.settings.max_expansions)
                raise PlanNotFoundError(
                    f"No plan found within {self.settings.max_expansions} expansions", stats
                )

            closed.add(state)
            stats.expansions += 1

            for _, child in self.generator.successors(state):
                stats.generated += 1
                if child in closed or best_cost.get(child, float('inf')) <= child.cost:
                    stats.duplicates += 1
                    continue
                best_cost[child] = child.cost
                heapq.heappush(frontier, (self._priority(child), next(counter), child))

            stats.frontier_peak = max(stats.frontier_peak, len(frontier))

        stats.time_ms = (time.time() - started) * 1000
        logger.warning("Frontier exhausted after %d expansions; no plan exists", stats.expansions)
        raise PlanNotFoundError(
            f"No plan banks {required_gold} gold and {required_wood} wood", stats
        )

    def _priority(self, state: PlanningState) -> float:
        """f = g + h"""
        return state.cost + self.heuristic(state)

    def _check_reachable(self, state: PlanningState, stats: PlanStats):
        """Reject goals that exceed what the map holds"""
        for resource_type in ResourceType:
            needed = state.required(resource_type)
            available = state.obtainable(resource_type, self.settings.load_amount)
            if available < needed:
                raise UnreachableGoalError(
                    f"Map can supply at most {available} {resource_type} "
                    f"but {needed} is required", stats
                )


# =============================================================================
# Convenience Functions
# =============================================================================

def build_plan(current_state: PlanningState, required_gold: int,
               required_wood: int) -> List[StripsAction]:
    """One-shot planning with default settings"""
    return ForwardPlanner().plan(current_state, required_gold, required_wood)
