# =============================================================================
# Strategy Search Core - Alpha-Beta Agent
# =============================================================================
"""
Hand-coded MinMax with Alpha-Beta pruning.

Key Features:
1. Alpha-Beta Pruning - Skips branches that cannot change the decision
2. Move Ordering - Children sorted by static utility before recursing
3. Root Tracking - The root remembers which child produced its value
4. Degenerate Positions - A state with no moves is scored, not expanded

Every ply spends one unit of depth: with depth 2 the root's children are MIN
nodes and the grandchildren are scored statically.
"""

import logging
import math
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from strategy_ai.config import SearchSettings, get_search_settings
from strategy_ai.core import (
    ActionMap, AdversarialState, GameNode, PlayerRole, SearchConfigurationError
)

logger = logging.getLogger(__name__)

# Ordering key: larger keys are searched first
OrderKey = Callable[[GameNode], float]

INF = float('inf')
NEG_INF = float('-inf')


def static_utility(node: GameNode) -> float:
    """Default move ordering key: the child's own static utility"""
    return node.utility


# =============================================================================
# Move Ordering
# =============================================================================

def order_children(children: List[GameNode], key: Optional[OrderKey] = static_utility) -> List[GameNode]:
    """
    Order children from most to least promising.

    The sort is stable, so children with equal keys keep the order the
    environment generated them in. Passing key=None leaves the order alone.
    """
    if key is None:
        return list(children)
    return sorted(children, key=key, reverse=True)


# =============================================================================
# Reference Minimax
# =============================================================================

def minimax(node: GameNode, depth: int, role: PlayerRole = PlayerRole.MAX
            ) -> Tuple[float, Optional[GameNode]]:
    """
    Plain minimax without pruning or ordering.

    Returns:
        (backed-up value, best child) - the child is None for leaves
    """
    if depth <= 0 or node.is_terminal():
        return node.utility, None

    children = node.children()
    if not children:
        return node.utility, None

    best_value = NEG_INF if role == PlayerRole.MAX else INF
    best_child = None
    for child in children:
        value, _ = minimax(child, depth - 1, role.opponent)
        if role == PlayerRole.MAX and value > best_value:
            best_value, best_child = value, child
        elif role == PlayerRole.MIN and value < best_value:
            best_value, best_child = value, child
    return best_value, best_child


# =============================================================================
# Alpha-Beta Search
# =============================================================================

@dataclass
class SearchStats:
    """Statistics for one root search"""
    nodes_searched: int = 0
    nodes_pruned: int = 0
    depth: int = 0
    time_ms: float = 0.0
    best_action: Optional[ActionMap] = None
    best_value: float = 0.0


class AlphaBetaSearch:
    """
    Depth-limited alpha-beta search over GameNodes.

    Example usage:
        search = AlphaBetaSearch()
        best = search.search(GameNode.from_state(state), 4, NEG_INF, INF)
        best.action  # action map of the best immediate move
    """

    def __init__(self, order_key: Optional[OrderKey] = static_utility):
        """
        Args:
            order_key: Heuristic used to sort siblings (None disables ordering)
        """
        self.order_key = order_key
        self.nodes_searched = 0
        self.nodes_pruned = 0

    def search(self, node: GameNode, depth: int,
               alpha: float = NEG_INF, beta: float = INF) -> GameNode:
        """
        Search from the root as the maximizing player.

        Equal-valued moves resolve to the one generated first, the same
        choice minimax() makes, so move ordering only affects pruning.

        Args:
            node: The state to search from
            depth: Remaining plies under this node
            alpha: Best value the maximizer can already guarantee
            beta: Best value the minimizer can already guarantee

        Returns:
            The best child carrying its backed-up value, or the node itself
            when it is terminal, out of depth or has no moves
        """
        if depth < 0:
            raise SearchConfigurationError(f"Search depth must be non-negative, got {depth}")

        self.nodes_searched += 1
        if depth == 0 or node.is_terminal():
            return node

        generated = node.children()
        if not generated:
            logger.debug("Root has no legal moves; scoring it statically")
            return node

        # Ties go to the earliest generated move, whatever the search order
        rank = {id(child): index for index, child in enumerate(generated)}
        children = order_children(generated, self.order_key)

        best_child = children[0]
        best_value = NEG_INF
        for child in children:
            # Open the window one step below alpha so a tie comes back exact
            value = self._alpha_beta(child, depth - 1, math.nextafter(alpha, NEG_INF),
                                     beta, PlayerRole.MIN)
            if value > best_value or (value == best_value
                                      and rank[id(child)] < rank[id(best_child)]):
                best_value = value
                best_child = child
            if value >= beta:
                self.nodes_pruned += 1
                break
            if value > alpha:
                alpha = value

        return best_child.with_value(best_value)

    def _alpha_beta(self, node: GameNode, depth: int,
                    alpha: float, beta: float, role: PlayerRole) -> float:
        """
        The core MinMax recursion with Alpha-Beta pruning.

        Returns:
            Backed-up value of the node
        """
        self.nodes_searched += 1

        if depth <= 0 or node.is_terminal():
            return node.utility

        children = order_children(node.children(), self.order_key)
        if not children:
            # No moves - a dead end, scored like a leaf
            return node.utility

        if role == PlayerRole.MAX:
            best_value = NEG_INF
            for child in children:
                value = self._alpha_beta(child, depth - 1, alpha, beta, PlayerRole.MIN)
                if value >= beta:
                    # Beta cutoff
                    self.nodes_pruned += 1
                    return value
                if value > best_value:
                    best_value = value
                if value > alpha:
                    alpha = value
            return best_value

        best_value = INF
        for child in children:
            value = self._alpha_beta(child, depth - 1, alpha, beta, PlayerRole.MAX)
            if value <= alpha:
                # Alpha cutoff
                self.nodes_pruned += 1
                return value
            if value < best_value:
                best_value = value
            if value < beta:
                beta = value
        return best_value

    def reset_counters(self):
        self.nodes_searched = 0
        self.nodes_pruned = 0


# =============================================================================
# MinMax Agent
# =============================================================================

class MinMaxAgent:
    """
    Decision-point wrapper around AlphaBetaSearch.

    The environment calls best_action() once per turn with a fresh state and
    executes the returned action map.

    Example usage:
        agent = MinMaxAgent()
        actions = agent.best_action(state, ply_budget=4)
    """

    def __init__(self, settings: Optional[SearchSettings] = None,
                 order_key: Optional[OrderKey] = static_utility):
        self.settings = settings or get_search_settings()
        self.search = AlphaBetaSearch(order_key if self.settings.order_children else None)
        self.search_history: List[SearchStats] = []

    def best_action(self, state: AdversarialState, ply_budget: Optional[int] = None) -> ActionMap:
        """
        Find the best immediate move for the maximizing player.

        Args:
            state: Current game state
            ply_budget: Plies to search (defaults to the configured budget)

        Returns:
            Action map of the best move; empty when the state has no moves

        Raises:
            SearchConfigurationError: If the ply budget is not a positive integer
        """
        return self.best_node(state, ply_budget).action

    def best_node(self, state: AdversarialState, ply_budget: Optional[int] = None) -> GameNode:
        """Like best_action() but returns the whole node with its backed-up value"""
        depth = self.settings.default_ply if ply_budget is None else ply_budget
        if isinstance(depth, bool) or not isinstance(depth, int) or depth <= 0:
            raise SearchConfigurationError(f"Ply budget must be a positive integer, got {depth!r}")

        start = time.time()
        self.search.reset_counters()
        root = GameNode.from_state(state)
        best = self.search.search(root, depth, NEG_INF, INF)

        stats = SearchStats(
            nodes_searched=self.search.nodes_searched,
            nodes_pruned=self.search.nodes_pruned,
            depth=depth,
            time_ms=(time.time() - start) * 1000,
            best_action=best.action,
            best_value=best.value,
        )
        self.search_history.append(stats)

        if best is root:
            logger.warning("No legal moves at the root; returning an empty action map")
        logger.debug(
            "Alpha-beta depth=%d value=%.3f nodes=%d cutoffs=%d (%.1fms)",
            depth, stats.best_value, stats.nodes_searched, stats.nodes_pruned, stats.time_ms,
        )
        return best

    def get_search_stats(self) -> Dict:
        """Get statistics from the most recent search"""
        if not self.search_history:
            return {}

        latest = self.search_history[-1]
        return {
            "nodes_searched": latest.nodes_searched,
            "nodes_pruned": latest.nodes_pruned,
            "depth": latest.depth,
            "time_ms": latest.time_ms,
            "best_value": latest.best_value,
        }


# =============================================================================
# Convenience Functions
# =============================================================================

def best_action(state: AdversarialState, ply_budget: int) -> ActionMap:
    """One-shot search with default settings"""
    return MinMaxAgent().best_action(state, ply_budget)
