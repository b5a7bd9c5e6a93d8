# =============================================================================
# AI Module
# =============================================================================
"""
Search engines driving the agent.

Contains:
- MinMaxAgent: Hand-coded MinMax with Alpha-Beta pruning
- ForwardPlanner: Best-first STRIPS planner for resource gathering
"""

from .alpha_beta import (
    AlphaBetaSearch,
    MinMaxAgent,
    SearchStats,
    best_action,
    minimax,
    order_children,
    static_utility,
)

from .planner import (
    ForwardPlanner,
    PlanResult,
    PlanStats,
    build_plan,
    max_resource_distance,
    resource_heuristic,
)

__all__ = [
    # Adversarial search
    "AlphaBetaSearch",
    "MinMaxAgent",
    "SearchStats",
    "best_action",
    "minimax",
    "order_children",
    "static_utility",

    # Planner
    "ForwardPlanner",
    "PlanResult",
    "PlanStats",
    "build_plan",
    "max_resource_distance",
    "resource_heuristic",
]
