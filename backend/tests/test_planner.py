"""
Planner Tests

Tests for the best-first resource planner:
- Plan shape on small maps
- Empty and unreachable goals
- Budget exhaustion
- Heuristic values
"""

import pytest

from strategy_ai.ai import ForwardPlanner, build_plan, max_resource_distance, resource_heuristic
from strategy_ai.config import PlannerSettings
from strategy_ai.core import (
    ActionExecutor, PlanNotFoundError, PlanningState, Position, ResourceType,
    SearchConfigurationError, UnreachableGoalError
)
from helpers import make_state, simulate


GATHER_TRIP = ["MoveToMine", "Harvest", "MoveToBase", "Deposit"]


def planner(**overrides):
    return ForwardPlanner(settings=PlannerSettings(**overrides))


# =============================================================================
# Plans
# =============================================================================

def test_two_trips_for_two_hundred_gold():
    """One peasant, one mine: two full round trips"""
    state = make_state(golds=((10, 8, 8, 200),))
    plan = planner().plan(state, required_gold=200, required_wood=0)

    assert [a.label for a in plan] == GATHER_TRIP * 2
    assert all(a.unit_id == 2 for a in plan)
    assert plan[0].destination == Position(7, 7)
    assert plan[2].destination == Position(2, 2)
    assert sum(a.cost for a in plan) == 24
    print(f"✓ Plan: {' -> '.join(a.label for a in plan)}")


def test_plan_replays_to_goal():
    """Every action's preconditions hold when the plan is executed in order"""
    state = make_state(golds=((10, 8, 8, 500),), woods=((20, 1, 8, 500),))
    plan = planner().plan(state, required_gold=100, required_wood=100)

    final = simulate(state.with_requirements(100, 100), plan)
    assert final.is_goal()
    assert final.gold_amount >= 100
    assert final.wood_amount >= 100
    assert "MoveToWood" in [a.label for a in plan]


def test_path_cost_never_decreases():
    state = make_state(golds=((10, 8, 8, 300),))
    plan = planner().plan(state, required_gold=300, required_wood=0)

    executor = ActionExecutor()
    current = state.with_requirements(300, 0)
    costs = [current.cost]
    for action in plan:
        current = executor.execute(action, current)
        costs.append(current.cost)
    assert costs == sorted(costs)
    assert current.is_goal()


def test_search_result_reports_cost_and_stats():
    state = make_state(golds=((10, 8, 8, 200),))
    result = planner().search(state, 200, 0)
    assert result.cost == 24
    assert result.goal_state.gold_amount == 200
    assert result.stats.expansions > 0
    assert result.stats.generated >= result.stats.expansions
    assert result.goal_state.actions() == result.actions


def test_plan_with_several_peasants():
    state = make_state(peasants=((2, 2, 2), (3, 0, 2)), golds=((10, 8, 8, 400),))
    plan = planner().plan(state, required_gold=200, required_wood=0)
    final = simulate(state.with_requirements(200, 0), plan)
    assert final.gold_amount >= 200


def test_input_state_is_not_mutated():
    state = make_state(golds=((10, 8, 8, 200),))
    before = state.to_dict()
    planner().plan(state, required_gold=200, required_wood=0)
    assert state.to_dict() == before
    assert state.actions() == []


def test_build_plan_uses_defaults():
    state = make_state(golds=((10, 8, 8, 100),))
    assert [a.label for a in build_plan(state, 100, 0)] == GATHER_TRIP


# =============================================================================
# Trivial and Impossible Goals
# =============================================================================

def test_zero_requirements_give_empty_plan():
    state = make_state(golds=((10, 8, 8, 200),))
    assert planner().plan(state, required_gold=0, required_wood=0) == []


def test_already_banked_goal_gives_empty_plan():
    state = PlanningState.from_snapshot(
        10, 10,
        units=[{"id": 1, "type": "townhall", "x": 1, "y": 1},
               {"id": 2, "type": "peasant", "x": 2, "y": 2}],
        resources=[],
        gold_amount=300,
    )
    assert planner().plan(state, required_gold=200, required_wood=0) == []


def test_carried_cargo_only_needs_deposit():
    state = PlanningState.from_snapshot(
        10, 10,
        units=[{"id": 1, "type": "townhall", "x": 1, "y": 1},
               {"id": 2, "type": "peasant", "x": 2, "y": 2,
                "cargo_type": "gold", "cargo_amount": 100}],
        resources=[],
    )
    plan = planner().plan(state, required_gold=100, required_wood=0)
    assert [a.label for a in plan] == ["Deposit"]


def test_missing_resource_type_is_unreachable():
    """No gold on the map: rejected before any search runs"""
    state = make_state(woods=((20, 1, 8, 500),))
    search = planner()
    with pytest.raises(UnreachableGoalError) as exc_info:
        search.plan(state, required_gold=100, required_wood=0)
    assert isinstance(exc_info.value, SearchConfigurationError)
    assert isinstance(exc_info.value, PlanNotFoundError)
    assert search.last_stats.expansions == 0
    print("✓ Unreachable goal rejected up front")


def test_insufficient_supply_is_unreachable():
    state = make_state(golds=((10, 8, 8, 150),))
    with pytest.raises(UnreachableGoalError):
        planner().plan(state, required_gold=300, required_wood=0)


def test_partial_load_counts_as_full_trip():
    """150 gold on the map still yields two full loads"""
    state = make_state(golds=((10, 8, 8, 150),))
    plan = planner().plan(state, required_gold=200, required_wood=0)
    assert [a.label for a in plan] == GATHER_TRIP * 2


def test_unreachable_without_fail_fast_exhausts_frontier():
    state = make_state(woods=((20, 1, 8, 500),))
    with pytest.raises(PlanNotFoundError) as exc_info:
        planner(fail_fast_on_unreachable=False).plan(state, required_gold=100, required_wood=0)
    assert not isinstance(exc_info.value, UnreachableGoalError)
    assert exc_info.value.stats.expansions >= 1


def test_expansion_budget():
    state = make_state(golds=((10, 8, 8, 200),))
    with pytest.raises(PlanNotFoundError) as exc_info:
        planner(max_expansions=1).plan(state, required_gold=200, required_wood=0)
    assert exc_info.value.stats.expansions == 1


def test_negative_requirement_rejected():
    state = make_state(golds=((10, 8, 8, 200),))
    with pytest.raises(SearchConfigurationError):
        planner().plan(state, required_gold=-1, required_wood=0)


# =============================================================================
# Heuristic
# =============================================================================

def test_heuristic_uses_farthest_node():
    state = make_state(golds=((10, 8, 8, 200), (11, 3, 1, 200)), required_gold=200)
    assert max_resource_distance(state, ResourceType.GOLD) == 7
    assert resource_heuristic(state) == 2 * 7 * 200


def test_heuristic_ignores_absent_resource_type():
    state = make_state(golds=((10, 8, 8, 200),), required_gold=100, required_wood=100)
    assert max_resource_distance(state, ResourceType.WOOD) == 0
    assert resource_heuristic(state) == 2 * 7 * 100


def test_heuristic_zero_at_goal():
    state = make_state(golds=((10, 8, 8, 200),))
    assert resource_heuristic(state) == 0


def test_custom_heuristic_is_used():
    calls = []

    def counting(state):
        calls.append(state)
        return 0.0

    state = make_state(golds=((10, 8, 8, 100),))
    plan = ForwardPlanner(settings=PlannerSettings(), heuristic=counting).plan(state, 100, 0)
    assert [a.label for a in plan] == GATHER_TRIP
    assert calls


def test_partial_cargo_rejected_by_planner():
    state = PlanningState.from_snapshot(
        10, 10,
        units=[{"id": 1, "type": "townhall", "x": 1, "y": 1},
               {"id": 2, "type": "peasant", "x": 2, "y": 2,
                "cargo_type": "gold", "cargo_amount": 50}],
        resources=[{"id": 10, "type": "gold_mine", "x": 8, "y": 8, "amount": 500}],
    )
    with pytest.raises(SearchConfigurationError):
        planner().plan(state, required_gold=100, required_wood=0)
