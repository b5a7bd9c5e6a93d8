"""
Action Tests

Tests for STRIPS action generation, validation and execution:
- Movement destinations and costs
- Harvest / deposit effects
- Precondition failures
"""

import pytest

from strategy_ai.core import (
    ActionExecutor, ActionGenerator, ActionPreconditionError, ActionValidator,
    PlanningState, Position, ResourceType, StripsAction, StripsActionType,
    approach_tile, nearest_resource
)
from helpers import make_state


generator = ActionGenerator(load_amount=100)
validator = ActionValidator()
executor = ActionExecutor()


def gold_state(**kwargs):
    """Peasant next to the townhall, one gold mine across the map"""
    kwargs.setdefault("golds", ((10, 8, 8, 200),))
    kwargs.setdefault("required_gold", 200)
    return make_state(**kwargs)


# =============================================================================
# Tile Selection
# =============================================================================

def test_approach_tile_prefers_closest_neighbour():
    state = gold_state()
    assert approach_tile(state, Position(8, 8), Position(1, 1)) == Position(7, 7)
    print("✓ Approach tile faces the origin")


def test_approach_tile_stays_on_the_map():
    """A mine in the corner can only be approached from inside the map"""
    state = gold_state(golds=((10, 9, 9, 200),))
    tile = approach_tile(state, Position(9, 9), Position(1, 1))
    assert tile == Position(8, 8)
    assert tile.in_bounds(state.x_extent, state.y_extent)


def test_approach_tile_skips_occupied_tiles():
    """A resource node on the best tile pushes the peasant to the next one"""
    state = gold_state(woods=((20, 7, 7, 100),))
    tile = approach_tile(state, Position(8, 8), Position(1, 1))
    assert tile != Position(7, 7)
    assert tile.is_adjacent(Position(8, 8))


def test_nearest_resource_measured_from_origin():
    state = gold_state(golds=((10, 8, 8, 200), (11, 4, 1, 200)))
    assert nearest_resource(state, ResourceType.GOLD, Position(1, 1)).id == 11
    assert nearest_resource(state, ResourceType.WOOD, Position(1, 1)) is None


# =============================================================================
# Generation
# =============================================================================

def test_only_move_is_legal_at_start():
    """At the base with empty hands the only way forward is to walk out"""
    state = gold_state()
    actions = generator.get_valid_actions(state)
    assert len(actions) == 1

    move = actions[0]
    assert move.action_type == StripsActionType.MOVE_TO_GOLD
    assert move.label == "MoveToMine"
    assert move.action_type.is_movement
    assert move.target_id == 10
    assert move.destination == Position(7, 7)
    assert move.cost == 5
    print(f"✓ Single legal action: {move}")


def test_actions_at_the_mine():
    state = gold_state(peasants=((2, 7, 7),))
    labels = sorted(a.label for a in generator.get_valid_actions(state))
    assert labels == ["Harvest", "MoveToBase"]


def test_candidates_cover_every_peasant():
    state = gold_state(peasants=((2, 2, 2), (3, 0, 2)))
    units = {a.unit_id for a in generator.get_valid_actions(state)}
    assert units == {2, 3}


def test_wood_move_generated_for_trees():
    state = make_state(woods=((20, 1, 8, 300),), required_wood=100)
    move = generator.move_to_resource(state, 2, ResourceType.WOOD)
    assert move.label == "MoveToWood"
    # Three tiles tie at distance 6; row-major order picks the first
    assert move.destination == Position(0, 7)
    assert move.cost == 5
    assert validator.preconditions_met(move, state)


def test_negative_cost_rejected():
    with pytest.raises(ValueError):
        StripsAction(StripsActionType.DEPOSIT, unit_id=2, cost=-1, target_id=1)


# =============================================================================
# Execution
# =============================================================================

def test_harvest_loads_full_cargo():
    """Harvest loads exactly one load and depletes the node by it"""
    state = gold_state(peasants=((2, 7, 7),))
    harvest = generator.harvest(2, 10, ResourceType.GOLD)
    after = executor.execute(harvest, state)

    peasant = after.get_peasant(2)
    assert peasant.cargo_type == ResourceType.GOLD
    assert peasant.cargo_amount == 100
    assert after.get_resource(10).amount_remaining == 100
    assert after.cost == 1
    # Parent untouched
    assert state.get_peasant(2).cargo_amount == 0
    assert state.get_resource(10).amount_remaining == 200
    print("✓ Harvest loads a full cargo")


def test_harvest_removes_exhausted_node():
    state = gold_state(peasants=((2, 7, 7),), golds=((10, 8, 8, 50),))
    after = executor.execute(generator.harvest(2, 10, ResourceType.GOLD), state)
    assert after.get_resource(10) is None
    assert after.get_peasant(2).cargo_amount == 100


def test_deposit_banks_cargo():
    state = PlanningState.from_snapshot(
        10, 10,
        units=[
            {"id": 1, "type": "townhall", "x": 1, "y": 1},
            {"id": 2, "type": "peasant", "x": 2, "y": 2, "cargo_type": "gold", "cargo_amount": 100},
        ],
        resources=[],
        required_gold=100,
    )
    after = executor.execute(generator.deposit(2, 1), state)
    assert after.gold_amount == 100
    assert not after.get_peasant(2).has_cargo
    assert after.is_goal()


def test_move_relocates_only_the_actor():
    state = gold_state(peasants=((2, 2, 2), (3, 0, 2)))
    move = generator.move_to_resource(state, 2, ResourceType.GOLD)
    after = move.apply(state)
    assert after.get_peasant(2).position == Position(7, 7)
    assert after.get_peasant(3).position == Position(0, 2)
    assert after.actions() == [move]


# =============================================================================
# Preconditions
# =============================================================================

def test_deposit_without_cargo_fails():
    state = gold_state()
    with pytest.raises(ActionPreconditionError):
        executor.execute(generator.deposit(2, 1), state)


def test_harvest_away_from_node_fails():
    state = gold_state()
    ok, reason = validator.validate(generator.harvest(2, 10, ResourceType.GOLD), state)
    assert not ok
    assert "next to the resource" in reason


def test_harvest_stops_once_requirement_banked():
    state = gold_state(peasants=((2, 7, 7),), required_gold=0)
    assert not validator.preconditions_met(generator.harvest(2, 10, ResourceType.GOLD), state)


def test_harvest_wrong_resource_type_fails():
    state = gold_state(peasants=((2, 7, 7),))
    assert not validator.preconditions_met(generator.harvest(2, 10, ResourceType.WOOD), state)


def test_move_to_base_when_already_home_fails():
    state = gold_state()
    move = generator.move_to_base(state, 2)
    assert not move.preconditions_met(state)


def test_move_to_resource_away_from_base_fails():
    state = gold_state(peasants=((2, 5, 5),))
    move = generator.move_to_resource(state, 2, ResourceType.GOLD)
    assert not validator.preconditions_met(move, state)


def test_unknown_unit_fails():
    state = gold_state()
    ok, reason = validator.validate(generator.deposit(99, 1), state)
    assert not ok
    assert "99" in reason
