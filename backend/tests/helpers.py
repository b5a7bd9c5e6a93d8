"""
Shared builders for test snapshots.
"""

from strategy_ai.core import ExplicitGameState, PlanningState


def make_state(peasants=((2, 2, 2),), townhall=(1, 1), golds=(), woods=(),
               required_gold=0, required_wood=0, size=(10, 10)):
    """
    Build a planning state.

    Args:
        peasants: (id, x, y) tuples
        townhall: (x, y) of the single townhall (id 1)
        golds: (id, x, y, amount) tuples for gold mines
        woods: (id, x, y, amount) tuples for trees
    """
    units = [{"id": 1, "type": "townhall", "x": townhall[0], "y": townhall[1]}]
    units += [{"id": pid, "type": "peasant", "x": x, "y": y} for pid, x, y in peasants]
    resources = [{"id": rid, "type": "gold_mine", "x": x, "y": y, "amount": amount}
                 for rid, x, y, amount in golds]
    resources += [{"id": rid, "type": "tree", "x": x, "y": y, "amount": amount}
                  for rid, x, y, amount in woods]
    return PlanningState.from_snapshot(
        x_extent=size[0],
        y_extent=size[1],
        units=units,
        resources=resources,
        required_gold=required_gold,
        required_wood=required_wood,
    )


def simulate(state, actions):
    """Replay a plan with precondition checks; returns the final state"""
    from strategy_ai.core import ActionExecutor
    executor = ActionExecutor()
    for action in actions:
        state = executor.execute(action, state)
    return state


def tree(data):
    """Explicit game tree from nested dictionaries"""
    return ExplicitGameState.from_dict(data)
