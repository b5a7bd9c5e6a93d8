"""
Search Routes

REST API endpoint for the adversarial search: given an explicit game tree,
return the best immediate move for the maximizing player.
"""

from fastapi import APIRouter, Body
from pydantic import BaseModel, Field
from typing import Dict, Optional, Any

from strategy_ai.ai import MinMaxAgent
from strategy_ai.config import get_search_settings
from strategy_ai.core import ExplicitGameState

router = APIRouter()


# =============================================================================
# Pydantic Models
# =============================================================================

class BestMoveRequest(BaseModel):
    """Request for the best move in a game tree"""
    tree: Dict[str, Any] = Field(..., description="Nested {utility, terminal, children} tree")
    ply_budget: Optional[int] = Field(default=None, description="Plies to search (default from settings)")
    order_children: bool = Field(default=True, description="Sort children by static utility")

    class Config:
        json_schema_extra = {
            "example": {
                "tree": {
                    "utility": 0,
                    "children": {
                        "attack": {"utility": 2, "children": {"retreat": 5, "counter": 3}},
                        "hold": {"utility": 1, "children": {"retreat": 1, "counter": -4}}
                    }
                },
                "ply_budget": 2
            }
        }


class BestMoveResponse(BaseModel):
    """The chosen move with its backed-up value"""
    move: Optional[str]
    action: Dict[str, Any]
    value: float
    nodes_searched: int
    nodes_pruned: int
    time_ms: float


# =============================================================================
# API Endpoints
# =============================================================================

@router.post("/best-move", response_model=BestMoveResponse)
async def get_best_move(request: BestMoveRequest = Body(...)):
    """
    Run MinMax with Alpha-Beta pruning on the submitted tree.

    A non-positive ply budget answers 422.
    """
    state = ExplicitGameState.from_dict(request.tree)
    settings = get_search_settings().model_copy(update={"order_children": request.order_children})
    agent = MinMaxAgent(settings=settings)

    best = agent.best_node(state, request.ply_budget)
    stats = agent.get_search_stats()
    move = next(iter(best.action.values()), None)

    return BestMoveResponse(
        move=move,
        action={str(unit): act for unit, act in best.action.items()},
        value=best.value,
        nodes_searched=stats["nodes_searched"],
        nodes_pruned=stats["nodes_pruned"],
        time_ms=stats["time_ms"],
    )
