"""
Planner Routes

REST API endpoint for the resource-gathering planner:
build a plan from a map snapshot.
"""

from fastapi import APIRouter, Body
from pydantic import BaseModel, Field
from typing import Dict, List, Optional, Any

from strategy_ai.ai import ForwardPlanner
from strategy_ai.config import PlannerSettings, get_planner_settings
from strategy_ai.core import PlanningState

router = APIRouter()


# =============================================================================
# Pydantic Models
# =============================================================================

class UnitModel(BaseModel):
    """A unit in the snapshot"""
    id: int
    type: str = Field(..., description="peasant or townhall")
    x: int = Field(..., ge=0)
    y: int = Field(..., ge=0)
    cargo_type: Optional[str] = Field(default=None, description="gold or wood")
    cargo_amount: int = Field(default=0, ge=0)


class ResourceModel(BaseModel):
    """A harvestable node in the snapshot"""
    id: int
    type: str = Field(..., description="gold_mine/gold or tree/wood")
    x: int = Field(..., ge=0)
    y: int = Field(..., ge=0)
    amount: int = Field(..., ge=0)


class PlanRequest(BaseModel):
    """Request for a gathering plan"""
    x_extent: int = Field(..., ge=1, description="Map width")
    y_extent: int = Field(..., ge=1, description="Map height")
    units: List[UnitModel]
    resources: List[ResourceModel] = Field(default_factory=list)
    required_gold: int = Field(default=0, ge=0)
    required_wood: int = Field(default=0, ge=0)
    gold_amount: int = Field(default=0, ge=0, description="Gold already banked")
    wood_amount: int = Field(default=0, ge=0, description="Wood already banked")
    max_expansions: Optional[int] = Field(default=None, ge=1, description="Override the expansion budget")

    class Config:
        json_schema_extra = {
            "example": {
                "x_extent": 10,
                "y_extent": 10,
                "units": [
                    {"id": 1, "type": "townhall", "x": 1, "y": 1},
                    {"id": 2, "type": "peasant", "x": 2, "y": 2}
                ],
                "resources": [
                    {"id": 10, "type": "gold_mine", "x": 8, "y": 8, "amount": 1000}
                ],
                "required_gold": 200,
                "required_wood": 0
            }
        }


class PlanResponse(BaseModel):
    """A plan ready to execute action by action"""
    actions: List[Dict[str, Any]]
    length: int
    cost: float
    gold_amount: int
    wood_amount: int
    stats: Dict[str, float]


# =============================================================================
# Helpers
# =============================================================================

def _initial_state(request: PlanRequest, settings: PlannerSettings) -> PlanningState:
    """Build the initial planning state from a request body"""
    return PlanningState.from_snapshot(
        x_extent=request.x_extent,
        y_extent=request.y_extent,
        units=[u.model_dump() for u in request.units],
        resources=[r.model_dump() for r in request.resources],
        required_gold=request.required_gold,
        required_wood=request.required_wood,
        gold_amount=request.gold_amount,
        wood_amount=request.wood_amount,
        load_amount=settings.load_amount,
    )


def _planner_settings(request: PlanRequest) -> PlannerSettings:
    settings = get_planner_settings()
    if request.max_expansions is None:
        return settings
    return settings.model_copy(update={"max_expansions": request.max_expansions})


# =============================================================================
# API Endpoints
# =============================================================================

@router.post("/plan", response_model=PlanResponse)
async def create_plan(request: PlanRequest = Body(...)):
    """
    Build a gathering plan.

    Configuration errors answer 422, an exhausted search answers 404.
    """
    settings = _planner_settings(request)
    state = _initial_state(request, settings)
    planner = ForwardPlanner(settings=settings)
    result = planner.search(state, request.required_gold, request.required_wood)

    return PlanResponse(
        actions=[a.to_dict() for a in result.actions],
        length=len(result.actions),
        cost=result.cost,
        gold_amount=result.goal_state.gold_amount,
        wood_amount=result.goal_state.wood_amount,
        stats=result.stats.to_dict(),
    )
