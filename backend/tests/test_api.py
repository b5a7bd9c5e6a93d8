"""
API Tests

Tests for the FastAPI endpoints:
- Root and health
- Planner endpoint
- Search endpoint
"""

import pytest

from fastapi.testclient import TestClient
from strategy_ai.api.main import app


# =============================================================================
# Test Client
# =============================================================================

client = TestClient(app)


PLAN_REQUEST = {
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

TREE = {
    "utility": 0,
    "children": {
        "attack": {"utility": 2, "children": {"retreat": 5, "counter": 3}},
        "hold": {"utility": 1, "children": {"retreat": 1, "counter": -4}}
    }
}


# =============================================================================
# Root Endpoint Tests
# =============================================================================

def test_root_endpoint():
    """Test root endpoint returns welcome message"""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert "message" in data
    assert "Strategy Search" in data["message"]
    print("✓ Root endpoint works")


def test_health_check():
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    print("✓ Health check works")


# =============================================================================
# Planner Endpoint Tests
# =============================================================================

def test_create_plan():
    """Test planning two gathering trips"""
    response = client.post("/api/planner/plan", json=PLAN_REQUEST)
    assert response.status_code == 200
    data = response.json()
    assert data["length"] == 8
    assert [a["label"] for a in data["actions"]][:4] == ["MoveToMine", "Harvest", "MoveToBase", "Deposit"]
    assert data["actions"][0]["destination"] == [7, 7]
    assert data["gold_amount"] == 200
    assert data["cost"] == 24
    assert "expansions" in data["stats"]
    print(f"✓ Plan created with {data['length']} actions")


def test_plan_zero_requirements():
    """Test an already satisfied goal gives an empty plan"""
    request = dict(PLAN_REQUEST, required_gold=0)
    response = client.post("/api/planner/plan", json=request)
    assert response.status_code == 200
    assert response.json()["actions"] == []
    print("✓ Empty plan for satisfied goal")


def test_plan_unreachable_goal():
    """Test a goal larger than the map's supply is rejected"""
    request = dict(PLAN_REQUEST, required_gold=5000)
    response = client.post("/api/planner/plan", json=request)
    assert response.status_code == 422
    assert "error" in response.json()
    print("✓ Unreachable goal rejected")


def test_plan_budget_exhausted():
    """Test an expansion budget too small to reach the goal"""
    request = dict(PLAN_REQUEST, max_expansions=1)
    response = client.post("/api/planner/plan", json=request)
    assert response.status_code == 404
    data = response.json()
    assert data["stats"]["expansions"] == 1
    print("✓ Budget exhaustion reported")


def test_plan_without_townhall():
    """Test a snapshot with nowhere to deposit"""
    request = dict(PLAN_REQUEST, units=[{"id": 2, "type": "peasant", "x": 2, "y": 2}])
    response = client.post("/api/planner/plan", json=request)
    assert response.status_code == 422
    print("✓ Missing townhall rejected")


def test_plan_invalid_request():
    """Test request validation"""
    request = dict(PLAN_REQUEST, required_gold=-100)
    response = client.post("/api/planner/plan", json=request)
    assert response.status_code == 422


# =============================================================================
# Search Endpoint Tests
# =============================================================================

def test_best_move():
    """Test picking the best move in a game tree"""
    response = client.post("/api/search/best-move", json={"tree": TREE, "ply_budget": 2})
    assert response.status_code == 200
    data = response.json()
    assert data["move"] == "attack"
    assert data["action"] == {"0": "attack"}
    assert data["value"] == 3
    assert data["nodes_searched"] > 0
    print(f"✓ Best move: {data['move']} ({data['value']})")


@pytest.mark.parametrize("order", [True, False])
def test_best_move_ordering_agrees(order):
    """Test move ordering does not change the answer"""
    response = client.post("/api/search/best-move",
                           json={"tree": TREE, "ply_budget": 2, "order_children": order})
    assert response.status_code == 200
    assert response.json()["move"] == "attack"


def test_best_move_no_children():
    """Test a position without moves"""
    response = client.post("/api/search/best-move", json={"tree": {"utility": 7}, "ply_budget": 3})
    assert response.status_code == 200
    data = response.json()
    assert data["move"] is None
    assert data["action"] == {}
    assert data["value"] == 7
    print("✓ No-move position handled")


def test_best_move_invalid_ply():
    """Test a non-positive ply budget"""
    response = client.post("/api/search/best-move", json={"tree": TREE, "ply_budget": 0})
    assert response.status_code == 422
    assert "Ply budget" in response.json()["error"]
    print("✓ Invalid ply budget rejected")


def test_plan_partial_cargo():
    """Test a peasant carrying less than a full load"""
    units = PLAN_REQUEST["units"][:1] + [
        {"id": 2, "type": "peasant", "x": 2, "y": 2, "cargo_type": "gold", "cargo_amount": 50}
    ]
    response = client.post("/api/planner/plan", json=dict(PLAN_REQUEST, units=units))
    assert response.status_code == 422
    assert "full load" in response.json()["error"]
    print("✓ Partial cargo rejected")


@pytest.mark.parametrize("bad_tree", [
    {"children": [1, 2]},
    {"children": {"attack": {"children": "none"}}},
])
def test_best_move_malformed_tree(bad_tree):
    """Test a tree whose children are not a mapping"""
    response = client.post("/api/search/best-move", json={"tree": bad_tree, "ply_budget": 2})
    assert response.status_code == 422
    assert "error" in response.json()
    print("✓ Malformed tree rejected")
