from __future__ import annotations

from fastapi.testclient import TestClient

from solar_designer.api import dependencies
from solar_designer.api.app import create_app
from solar_designer.application import DesignApplication
from solar_designer.design.catalog import DEFAULT_BATTERIES, DEFAULT_INVERTERS, DEFAULT_PANELS
from solar_designer.persistence import PersistenceService


def create_test_client(persistence: PersistenceService) -> TestClient:
    """Build a FastAPI test client with dependency overrides for persistence."""
    app = create_app()

    def get_app_service() -> DesignApplication:
        return DesignApplication(
            persistence=persistence,
            result_builder=None,
            save_outputs=False,
        )

    app.dependency_overrides[dependencies.get_application_service] = get_app_service
    app.dependency_overrides[dependencies.get_persistence_service] = lambda: persistence
    return TestClient(app)


def test_api_simulate_and_runs(persistence: PersistenceService, simulation_payload: dict):
    """Exercise /api/simulate and /api/design-runs."""
    client = create_test_client(persistence)
    resp = client.post("/api/simulate", json=simulation_payload)
    assert resp.status_code == 200
    data = resp.json()
    assert data["label"] == "sf-10kw"
    assert len(data["monthly_production"]) == 12
    assert data["annual_production"] > 0
    assert data["financial_analysis"] is not None

    runs_resp = client.get("/api/design-runs", params={"run_type": "simulation"})
    assert runs_resp.status_code == 200
    runs = runs_resp.json()
    assert len(runs) == 1
    assert runs[0]["label"] == "sf-10kw"


def test_api_simulate_without_financial_block(persistence, simulation_payload):
    client = create_test_client(persistence)
    payload = dict(simulation_payload, include_financial=False)
    data = client.post("/api/simulate", json=payload).json()
    assert data["financial_analysis"] is None


def test_api_simulate_rejects_out_of_range_values(persistence, simulation_payload):
    """Range violations surface as 422 with the offending field."""
    client = create_test_client(persistence)
    payload = dict(simulation_payload, location={"latitude": 95.0, "longitude": 0.0})
    resp = client.post("/api/simulate", json=payload)
    assert resp.status_code == 422
    body = resp.json()
    assert body["error"] == "validation_error"
    assert body["field"] == "latitude"
    assert persistence.list_design_runs() == []


def test_api_simulate_rejects_malformed_body(persistence, simulation_payload):
    client = create_test_client(persistence)
    payload = {key: value for key, value in simulation_payload.items() if key != "weather"}
    assert client.post("/api/simulate", json=payload).status_code == 422


def test_api_design(persistence: PersistenceService, design_payload: dict):
    """Exercise the /api/design endpoint."""
    client = create_test_client(persistence)
    resp = client.post("/api/design", json=design_payload)
    assert resp.status_code == 200
    data = resp.json()
    assert data["variants_evaluated"] == 9
    assert len(data["alternative_designs"]) == 3
    assert 0 <= data["score"]["overall"] <= 100
    assert data["roof_layout"]["total_roof_area_m2"] == 60.0

    runs = client.get("/api/design-runs", params={"run_type": "design"}).json()
    assert runs[0]["summary"]["design_id"] == data["design_id"]


def test_api_design_infeasible_returns_409(persistence, design_payload):
    client = create_test_client(persistence)
    payload = dict(
        design_payload,
        preferences={"panel_type": "polycrystalline", "design_goals": {"tier1_only": True}},
    )
    resp = client.post("/api/design", json=payload)
    assert resp.status_code == 409
    body = resp.json()
    assert body["error"] == "infeasible_design"
    assert body["attempted"] == [
        ["polycrystalline", "string"],
        ["polycrystalline", "power-optimizer"],
        ["polycrystalline", "micro"],
    ]


def test_api_design_rejects_short_usage(persistence, design_payload):
    client = create_test_client(persistence)
    resp = client.post("/api/design", json=dict(design_payload, monthly_usage=[700.0] * 6))
    assert resp.status_code == 422
    assert resp.json()["field"] == "monthly_usage"


def test_api_catalog_crud(persistence: PersistenceService):
    """Create, update, list and delete equipment through the API."""
    client = create_test_client(persistence)

    panel = DEFAULT_PANELS[0].to_dict()
    resp = client.post("/api/panels", json=panel)
    assert resp.status_code == 200
    created = resp.json()
    assert created["catalog_id"] == panel["id"]
    assert created["specs"]["wattage"] == panel["wattage"]

    resp = client.post("/api/panels", json={**panel, "price_per_watt": 0.41})
    assert resp.json()["id"] == created["id"]
    panels = client.get("/api/panels").json()
    assert len(panels) == 1
    assert panels[0]["specs"]["price_per_watt"] == 0.41

    assert client.post("/api/inverters", json=DEFAULT_INVERTERS[2].to_dict()).status_code == 200
    assert client.post("/api/batteries", json=DEFAULT_BATTERIES[0].to_dict()).status_code == 200
    assert len(client.get("/api/inverters").json()) == 1
    assert len(client.get("/api/batteries").json()) == 1

    assert client.delete(f"/api/panels/{panel['id']}").status_code == 204
    assert client.delete(f"/api/panels/{panel['id']}").status_code == 404
    assert client.delete("/api/cables/x").status_code == 422
    assert client.get("/api/panels").json() == []


def test_api_catalog_rejects_invalid_equipment(persistence):
    client = create_test_client(persistence)
    panel = {**DEFAULT_PANELS[0].to_dict(), "wattage": -10}
    assert client.post("/api/panels", json=panel).status_code == 422


def test_api_seed_catalog(persistence: PersistenceService):
    client = create_test_client(persistence)
    resp = client.post("/api/catalog/seed")
    assert resp.status_code == 200
    assert resp.json() == {
        "panels": len(DEFAULT_PANELS),
        "inverters": len(DEFAULT_INVERTERS),
        "batteries": len(DEFAULT_BATTERIES),
    }
    assert len(client.get("/api/panels").json()) == len(DEFAULT_PANELS)
