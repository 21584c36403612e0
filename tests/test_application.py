from __future__ import annotations

from pathlib import Path

import pytest

from solar_designer.application import DesignApplication, parse_simulation_payload
from solar_designer.design.catalog import DEFAULT_INVERTERS, DEFAULT_PANELS
from solar_designer.errors import InfeasibleDesignError, ValidationError
from solar_designer.persistence import PersistenceService
from solar_designer.result_builder import ResultBuilder


def test_parse_simulation_payload(simulation_payload: dict):
    inputs = parse_simulation_payload(simulation_payload)

    assert inputs.location.latitude == pytest.approx(37.7749)
    assert inputs.spec.dc_capacity_kw == 10.0
    assert len(inputs.weather) == 12
    assert inputs.include_financial is True


def test_parse_simulation_payload_reports_missing_section(simulation_payload: dict):
    payload = {key: value for key, value in simulation_payload.items() if key != "system"}
    with pytest.raises(ValidationError) as excinfo:
        parse_simulation_payload(payload)
    assert excinfo.value.field == "system"


def test_run_simulation_records_run(persistence: PersistenceService, simulation_payload: dict):
    """Run a simulation and assert a DB record is inserted."""
    app = DesignApplication(persistence=persistence, result_builder=None, save_outputs=False)
    data = app.run_simulation(simulation_payload)

    assert data["label"] == "sf-10kw"
    assert data["output_dir"] is None
    assert len(data["monthly_production"]) == 12
    assert data["financial_analysis"]["net_cost"] > 0

    runs = persistence.list_design_runs(run_type="simulation")
    assert len(runs) == 1
    assert runs[0].summary["annual_production_kwh"] == pytest.approx(data["annual_production"])
    assert "payback_years" in runs[0].summary


def test_run_design_uses_builtin_catalog_when_db_is_empty(
    persistence: PersistenceService, design_payload: dict
):
    app = DesignApplication(persistence=persistence, save_outputs=False)
    data = app.run_design(design_payload)

    assert data["label"] == "sf-home"
    assert data["variants_evaluated"] == 9
    runs = persistence.list_design_runs(run_type="design")
    assert runs[0].summary["design_id"] == data["design_id"]
    assert runs[0].request["monthly_usage"] == [700.0] * 12


def test_run_design_uses_stored_catalog(persistence: PersistenceService, design_payload: dict):
    """Only the stored equipment is offered to the optimizer."""
    panel = next(p for p in DEFAULT_PANELS if p.id == "jinko-tiger-neo-420")
    persistence.upsert_panel(panel)
    for inverter in DEFAULT_INVERTERS:
        persistence.upsert_inverter(inverter)

    app = DesignApplication(persistence=persistence, save_outputs=False)
    data = app.run_design(design_payload)

    assert data["components"]["panels"]["panel"]["id"] == "jinko-tiger-neo-420"
    assert data["variants_evaluated"] == 3


def test_run_design_infeasible_is_not_recorded(persistence: PersistenceService, design_payload: dict):
    payload = dict(
        design_payload,
        preferences={"panel_type": "polycrystalline", "design_goals": {"tier1_only": True}},
    )
    app = DesignApplication(persistence=persistence, save_outputs=False)

    with pytest.raises(InfeasibleDesignError):
        app.run_design(payload)
    assert persistence.list_design_runs() == []


def test_run_design_requires_weather(design_payload: dict):
    payload = {key: value for key, value in design_payload.items() if key != "weather"}
    with pytest.raises(ValidationError) as excinfo:
        DesignApplication(save_outputs=False).run_design(payload)
    assert excinfo.value.field == "weather"


def test_outputs_are_written_when_enabled(tmp_path, persistence, simulation_payload, design_payload):
    app = DesignApplication(
        persistence=persistence,
        result_builder=ResultBuilder(output_root=tmp_path),
        save_outputs=True,
    )
    simulation = app.run_simulation(simulation_payload)
    design = app.run_design(design_payload)

    assert Path(simulation["output_dir"]).joinpath("summary.json").exists()
    assert Path(design["output_dir"]).joinpath("variants.csv").exists()
    stored = {run.run_type: run.output_dir for run in persistence.list_design_runs()}
    assert stored == {"simulation": simulation["output_dir"], "design": design["output_dir"]}
