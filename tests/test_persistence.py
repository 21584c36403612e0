from __future__ import annotations

import pytest

from solar_designer.design.catalog import DEFAULT_BATTERIES, DEFAULT_INVERTERS, DEFAULT_PANELS
from solar_designer.persistence import PersistenceService


def test_upsert_panel_inserts_then_updates(persistence: PersistenceService):
    """Upserts are keyed on the catalog id."""
    panel = DEFAULT_PANELS[0].to_dict()
    first = persistence.upsert_panel(panel)
    assert first.id is not None
    assert first.created_at is not None

    second = persistence.upsert_panel({**panel, "price_per_watt": 0.40})
    assert second.id == first.id
    stored = persistence.list_panels()
    assert len(stored) == 1
    assert stored[0].specs["price_per_watt"] == 0.40


def test_upsert_accepts_option_records(persistence: PersistenceService):
    inverter = persistence.upsert_inverter(DEFAULT_INVERTERS[0])
    battery = persistence.upsert_battery(DEFAULT_BATTERIES[1])

    assert inverter.inverter_type == "power-optimizer"
    assert battery.capacity_kwh == DEFAULT_BATTERIES[1].capacity_kwh
    assert persistence.upsert_panel(None) is None


def test_upsert_rejects_unknown_enum(persistence: PersistenceService):
    with pytest.raises(ValueError):
        persistence.upsert_panel({**DEFAULT_PANELS[0].to_dict(), "panel_type": "perovskite"})
    assert persistence.list_panels() == []


def test_seed_and_load_catalog(persistence: PersistenceService):
    counts = persistence.seed_default_catalog()
    assert counts == {
        "panels": len(DEFAULT_PANELS),
        "inverters": len(DEFAULT_INVERTERS),
        "batteries": len(DEFAULT_BATTERIES),
    }

    # Seeding twice does not duplicate rows
    assert persistence.seed_default_catalog() == counts

    catalog = persistence.load_catalog()
    assert {p.id for p in catalog.panels} == {p.id for p in DEFAULT_PANELS}
    assert set(catalog.inverters) == set(DEFAULT_INVERTERS)
    assert set(catalog.batteries) == set(DEFAULT_BATTERIES)


def test_delete_equipment(persistence: PersistenceService):
    persistence.seed_default_catalog()

    assert persistence.delete_equipment("batteries", "lg-resu10h") is True
    assert persistence.delete_equipment("batteries", "lg-resu10h") is False
    assert persistence.count_equipment()["batteries"] == len(DEFAULT_BATTERIES) - 1
    with pytest.raises(KeyError):
        persistence.delete_equipment("cables", "x")


def test_design_runs_newest_first(persistence: PersistenceService):
    """Verify runs can be stored, filtered and retrieved."""
    persistence.record_design_run("simulation", "sim-a", {"a": 1}, {"annual_production_kwh": 1.0})
    persistence.record_design_run(
        "design", "design-b", {"b": 2}, {"score": 70}, output_dir="results/b", notes="first design"
    )
    persistence.record_design_run("simulation", "sim-c", {"c": 3}, {"annual_production_kwh": 3.0})

    runs = persistence.list_design_runs()
    assert [run.label for run in runs] == ["sim-c", "design-b", "sim-a"]

    designs = persistence.list_design_runs(run_type="design")
    assert len(designs) == 1
    assert designs[0].summary["score"] == 70
    assert designs[0].output_dir == "results/b"
    assert designs[0].notes == "first design"

    assert len(persistence.list_design_runs(limit=2)) == 2
