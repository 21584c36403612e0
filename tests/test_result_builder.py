from __future__ import annotations

import json

import pandas as pd
import pytest

from solar_designer.design.optimizer import SystemDesigner
from solar_designer.design.requirements import requirements_from_dict
from solar_designer.result_builder import ResultBuilder, _slugify
from solar_designer.simulation.models import weather_from_records
from solar_designer.simulation.production import ProductionSimulator


def test_slugify():
    assert _slugify(" SF home / 10kW ") == "SF_home___10kW"
    assert _slugify("***") == ""


def test_build_simulation_outputs(tmp_path, san_francisco, reference_spec, weather):
    """Ensure a simulation run writes its CSV, summaries and chart."""
    result = ProductionSimulator().simulate(san_francisco, reference_spec, weather, include_financial=True)
    builder = ResultBuilder(output_root=tmp_path)

    run_dir = builder.build_simulation_outputs(result, "sf 10kW")

    assert run_dir.parent == tmp_path
    assert run_dir.name.endswith("_sf_10kW")
    for name in ("monthly_production.csv", "summary.txt", "summary.json", "monthly_production.png"):
        assert (run_dir / name).exists()

    df = pd.read_csv(run_dir / "monthly_production.csv")
    assert len(df) == 12
    summary = json.loads((run_dir / "summary.json").read_text(encoding="utf-8"))
    assert summary["annual_production"] == pytest.approx(result.annual_production)
    text = (run_dir / "summary.txt").read_text(encoding="utf-8")
    assert "== Economics ==" in text


def test_build_design_outputs(tmp_path, design_payload):
    """Ensure a design run writes the variant table and best-design details."""
    design = SystemDesigner().design(
        requirements_from_dict(design_payload), weather_from_records(design_payload["weather"])
    )
    builder = ResultBuilder(output_root=tmp_path)

    run_dir = builder.build_design_outputs(design, "sf-home")

    variants = pd.read_csv(run_dir / "variants.csv")
    assert list(variants["rank"]) == [1, 2, 3, 4]
    assert variants.loc[0, "design_id"] == design.design_id
    assert (run_dir / "scores.png").exists()
    assert (run_dir / "design.json").exists()
    best_dir = run_dir / "best_design"
    for name in ("monthly_production.csv", "summary.txt", "monthly_production.png"):
        assert (best_dir / name).exists()
