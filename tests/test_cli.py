from __future__ import annotations

import json
from pathlib import Path

import pytest

from solar_designer import cli
from solar_designer.design.catalog import DEFAULT_PANELS


@pytest.fixture()
def run_cli(monkeypatch, persistence):
    """Run ``cli.main`` against the in-memory database."""
    monkeypatch.setattr(cli, "init_db", lambda: None)
    monkeypatch.setattr(cli, "PersistenceService", lambda: persistence)
    monkeypatch.setattr(cli, "setup_logging", lambda *args, **kwargs: None)
    return cli.main


def test_bundled_examples_exist():
    for path in cli.DEFAULT_INPUTS.values():
        assert path.exists()


def test_simulate_bundled_example(run_cli, persistence, capsys):
    run_cli(["simulate", "--no-save"])
    data = json.loads(capsys.readouterr().out)

    assert len(data["monthly_production"]) == 12
    assert data["annual_production"] > 0
    assert data["output_dir"] is None
    assert len(persistence.list_design_runs(run_type="simulation")) == 1


def test_design_from_input_file(run_cli, tmp_path, design_payload, capsys):
    input_path = tmp_path / "design.json"
    input_path.write_text(json.dumps(design_payload), encoding="utf-8")

    run_cli(["design", "--input", str(input_path), "--no-save"])
    data = json.loads(capsys.readouterr().out)

    assert data["label"] == "sf-home"
    assert data["variants_evaluated"] == 9


def test_design_writes_outputs(run_cli, tmp_path, capsys):
    run_cli(["design", "--output-root", str(tmp_path)])
    data = json.loads(capsys.readouterr().out)

    output_dir = Path(data["output_dir"])
    assert output_dir.parent == tmp_path
    assert (output_dir / "design.json").exists()


def test_invalid_input_exits_with_status_2(run_cli, tmp_path, simulation_payload, capsys):
    """Validation failures are reported as JSON on stderr."""
    payload = dict(simulation_payload, system={**simulation_payload["system"], "tilt_deg": 120.0})
    input_path = tmp_path / "bad.json"
    input_path.write_text(json.dumps(payload), encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        run_cli(["simulate", "--input", str(input_path), "--no-save"])
    assert excinfo.value.code == cli.EXIT_INPUT_ERROR
    error = json.loads(capsys.readouterr().err)
    assert error["field"] == "tilt_deg"


def test_missing_input_file(run_cli, tmp_path):
    with pytest.raises(SystemExit, match="File not found"):
        run_cli(["simulate", "--input", str(tmp_path / "missing.json")])


def test_catalog_seed_and_list(run_cli, capsys):
    run_cli(["catalog", "seed"])
    counts = json.loads(capsys.readouterr().out)
    assert counts["panels"] == len(DEFAULT_PANELS)

    run_cli(["catalog", "list", "--kind", "panels"])
    listing = json.loads(capsys.readouterr().out)
    assert list(listing) == ["panels"]
    assert {row["id"] for row in listing["panels"]} == {p.id for p in DEFAULT_PANELS}


def test_runs_listing(run_cli, persistence, capsys):
    persistence.record_design_run("design", "stored-design", {}, {"score": 80})

    run_cli(["runs", "--type", "design"])
    runs = json.loads(capsys.readouterr().out)
    assert [run["label"] for run in runs] == ["stored-design"]
