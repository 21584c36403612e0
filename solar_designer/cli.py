from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Sequence

from .application import DesignApplication
from .config import get_results_root
from .db.session import init_db
from .errors import InfeasibleDesignError, ValidationError
from .logging_setup import setup_logging
from .persistence import PersistenceService
from .result_builder import ResultBuilder

EXIT_INPUT_ERROR = 2
EXAMPLES_DIR = Path(__file__).resolve().parent / "examples"
DEFAULT_INPUTS = {
    "simulate": EXAMPLES_DIR / "simulation_san_francisco.json",
    "design": EXAMPLES_DIR / "design_san_francisco.json",
}


def build_argument_parser() -> argparse.ArgumentParser:
    """
    Build the CLI argument parser used by entry points.

    Returns:
        Configured argparse.ArgumentParser instance.
    """
    parser = argparse.ArgumentParser(
        prog="solar-designer",
        description="Residential PV production simulation and system design",
    )
    parser.add_argument("--log-level", default=None, help="Logging level (default from environment or INFO)")
    parser.add_argument("--json-logs", action="store_true", help="Emit log records as JSON lines")
    sub = parser.add_subparsers(dest="command")

    simulate = sub.add_parser("simulate", help="Simulate the production of one system")
    simulate.add_argument("--input", default=None, help="JSON file with location, system and weather")
    design = sub.add_parser("design", help="Design the best system for a customer")
    design.add_argument("--input", default=None, help="JSON file with requirements and weather")
    for run_parser in (simulate, design):
        run_parser.add_argument(
            "--no-save",
            action="store_true",
            help="Do not write CSV/JSON/chart outputs",
        )
        run_parser.add_argument(
            "--output-root",
            default=None,
            help="Directory for exported outputs (default SOLAR_DESIGNER_RESULTS_DIR or ./results)",
        )

    catalog = sub.add_parser("catalog", help="Manage the equipment catalog in the database")
    catalog_sub = catalog.add_subparsers(dest="catalog_command")
    catalog_list = catalog_sub.add_parser("list", help="List stored equipment")
    catalog_list.add_argument(
        "--kind",
        choices=["all", "panels", "inverters", "batteries"],
        default="all",
        help="Filter by equipment kind",
    )
    catalog_sub.add_parser("seed", help="Store the built-in equipment catalog")

    runs = sub.add_parser("runs", help="List recent simulation and design runs")
    runs.add_argument("--limit", type=int, default=20)
    runs.add_argument("--type", choices=["simulation", "design"], default=None, dest="run_type")

    return parser


def _load_json_file(path: str | Path) -> dict[str, Any]:
    file_path = Path(path)
    if not file_path.exists():
        raise SystemExit(f"File not found: {file_path}")
    try:
        return json.loads(file_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise SystemExit(f"Invalid JSON file ({file_path}): {exc}") from exc


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, default=str, ensure_ascii=False))


def _equipment_listing(persistence: PersistenceService, kind: str) -> dict[str, Any]:
    kinds = ["panels", "inverters", "batteries"] if kind == "all" else [kind]
    payload: dict[str, Any] = {}
    if "panels" in kinds:
        payload["panels"] = [
            {
                "id": panel.catalog_id,
                "name": f"{panel.manufacturer} {panel.model}",
                "panel_type": panel.panel_type,
                "wattage": panel.wattage,
                "efficiency": panel.efficiency,
                "availability": panel.availability,
            }
            for panel in persistence.list_panels()
        ]
    if "inverters" in kinds:
        payload["inverters"] = [
            {
                "id": inv.catalog_id,
                "name": f"{inv.manufacturer} {inv.model}",
                "inverter_type": inv.inverter_type,
                "capacity_w": inv.capacity_w,
                "cec_efficiency": inv.cec_efficiency,
                "availability": inv.availability,
            }
            for inv in persistence.list_inverters()
        ]
    if "batteries" in kinds:
        payload["batteries"] = [
            {
                "id": battery.catalog_id,
                "name": f"{battery.manufacturer} {battery.model}",
                "capacity_kwh": battery.capacity_kwh,
                "availability": battery.availability,
            }
            for battery in persistence.list_batteries()
        ]
    return payload


def main(argv: Sequence[str] | None = None) -> None:
    """
    CLI entry point.

    Input errors (malformed payloads, infeasible designs) are reported on
    stderr and end the process with exit status 2.

    Args:
        argv: Optional sequence of CLI args (defaults to sys.argv).
    """
    parser = build_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return

    setup_logging(args.log_level, json_format=args.json_logs)
    init_db()
    persistence = PersistenceService()

    if args.command in ("simulate", "design"):
        save_outputs = not args.no_save
        output_root = Path(args.output_root) if args.output_root else get_results_root()
        app = DesignApplication(
            persistence=persistence,
            result_builder=ResultBuilder(output_root) if save_outputs else None,
            save_outputs=save_outputs,
        )
        payload = _load_json_file(args.input or DEFAULT_INPUTS[args.command])
        try:
            if args.command == "simulate":
                summary = app.run_simulation(payload)
            else:
                summary = app.run_design(payload)
        except (ValidationError, InfeasibleDesignError) as exc:
            print(json.dumps(exc.to_dict(), indent=2), file=sys.stderr)
            raise SystemExit(EXIT_INPUT_ERROR) from exc
        _print_json(summary)
        return

    if args.command == "catalog":
        if not args.catalog_command:
            parser.error("Specify a catalog subcommand (list/seed).")
        if args.catalog_command == "list":
            _print_json(_equipment_listing(persistence, args.kind))
            return
        if args.catalog_command == "seed":
            _print_json(persistence.seed_default_catalog())
            return
        parser.error(f"Unknown catalog subcommand: {args.catalog_command}")

    if args.command == "runs":
        _print_json(
            [
                {
                    "id": run.id,
                    "run_type": run.run_type,
                    "label": run.label,
                    "created_at": run.created_at,
                    "summary": run.summary,
                    "output_dir": run.output_dir,
                }
                for run in persistence.list_design_runs(limit=args.limit, run_type=args.run_type)
            ]
        )
        return

    parser.error(f"Unknown command: {args.command}")


if __name__ == "__main__":
    main()
