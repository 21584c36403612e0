from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import List

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from .design.optimizer import DesignResult, DesignVariant
from .simulation.models import ProductionResult


def _slugify(value: str) -> str:
    """
    Convert a free-form string into a filesystem-safe slug.

    Args:
        value: Input string.

    Returns:
        Slug containing only alphanumeric characters, dash, or underscore.
    """
    return "".join(c if c.isalnum() or c in ("-", "_") else "_" for c in value.strip()).strip("_")


def _create_run_directory(label: str, output_root: Path) -> Path:
    """
    Create the timestamped directory for one run.
    """
    timestamp = datetime.now().strftime("%y%m%d_%H%M%S")
    slug = _slugify(label) or "run"
    run_dir = output_root / f"{timestamp}_{slug}"
    run_dir.mkdir(parents=True, exist_ok=True)
    return run_dir


def _short_label(value: str, max_len: int = 50) -> str:
    """
    Truncate long labels for plots.
    """
    return value if len(value) <= max_len else value[: max_len - 3] + "..."


def _plot_monthly_production(result: ProductionResult, save_path: Path, title: str) -> None:
    """
    Bar chart of monthly AC production with plane-of-array irradiance on a
    secondary axis.
    """
    df = result.monthly_frame()
    fig, ax = plt.subplots(figsize=(10, 5))
    ax.bar(df["month_name"].str[:3], df["production_kwh"], color="tab:orange", label="Production")
    ax.set_xlabel("Month")
    ax.set_ylabel("AC production [kWh]")
    ax.set_title(title)
    ax.grid(True, axis="y", alpha=0.3)

    ax2 = ax.twinx()
    ax2.plot(df["month_name"].str[:3], df["poa_irradiance"], color="tab:blue", marker="o", label="POA")
    ax2.set_ylabel("POA irradiance [kWh/m²/day]")

    fig.tight_layout()
    fig.savefig(save_path, dpi=300)
    plt.close(fig)


def _plot_score_comparison(variants: List[DesignVariant], save_path: Path) -> None:
    """
    Grouped bars of the four score axes for every ranked variant.
    """
    if not variants:
        return
    axes = ["cost", "performance", "aesthetics", "reliability"]
    x = np.arange(len(variants))
    width = 0.2
    fig, ax = plt.subplots(figsize=(10, 5))
    for offset, axis in enumerate(axes):
        values = [getattr(v.score, axis) for v in variants]
        ax.bar(x + (offset - 1.5) * width, values, width, label=axis)
    ax.plot(x, [v.score.overall for v in variants], color="black", marker="D", label="overall")
    ax.set_xticks(x)
    ax.set_xticklabels([_short_label(v.design_id, 24) for v in variants], rotation=20)
    ax.set_ylim(0, 105)
    ax.set_ylabel("Score")
    ax.set_title("Design variant scores")
    ax.grid(True, axis="y", alpha=0.3)
    ax.legend(fontsize=8, loc="best")
    fig.tight_layout()
    fig.savefig(save_path, dpi=300)
    plt.close(fig)


def _save_variant_summary(variants: List[DesignVariant], save_path: Path) -> None:
    """
    Save CSV summary of the ranked variants.
    """
    rows = []
    for rank, variant in enumerate(variants, start=1):
        rows.append(
            {
                "rank": rank,
                "design_id": variant.design_id,
                "description": variant.describe(),
                "dc_capacity_kw": round(variant.system_specs.dc_capacity_kw, 3),
                "annual_production_kwh": round(variant.performance.annual_production, 1),
                "offset_pct": round(variant.energy_analysis.offset_percentage, 1),
                "system_cost_usd": round(variant.economics.system_cost, 2),
                "net_cost_usd": round(variant.economics.net_cost, 2),
                "score_overall": variant.score.overall,
                "score_cost": variant.score.cost,
                "score_performance": variant.score.performance,
                "score_aesthetics": variant.score.aesthetics,
                "score_reliability": variant.score.reliability,
            }
        )
    pd.DataFrame(rows).to_csv(save_path, index=False)


def _write_summary_txt(path: Path, result: ProductionResult, heading: str) -> None:
    """
    Write the human-readable summary of a production result.
    """
    lines = [heading, ""]
    lines.append("== Production ==")
    lines.append(f"Annual production: {result.annual_production:.0f} kWh")
    lines.append(f"Capacity factor: {result.capacity_factor:.1f} %")
    lines.append(f"Specific yield: {result.specific_yield:.0f} kWh/kW/yr")
    lines.append(f"Performance ratio: {result.performance_ratio:.2f}")
    lines.append(f"Peak sun hours (GHI): {result.peak_sun_hours:.2f} h/day")
    lines.append(f"CO2 savings: {result.co2_savings:.0f} kg/yr")
    financial = result.financial_analysis
    if financial is not None:
        lines.append("")
        lines.append("== Economics ==")
        lines.append(f"System cost: {financial.system_cost:.2f} USD")
        lines.append(f"Incentives: {financial.incentives:.2f} USD")
        lines.append(f"Net cost: {financial.net_cost:.2f} USD")
        lines.append(f"Annual savings: {financial.annual_savings:.2f} USD")
        lines.append(f"Payback: {financial.payback_period:.1f} years")
        lines.append(f"NPV: {financial.npv:.2f} USD")
        lines.append(f"ROI: {financial.roi:.1f} %")
        lines.append(f"LCOE: {financial.lcoe:.4f} USD/kWh")
        lines.append(
            f"Lifetime savings ({financial.system_lifetime} years): "
            f"{financial.total_lifetime_savings:.2f} USD"
        )
    path.write_text("\n".join(lines), encoding="utf-8")


class ResultBuilder:
    """
    Write CSV, text, JSON and chart deliverables for simulation and design
    runs.
    """

    def __init__(self, output_root: str | Path = "results") -> None:
        """
        Args:
            output_root: Base directory for generated assets.
        """
        self.output_root = Path(output_root)

    def build_simulation_outputs(self, result: ProductionResult, label: str) -> Path:
        """
        Save monthly CSV, summary and production chart for one simulation.

        Returns:
            The run directory.
        """
        run_dir = _create_run_directory(label, self.output_root)
        result.monthly_frame().to_csv(run_dir / "monthly_production.csv", index=False)
        _write_summary_txt(run_dir / "summary.txt", result, f"Simulation: {label}")
        (run_dir / "summary.json").write_text(
            json.dumps(result.to_dict(), indent=2, default=str), encoding="utf-8"
        )
        _plot_monthly_production(result, run_dir / "monthly_production.png", label)
        return run_dir

    def build_design_outputs(self, design: DesignResult, label: str) -> Path:
        """
        Save the ranked variant table, score chart and best-design details.

        Returns:
            The run directory.
        """
        run_dir = _create_run_directory(label, self.output_root)
        ranked = [design.best, *design.alternative_designs]
        _save_variant_summary(ranked, run_dir / "variants.csv")
        _plot_score_comparison(ranked, run_dir / "scores.png")

        best_dir = run_dir / "best_design"
        best_dir.mkdir(parents=True, exist_ok=True)
        design.performance.monthly_frame().to_csv(best_dir / "monthly_production.csv", index=False)
        _write_summary_txt(
            best_dir / "summary.txt",
            design.performance,
            f"Design {design.design_id}: {design.best.describe()}",
        )
        _plot_monthly_production(design.performance, best_dir / "monthly_production.png", design.design_id)
        (run_dir / "design.json").write_text(
            json.dumps(design.to_dict(), indent=2, default=str), encoding="utf-8"
        )
        return run_dir
