"""Four-axis scoring of design variants."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .catalog import InverterOption, PanelOption
from .requirements import Budget

WEIGHTS = {"cost": 0.3, "performance": 0.4, "aesthetics": 0.1, "reliability": 0.2}
UNBUDGETED_HEADROOM = 1.5


@dataclass(frozen=True)
class DesignScore:
    """Scores rounded to whole points on a 0-100 scale."""

    overall: float
    cost: float
    performance: float
    aesthetics: float
    reliability: float


def _clamp(value: float) -> float:
    return max(0.0, min(100.0, value))


def reliability_score(panel: PanelOption, inverter: InverterOption) -> float:
    """
    Points for manufacturer tier, long warranties and inverter efficiency.

    Panel: tier 1 = 40, tier 2 = 30, otherwise 20; performance warranty of
    25 years or more adds 20 (else 10). Inverter: warranty >= 20 years adds
    20, >= 10 adds 15, otherwise 10; CEC efficiency >= 97 % adds 10 (else 5).
    """
    tier_points = {1: 40.0, 2: 30.0}.get(panel.tier, 20.0)
    panel_points = tier_points + (20.0 if panel.performance_warranty_years >= 25 else 10.0)

    if inverter.warranty_years >= 20:
        warranty_points = 20.0
    elif inverter.warranty_years >= 10:
        warranty_points = 15.0
    else:
        warranty_points = 10.0
    efficiency_points = 10.0 if inverter.cec_efficiency >= 97.0 else 5.0

    return min(100.0, panel_points + warranty_points + efficiency_points)


def score_variant(
    *,
    total_cost: float,
    offset_percentage: float,
    offset_goal: float,
    panel: PanelOption,
    inverter: InverterOption,
    budget: Optional[Budget] = None,
) -> DesignScore:
    """
    Score one variant.

    The cost axis compares the installed cost with the maximum budget, or
    with 1.5x the cost itself when the customer gave no budget.
    """
    max_budget = budget.max if budget is not None and budget.max else total_cost * UNBUDGETED_HEADROOM
    cost = _clamp(100.0 - total_cost / max_budget * 100.0) if max_budget > 0 else 0.0
    performance = _clamp(offset_percentage / offset_goal * 100.0)
    aesthetics = _clamp(panel.efficiency * 2.0)
    reliability = reliability_score(panel, inverter)

    overall = round(
        WEIGHTS["cost"] * cost
        + WEIGHTS["performance"] * performance
        + WEIGHTS["aesthetics"] * aesthetics
        + WEIGHTS["reliability"] * reliability
    )
    return DesignScore(
        overall=float(overall),
        cost=float(round(cost)),
        performance=float(round(performance)),
        aesthetics=float(round(aesthetics)),
        reliability=float(round(reliability)),
    )
