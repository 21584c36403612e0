"""
Design optimizer: enumerate, simulate, score and rank PV system variants.

:class:`SystemDesigner` is the entry point. For every requested (or every
known) panel technology and inverter topology it picks equipment from the
catalog, sizes the array for the customer's offset goal, runs the production
simulator and scores the result. The highest-scoring variant becomes the
design, the next three are returned as alternatives.
"""

from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass, field
from itertools import product
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..errors import InfeasibleDesignError
from ..simulation.financial import FinancialOptions
from ..simulation.models import (
    InverterType,
    ModuleType,
    ProductionResult,
    SystemSpecification,
    TrackingType,
    WeatherMonth,
)
from ..simulation.production import ProductionSimulator, validate_weather
from .catalog import (
    Availability,
    BatteryOption,
    EquipmentCatalog,
    InverterOption,
    PanelOption,
    default_catalog,
)
from .financing import FinancingOption, cash_option, loan_option
from .layout import RoofLayout, plan_roof_layout
from .requirements import DesignRequirements, RoofConstraints
from .scoring import DesignScore, score_variant

logger = logging.getLogger(__name__)

ASSUMED_YIELD_KWH_PER_KW = 1400.0
MIN_SYSTEM_SIZE_KW = 1.0
INVERTER_SIZING_RATIO = 0.9
INVERTER_SIZING_TOLERANCE = 0.2
BATTERY_DAYS_OF_USAGE = 1.5
BATTERY_MATCH_RATIO = 0.8
BASE_SYSTEM_LOSSES_PCT = 14.0
MAX_SYSTEM_LOSSES_PCT = 25.0
INSTALLATION_MARKUP = 0.3
DEFAULT_ELECTRICITY_RATE = 0.12
DESIGN_LIFETIME_YEARS = 25
ALTERNATIVE_COUNT = 3


def target_system_size(annual_usage_kwh: float, offset_percentage: float) -> float:
    """DC size (kW) needed to offset ``offset_percentage`` of the usage."""
    target_production = annual_usage_kwh * offset_percentage / 100.0
    return max(MIN_SYSTEM_SIZE_KW, target_production / ASSUMED_YIELD_KWH_PER_KW)


def select_panel(
    panels: Sequence[PanelOption],
    prioritize_efficiency: bool = False,
    prioritize_cost: bool = False,
) -> PanelOption:
    """Highest efficiency, lowest $/W, or best efficiency per $/W (default)."""
    if prioritize_efficiency:
        return max(panels, key=lambda p: p.efficiency)
    if prioritize_cost:
        return min(panels, key=lambda p: p.price_per_watt)
    return max(panels, key=lambda p: p.value_ratio)


def select_inverter(
    inverters: Sequence[InverterOption],
    system_size_kw: float,
    inverter_type: InverterType,
) -> InverterOption:
    """
    Micro-inverters: best CEC efficiency. Central units: best CEC efficiency
    among those within ±20 % of 90 % of the DC rating, otherwise the unit
    whose capacity is closest to that target.
    """
    if inverter_type == InverterType.MICRO:
        return max(inverters, key=lambda inv: inv.cec_efficiency)

    target_w = system_size_kw * 1000.0 * INVERTER_SIZING_RATIO
    low = target_w * (1.0 - INVERTER_SIZING_TOLERANCE)
    high = target_w * (1.0 + INVERTER_SIZING_TOLERANCE)
    suitable = [inv for inv in inverters if low <= inv.capacity_w <= high]
    if suitable:
        return max(suitable, key=lambda inv: inv.cec_efficiency)
    return min(inverters, key=lambda inv: abs(inv.capacity_w - target_w))


def select_battery(
    batteries: Sequence[BatteryOption],
    target_kwh: float,
) -> Tuple[BatteryOption, int]:
    """First unit covering 80 % of the target (or the first unit) and a count."""
    chosen = next(
        (b for b in batteries if b.capacity_kwh >= target_kwh * BATTERY_MATCH_RATIO),
        batteries[0],
    )
    return chosen, max(1, math.ceil(target_kwh / chosen.capacity_kwh))


def inverter_cost(inverter: InverterOption, system_size_kw: float) -> float:
    """Micro-inverters are bought per unit, central units per DC watt."""
    system_w = system_size_kw * 1000.0
    if inverter.inverter_type == InverterType.MICRO:
        units = math.ceil(system_w / inverter.capacity_w)
        return units * inverter.capacity_w * inverter.price_per_watt
    return system_w * inverter.price_per_watt


def inverter_quantity(inverter: InverterOption, panel_count: int, system_size_kw: float) -> int:
    if inverter.inverter_type == InverterType.MICRO:
        return panel_count
    if inverter.inverter_type == InverterType.STRING:
        return math.ceil(system_size_kw / (inverter.capacity_w / 1000.0))
    return 1


def system_losses(roof: Optional[RoofConstraints]) -> float:
    shading = roof.shading_factor if roof is not None and roof.shading_factor else 0.0
    return min(MAX_SYSTEM_LOSSES_PCT, BASE_SYSTEM_LOSSES_PCT + shading)


@dataclass(frozen=True)
class PanelSelection:
    panel: PanelOption
    quantity: int
    total_wattage: float
    cost: float


@dataclass(frozen=True)
class InverterSelection:
    inverter: InverterOption
    quantity: int
    total_capacity: float
    cost: float


@dataclass(frozen=True)
class BatterySelection:
    battery: BatteryOption
    quantity: int
    total_capacity: float
    cost: float


@dataclass(frozen=True)
class DesignComponents:
    panels: PanelSelection
    inverter: InverterSelection
    battery: Optional[BatterySelection] = None

    @property
    def equipment_cost(self) -> float:
        battery = self.battery.cost if self.battery is not None else 0.0
        return self.panels.cost + self.inverter.cost + battery

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "panels": {
                "panel": self.panels.panel.to_dict(),
                "quantity": self.panels.quantity,
                "total_wattage": self.panels.total_wattage,
                "cost": self.panels.cost,
            },
            "inverter": {
                "inverter": self.inverter.inverter.to_dict(),
                "quantity": self.inverter.quantity,
                "total_capacity": self.inverter.total_capacity,
                "cost": self.inverter.cost,
            },
            "battery": None,
        }
        if self.battery is not None:
            data["battery"] = {
                "battery": self.battery.battery.to_dict(),
                "quantity": self.battery.quantity,
                "total_capacity": self.battery.total_capacity,
                "cost": self.battery.cost,
            }
        return data


@dataclass(frozen=True)
class EnergyAnalysis:
    annual_generation: float
    annual_consumption: float
    offset_percentage: float
    excess_generation: float
    grid_purchases: float
    battery_utilization: Optional[float] = None


@dataclass(frozen=True)
class Economics:
    system_cost: float
    incentives: float
    net_cost: float


@dataclass(frozen=True)
class DesignVariant:
    """
    One evaluated equipment combination.

    ``economics.system_cost`` includes the installation markup;
    incentives and net cost follow the simulator's financial analysis.
    """

    design_id: str
    system_specs: SystemSpecification
    components: DesignComponents
    performance: ProductionResult
    economics: Economics
    energy_analysis: EnergyAnalysis
    score: DesignScore

    def describe(self) -> str:
        battery = self.components.battery
        battery_desc = f"{battery.quantity}x{battery.battery.name}" if battery else "no battery"
        return (
            f"{self.components.panels.quantity}x{self.components.panels.panel.name} "
            f"({self.system_specs.dc_capacity_kw:.2f} kW) | "
            f"{self.components.inverter.quantity}x{self.components.inverter.inverter.name} | "
            f"{battery_desc}"
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "design_id": self.design_id,
            "system_specs": self.system_specs.to_dict(),
            "components": self.components.to_dict(),
            "performance": self.performance.to_dict(),
            "economics": asdict(self.economics),
            "energy_analysis": asdict(self.energy_analysis),
            "score": asdict(self.score),
        }


@dataclass(frozen=True)
class DesignResult:
    """
    Winning variant plus roof layout, financing and ranked alternatives.

    Attribute access for the variant's parts is forwarded, so
    ``result.energy_analysis.offset_percentage`` works as on a variant.
    """

    best: DesignVariant
    alternative_designs: Tuple[DesignVariant, ...] = ()
    roof_layout: Optional[RoofLayout] = None
    financing_options: Tuple[FinancingOption, ...] = field(default_factory=tuple)
    variants_evaluated: int = 0

    @property
    def design_id(self) -> str:
        return self.best.design_id

    @property
    def system_specs(self) -> SystemSpecification:
        return self.best.system_specs

    @property
    def components(self) -> DesignComponents:
        return self.best.components

    @property
    def performance(self) -> ProductionResult:
        return self.best.performance

    @property
    def economics(self) -> Economics:
        return self.best.economics

    @property
    def energy_analysis(self) -> EnergyAnalysis:
        return self.best.energy_analysis

    @property
    def score(self) -> DesignScore:
        return self.best.score

    def to_dict(self) -> Dict[str, Any]:
        data = self.best.to_dict()
        data["economics"]["financing_options"] = [asdict(option) for option in self.financing_options]
        data["roof_layout"] = asdict(self.roof_layout) if self.roof_layout is not None else None
        data["alternative_designs"] = [variant.to_dict() for variant in self.alternative_designs]
        data["variants_evaluated"] = self.variants_evaluated
        return data


class SystemDesigner:
    """
    Stateless design service.

    Args:
        catalog: Equipment source; the built-in catalog when omitted. It is
            only read, so one instance may back concurrent design calls.
        simulator: Production simulator; a fresh one when omitted.

    Example:
        ```python
        designer = SystemDesigner()
        result = designer.design(requirements, weather)
        print(result.design_id, result.score.overall)
        for alt in result.alternative_designs:
            print(alt.describe())
        ```
    """

    def __init__(
        self,
        catalog: Optional[EquipmentCatalog] = None,
        simulator: Optional[ProductionSimulator] = None,
    ) -> None:
        self.catalog = catalog if catalog is not None else default_catalog()
        self.simulator = simulator or ProductionSimulator()

    def _combinations(self, requirements: DesignRequirements) -> List[Tuple[ModuleType, InverterType]]:
        prefs = requirements.preferences
        panel_types = [prefs.panel_type] if prefs.panel_type else list(ModuleType)
        inverter_types = [prefs.inverter_type] if prefs.inverter_type else list(InverterType)
        return list(product(panel_types, inverter_types))

    def _build_specification(
        self,
        requirements: DesignRequirements,
        panel: PanelOption,
        inverter: InverterOption,
        system_size_kw: float,
    ) -> SystemSpecification:
        roof = requirements.preferences.roof_constraints
        tilt = roof.tilt_angle if roof is not None and roof.tilt_angle is not None else None
        azimuth = roof.azimuth_angle if roof is not None and roof.azimuth_angle is not None else None
        return SystemSpecification(
            dc_capacity_kw=system_size_kw,
            module_efficiency_pct=panel.efficiency,
            inverter_efficiency_pct=inverter.cec_efficiency,
            system_losses_pct=system_losses(roof),
            tilt_deg=tilt if tilt is not None else abs(requirements.location.latitude),
            azimuth_deg=azimuth if azimuth is not None else 180.0,
            module_type=panel.panel_type,
            tracking_type=TrackingType.FIXED,
            inverter_type=inverter.inverter_type,
        )

    def _financial_options(
        self,
        requirements: DesignRequirements,
        total_cost: float,
        system_size_kw: float,
    ) -> FinancialOptions:
        rates = requirements.utility_rates
        return FinancialOptions(
            electricity_rate=rates.energy_rate if rates is not None else DEFAULT_ELECTRICITY_RATE,
            net_metering_rate=rates.net_metering_rate if rates is not None else None,
            system_lifetime=DESIGN_LIFETIME_YEARS,
            cost_per_watt=total_cost / (system_size_kw * 1000.0),
        )

    def _battery_for(self, requirements: DesignRequirements) -> Optional[BatterySelection]:
        prefs = requirements.preferences
        if not prefs.include_storage:
            return None
        batteries = self.catalog.get_batteries(availability=Availability.IN_STOCK.value)
        if not batteries:
            logger.debug("Storage requested but no battery is in stock")
            return None
        daily_usage = requirements.annual_usage / 365.0
        target_kwh = prefs.storage_capacity or daily_usage * BATTERY_DAYS_OF_USAGE
        battery, quantity = select_battery(batteries, target_kwh)
        return BatterySelection(
            battery=battery,
            quantity=quantity,
            total_capacity=quantity * battery.capacity_kwh,
            cost=quantity * battery.capacity_kwh * battery.price_per_kwh,
        )

    def _evaluate_variant(
        self,
        requirements: DesignRequirements,
        weather: Sequence[WeatherMonth],
        target_kw: float,
        panel_type: ModuleType,
        inverter_type: InverterType,
    ) -> Optional[DesignVariant]:
        goals = requirements.goals
        panels = self.catalog.get_panels(
            panel_type=panel_type.value,
            tier=1 if goals.tier1_only else None,
            availability=Availability.IN_STOCK.value,
        )
        inverters = self.catalog.get_inverters(
            inverter_type=inverter_type.value,
            availability=Availability.IN_STOCK.value,
        )
        if not panels or not inverters:
            logger.debug(
                "Skipping %s + %s: %d panels, %d inverters available",
                panel_type.value,
                inverter_type.value,
                len(panels),
                len(inverters),
            )
            return None

        panel = select_panel(panels, goals.prioritize_efficiency, goals.prioritize_cost)
        panel_count = math.ceil(target_kw * 1000.0 / panel.wattage)
        system_size_kw = panel_count * panel.wattage / 1000.0
        inverter = select_inverter(inverters, system_size_kw, inverter_type)
        battery = self._battery_for(requirements)

        components = DesignComponents(
            panels=PanelSelection(
                panel=panel,
                quantity=panel_count,
                total_wattage=panel_count * panel.wattage,
                cost=panel_count * panel.wattage * panel.price_per_watt,
            ),
            inverter=InverterSelection(
                inverter=inverter,
                quantity=inverter_quantity(inverter, panel_count, system_size_kw),
                total_capacity=inverter.capacity_w,
                cost=inverter_cost(inverter, system_size_kw),
            ),
            battery=battery,
        )
        total_cost = components.equipment_cost * (1.0 + INSTALLATION_MARKUP)

        spec = self._build_specification(requirements, panel, inverter, system_size_kw)
        performance = self.simulator.simulate(
            requirements.location,
            spec,
            weather,
            self._financial_options(requirements, total_cost, system_size_kw),
        )
        financial = performance.financial_analysis

        consumption = requirements.annual_usage
        generation = performance.annual_production
        offset = min(100.0, generation / consumption * 100.0)
        battery_utilization = None
        if battery is not None:
            battery_utilization = min(100.0, (consumption / 365.0) / battery.total_capacity * 100.0)

        score = score_variant(
            total_cost=total_cost,
            offset_percentage=offset,
            offset_goal=goals.offset_percentage,
            panel=panel,
            inverter=inverter,
            budget=requirements.budget,
        )
        return DesignVariant(
            design_id=f"{panel_type.value[:4]}-{inverter_type.value}-{round(system_size_kw * 10)}",
            system_specs=spec,
            components=components,
            performance=performance,
            economics=Economics(
                system_cost=total_cost,
                incentives=financial.incentives,
                net_cost=financial.net_cost,
            ),
            energy_analysis=EnergyAnalysis(
                annual_generation=generation,
                annual_consumption=consumption,
                offset_percentage=offset,
                excess_generation=max(0.0, generation - consumption),
                grid_purchases=max(0.0, consumption - generation),
                battery_utilization=battery_utilization,
            ),
            score=score,
        )

    @staticmethod
    def rank(variants: Sequence[DesignVariant], prioritize_cost: bool = False) -> List[DesignVariant]:
        """Overall score descending; ties by net cost or by production."""
        if prioritize_cost:
            return sorted(variants, key=lambda v: (-v.score.overall, v.economics.net_cost))
        return sorted(variants, key=lambda v: (-v.score.overall, -v.performance.annual_production))

    @staticmethod
    def _financing(best: DesignVariant) -> Tuple[FinancingOption, ...]:
        financial = best.performance.financial_analysis
        net_cost = best.economics.net_cost
        return (
            cash_option(
                net_cost=net_cost,
                annual_savings=financial.annual_savings,
                lifetime_savings=financial.total_lifetime_savings,
                payback_years=financial.payback_period,
                lifetime_years=financial.system_lifetime,
            ),
            loan_option(principal=net_cost, annual_savings=financial.annual_savings),
        )

    def design(
        self,
        requirements: DesignRequirements,
        weather: Sequence[WeatherMonth],
    ) -> DesignResult:
        """
        Produce the best design for ``requirements``.

        Raises:
            ValidationError: requirements or weather are malformed.
            InfeasibleDesignError: no equipment combination produced a
                variant. Constraints are never relaxed implicitly.
        """
        requirements.validate()
        validate_weather(weather)

        target_kw = target_system_size(requirements.annual_usage, requirements.goals.offset_percentage)
        combinations = self._combinations(requirements)
        variants: List[DesignVariant] = []
        for panel_type, inverter_type in combinations:
            variant = self._evaluate_variant(requirements, weather, target_kw, panel_type, inverter_type)
            if variant is not None:
                variants.append(variant)

        if not variants:
            attempted = [(p.value, i.value) for p, i in combinations]
            raise InfeasibleDesignError(
                "No equipment combination produced a viable design for panel/inverter types: "
                + ", ".join(f"{p}+{i}" for p, i in attempted),
                attempted,
            )

        ranked = self.rank(variants, requirements.goals.prioritize_cost)
        best = ranked[0]
        roof = requirements.preferences.roof_constraints
        result = DesignResult(
            best=best,
            alternative_designs=tuple(ranked[1 : 1 + ALTERNATIVE_COUNT]),
            roof_layout=(
                plan_roof_layout(best.components.panels.panel, best.components.panels.quantity, roof)
                if roof is not None
                else None
            ),
            financing_options=(
                self._financing(best) if requirements.utility_rates is not None else ()
            ),
            variants_evaluated=len(variants),
        )
        logger.info(
            "Design %s selected from %d variants (target %.2f kW, score %.0f)",
            best.design_id,
            len(variants),
            target_kw,
            best.score.overall,
        )
        return result
