"""
Data model for the production simulator.

Inputs (:class:`Location`, :class:`SystemSpecification`, :class:`WeatherMonth`)
are immutable records supplied by the caller. Outputs
(:class:`ProductionResult` and its parts) are created once per simulation and
never mutated afterwards.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

import pandas as pd


class ModuleType(str, Enum):
    MONOCRYSTALLINE = "monocrystalline"
    POLYCRYSTALLINE = "polycrystalline"
    THIN_FILM = "thin-film"


class TrackingType(str, Enum):
    FIXED = "fixed"
    SINGLE_AXIS = "single-axis"
    DUAL_AXIS = "dual-axis"


class InverterType(str, Enum):
    STRING = "string"
    POWER_OPTIMIZER = "power-optimizer"
    MICRO = "micro"


@dataclass(frozen=True)
class Location:
    """Geographic site of the installation (degrees, metres)."""

    latitude: float
    longitude: float
    elevation: Optional[float] = None
    timezone: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Location":
        return cls(
            latitude=float(data["latitude"]),
            longitude=float(data["longitude"]),
            elevation=data.get("elevation"),
            timezone=data.get("timezone"),
        )


@dataclass(frozen=True)
class SystemSpecification:
    """
    Physical description of a candidate PV system.

    Attributes:
        dc_capacity_kw: Installed DC nameplate capacity (kW, > 0).
        module_efficiency_pct: Module efficiency (%, 0-50).
        inverter_efficiency_pct: Inverter efficiency (%, 0-100).
        system_losses_pct: User-declared losses such as shading (%, 0-100).
        tilt_deg: Panel tilt from horizontal (0-90).
        azimuth_deg: Panel azimuth, 180 = true south (0-360).
        module_type: Cell technology, drives the temperature coefficient.
        tracking_type: Mounting; only informational for the noon model.
        inverter_type: Inverter topology.

    Bounds are enforced by the simulator, which rejects out-of-range values
    instead of clamping them.
    """

    dc_capacity_kw: float
    module_efficiency_pct: float
    inverter_efficiency_pct: float
    system_losses_pct: float
    tilt_deg: float
    azimuth_deg: float
    module_type: ModuleType = ModuleType.MONOCRYSTALLINE
    tracking_type: TrackingType = TrackingType.FIXED
    inverter_type: InverterType = InverterType.STRING

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SystemSpecification":
        return cls(
            dc_capacity_kw=float(data["dc_capacity_kw"]),
            module_efficiency_pct=float(data["module_efficiency_pct"]),
            inverter_efficiency_pct=float(data.get("inverter_efficiency_pct", 96.0)),
            system_losses_pct=float(data.get("system_losses_pct", 14.0)),
            tilt_deg=float(data.get("tilt_deg", 30.0)),
            azimuth_deg=float(data.get("azimuth_deg", 180.0)),
            module_type=ModuleType(data.get("module_type", ModuleType.MONOCRYSTALLINE)),
            tracking_type=TrackingType(data.get("tracking_type", TrackingType.FIXED)),
            inverter_type=InverterType(data.get("inverter_type", InverterType.STRING)),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["module_type"] = self.module_type.value
        data["tracking_type"] = self.tracking_type.value
        data["inverter_type"] = self.inverter_type.value
        return data


@dataclass(frozen=True)
class WeatherMonth:
    """
    Typical-month weather record. Irradiance values are daily means in
    kWh/m²/day.
    """

    month: int
    ghi: float
    dni: float
    dhi: float
    ambient_temperature_c: float
    wind_speed_ms: float = 1.0
    relative_humidity_pct: float = 50.0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "WeatherMonth":
        return cls(
            month=int(data["month"]),
            ghi=float(data["ghi"]),
            dni=float(data["dni"]),
            dhi=float(data["dhi"]),
            ambient_temperature_c=float(data["ambient_temperature_c"]),
            wind_speed_ms=float(data.get("wind_speed_ms", 1.0)),
            relative_humidity_pct=float(data.get("relative_humidity_pct", 50.0)),
        )


def weather_from_records(records: Iterable[Mapping[str, Any]]) -> Tuple[WeatherMonth, ...]:
    """Build an immutable tuple of WeatherMonth from plain mappings."""
    return tuple(WeatherMonth.from_dict(record) for record in records)


@dataclass(frozen=True)
class MonthlyProduction:
    month: int
    month_name: str
    production_kwh: float
    poa_irradiance: float
    ambient_temperature_c: float
    cell_temperature_c: float
    days_in_month: int
    peak_sun_hours: float


@dataclass(frozen=True)
class EfficiencyBreakdown:
    """
    Percent-valued summary of where energy is lost between the sun and the
    AC output. ``temperature_losses`` is the production-weighted thermal
    derate actually applied during the simulated year.
    """

    module_efficiency: float
    inverter_efficiency: float
    wiring_losses: float
    soiling_losses: float
    shading_losses: float
    temperature_losses: float
    mismatch_losses: float
    system_availability: float
    overall_efficiency: float


@dataclass(frozen=True)
class FinancialAnalysis:
    system_cost: float
    incentives: float
    net_cost: float
    annual_savings: float
    payback_period: float
    roi: float
    npv: float
    lcoe: float
    total_lifetime_savings: float
    system_lifetime: int


@dataclass(frozen=True)
class ProductionResult:
    """
    Output of a production simulation.

    ``monthly_production`` always holds 12 records whose production sums to
    ``annual_production``. ``financial_analysis`` is only populated when the
    caller asked for it.
    """

    monthly_production: Tuple[MonthlyProduction, ...]
    annual_production: float
    capacity_factor: float
    specific_yield: float
    performance_ratio: float
    peak_sun_hours: float
    co2_savings: float
    efficiency: EfficiencyBreakdown
    financial_analysis: Optional[FinancialAnalysis] = None

    def monthly_frame(self) -> pd.DataFrame:
        """Monthly records as a DataFrame, one row per calendar month."""
        return pd.DataFrame([asdict(month) for month in self.monthly_production])

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "monthly_production": [asdict(month) for month in self.monthly_production],
            "annual_production": self.annual_production,
            "capacity_factor": self.capacity_factor,
            "specific_yield": self.specific_yield,
            "performance_ratio": self.performance_ratio,
            "peak_sun_hours": self.peak_sun_hours,
            "co2_savings": self.co2_savings,
            "efficiency": asdict(self.efficiency),
            "financial_analysis": (
                asdict(self.financial_analysis) if self.financial_analysis is not None else None
            ),
        }
        return data


@dataclass(frozen=True)
class SimulationInput:
    """Bundle of simulator inputs, used by the application layer and CLI."""

    location: Location
    spec: SystemSpecification
    weather: Tuple[WeatherMonth, ...]
    include_financial: bool = False
    financial_options: Dict[str, Any] = field(default_factory=dict)
