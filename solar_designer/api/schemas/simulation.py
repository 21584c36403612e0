"""
Simulation and design schemas for API validation.

Request schemas check shapes and types only. Range checks (latitude bounds,
efficiency limits, weather completeness) stay in the engine so that HTTP and
CLI callers receive the same error messages.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ...simulation.models import InverterType, ModuleType, TrackingType


class LocationSchema(BaseModel):
    latitude: float
    longitude: float
    elevation: Optional[float] = None
    timezone: Optional[str] = None


class SystemSchema(BaseModel):
    """Candidate PV system; omitted fields take the engine defaults."""

    dc_capacity_kw: float
    module_efficiency_pct: float
    inverter_efficiency_pct: float = 96.0
    system_losses_pct: float = 14.0
    tilt_deg: float = 30.0
    azimuth_deg: float = 180.0
    module_type: ModuleType = ModuleType.MONOCRYSTALLINE
    tracking_type: TrackingType = TrackingType.FIXED
    inverter_type: InverterType = InverterType.STRING


class WeatherMonthSchema(BaseModel):
    month: int
    ghi: float = Field(..., description="Global horizontal irradiance (kWh/m²/day)")
    dni: float = Field(..., description="Direct normal irradiance (kWh/m²/day)")
    dhi: float = Field(..., description="Diffuse horizontal irradiance (kWh/m²/day)")
    ambient_temperature_c: float
    wind_speed_ms: float = 1.0
    relative_humidity_pct: float = 50.0


class FinancialOptionsSchema(BaseModel):
    electricity_rate: Optional[float] = None
    annual_rate_increase: Optional[float] = None
    system_lifetime: Optional[int] = None
    discount_rate: Optional[float] = None
    federal_tax_credit: Optional[float] = None
    state_tax_credit: Optional[float] = None
    net_metering_rate: Optional[float] = None
    cost_per_watt: Optional[float] = None


class SimulationRequest(BaseModel):
    """
    Request schema for ``POST /api/simulate``.

    Example:
        ```python
        {
            "label": "sf-10kw",
            "location": {"latitude": 37.7749, "longitude": -122.4194},
            "system": {"dc_capacity_kw": 10, "module_efficiency_pct": 20},
            "weather": [{"month": 1, "ghi": 3.5, "dni": 6, "dhi": 2,
                         "ambient_temperature_c": 10}, ...],
            "include_financial": true
        }
        ```
    """

    label: Optional[str] = None
    location: LocationSchema
    system: SystemSchema
    weather: List[WeatherMonthSchema]
    include_financial: bool = False
    financial_options: Optional[FinancialOptionsSchema] = None


class BudgetSchema(BaseModel):
    min: Optional[float] = None
    max: Optional[float] = None


class RoofConstraintsSchema(BaseModel):
    available_area: Optional[float] = Field(None, description="Usable roof area (m²)")
    tilt_angle: Optional[float] = None
    azimuth_angle: Optional[float] = None
    shading_factor: Optional[float] = Field(None, description="Shading loss (%)")


class DesignGoalsSchema(BaseModel):
    offset_percentage: float = 100.0
    prioritize_efficiency: bool = False
    prioritize_cost: bool = False
    tier1_only: bool = False


class PreferencesSchema(BaseModel):
    panel_type: Optional[ModuleType] = None
    inverter_type: Optional[InverterType] = None
    include_storage: bool = False
    storage_capacity: Optional[float] = None
    roof_constraints: Optional[RoofConstraintsSchema] = None
    design_goals: Optional[DesignGoalsSchema] = None


class UtilityRatesSchema(BaseModel):
    energy_rate: float
    demand_charge: Optional[float] = None
    net_metering_rate: Optional[float] = None


class DesignRequest(BaseModel):
    """Request schema for ``POST /api/design``: customer requirements plus weather."""

    label: Optional[str] = None
    location: LocationSchema
    monthly_usage: List[float] = Field(..., description="Twelve monthly consumption values (kWh)")
    peak_usage: Optional[float] = None
    budget: Optional[BudgetSchema] = None
    preferences: Optional[PreferencesSchema] = None
    utility_rates: Optional[UtilityRatesSchema] = None
    weather: List[WeatherMonthSchema]


class MonthlyProductionSchema(BaseModel):
    month: int
    month_name: str
    production_kwh: float
    poa_irradiance: float
    ambient_temperature_c: float
    cell_temperature_c: float
    days_in_month: int
    peak_sun_hours: float


class SimulationResponse(BaseModel):
    label: str
    monthly_production: List[MonthlyProductionSchema]
    annual_production: float
    capacity_factor: float
    specific_yield: float
    performance_ratio: float
    peak_sun_hours: float
    co2_savings: float
    efficiency: Dict[str, float]
    financial_analysis: Optional[Dict[str, Any]] = None
    output_dir: Optional[str] = None


class ScoreSchema(BaseModel):
    overall: float
    cost: float
    performance: float
    aesthetics: float
    reliability: float


class DesignResponse(BaseModel):
    """The best variant with its layout, financing and ranked alternatives."""

    label: str
    design_id: str
    system_specs: Dict[str, Any]
    components: Dict[str, Any]
    performance: Dict[str, Any]
    economics: Dict[str, Any]
    energy_analysis: Dict[str, Any]
    score: ScoreSchema
    roof_layout: Optional[Dict[str, Any]] = None
    alternative_designs: List[Dict[str, Any]] = Field(default_factory=list)
    variants_evaluated: int
    output_dir: Optional[str] = None


class DesignRunResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    run_type: str = Field(..., description="'simulation' or 'design'")
    label: str
    summary: Dict[str, Any]
    output_dir: Optional[str] = None
    created_at: datetime
