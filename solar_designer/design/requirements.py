"""
Customer requirements consumed by the design optimizer.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

from ..errors import ValidationError
from ..simulation.models import InverterType, Location, ModuleType
from ..simulation.production import validate_location


@dataclass(frozen=True)
class Budget:
    min: Optional[float] = None
    max: Optional[float] = None


@dataclass(frozen=True)
class RoofConstraints:
    """Roof geometry; every field is optional."""

    available_area: Optional[float] = None
    tilt_angle: Optional[float] = None
    azimuth_angle: Optional[float] = None
    shading_factor: Optional[float] = None


@dataclass(frozen=True)
class DesignGoals:
    offset_percentage: float = 100.0
    prioritize_efficiency: bool = False
    prioritize_cost: bool = False
    tier1_only: bool = False


@dataclass(frozen=True)
class DesignPreferences:
    panel_type: Optional[ModuleType] = None
    inverter_type: Optional[InverterType] = None
    include_storage: bool = False
    storage_capacity: Optional[float] = None
    roof_constraints: Optional[RoofConstraints] = None
    design_goals: DesignGoals = field(default_factory=DesignGoals)


@dataclass(frozen=True)
class UtilityRates:
    """Utility tariff; only ``energy_rate`` is mandatory."""

    energy_rate: float
    demand_charge: Optional[float] = None
    net_metering_rate: Optional[float] = None

    @property
    def effective_net_metering_rate(self) -> float:
        if self.net_metering_rate is None:
            return self.energy_rate
        return self.net_metering_rate


@dataclass(frozen=True)
class DesignRequirements:
    """
    Everything the optimizer needs to know about a customer.

    Attributes:
        location: Installation site.
        monthly_usage: Twelve monthly consumption figures (kWh).
        peak_usage: Optional peak demand (kW), informational.
        budget: Optional budget bounds (USD).
        preferences: Equipment and roof preferences plus design goals.
        utility_rates: Optional tariff; enables financing options.
    """

    location: Location
    monthly_usage: Tuple[float, ...]
    peak_usage: Optional[float] = None
    budget: Optional[Budget] = None
    preferences: DesignPreferences = field(default_factory=DesignPreferences)
    utility_rates: Optional[UtilityRates] = None

    @property
    def annual_usage(self) -> float:
        return float(sum(self.monthly_usage))

    @property
    def goals(self) -> DesignGoals:
        return self.preferences.design_goals

    def validate(self) -> None:
        """Raise ValidationError for malformed requirements."""
        validate_location(self.location)
        if len(self.monthly_usage) != 12:
            raise ValidationError("Monthly usage must contain exactly 12 values", "monthly_usage")
        if any(value < 0 for value in self.monthly_usage):
            raise ValidationError("Monthly usage values must not be negative", "monthly_usage")
        if self.annual_usage <= 0:
            raise ValidationError("Annual usage must be greater than 0", "monthly_usage")
        offset = self.goals.offset_percentage
        if not (0.0 < offset <= 200.0):
            raise ValidationError("Offset percentage must be between 0 and 200%", "offset_percentage")
        budget = self.budget
        if budget is not None:
            if budget.max is not None and budget.max <= 0:
                raise ValidationError("Maximum budget must be greater than 0", "budget.max")
            if budget.min is not None and budget.max is not None and budget.min > budget.max:
                raise ValidationError("Minimum budget must not exceed maximum budget", "budget.min")
        prefs = self.preferences
        if prefs.storage_capacity is not None and prefs.storage_capacity <= 0:
            raise ValidationError("Storage capacity must be greater than 0", "storage_capacity")
        roof = prefs.roof_constraints
        if roof is not None:
            if roof.shading_factor is not None and not (0.0 <= roof.shading_factor <= 100.0):
                raise ValidationError("Shading factor must be between 0 and 100%", "shading_factor")
            if roof.available_area is not None and roof.available_area <= 0:
                raise ValidationError("Available roof area must be greater than 0", "available_area")
            if roof.tilt_angle is not None and not (0.0 <= roof.tilt_angle <= 90.0):
                raise ValidationError("Tilt angle must be between 0 and 90 degrees", "tilt_angle")
            if roof.azimuth_angle is not None and not (0.0 <= roof.azimuth_angle <= 360.0):
                raise ValidationError(
                    "Azimuth angle must be between 0 and 360 degrees", "azimuth_angle"
                )
        if self.utility_rates is not None:
            if self.utility_rates.energy_rate <= 0:
                raise ValidationError("Energy rate must be greater than 0", "energy_rate")
            if self.utility_rates.effective_net_metering_rate <= 0:
                raise ValidationError("Net metering rate must be greater than 0", "net_metering_rate")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _optional(cls, data: Optional[Mapping[str, Any]]):
    if data is None:
        return None
    return cls(**dict(data))


def requirements_from_dict(data: Mapping[str, Any]) -> DesignRequirements:
    """
    Parse nested mappings (e.g. decoded JSON) into DesignRequirements.

    Raises:
        ValidationError: when a required section is missing or an enum value
            is unknown.
    """
    try:
        location = Location.from_dict(data["location"])
        usage = tuple(float(value) for value in data["monthly_usage"])
    except KeyError as exc:
        raise ValidationError(f"Missing required field: {exc.args[0]}", str(exc.args[0])) from exc

    prefs_data = dict(data.get("preferences") or {})
    try:
        panel_type = prefs_data.get("panel_type")
        inverter_type = prefs_data.get("inverter_type")
        preferences = DesignPreferences(
            panel_type=ModuleType(panel_type) if panel_type else None,
            inverter_type=InverterType(inverter_type) if inverter_type else None,
            include_storage=bool(prefs_data.get("include_storage", False)),
            storage_capacity=prefs_data.get("storage_capacity"),
            roof_constraints=_optional(RoofConstraints, prefs_data.get("roof_constraints")),
            design_goals=_optional(DesignGoals, prefs_data.get("design_goals")) or DesignGoals(),
        )
        budget = _optional(Budget, data.get("budget"))
        utility_rates = _optional(UtilityRates, data.get("utility_rates"))
    except ValueError as exc:
        raise ValidationError(str(exc), "preferences") from exc
    except TypeError as exc:
        raise ValidationError(f"Unknown field: {exc}", "requirements") from exc

    return DesignRequirements(
        location=location,
        monthly_usage=usage,
        peak_usage=data.get("peak_usage"),
        budget=budget,
        preferences=preferences,
        utility_rates=utility_rates,
    )
