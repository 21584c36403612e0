"""
Monthly PV production simulator.

:class:`ProductionSimulator` turns a location, a system specification and
twelve typical-month weather records into a :class:`ProductionResult`.
The simulator is stateless: one instance may be shared by any number of
callers, and each call is a pure function of its inputs.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

import numpy as np

from ..calendar_utils import MONTH_LENGTHS, MONTH_NAMES, mid_month_day_of_year
from ..errors import ValidationError
from . import solar
from .financial import FinancialOptions, analyze
from .models import (
    EfficiencyBreakdown,
    Location,
    MonthlyProduction,
    ProductionResult,
    SystemSpecification,
    WeatherMonth,
)

logger = logging.getLogger(__name__)

CO2_KG_PER_KWH = 0.4
HOURS_PER_YEAR = 8760.0
MAX_GHI = 12.0


def validate_location(location: Location) -> None:
    if not (-90.0 <= location.latitude <= 90.0):
        raise ValidationError("Invalid latitude: must be between -90 and 90 degrees", "latitude")
    if not (-180.0 <= location.longitude <= 180.0):
        raise ValidationError("Invalid longitude: must be between -180 and 180 degrees", "longitude")


def validate_specification(spec: SystemSpecification) -> None:
    if spec.dc_capacity_kw <= 0:
        raise ValidationError("DC capacity must be greater than 0", "dc_capacity_kw")
    if not (0.0 < spec.module_efficiency_pct <= 50.0):
        raise ValidationError("Module efficiency must be between 0 and 50%", "module_efficiency_pct")
    if not (0.0 < spec.inverter_efficiency_pct <= 100.0):
        raise ValidationError(
            "Inverter efficiency must be between 0 and 100%", "inverter_efficiency_pct"
        )
    if not (0.0 <= spec.system_losses_pct <= 100.0):
        raise ValidationError("System losses must be between 0 and 100%", "system_losses_pct")
    if not (0.0 <= spec.tilt_deg <= 90.0):
        raise ValidationError("Tilt angle must be between 0 and 90 degrees", "tilt_deg")
    if not (0.0 <= spec.azimuth_deg <= 360.0):
        raise ValidationError("Azimuth angle must be between 0 and 360 degrees", "azimuth_deg")


def validate_weather(weather: Sequence[WeatherMonth]) -> None:
    if len(weather) != 12:
        raise ValidationError("Weather data must contain exactly 12 months of data", "weather")
    for index, month in enumerate(weather):
        expected = index + 1
        if month.month != expected:
            raise ValidationError(
                f"Weather data month {expected} has incorrect month number: {month.month}",
                "weather.month",
            )
        if not (0.0 <= month.ghi <= MAX_GHI):
            raise ValidationError(f"Invalid GHI for month {month.month}: {month.ghi}", "weather.ghi")
        if month.dni < 0:
            raise ValidationError(f"Invalid DNI for month {month.month}: {month.dni}", "weather.dni")
        if month.dhi < 0:
            raise ValidationError(f"Invalid DHI for month {month.month}: {month.dhi}", "weather.dhi")
        if month.dhi > month.ghi:
            raise ValidationError(
                f"Invalid DHI for month {month.month}: diffuse {month.dhi} exceeds global {month.ghi}",
                "weather.dhi",
            )
        if month.wind_speed_ms < 0:
            raise ValidationError(
                f"Invalid wind speed for month {month.month}: {month.wind_speed_ms}",
                "weather.wind_speed_ms",
            )


class ProductionSimulator:
    """
    Noon-geometry monthly production model.

    For every month the simulator:

    1. places the sun at its noon elevation for the mid-month declination,
    2. transposes GHI/DNI/DHI onto the panel plane (isotropic sky),
    3. estimates the cell temperature with the NOCT model,
    4. derates DC output for temperature,
    5. applies the system loss chain and the inverter efficiency.

    Example:
        ```python
        simulator = ProductionSimulator()
        result = simulator.simulate(location, spec, weather, include_financial=True)
        print(result.annual_production, result.financial_analysis.payback_period)
        ```
    """

    def simulate(
        self,
        location: Location,
        spec: SystemSpecification,
        weather: Sequence[WeatherMonth],
        options: Optional[FinancialOptions] = None,
        *,
        include_financial: bool = False,
    ) -> ProductionResult:
        """
        Run the monthly simulation.

        Args:
            location: Site coordinates.
            spec: System specification.
            weather: Exactly twelve WeatherMonth records ordered January first.
            options: Financial assumptions; passing options implies a
                financial analysis.
            include_financial: Request the financial block with default
                options.

        Returns:
            ProductionResult.

        Raises:
            ValidationError: any input is out of range. Validation happens
                before any computation.
        """
        validate_location(location)
        validate_specification(spec)
        validate_weather(weather)
        if options is not None:
            options.validate()

        months = np.arange(1, 13)
        days = np.array(MONTH_LENGTHS, dtype=float)
        ghi = np.array([m.ghi for m in weather], dtype=float)
        dni = np.array([m.dni for m in weather], dtype=float)
        dhi = np.array([m.dhi for m in weather], dtype=float)
        ambient = np.array([m.ambient_temperature_c for m in weather], dtype=float)
        wind = np.array([m.wind_speed_ms for m in weather], dtype=float)

        day_of_year = np.array([mid_month_day_of_year(int(m)) for m in months])
        declination = solar.solar_declination(day_of_year)
        elevation = solar.noon_elevation(location.latitude, declination)
        incidence = solar.incidence_angle(
            elevation, solar.SUN_AZIMUTH_DEG, spec.tilt_deg, spec.azimuth_deg
        )
        poa = solar.plane_of_array_irradiance(ghi, dni, dhi, spec.tilt_deg, incidence)

        day_length = solar.day_length_hours(location.latitude, declination)
        irradiance_w = solar.mean_daylight_irradiance(poa, day_length)
        cell_temp = solar.cell_temperature(ambient, irradiance_w, wind)
        temp_derate = solar.temperature_derate(spec.module_type, cell_temp)

        dc = solar.dc_energy(poa, spec.dc_capacity_kw, spec.module_efficiency_pct, temp_derate, days)
        sys_derate = solar.system_derate(spec.system_losses_pct)
        ac = dc * sys_derate * spec.inverter_efficiency_pct / 100.0

        monthly = tuple(
            MonthlyProduction(
                month=int(months[i]),
                month_name=MONTH_NAMES[i],
                production_kwh=float(ac[i]),
                poa_irradiance=float(poa[i]),
                ambient_temperature_c=float(ambient[i]),
                cell_temperature_c=float(cell_temp[i]),
                days_in_month=int(days[i]),
                peak_sun_hours=float(poa[i]),
            )
            for i in range(12)
        )

        annual = float(np.sum(ac))
        reference_yield = float(np.sum(ghi * days))
        specific_yield = annual / spec.dc_capacity_kw
        performance_ratio = specific_yield / reference_yield if reference_yield > 0 else 0.0

        financial = None
        if include_financial or options is not None:
            financial = analyze(spec.dc_capacity_kw, annual, options)

        result = ProductionResult(
            monthly_production=monthly,
            annual_production=annual,
            capacity_factor=annual / (spec.dc_capacity_kw * HOURS_PER_YEAR) * 100.0,
            specific_yield=specific_yield,
            performance_ratio=performance_ratio,
            peak_sun_hours=float(np.mean(ghi)),
            co2_savings=annual * CO2_KG_PER_KWH,
            efficiency=self._efficiency_breakdown(spec, dc, temp_derate),
            financial_analysis=financial,
        )
        logger.debug(
            "Simulated %.2f kW at (%.4f, %.4f): %.0f kWh/yr, CF %.1f%%",
            spec.dc_capacity_kw,
            location.latitude,
            location.longitude,
            annual,
            result.capacity_factor,
        )
        return result

    @staticmethod
    def _efficiency_breakdown(
        spec: SystemSpecification,
        dc: np.ndarray,
        temp_derate: np.ndarray,
    ) -> EfficiencyBreakdown:
        # Production-weighted thermal derate over the year.
        nominal_dc = float(np.sum(dc / temp_derate))
        if nominal_dc > 0:
            mean_derate = float(np.sum(dc)) / nominal_dc
        else:
            mean_derate = float(np.mean(temp_derate))
        temperature_losses = (1.0 - mean_derate) * 100.0
        losses = solar.DEFAULT_LOSSES
        overall = (
            spec.module_efficiency_pct
            * spec.inverter_efficiency_pct / 100.0
            * solar.system_derate(spec.system_losses_pct)
            * mean_derate
        )
        return EfficiencyBreakdown(
            module_efficiency=spec.module_efficiency_pct,
            inverter_efficiency=spec.inverter_efficiency_pct,
            wiring_losses=losses["wiring"],
            soiling_losses=losses["soiling"],
            shading_losses=spec.system_losses_pct,
            temperature_losses=temperature_losses,
            mismatch_losses=losses["mismatch"],
            system_availability=100.0 - losses["availability"],
            overall_efficiency=overall,
        )
