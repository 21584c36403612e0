"""
Solar geometry and photovoltaic conversion helpers.

The model works on one representative day per month. The sun is placed at
its noon position (azimuth 180°) and the plane-of-array irradiance is built
from the beam, isotropic-sky diffuse and ground-reflected components. All
irradiance quantities are daily totals in kWh/m²/day, which is numerically
equal to peak sun hours.

Functions accept scalars or numpy arrays so that the simulator can evaluate
all twelve months at once.
"""

from __future__ import annotations

from typing import Dict, Iterable, Union

import numpy as np

from .models import ModuleType

ArrayLike = Union[float, np.ndarray]

GROUND_ALBEDO = 0.2
NOCT_C = 45.0
NOCT_AMBIENT_C = 20.0
NOCT_IRRADIANCE_W_M2 = 800.0
WIND_REFERENCE_MS = 1.0
MIN_WIND_FACTOR = 0.1
STC_TEMPERATURE_C = 25.0
MIN_TEMPERATURE_DERATE = 0.5
MIN_SYSTEM_DERATE = 0.5
SUN_AZIMUTH_DEG = 180.0

# Module efficiency is applied relative to this ceiling so that more efficient
# modules of the same nameplate rating produce proportionally more energy.
MODULE_EFFICIENCY_REFERENCE_PCT = 30.0

TEMPERATURE_COEFFICIENTS: Dict[ModuleType, float] = {
    ModuleType.MONOCRYSTALLINE: -0.40,
    ModuleType.POLYCRYSTALLINE: -0.45,
    ModuleType.THIN_FILM: -0.25,
}
"""Power temperature coefficients in %/°C."""

DEFAULT_LOSSES: Dict[str, float] = {
    "wiring": 2.0,
    "soiling": 2.0,
    "mismatch": 2.0,
    "availability": 3.0,
}
"""Loss factors (%) applied on top of the user-declared system losses."""


def solar_declination(day_of_year: ArrayLike) -> ArrayLike:
    """Cooper's approximation of solar declination in degrees."""
    return 23.45 * np.sin(np.radians(360.0 * (284.0 + np.asarray(day_of_year)) / 365.0))


def noon_elevation(latitude: float, declination: ArrayLike) -> ArrayLike:
    """Sun elevation at solar noon in degrees, floored at the horizon."""
    return np.maximum(0.0, 90.0 - np.abs(latitude - np.asarray(declination)))


def incidence_angle(
    sun_elevation: ArrayLike,
    sun_azimuth: ArrayLike,
    tilt: float,
    azimuth: float,
) -> ArrayLike:
    """
    Angle between the sun ray and the panel normal, in degrees.

    Uses the spherical law of cosines:
    ``cos θ = cos z · cos β + sin z · sin β · cos(γs − γ)`` with ``z`` the
    solar zenith, ``β`` the tilt and ``γ`` the azimuths.
    """
    zenith = np.radians(90.0 - np.asarray(sun_elevation))
    beta = np.radians(tilt)
    delta_az = np.radians(np.abs(np.asarray(sun_azimuth) - azimuth))
    cos_theta = np.cos(zenith) * np.cos(beta) + np.sin(zenith) * np.sin(beta) * np.cos(delta_az)
    return np.degrees(np.arccos(np.clip(cos_theta, -1.0, 1.0)))


def plane_of_array_irradiance(
    ghi: ArrayLike,
    dni: ArrayLike,
    dhi: ArrayLike,
    tilt: float,
    incidence: ArrayLike,
) -> ArrayLike:
    """
    Isotropic-sky transposition of horizontal irradiance onto the panel.

    The beam term is zero when the sun is behind the plane. The total is
    floored at zero.
    """
    cos_tilt = np.cos(np.radians(tilt))
    beam = np.asarray(dni) * np.maximum(0.0, np.cos(np.radians(incidence)))
    diffuse = np.asarray(dhi) * (1.0 + cos_tilt) / 2.0
    reflected = np.asarray(ghi) * GROUND_ALBEDO * (1.0 - cos_tilt) / 2.0
    return np.maximum(0.0, beam + diffuse + reflected)


def day_length_hours(latitude: float, declination: ArrayLike) -> ArrayLike:
    """Hours between sunrise and sunset from the sunset hour angle."""
    phi = np.radians(latitude)
    delta = np.radians(np.asarray(declination))
    cos_ws = np.clip(-np.tan(phi) * np.tan(delta), -1.0, 1.0)
    return 2.0 * np.degrees(np.arccos(cos_ws)) / 15.0


def mean_daylight_irradiance(poa_kwh_m2_day: ArrayLike, day_length: ArrayLike) -> ArrayLike:
    """Average plane irradiance over daylight hours, in W/m²."""
    poa = np.asarray(poa_kwh_m2_day, dtype=float)
    hours = np.asarray(day_length, dtype=float)
    safe_hours = np.where(hours > 0.0, hours, 1.0)
    return np.where(hours > 0.0, poa * 1000.0 / safe_hours, 0.0)


def cell_temperature(
    ambient_c: ArrayLike,
    irradiance_w_m2: ArrayLike,
    wind_speed_ms: ArrayLike,
) -> ArrayLike:
    """
    NOCT cell temperature with a simple wind correction.

    ``Tc = Ta + (G / 800) · (NOCT − 20) / max(0.1, v / 1 m·s⁻¹)``
    """
    wind_factor = np.maximum(MIN_WIND_FACTOR, np.asarray(wind_speed_ms) / WIND_REFERENCE_MS)
    heating = (np.asarray(irradiance_w_m2) / NOCT_IRRADIANCE_W_M2) * (NOCT_C - NOCT_AMBIENT_C)
    return np.asarray(ambient_c) + heating / wind_factor


def temperature_derate(module_type: ModuleType, cell_temp_c: ArrayLike) -> ArrayLike:
    """Linear power derate relative to 25 °C, never below 50 %."""
    coefficient = TEMPERATURE_COEFFICIENTS[ModuleType(module_type)]
    derate = 1.0 + coefficient / 100.0 * (np.asarray(cell_temp_c) - STC_TEMPERATURE_C)
    return np.maximum(MIN_TEMPERATURE_DERATE, derate)


def system_derate(user_losses_pct: float, extra_losses: Iterable[float] = ()) -> float:
    """
    Multiplicative loss chain ``Π (100 − x) / 100`` over the user losses and
    the default wiring, soiling, mismatch and availability factors.
    """
    factors = [user_losses_pct, *DEFAULT_LOSSES.values(), *extra_losses]
    derate = float(np.prod([(100.0 - loss) / 100.0 for loss in factors]))
    return max(MIN_SYSTEM_DERATE, derate)


def dc_energy(
    poa_kwh_m2_day: ArrayLike,
    dc_capacity_kw: float,
    module_efficiency_pct: float,
    derate: ArrayLike,
    days: ArrayLike,
) -> ArrayLike:
    """DC energy in kWh over ``days`` days."""
    efficiency_factor = module_efficiency_pct / MODULE_EFFICIENCY_REFERENCE_PCT
    return (
        np.asarray(poa_kwh_m2_day)
        * dc_capacity_kw
        * efficiency_factor
        * np.asarray(derate)
        * np.asarray(days)
    )
