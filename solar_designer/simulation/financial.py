"""
Simple residential PV economics: cost, incentives, payback, NPV, ROI, LCOE.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Mapping, Optional

import numpy as np

from ..errors import ValidationError
from .models import FinancialAnalysis


@dataclass(frozen=True)
class FinancialOptions:
    """
    Per-call financial assumptions. Every option has a default and may be
    overridden independently.

    Attributes:
        electricity_rate: Retail electricity price (USD/kWh).
        annual_rate_increase: Yearly escalation of the electricity price (%).
        system_lifetime: Analysis horizon (years).
        discount_rate: Discount rate used for NPV (%).
        federal_tax_credit: Federal incentive as % of system cost.
        state_tax_credit: State incentive as % of system cost.
        net_metering_rate: Value of each produced kWh (USD/kWh); falls back to
            ``electricity_rate`` when not set.
        cost_per_watt: Installed cost assumption (USD/W DC).
    """

    electricity_rate: float = 0.12
    annual_rate_increase: float = 3.0
    system_lifetime: int = 25
    discount_rate: float = 6.0
    federal_tax_credit: float = 30.0
    state_tax_credit: float = 0.0
    net_metering_rate: Optional[float] = None
    cost_per_watt: float = 3.0

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "FinancialOptions":
        """Build options from a mapping, ignoring unknown keys."""
        if not data:
            return cls()
        known = {f.name for f in fields(cls)}
        values = {key: value for key, value in data.items() if key in known and value is not None}
        if "system_lifetime" in values:
            values["system_lifetime"] = int(values["system_lifetime"])
        return cls(**values)

    @property
    def effective_net_metering_rate(self) -> float:
        if self.net_metering_rate is None:
            return self.electricity_rate
        return self.net_metering_rate

    def validate(self) -> None:
        if self.electricity_rate <= 0:
            raise ValidationError("Electricity rate must be greater than 0", "electricity_rate")
        if self.effective_net_metering_rate <= 0:
            raise ValidationError("Net metering rate must be greater than 0", "net_metering_rate")
        if self.system_lifetime < 1:
            raise ValidationError("System lifetime must be at least 1 year", "system_lifetime")
        if self.discount_rate <= -100 or self.annual_rate_increase <= -100:
            raise ValidationError(
                "Discount rate and annual rate increase must be greater than -100%",
                "discount_rate",
            )
        if self.federal_tax_credit < 0 or self.state_tax_credit < 0:
            raise ValidationError("Tax credits must not be negative", "federal_tax_credit")
        if self.federal_tax_credit + self.state_tax_credit >= 100:
            raise ValidationError(
                "Combined tax credits must be below 100% of system cost", "state_tax_credit"
            )
        if self.cost_per_watt <= 0:
            raise ValidationError("Cost per watt must be greater than 0", "cost_per_watt")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _npv(rate: float, cashflows: np.ndarray) -> float:
    """Present value of ``cashflows`` where index 0 is today."""
    periods = np.arange(cashflows.size, dtype=float)
    growth = max(1.0 + rate, 1e-9)
    return float(np.sum(cashflows / np.power(growth, periods)))


def escalated_savings(first_year_savings: float, escalation_pct: float, years: int) -> np.ndarray:
    """Savings for years 1..N, growing by ``escalation_pct`` per year."""
    exponents = np.arange(years, dtype=float)
    return first_year_savings * np.power(1.0 + escalation_pct / 100.0, exponents)


def analyze(
    dc_capacity_kw: float,
    annual_production_kwh: float,
    options: Optional[FinancialOptions] = None,
) -> FinancialAnalysis:
    """
    Compute the financial block of a production result.

    Args:
        dc_capacity_kw: Installed DC capacity (kW).
        annual_production_kwh: First-year AC production (kWh).
        options: Financial assumptions; defaults are used when omitted.

    Returns:
        FinancialAnalysis with costs in USD, payback in years, ROI in %,
        and LCOE in USD/kWh. A system with zero production reports the
        whole lifetime as payback and an LCOE of 0 so the result stays
        JSON-serializable.
    """
    options = options or FinancialOptions()
    options.validate()

    system_cost = dc_capacity_kw * 1000.0 * options.cost_per_watt
    incentives = system_cost * (options.federal_tax_credit + options.state_tax_credit) / 100.0
    net_cost = system_cost - incentives
    annual_savings = annual_production_kwh * options.effective_net_metering_rate

    yearly = escalated_savings(annual_savings, options.annual_rate_increase, options.system_lifetime)
    cashflows = np.concatenate(([-net_cost], yearly))
    npv = _npv(options.discount_rate / 100.0, cashflows)
    lifetime_savings = float(np.sum(yearly))

    payback = net_cost / annual_savings if annual_savings > 0 else float(options.system_lifetime)
    lifetime_energy = annual_production_kwh * options.system_lifetime
    lcoe = net_cost / lifetime_energy if lifetime_energy > 0 else 0.0
    roi = (lifetime_savings - net_cost) / net_cost * 100.0

    return FinancialAnalysis(
        system_cost=system_cost,
        incentives=incentives,
        net_cost=net_cost,
        annual_savings=annual_savings,
        payback_period=payback,
        roi=roi,
        npv=npv,
        lcoe=lcoe,
        total_lifetime_savings=lifetime_savings,
        system_lifetime=options.system_lifetime,
    )
