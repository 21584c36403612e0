"""
Financing options for a finished design: cash purchase and amortized loan.

Loans use monthly compounding; the amortization schedule is reported per
year so that it stays readable in API responses.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

DEFAULT_LOAN_RATE = 0.07
DEFAULT_LOAN_TERM_YEARS = 20


@dataclass(frozen=True)
class FinancingOption:
    """
    One way of paying for the system.

    Attributes:
        kind: ``"cash"`` or ``"loan"``.
        provider: Display label.
        total_cost: Everything the customer pays over the term (USD).
        monthly_payment: Loan instalment, 0 for cash.
        monthly_savings: Bill savings net of the instalment (USD/month).
        net_savings: Savings over the horizon minus what was paid (USD).
        break_even_years: Years until savings cover the outlay; 0 when no
            money is paid upfront.
        term_years: Loan term or analysis horizon.
        interest_rate: Annual nominal rate (decimal), 0 for cash.
        schedule: Yearly amortization rows for loans.
    """

    kind: str
    provider: str
    total_cost: float
    monthly_payment: float
    monthly_savings: float
    net_savings: float
    break_even_years: float
    term_years: int
    interest_rate: float = 0.0
    schedule: List[Dict[str, float]] = field(default_factory=list)


def monthly_payment(principal: float, annual_rate: float, term_years: int) -> float:
    """Level monthly payment ``P·r(1+r)^n / ((1+r)^n − 1)``."""
    n = term_years * 12
    if n <= 0 or principal <= 0:
        return 0.0
    r = annual_rate / 12.0
    if r <= 0:
        return principal / n
    growth = (1.0 + r) ** n
    return principal * r * growth / (growth - 1.0)


def amortization_schedule(
    principal: float,
    annual_rate: float,
    term_years: int,
) -> List[Dict[str, float]]:
    """
    Yearly totals of a monthly-compounded loan.

    Returns a list of dicts with keys: year, payment, principal_payment,
    interest_payment, remaining_balance.
    """
    payment = monthly_payment(principal, annual_rate, term_years)
    if payment <= 0:
        return []

    r = annual_rate / 12.0
    balance = principal
    schedule = []
    for year in range(1, term_years + 1):
        interest_total = 0.0
        principal_total = 0.0
        for _ in range(12):
            interest = balance * r
            principal_pmt = payment - interest
            balance -= principal_pmt
            interest_total += interest
            principal_total += principal_pmt
        schedule.append({
            "year": year,
            "payment": round(payment * 12, 2),
            "principal_payment": round(principal_total, 2),
            "interest_payment": round(interest_total, 2),
            "remaining_balance": round(max(balance, 0.0), 2),
        })
    return schedule


def cash_option(
    net_cost: float,
    annual_savings: float,
    lifetime_savings: float,
    payback_years: float,
    lifetime_years: int,
) -> FinancingOption:
    return FinancingOption(
        kind="cash",
        provider="Cash Purchase",
        total_cost=net_cost,
        monthly_payment=0.0,
        monthly_savings=annual_savings / 12.0,
        net_savings=lifetime_savings - net_cost,
        break_even_years=payback_years,
        term_years=lifetime_years,
    )


def loan_option(
    principal: float,
    annual_savings: float,
    annual_rate: float = DEFAULT_LOAN_RATE,
    term_years: int = DEFAULT_LOAN_TERM_YEARS,
    provider: Optional[str] = None,
) -> FinancingOption:
    """Zero-down loan: the customer pays instalments out of bill savings."""
    payment = monthly_payment(principal, annual_rate, term_years)
    total_paid = payment * term_years * 12
    return FinancingOption(
        kind="loan",
        provider=provider or f"Solar Loan ({annual_rate * 100:.1f}% APR, {term_years} years)",
        total_cost=total_paid,
        monthly_payment=payment,
        monthly_savings=annual_savings / 12.0 - payment,
        net_savings=annual_savings * term_years - total_paid,
        break_even_years=0.0,
        term_years=term_years,
        interest_rate=annual_rate,
        schedule=amortization_schedule(principal, annual_rate, term_years),
    )
