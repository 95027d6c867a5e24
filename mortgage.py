"""
Amortization engine for Dutch annuity and linear mortgages.

Turns a principal, annual interest rate, term, tax rate and inflation
rate into a month-by-month schedule plus yearly and total summaries,
including the mortgage-interest deduction and inflation-adjusted
("real") figures.

The month loop (<= 360 steps for a 30-year term) is a plain Python
loop; yearly aggregation is done with numpy.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Optional

import numpy as np

import config as cfg
import tax


# ─── Data Classes ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class MortgageInput:
    """Validated user inputs for one calculation."""

    principal: float             # loan amount in EUR
    interest_rate: float         # annual rate in percent (4.0 = 4%)
    term_years: float            # mortgage term in years
    payment_type: str = "annuity"  # 'annuity' or 'linear'
    tax_rate: float = 0.37       # interest deduction rate as a fraction
    inflation_rate: float = 0.0  # annual inflation as a fraction

    def __post_init__(self) -> None:
        if self.payment_type not in cfg.PAYMENT_TYPES:
            raise ValueError(
                f"Payment type must be one of {', '.join(cfg.PAYMENT_TYPES)}"
            )

    @property
    def monthly_rate(self) -> float:
        return self.interest_rate / 100 / 12

    @property
    def total_months(self) -> int:
        return max(1, int(round(self.term_years * 12)))


@dataclass(frozen=True)
class PeriodEntry:
    """One month of the schedule."""

    month: int
    year: int
    payment: float
    interest: float
    principal: float
    remaining: float


@dataclass
class Schedule:
    """Month-by-month amortization schedule.

    All arrays have shape (total_months,); index 0 is month 1.
    """

    month: np.ndarray = field(repr=False)
    year: np.ndarray = field(repr=False)       # ceil(month / 12)
    payment: np.ndarray = field(repr=False)
    interest: np.ndarray = field(repr=False)
    principal: np.ndarray = field(repr=False)
    remaining: np.ndarray = field(repr=False)  # clamped >= 0

    @property
    def total_interest(self) -> float:
        return float(self.interest.sum())

    @property
    def total_principal(self) -> float:
        return float(self.principal.sum())

    @property
    def total_payment(self) -> float:
        return self.total_interest + self.total_principal

    def __len__(self) -> int:
        return len(self.month)

    def entries(self) -> Iterator[PeriodEntry]:
        for i in range(len(self.month)):
            yield PeriodEntry(
                month=int(self.month[i]),
                year=int(self.year[i]),
                payment=float(self.payment[i]),
                interest=float(self.interest[i]),
                principal=float(self.principal[i]),
                remaining=float(self.remaining[i]),
            )


@dataclass
class YearlySummary:
    """Aggregated figures for one year of the term."""

    year: int
    total_payment: float
    total_interest: float
    total_principal: float
    remaining_debt: float        # balance after the last month of the year
    tax_deduction: float
    net_payment: float
    discount_factor: float       # (1 + inflation) ** (year - 1)
    real_bruto_payment: float
    real_net_payment: float
    real_tax_deduction: float
    real_interest: float
    real_principal: float

    @property
    def bruto_payment(self) -> float:
        return self.total_payment


@dataclass
class TotalSummary:
    """Figures over the full term.

    Real totals are sums of the yearly real figures, since every year
    has its own discount factor.
    """

    principal: float
    total_interest: float
    total_principal: float
    total_payment: float
    tax_deduction: float
    net_payment: float
    real_bruto_payment: float
    real_net_payment: float
    real_tax_deduction: float
    real_interest: float
    real_principal: float

    @property
    def bruto_payment(self) -> float:
        return self.total_payment


@dataclass(frozen=True)
class FirstMonth:
    """Payment breakdown of the first month."""

    payment: float
    interest: float
    principal: float


@dataclass
class MortgageResult:
    """Everything the presentation layer needs from one calculation."""

    inputs: MortgageInput
    schedule: Schedule
    yearly: List[YearlySummary]
    totals: TotalSummary
    first_month: FirstMonth

    @property
    def total_months(self) -> int:
        return self.inputs.total_months


# ─── Payments ─────────────────────────────────────────────────────────

def annuity_payment(principal: float, monthly_rate: float, n_months: int) -> float:
    """Constant monthly payment that repays *principal* in *n_months*.

    Standard annuity formula ``P * r * (1+r)^n / ((1+r)^n - 1)``; with a
    zero rate the principal is simply spread evenly.
    """
    if monthly_rate == 0:
        return principal / n_months
    factor = (1 + monthly_rate) ** n_months
    return principal * monthly_rate * factor / (factor - 1)


def first_month_payment(inputs: MortgageInput) -> FirstMonth:
    """Breakdown of month 1, computed directly from the inputs."""
    r = inputs.monthly_rate
    n = inputs.total_months
    interest = inputs.principal * r

    if inputs.payment_type == "annuity":
        payment = annuity_payment(inputs.principal, r, n)
        return FirstMonth(payment=payment, interest=interest, principal=payment - interest)

    monthly_principal = inputs.principal / n
    return FirstMonth(
        payment=monthly_principal + interest,
        interest=interest,
        principal=monthly_principal,
    )


# ─── Schedule ─────────────────────────────────────────────────────────

def calculate_schedule(inputs: MortgageInput) -> Schedule:
    """Build the month-by-month schedule.

    Annuity: payment is constant, the principal portion grows as the
    interest portion shrinks.
    Linear: the principal portion is constant, so the payment shrinks
    with the interest.
    """
    n = inputs.total_months
    r = inputs.monthly_rate

    month = np.arange(1, n + 1)
    payment = np.empty(n)
    interest = np.empty(n)
    principal = np.empty(n)
    remaining = np.empty(n)

    if inputs.payment_type == "annuity":
        fixed_payment = annuity_payment(inputs.principal, r, n)
    else:
        fixed_principal = inputs.principal / n

    balance = float(inputs.principal)
    for i in range(n):
        interest[i] = balance * r
        if inputs.payment_type == "annuity":
            payment[i] = fixed_payment
            principal[i] = fixed_payment - interest[i]
        else:
            principal[i] = fixed_principal
            payment[i] = fixed_principal + interest[i]
        balance -= principal[i]
        # Absorb floating-point drift in the final month
        remaining[i] = max(balance, 0.0)

    return Schedule(
        month=month,
        year=(month + 11) // 12,
        payment=payment,
        interest=interest,
        principal=principal,
        remaining=remaining,
    )


# ─── Aggregation ──────────────────────────────────────────────────────

def yearly_summary(
    inputs: MortgageInput,
    schedule: Optional[Schedule] = None,
) -> List[YearlySummary]:
    """Group the schedule by year and attach tax and real-value figures.

    The last group holds fewer than 12 months when the term is not a
    whole number of years.
    """
    if schedule is None:
        schedule = calculate_schedule(inputs)

    idx = schedule.year - 1
    years = np.arange(1, int(schedule.year[-1]) + 1)
    pay = np.bincount(idx, weights=schedule.payment)
    intr = np.bincount(idx, weights=schedule.interest)
    prin = np.bincount(idx, weights=schedule.principal)

    # Last month of each year: where the year index changes, plus the end
    last = np.append(np.flatnonzero(np.diff(schedule.year)), len(schedule) - 1)
    remaining = schedule.remaining[last]

    deduction = tax.interest_deduction(intr, inputs.tax_rate)
    net = tax.net_payment(pay, intr, inputs.tax_rate)
    factors = tax.discount_factors(years, inputs.inflation_rate)

    def real(values: np.ndarray) -> np.ndarray:
        return tax.deflate(values, years, inputs.inflation_rate)

    real_pay, real_net, real_ded = real(pay), real(net), real(deduction)
    real_intr, real_prin = real(intr), real(prin)

    summaries = []
    for k, year in enumerate(years):
        summaries.append(YearlySummary(
            year=int(year),
            total_payment=float(pay[k]),
            total_interest=float(intr[k]),
            total_principal=float(prin[k]),
            remaining_debt=float(remaining[k]),
            tax_deduction=float(deduction[k]),
            net_payment=float(net[k]),
            discount_factor=float(factors[k]),
            real_bruto_payment=float(real_pay[k]),
            real_net_payment=float(real_net[k]),
            real_tax_deduction=float(real_ded[k]),
            real_interest=float(real_intr[k]),
            real_principal=float(real_prin[k]),
        ))
    return summaries


def total_summary(
    inputs: MortgageInput,
    yearly: Optional[List[YearlySummary]] = None,
    schedule: Optional[Schedule] = None,
) -> TotalSummary:
    """Totals over the full term.

    Nominal totals come straight from the schedule; the deduction is
    applied to the total interest independently of the yearly rows.
    """
    if schedule is None:
        schedule = calculate_schedule(inputs)
    if yearly is None:
        yearly = yearly_summary(inputs, schedule)

    total_interest = schedule.total_interest
    total_payment = schedule.total_payment
    deduction = float(tax.interest_deduction(total_interest, inputs.tax_rate))

    return TotalSummary(
        principal=inputs.principal,
        total_interest=total_interest,
        total_principal=schedule.total_principal,
        total_payment=total_payment,
        tax_deduction=deduction,
        net_payment=total_payment - deduction,
        real_bruto_payment=sum(y.real_bruto_payment for y in yearly),
        real_net_payment=sum(y.real_net_payment for y in yearly),
        real_tax_deduction=sum(y.real_tax_deduction for y in yearly),
        real_interest=sum(y.real_interest for y in yearly),
        real_principal=sum(y.real_principal for y in yearly),
    )


def calculate(inputs: MortgageInput) -> MortgageResult:
    """Run the full calculation once and bundle the results."""
    schedule = calculate_schedule(inputs)
    yearly = yearly_summary(inputs, schedule)
    return MortgageResult(
        inputs=inputs,
        schedule=schedule,
        yearly=yearly,
        totals=total_summary(inputs, yearly, schedule),
        first_month=first_month_payment(inputs),
    )
