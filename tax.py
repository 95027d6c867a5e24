"""
Mortgage-interest deduction and inflation helpers for the Dutch
mortgage calculator.

Every function accepts numpy arrays so yearly figures can be processed
in one go. Scalar inputs work too (promoted internally).
"""

from __future__ import annotations

import numpy as np

import config as cfg


# ─── Mortgage Interest Deduction ─────────────────────────────────────

def interest_deduction(interest: np.ndarray, tax_rate: float) -> np.ndarray:
    """Tax refund on paid mortgage interest (hypotheekrenteaftrek).

    Interest is deductible at a flat rate.

    Parameters
    ----------
    interest : array_like
        Interest paid in the period.
    tax_rate : float
        Deduction rate as a fraction (0.37 = 37%).

    Returns
    -------
    np.ndarray
        Deduction for each interest value.
    """
    interest = np.asarray(interest, dtype=float)
    return interest * tax_rate


def net_payment(
    payment: np.ndarray,
    interest: np.ndarray,
    tax_rate: float,
) -> np.ndarray:
    """Gross (bruto) payment minus the interest deduction."""
    payment = np.asarray(payment, dtype=float)
    return payment - interest_deduction(interest, tax_rate)


# ─── Inflation ───────────────────────────────────────────────────────

def discount_factors(years: np.ndarray, inflation_rate: float) -> np.ndarray:
    """Cumulative inflation factor for each 1-indexed year.

    Year 1 is undiscounted; year Y is divided by
    ``(1 + inflation_rate) ** (Y - 1)``.

    Parameters
    ----------
    years : array_like
        Year indices, starting at 1.
    inflation_rate : float
        Annual inflation as a fraction.

    Returns
    -------
    np.ndarray
        Discount factor per year.
    """
    years = np.asarray(years, dtype=float)
    return (1 + inflation_rate) ** (years - 1)


def deflate(
    values: np.ndarray,
    years: np.ndarray,
    inflation_rate: float,
) -> np.ndarray:
    """Express nominal yearly values in start-of-term purchasing power."""
    values = np.asarray(values, dtype=float)
    return values / discount_factors(years, inflation_rate)


def shows_real_values(inflation_rate: float) -> bool:
    """Real figures only differ from nominal ones above the threshold."""
    return inflation_rate > cfg.REAL_VALUE_THRESHOLD
