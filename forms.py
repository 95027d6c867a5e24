"""
Form parsing and validation for the mortgage calculator.

Shared by the web app and the CLI. Raw field values are strings exactly
as typed; ``parse_form`` turns them into a ``MortgageInput`` or raises
an ``InputError`` carrying the field name and a user-facing message.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, List, Mapping

import numpy as np

import config as cfg
from mortgage import MortgageInput

logger = logging.getLogger(__name__)

# Field name -> default raw value. Names match the HTML form ids.
FORM_FIELDS: Dict[str, str] = {
    "principal": cfg.DEFAULT_PRINCIPAL,
    "interestRate": cfg.DEFAULT_INTEREST_RATE,
    "paymentType": cfg.DEFAULT_PAYMENT_TYPE,
    "mortgageTerm": cfg.DEFAULT_TERM_YEARS,
    "taxRate": cfg.DEFAULT_TAX_RATE,
    "inflationRate": cfg.DEFAULT_INFLATION_RATE,
}


class InputError(ValueError):
    """A form value failed its domain check."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field
        self.message = message


class MissingFieldsError(InputError):
    """The submitted form lacks one or more expected fields."""

    def __init__(self, missing: List[str]) -> None:
        super().__init__(
            missing[0],
            "Error: Form elements not found. Please refresh the page.",
        )
        self.missing = missing


# ─── Number parsing ──────────────────────────────────────────────────

def _parse_number(s: str) -> float:
    """Parse a number, returning NaN for anything unparseable."""
    try:
        return float(s)
    except (TypeError, ValueError):
        return float("nan")


_THOU = re.escape(cfg.THOUSANDS_SEP)
_DEC = re.escape(cfg.DECIMAL_SEP)

# 300.000 or 300.000,50
_GROUPED = re.compile(rf"-?\d{{1,3}}(?:{_THOU}\d{{3}})+(?:{_DEC}\d+)?")
# 300000, 300000,5 or 300000.5; three or more digits after a comma read
# as English grouping and are rejected
_PLAIN = re.compile(rf"-?\d+(?:{_DEC}\d{{1,2}}|\.\d+)?")


def _parse_currency(s: str) -> float:
    """Parse an amount written the way ``cli.fmt`` prints it.

    Dutch grouping (``€ 300.000,50``) and plain numbers are accepted;
    anything else is NaN so validation rejects it.
    """
    text = re.sub(r"\s", "", str(s).replace(cfg.CURRENCY_SYMBOL, ""))
    if _GROUPED.fullmatch(text):
        text = text.replace(cfg.THOUSANDS_SEP, "")
    elif not _PLAIN.fullmatch(text):
        return float("nan")
    return _parse_number(text.replace(cfg.DECIMAL_SEP, "."))


def _parse_percent(s: str) -> float:
    return _parse_number(str(s).replace("%", "").strip())


# ─── Validation ──────────────────────────────────────────────────────

def missing_fields(form: Mapping[str, str]) -> List[str]:
    return [name for name in FORM_FIELDS if name not in form]


def parse_form(form: Mapping[str, str]) -> MortgageInput:
    """Validate raw form values and build a ``MortgageInput``.

    Checks run in form order and stop at the first failure.

    Raises
    ------
    MissingFieldsError
        If any expected field is absent from *form*.
    InputError
        If a value is not a number or is out of range.
    """
    missing = missing_fields(form)
    if missing:
        logger.error("Missing form elements: %s", missing)
        raise MissingFieldsError(missing)

    principal = _parse_currency(form["principal"])
    interest_rate = _parse_percent(form["interestRate"])
    payment_type = str(form["paymentType"]).strip().lower()
    term = _parse_number(form["mortgageTerm"])
    tax_rate = _parse_percent(form["taxRate"])
    inflation = _parse_percent(form["inflationRate"])

    # NaN fails every comparison, so "not (x > 0)" also rejects NaN
    if not (np.isfinite(principal) and principal > 0):
        raise InputError("principal", "Please enter a valid mortgage amount")
    if not (np.isfinite(interest_rate) and interest_rate >= 0):
        raise InputError("interestRate", "Please enter a valid interest rate")
    if not (np.isfinite(term) and term > 0):
        raise InputError("mortgageTerm", "Please enter a valid mortgage term")
    if not (cfg.TAX_RATE_MIN <= tax_rate <= cfg.TAX_RATE_MAX):
        raise InputError("taxRate", "Please enter a valid tax rate (0-100)")
    if not (cfg.INFLATION_RATE_MIN <= inflation <= cfg.INFLATION_RATE_MAX):
        raise InputError("inflationRate", "Please enter a valid inflation rate (0-20)")
    if payment_type not in cfg.PAYMENT_TYPES:
        raise InputError("paymentType", "Please choose annuity or linear")

    return MortgageInput(
        principal=principal,
        interest_rate=interest_rate,
        term_years=term,
        payment_type=payment_type,
        tax_rate=tax_rate / 100,
        inflation_rate=inflation / 100,
    )


def form_values(form: Mapping[str, str]) -> Dict[str, str]:
    """Raw string values for every known field.

    Defaults fill in absent fields only; a field submitted blank stays
    blank.
    """
    return {
        name: str(form[name]) if name in form else default
        for name, default in FORM_FIELDS.items()
    }
