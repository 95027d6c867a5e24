"""Canonical fixtures used across the test suite.

Fixture: EUR 300K mortgage, 4% rate, 30 years, 37% interest deduction,
no inflation.
"""

import pytest

from mortgage import MortgageInput


@pytest.fixture
def annuity_inputs() -> MortgageInput:
    return MortgageInput(
        principal=300_000,
        interest_rate=4.0,
        term_years=30,
        payment_type="annuity",
        tax_rate=0.37,
        inflation_rate=0.0,
    )


@pytest.fixture
def linear_inputs() -> MortgageInput:
    return MortgageInput(
        principal=300_000,
        interest_rate=4.0,
        term_years=30,
        payment_type="linear",
        tax_rate=0.37,
        inflation_rate=0.0,
    )


@pytest.fixture
def raw_form() -> dict:
    """Form values exactly as a browser would submit them."""
    return {
        "principal": "300000",
        "interestRate": "4",
        "paymentType": "annuity",
        "mortgageTerm": "30",
        "taxRate": "37",
        "inflationRate": "2",
    }


@pytest.fixture
def storage_path(tmp_path) -> str:
    return str(tmp_path / "form_state.json")
