"""
Constants for the Dutch mortgage calculator.

All monetary values in EUR. Rates entered in the form are percentages;
the engine works with fractions for tax and inflation.
"""

import os

# ── Form defaults (raw strings, as typed into the form) ──────────────
DEFAULT_PRINCIPAL = "300000"
DEFAULT_INTEREST_RATE = "4.0"
DEFAULT_PAYMENT_TYPE = "annuity"
DEFAULT_TERM_YEARS = "30"
DEFAULT_TAX_RATE = "37"            # top box 1 deduction rate, percent
DEFAULT_INFLATION_RATE = "0"

PAYMENT_TYPES = ("annuity", "linear")

# ── Validation bounds ────────────────────────────────────────────────
TAX_RATE_MIN = 0.0
TAX_RATE_MAX = 100.0               # percent
INFLATION_RATE_MIN = 0.0
INFLATION_RATE_MAX = 20.0          # percent

# Inflation at or below this fraction means real == nominal; real
# columns are hidden.
REAL_VALUE_THRESHOLD = 0.0

# ── Currency ─────────────────────────────────────────────────────────
CURRENCY_SYMBOL = "€"
THOUSANDS_SEP = "."                # nl-NL grouping
DECIMAL_SEP = ","

# ── Persisted form state ─────────────────────────────────────────────
STORAGE_KEY = "mortgageCalculatorConfig"
STORAGE_PATH = os.path.join(os.path.expanduser("~"), ".mortgage_calculator.json")

# ── Output ───────────────────────────────────────────────────────────
PDF_PATH = "mortgage_report.pdf"

# ── Web server ───────────────────────────────────────────────────────
HOST = "127.0.0.1"
PORT = 5000

LOG_LEVEL = "INFO"
