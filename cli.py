"""
CLI interface and shared display-data computation for the Dutch
mortgage calculator.
"""

from __future__ import annotations

import logging
import sys
from typing import Any, Dict, List, Mapping, Optional, Tuple

import numpy as np

import config as cfg
import tax
from forms import FORM_FIELDS, InputError, form_values, parse_form
from mortgage import MortgageInput, MortgageResult, calculate
import report
import storage

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════
# Formatting helpers
# ═══════════════════════════════════════════════════════════════════

_NL_SEPARATORS = str.maketrans({",": cfg.THOUSANDS_SEP, ".": cfg.DECIMAL_SEP})


def fmt(val: Any, decimals: int = 0) -> str:
    """Format a number as Dutch currency, e.g. ``€ 1.432``.

    Missing or non-numeric values render as ``€ 0``.
    """
    try:
        num = float(val)
    except (TypeError, ValueError):
        num = float("nan")
    if np.isnan(num):
        num = 0.0

    body = f"{abs(num):,.{decimals}f}".translate(_NL_SEPARATORS)
    sign = "-" if round(num, decimals) < 0 else ""
    return f"{cfg.CURRENCY_SYMBOL} {sign}{body}"


def pct(val: float, decimals: int = 1) -> str:
    return f"{val:.{decimals}f}%"


# ═══════════════════════════════════════════════════════════════════
# Input collection (CLI)
# ═══════════════════════════════════════════════════════════════════

PROMPT_LABELS = {
    "principal": "Mortgage amount (EUR)",
    "interestRate": "Annual interest rate %",
    "paymentType": "Payment type",
    "mortgageTerm": "Mortgage term (years)",
    "taxRate": "Interest deduction tax rate %",
    "inflationRate": "Expected inflation %/yr",
}


def _prompt_raw(label: str, default: str) -> str:
    raw = input(f"  {label} [{default}]: ").strip()
    return raw or default


def _prompt_choice(label: str, options: Tuple[str, ...], default: str) -> str:
    opts = "/".join(options)
    while True:
        raw = input(f"  {label} ({opts}) [{default}]: ").strip().lower()
        if not raw:
            return default
        if raw in options:
            return raw
        print(f"    Choose from: {opts}")


def _prompt_field(name: str, default: str) -> str:
    if name == "paymentType":
        return _prompt_choice(PROMPT_LABELS[name], cfg.PAYMENT_TYPES, default)
    return _prompt_raw(PROMPT_LABELS[name], default)


def collect_inputs(
    defaults: Optional[Mapping[str, str]] = None,
) -> Tuple[MortgageInput, Dict[str, str]]:
    """Prompt for every field; re-prompt a field until it validates.

    Returns the parsed inputs and the raw strings that produced them.
    """
    values = form_values(defaults or {})
    print("\n  Enter your mortgage details (press Enter for defaults):\n")

    for name in FORM_FIELDS:
        values[name] = _prompt_field(name, values[name])

    while True:
        try:
            return parse_form(values), values
        except InputError as exc:
            print(f"    {exc.message}")
            values[exc.field] = _prompt_field(exc.field, FORM_FIELDS[exc.field])


# ═══════════════════════════════════════════════════════════════════
# Shared display-data computation (used by CLI and web app)
# ═══════════════════════════════════════════════════════════════════

def _totals_row(result: MortgageResult) -> Dict[str, float]:
    """Sum the yearly rows for the table footer."""
    yearly = result.yearly
    return {
        "bruto": sum(y.bruto_payment for y in yearly),
        "interest": sum(y.total_interest for y in yearly),
        "principal": sum(y.total_principal for y in yearly),
        "tax_deduction": sum(y.tax_deduction for y in yearly),
        "net": sum(y.net_payment for y in yearly),
        "real_net": sum(y.real_net_payment for y in yearly),
    }


def compute_display_data(result: MortgageResult) -> Dict[str, Any]:
    """Extract every figure needed for the output sections."""
    inputs = result.inputs
    totals = result.totals
    first_year = result.yearly[0]
    n = result.total_months

    return {
        # Inputs echo
        "principal": inputs.principal,
        "interest_rate": inputs.interest_rate,
        "payment_type": inputs.payment_type,
        "term_years": inputs.term_years,
        "total_months": n,
        "tax_rate": inputs.tax_rate,
        "inflation_rate": inputs.inflation_rate,
        "show_real": tax.shows_real_values(inputs.inflation_rate),
        # Average monthly
        "avg_monthly_bruto": totals.bruto_payment / n,
        "avg_monthly_net": totals.net_payment / n,
        "avg_monthly_tax_deduction": totals.tax_deduction / n,
        "avg_monthly_real_net": totals.real_net_payment / n,
        # First month
        "monthly_payment": result.first_month.payment,
        "monthly_interest": result.first_month.interest,
        "monthly_principal": result.first_month.principal,
        # First year
        "yearly_bruto": first_year.bruto_payment,
        "yearly_net": first_year.net_payment,
        "yearly_tax_deduction": first_year.tax_deduction,
        "yearly_interest": first_year.total_interest,
        "yearly_principal": first_year.total_principal,
        # Total over the term
        "total_bruto": totals.bruto_payment,
        "total_net": totals.net_payment,
        "total_tax_deduction": totals.tax_deduction,
        "total_interest": totals.total_interest,
        "total_principal": totals.total_principal,
        "total_real_bruto": totals.real_bruto_payment,
        "total_real_net": totals.real_net_payment,
        "total_real_tax_deduction": totals.real_tax_deduction,
        "total_real_interest": totals.real_interest,
        "interest_share": (
            totals.total_interest / totals.total_payment * 100
            if totals.total_payment > 0 else 0.0
        ),
        # Table
        "rows": result.yearly,
        "totals_row": _totals_row(result),
    }


# ═══════════════════════════════════════════════════════════════════
# Box-drawing CLI output
# ═══════════════════════════════════════════════════════════════════

W = 78  # box width (characters)
H_BAR = "═"


def _box_top(title: str) -> str:
    inner = W - 2
    return (
        f"╔{H_BAR * inner}╗\n"
        f"║  {title:<{inner - 2}}║\n"
        f"╠{H_BAR * inner}╣"
    )


def _box_line(text: str = "") -> str:
    inner = W - 4
    if len(text) > inner:
        text = text[:inner]
    return f"║  {text:<{inner}}║"


def _box_row(label: str, value: str, lw: int = 38) -> str:
    return _box_line(f"{label:<{lw}}{value}")


def _box_bottom() -> str:
    return f"╚{H_BAR * (W - 2)}╝"


def _print_section(title: str, rows: List[str]) -> None:
    """Print a titled box with content rows."""
    print(_box_top(title))
    for r in rows:
        print(r)
    print(_box_bottom())
    print()


# ═══════════════════════════════════════════════════════════════════
# CLI Section Printers
# ═══════════════════════════════════════════════════════════════════

def _print_inputs(d: Dict[str, Any]) -> None:
    rows = [
        _box_row("Mortgage amount", fmt(d["principal"])),
        _box_row("Interest rate", pct(d["interest_rate"], 2)),
        _box_row("Payment type", d["payment_type"].title()),
        _box_row("Term", f"{d['term_years']:g} years ({d['total_months']} months)"),
        _box_row("Interest deduction rate", pct(d["tax_rate"] * 100)),
        _box_row("Inflation", pct(d["inflation_rate"] * 100)),
    ]
    _print_section("YOUR MORTGAGE", rows)


def _print_monthly(d: Dict[str, Any]) -> None:
    rows = [
        _box_row("Average monthly (bruto)", fmt(d["avg_monthly_bruto"])),
        _box_row("Average monthly tax deduction", fmt(d["avg_monthly_tax_deduction"])),
        _box_row("Average monthly (net)", fmt(d["avg_monthly_net"])),
    ]
    if d["show_real"]:
        rows.append(_box_row("Average monthly (net, real)", fmt(d["avg_monthly_real_net"])))
    rows += [
        _box_line(),
        _box_row("First month payment", fmt(d["monthly_payment"])),
        _box_row("  Interest", fmt(d["monthly_interest"])),
        _box_row("  Principal", fmt(d["monthly_principal"])),
    ]
    _print_section("MONTHLY PAYMENT", rows)


def _print_first_year(d: Dict[str, Any]) -> None:
    rows = [
        _box_row("Bruto payment", fmt(d["yearly_bruto"])),
        _box_row("  Interest", fmt(d["yearly_interest"])),
        _box_row("  Principal", fmt(d["yearly_principal"])),
        _box_row("Tax deduction", fmt(d["yearly_tax_deduction"])),
        _box_row("Net payment", fmt(d["yearly_net"])),
    ]
    _print_section("FIRST YEAR", rows)


def _print_totals(d: Dict[str, Any]) -> None:
    rows = [
        _box_row("Total bruto payment", fmt(d["total_bruto"])),
        _box_row("  Interest", f"{fmt(d['total_interest'])} ({pct(d['interest_share'])})"),
        _box_row("  Principal", fmt(d["total_principal"])),
        _box_row("Total tax deduction", fmt(d["total_tax_deduction"])),
        _box_row("Total net payment", fmt(d["total_net"])),
    ]
    if d["show_real"]:
        rows += [
            _box_line(),
            _box_line(f"In today's money ({pct(d['inflation_rate'] * 100)} inflation):"),
            _box_row("  Bruto payment", fmt(d["total_real_bruto"])),
            _box_row("  Tax deduction", fmt(d["total_real_tax_deduction"])),
            _box_row("  Net payment", fmt(d["total_real_net"])),
        ]
    _print_section("TOTAL OVER THE TERM", rows)


def format_yearly_table(d: Dict[str, Any]) -> List[str]:
    """Plain-text yearly breakdown with a trailing totals row."""
    header = (
        f"{'Year':>4}  {'Bruto':>11}  {'Interest':>11}  {'Principal':>11}  "
        f"{'Deduction':>11}  {'Net':>11}  {'Remaining':>11}"
    )
    lines = [header, "-" * len(header)]
    for y in d["rows"]:
        lines.append(
            f"{y.year:>4}  {fmt(y.bruto_payment):>11}  {fmt(y.total_interest):>11}  "
            f"{fmt(y.total_principal):>11}  {fmt(y.tax_deduction):>11}  "
            f"{fmt(y.net_payment):>11}  {fmt(y.remaining_debt):>11}"
        )
    t = d["totals_row"]
    lines.append("-" * len(header))
    lines.append(
        f"{'Tot':>4}  {fmt(t['bruto']):>11}  {fmt(t['interest']):>11}  "
        f"{fmt(t['principal']):>11}  {fmt(t['tax_deduction']):>11}  "
        f"{fmt(t['net']):>11}  {'-':>11}"
    )
    return lines


def _print_report_location(pdf_path: Optional[str]) -> None:
    rows = []
    if pdf_path:
        rows.append(_box_line(f"PDF report saved to: {pdf_path}"))
    else:
        rows.append(_box_line("Charts available in the web app:"))
        rows.append(_box_line("  python main.py  (opens localhost:5000)"))
    _print_section("CHARTS", rows)


# ═══════════════════════════════════════════════════════════════════
# Main CLI entry point
# ═══════════════════════════════════════════════════════════════════

def run_cli(
    storage_path: str = cfg.STORAGE_PATH,
    pdf_path: str = cfg.PDF_PATH,
) -> int:
    """Run the full CLI workflow. Returns a process exit code."""
    # Ensure box-drawing characters render on Windows
    try:
        sys.stdout.reconfigure(encoding="utf-8")
    except (AttributeError, OSError, ValueError):
        pass
    print()
    print("=" * W)
    print("  Dutch Mortgage Calculator: Annuity vs Linear")
    print("=" * W)

    inputs, values = collect_inputs(storage.load_form_values(storage_path))
    storage.save_form_values(values, storage_path)

    try:
        result = calculate(inputs)
        d = compute_display_data(result)
    except Exception as exc:
        logger.exception("Error calculating mortgage")
        print(f"\n  An error occurred: {exc}\n")
        return 1

    print()
    _print_inputs(d)
    _print_monthly(d)
    _print_first_year(d)
    _print_totals(d)

    for line in format_yearly_table(d):
        print(f"  {line}")
    print()

    print("  Generating PDF report...")
    try:
        saved = report.generate_pdf(result, d, pdf_path)
    except Exception:
        logger.exception("Error generating PDF report")
        saved = None
    _print_report_location(saved)
    return 0


if __name__ == "__main__":
    sys.exit(run_cli())
