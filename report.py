"""
PDF report generation and reusable chart rendering for the Dutch
mortgage calculator.

Provides:
  - Four-page PDF report (generate_pdf)
  - Base64-encoded chart images for web embedding (get_web_charts)
  - Individual chart renderers reusable by both CLI and web
"""

from __future__ import annotations

import base64
import io
import logging
from typing import Any, Dict, List

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
from matplotlib.backends.backend_pdf import PdfPages
from matplotlib.ticker import FuncFormatter

import config as cfg
from mortgage import MortgageResult, TotalSummary, YearlySummary

logger = logging.getLogger(__name__)

# ═══════════════════════════════════════════════════════════════════
# Style constants
# ═══════════════════════════════════════════════════════════════════

BG = "#0a101f"
CARD = "#131b2e"
TEXT = "#f1f5f9"
TEXT2 = "#cbd5e1"
SLATE = "#94a3b8"
BORDER = "#1e293b"

# Series colours
PRINCIPAL_C = "#667eea"
INTEREST_C = "#764ba2"
BRUTO_C = "#818cf8"
NET_C = "#34d399"
LINE_INTEREST_C = "#f87171"
LINE_PRINCIPAL_C = "#38bdf8"
REAL_C = "#fbbf24"

A4W, A4H = 8.27, 11.69
WEB_W, WEB_H = 10, 6


# ═══════════════════════════════════════════════════════════════════
# Formatters
# ═══════════════════════════════════════════════════════════════════

def _eur(x: float) -> str:
    """Whole euros with Dutch thousands grouping."""
    sign = "-" if round(x) < 0 else ""
    return f"{cfg.CURRENCY_SYMBOL} {sign}{abs(x):,.0f}".replace(",", cfg.THOUSANDS_SEP)


def _eur_k_fmt(x, _):
    return f"{cfg.CURRENCY_SYMBOL}{x / 1e3:.0f}k"


EUR_K_FMT = FuncFormatter(_eur_k_fmt)


# ═══════════════════════════════════════════════════════════════════
# Style helpers
# ═══════════════════════════════════════════════════════════════════

def _style(fig, *axes):
    """Apply dark theme to figure and all axes."""
    fig.patch.set_facecolor(BG)
    for ax in axes:
        ax.set_facecolor(CARD)
        ax.tick_params(colors=TEXT, labelsize=8)
        ax.xaxis.label.set_color(TEXT)
        ax.yaxis.label.set_color(TEXT)
        ax.title.set_color(TEXT)
        for spine in ax.spines.values():
            spine.set_color(BORDER)
        ax.grid(True, alpha=0.15, color=SLATE)


def _legend(ax, loc="upper right"):
    ax.legend(loc=loc, fontsize=8, facecolor=CARD, edgecolor=BORDER, labelcolor=TEXT)


# ═══════════════════════════════════════════════════════════════════
# Charts
# ═══════════════════════════════════════════════════════════════════

def chart_distribution(totals: TotalSummary, figsize=(WEB_W * 0.6, WEB_H)) -> plt.Figure:
    """Pie chart of principal vs total interest over the term."""
    fig, ax = plt.subplots(figsize=figsize, constrained_layout=True)
    fig.patch.set_facecolor(BG)

    values = [totals.principal, totals.total_interest]
    labels = ["Principal", "Interest"]
    total = sum(values)

    def _label(p):
        return f"{p:.1f}%\n{_eur(p * total / 100)}"

    wedges, _, autotexts = ax.pie(
        values,
        colors=[PRINCIPAL_C, INTEREST_C],
        autopct=_label,
        startangle=90,
        counterclock=False,
        wedgeprops=dict(edgecolor=BG, linewidth=2),
        textprops=dict(color=TEXT, fontsize=9),
    )
    for t in autotexts:
        t.set_fontweight("bold")
    ax.axis("equal")
    ax.set_title("Principal vs Interest", fontsize=13, pad=12, color=TEXT)
    ax.legend(wedges, labels, loc="lower center", bbox_to_anchor=(0.5, -0.08),
              ncol=2, fontsize=9, facecolor=CARD, edgecolor=BORDER, labelcolor=TEXT)
    return fig


def chart_yearly(
    yearly: List[YearlySummary],
    show_real: bool = False,
    figsize=(WEB_W, WEB_H),
) -> plt.Figure:
    """Per-year bruto, net, interest and principal trends."""
    fig, ax = plt.subplots(figsize=figsize, constrained_layout=True)
    _style(fig, ax)

    years = [y.year for y in yearly]
    bruto = [y.bruto_payment for y in yearly]
    net = [y.net_payment for y in yearly]

    ax.plot(years, bruto, color=BRUTO_C, linewidth=2.2, label="Bruto Payment")
    ax.fill_between(years, bruto, color=BRUTO_C, alpha=0.10)
    ax.plot(years, net, color=NET_C, linewidth=2.2, label="Net Payment")
    ax.fill_between(years, net, color=NET_C, alpha=0.10)
    ax.plot(years, [y.total_interest for y in yearly], color=LINE_INTEREST_C,
            linewidth=1.8, label="Interest")
    ax.plot(years, [y.total_principal for y in yearly], color=LINE_PRINCIPAL_C,
            linewidth=1.8, label="Principal")
    if show_real:
        ax.plot(years, [y.real_net_payment for y in yearly], color=REAL_C,
                linewidth=1.6, linestyle="--", label="Net Payment (real)")

    ax.set_ylim(bottom=0)
    ax.yaxis.set_major_formatter(EUR_K_FMT)
    ax.set_xlabel("Year")
    ax.set_ylabel("Payment per year")
    ax.set_title("Yearly Payments", fontsize=13, pad=12)
    _legend(ax)
    return fig


# ═══════════════════════════════════════════════════════════════════
# PDF pages
# ═══════════════════════════════════════════════════════════════════

def _page_summary(result: MortgageResult, d: Dict[str, Any],
                  figsize=(A4W, A4H)) -> plt.Figure:
    inputs = result.inputs
    fig = plt.figure(figsize=figsize)
    fig.patch.set_facecolor(BG)

    fig.text(0.50, 0.93, "Dutch Mortgage Calculator",
             ha="center", fontsize=18, color=TEXT, fontweight="bold")
    fig.text(0.50, 0.91, f"{inputs.payment_type.title()} mortgage report",
             ha="center", fontsize=11, color=TEXT2)

    sections = [
        ("Your Mortgage", [
            f"Amount: {_eur(inputs.principal)}  |  Rate: {inputs.interest_rate:.2f}%  |  "
            f"Term: {inputs.term_years:g} years",
            f"Deduction rate: {inputs.tax_rate * 100:.1f}%  |  "
            f"Inflation: {inputs.inflation_rate * 100:.1f}%",
        ]),
        ("Monthly", [
            f"Average bruto: {_eur(d['avg_monthly_bruto'])}  |  "
            f"Average net: {_eur(d['avg_monthly_net'])}",
            f"First month: {_eur(d['monthly_payment'])} "
            f"({_eur(d['monthly_interest'])} interest + "
            f"{_eur(d['monthly_principal'])} principal)",
        ]),
        ("First Year", [
            f"Bruto: {_eur(d['yearly_bruto'])}  |  "
            f"Tax deduction: {_eur(d['yearly_tax_deduction'])}  |  "
            f"Net: {_eur(d['yearly_net'])}",
        ]),
        ("Total Over the Term", [
            f"Bruto: {_eur(d['total_bruto'])}  |  Interest: {_eur(d['total_interest'])}",
            f"Tax deduction: {_eur(d['total_tax_deduction'])}  |  "
            f"Net: {_eur(d['total_net'])}",
        ]),
    ]
    if d["show_real"]:
        sections.append(("In Today's Money", [
            f"Bruto: {_eur(d['total_real_bruto'])}  |  "
            f"Net: {_eur(d['total_real_net'])}  |  "
            f"Tax deduction: {_eur(d['total_real_tax_deduction'])}",
        ]))

    y = 0.85
    for title, lines in sections:
        fig.text(0.08, y, title, fontsize=13, color=TEXT, fontweight="bold")
        y -= 0.028
        for line in lines:
            fig.text(0.10, y, line, fontsize=9, color=TEXT2)
            y -= 0.024
        y -= 0.02

    fig.text(0.50, 0.04, "For illustrative purposes only. Not financial advice.",
             ha="center", fontsize=8, color=SLATE)
    return fig


def _page_yearly_table(d: Dict[str, Any], figsize=(A4W, A4H)) -> plt.Figure:
    fig, ax = plt.subplots(figsize=figsize, constrained_layout=True)
    fig.patch.set_facecolor(BG)
    ax.set_facecolor(BG)
    ax.axis("off")
    ax.set_title("Yearly Overview", fontsize=14, pad=10, color=TEXT)

    cols = ["Year", "Bruto", "Interest", "Principal", "Deduction", "Net", "Remaining"]
    cell_data = []
    for y in d["rows"]:
        cell_data.append([
            str(y.year),
            _eur(y.bruto_payment),
            _eur(y.total_interest),
            _eur(y.total_principal),
            _eur(y.tax_deduction),
            _eur(y.net_payment),
            _eur(y.remaining_debt),
        ])
    t = d["totals_row"]
    cell_data.append([
        "Total", _eur(t["bruto"]), _eur(t["interest"]), _eur(t["principal"]),
        _eur(t["tax_deduction"]), _eur(t["net"]), "-",
    ])

    table = ax.table(cellText=cell_data, colLabels=cols,
                     loc="upper center", cellLoc="right")
    table.auto_set_font_size(False)
    table.set_fontsize(7)
    table.scale(1, 1.15)

    last_row = len(cell_data)
    for (row, col), cell in table.get_celld().items():
        cell.set_edgecolor(BORDER)
        if row == 0:
            cell.set_facecolor(BG)
            cell.set_text_props(fontweight="bold", color=SLATE)
        else:
            cell.set_facecolor(CARD)
            color = TEXT
            if col == 4:
                color = NET_C
            elif col == 6:
                color = LINE_INTEREST_C
            cell.set_text_props(color=color,
                                fontweight="bold" if row == last_row else "normal")
    return fig


# ═══════════════════════════════════════════════════════════════════
# Public API
# ═══════════════════════════════════════════════════════════════════

def figure_to_base64(fig: plt.Figure) -> str:
    """Convert a matplotlib figure to a base64-encoded PNG string."""
    buf = io.BytesIO()
    fig.savefig(buf, format="png", facecolor=fig.get_facecolor(),
                dpi=150, bbox_inches="tight")
    buf.seek(0)
    b64 = base64.b64encode(buf.read()).decode()
    buf.close()
    return b64


def generate_pdf(
    result: MortgageResult,
    d: Dict[str, Any],
    path: str = cfg.PDF_PATH,
) -> str:
    """Generate the full PDF report. Returns the file path."""
    pages = [
        _page_summary(result, d),
        _page_yearly_table(d),
        chart_distribution(result.totals, figsize=(A4W, A4H * 0.6)),
        chart_yearly(result.yearly, d["show_real"], figsize=(A4W, A4H * 0.6)),
    ]
    try:
        with PdfPages(path) as pdf:
            for fig in pages:
                pdf.savefig(fig, facecolor=fig.get_facecolor())
    finally:
        for fig in pages:
            plt.close(fig)
    return path


def get_web_charts(result: MortgageResult, d: Dict[str, Any]) -> Dict[str, str]:
    """Return base64-encoded PNG chart images for web embedding.

    Keys:
      ``distribution``  principal vs interest pie
      ``yearly``        per-year payment trends

    A chart that fails to render is logged and left out.
    """
    renderers = {
        "distribution": lambda: chart_distribution(result.totals),
        "yearly": lambda: chart_yearly(result.yearly, d["show_real"]),
    }

    images = {}
    for name, render in renderers.items():
        fig = None
        try:
            fig = render()
            images[name] = figure_to_base64(fig)
        except Exception:
            logger.exception("Error creating %s chart", name)
        finally:
            if fig is not None:
                plt.close(fig)
    return images
