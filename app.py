"""
Flask web application for the Dutch mortgage calculator.

Single-file app using render_template_string.  Run via ``python main.py``
which starts the dev server on localhost:5000.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict

from flask import Flask, render_template_string, request, send_file

import config as cfg
from cli import compute_display_data, fmt, pct
from forms import InputError, MissingFieldsError, form_values, parse_form
from mortgage import calculate
import report
import storage

logger = logging.getLogger(__name__)

app = Flask(__name__)
app.config.update(
    STORAGE_PATH=cfg.STORAGE_PATH,
    PDF_PATH=cfg.PDF_PATH,
)


# ═══════════════════════════════════════════════════════════════════
# HTML Template
# ═══════════════════════════════════════════════════════════════════

HTML_TEMPLATE = r"""
<!DOCTYPE html>
<html lang="nl">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>Hypotheek Calculator: Annuity vs Linear</title>
<link rel="preconnect" href="https://fonts.googleapis.com">
<link rel="preconnect" href="https://fonts.gstatic.com" crossorigin>
<link href="https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600;700;800&display=swap" rel="stylesheet">
<style>
  *{margin:0;padding:0;box-sizing:border-box}

  :root{
    --bg-deep:#050816;
    --bg-surface:rgba(15,23,42,0.55);
    --bg-input:rgba(8,11,22,0.85);
    --border-subtle:rgba(99,102,241,0.1);
    --border-hover:rgba(99,102,241,0.25);
    --text-primary:#f1f5f9;
    --text-secondary:#94a3b8;
    --text-muted:#64748b;
    --indigo:#818cf8;
    --indigo-deep:#6366f1;
    --violet:#8b5cf6;
    --emerald:#34d399;
    --emerald-deep:#10b981;
    --amber:#fbbf24;
    --red:#f87171;
    --radius-lg:16px;
    --radius-md:10px;
  }

  body{
    background:var(--bg-deep);color:var(--text-primary);
    font-family:'Inter',system-ui,-apple-system,sans-serif;
    line-height:1.6;min-height:100vh;
  }

  .container{max-width:1140px;margin:0 auto;padding:2rem 1.5rem}

  /* ── hero header ── */
  .hero{text-align:center;padding:1.5rem 0 2.5rem}
  .hero h1{
    font-size:clamp(1.5rem,4vw,2.5rem);font-weight:800;
    letter-spacing:-.035em;line-height:1.15;
    background:linear-gradient(135deg,#e2e8f0 0%,#818cf8 45%,#34d399 100%);
    -webkit-background-clip:text;-webkit-text-fill-color:transparent;
    background-clip:text;
  }
  .hero-sub{color:var(--text-secondary);margin-top:.6rem;font-size:.92rem}

  /* ── glass cards ── */
  .card{
    background:var(--bg-surface);
    border:1px solid var(--border-subtle);
    border-radius:var(--radius-lg);padding:1.8rem;
    margin-bottom:1.4rem;
  }
  .card:hover{border-color:var(--border-hover)}

  h2{font-size:1.1rem;font-weight:700;margin-bottom:1rem;letter-spacing:-.015em}

  /* ── form ── */
  .form-grid{
    display:grid;grid-template-columns:repeat(auto-fill,minmax(260px,1fr));
    gap:1rem 1.5rem;
  }
  .form-group{display:flex;flex-direction:column}
  .form-group label{
    font-size:.78rem;color:var(--text-secondary);margin-bottom:.3rem;font-weight:500;
  }
  .form-group input,.form-group select{
    background:var(--bg-input);
    border:1px solid rgba(71,85,105,.35);border-radius:var(--radius-md);
    color:var(--text-primary);padding:.6rem .85rem;font-size:.88rem;font-family:inherit;
  }
  .form-group input:focus,.form-group select:focus{
    outline:none;border-color:var(--indigo-deep);
    box-shadow:0 0 0 3px rgba(99,102,241,.12);
  }
  .form-group.invalid input,.form-group.invalid select{border-color:var(--red)}

  /* ── buttons ── */
  .btn{
    display:inline-flex;align-items:center;justify-content:center;gap:.5rem;
    padding:.75rem 2rem;border:none;border-radius:var(--radius-md);
    font-size:.95rem;font-weight:600;cursor:pointer;font-family:inherit;
    text-decoration:none;
  }
  .btn-primary{
    background:linear-gradient(135deg,var(--indigo-deep),var(--violet));
    color:#fff;box-shadow:0 4px 20px rgba(99,102,241,.3);
  }
  .btn-success{
    background:linear-gradient(135deg,var(--emerald-deep),var(--emerald));
    color:#fff;box-shadow:0 4px 20px rgba(16,185,129,.25);
  }

  /* ── alerts ── */
  .alert{
    background:rgba(248,113,113,.08);border:1px solid rgba(248,113,113,.3);
    border-radius:var(--radius-md);padding:.75rem 1rem;margin-bottom:1.4rem;
    color:#fca5a5;font-size:.88rem;
  }

  /* ── summary grid ── */
  .summary-grid{display:grid;grid-template-columns:repeat(auto-fill,minmax(250px,1fr));gap:1.4rem;margin-bottom:1.4rem}
  .summary-grid .card{margin-bottom:0}

  /* ── stat rows ── */
  .stat-row{
    display:flex;justify-content:space-between;align-items:center;
    padding:.5rem 0;border-bottom:1px solid rgba(51,65,85,.3);
  }
  .stat-row:last-child{border-bottom:none}
  .stat-label{color:var(--text-secondary);font-size:.86rem}
  .stat-value{font-weight:600;font-size:.86rem;font-variant-numeric:tabular-nums}
  .stat-value.deduction{color:var(--emerald)}
  .stat-value.real{color:var(--amber)}

  /* ── yearly table ── */
  .table-wrap{overflow-x:auto;border-radius:var(--radius-md);border:1px solid rgba(51,65,85,.25)}
  .yearly-table{width:100%;border-collapse:collapse;font-size:.84rem}
  .yearly-table th{
    text-align:right;padding:.65rem .8rem;background:rgba(15,23,42,.45);
    color:var(--text-secondary);font-weight:600;font-size:.76rem;
    text-transform:uppercase;letter-spacing:.05em;
  }
  .yearly-table td{
    text-align:right;padding:.5rem .8rem;border-bottom:1px solid rgba(51,65,85,.15);
    font-variant-numeric:tabular-nums;
  }
  .yearly-table th:first-child,.yearly-table td:first-child{text-align:left}
  .yearly-table .deduction{color:var(--emerald)}
  .yearly-table .net{font-weight:600}
  .yearly-table .remaining{color:var(--red);font-weight:600}
  .yearly-table .real{color:var(--amber)}
  .yearly-table .totals-row td{font-weight:700;border-top:1px solid rgba(99,102,241,.3)}

  /* ── charts ── */
  .chart-grid{display:grid;grid-template-columns:2fr 3fr;gap:1.4rem;margin-bottom:1.4rem}
  @media(max-width:900px){.chart-grid{grid-template-columns:1fr}}
  .chart-grid .card{margin-bottom:0}
  .chart-img{width:100%;border-radius:var(--radius-md)}

  .dl-section{text-align:center;margin:2rem 0}
  .footer{text-align:center;color:var(--text-muted);font-size:.78rem;padding:2rem 0 1rem}
</style>
</head>
<body>
<div class="container">

<header class="hero">
  <h1>Hypotheek Calculator<br>Annuity vs Linear</h1>
  <p class="hero-sub">Monthly costs, interest deduction and real value of a Dutch mortgage</p>
</header>

{% if error %}
<div class="alert" id="errorMessage" role="alert">{{ error }}</div>
{% endif %}

<!-- Input Form -->
<div class="card">
  <h2>Your Mortgage</h2>
  <form method="POST" id="mortgageForm">
    <div class="form-grid">
      <div class="form-group {{ 'invalid' if error_field == 'principal' }}">
        <label for="principal">Mortgage amount (&euro;)</label>
        <input type="text" id="principal" name="principal" value="{{ form.principal }}">
      </div>
      <div class="form-group {{ 'invalid' if error_field == 'interestRate' }}">
        <label for="interestRate">Annual interest rate %</label>
        <input type="number" step="0.01" min="0" id="interestRate" name="interestRate" value="{{ form.interestRate }}">
      </div>
      <div class="form-group {{ 'invalid' if error_field == 'paymentType' }}">
        <label for="paymentType">Payment type</label>
        <select id="paymentType" name="paymentType">
          <option value="annuity" {{ 'selected' if form.paymentType == 'annuity' }}>Annuity</option>
          <option value="linear" {{ 'selected' if form.paymentType == 'linear' }}>Linear</option>
        </select>
      </div>
      <div class="form-group {{ 'invalid' if error_field == 'mortgageTerm' }}">
        <label for="mortgageTerm">Mortgage term (years)</label>
        <input type="number" min="1" id="mortgageTerm" name="mortgageTerm" value="{{ form.mortgageTerm }}">
      </div>
      <div class="form-group {{ 'invalid' if error_field == 'taxRate' }}">
        <label for="taxRate">Interest deduction tax rate %</label>
        <input type="number" step="0.01" min="0" max="100" id="taxRate" name="taxRate" value="{{ form.taxRate }}">
      </div>
      <div class="form-group {{ 'invalid' if error_field == 'inflationRate' }}">
        <label for="inflationRate">Expected inflation %/yr</label>
        <input type="number" step="0.1" min="0" max="20" id="inflationRate" name="inflationRate" value="{{ form.inflationRate }}">
      </div>
    </div>
    <div style="margin-top:1.2rem">
      <button type="submit" class="btn btn-primary">Calculate</button>
    </div>
  </form>
</div>

{% if d %}
<div id="resultsSection">

<div class="summary-grid">
  <div class="card">
    <h2>Average Monthly</h2>
    <div class="stat-row"><span class="stat-label">Payment</span><span class="stat-value" id="avgMonthlyPayment">{{ fmt(d.avg_monthly_bruto) }}</span></div>
    <div class="stat-row"><span class="stat-label">Bruto</span><span class="stat-value" id="avgMonthlyBruto">{{ fmt(d.avg_monthly_bruto) }}</span></div>
    <div class="stat-row"><span class="stat-label">Tax deduction</span><span class="stat-value deduction" id="avgMonthlyTaxDeduction">{{ fmt(d.avg_monthly_tax_deduction) }}</span></div>
    <div class="stat-row"><span class="stat-label">Net</span><span class="stat-value" id="avgMonthlyNet">{{ fmt(d.avg_monthly_net) }}</span></div>
    {% if d.show_real %}
    <div class="stat-row"><span class="stat-label">Net (today's money)</span><span class="stat-value real" id="avgMonthlyRealNet">{{ fmt(d.avg_monthly_real_net) }}</span></div>
    {% endif %}
  </div>

  <div class="card">
    <h2>First Month</h2>
    <div class="stat-row"><span class="stat-label">Payment</span><span class="stat-value" id="monthlyPayment">{{ fmt(d.monthly_payment) }}</span></div>
    <div class="stat-row"><span class="stat-label">Interest</span><span class="stat-value" id="monthlyInterest">{{ fmt(d.monthly_interest) }}</span></div>
    <div class="stat-row"><span class="stat-label">Principal</span><span class="stat-value" id="monthlyPrincipal">{{ fmt(d.monthly_principal) }}</span></div>
  </div>

  <div class="card">
    <h2>First Year</h2>
    <div class="stat-row"><span class="stat-label">Payment</span><span class="stat-value" id="yearlyPayment">{{ fmt(d.yearly_bruto) }}</span></div>
    <div class="stat-row"><span class="stat-label">Bruto</span><span class="stat-value" id="yearlyBruto">{{ fmt(d.yearly_bruto) }}</span></div>
    <div class="stat-row"><span class="stat-label">Tax deduction</span><span class="stat-value deduction" id="yearlyTaxDeduction">{{ fmt(d.yearly_tax_deduction) }}</span></div>
    <div class="stat-row"><span class="stat-label">Net</span><span class="stat-value" id="yearlyNet">{{ fmt(d.yearly_net) }}</span></div>
  </div>

  <div class="card">
    <h2>Total Over {{ '%g'|format(d.term_years) }} Years</h2>
    <div class="stat-row"><span class="stat-label">Payment</span><span class="stat-value" id="totalPayment">{{ fmt(d.total_bruto) }}</span></div>
    <div class="stat-row"><span class="stat-label">Bruto</span><span class="stat-value" id="totalBruto">{{ fmt(d.total_bruto) }}</span></div>
    <div class="stat-row"><span class="stat-label">Interest ({{ pct(d.interest_share) }})</span><span class="stat-value" id="totalInterest">{{ fmt(d.total_interest) }}</span></div>
    <div class="stat-row"><span class="stat-label">Tax deduction</span><span class="stat-value deduction" id="totalTaxDeduction">{{ fmt(d.total_tax_deduction) }}</span></div>
    <div class="stat-row"><span class="stat-label">Net</span><span class="stat-value" id="totalNet">{{ fmt(d.total_net) }}</span></div>
    {% if d.show_real %}
    <div class="stat-row"><span class="stat-label">Bruto (today's money)</span><span class="stat-value real" id="totalRealBruto">{{ fmt(d.total_real_bruto) }}</span></div>
    <div class="stat-row"><span class="stat-label">Net (today's money)</span><span class="stat-value real" id="totalRealNet">{{ fmt(d.total_real_net) }}</span></div>
    {% endif %}
  </div>
</div>

{% if charts %}
<div class="chart-grid">
  {% if charts.distribution %}
  <div class="card">
    <h2>Principal vs Interest</h2>
    <img class="chart-img" id="distributionChart" src="data:image/png;base64,{{ charts.distribution }}" alt="Principal vs Interest">
  </div>
  {% endif %}
  {% if charts.yearly %}
  <div class="card">
    <h2>Yearly Payments</h2>
    <img class="chart-img" id="yearlyChart" src="data:image/png;base64,{{ charts.yearly }}" alt="Yearly Payments">
  </div>
  {% endif %}
</div>
{% endif %}

<div class="card">
  <h2>Yearly Overview</h2>
  <div class="table-wrap">
    <table class="yearly-table">
      <thead>
        <tr>
          <th>Year</th><th>Bruto</th><th>Interest</th><th>Principal</th>
          <th>Tax deduction</th><th>Net</th>
          {% if d.show_real %}<th>Net (real)</th>{% endif %}
          <th>Remaining debt</th>
        </tr>
      </thead>
      <tbody id="yearlyTableBody">
        {% for y in d.rows %}
        <tr>
          <td>{{ y.year }}</td>
          <td>{{ fmt(y.bruto_payment) }}</td>
          <td>{{ fmt(y.total_interest) }}</td>
          <td>{{ fmt(y.total_principal) }}</td>
          <td class="deduction">{{ fmt(y.tax_deduction) }}</td>
          <td class="net">{{ fmt(y.net_payment) }}</td>
          {% if d.show_real %}<td class="real">{{ fmt(y.real_net_payment) }}</td>{% endif %}
          <td class="remaining">{{ fmt(y.remaining_debt) }}</td>
        </tr>
        {% endfor %}
        <tr class="totals-row">
          <td>Total</td>
          <td>{{ fmt(d.totals_row.bruto) }}</td>
          <td>{{ fmt(d.totals_row.interest) }}</td>
          <td>{{ fmt(d.totals_row.principal) }}</td>
          <td class="deduction">{{ fmt(d.totals_row.tax_deduction) }}</td>
          <td>{{ fmt(d.totals_row.net) }}</td>
          {% if d.show_real %}<td class="real">{{ fmt(d.totals_row.real_net) }}</td>{% endif %}
          <td>-</td>
        </tr>
      </tbody>
    </table>
  </div>
</div>

{% if pdf_ready %}
<div class="dl-section">
  <a href="/download-pdf" class="btn btn-success">Download PDF Report</a>
</div>
{% endif %}

</div>
{% endif %}

<div class="footer">For illustrative purposes only. Not financial advice.</div>
</div>

<script>
(function(){
  var KEY={{ storage_key|tojson }};
  var FIELDS={{ fields|tojson }};
  var form=document.getElementById('mortgageForm');
  if(!form) return;

  function el(name){return document.getElementById(name)}

  {% if restore %}
  /* Restore last-used values; corrupted data is dropped */
  try{
    var saved=localStorage.getItem(KEY);
    if(saved){
      var data=JSON.parse(saved);
      FIELDS.forEach(function(name){
        if(el(name) && data[name]) el(name).value=data[name];
      });
    }
  }catch(e){
    localStorage.removeItem(KEY);
  }
  {% endif %}

  form.addEventListener('input',function(){
    try{
      var data={};
      FIELDS.forEach(function(name){ if(el(name)) data[name]=el(name).value; });
      localStorage.setItem(KEY,JSON.stringify(data));
    }catch(e){
      console.error('Error saving form values:',e);
    }
  });
})();
</script>
</body>
</html>
"""


def _render(form: Dict[str, str], status: int = 200, **context: Any):
    page = dict(
        form=form,
        d=None,
        charts={},
        error=None,
        error_field=None,
        pdf_ready=False,
        restore=False,
        storage_key=cfg.STORAGE_KEY,
        fields=list(form),
        fmt=fmt,
        pct=pct,
    )
    page.update(context)
    return render_template_string(HTML_TEMPLATE, **page), status


# ═══════════════════════════════════════════════════════════════════
# Routes
# ═══════════════════════════════════════════════════════════════════

@app.route("/", methods=["GET", "POST"])
def index():
    storage_path = app.config["STORAGE_PATH"]

    if request.method == "GET":
        saved = storage.load_form_values(storage_path)
        return _render(form_values(saved), restore=not saved)

    # POST: validate, then calculate
    raw = request.form.to_dict()
    form = form_values(raw)
    try:
        inputs = parse_form(raw)
    except MissingFieldsError as exc:
        return _render(form, 400, error=exc.message)
    except InputError as exc:
        return _render(form, 400, error=exc.message, error_field=exc.field)

    storage.save_form_values(form, storage_path)

    try:
        result = calculate(inputs)
        d = compute_display_data(result)
        charts = report.get_web_charts(result, d)
    except Exception as exc:
        logger.exception("Error calculating mortgage")
        return _render(form, 500, error=f"An error occurred: {exc}")

    pdf_ready = True
    try:
        report.generate_pdf(result, d, app.config["PDF_PATH"])
    except Exception:
        logger.exception("Error generating PDF report")
        pdf_ready = False

    return _render(form, d=d, charts=charts, pdf_ready=pdf_ready)


@app.route("/download-pdf")
def download_pdf():
    path = os.path.abspath(app.config["PDF_PATH"])
    if os.path.exists(path):
        return send_file(path, as_attachment=True, download_name="mortgage_report.pdf")
    return "No report generated yet. Run a calculation first.", 404


# ═══════════════════════════════════════════════════════════════════
# Entry point
# ═══════════════════════════════════════════════════════════════════

def run_web(
    host: str = cfg.HOST,
    port: int = cfg.PORT,
    debug: bool = True,
    open_browser: bool = True,
) -> None:
    """Start the Flask development server and open browser."""
    import webbrowser
    import threading

    url = f"http://{host}:{port}"
    print(f"Starting web app at {url}")
    if open_browser:
        threading.Timer(1.0, lambda: webbrowser.open(url)).start()
    app.run(host=host, port=port, debug=debug)


if __name__ == "__main__":
    run_web()
