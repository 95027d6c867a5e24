import os

import pytest

import cli
from cli import compute_display_data, fmt, format_yearly_table, pct, run_cli
from mortgage import MortgageInput, calculate
from storage import load_form_values, save_form_values


def _answers(monkeypatch, answers):
    it = iter(answers)
    monkeypatch.setattr("builtins.input", lambda _prompt="": next(it))


class TestFormatting:
    def test_whole_euros_with_dutch_grouping(self):
        assert fmt(1432.2458) == "€ 1.432"
        assert fmt(300_000) == "€ 300.000"
        assert fmt(1_234_567.89) == "€ 1.234.568"

    def test_decimals_use_comma(self):
        assert fmt(1234.5, 2) == "€ 1.234,50"

    def test_small_and_negative(self):
        assert fmt(0) == "€ 0"
        assert fmt(999.4) == "€ 999"
        assert fmt(-1500) == "€ -1.500"

    def test_missing_values_render_zero(self):
        assert fmt(None) == "€ 0"
        assert fmt(float("nan")) == "€ 0"
        assert fmt("abc") == "€ 0"

    def test_numeric_strings(self):
        assert fmt("2500") == "€ 2.500"

    def test_pct(self):
        assert pct(37) == "37.0%"
        assert pct(3.456, 2) == "3.46%"


class TestDisplayData:
    def test_slots(self, annuity_inputs):
        result = calculate(annuity_inputs)
        d = compute_display_data(result)
        assert d["monthly_payment"] == pytest.approx(1432.25, abs=0.01)
        assert d["monthly_interest"] == pytest.approx(1000.0)
        assert d["avg_monthly_bruto"] == pytest.approx(d["monthly_payment"])
        assert d["avg_monthly_net"] == pytest.approx(result.totals.net_payment / 360)
        assert d["avg_monthly_tax_deduction"] == pytest.approx(result.totals.tax_deduction / 360)
        assert d["yearly_bruto"] == pytest.approx(d["monthly_payment"] * 12)
        assert d["total_net"] == pytest.approx(d["total_bruto"] - d["total_tax_deduction"])
        assert d["show_real"] is False

    def test_totals_row_sums_yearly_rows(self, linear_inputs):
        d = compute_display_data(calculate(linear_inputs))
        t = d["totals_row"]
        assert t["principal"] == pytest.approx(300_000, rel=1e-6)
        assert t["bruto"] == pytest.approx(sum(y.bruto_payment for y in d["rows"]))
        assert t["net"] == pytest.approx(t["bruto"] - t["tax_deduction"])

    def test_show_real_with_inflation(self):
        inputs = MortgageInput(principal=300_000, interest_rate=4, term_years=30,
                               inflation_rate=0.02)
        d = compute_display_data(calculate(inputs))
        assert d["show_real"] is True
        assert d["total_real_net"] < d["total_net"]

    def test_interest_share(self, annuity_inputs):
        d = compute_display_data(calculate(annuity_inputs))
        assert 0 < d["interest_share"] < 100


class TestYearlyTable:
    def test_one_line_per_year_plus_header_and_totals(self, annuity_inputs):
        d = compute_display_data(calculate(annuity_inputs))
        lines = format_yearly_table(d)
        assert len(lines) == 30 + 4
        assert lines[0].split()[0] == "Year"
        assert lines[-1].strip().startswith("Tot")
        assert lines[-1].rstrip().endswith("-")


class TestCollectInputs:
    def test_defaults(self, monkeypatch):
        _answers(monkeypatch, [""] * 6)
        inputs, values = cli.collect_inputs()
        assert inputs.principal == 300_000
        assert values["paymentType"] == "annuity"

    def test_reprompts_invalid_field(self, monkeypatch, capsys):
        _answers(monkeypatch, ["-1", "4", "linear", "20", "37", "0", "250000"])
        inputs, values = cli.collect_inputs()
        assert inputs.principal == 250_000
        assert inputs.payment_type == "linear"
        assert values["principal"] == "250000"
        assert "Please enter a valid mortgage amount" in capsys.readouterr().out

    def test_saved_values_become_defaults(self, monkeypatch):
        _answers(monkeypatch, [""] * 6)
        inputs, _ = cli.collect_inputs({"principal": "123000", "mortgageTerm": "10"})
        assert inputs.principal == 123_000
        assert inputs.total_months == 120


class TestRunCli:
    def test_full_run(self, monkeypatch, capsys, tmp_path, storage_path):
        pdf_path = str(tmp_path / "report.pdf")
        _answers(monkeypatch, ["250000", "3.5", "linear", "20", "37", "2"])

        assert run_cli(storage_path=storage_path, pdf_path=pdf_path) == 0

        out = capsys.readouterr().out
        assert "YOUR MORTGAGE" in out
        assert "TOTAL OVER THE TERM" in out
        assert "In today's money" in out
        assert "€ 250.000" in out
        assert os.path.exists(pdf_path)
        assert load_form_values(storage_path)["principal"] == "250000"

    def test_uses_persisted_values(self, monkeypatch, capsys, tmp_path, storage_path, raw_form):
        save_form_values(dict(raw_form, principal="180000"), storage_path)
        _answers(monkeypatch, [""] * 6)

        run_cli(storage_path=storage_path, pdf_path=str(tmp_path / "r.pdf"))

        assert "€ 180.000" in capsys.readouterr().out
