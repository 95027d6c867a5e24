import base64

import matplotlib.pyplot as plt
import pytest

import report
from cli import compute_display_data
from mortgage import MortgageInput, calculate


@pytest.fixture
def result(annuity_inputs):
    return calculate(annuity_inputs)


@pytest.fixture
def inflated_result():
    return calculate(MortgageInput(principal=300_000, interest_rate=4, term_years=30,
                                   payment_type="linear", inflation_rate=0.02))


class TestAxisFormat:
    def test_thousands(self):
        assert report._eur_k_fmt(18_000, None) == "€18k"
        assert report._eur_k_fmt(0, None) == "€0k"

    def test_euro_text(self):
        assert report._eur(300_000) == "€ 300.000"
        assert report._eur(-1_500) == "€ -1.500"


class TestCharts:
    def test_distribution_pie(self, result):
        fig = report.chart_distribution(result.totals)
        ax = fig.axes[0]
        assert len(ax.patches) == 2
        assert ax.get_title() == "Principal vs Interest"
        plt.close(fig)

    def test_yearly_lines(self, result):
        fig = report.chart_yearly(result.yearly)
        labels = [line.get_label() for line in fig.axes[0].get_lines()]
        assert labels == ["Bruto Payment", "Net Payment", "Interest", "Principal"]
        assert fig.axes[0].get_ylim()[0] == 0
        plt.close(fig)

    def test_yearly_real_line_when_inflation(self, inflated_result):
        fig = report.chart_yearly(inflated_result.yearly, show_real=True)
        labels = [line.get_label() for line in fig.axes[0].get_lines()]
        assert "Net Payment (real)" in labels
        plt.close(fig)


class TestWebCharts:
    def test_png_images(self, result):
        d = compute_display_data(result)
        charts = report.get_web_charts(result, d)
        assert set(charts) == {"distribution", "yearly"}
        for b64 in charts.values():
            assert base64.b64decode(b64)[:8] == b"\x89PNG\r\n\x1a\n"

    def test_figures_are_closed(self, result):
        plt.close("all")
        report.get_web_charts(result, compute_display_data(result))
        assert plt.get_fignums() == []

    def test_failed_chart_is_left_out(self, result, monkeypatch):
        def boom(*args, **kwargs):
            raise RuntimeError("no canvas")

        monkeypatch.setattr(report, "chart_distribution", boom)
        charts = report.get_web_charts(result, compute_display_data(result))
        assert list(charts) == ["yearly"]


class TestPdf:
    def test_writes_pdf(self, inflated_result, tmp_path):
        d = compute_display_data(inflated_result)
        path = report.generate_pdf(inflated_result, d, str(tmp_path / "report.pdf"))
        with open(path, "rb") as fh:
            assert fh.read(5) == b"%PDF-"
        assert plt.get_fignums() == []
