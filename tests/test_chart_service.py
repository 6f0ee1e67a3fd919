from datetime import date

import matplotlib

matplotlib.use("Agg")

from matplotlib.figure import Figure

from services.chart_service import ChartService


def _charts(report_service, forecast_service):
    return ChartService(report_service, forecast_service)


def test_monthly_figure_draws_two_bar_series(report_service, forecast_service, tx_service, accounts):
    tx_service.record_income(accounts["Checking"].id, "1000.00", "2024-03-01", None, "Payroll")
    tx_service.record_expense(accounts["Checking"].id, "250.00", "2024-03-04", None, "Rent")

    fig = _charts(report_service, forecast_service).monthly_figure(6, ref_date=date(2024, 3, 20))

    assert isinstance(fig, Figure)
    ax = fig.axes[0]
    assert len(ax.patches) == 2
    assert [t.get_text() for t in ax.get_xticklabels()] == ["Mar"]


def test_empty_store_renders_placeholder(report_service, forecast_service):
    charts = _charts(report_service, forecast_service)

    fig = charts.category_figure("2024-01-01", "2024-01-31")
    assert [t.get_text() for t in fig.axes[0].texts] == ["No expense data"]


def test_projection_figure_can_be_saved(tmp_path, report_service, forecast_service):
    charts = _charts(report_service, forecast_service)
    fig = charts.projection_figure(4, ref_date=date(2024, 1, 1))

    assert len(fig.axes[0].lines) == 1
    path = tmp_path / "projection.png"
    ChartService.save(fig, str(path))
    assert path.stat().st_size > 0
