from matplotlib.figure import Figure

from utils.constants import CHART_EXPENSE_COLOR, CHART_INCOME_COLOR, CHART_LINE_COLOR


def _short_amount(v, _pos=None) -> str:
    return f"{v/1000:.0f}k" if abs(v) >= 1000 else f"{v:.0f}"


class ChartService:
    """Builds matplotlib figures from the read models; callers embed or save them."""

    def __init__(self, report_service, forecast_service):
        self._report_svc = report_service
        self._forecast_svc = forecast_service

    def _no_data(self, ax, text: str = "No data"):
        ax.text(0.5, 0.5, text, ha="center", va="center",
                transform=ax.transAxes, color="gray")
        ax.set_xticks([])
        ax.set_yticks([])

    def monthly_figure(self, months_back: int = 6, ref_date=None) -> Figure:
        fig = Figure(figsize=(5, 3), dpi=80, tight_layout=True)
        ax = fig.add_subplot(111)
        ax.set_title("Monthly Income vs Expenses")

        data = self._report_svc.monthly_stats(months_back, ref_date)
        if not data:
            self._no_data(ax)
            return fig

        x = list(range(len(data)))
        w = 0.35
        ax.bar([i - w / 2 for i in x], [d.income for d in data], w,
               color=CHART_INCOME_COLOR, label="Income")
        ax.bar([i + w / 2 for i in x], [d.expense for d in data], w,
               color=CHART_EXPENSE_COLOR, label="Expense")
        ax.set_xticks(x)
        ax.set_xticklabels([d.label for d in data])
        ax.yaxis.set_major_formatter(_short_amount)
        ax.legend(fontsize=8)
        return fig

    def category_figure(self, start_date: str, end_date: str) -> Figure:
        fig = Figure(figsize=(3, 3), dpi=80, tight_layout=True)
        ax = fig.add_subplot(111)
        ax.set_title("Expense Breakdown")

        breakdown = self._report_svc.category_breakdown(start_date, end_date)
        total = sum(d.total for d in breakdown)
        if not breakdown or total == 0:
            self._no_data(ax, "No expense data")
            return fig

        ax.pie(
            [d.total for d in breakdown],
            labels=[d.category for d in breakdown],
            colors=[d.color for d in breakdown],
            startangle=90,
        )
        ax.set_aspect("equal")
        return fig

    def projection_figure(self, months_ahead: int = 12, ref_date=None) -> Figure:
        fig = Figure(figsize=(8, 2.8), dpi=80, tight_layout=True)
        ax = fig.add_subplot(111)
        ax.set_title("Projected Net Worth")

        points = self._forecast_svc.project_net_worth(months_ahead, ref_date)
        if not points:
            self._no_data(ax)
            return fig

        x = list(range(len(points)))
        ax.plot(x, [p.value for p in points], color=CHART_LINE_COLOR, marker="o")
        ax.set_xticks(x)
        ax.set_xticklabels([p.label for p in points], rotation=45, fontsize=8)
        ax.yaxis.set_major_formatter(_short_amount)
        return fig

    @staticmethod
    def save(fig: Figure, path: str):
        fig.savefig(path, format="png")
