from datetime import date

from models.report import ProjectionPoint
from utils.constants import FORECAST_LABEL_FORMAT, FORECAST_TRAILING_MONTHS
from utils.date_helpers import add_months, format_month, today
from utils.errors import ValidationError


class ForecastService:
    def __init__(self, report_svc):
        self._report_svc = report_svc

    def average_monthly_savings(self, ref_date: date | None = None) -> float:
        """Mean of (income - expense) over the trailing months that have data."""
        months = self._report_svc.monthly_stats(FORECAST_TRAILING_MONTHS, ref_date)
        if not months:
            return 0.0
        return sum(m.net for m in months) / len(months)

    def project_net_worth(
        self, months_ahead: int, ref_date: date | None = None
    ) -> list[ProjectionPoint]:
        """
        Linear net-worth projection: one point per future month, each adding
        the trailing average savings to the previous value. No seasonality,
        no compounding.
        """
        if months_ahead < 0:
            raise ValidationError("months_ahead must be non-negative.")
        ref = ref_date or today()
        running = self._report_svc.dashboard_stats().net_worth
        avg_savings = self.average_monthly_savings(ref)

        points = []
        for i in range(1, months_ahead + 1):
            running += avg_savings
            future = add_months(ref, i)
            points.append(ProjectionPoint(
                month=format_month(future),
                label=future.strftime(FORECAST_LABEL_FORMAT),
                value=round(running, 2),
            ))
        return points
