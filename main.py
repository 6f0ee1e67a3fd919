import logging
import os
import sys

# Ensure project root is on sys.path when run directly
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from database.db_manager import DatabaseManager
from database.account_dao import AccountDAO
from database.transaction_dao import TransactionDAO
from database.category_dao import CategoryDAO
from database.budget_dao import BudgetDAO
from database.rule_dao import RuleDAO

from services.account_service import AccountService
from services.category_service import CategoryService
from services.transaction_service import TransactionService
from services.report_service import ReportService
from services.budget_service import BudgetService
from services.recurring_service import RecurringService
from services.anomaly_service import AnomalyService
from services.forecast_service import ForecastService
from services.rule_service import RuleService
from services.data_service import DataService
from services.chart_service import ChartService

from utils.app_config import get_db_folder, get_log_level
from utils.constants import APP_NAME
from utils.currency import format_currency
from utils.date_helpers import today

logger = logging.getLogger(__name__)


class Services:
    """The engine's surface handed to a presentation layer."""

    def __init__(self, db: DatabaseManager):
        self.db = db

        # ── DAOs ─────────────────────────────────────────────────────────────
        account_dao = AccountDAO(db)
        tx_dao = TransactionDAO(db)
        category_dao = CategoryDAO(db)
        budget_dao = BudgetDAO(db)
        rule_dao = RuleDAO(db)

        # ── Services ─────────────────────────────────────────────────────────
        self.accounts = AccountService(account_dao, db.get_setting("default_currency", "USD"))
        self.categories = CategoryService(category_dao)
        self.rules = RuleService(rule_dao, category_dao)
        self.transactions = TransactionService(tx_dao, account_dao, self.rules)
        self.reports = ReportService(tx_dao, account_dao)
        self.budgets = BudgetService(budget_dao, category_dao)
        self.recurring = RecurringService(tx_dao)
        self.anomalies = AnomalyService(tx_dao)
        self.forecast = ForecastService(self.reports)
        self.data = DataService(db, account_dao, category_dao, self.transactions, self.rules)
        self.charts = ChartService(self.reports, self.forecast)


def build_services(db_folder: str | None = None) -> Services:
    db = DatabaseManager.open_default(db_folder=db_folder)
    return Services(db)


def main():
    logging.basicConfig(
        level=get_log_level(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # ── Bootstrap: read DB folder from pre-DB config ──────────────────────────
    services = build_services(get_db_folder())

    # ── Summary ──────────────────────────────────────────────────────────────
    stats = services.reports.dashboard_stats()
    ref = today()
    logger.info("%s ready (%s)", APP_NAME, services.db.db_path)
    print(f"Net worth:  {format_currency(stats.net_worth)}")
    print(f"Assets:     {format_currency(stats.total_assets)}")
    print(f"Liability:  {format_currency(stats.total_liability)}")
    print(f"Income:     {format_currency(stats.total_income)}")
    print(f"Expense:    {format_currency(stats.total_expense)}")

    for progress in services.budgets.get_progress(ref.month, ref.year):
        print(
            f"Budget {progress.category_name}: {format_currency(progress.spent)} of "
            f"{format_currency(progress.budgeted)} ({progress.percent:.0%})"
        )
    for sub in services.recurring.detect_recurring_patterns():
        print(f"Recurring {sub.name}: {format_currency(sub.amount)} next {sub.next_due_date}")
    for anomaly in services.anomalies.detect_anomalies():
        print(f"[{anomaly.severity.value}] {anomaly.type} {anomaly.date}: {anomaly.description}")

    services.db.close()


if __name__ == "__main__":
    main()
