import pytest

from database.db_manager import DatabaseManager
from database.account_dao import AccountDAO
from database.budget_dao import BudgetDAO
from database.category_dao import CategoryDAO
from database.rule_dao import RuleDAO
from database.transaction_dao import TransactionDAO
from models.account import AccountType
from services.account_service import AccountService
from services.anomaly_service import AnomalyService
from services.budget_service import BudgetService
from services.category_service import CategoryService
from services.data_service import DataService
from services.forecast_service import ForecastService
from services.recurring_service import RecurringService
from services.report_service import ReportService
from services.rule_service import RuleService
from services.transaction_service import TransactionService


@pytest.fixture
def db():
    manager = DatabaseManager(":memory:", seed=False).initialize()
    yield manager
    manager.close()


@pytest.fixture
def account_dao(db):
    return AccountDAO(db)


@pytest.fixture
def category_dao(db):
    return CategoryDAO(db)


@pytest.fixture
def tx_dao(db):
    return TransactionDAO(db)


@pytest.fixture
def accounts(account_dao):
    """name -> Account for a small chart of accounts."""
    created = [
        account_dao.create("Checking", AccountType.BANK),
        account_dao.create("Cash", AccountType.CASH),
        account_dao.create("Visa", AccountType.LIABILITY),
        account_dao.create("Opening Balances", AccountType.EQUITY),
        account_dao.create("Income", AccountType.INCOME),
        account_dao.create("Expenses", AccountType.EXPENSE),
    ]
    return {a.name: a for a in created}


@pytest.fixture
def categories(category_dao):
    created = [
        category_dao.create("Food", "", "#FF9800"),
        category_dao.create("Salary", "", "#4CAF50"),
        category_dao.create("Subscriptions", "", "#3F51B5"),
    ]
    return {c.name: c for c in created}


@pytest.fixture
def rule_service(db, category_dao):
    return RuleService(RuleDAO(db), category_dao)


@pytest.fixture
def tx_service(tx_dao, account_dao, rule_service):
    return TransactionService(tx_dao, account_dao, rule_service)


@pytest.fixture
def report_service(tx_dao, account_dao):
    return ReportService(tx_dao, account_dao)


@pytest.fixture
def budget_service(db, category_dao):
    return BudgetService(BudgetDAO(db), category_dao)


@pytest.fixture
def recurring_service(tx_dao):
    return RecurringService(tx_dao)


@pytest.fixture
def anomaly_service(tx_dao):
    return AnomalyService(tx_dao)


@pytest.fixture
def forecast_service(report_service):
    return ForecastService(report_service)


@pytest.fixture
def account_service(account_dao):
    return AccountService(account_dao)


@pytest.fixture
def category_service(category_dao):
    return CategoryService(category_dao)


@pytest.fixture
def data_service(db, account_dao, category_dao, tx_service, rule_service):
    return DataService(db, account_dao, category_dao, tx_service, rule_service)
