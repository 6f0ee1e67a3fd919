from datetime import date

import pytest

from models.transaction import Split, Transaction
from utils.errors import ValidationError


def _post(tx_service, day, description, legs):
    return tx_service.post(Transaction(
        date=day,
        description=description,
        splits=[Split(account_id=a, amount=amt, category_id=c) for a, amt, c in legs],
    ))


@pytest.fixture
def ledger(tx_service, accounts, categories):
    checking = accounts["Checking"].id
    _post(tx_service, "2024-01-01", "Opening balance", [
        (checking, 100000, None),
        (accounts["Opening Balances"].id, -100000, None),
    ])
    _post(tx_service, "2024-01-31", "Payroll", [
        (checking, 300000, None),
        (accounts["Income"].id, -300000, categories["Salary"].id),
    ])
    _post(tx_service, "2024-02-02", "Groceries", [
        (checking, -12000, None),
        (accounts["Expenses"].id, 12000, categories["Food"].id),
    ])
    _post(tx_service, "2024-02-10", "Streaming", [
        (accounts["Visa"].id, -1500, None),
        (accounts["Expenses"].id, 1500, categories["Subscriptions"].id),
    ])
    _post(tx_service, "2024-02-11", "Uncategorised", [
        (checking, -500, None),
        (accounts["Expenses"].id, 500, None),
    ])
    return accounts


def test_balances_are_derived_from_splits(report_service, ledger):
    balances = report_service.all_balances()

    assert balances[ledger["Checking"].id] == 1000.00 + 3000.00 - 120.00 - 5.00
    assert balances[ledger["Visa"].id] == -15.00
    assert balances[ledger["Cash"].id] == 0.0
    assert sum(balances.values()) == 0


def test_account_without_postings_has_zero_balance(report_service, accounts):
    assert report_service.account_balance(accounts["Cash"].id) == 0.0


def test_dashboard_stats(report_service, ledger):
    stats = report_service.dashboard_stats()

    assert stats.total_income == 3000.00
    assert stats.total_expense == 140.00
    assert stats.total_assets == 3875.00
    assert stats.total_liability == 15.00
    assert stats.net_worth == 3860.00


def test_category_breakdown_uses_debit_legs(report_service, ledger):
    breakdown = report_service.category_breakdown("2024-02-01", "2024-02-29")

    assert [(c.category, c.total) for c in breakdown] == [
        ("Food", 120.00),
        ("Subscriptions", 15.00),
    ]
    assert breakdown[0].color == "#FF9800"


def test_category_breakdown_rejects_bad_range(report_service):
    with pytest.raises(ValidationError):
        report_service.category_breakdown("2024-03-01", "2024-02-01")
    with pytest.raises(ValidationError):
        report_service.category_breakdown("yesterday", "2024-02-01")


def test_monthly_stats(report_service, ledger):
    stats = report_service.monthly_stats(6, ref_date=date(2024, 2, 15))

    assert [(m.month, m.label) for m in stats] == [("2024-01", "Jan"), ("2024-02", "Feb")]
    january, february = stats
    assert january.income == 3000.00
    assert january.expense == 0.0
    assert february.income == 0.0
    assert february.expense == 140.00
    assert february.net == -140.00


def test_monthly_stats_window_excludes_older_months(report_service, ledger):
    stats = report_service.monthly_stats(1, ref_date=date(2024, 3, 5))
    assert [m.month for m in stats] == ["2024-02"]
    assert stats[0].expense == 20.00


def test_export_transactions_csv_has_one_row_per_split(report_service, ledger):
    rows = report_service.export_transactions_csv()

    assert rows[0][0] == "Date"
    assert len(rows) == 1 + 10
    assert ["2024-02-02", "Groceries", "", "Pending", "Checking", "-120.00", "USD"] in rows


def test_dashboard_stats_apply_exchange_rate(tx_service, report_service, accounts):
    tx_service.post(Transaction(
        date="2024-03-01",
        description="EUR deposit",
        splits=[
            Split(account_id=accounts["Checking"].id, amount=10000, currency="EUR", exchange_rate=1.25),
            Split(account_id=accounts["Opening Balances"].id, amount=-10000, currency="EUR", exchange_rate=1.25),
        ],
    ))
    tx_service.post(Transaction(
        date="2024-03-02",
        description="EUR card purchase",
        splits=[
            Split(account_id=accounts["Visa"].id, amount=-4000, currency="EUR", exchange_rate=1.25),
            Split(account_id=accounts["Expenses"].id, amount=4000, currency="EUR", exchange_rate=1.25),
        ],
    ))

    stats = report_service.dashboard_stats()

    assert stats.total_assets == 125.00
    assert stats.total_liability == 50.00
    assert stats.total_expense == 50.00
    assert stats.net_worth == 75.00
    assert report_service.account_balance(accounts["Checking"].id) == 100.00
