from datetime import date

from database.transaction_dao import TransactionDAO
from database.account_dao import AccountDAO
from models.account import AccountType, ASSET_ACCOUNT_TYPES
from models.report import CategorySpending, DashboardStats, MonthlyStat
from utils.currency import from_minor_units
from utils.date_helpers import parse_date, format_date, months_ago_str, short_month_name
from utils.errors import ValidationError


class ReportService:
    """Balances and aggregate views, always derived from splits on demand."""

    def __init__(self, tx_dao: TransactionDAO, account_dao: AccountDAO):
        self._tx_dao = tx_dao
        self._account_dao = account_dao

    def account_balance(self, account_id: int) -> float:
        return from_minor_units(self._tx_dao.get_account_balance(account_id))

    def all_balances(self) -> dict[int, float]:
        return {
            account_id: from_minor_units(cents)
            for account_id, cents in self._tx_dao.get_balances().items()
        }

    def dashboard_stats(self) -> DashboardStats:
        income = abs(from_minor_units(self._tx_dao.sum_by_account_types(AccountType.INCOME)))
        expense = from_minor_units(self._tx_dao.sum_by_account_types(AccountType.EXPENSE))
        assets = from_minor_units(self._tx_dao.sum_by_account_types(*ASSET_ACCOUNT_TYPES))
        liability = abs(
            from_minor_units(self._tx_dao.sum_by_account_types(AccountType.LIABILITY))
        )
        return DashboardStats(
            total_income=income,
            total_expense=expense,
            total_assets=assets,
            total_liability=liability,
            net_worth=assets - liability,
        )

    def category_breakdown(self, start_date: str, end_date: str) -> list[CategorySpending]:
        """Debit-leg spending per category within [start_date, end_date]."""
        start, end = parse_date(start_date), parse_date(end_date)
        if start is None or end is None:
            raise ValidationError("Start and end dates must be YYYY-MM-DD.")
        if start > end:
            raise ValidationError("Start date must not be after end date.")
        return [
            CategorySpending(
                category_id=row["category_id"],
                category=row["category"],
                color=row["color"],
                total=from_minor_units(row["total"]),
            )
            for row in self._tx_dao.get_expense_by_category(format_date(start), format_date(end))
        ]

    def monthly_stats(self, months_back: int, ref_date: date | None = None) -> list[MonthlyStat]:
        """Income vs expense per calendar month over the trailing window,
        oldest first. Months without postings are not synthesized."""
        if months_back < 0:
            raise ValidationError("months_back must be non-negative.")
        since = months_ago_str(months_back, ref_date)
        return [
            MonthlyStat(
                month=row["month"],
                label=short_month_name(row["month"]),
                income=from_minor_units(row["income"]),
                expense=from_minor_units(row["expense"]),
            )
            for row in self._tx_dao.get_monthly_totals(since)
        ]

    def export_transactions_csv(self) -> list[list[str]]:
        """One row per split, suitable for csv.writer."""
        account_map = {a.id: a.name for a in self._account_dao.get_all()}
        rows = [["Date", "Description", "Note", "Status", "Account", "Amount", "Currency"]]
        for tx in self._tx_dao.get_all():
            for split in tx.splits:
                rows.append([
                    tx.date,
                    tx.description,
                    tx.note,
                    tx.status.value,
                    account_map.get(split.account_id, ""),
                    f"{from_minor_units(split.amount):.2f}",
                    split.currency,
                ])
        return rows
