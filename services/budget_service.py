from models.budget import Budget, BudgetPeriod, BudgetProgress
from database.budget_dao import BudgetDAO
from database.category_dao import CategoryDAO
from utils.currency import from_minor_units, to_minor_units
from utils.date_helpers import month_key
from utils.errors import ValidationError


class BudgetService:
    def __init__(self, budget_dao: BudgetDAO, category_dao: CategoryDAO):
        self._budget_dao = budget_dao
        self._category_dao = category_dao

    def get_all(self) -> list[Budget]:
        return self._budget_dao.get_all()

    def create(self, category_id: int, amount, period=BudgetPeriod.MONTHLY) -> Budget:
        """amount is in major units (e.g. 500 or '500.00')."""
        if self._category_dao.get_by_id(category_id) is None:
            raise ValidationError(f"Category {category_id} does not exist.")
        try:
            cents = to_minor_units(amount)
            period = BudgetPeriod(period)
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc
        if cents < 0:
            raise ValidationError("Budget amount must be non-negative.")
        return self._budget_dao.create(category_id, cents, period)

    def delete(self, budget_id: int):
        self._budget_dao.delete(budget_id)

    def get_progress(self, month: int, year: int) -> list[BudgetProgress]:
        """Budget vs actual for every monthly budget in the given calendar month.

        Spent counts only debit legs tagged with the budget's category, so the
        paired asset/liability leg of each purchase is excluded.
        """
        try:
            key = month_key(year, month)
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc
        return [
            BudgetProgress(
                budget_id=row["budget_id"],
                category_id=row["category_id"],
                category_name=row["category_name"],
                budgeted=from_minor_units(row["budgeted"]),
                spent=from_minor_units(row["spent"]),
                color=row["color"],
            )
            for row in self._budget_dao.get_spent_for_month(key)
        ]
