import pytest

from models.budget import BudgetPeriod, BudgetProgress
from utils.errors import ValidationError


def _spend(tx_service, accounts, category, day, amount):
    return tx_service.record_expense(accounts["Checking"].id, amount, day, category.id, "Shop")


def test_budget_progress_over_budget(budget_service, tx_service, accounts, categories):
    food = categories["Food"]
    budget_service.create(food.id, 500)
    _spend(tx_service, accounts, food, "2024-05-03", "350.00")
    _spend(tx_service, accounts, food, "2024-05-20", "250.00")
    _spend(tx_service, accounts, food, "2024-06-01", "999.00")

    [progress] = budget_service.get_progress(5, 2024)

    assert progress.category_name == "Food"
    assert progress.budgeted == 500.00
    assert progress.spent == 600.00
    assert progress.remaining == -100.00
    assert progress.percent == pytest.approx(1.2)


def test_budget_progress_ignores_other_categories(budget_service, tx_service, accounts, categories):
    budget_service.create(categories["Food"].id, 100)
    _spend(tx_service, accounts, categories["Subscriptions"], "2024-05-03", "15.00")

    [progress] = budget_service.get_progress(5, 2024)
    assert progress.spent == 0.0
    assert progress.percent == 0.0


def test_zero_budget_reports_zero_percent():
    progress = BudgetProgress(
        budget_id=1, category_id=1, category_name="Food", budgeted=0.0, spent=25.0
    )
    assert progress.percent == 0.0
    assert progress.remaining == -25.0


def test_create_validates_input(budget_service, categories):
    with pytest.raises(ValidationError):
        budget_service.create(9999, 100)
    with pytest.raises(ValidationError):
        budget_service.create(categories["Food"].id, -1)
    with pytest.raises(ValidationError):
        budget_service.create(categories["Food"].id, 100, "Weekly")


def test_create_and_delete(budget_service, categories):
    budget = budget_service.create(categories["Food"].id, "250.50", BudgetPeriod.MONTHLY)

    assert budget.amount == 25050
    assert budget.category_name == "Food"
    assert [b.id for b in budget_service.get_all()] == [budget.id]

    budget_service.delete(budget.id)
    assert budget_service.get_all() == []


def test_get_progress_rejects_bad_month(budget_service):
    with pytest.raises(ValidationError):
        budget_service.get_progress(13, 2024)
