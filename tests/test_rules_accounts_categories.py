import pytest

from models.account import AccountType
from utils.errors import ValidationError


# ── Rules ────────────────────────────────────────────────────────────────────

def test_first_matching_rule_wins(rule_service, categories):
    first = rule_service.create("amazon", categories["Subscriptions"].id, target_payee="Amazon Prime")
    rule_service.create("amazon mktp", categories["Food"].id, target_payee="Amazon")

    enrichment = rule_service.enrich("AMAZON MKTP US*2K4")

    assert enrichment.matched
    assert enrichment.rule_id == first.id
    assert enrichment.payee == "Amazon Prime"
    assert enrichment.category_id == categories["Subscriptions"].id


def test_enrich_without_match_passes_description_through(rule_service):
    rule_service.create("uber", target_payee="Uber")

    enrichment = rule_service.enrich("Lyft ride")

    assert not enrichment.matched
    assert enrichment.payee == "Lyft ride"
    assert enrichment.category_id is None
    assert enrichment.note == ""


def test_blank_payee_keeps_original_description(rule_service):
    rule_service.create("shell", target_note="fuel")

    enrichment = rule_service.enrich("SHELL OIL 123")
    assert enrichment.payee == "SHELL OIL 123"
    assert enrichment.note == "fuel"


def test_rule_validation_and_delete(rule_service):
    with pytest.raises(ValidationError):
        rule_service.create("   ")
    with pytest.raises(ValidationError):
        rule_service.create("netflix", target_category_id=9999)

    rule = rule_service.create("netflix", target_payee="Netflix")
    rule_service.delete(rule.id)
    assert rule_service.get_all() == []


# ── Accounts ─────────────────────────────────────────────────────────────────

def test_create_account(account_service):
    account = account_service.create("  Savings ", "bank", "eur")

    assert account.name == "Savings"
    assert account.type == AccountType.BANK
    assert account.currency == "EUR"
    assert account.is_asset
    assert account_service.get_by_name("Savings").id == account.id
    assert account_service.get_by_name("Nope") is None


def test_create_account_rejects_bad_input(account_service):
    account_service.create("Savings", AccountType.BANK)

    with pytest.raises(ValidationError):
        account_service.create("Savings", AccountType.CASH)
    with pytest.raises(ValidationError):
        account_service.create("", AccountType.CASH)
    with pytest.raises(ValidationError):
        account_service.create("Brokerage", "Stocks")
    with pytest.raises(ValidationError):
        account_service.create("Brokerage", AccountType.INVESTMENT, "DOLLARS")


def test_account_with_postings_cannot_be_deleted(account_service, tx_service, accounts):
    tx_service.record_expense(accounts["Cash"].id, "3.00", "2024-01-01", None, "Snack")

    with pytest.raises(ValidationError):
        account_service.delete(accounts["Cash"].id)

    account_service.delete(accounts["Visa"].id)
    assert account_service.get_by_id(accounts["Visa"].id) is None


# ── Categories ───────────────────────────────────────────────────────────────

def test_category_hierarchy(category_service):
    food = category_service.create("Food", "", "#FF9800")
    groceries = category_service.create("Groceries", parent_id=food.id)

    assert [c.name for c in category_service.get_roots()] == ["Food"]
    assert [c.id for c in category_service.get_children(food.id)] == [groceries.id]
    assert not groceries.is_root
    assert category_service.get_by_name("groceries").id == groceries.id


def test_category_validation(category_service):
    category_service.create("Food")

    with pytest.raises(ValidationError):
        category_service.create("food")
    with pytest.raises(ValidationError):
        category_service.create("Travel", color="blue")
    with pytest.raises(ValidationError):
        category_service.create("Travel", parent_id=9999)


def test_category_in_use_cannot_be_deleted(category_service, tx_service, accounts):
    food = category_service.create("Food")
    parent = category_service.create("Home")
    category_service.create("Furniture", parent_id=parent.id)
    spare = category_service.create("Spare")
    tx_service.record_expense(accounts["Cash"].id, "3.00", "2024-01-01", food.id, "Snack")

    with pytest.raises(ValidationError):
        category_service.delete(food.id)
    with pytest.raises(ValidationError):
        category_service.delete(parent.id)

    category_service.delete(spare.id)
    assert category_service.get_by_id(spare.id) is None
