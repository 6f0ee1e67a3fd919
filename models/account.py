from dataclasses import dataclass
from enum import Enum
from typing import Optional


class AccountType(str, Enum):
    CASH = "Cash"
    BANK = "Bank"
    CARD = "Card"
    INVESTMENT = "Investment"
    EQUITY = "Equity"
    LIABILITY = "Liability"
    INCOME = "Income"
    EXPENSE = "Expense"

    @classmethod
    def coerce(cls, value) -> "AccountType":
        """Accept an AccountType or its text value (case-insensitive)."""
        if isinstance(value, cls):
            return value
        text = str(value or "").strip().lower()
        for member in cls:
            if member.value.lower() == text:
                return member
        raise ValueError(
            f"Invalid account type '{value}'. "
            f"Must be one of: {', '.join(m.value for m in cls)}."
        )


ACCOUNT_TYPES = tuple(t.value for t in AccountType)
ASSET_ACCOUNT_TYPES = (AccountType.CASH, AccountType.BANK, AccountType.INVESTMENT)
# Accounts a user pays from / into when recording a simple income or expense.
FUNDING_ACCOUNT_TYPES = (
    AccountType.CASH, AccountType.BANK, AccountType.CARD, AccountType.INVESTMENT,
)


@dataclass
class Account:
    id: Optional[int]
    name: str
    type: AccountType
    currency: str = "USD"

    @property
    def is_asset(self) -> bool:
        return self.type in ASSET_ACCOUNT_TYPES
