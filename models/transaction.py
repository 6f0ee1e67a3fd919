from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class TransactionStatus(str, Enum):
    PENDING = "Pending"
    CLEARED = "Cleared"
    RECONCILED = "Reconciled"

    @classmethod
    def coerce(cls, value) -> "TransactionStatus":
        if isinstance(value, cls):
            return value
        text = str(value or "").strip().lower()
        for member in cls:
            if member.value.lower() == text:
                return member
        raise ValueError(f"Invalid transaction status: {value}")


@dataclass
class Split:
    account_id: int
    amount: int             # minor units; + debit, - credit
    category_id: Optional[int] = None
    currency: str = "USD"
    exchange_rate: float = 1.0
    id: Optional[int] = None
    transaction_id: Optional[int] = None

    def same_posting(self, other: "Split") -> bool:
        """True when both legs move the same money, ignoring identities."""
        return (
            self.account_id == other.account_id
            and self.amount == other.amount
            and self.category_id == other.category_id
            and self.currency == other.currency
            and self.exchange_rate == other.exchange_rate
        )


@dataclass
class Transaction:
    date: str               # 'YYYY-MM-DD'
    description: str
    note: str = ""
    status: TransactionStatus = TransactionStatus.PENDING
    splits: list[Split] = field(default_factory=list)
    id: Optional[int] = None

    @property
    def total(self) -> int:
        return sum(s.amount for s in self.splits)

    @property
    def is_balanced(self) -> bool:
        return bool(self.splits) and self.total == 0

    @property
    def amount(self) -> int:
        """Size of the event in minor units: the sum of its debit legs."""
        return sum(s.amount for s in self.splits if s.amount > 0)
