from dataclasses import dataclass
from enum import Enum
from typing import Optional


class BudgetPeriod(str, Enum):
    MONTHLY = "Monthly"


@dataclass
class Budget:
    id: Optional[int]
    category_id: int
    amount: int             # minor units
    period: BudgetPeriod = BudgetPeriod.MONTHLY
    category_name: str = ""


@dataclass
class BudgetProgress:
    budget_id: int
    category_id: int
    category_name: str
    budgeted: float
    spent: float
    color: str = "#888888"

    @property
    def remaining(self) -> float:
        return self.budgeted - self.spent

    @property
    def percent(self) -> float:
        if self.budgeted <= 0:
            return 0.0
        return self.spent / self.budgeted
