from dataclasses import dataclass, field


@dataclass
class DashboardStats:
    total_income: float = 0.0
    total_expense: float = 0.0
    total_assets: float = 0.0
    total_liability: float = 0.0
    net_worth: float = 0.0


@dataclass
class CategorySpending:
    category_id: int
    category: str
    color: str
    total: float


@dataclass
class MonthlyStat:
    month: str              # 'YYYY-MM'
    label: str              # 'Jan'
    income: float
    expense: float

    @property
    def net(self) -> float:
        return self.income - self.expense


@dataclass
class ProjectionPoint:
    month: str              # 'YYYY-MM'
    label: str              # 'Jan 25'
    value: float


@dataclass
class ImportResult:
    imported: int = 0
    skipped: int = 0
    errors: list[str] = field(default_factory=list)

    def skip(self, reason: str):
        self.skipped += 1
        self.errors.append(reason)
