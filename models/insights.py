"""Read-only projections produced by the pattern detectors. Never persisted."""
from dataclasses import dataclass
from enum import Enum


class Severity(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


@dataclass
class Subscription:
    name: str
    amount: float           # average, major units
    frequency: str          # best-effort label, e.g. 'Monthly?'
    next_due_date: str      # 'YYYY-MM-DD'
    last_date: str = ""
    occurrences: int = 0


@dataclass
class Anomaly:
    type: str               # e.g. 'Large Transaction'
    description: str
    severity: Severity
    date: str
    transaction_id: int | None = None
