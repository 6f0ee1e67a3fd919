from datetime import date

from database.transaction_dao import TransactionDAO
from models.insights import Subscription
from utils.constants import (
    RECURRING_FREQUENCY_LABEL,
    RECURRING_LOOKBACK_MONTHS,
    RECURRING_MIN_OCCURRENCES,
)
from utils.currency import from_minor_units
from utils.date_helpers import add_months, format_date, months_ago_str, parse_date


class RecurringService:
    """Detects repeating expenses by payee.

    This is a co-occurrence heuristic: any payee charged at least twice in the
    lookback window is reported, and the cadence is always assumed monthly.
    """

    def __init__(self, tx_dao: TransactionDAO):
        self._tx_dao = tx_dao

    def detect_recurring_patterns(
        self,
        ref_date: date | None = None,
        lookback_months: int = RECURRING_LOOKBACK_MONTHS,
        min_occurrences: int = RECURRING_MIN_OCCURRENCES,
    ) -> list[Subscription]:
        since = months_ago_str(lookback_months, ref_date)
        result = []
        for row in self._tx_dao.get_repeated_payees(since, min_occurrences):
            last = parse_date(row["last_date"])
            result.append(Subscription(
                name=row["description"],
                amount=round(from_minor_units(row["avg_amount"]), 2),
                frequency=RECURRING_FREQUENCY_LABEL,
                next_due_date=format_date(add_months(last, 1)) if last else "",
                last_date=row["last_date"],
                occurrences=row["cnt"],
            ))
        return result
