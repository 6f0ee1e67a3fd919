from datetime import date

from database.transaction_dao import TransactionDAO
from models.insights import Anomaly, Severity
from utils.constants import (
    ANOMALY_LARGE_TRANSACTION,
    ANOMALY_LOOKBACK_MONTHS,
    ANOMALY_THRESHOLD,
)
from utils.currency import from_minor_units
from utils.date_helpers import months_ago_str


class AnomalyService:
    """Flags recent debit legs above a fixed threshold.

    The threshold is static; it does not adapt to the user's own spending
    distribution.
    """

    def __init__(self, tx_dao: TransactionDAO, threshold: int = ANOMALY_THRESHOLD):
        self._tx_dao = tx_dao
        self._threshold = threshold

    def detect_anomalies(self, ref_date: date | None = None) -> list[Anomaly]:
        since = months_ago_str(ANOMALY_LOOKBACK_MONTHS, ref_date)
        return [
            Anomaly(
                type=ANOMALY_LARGE_TRANSACTION,
                description=f"{row['description']}: ${from_minor_units(row['amount']):.2f}",
                severity=Severity.MEDIUM,
                date=row["date"],
                transaction_id=row["transaction_id"],
            )
            for row in self._tx_dao.get_large_debits(since, self._threshold)
        ]
