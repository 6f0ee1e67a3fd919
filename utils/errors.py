"""Error taxonomy shared by the store and the services.

Validation errors are raised before anything is written. Lookups that find
nothing return ``None`` rather than raising; ``NotFoundError`` is reserved for
mutations aimed at a missing row. ``StorageError`` wraps sqlite faults raised
inside an atomic unit after it has been rolled back.
"""


class LedgerError(Exception):
    """Base class for every error raised by the ledger."""


class ValidationError(LedgerError, ValueError):
    pass


class UnbalancedTransactionError(ValidationError):
    def __init__(self, total: int, message: str | None = None):
        self.total = total
        super().__init__(
            message or f"Transaction is not balanced (splits sum to {total}, expected 0)."
        )


class NotFoundError(LedgerError, LookupError):
    pass


class StorageError(LedgerError):
    pass
