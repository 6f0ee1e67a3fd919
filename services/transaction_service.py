import logging

from models.account import AccountType, FUNDING_ACCOUNT_TYPES
from models.transaction import Split, Transaction, TransactionStatus
from database.transaction_dao import TransactionDAO
from database.account_dao import AccountDAO
from utils.constants import RECENT_TRANSACTION_LIMIT
from utils.currency import to_minor_units
from utils.date_helpers import parse_date, format_date
from utils.errors import NotFoundError, UnbalancedTransactionError, ValidationError

logger = logging.getLogger(__name__)


class TransactionService:
    def __init__(self, tx_dao: TransactionDAO, account_dao: AccountDAO, rule_service=None):
        self._dao = tx_dao
        self._account_dao = account_dao
        self._rules = rule_service

    # ── Write surface ────────────────────────────────────────────────────────

    def post(self, tx: Transaction) -> Transaction:
        """Validate and persist a double-entry transaction atomically.

        The zero-sum check runs before any storage transaction is opened, so
        a rejected transaction leaves no header or split behind.
        """
        self._validate(tx)
        self._dao.create(tx)
        logger.info(
            "Posted transaction %s '%s' (%d splits)", tx.id, tx.description, len(tx.splits)
        )
        return tx

    def update(self, tx: Transaction) -> Transaction:
        if tx.id is None:
            raise ValidationError("Cannot update a transaction that has no id.")
        self._validate(tx)
        if not self._dao.update(tx):
            raise NotFoundError(f"Transaction {tx.id} does not exist.")
        logger.info("Updated transaction %s", tx.id)
        return tx

    def delete(self, tx_id: int) -> bool:
        deleted = self._dao.delete(tx_id)
        if deleted:
            logger.info("Deleted transaction %s", tx_id)
        return deleted

    def record_expense(
        self,
        account_id: int,
        amount,
        date: str,
        category_id: int | None,
        description: str,
        note: str = "",
    ) -> Transaction:
        """Two-leg expense: credit the paying account, debit the Expense account."""
        return self._record_simple(
            AccountType.EXPENSE, account_id, amount, date, category_id, description, note
        )

    def record_income(
        self,
        account_id: int,
        amount,
        date: str,
        category_id: int | None,
        description: str,
        note: str = "",
    ) -> Transaction:
        """Two-leg income: debit the receiving account, credit the Income account."""
        return self._record_simple(
            AccountType.INCOME, account_id, amount, date, category_id, description, note
        )

    # ── Reads ────────────────────────────────────────────────────────────────

    def get_recent(self, limit: int = RECENT_TRANSACTION_LIMIT) -> list[Transaction]:
        return self._dao.get_recent(limit)

    def get_by_id(self, tx_id: int) -> Transaction | None:
        return self._dao.get_by_id(tx_id)

    def get_all(self) -> list[Transaction]:
        return self._dao.get_all()

    def search(
        self,
        text: str | None = None,
        start_date: str | None = None,
        end_date: str | None = None,
        min_amount: float | None = None,
        max_amount: float | None = None,
        limit: int = 100,
    ) -> list[Transaction]:
        """Conjunctive search. Amount bounds are in major units and inclusive."""
        for label, value in (("start date", start_date), ("end date", end_date)):
            if value and not parse_date(value):
                raise ValidationError(f"Invalid {label}: {value}")
        return self._dao.search(
            text=text.strip() if text else None,
            start_date=format_date(parse_date(start_date)) if start_date else None,
            end_date=format_date(parse_date(end_date)) if end_date else None,
            min_amount=to_minor_units(min_amount) if min_amount is not None else None,
            max_amount=to_minor_units(max_amount) if max_amount is not None else None,
            limit=limit,
        )

    # ── Helpers ──────────────────────────────────────────────────────────────

    def _record_simple(self, counter_type, account_id, amount, date, category_id, description, note):
        account = self._account_dao.get_by_id(account_id)
        if account is None:
            raise ValidationError(f"Account {account_id} does not exist.")
        if account.type not in FUNDING_ACCOUNT_TYPES:
            raise ValidationError(f"Account '{account.name}' cannot fund a transaction.")
        counter_accounts = self._account_dao.get_by_type(counter_type)
        if not counter_accounts:
            raise ValidationError(f"No {counter_type.value} account exists.")
        try:
            cents = to_minor_units(amount)
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc
        if cents <= 0:
            raise ValidationError("Amount must be positive.")
        if not (description or "").strip():
            raise ValidationError("Description is required.")

        payee, note_out = description.strip(), note
        if self._rules is not None:
            enrichment = self._rules.enrich(payee)
            payee = enrichment.payee or payee
            note_out = enrichment.note or note
            if category_id is None:
                category_id = enrichment.category_id

        sign = 1 if counter_type == AccountType.INCOME else -1
        tx = Transaction(
            date=date,
            description=payee,
            note=note_out,
            splits=[
                Split(account_id=account.id, amount=sign * cents, currency=account.currency),
                Split(
                    account_id=counter_accounts[0].id,
                    amount=-sign * cents,
                    category_id=category_id,
                    currency=account.currency,
                ),
            ],
        )
        return self.post(tx)

    def _validate(self, tx: Transaction):
        if not tx.splits:
            raise UnbalancedTransactionError(0, "Transaction must have at least one split.")
        for split in tx.splits:
            if not isinstance(split.amount, int) or isinstance(split.amount, bool):
                raise ValidationError(
                    f"Split amounts must be integer minor units, got {split.amount!r}."
                )
        total = tx.total
        if total != 0:
            logger.warning(
                "Rejected unbalanced transaction '%s' (sum %d)", tx.description, total
            )
            raise UnbalancedTransactionError(total)
        parsed = parse_date(tx.date)
        if not parsed:
            raise ValidationError("Invalid date format. Use YYYY-MM-DD.")
        tx.date = format_date(parsed)
        if not (tx.description or "").strip():
            raise ValidationError("Description is required.")
        try:
            tx.status = TransactionStatus.coerce(tx.status)
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc
        for split in tx.splits:
            if split.exchange_rate is None or split.exchange_rate <= 0:
                raise ValidationError("Exchange rate must be positive.")
