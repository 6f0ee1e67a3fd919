"""Export and import ledger data: a full JSON backup (accounts, categories,
transactions with embedded splits) and a flat CSV transaction import.
"""
import csv
import io
import json
import logging
from datetime import datetime

from database.db_manager import DatabaseManager
from database.account_dao import AccountDAO
from database.category_dao import CategoryDAO
from models.account import AccountType
from models.report import ImportResult
from models.transaction import Split, Transaction, TransactionStatus
from services.transaction_service import TransactionService
from utils.currency import parse_amount
from utils.date_helpers import format_date, parse_csv_date
from utils.errors import StorageError, ValidationError

logger = logging.getLogger(__name__)

EXPORT_VERSION = 1

# Lower-cased CSV header → logical column.
CSV_COLUMNS = {
    "date": "date",
    "description": "description",
    "payee": "description",
    "memo": "description",
    "amount": "amount",
    "category": "category",
    "account": "account",
    "note": "note",
    "notes": "note",
}
REQUIRED_CSV_COLUMNS = ("date", "description", "amount")


class DataService:
    def __init__(
        self,
        db: DatabaseManager,
        account_dao: AccountDAO,
        category_dao: CategoryDAO,
        tx_service: TransactionService,
        rule_service=None,
    ):
        self._db = db
        self._account_dao = account_dao
        self._category_dao = category_dao
        self._tx_svc = tx_service
        self._rules = rule_service

    # ── Export ────────────────────────────────────────────────────────────────

    def export_json(self) -> dict:
        """Return a full export dict (caller writes to disk)."""
        return {
            "export_version": EXPORT_VERSION,
            "exported_at": datetime.now().isoformat(),
            "accounts": self._build_accounts(),
            "categories": self._build_categories(),
            "transactions": self._build_transactions(),
        }

    def export_json_file(self, path: str) -> None:
        data = self.export_json()
        try:
            with open(path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
        except OSError as exc:
            raise StorageError(f"Could not write backup {path}: {exc}") from exc
        logger.info("Exported %d transactions to %s", len(data["transactions"]), path)

    def _build_accounts(self) -> list[dict]:
        return [
            {"id": a.id, "name": a.name, "type": a.type.value, "currency": a.currency}
            for a in self._account_dao.get_all()
        ]

    def _build_categories(self) -> list[dict]:
        return [
            {
                "id": c.id,
                "name": c.name,
                "icon": c.icon,
                "color": c.color,
                "parent_id": c.parent_id,
            }
            for c in self._category_dao.get_all()
        ]

    def _build_transactions(self) -> list[dict]:
        return [
            {
                "id": tx.id,
                "date": tx.date,
                "description": tx.description,
                "note": tx.note,
                "status": tx.status.value,
                "splits": [
                    {
                        "id": s.id,
                        "transaction_id": s.transaction_id,
                        "account_id": s.account_id,
                        "category_id": s.category_id,
                        "amount": s.amount,
                        "currency": s.currency,
                        "exchange_rate": s.exchange_rate,
                    }
                    for s in tx.splits
                ],
            }
            for tx in self._tx_svc.get_all()
        ]

    # ── JSON import ───────────────────────────────────────────────────────────

    def import_json_file(self, path: str) -> dict:
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            raise StorageError(f"Could not read backup {path}: {exc}") from exc
        return self.import_json(data)

    def import_json(self, data: dict) -> dict:
        """Restore a backup dict. All-or-nothing: every insert runs inside one
        atomic unit, and any failure rolls the whole import back.

        Accounts and categories are matched by name; ids in the backup are
        remapped to the ids they have (or get) in this store.
        Returns counts of created entities.
        """
        if not isinstance(data, dict):
            raise ValidationError("Backup must be a JSON object.")
        stats = {"accounts": 0, "categories": 0, "transactions": 0}

        with self._db.transaction():
            account_map = self._import_accounts(data.get("accounts") or [], stats)
            category_map = self._import_categories(data.get("categories") or [], stats)
            for raw in data.get("transactions") or []:
                tx = self._transaction_from_backup(raw, account_map, category_map)
                self._tx_svc.post(tx)
                stats["transactions"] += 1

        logger.info(
            "Imported backup: %(accounts)d accounts, %(categories)d categories, "
            "%(transactions)d transactions", stats,
        )
        return stats

    def _import_accounts(self, accounts: list[dict], stats: dict) -> dict[int, int]:
        id_map: dict[int, int] = {}
        for a in accounts:
            name = (a.get("name") or "").strip()
            if not name:
                raise ValidationError("Backup contains an account without a name.")
            existing = self._account_dao.get_by_name(name)
            if existing is None:
                try:
                    type_ = AccountType.coerce(a.get("type"))
                except ValueError as exc:
                    raise ValidationError(str(exc)) from exc
                existing = self._account_dao.create(name, type_, a.get("currency") or "USD")
                stats["accounts"] += 1
            if a.get("id") is not None:
                id_map[int(a["id"])] = existing.id
        return id_map

    def _import_categories(self, categories: list[dict], stats: dict) -> dict[int, int]:
        id_map: dict[int, int] = {}
        pending_parents: list[tuple[int, int]] = []
        for c in categories:
            name = (c.get("name") or "").strip()
            if not name:
                raise ValidationError("Backup contains a category without a name.")
            existing = self._category_dao.get_by_name(name)
            if existing is None:
                existing = self._category_dao.create(
                    name, c.get("icon") or "", c.get("color") or "#888888"
                )
                stats["categories"] += 1
                if c.get("parent_id") is not None:
                    pending_parents.append((existing.id, int(c["parent_id"])))
            if c.get("id") is not None:
                id_map[int(c["id"])] = existing.id

        # Parents may appear after their children in the backup.
        for new_id, old_parent in pending_parents:
            if old_parent not in id_map:
                raise ValidationError(f"Unknown parent category {old_parent} in backup.")
            self._category_dao.set_parent(new_id, id_map[old_parent])
        return id_map

    def _transaction_from_backup(
        self, raw: dict, account_map: dict[int, int], category_map: dict[int, int]
    ) -> Transaction:
        splits = []
        for s in raw.get("splits") or []:
            old_account = s.get("account_id")
            if old_account is None or int(old_account) not in account_map:
                raise ValidationError(
                    f"Transaction '{raw.get('description')}' references unknown account {old_account}."
                )
            category_id = s.get("category_id")
            if category_id is not None:
                if int(category_id) not in category_map:
                    raise ValidationError(f"Unknown category {category_id} in backup.")
                category_id = category_map[int(category_id)]
            amount = s.get("amount")
            if not isinstance(amount, int) or isinstance(amount, bool):
                raise ValidationError(f"Split amount must be integer minor units: {amount!r}")
            splits.append(Split(
                account_id=account_map[int(old_account)],
                amount=amount,
                category_id=category_id,
                currency=s.get("currency") or "USD",
                exchange_rate=float(s.get("exchange_rate") or 1.0),
            ))
        try:
            status = TransactionStatus.coerce(raw.get("status") or TransactionStatus.PENDING)
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc
        return Transaction(
            date=str(raw.get("date") or "")[:10],
            description=raw.get("description") or "",
            note=raw.get("note") or "",
            status=status,
            splits=splits,
        )

    # ── CSV import ────────────────────────────────────────────────────────────

    def import_csv(
        self,
        source,
        default_account: str | None = None,
        default_category: str | None = None,
    ) -> ImportResult:
        """Import transactions from a CSV path or open text file.

        Missing Date/Description/Amount headers fail the whole import up
        front. After that, rows are best-effort: a row with a bad date or
        amount is skipped and counted, the rest are posted one by one.
        """
        if isinstance(source, (str, bytes)) or hasattr(source, "__fspath__"):
            try:
                with open(source, "r", encoding="utf-8-sig", newline="") as f:
                    records = list(csv.reader(f))
            except OSError as exc:
                raise StorageError(f"Could not read CSV {source}: {exc}") from exc
        else:
            records = list(csv.reader(source))

        if not records:
            raise ValidationError("CSV file is empty; a header row is required.")
        columns = self._map_header(records[0])
        missing = [c for c in REQUIRED_CSV_COLUMNS if c not in columns]
        if missing:
            raise ValidationError(
                "CSV must have Date, Description, and Amount columns "
                f"(missing: {', '.join(missing)})."
            )

        accounts = self._account_dao.get_all()
        account_by_name = {a.name: a for a in accounts}
        funding_account = self._default_funding_account(accounts, default_account)
        expense_accounts = [a for a in accounts if a.type == AccountType.EXPENSE]
        if funding_account is None:
            raise ValidationError("No Cash or Bank account available for import.")
        if not expense_accounts:
            raise ValidationError("No Expense account available for import.")
        expense_account = expense_accounts[0]

        categories = self._category_dao.get_all()
        category_by_name = {c.name: c.id for c in categories}
        default_category_id = category_by_name.get(default_category) if default_category else None
        if default_category_id is None and categories:
            default_category_id = categories[0].id

        result = ImportResult()
        for line_no, row in enumerate(records[1:], start=2):
            if not any(cell.strip() for cell in row):
                continue

            def cell(name: str) -> str:
                idx = columns.get(name)
                if idx is None or idx >= len(row):
                    return ""
                return row[idx].strip()

            if any(columns[c] >= len(row) for c in REQUIRED_CSV_COLUMNS):
                self._skip(result, line_no, "row has too few columns")
                continue
            tx_date = parse_csv_date(cell("date"))
            if tx_date is None:
                self._skip(result, line_no, f"unparseable date '{cell('date')}'")
                continue
            try:
                cents = parse_amount(cell("amount"))
            except ValueError:
                self._skip(result, line_no, f"unparseable amount '{cell('amount')}'")
                continue
            description = cell("description")
            if not description:
                self._skip(result, line_no, "empty description")
                continue

            account = account_by_name.get(cell("account"), funding_account)
            category_id = category_by_name.get(cell("category")) if cell("category") else None
            note = cell("note")
            if self._rules is not None:
                enrichment = self._rules.enrich(description)
                description = enrichment.payee or description
                note = enrichment.note or note
                if category_id is None:
                    category_id = enrichment.category_id
            if category_id is None:
                category_id = default_category_id

            tx = Transaction(
                date=format_date(tx_date),
                description=description,
                note=note,
                splits=[
                    Split(account_id=account.id, amount=-cents, currency=account.currency),
                    Split(
                        account_id=expense_account.id,
                        amount=cents,
                        category_id=category_id,
                        currency=account.currency,
                    ),
                ],
            )
            try:
                self._tx_svc.post(tx)
            except ValidationError as exc:
                self._skip(result, line_no, str(exc))
                continue
            result.imported += 1

        logger.info("CSV import: %d imported, %d skipped", result.imported, result.skipped)
        return result

    def import_csv_text(self, text: str, **kwargs) -> ImportResult:
        return self.import_csv(io.StringIO(text), **kwargs)

    @staticmethod
    def _map_header(header: list[str]) -> dict[str, int]:
        columns: dict[str, int] = {}
        for idx, name in enumerate(header):
            key = CSV_COLUMNS.get(name.strip().lower())
            if key and key not in columns:
                columns[key] = idx
        return columns

    @staticmethod
    def _default_funding_account(accounts, name: str | None):
        if name:
            named = next((a for a in accounts if a.name == name), None)
            if named is not None:
                return named
        return next(
            (a for a in accounts if a.type in (AccountType.CASH, AccountType.BANK)),
            None,
        )

    @staticmethod
    def _skip(result: ImportResult, line_no: int, reason: str):
        logger.warning("Skipping CSV line %d: %s", line_no, reason)
        result.skip(f"line {line_no}: {reason}")
