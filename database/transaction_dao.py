import logging
import sqlite3
from typing import Optional
from database.db_manager import DatabaseManager
from models.account import AccountType
from models.transaction import Split, Transaction, TransactionStatus

logger = logging.getLogger(__name__)


class TransactionDAO:
    def __init__(self, db: DatabaseManager):
        self._db = db

    # ── Row mapping ──────────────────────────────────────────────────────────

    def _row_to_model(self, row) -> Transaction:
        return Transaction(
            id=row["id"],
            date=row["date"],
            description=row["description"],
            note=row["note"],
            status=TransactionStatus(row["status"]),
        )

    def _row_to_split(self, row) -> Split:
        return Split(
            id=row["id"],
            transaction_id=row["transaction_id"],
            account_id=row["account_id"],
            category_id=row["category_id"],
            amount=row["amount"],
            currency=row["currency"],
            exchange_rate=row["exchange_rate"],
        )

    def _hydrate(self, rows) -> list[Transaction]:
        """Build headers and attach their splits with one batched query."""
        transactions = [self._row_to_model(r) for r in rows]
        if not transactions:
            return transactions
        by_id = {tx.id: tx for tx in transactions}
        placeholders = ",".join("?" * len(by_id))
        conn = self._db.get_connection()
        split_rows = conn.execute(
            f"""SELECT * FROM splits
                WHERE transaction_id IN ({placeholders})
                ORDER BY transaction_id, id""",
            list(by_id),
        ).fetchall()
        for row in split_rows:
            by_id[row["transaction_id"]].splits.append(self._row_to_split(row))
        return transactions

    # ── Reads ────────────────────────────────────────────────────────────────

    def get_all(self) -> list[Transaction]:
        conn = self._db.get_connection()
        rows = conn.execute(
            "SELECT * FROM transactions ORDER BY date ASC, id ASC"
        ).fetchall()
        return self._hydrate(rows)

    def get_recent(self, limit: int) -> list[Transaction]:
        conn = self._db.get_connection()
        rows = conn.execute(
            "SELECT * FROM transactions ORDER BY date DESC, id DESC LIMIT ?",
            (limit,),
        ).fetchall()
        return self._hydrate(rows)

    def get_by_id(self, tx_id: int) -> Optional[Transaction]:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT * FROM transactions WHERE id = ?", (tx_id,)
        ).fetchone()
        if row is None:
            return None
        return self._hydrate([row])[0]

    def get_splits(self, tx_id: int) -> list[Split]:
        conn = self._db.get_connection()
        rows = conn.execute(
            "SELECT * FROM splits WHERE transaction_id = ? ORDER BY id", (tx_id,)
        ).fetchall()
        return [self._row_to_split(r) for r in rows]

    def search(
        self,
        text: str | None = None,
        start_date: str | None = None,
        end_date: str | None = None,
        min_amount: int | None = None,
        max_amount: int | None = None,
        limit: int = 100,
    ) -> list[Transaction]:
        """All filters optional and ANDed together. Amount bounds are minor
        units compared against the sum of the transaction's debit legs."""
        sql = """
            SELECT t.* FROM transactions t
            WHERE 1=1
        """
        params: list = []
        if text:
            sql += " AND casefold(t.description) LIKE ? ESCAPE '\\'"
            escaped = (
                text.casefold().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
            )
            params.append(f"%{escaped}%")
        if start_date:
            sql += " AND t.date >= ?"
            params.append(start_date)
        if end_date:
            sql += " AND t.date <= ?"
            params.append(end_date)
        if min_amount is not None or max_amount is not None:
            debit_total = """(SELECT COALESCE(SUM(s.amount), 0) FROM splits s
                              WHERE s.transaction_id = t.id AND s.amount > 0)"""
            if min_amount is not None:
                sql += f" AND {debit_total} >= ?"
                params.append(min_amount)
            if max_amount is not None:
                sql += f" AND {debit_total} <= ?"
                params.append(max_amount)
        sql += " ORDER BY t.date DESC, t.id DESC LIMIT ?"
        params.append(limit)
        rows = self._db.get_connection().execute(sql, params).fetchall()
        return self._hydrate(rows)

    # ── Writes ───────────────────────────────────────────────────────────────

    def _insert_splits(self, conn: sqlite3.Connection, tx_id: int, splits: list[Split]) -> list[int]:
        ids = []
        for s in splits:
            cursor = conn.execute(
                """INSERT INTO splits
                   (transaction_id, account_id, category_id, amount, currency, exchange_rate)
                   VALUES (?, ?, ?, ?, ?, ?)""",
                (tx_id, s.account_id, s.category_id, s.amount, s.currency, s.exchange_rate),
            )
            ids.append(cursor.lastrowid)
        return ids

    def create(self, tx: Transaction) -> Transaction:
        """Insert header and splits as one unit. Ids are written back onto
        tx and its splits only once the insert has succeeded."""
        with self._db.transaction() as conn:
            cursor = conn.execute(
                """INSERT INTO transactions (date, description, note, status)
                   VALUES (?, ?, ?, ?)""",
                (tx.date, tx.description, tx.note, tx.status.value),
            )
            tx_id = cursor.lastrowid
            split_ids = self._insert_splits(conn, tx_id, tx.splits)
        tx.id = tx_id
        for split, split_id in zip(tx.splits, split_ids):
            split.id = split_id
            split.transaction_id = tx_id
        return tx

    def update(self, tx: Transaction) -> bool:
        """Rewrite header fields and, if they changed, the split set.
        Returns False when no transaction has tx.id."""
        with self._db.transaction() as conn:
            cursor = conn.execute(
                """UPDATE transactions
                   SET date = ?, description = ?, note = ?, status = ?
                   WHERE id = ?""",
                (tx.date, tx.description, tx.note, tx.status.value, tx.id),
            )
            if cursor.rowcount == 0:
                return False
            stored = self.get_splits(tx.id)
            unchanged = len(stored) == len(tx.splits) and all(
                a.same_posting(b) for a, b in zip(stored, tx.splits)
            )
            if unchanged:
                split_ids = [s.id for s in stored]
            else:
                logger.debug("Replacing %d splits of transaction %s", len(stored), tx.id)
                conn.execute("DELETE FROM splits WHERE transaction_id = ?", (tx.id,))
                split_ids = self._insert_splits(conn, tx.id, tx.splits)
        for split, split_id in zip(tx.splits, split_ids):
            split.id = split_id
            split.transaction_id = tx.id
        return True

    def delete(self, tx_id: int) -> bool:
        with self._db.transaction() as conn:
            cursor = conn.execute("DELETE FROM transactions WHERE id = ?", (tx_id,))
            return cursor.rowcount > 0

    # ── Aggregates ───────────────────────────────────────────────────────────

    def get_account_balance(self, account_id: int) -> int:
        """Sum of the account's splits in minor units (0 with no postings)."""
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT COALESCE(SUM(amount), 0) AS balance FROM splits WHERE account_id = ?",
            (account_id,),
        ).fetchone()
        return row["balance"]

    def get_balances(self) -> dict[int, int]:
        """Return {account_id: balance_minor_units} for every account."""
        conn = self._db.get_connection()
        rows = conn.execute(
            """SELECT a.id AS account_id, COALESCE(SUM(s.amount), 0) AS balance
               FROM accounts a
               LEFT JOIN splits s ON s.account_id = a.id
               GROUP BY a.id"""
        ).fetchall()
        return {r["account_id"]: r["balance"] for r in rows}

    def sum_by_account_types(self, *types: AccountType) -> float:
        """SUM(amount * exchange_rate) over accounts of the given types, in
        base-currency minor units."""
        conn = self._db.get_connection()
        placeholders = ",".join("?" * len(types))
        row = conn.execute(
            f"""SELECT COALESCE(SUM(s.amount * s.exchange_rate), 0) AS total
                FROM splits s
                JOIN accounts a ON s.account_id = a.id
                WHERE a.type IN ({placeholders})""",
            [t.value for t in types],
        ).fetchone()
        return row["total"]

    def get_monthly_totals(self, since: str) -> list[dict]:
        """[{month, income, expense}] in minor units for transactions dated
        after `since`, oldest month first. Only months with postings appear."""
        conn = self._db.get_connection()
        rows = conn.execute(
            """SELECT strftime('%Y-%m', t.date) AS month,
                      SUM(CASE WHEN a.type = ? THEN ABS(s.amount) ELSE 0 END) AS income,
                      SUM(CASE WHEN a.type = ? THEN s.amount ELSE 0 END) AS expense
               FROM transactions t
               JOIN splits s ON s.transaction_id = t.id
               JOIN accounts a ON s.account_id = a.id
               WHERE t.date > ?
               GROUP BY month
               ORDER BY month ASC""",
            (AccountType.INCOME.value, AccountType.EXPENSE.value, since),
        ).fetchall()
        return [dict(r) for r in rows]

    def get_expense_by_category(self, start_date: str, end_date: str) -> list[dict]:
        conn = self._db.get_connection()
        rows = conn.execute(
            """SELECT c.id AS category_id,
                      c.name AS category,
                      c.color AS color,
                      SUM(s.amount) AS total
               FROM splits s
               JOIN transactions t ON s.transaction_id = t.id
               JOIN categories c ON s.category_id = c.id
               WHERE s.amount > 0
                 AND t.date >= ?
                 AND t.date <= ?
               GROUP BY c.id
               ORDER BY total DESC, c.name ASC""",
            (start_date, end_date),
        ).fetchall()
        return [dict(r) for r in rows]

    def get_repeated_payees(self, since: str, min_count: int) -> list[dict]:
        """Debit legs dated after `since`, grouped by description, keeping
        groups with at least min_count postings."""
        conn = self._db.get_connection()
        rows = conn.execute(
            """SELECT t.description AS description,
                      COUNT(*) AS cnt,
                      AVG(s.amount) AS avg_amount,
                      MAX(t.date) AS last_date
               FROM transactions t
               JOIN splits s ON s.transaction_id = t.id
               WHERE s.amount > 0
                 AND t.date > ?
               GROUP BY t.description
               HAVING cnt >= ?
               ORDER BY t.description""",
            (since, min_count),
        ).fetchall()
        return [dict(r) for r in rows]

    def get_large_debits(self, since: str, threshold: int) -> list[dict]:
        conn = self._db.get_connection()
        rows = conn.execute(
            """SELECT t.id AS transaction_id, t.date, t.description, s.amount
               FROM transactions t
               JOIN splits s ON s.transaction_id = t.id
               WHERE s.amount > ?
                 AND t.date > ?
               ORDER BY t.date DESC, t.id DESC, s.id ASC""",
            (threshold, since),
        ).fetchall()
        return [dict(r) for r in rows]
