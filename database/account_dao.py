from typing import Optional
from database.db_manager import DatabaseManager
from models.account import Account, AccountType


class AccountDAO:
    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> Account:
        return Account(
            id=row["id"],
            name=row["name"],
            type=AccountType(row["type"]),
            currency=row["currency"],
        )

    def get_all(self) -> list[Account]:
        conn = self._db.get_connection()
        rows = conn.execute("SELECT * FROM accounts ORDER BY id").fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_by_id(self, account_id: int) -> Optional[Account]:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT * FROM accounts WHERE id = ?", (account_id,)
        ).fetchone()
        return self._row_to_model(row) if row else None

    def get_by_name(self, name: str) -> Optional[Account]:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT * FROM accounts WHERE name = ?", (name,)
        ).fetchone()
        return self._row_to_model(row) if row else None

    def get_by_type(self, *types: AccountType) -> list[Account]:
        if not types:
            return []
        conn = self._db.get_connection()
        placeholders = ",".join("?" * len(types))
        rows = conn.execute(
            f"SELECT * FROM accounts WHERE type IN ({placeholders}) ORDER BY id",
            [t.value for t in types],
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def create(self, name: str, type_: AccountType, currency: str = "USD") -> Account:
        with self._db.transaction() as conn:
            cursor = conn.execute(
                "INSERT INTO accounts(name, type, currency) VALUES (?, ?, ?)",
                (name, type_.value, currency),
            )
            return self.get_by_id(cursor.lastrowid)

    def delete(self, account_id: int):
        with self._db.transaction() as conn:
            conn.execute("DELETE FROM accounts WHERE id = ?", (account_id,))

    def has_splits(self, account_id: int) -> bool:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT COUNT(*) AS cnt FROM splits WHERE account_id = ?",
            (account_id,),
        ).fetchone()
        return row["cnt"] > 0
