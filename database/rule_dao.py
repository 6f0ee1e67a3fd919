from typing import Optional
from database.db_manager import DatabaseManager
from models.rule import Rule


class RuleDAO:
    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> Rule:
        return Rule(
            id=row["id"],
            pattern=row["pattern"],
            target_category_id=row["target_category_id"],
            target_payee=row["target_payee"],
            target_note=row["target_note"],
        )

    def get_all(self) -> list[Rule]:
        """Rules in creation order; that order is the matching priority."""
        conn = self._db.get_connection()
        rows = conn.execute("SELECT * FROM rules ORDER BY id").fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_by_id(self, rule_id: int) -> Optional[Rule]:
        conn = self._db.get_connection()
        row = conn.execute("SELECT * FROM rules WHERE id = ?", (rule_id,)).fetchone()
        return self._row_to_model(row) if row else None

    def create(
        self,
        pattern: str,
        target_category_id: int | None = None,
        target_payee: str = "",
        target_note: str = "",
    ) -> Rule:
        with self._db.transaction() as conn:
            cursor = conn.execute(
                """INSERT INTO rules(pattern, target_category_id, target_payee, target_note)
                   VALUES (?, ?, ?, ?)""",
                (pattern, target_category_id, target_payee, target_note),
            )
            return self.get_by_id(cursor.lastrowid)

    def delete(self, rule_id: int):
        with self._db.transaction() as conn:
            conn.execute("DELETE FROM rules WHERE id = ?", (rule_id,))
