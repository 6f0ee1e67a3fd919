from typing import Optional
from database.db_manager import DatabaseManager
from models.budget import Budget, BudgetPeriod


class BudgetDAO:
    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> Budget:
        return Budget(
            id=row["id"],
            category_id=row["category_id"],
            amount=row["amount"],
            period=BudgetPeriod(row["period"]),
            category_name=row["category_name"] if "category_name" in row.keys() else "",
        )

    def get_all(self) -> list[Budget]:
        conn = self._db.get_connection()
        rows = conn.execute(
            """SELECT b.*, c.name AS category_name
               FROM budgets b JOIN categories c ON b.category_id = c.id
               ORDER BY b.id"""
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_by_id(self, budget_id: int) -> Optional[Budget]:
        conn = self._db.get_connection()
        row = conn.execute(
            """SELECT b.*, c.name AS category_name
               FROM budgets b JOIN categories c ON b.category_id = c.id
               WHERE b.id = ?""",
            (budget_id,),
        ).fetchone()
        return self._row_to_model(row) if row else None

    def create(self, category_id: int, amount: int, period: BudgetPeriod) -> Budget:
        with self._db.transaction() as conn:
            cursor = conn.execute(
                "INSERT INTO budgets(category_id, amount, period) VALUES (?, ?, ?)",
                (category_id, amount, period.value),
            )
            return self.get_by_id(cursor.lastrowid)

    def delete(self, budget_id: int):
        with self._db.transaction() as conn:
            conn.execute("DELETE FROM budgets WHERE id = ?", (budget_id,))

    def get_spent_for_month(self, month: str) -> list[dict]:
        """Every budget with the positive (expense-leg) spend in its category
        for the YYYY-MM month, in minor units."""
        conn = self._db.get_connection()
        rows = conn.execute(
            """SELECT b.id AS budget_id,
                      b.category_id,
                      c.name  AS category_name,
                      c.color AS color,
                      b.amount AS budgeted,
                      COALESCE((
                          SELECT SUM(s.amount)
                          FROM splits s
                          JOIN transactions t ON s.transaction_id = t.id
                          WHERE s.category_id = b.category_id
                            AND strftime('%Y-%m', t.date) = ?
                            AND s.amount > 0
                      ), 0) AS spent
               FROM budgets b
               JOIN categories c ON b.category_id = c.id
               WHERE b.period = ?
               ORDER BY b.id""",
            (month, BudgetPeriod.MONTHLY.value),
        ).fetchall()
        return [dict(r) for r in rows]
