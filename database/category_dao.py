from typing import Optional
from database.db_manager import DatabaseManager
from models.category import Category


class CategoryDAO:
    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> Category:
        return Category(
            id=row["id"],
            name=row["name"],
            icon=row["icon"],
            color=row["color"],
            parent_id=row["parent_id"],
        )

    def get_all(self) -> list[Category]:
        conn = self._db.get_connection()
        rows = conn.execute("SELECT * FROM categories ORDER BY id").fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_by_id(self, category_id: int) -> Optional[Category]:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT * FROM categories WHERE id = ?", (category_id,)
        ).fetchone()
        return self._row_to_model(row) if row else None

    def get_by_name(self, name: str) -> Optional[Category]:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT * FROM categories WHERE name = ? COLLATE NOCASE", (name,)
        ).fetchone()
        return self._row_to_model(row) if row else None

    def get_children(self, parent_id: int | None) -> list[Category]:
        """Direct children of parent_id; parent_id=None returns the roots."""
        conn = self._db.get_connection()
        if parent_id is None:
            rows = conn.execute(
                "SELECT * FROM categories WHERE parent_id IS NULL ORDER BY id"
            ).fetchall()
        else:
            rows = conn.execute(
                "SELECT * FROM categories WHERE parent_id = ? ORDER BY id",
                (parent_id,),
            ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def create(
        self,
        name: str,
        icon: str = "",
        color: str = "#888888",
        parent_id: int | None = None,
    ) -> Category:
        with self._db.transaction() as conn:
            cursor = conn.execute(
                "INSERT INTO categories(name, icon, color, parent_id) VALUES (?, ?, ?, ?)",
                (name, icon, color, parent_id),
            )
            return self.get_by_id(cursor.lastrowid)

    def set_parent(self, category_id: int, parent_id: int | None):
        with self._db.transaction() as conn:
            conn.execute(
                "UPDATE categories SET parent_id = ? WHERE id = ?",
                (parent_id, category_id),
            )

    def delete(self, category_id: int):
        with self._db.transaction() as conn:
            conn.execute("DELETE FROM categories WHERE id = ?", (category_id,))

    def reference_count(self, category_id: int) -> int:
        """Rows in splits, budgets, rules and child categories pointing at this one."""
        conn = self._db.get_connection()
        row = conn.execute(
            """SELECT
                (SELECT COUNT(*) FROM splits     WHERE category_id = :id) +
                (SELECT COUNT(*) FROM budgets    WHERE category_id = :id) +
                (SELECT COUNT(*) FROM rules      WHERE target_category_id = :id) +
                (SELECT COUNT(*) FROM categories WHERE parent_id = :id) AS cnt""",
            {"id": category_id},
        ).fetchone()
        return row["cnt"]
