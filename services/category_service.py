import re

from database.category_dao import CategoryDAO
from models.category import Category
from utils.errors import ValidationError

_HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")


class CategoryService:
    def __init__(self, category_dao: CategoryDAO):
        self._dao = category_dao

    def get_all(self) -> list[Category]:
        return self._dao.get_all()

    def get_by_id(self, category_id: int) -> Category | None:
        return self._dao.get_by_id(category_id)

    def get_by_name(self, name: str) -> Category | None:
        return self._dao.get_by_name((name or "").strip())

    def get_roots(self) -> list[Category]:
        return self._dao.get_children(None)

    def get_children(self, parent_id: int) -> list[Category]:
        return self._dao.get_children(parent_id)

    def create(
        self,
        name: str,
        icon: str = "",
        color: str = "#888888",
        parent_id: int | None = None,
    ) -> Category:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Category name cannot be empty.")
        existing = [c.name.lower() for c in self._dao.get_all()]
        if name.lower() in existing:
            raise ValidationError(f"A category named '{name}' already exists.")
        if not _HEX_COLOR.match(color or ""):
            raise ValidationError(f"Invalid color '{color}'. Use #RRGGBB.")
        if parent_id is not None and self._dao.get_by_id(parent_id) is None:
            raise ValidationError(f"Parent category {parent_id} does not exist.")
        return self._dao.create(name, icon or "", color, parent_id)

    def delete(self, category_id: int):
        if self._dao.reference_count(category_id):
            raise ValidationError(
                "Category is in use by postings, budgets, rules or subcategories."
            )
        self._dao.delete(category_id)
