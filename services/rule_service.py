import logging

from database.category_dao import CategoryDAO
from database.rule_dao import RuleDAO
from models.rule import Enrichment, Rule
from utils.errors import ValidationError

logger = logging.getLogger(__name__)


class RuleService:
    def __init__(self, rule_dao: RuleDAO, category_dao: CategoryDAO):
        self._dao = rule_dao
        self._category_dao = category_dao

    def get_all(self) -> list[Rule]:
        return self._dao.get_all()

    def create(
        self,
        pattern: str,
        target_category_id: int | None = None,
        target_payee: str = "",
        target_note: str = "",
    ) -> Rule:
        pattern = (pattern or "").strip()
        if not pattern:
            raise ValidationError("Rule pattern cannot be empty.")
        if target_category_id is not None and self._category_dao.get_by_id(target_category_id) is None:
            raise ValidationError(f"Category {target_category_id} does not exist.")
        return self._dao.create(
            pattern, target_category_id, (target_payee or "").strip(), (target_note or "").strip()
        )

    def delete(self, rule_id: int):
        self._dao.delete(rule_id)

    def enrich(self, description: str) -> Enrichment:
        """First rule (in creation order) whose pattern occurs in the
        description, case-insensitively, wins. Fields the rule leaves blank
        fall back to the original description / no category / empty note."""
        description = description or ""
        for rule in self._dao.get_all():
            if rule.matches(description):
                logger.debug("Rule %s matched '%s'", rule.id, description)
                return Enrichment(
                    payee=rule.target_payee or description,
                    category_id=rule.target_category_id,
                    note=rule.target_note,
                    rule_id=rule.id,
                )
        return Enrichment(payee=description)
