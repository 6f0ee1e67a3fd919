from dataclasses import dataclass
from typing import Optional


@dataclass
class Rule:
    id: Optional[int]
    pattern: str            # case-insensitive substring of the description
    target_category_id: Optional[int] = None
    target_payee: str = ""
    target_note: str = ""

    def matches(self, description: str) -> bool:
        return bool(self.pattern) and self.pattern.casefold() in (description or "").casefold()


@dataclass
class Enrichment:
    payee: str
    category_id: Optional[int] = None
    note: str = ""
    rule_id: Optional[int] = None

    @property
    def matched(self) -> bool:
        return self.rule_id is not None
