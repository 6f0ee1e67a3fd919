from dataclasses import dataclass
from typing import Optional


@dataclass
class Category:
    id: Optional[int]
    name: str
    icon: str = ""
    color: str = "#888888"
    parent_id: Optional[int] = None   # None = root

    @property
    def is_root(self) -> bool:
        return self.parent_id is None
