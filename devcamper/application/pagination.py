from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Generic, List, TypeVar

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 25
MAX_PAGE_SIZE = 100


@dataclass(slots=True)
class Page(Generic[T]):
    items: List[T]
    total: int
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return offset_for(self.page, self.limit)

    def links(self) -> Dict[str, Any]:
        """Neighbouring page references, present only when that page has items."""
        links: Dict[str, Any] = {}
        if self.offset + self.limit < self.total:
            links["next"] = {"page": self.page + 1, "limit": self.limit}
        if self.page > 1:
            links["prev"] = {"page": self.page - 1, "limit": self.limit}
        return links


def offset_for(page: int, limit: int) -> int:
    return (page - 1) * limit
