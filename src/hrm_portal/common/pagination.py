from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Generic, Sequence, TypeVar

from ..core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE

T = TypeVar("T")


@dataclass(frozen=True)
class PageQuery:
    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE
    search: str = ""
    sort: str | None = None
    descending: bool = True

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @classmethod
    def from_args(cls, args, *, default_sort: str | None = None, default_desc: bool = True) -> "PageQuery":
        """Build from a query-string mapping (``page``, ``limit``, ``search``, ``sort``, ``direction``)."""

        def _int(name: str, default: int) -> int:
            try:
                return int(args.get(name) or default)
            except (TypeError, ValueError):
                return default

        page = max(_int("page", 1), 1)
        limit = min(max(_int("limit", DEFAULT_PAGE_SIZE), 1), MAX_PAGE_SIZE)
        direction = (args.get("direction") or "").lower()
        descending = default_desc if direction not in {"asc", "desc"} else direction == "desc"
        return cls(
            page=page,
            limit=limit,
            search=(args.get("search") or "").strip(),
            sort=args.get("sort") or default_sort,
            descending=descending,
        )


@dataclass(frozen=True)
class Page(Generic[T]):
    items: Sequence[T]
    total: int
    query: PageQuery = field(default_factory=PageQuery)

    def meta(self) -> dict:
        return {
            "total": self.total,
            "page": self.query.page,
            "totalPages": math.ceil(self.total / self.query.limit) if self.query.limit else 0,
            "limit": self.query.limit,
        }
