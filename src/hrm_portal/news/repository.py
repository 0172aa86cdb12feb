from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from ..common.pagination import PageQuery
from .model import News


class NewsRepository(Protocol):
    def get_by_id(self, news_id: int) -> Optional[News]:
        raise NotImplementedError

    def search(self, query: PageQuery) -> tuple[Sequence[News], int]:
        """Page of news; ``query.search`` matches title or content."""
        raise NotImplementedError

    def create_news(
        self,
        *,
        title: str,
        content: str,
        thumbnail: Optional[str],
        tags: Sequence[str],
        created_by: int,
    ) -> int:
        raise NotImplementedError

    def update_fields(self, news_id: int, fields: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def delete_by_id(self, news_id: int) -> bool:
        raise NotImplementedError
