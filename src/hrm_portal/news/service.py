from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Union

from ..common.pagination import Page, PageQuery
from ..common.validators import require_max_length, require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..users.model import User
from .model import News
from .repository import NewsRepository

logger = logging.getLogger(__name__)

TagsInput = Union[str, Iterable[str], None]


def parse_tags(tags: TagsInput) -> tuple[str, ...]:
    """Tags from a list or a comma-separated string, trimmed and de-duplicated in order."""
    if tags is None:
        return ()
    parts = tags.split(",") if isinstance(tags, str) else tags
    seen: dict[str, None] = {}
    for part in parts:
        tag = str(part).strip()
        if "," in tag:
            raise ValidationError("Tags must not contain commas")
        if tag:
            seen.setdefault(tag, None)
    return tuple(seen)


@dataclass(frozen=True)
class NewsData:
    title: str
    content: str
    thumbnail: Optional[str] = None
    tags: TagsInput = None


class NewsService:
    def __init__(self, news: NewsRepository):
        self._news = news

    def _require_news(self, news_id: int) -> News:
        item = self._news.get_by_id(int(news_id))
        if not item:
            raise NotFoundError("News not found")
        return item

    def list(self, query: PageQuery) -> Page[News]:
        items, total = self._news.search(query)
        return Page(items=items, total=total, query=query)

    def get(self, news_id: int) -> News:
        return self._require_news(news_id)

    def create(self, author: User, data: NewsData) -> News:
        news_id = self._news.create_news(
            title=require_max_length(require_non_empty(data.title, "title"), "title", 255),
            content=require_non_empty(data.content, "content"),
            thumbnail=data.thumbnail or None,
            tags=parse_tags(data.tags),
            created_by=author.user_id,
        )
        logger.info("User %s published news %s", author.user_id, news_id)
        return self._require_news(news_id)

    def update(
        self,
        news_id: int,
        *,
        title: Optional[str] = None,
        content: Optional[str] = None,
        thumbnail: Optional[str] = None,
        tags: TagsInput = None,
    ) -> News:
        item = self._require_news(news_id)
        fields: dict = {}
        if title is not None:
            fields["title"] = require_max_length(require_non_empty(title, "title"), "title", 255)
        if content is not None:
            fields["content"] = require_non_empty(content, "content")
        if thumbnail is not None:
            fields["thumbnail"] = thumbnail or None
        if tags is not None:
            fields["tags"] = parse_tags(tags)
        self._news.update_fields(item.news_id, fields)
        return self._require_news(item.news_id)

    def delete(self, actor: User, news_id: int) -> None:
        item = self._require_news(news_id)
        if actor.role != Role.ADMIN and item.created_by != actor.user_id:
            raise AuthorizationError("Not authorized to delete this news")
        self._news.delete_by_id(item.news_id)
        logger.info("News %s deleted by user %s", item.news_id, actor.user_id)
