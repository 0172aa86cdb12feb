from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Optional

from ..core.constants import NEWS_FRESH_HOURS


@dataclass(frozen=True)
class News:
    news_id: int
    title: str
    content: str
    created_by: int
    thumbnail: Optional[str] = None
    tags: tuple[str, ...] = field(default_factory=tuple)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def is_new(self, now: datetime) -> bool:
        if self.created_at is None:
            return False
        return now - self.created_at < timedelta(hours=NEWS_FRESH_HOURS)
