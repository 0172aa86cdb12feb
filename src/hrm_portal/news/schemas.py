from __future__ import annotations

from datetime import datetime
from typing import Optional, Union

from pydantic import Field

from ..api.payload import ApiModel


class NewsCreateIn(ApiModel):
    title: str = Field(min_length=1, max_length=255)
    content: str = Field(min_length=1)
    thumbnail: Optional[str] = None
    tags: Union[list[str], str, None] = None


class NewsUpdateIn(ApiModel):
    title: Optional[str] = Field(default=None, max_length=255)
    content: Optional[str] = None
    thumbnail: Optional[str] = None
    tags: Union[list[str], str, None] = None


class NewsOut(ApiModel):
    id: int = Field(validation_alias="news_id")
    title: str
    content: str
    thumbnail: Optional[str] = None
    tags: list[str]
    created_by: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    is_new: bool
