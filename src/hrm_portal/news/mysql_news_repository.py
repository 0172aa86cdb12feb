from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from ..common.pagination import PageQuery
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, like, order_clause, where
from .model import News
from .repository import NewsRepository

_COLUMNS = "news_id, title, content, thumbnail, tags, created_by, created_at, updated_at"
_SORTABLE = {"createdAt": "created_at", "title": "title"}
_UPDATABLE = {"title", "content", "thumbnail", "tags"}


def _split_tags(raw: Optional[str]) -> tuple[str, ...]:
    return tuple(t for t in (part.strip() for part in (raw or "").split(",")) if t)


def _to_news(r: dict) -> News:
    return News(
        news_id=int(r["news_id"]),
        title=r["title"],
        content=r["content"],
        thumbnail=r.get("thumbnail"),
        tags=_split_tags(r.get("tags")),
        created_by=int(r["created_by"]),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLNewsRepository(NewsRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, news_id: int) -> Optional[News]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM news WHERE news_id=%s", (news_id,))
            r = fetchone(cur)
            return _to_news(r) if r else None

    def search(self, query: PageQuery) -> tuple[Sequence[News], int]:
        clauses: list[str] = []
        params: list = []
        if query.search:
            term = like(query.search)
            clauses.append("(title LIKE %s OR content LIKE %s)")
            params.extend([term, term])

        order = order_clause(query.sort, _SORTABLE, default="createdAt", descending=query.descending)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total FROM news {where(clauses)}", tuple(params))
            total = int(fetchone(cur)["total"])
            cur.execute(
                f"SELECT {_COLUMNS} FROM news {where(clauses)} ORDER BY {order}, news_id DESC LIMIT %s OFFSET %s",
                (*params, query.limit, query.offset),
            )
            return [_to_news(r) for r in fetchall(cur)], total

    def create_news(
        self,
        *,
        title: str,
        content: str,
        thumbnail: Optional[str],
        tags: Sequence[str],
        created_by: int,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO news(title, content, thumbnail, tags, created_by) VALUES(%s,%s,%s,%s,%s)",
                (title, content, thumbnail, ",".join(tags), created_by),
            )
            return int(cur.lastrowid)

    def update_fields(self, news_id: int, fields: Mapping[str, Any]) -> bool:
        unknown = set(fields) - _UPDATABLE
        if unknown:
            raise ValueError(f"Not updatable: {sorted(unknown)}")
        if not fields:
            return True
        values = [",".join(v) if name == "tags" else v for name, v in fields.items()]
        assignments = ", ".join(f"{name}=%s" for name in fields)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE news SET {assignments} WHERE news_id=%s", (*values, news_id))
            return cur.rowcount > 0

    def delete_by_id(self, news_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM news WHERE news_id=%s", (news_id,))
            return cur.rowcount > 0
