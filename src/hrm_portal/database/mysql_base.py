from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, Iterable, List, Optional, Sequence

from mysql.connector import errorcode
from mysql.connector.errors import IntegrityError

from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def is_duplicate_key(exc: Exception) -> bool:
    """True when ``exc`` is MySQL's unique-constraint violation."""
    return isinstance(exc, IntegrityError) and getattr(exc, "errno", None) == errorcode.ER_DUP_ENTRY


def in_clause(values: Sequence[Any]) -> str:
    """Placeholder list for ``IN (...)``; callers must pass a non-empty sequence."""
    return ", ".join(["%s"] * len(values))


def order_clause(sort: Optional[str], allowed: Dict[str, str], *, default: str, descending: bool) -> str:
    """Whitelisted ORDER BY fragment built from an API sort key."""
    column = allowed.get(sort or "", allowed[default])
    return f"{column} {'DESC' if descending else 'ASC'}"


def like(term: str) -> str:
    return f"%{term}%"


def where(clauses: Iterable[str]) -> str:
    clauses = list(clauses)
    return ("WHERE " + " AND ".join(clauses)) if clauses else ""
