from __future__ import annotations

import logging
from contextlib import contextmanager
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

import mysql.connector
from mysql.connector import errorcode

from ..core.exceptions import ConflictError, InternalError
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """One unit of work: commit on success, rollback on any error.

    Store failures other than duplicate keys surface as ``InternalError``.
    """
    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as exc:
        logger.exception("Could not connect to database")
        raise InternalError("Database unavailable") from exc
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.Error as exc:
        conn.rollback()
        logger.exception("Database operation failed")
        raise InternalError("Database operation failed") from exc
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


@contextmanager
def unique_insert(conflict_message: str):
    """Translate a duplicate-key violation into ``ConflictError``."""
    try:
        yield
    except mysql.connector.IntegrityError as exc:
        if exc.errno == errorcode.ER_DUP_ENTRY:
            raise ConflictError(conflict_message) from exc
        raise


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def build_where(clauses: Iterable[Tuple[str, Any]]) -> Tuple[str, List[Any]]:
    """Join ``(sql_fragment, param)`` pairs, skipping those whose param is None."""
    parts: list[str] = []
    params: list[Any] = []
    for fragment, param in clauses:
        if param is None:
            continue
        parts.append(fragment)
        params.append(param)
    return (" AND ".join(parts) or "1=1"), params


def build_set(fields: Mapping[str, Any], columns: Mapping[str, str]) -> Tuple[str, List[Any]]:
    """Build an UPDATE SET clause from whitelisted ``field -> column`` names."""
    parts: list[str] = []
    params: list[Any] = []
    for name, value in fields.items():
        column = columns.get(name)
        if column is None:
            raise KeyError(f"Unsupported field: {name}")
        parts.append(f"{column}=%s")
        params.append(value.value if isinstance(value, Enum) else value)
    return ", ".join(parts), params


def as_params(values: Sequence[Any]) -> tuple:
    return tuple(v.value if isinstance(v, Enum) else v for v in values)
