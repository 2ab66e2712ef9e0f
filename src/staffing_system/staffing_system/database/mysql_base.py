from __future__ import annotations

from contextlib import contextmanager
from datetime import time, timedelta
from typing import Any, Dict, List, Optional

import mysql.connector
from mysql.connector import errorcode

from ..core.exceptions import ConflictError, StorageError
from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True, duplicate_message: str = "Record already exists"):
    """Yield (conn, cursor) inside a transaction.

    Duplicate-key violations surface as ConflictError so a lost race on a
    natural key never leaks a raw driver exception; other driver errors
    become StorageError.
    """
    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as e:
        raise StorageError(f"Database unavailable: {e.msg}") from e

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.IntegrityError as e:
        conn.rollback()
        if e.errno == errorcode.ER_DUP_ENTRY:
            raise ConflictError(duplicate_message) from e
        raise StorageError(e.msg) from e
    except mysql.connector.Error as e:
        conn.rollback()
        raise StorageError(e.msg) from e
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


def where_clause(clauses: list[str]) -> str:
    return " AND ".join(clauses) if clauses else "1=1"


def mysql_time_to_hhmm(value: Any) -> Optional[str]:
    """Render a TIME column as 'HH:MM'.

    mysql-connector hands TIME back as a timedelta (C extension and pure
    Python alike); plain `time` objects and 'HH:MM[:SS]' strings are accepted
    too.
    """
    if value is None:
        return None
    if isinstance(value, time):
        return value.strftime("%H:%M")
    if isinstance(value, timedelta):
        minutes = int(value.total_seconds()) // 60 % (24 * 60)
        return f"{minutes // 60:02d}:{minutes % 60:02d}"
    if isinstance(value, str) and value.count(":") >= 1:
        hours, minutes = value.strip().split(":")[:2]
        return f"{int(hours):02d}:{int(minutes):02d}"
    raise TypeError(f"Unsupported MySQL TIME value: {value!r}")
