from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import User
from .repository import UserRepository

_COLUMNS = "user_id, name, username, email, password_hash, is_active, created_at"


def _to_user(row: dict) -> User:
    return User(
        user_id=int(row["user_id"]),
        name=row["name"],
        username=row["username"],
        password_hash=row["password_hash"],
        email=row.get("email"),
        is_active=bool(row.get("is_active", True)),
        created_at=row.get("created_at"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_one(self, column: str, value) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE {column}=%s", (value,))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._get_one("user_id", int(user_id))

    def get_by_username(self, username: str) -> Optional[User]:
        return self._get_one("username", username)

    def get_by_email(self, email: str) -> Optional[User]:
        return self._get_one("email", email)

    def create_user(
        self,
        *,
        name: str,
        username: str,
        email: Optional[str],
        password_hash: str,
    ) -> int:
        with db_cursor(self._conn_factory, duplicate_message="Username or email already registered") as (_, cur):
            cur.execute(
                """
                INSERT INTO users(name, username, email, password_hash, is_active)
                VALUES(%s,%s,%s,%s,1)
                """,
                (name, username, email, password_hash),
            )
            return int(cur.lastrowid)

    def list_all(self) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users ORDER BY user_id")
            return [_to_user(r) for r in fetchall(cur)]

    def update_user(
        self,
        *,
        user_id: int,
        name: str,
        username: str,
        email: Optional[str],
        password_hash: str,
    ) -> bool:
        with db_cursor(self._conn_factory, duplicate_message="Username or email already registered") as (_, cur):
            cur.execute(
                """
                UPDATE users
                SET name=%s, username=%s, email=%s, password_hash=%s
                WHERE user_id=%s
                """,
                (name, username, email, password_hash, int(user_id)),
            )
            return cur.rowcount > 0

    def delete(self, user_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM users WHERE user_id=%s", (int(user_id),))
            return cur.rowcount > 0
