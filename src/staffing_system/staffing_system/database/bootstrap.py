"""Apply database/schema.sql to the configured MySQL server."""

from __future__ import annotations

import logging
import re
from contextlib import closing
from pathlib import Path
from typing import Iterator, Union

from .connection import DBConfig, DatabaseConnection

logger = logging.getLogger(__name__)

# The schema names its own database; the configured name wins.
_DATABASE_DIRECTIVES = re.compile(r"(?im)^\s*(CREATE\s+DATABASE|USE)\b[^;]*;")
_LINE_COMMENT = re.compile(r"(?m)^\s*--.*$")
# A ';' followed by an even number of single quotes ends a statement.
_STATEMENT_END = re.compile(r";(?=(?:[^']*'[^']*')*[^']*$)")


def split_statements(sql: str) -> Iterator[str]:
    """Yield the executable statements of a schema script.

    Database selection lines and `--` comments are dropped; semicolons inside
    single-quoted literals do not end a statement.

    >>> list(split_statements("USE x;\\n-- note\\nCREATE TABLE a (v VARCHAR(3) DEFAULT ';');"))
    ["CREATE TABLE a (v VARCHAR(3) DEFAULT ';')"]
    """
    body = _LINE_COMMENT.sub("", _DATABASE_DIRECTIVES.sub("", sql))
    for part in _STATEMENT_END.split(body):
        statement = part.strip()
        if statement:
            yield statement


def ensure_database_exists(config: DBConfig) -> None:
    with closing(DatabaseConnection(config).connect(server_only=True)) as conn:
        with closing(conn.cursor()) as cur:
            cur.execute(
                f"CREATE DATABASE IF NOT EXISTS `{config.database}` "
                "CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
            )
        conn.commit()


def apply_schema(db_config: dict, *, schema_path: Union[str, Path]) -> None:
    """Create the database if needed and run every statement of the schema (idempotent)."""
    config = DBConfig.from_dict(db_config)
    ensure_database_exists(config)

    statements = list(split_statements(Path(schema_path).read_text(encoding="utf-8")))
    with closing(DatabaseConnection(config).connect()) as conn:
        with closing(conn.cursor()) as cur:
            for statement in statements:
                cur.execute(statement)
        conn.commit()
    logger.info("Applied %s statements from %s to %s", len(statements), Path(schema_path).name, config.describe())


def list_tables(db_config: dict) -> list[str]:
    with closing(DatabaseConnection(DBConfig.from_dict(db_config)).connect()) as conn:
        with closing(conn.cursor()) as cur:
            cur.execute("SHOW TABLES")
            return [row[0] for row in cur.fetchall()]
