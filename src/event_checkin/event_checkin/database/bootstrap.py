"""Create the database and apply ``database/schema.sql``.

Used by ``scripts/init_db.py`` and by ``create_app`` when AUTO_INIT_DB is on.
Every statement in the schema is idempotent.
"""
from __future__ import annotations

import logging
import re
from contextlib import closing
from pathlib import Path
from typing import Iterator

import mysql.connector

from .connection import DBConfig

logger = logging.getLogger(__name__)

# A statement is a run of quoted strings or characters other than ';'.
_STATEMENT_RE = re.compile(r"""(?:'(?:\\.|[^'\\])*'|"(?:\\.|[^"\\])*"|[^;'"])+""", re.S)
_COMMENT_LINE_RE = re.compile(r"^\s*--.*$", re.M)
# The target database comes from DB_CONFIG, not from the file.
_DB_SELECTION_RE = re.compile(r"^\s*(?:CREATE\s+DATABASE|USE)\b[^;]*;", re.I | re.M)


def iter_sql_statements(sql: str) -> Iterator[str]:
    sql = _COMMENT_LINE_RE.sub("", sql)
    sql = _DB_SELECTION_RE.sub("", sql)
    for match in _STATEMENT_RE.finditer(sql):
        stmt = match.group(0).strip()
        if stmt:
            yield stmt


def _open(target: DBConfig, *, select_db: bool = True):
    params = {
        "host": target.host,
        "port": target.port,
        "user": target.user,
        "password": target.password,
        "connection_timeout": target.timeout,
    }
    if select_db:
        params["database"] = target.database
    return closing(mysql.connector.connect(**params))


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    with _open(target, select_db=False) as conn:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` "
            "CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)

    target = DBConfig.from_dict(db_config)
    schema_path = Path(schema_path)
    statements = list(iter_sql_statements(schema_path.read_text(encoding="utf-8")))

    with _open(target) as conn:
        cur = conn.cursor()
        for stmt in statements:
            cur.execute(stmt)
        conn.commit()

    logger.info(
        "Applied %d statements from %s to %s@%s/%s",
        len(statements),
        schema_path.name,
        target.user,
        target.host,
        target.database,
    )


def list_tables(db_config: dict) -> list[str]:
    with _open(DBConfig.from_dict(db_config)) as conn:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
