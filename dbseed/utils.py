"""
Generic helpers that are reused across sub‑modules.
"""
from __future__ import annotations
import sqlparse
from mysql.connector.conversion import MySQLConverter

from dbseed.constants import HOSTS

_CONVERTER = MySQLConverter()


def split_sql(sql: str) -> list[str]:
    """
    Split a string containing one or many SQL statements into individual
    statements **safely** (aware of literals, comments, delimiters, etc.).
    Leading comment lines are dropped from each statement.
    """
    stmts = []
    for raw in sqlparse.split(sql):
        stmt = sqlparse.format(raw, strip_comments=True).strip()
        if stmt:
            stmts.append(stmt)
    return stmts


def quote_literal(value: str) -> str:
    """Return *value* as a single‑quoted SQL string literal."""
    return f"'{_CONVERTER.escape(value)}'"


def quote_identifier(name: str) -> str:
    return "`" + name.replace("`", "``") + "`"


def escape_schema_wildcards(name: str) -> str:
    """
    Escape ``_`` and ``%`` so a GRANT on *name* matches that schema only.
    """
    return name.replace("_", r"\_").replace("%", r"\%")


def account(username: str, host: str) -> str:
    """Render ``'user'@'host'`` for a declared host alias."""
    return f"{quote_literal(username)}@{quote_literal(HOSTS.get(host, host))}"
