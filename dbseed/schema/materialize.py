"""
Idempotent schema creation for seeded databases.

The script runs on every boot, so the schema is only created when
``information_schema`` does not list it yet; an existing schema keeps its
character set and collation.
"""
from __future__ import annotations

from dbseed.config import EngineConfig
from dbseed.plan import SeededDatabase
from dbseed.utils import quote_identifier, quote_literal

STMT_NAME = "create_schema_stmt"
NOOP = "DO 0"


def create_schema_ddl(name: str, engine: EngineConfig) -> str:
    ddl = f"CREATE SCHEMA {quote_identifier(name)}"
    if engine.character_set_server:
        ddl += f" CHARACTER SET {engine.character_set_server}"
    if engine.collation_server:
        ddl += f" COLLATE {engine.collation_server}"
    return ddl


def materialize(db: SeededDatabase, engine: EngineConfig) -> list[str]:
    """Return the statements that create *db* if it is missing."""
    exists = (
        "SELECT COUNT(*) FROM information_schema.SCHEMATA "
        f"WHERE SCHEMA_NAME = {quote_literal(db.name)}"
    )
    ddl = quote_literal(create_schema_ddl(db.name, engine))
    return [
        f"SET @schema_exists = ({exists});",
        f"SET @create_schema = IF(@schema_exists = 0, {ddl}, {quote_literal(NOOP)});",
        f"PREPARE {STMT_NAME} FROM @create_schema;",
        f"EXECUTE {STMT_NAME};",
        f"DEALLOCATE PREPARE {STMT_NAME};",
    ]
