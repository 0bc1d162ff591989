"""
Role → privilege mapping.

Every role resolves to a :class:`PrivilegeShape`: the scope the grants
apply to and the ``GRANT`` clauses to render.  The table below is the only
place privileges are spelled out; adding a role means adding a
:class:`Role` member *and* a resolver entry, otherwise the module refuses
to import.
"""
from __future__ import annotations

import dataclasses
import enum
import typing as t

from dbseed.constants import DEFAULT_MYSQL_VERSION
from dbseed.utils import escape_schema_wildcards, quote_identifier


class Role(enum.Enum):
    MINIMAL = "minimal"
    ADMIN = "admin"
    SCHEMA_ADMIN = "schema-admin"
    MULTI_SCHEMA_ADMIN = "multi-schema-admin"
    MYSQL_METRICS = "mysql-metrics"
    # not declarable through seeded_users
    READ_ONLY_ADMIN = "read-only-admin"
    BACKUP = "backup"


DECLARABLE_ROLES = frozenset(
    {Role.MINIMAL, Role.ADMIN, Role.SCHEMA_ADMIN, Role.MULTI_SCHEMA_ADMIN, Role.MYSQL_METRICS}
)
SCHEMA_SCOPED_ROLES = frozenset({Role.SCHEMA_ADMIN, Role.MULTI_SCHEMA_ADMIN})

# Everything a schema owner may do, minus LOCK TABLES and GRANT OPTION.
SCHEMA_PRIVILEGES = (
    "SELECT", "INSERT", "UPDATE", "DELETE", "CREATE", "DROP", "REFERENCES",
    "INDEX", "ALTER", "CREATE TEMPORARY TABLES", "EXECUTE", "CREATE VIEW",
    "SHOW VIEW", "CREATE ROUTINE", "ALTER ROUTINE", "EVENT", "TRIGGER",
)
READ_ONLY_ADMIN_PRIVILEGES = ("SELECT", "PROCESS", "REPLICATION CLIENT")
BACKUP_PRIVILEGES = ("RELOAD", "PROCESS", "LOCK TABLES", "REPLICATION CLIENT")
METRICS_PRIVILEGES = ("PROCESS", "REPLICATION CLIENT")

GLOBAL = "*.*"


class Scope(enum.Enum):
    GLOBAL = "global"
    SCHEMA = "schema"
    SCHEMA_PATTERN = "schema-pattern"


@dataclasses.dataclass(frozen=True)
class Grant:
    privileges: tuple[str, ...]
    target: str
    grant_option: bool = False

    def render(self, grantee: str) -> str:
        stmt = f"GRANT {', '.join(self.privileges)} ON {self.target} TO {grantee}"
        if self.grant_option:
            stmt += " WITH GRANT OPTION"
        return stmt + ";"


@dataclasses.dataclass(frozen=True)
class PrivilegeShape:
    scope: Scope
    grants: tuple[Grant, ...]


def schema_target(schema: str, *, wildcard: bool = False) -> str:
    """``ON`` target for one schema, or for a ``LIKE`` pattern when *wildcard*."""
    name = schema if wildcard else escape_schema_wildcards(schema)
    return f"{quote_identifier(name)}.*"


def _require_schema(role: Role, schema: str | None) -> str:
    if not schema:
        raise ValueError(f"{role.value} role requires a schema")
    return schema


def _minimal(schema: str | None, version: str) -> PrivilegeShape:
    return PrivilegeShape(Scope.GLOBAL, (Grant(("USAGE",), GLOBAL),))


def _admin(schema: str | None, version: str) -> PrivilegeShape:
    return PrivilegeShape(
        Scope.GLOBAL, (Grant(("ALL PRIVILEGES",), GLOBAL, grant_option=True),)
    )


def _schema_admin(schema: str | None, version: str) -> PrivilegeShape:
    target = schema_target(_require_schema(Role.SCHEMA_ADMIN, schema))
    return PrivilegeShape(Scope.SCHEMA, (Grant(SCHEMA_PRIVILEGES, target),))


def _multi_schema_admin(schema: str | None, version: str) -> PrivilegeShape:
    target = schema_target(_require_schema(Role.MULTI_SCHEMA_ADMIN, schema), wildcard=True)
    return PrivilegeShape(Scope.SCHEMA_PATTERN, (Grant(SCHEMA_PRIVILEGES, target),))


def _mysql_metrics(schema: str | None, version: str) -> PrivilegeShape:
    grants = [Grant(METRICS_PRIVILEGES, GLOBAL)]
    if schema:
        grants.append(Grant(SCHEMA_PRIVILEGES, schema_target(schema)))
    return PrivilegeShape(Scope.GLOBAL, tuple(grants))


def _read_only_admin(schema: str | None, version: str) -> PrivilegeShape:
    return PrivilegeShape(Scope.GLOBAL, (Grant(READ_ONLY_ADMIN_PRIVILEGES, GLOBAL),))


def _backup(schema: str | None, version: str) -> PrivilegeShape:
    grants = [Grant(BACKUP_PRIVILEGES, GLOBAL)]
    if version != "5.7":
        perf = quote_identifier("performance_schema")
        grants += [
            Grant(("BACKUP_ADMIN",), GLOBAL),
            Grant(("SELECT",), f"{perf}.{quote_identifier('keyring_component_status')}"),
            Grant(("SELECT",), f"{perf}.{quote_identifier('log_status')}"),
        ]
    return PrivilegeShape(Scope.GLOBAL, tuple(grants))


Resolver = t.Callable[[t.Optional[str], str], PrivilegeShape]

ROLE_GRANTS: dict[Role, Resolver] = {
    Role.MINIMAL: _minimal,
    Role.ADMIN: _admin,
    Role.SCHEMA_ADMIN: _schema_admin,
    Role.MULTI_SCHEMA_ADMIN: _multi_schema_admin,
    Role.MYSQL_METRICS: _mysql_metrics,
    Role.READ_ONLY_ADMIN: _read_only_admin,
    Role.BACKUP: _backup,
}

_unmapped = set(Role) - set(ROLE_GRANTS)
if _unmapped:
    raise RuntimeError(f"roles without a privilege mapping: {sorted(r.value for r in _unmapped)}")


def resolve(
    role: Role | str,
    schema: str | None = None,
    mysql_version: str = DEFAULT_MYSQL_VERSION,
) -> PrivilegeShape:
    """
    Map *role* to its privilege shape.  Roles reaching this point have
    already been validated.
    """
    return ROLE_GRANTS[Role(role)](schema, mysql_version)
