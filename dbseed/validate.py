"""
Structural checks on an assembled plan.

Each ``check_*`` function returns the first problem with one entry as a
message, or ``None``.  :func:`validate` stops at the first message in
render order; :func:`collect_errors` keeps going and returns them all.
"""
from __future__ import annotations

import typing as t

from dbseed.config import ConfigError
from dbseed.constants import HOSTS
from dbseed.plan import ProvisioningPlan, SeededDatabase, SeededUser
from dbseed.roles import DECLARABLE_ROLES, SCHEMA_SCOPED_ROLES, Role


class ValidationError(ConfigError):
    """The plan declares an entry that cannot be provisioned."""


def _role(value: t.Any) -> Role | None:
    try:
        role = Role(str(value))
    except ValueError:
        return None
    return role if role in DECLARABLE_ROLES else None


def _valid_connection_limit(value: t.Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def check_user(user: SeededUser) -> str | None:
    name = user.username
    if not name:
        return "seeded_users property specifies an empty username"
    if not user.password:
        return f"seeded_users property specifies an empty allowed 'password' for username {name}"
    if not user.role:
        return f"seeded_users property specifies an empty allowed 'role' for username {name}"

    role = _role(user.role)
    if role is None:
        return f"Unsupported role '{user.role}' for user '{name}'"

    host = "" if user.host is None else str(user.host)
    if host not in HOSTS:
        return f"invalid host '{host}' specified for username {name}"

    if role in SCHEMA_SCOPED_ROLES and not user.schema:
        return f"user '{name}' with {role.value} role specified with an empty schema"

    limit = user.max_user_connections
    if limit is not None and not _valid_connection_limit(limit):
        return f"invalid max_user_connections '{limit}' specified for username {name}"
    return None


def check_database(db: SeededDatabase) -> str | None:
    if not db.name:
        return "seeded_databases property specifies an empty database name"
    if not db.username:
        return f"seeded_databases property specifies an empty username for database {db.name}"
    if db.owner is not None:
        problem = check_user(db.owner)
        if problem:
            return f"seeded_databases entry '{db.name}': {problem}"
    return None


def _results(plan: ProvisioningPlan) -> t.Iterator[str | None]:
    for user in plan.link_accounts:
        yield check_user(user)
    for db in plan.databases:
        yield check_database(db)
    for user in plan.users:
        yield check_user(user)


def validate(plan: ProvisioningPlan) -> ProvisioningPlan:
    """Return *plan* unchanged, or raise :class:`ValidationError` on the first problem."""
    for message in _results(plan):
        if message:
            raise ValidationError(message)
    return plan


def collect_errors(plan: ProvisioningPlan) -> list[str]:
    return [message for message in _results(plan) if message]
