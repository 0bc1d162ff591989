"""
Render a validated :class:`ProvisioningPlan` as the bootstrap SQL script.

The output is a pure function of the plan: the same plan always yields
byte‑identical text, so rendered scripts can be compared against golden
files.
"""
from __future__ import annotations

from dbseed.config import EngineConfig
from dbseed.constants import SCRIPT_HEADER
from dbseed.plan import ProvisioningPlan, SeededUser
from dbseed.roles import PrivilegeShape, Role, resolve
from dbseed.schema import materialize
from dbseed.utils import account, quote_literal


def identified_by(password: str, engine: EngineConfig) -> str:
    if engine.is_legacy:
        return f"IDENTIFIED BY {quote_literal(password)}"
    return f"IDENTIFIED WITH {engine.user_authentication_policy} BY {quote_literal(password)}"


def account_statements(
    username: str,
    password: str,
    host: str,
    shape: PrivilegeShape,
    engine: EngineConfig,
    max_user_connections: int | None = None,
) -> list[str]:
    """CREATE / ALTER / GRANT for one ``user@host``."""
    grantee = account(username, host)
    auth = identified_by(password, engine)
    if max_user_connections is not None:
        auth += f" WITH MAX_USER_CONNECTIONS {max_user_connections}"
    stmts = [
        f"CREATE USER IF NOT EXISTS {grantee} {auth};",
        f"ALTER USER {grantee} {auth};",
    ]
    stmts.extend(grant.render(grantee) for grant in shape.grants)
    return stmts


def _section(title: str, stmts: list[str]) -> str:
    return "\n".join([f"-- {title}", *stmts])


def _user_section(kind: str, user: SeededUser, engine: EngineConfig) -> str:
    shape = resolve(user.role, user.schema, engine.mysql_version)
    stmts = account_statements(
        user.username, user.password, user.host, shape, engine, user.max_user_connections
    )
    return _section(f"{kind} {quote_literal(user.username)}", stmts)


def sections(plan: ProvisioningPlan) -> list[str]:
    engine = plan.engine
    out = []

    admin = plan.admin
    shape = resolve(Role.ADMIN, mysql_version=engine.mysql_version)
    stmts = []
    for host in admin.hosts:
        stmts += account_statements(admin.username, admin.password, host, shape, engine)
    out.append(_section(f"admin user {quote_literal(admin.username)}", stmts))

    roadmin = plan.read_only_admin
    if roadmin is not None:
        shape = resolve(Role.READ_ONLY_ADMIN, mysql_version=engine.mysql_version)
        stmts = []
        for host in roadmin.hosts:
            stmts += account_statements(roadmin.username, roadmin.password, host, shape, engine)
        out.append(_section(f"read-only admin user {quote_literal(roadmin.username)}", stmts))

    backup = plan.backup
    if backup is not None:
        shape = resolve(Role.BACKUP, mysql_version=engine.mysql_version)
        stmts = account_statements(backup.username, backup.password, backup.host, shape, engine)
        out.append(_section(f"backup user {quote_literal(backup.username)}", stmts))

    for user in plan.link_accounts:
        out.append(_user_section("link user", user, engine))

    for db in plan.databases:
        out.append(_section(f"seeded database {quote_literal(db.name)}", materialize(db, engine)))
        if db.owner is not None:
            out.append(_user_section("database owner", db.owner, engine))

    for user in plan.users:
        out.append(_user_section("seeded user", user, engine))
    return out


def emit(plan: ProvisioningPlan) -> str:
    return SCRIPT_HEADER + "\n\n" + "\n\n".join(sections(plan)) + "\n"
