"""
Turn a raw properties document into a :class:`ProvisioningPlan`.

Nothing is validated here beyond required properties and the document shape; the
structural checks live in :mod:`dbseed.validate`.
"""
from __future__ import annotations

import typing as t

from dbseed.config import (
    ConfigError,
    EngineConfig,
    MissingPropertyError,
    as_bool,
    require_mapping,
    resolve_secret,
)
from dbseed.constants import ADMIN_USERNAME, ANY_HOST
from dbseed.plan import (
    AdminAccount,
    BackupAccount,
    Links,
    ProvisioningPlan,
    ReadOnlyAdminAccount,
    SeededDatabase,
    SeededUser,
)
from dbseed.roles import Role


def ordered_users(raw: t.Any) -> list[tuple[str, dict[str, t.Any]]]:
    """
    Normalise ``seeded_users`` into ``(username, attributes)`` pairs.

    Accepts a mapping (insertion order kept) or a list of
    ``[username, attributes]`` pairs.  A repeated username keeps its first
    position and its last attributes.
    """
    if not raw:
        return []
    if isinstance(raw, t.Mapping):
        items = list(raw.items())
    elif isinstance(raw, list):
        items = []
        for pair in raw:
            if not isinstance(pair, (list, tuple)) or len(pair) != 2:
                raise ConfigError(
                    f"seeded_users entry {pair!r} must be a [username, attributes] pair"
                )
            items.append(tuple(pair))
    else:
        raise ConfigError(
            f"seeded_users property must be a mapping, got {type(raw).__name__}"
        )
    merged: dict[str, dict[str, t.Any]] = {}
    for name, attrs in items:
        name = "" if name is None else str(name)
        merged[name] = dict(require_mapping(attrs, f"seeded_users entry '{name}'"))
    return list(merged.items())


def seeded_user(username: str, attrs: t.Mapping[str, t.Any]) -> SeededUser:
    return SeededUser(
        username=username,
        password=resolve_secret(attrs.get("password")),
        role=attrs.get("role"),
        host=attrs.get("host"),
        schema=attrs.get("schema") or None,
        max_user_connections=attrs.get("max_user_connections"),
    )


def _admin(props: dict[str, t.Any]) -> AdminAccount:
    password = resolve_secret(props.get("admin_password"))
    if not password:
        raise MissingPropertyError("admin_password")
    hosts = ("localhost", ANY_HOST) if as_bool(props.get("remote_admin_access")) else ("localhost",)
    return AdminAccount(
        password=password,
        username=props.get("admin_username") or ADMIN_USERNAME,
        hosts=hosts,
    )


def _read_only_admin(props: dict[str, t.Any]) -> ReadOnlyAdminAccount | None:
    if not as_bool(props.get("roadmin_enabled")):
        return None
    password = resolve_secret(props.get("roadmin_password"))
    if not password:
        raise MissingPropertyError("roadmin_password")
    return ReadOnlyAdminAccount(password=password)


def _backup(props: dict[str, t.Any]) -> BackupAccount | None:
    password = resolve_secret(props.get("mysql_backup_password"))
    return BackupAccount(password=password) if password else None


def build_plan(
    props: dict[str, t.Any],
    links: Links | t.Mapping[str, t.Any] | None = None,
) -> ProvisioningPlan:
    """
    Assemble the plan for *props*.  *links* adds (or overrides) link
    credentials on top of the document's own ``links:`` section.
    """
    admin = _admin(props)
    read_only_admin = _read_only_admin(props)
    engine = EngineConfig.from_properties(props)

    all_links = Links.from_mapping(props.get("links"))
    if links is not None:
        extra = links if isinstance(links, Links) else Links.from_mapping(links)
        all_links = all_links.merged(extra)

    users = ordered_users(props.get("seeded_users"))
    declared = {name for name, _ in users}

    link_accounts = tuple(
        SeededUser(
            username=username,
            password=creds.db_password,
            role=Role.MINIMAL.value,
            host="localhost",
        )
        for username, creds in all_links.accounts()
        if username not in declared
    )

    raw_databases = props.get("seeded_databases") or []
    if not isinstance(raw_databases, (list, tuple)):
        raise ConfigError(
            f"seeded_databases property must be a list, got {type(raw_databases).__name__}"
        )
    databases = []
    for entry in raw_databases:
        if not isinstance(entry, t.Mapping):
            raise ConfigError(f"seeded_databases entry '{entry}' must be a mapping")
        name = str(entry.get("name") or "")
        username = str(entry.get("username") or "")
        password = resolve_secret(entry.get("password"))
        owner = None
        if username not in declared:
            owner = SeededUser(
                username=username,
                password=password,
                role=Role.SCHEMA_ADMIN.value,
                host=ANY_HOST,
                schema=name,
            )
        databases.append(SeededDatabase(name, username, password, owner))

    return ProvisioningPlan(
        admin=admin,
        engine=engine,
        read_only_admin=read_only_admin,
        backup=_backup(props),
        link_accounts=link_accounts,
        databases=tuple(databases),
        users=tuple(seeded_user(name, attrs) for name, attrs in users),
    )
