"""
In‑memory provisioning plan.

Everything here is a frozen value object; the assembler builds a plan once
per run, the validator checks it and the emitter only reads it.
"""
from __future__ import annotations

import dataclasses
import typing as t

from dbseed.config import EngineConfig, UnsupportedValueError, require_mapping, resolve_secret
from dbseed.constants import (
    ADMIN_USERNAME,
    BACKUP_USERNAME,
    KNOWN_LINKS,
    READ_ONLY_ADMIN_HOSTS,
    READ_ONLY_ADMIN_USERNAME,
)


@dataclasses.dataclass(frozen=True)
class SeededUser:
    username: str
    password: str | None
    role: t.Any
    host: t.Any
    schema: str | None = None
    max_user_connections: t.Any = None


@dataclasses.dataclass(frozen=True)
class SeededDatabase:
    name: str
    username: str
    password: str | None
    # None when the seeded_users map declares the owning account
    owner: SeededUser | None = None


@dataclasses.dataclass(frozen=True)
class AdminAccount:
    password: str
    username: str = ADMIN_USERNAME
    hosts: tuple[str, ...] = ("localhost",)


@dataclasses.dataclass(frozen=True)
class ReadOnlyAdminAccount:
    password: str
    username: str = READ_ONLY_ADMIN_USERNAME
    hosts: tuple[str, ...] = READ_ONLY_ADMIN_HOSTS


@dataclasses.dataclass(frozen=True)
class BackupAccount:
    password: str
    username: str = BACKUP_USERNAME
    host: str = "localhost"


@dataclasses.dataclass(frozen=True)
class LinkCredentials:
    db_password: str | None


def _link_field(name: str) -> str:
    return name.replace("-", "_")


@dataclasses.dataclass(frozen=True)
class Links:
    """Credentials handed over by cooperating jobs, one slot per known link."""

    galera_agent: LinkCredentials | None = None
    cluster_health_logger: LinkCredentials | None = None

    @classmethod
    def from_mapping(cls, raw: t.Mapping[str, t.Any] | None) -> "Links":
        """Build from ``{link-name: {db_password: ...}}``."""
        kwargs: dict[str, LinkCredentials] = {}
        for name, props in require_mapping(raw, "links property").items():
            if name not in KNOWN_LINKS:
                raise UnsupportedValueError("links", name, tuple(KNOWN_LINKS))
            props = require_mapping(props, f"links entry '{name}'")
            password = resolve_secret(props.get("db_password"))
            kwargs[_link_field(name)] = LinkCredentials(password)
        return cls(**kwargs)

    def merged(self, other: "Links") -> "Links":
        """Return a copy where every link present in *other* replaces ours."""
        return Links(**{
            f.name: getattr(other, f.name) or getattr(self, f.name)
            for f in dataclasses.fields(self)
        })

    def accounts(self) -> list[tuple[str, LinkCredentials]]:
        """``(username, credentials)`` for each present link, in render order."""
        out = []
        for name, username in KNOWN_LINKS.items():
            creds = getattr(self, _link_field(name))
            if creds is not None:
                out.append((username, creds))
        return out


@dataclasses.dataclass(frozen=True)
class ProvisioningPlan:
    admin: AdminAccount
    engine: EngineConfig = EngineConfig()
    read_only_admin: ReadOnlyAdminAccount | None = None
    backup: BackupAccount | None = None
    link_accounts: tuple[SeededUser, ...] = ()
    databases: tuple[SeededDatabase, ...] = ()
    users: tuple[SeededUser, ...] = ()

    def declared_users(self) -> t.Iterator[SeededUser]:
        """Every SeededUser the plan renders, in render order."""
        yield from self.link_accounts
        for db in self.databases:
            if db.owner is not None:
                yield db.owner
        yield from self.users
