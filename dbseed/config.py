from __future__ import annotations
import dataclasses
import json
import os
import pathlib
import sys
import typing as t
import yaml

try:
    import tomllib as _toml                              # Py ≥3.11
except ModuleNotFoundError:                              # pragma: no cover
    import tomli as _toml                                # type: ignore[no-redef]

from dbseed.constants import (
    AUTH_POLICIES,
    DEFAULT_AUTH_POLICY,
    DEFAULT_CHARACTER_SET,
    DEFAULT_MYSQL_VERSION,
    DEFAULT_PROPERTIES_FILE,
    MYSQL_VERSIONS,
)

_DEFAULT_PATH = pathlib.Path(DEFAULT_PROPERTIES_FILE)


class ConfigError(RuntimeError):
    """Raised for any user‑visible configuration problem."""


class MissingPropertyError(ConfigError):
    """A required property was not supplied."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Can't find property '{name}'")
        self.name = name


class UnsupportedValueError(ConfigError):
    """A property holds a value outside its enumeration."""

    def __init__(self, name: str, value: t.Any, choices: t.Sequence[str]) -> None:
        quoted = " or ".join(f"'{c}'" for c in choices)
        super().__init__(
            f"Unsupported value '{value}' for '{name}' property. Choose from {quoted}"
        )
        self.name = name
        self.value = value


def resolve_secret(raw: t.Any) -> str | None:
    """
    Return *raw* as a string, expanding the ``${ENV_VAR}`` form from the
    environment.  An unset variable yields ``None`` so the validator
    reports the password as empty.
    """
    if raw is None:
        return None
    value = str(raw)
    if value.startswith("${") and value.endswith("}"):
        return os.getenv(value[2:-1])
    return value


def require_mapping(raw: t.Any, what: str) -> t.Mapping[str, t.Any]:
    """Return *raw* (``None`` as an empty mapping) or fail with *what* in the message."""
    if raw is None:
        return {}
    if not isinstance(raw, t.Mapping):
        raise ConfigError(f"{what} must be a mapping, got {type(raw).__name__}")
    return raw


def as_bool(raw: t.Any) -> bool:
    if isinstance(raw, str):
        return raw.strip().lower() in {"1", "true", "yes", "on"}
    return bool(raw)


@dataclasses.dataclass(frozen=True)
class EngineConfig:
    """
    Server settings that change how the script is rendered, not what it
    provisions.
    """

    mysql_version: str = DEFAULT_MYSQL_VERSION
    character_set_server: str | None = DEFAULT_CHARACTER_SET
    collation_server: str | None = None
    user_authentication_policy: str = DEFAULT_AUTH_POLICY

    @classmethod
    def from_properties(cls, props: dict[str, t.Any]) -> "EngineConfig":
        version = str(props.get("mysql_version") or DEFAULT_MYSQL_VERSION)
        if version not in MYSQL_VERSIONS:
            raise UnsupportedValueError("mysql_version", version, MYSQL_VERSIONS)

        engine = require_mapping(props.get("engine_config"), "engine_config property")
        policy = engine.get("user_authentication_policy") or DEFAULT_AUTH_POLICY
        if policy not in AUTH_POLICIES:
            raise UnsupportedValueError(
                "engine_config.user_authentication_policy", policy, AUTH_POLICIES
            )

        # a bare collation implies its own character set
        collation = engine.get("collation_server") or None
        charset = engine.get("character_set_server") or None
        if charset is None and collation is None:
            charset = DEFAULT_CHARACTER_SET

        return cls(
            mysql_version=version,
            character_set_server=charset,
            collation_server=collation,
            user_authentication_policy=policy,
        )

    @property
    def is_legacy(self) -> bool:
        return self.mysql_version == "5.7"


def _parse(text: str, suffix: str) -> dict[str, t.Any]:
    if suffix == ".toml":
        return _toml.loads(text)
    # YAML 1.1 rejects some valid JSON (tab indentation)
    if suffix == ".json":
        return json.loads(text or "{}")
    return yaml.safe_load(text) or {}


def load(path: pathlib.Path | str | None = None) -> dict[str, t.Any]:
    """
    Parse the properties document at *path* (``-`` reads stdin) and return
    it as a plain mapping.  Key order is preserved.
    """
    if str(path) == "-":
        source, text, suffix = "<stdin>", sys.stdin.read(), ".yml"
    else:
        cfg_file = pathlib.Path(path) if path else _DEFAULT_PATH
        if not cfg_file.exists():
            raise ConfigError(f"Properties file {cfg_file} not found.")
        source = str(cfg_file)
        text, suffix = cfg_file.read_text(encoding="utf-8"), cfg_file.suffix.lower()

    try:
        raw = _parse(text, suffix)
    except (yaml.YAMLError, json.JSONDecodeError, _toml.TOMLDecodeError) as exc:
        raise ConfigError(f"Cannot parse {source}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigError(f"{source} must contain a mapping at the top level")
    return raw
