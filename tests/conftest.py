"""Shared fixtures: the properties documents used across the suite."""

from __future__ import annotations

import copy
from pathlib import Path

import pytest

GOLDEN_DIR = Path(__file__).parent / "golden"

ALL_FEATURES = {
    "admin_password": "secret-admin-pw",
    "roadmin_enabled": True,
    "roadmin_password": "secret-roadmin-pw",
    "mysql_backup_password": "secret-backup-pw",
    "seeded_databases": [
        {
            "name": "metrics_db",
            "username": "mysql-metrics",
            "password": "ignored-password-overridden-by-seeded-users-entry",
        },
        {
            "name": "cloud_controller",
            "username": "cloud_controller",
            "password": "secret-ccdb-pw",
        },
    ],
    "seeded_users": {
        "basic-user": {
            "role": "minimal",
            "password": "secret-basic-user-db-pw",
            "host": "localhost",
        },
        "special-admin-user": {
            "role": "admin",
            "password": "secret-seeded-admin-pw",
            "host": "any",
        },
        "mysql-metrics": {
            "role": "mysql-metrics",
            "password": "secret-mysql-metrics-db-pw",
            "host": "any",
            "schema": "metrics_db",
            "max_user_connections": 3,
        },
        "multi-schema-admin-user": {
            "role": "multi-schema-admin",
            "password": "secret-multi-schema-admin-db-pw",
            "host": "any",
            "schema": "multi_schemas_%",
        },
    },
    "links": {
        "galera-agent": {"db_password": "galera-agent-db-creds"},
        "cluster-health-logger": {"db_password": "cluster-health-logger-db-creds"},
    },
}


@pytest.fixture
def props() -> dict:
    """A fresh copy of the all-features document; tests may mutate it."""
    return copy.deepcopy(ALL_FEATURES)


@pytest.fixture
def admin_only() -> dict:
    return {"admin_password": "secret-admin-pw"}


@pytest.fixture
def golden():
    def _read(name: str) -> str:
        return (GOLDEN_DIR / name).read_text(encoding="utf-8")
    return _read
