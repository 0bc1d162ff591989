"""Tests for dbseed.emit - the rendered script."""

import pytest

from dbseed.assemble import build_plan
from dbseed.emit import account_statements, emit, sections
from dbseed.config import EngineConfig
from dbseed.generate import generate
from dbseed.roles import resolve
from dbseed.validate import validate


def _sections(props):
    return sections(validate(build_plan(props)))


def _account_sections(text):
    return [line for line in text.splitlines()[1:] if line.startswith("-- ")]


# ── Golden output ────────────────────────────────────────────────────


class TestGolden:
    def test_all_features(self, props, golden):
        assert generate(props) == golden("seeded_users_and_databases_all_features.sql")

    def test_deterministic(self, props):
        plan = validate(build_plan(props))
        assert emit(plan) == emit(plan)
        assert generate(props) == generate(props)

    def test_ends_with_single_newline(self, props):
        text = generate(props)
        assert text.endswith(";\n")
        assert not text.endswith("\n\n")


# ── Scenarios ────────────────────────────────────────────────────────


class TestScenarios:
    def test_admin_only(self, admin_only):
        text = generate(admin_only)
        assert _account_sections(text) == ["-- admin user 'admin'"]
        assert "SCHEMA" not in text
        assert text.count("CREATE USER IF NOT EXISTS") == 1

    def test_explicit_charset_and_collation(self, admin_only):
        admin_only["engine_config"] = {
            "character_set_server": "latin7",
            "collation_server": "latin7_estonian_cs",
        }
        admin_only["seeded_databases"] = [
            {"name": "metrics_db", "username": "mysql-metrics", "password": "pw"},
        ]
        text = generate(admin_only)
        assert "'CREATE SCHEMA `metrics_db` CHARACTER SET latin7 COLLATE latin7_estonian_cs'" in text

    def test_default_charset(self, admin_only):
        admin_only["seeded_databases"] = [
            {"name": "metrics_db", "username": "mysql-metrics", "password": "pw"},
        ]
        text = generate(admin_only)
        assert "'CREATE SCHEMA `metrics_db` CHARACTER SET utf8mb4'" in text
        assert "COLLATE" not in text

    def test_database_statement_kept_when_owner_is_seeded_user(self, admin_only):
        admin_only["seeded_databases"] = [
            {"name": "ignored", "username": "app-user1", "password": "ignored"},
        ]
        admin_only["seeded_users"] = {
            "app-user1": {"role": "schema-admin", "password": "real", "schema": "app_user_db1", "host": "any"},
        }
        text = generate(admin_only)
        assert "CREATE SCHEMA `ignored`" in text
        assert "'ignored';" not in text
        assert text.count("CREATE USER IF NOT EXISTS 'app-user1'@'%'") == 1
        assert r"ON `app\_user\_db1`.* TO 'app-user1'@'%';" in text


# ── Host fan-out and optional sections ───────────────────────────────


class TestAccounts:
    def test_read_only_admin_fan_out(self, props):
        text = generate(props)
        ro_lines = [line for line in text.splitlines() if "'roadmin'@" in line]
        assert len(ro_lines) == 9
        for host in ("localhost", "127.0.0.1", "::1"):
            grantee = f"'roadmin'@'{host}'"
            assert f"CREATE USER IF NOT EXISTS {grantee} IDENTIFIED WITH caching_sha2_password BY 'secret-roadmin-pw';" in ro_lines
            assert f"ALTER USER {grantee} IDENTIFIED WITH caching_sha2_password BY 'secret-roadmin-pw';" in ro_lines
            assert f"GRANT SELECT, PROCESS, REPLICATION CLIENT ON *.* TO {grantee};" in ro_lines

    def test_read_only_admin_disabled(self, props):
        props["roadmin_enabled"] = False
        text = generate(props)
        assert "roadmin" not in text
        assert "-- read-only admin" not in text

    def test_backup_absent_without_password(self, props):
        full = _sections(props)
        del props["mysql_backup_password"]
        partial = _sections(props)
        assert [s for s in full if s not in partial] == [full[2]]
        assert full[2].startswith("-- backup user 'mysql-backup'")

    def test_remote_admin_access_adds_any_host(self, admin_only):
        admin_only["remote_admin_access"] = True
        text = generate(admin_only)
        assert _account_sections(text) == ["-- admin user 'admin'"]
        assert "GRANT ALL PRIVILEGES ON *.* TO 'admin'@'localhost' WITH GRANT OPTION;" in text
        assert "GRANT ALL PRIVILEGES ON *.* TO 'admin'@'%' WITH GRANT OPTION;" in text

    def test_admin_username_override(self, admin_only):
        admin_only["admin_username"] = "root-ish"
        assert "CREATE USER IF NOT EXISTS 'root-ish'@'localhost'" in generate(admin_only)

    def test_password_is_escaped(self, admin_only):
        admin_only["admin_password"] = "it's"
        assert "BY 'it\\'s';" in generate(admin_only)


# ── Links ────────────────────────────────────────────────────────────


class TestLinks:
    @pytest.mark.parametrize("link", ["galera-agent", "cluster-health-logger"])
    def test_absent_link_removes_only_its_section(self, props, link):
        full = _sections(props)
        del props["links"][link]
        partial = _sections(props)
        removed = [s for s in full if s not in partial]
        assert len(removed) == 1
        assert removed[0].startswith(f"-- link user '{link}'")
        assert len(partial) == len(full) - 1

    def test_link_account_is_local_and_minimal(self, admin_only):
        text = generate(admin_only, {"galera-agent": {"db_password": "galera-agent-db-creds"}})
        assert "CREATE USER IF NOT EXISTS 'galera-agent'@'localhost'" in text
        assert "GRANT USAGE ON *.* TO 'galera-agent'@'localhost';" in text
        assert "cluster-health-logger" not in text

    def test_no_links_no_link_accounts(self, admin_only):
        text = generate(admin_only)
        assert "galera-agent" not in text
        assert "cluster-health-logger" not in text


# ── Engine variants ──────────────────────────────────────────────────


class TestEngineVariants:
    def test_legacy_server_uses_plain_identified_by(self, admin_only):
        admin_only["mysql_version"] = "5.7"
        admin_only["mysql_backup_password"] = "bk"
        text = generate(admin_only)
        assert "CREATE USER IF NOT EXISTS 'admin'@'localhost' IDENTIFIED BY 'secret-admin-pw';" in text
        assert "IDENTIFIED WITH" not in text
        assert "BACKUP_ADMIN" not in text

    def test_native_password_policy(self, admin_only):
        admin_only["engine_config"] = {"user_authentication_policy": "mysql_native_password"}
        assert "IDENTIFIED WITH mysql_native_password BY 'secret-admin-pw'" in generate(admin_only)

    def test_account_statements_triad(self):
        stmts = account_statements(
            "u", "p", "any", resolve("minimal"), EngineConfig(), max_user_connections=5
        )
        assert stmts == [
            "CREATE USER IF NOT EXISTS 'u'@'%' IDENTIFIED WITH caching_sha2_password BY 'p' WITH MAX_USER_CONNECTIONS 5;",
            "ALTER USER 'u'@'%' IDENTIFIED WITH caching_sha2_password BY 'p' WITH MAX_USER_CONNECTIONS 5;",
            "GRANT USAGE ON *.* TO 'u'@'%';",
        ]
