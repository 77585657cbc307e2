"""Tests for database settings loaded from the environment."""

import os
import unittest
from unittest import mock

import inventory_fixtures  # noqa: F401  (puts the project root on sys.path)

from inventory_dashboard.config import DatabaseSettings, error_details_enabled, load_database_settings
from inventory_dashboard.errors import ConfigurationError, DatabaseError

_DB_VARS = (
    "DATABASE_URL",
    "DB_DIALECT",
    "DB_SERVER",
    "DB_PORT",
    "DB_DATABASE",
    "DB_USER",
    "DB_PASSWORD",
    "DB_ENCRYPT",
    "DB_TRUST_SERVER_CERTIFICATE",
    "DB_POOL_MAX",
    "DB_POOL_MIN",
    "DB_POOL_IDLE_TIMEOUT_MS",
    "DB_POOL_ACQUIRE_TIMEOUT_SECONDS",
    "DB_ODBC_DRIVER",
)


def _env(**values: str) -> dict[str, str]:
    env = {k: v for k, v in os.environ.items() if k not in _DB_VARS}
    env.update(values)
    return env


class TestLoadDatabaseSettings(unittest.TestCase):
    def test_defaults_with_credentials(self):
        with mock.patch.dict(os.environ, _env(DB_USER="app", DB_PASSWORD="secret"), clear=True):
            settings = load_database_settings()
        self.assertIsNone(settings.url)
        self.assertEqual(settings.dialect, "mysql")
        self.assertEqual(settings.server, "localhost")
        self.assertEqual(settings.database, "SmartInventoryDB")
        self.assertFalse(settings.encrypt)
        self.assertFalse(settings.trust_server_certificate)
        self.assertTrue(settings.enable_arith_abort)
        self.assertEqual(settings.pool.max, 10)
        self.assertEqual(settings.pool.min, 0)
        self.assertEqual(settings.pool.idle_timeout_ms, 30000)

    def test_reads_every_option(self):
        env = _env(
            DB_DIALECT="MSSQL",
            DB_SERVER="db.internal:1444",
            DB_DATABASE="Inventory",
            DB_USER="sa",
            DB_PASSWORD="pw",
            DB_ENCRYPT="true",
            DB_TRUST_SERVER_CERTIFICATE="yes",
            DB_POOL_MAX="4",
            DB_POOL_MIN="2",
            DB_POOL_IDLE_TIMEOUT_MS="60000",
            DB_POOL_ACQUIRE_TIMEOUT_SECONDS="5",
            DB_ODBC_DRIVER="ODBC Driver 17 for SQL Server",
        )
        with mock.patch.dict(os.environ, env, clear=True):
            settings = load_database_settings()
        self.assertEqual(settings.dialect, "mssql")
        self.assertEqual(settings.server, "db.internal:1444")
        self.assertEqual(settings.database, "Inventory")
        self.assertTrue(settings.encrypt)
        self.assertTrue(settings.trust_server_certificate)
        self.assertEqual((settings.pool.max, settings.pool.min), (4, 2))
        self.assertEqual(settings.pool.idle_timeout_ms, 60000)
        self.assertEqual(settings.pool.acquire_timeout_seconds, 5.0)
        self.assertEqual(settings.odbc_driver, "ODBC Driver 17 for SQL Server")

    def test_missing_credentials_fail_fast(self):
        with mock.patch.dict(os.environ, _env(DB_USER="app"), clear=True):
            with self.assertRaises(ConfigurationError) as ctx:
                load_database_settings()
        self.assertIn("DB_PASSWORD", str(ctx.exception))
        self.assertIsInstance(ctx.exception, DatabaseError)
        self.assertIsNotNone(ctx.exception.cause)

    def test_database_url_needs_no_credentials(self):
        with mock.patch.dict(os.environ, _env(DATABASE_URL="sqlite:///inventory.db"), clear=True):
            settings = load_database_settings()
        self.assertEqual(settings.url, "sqlite:///inventory.db")

    def test_unknown_dialect(self):
        with mock.patch.dict(os.environ, _env(DB_DIALECT="oracle", DB_USER="u", DB_PASSWORD="p"), clear=True):
            with self.assertRaises(ConfigurationError):
                load_database_settings()

    def test_non_integer_pool_size(self):
        with mock.patch.dict(os.environ, _env(DB_USER="u", DB_PASSWORD="p", DB_POOL_MAX="lots"), clear=True):
            with self.assertRaises(ConfigurationError):
                load_database_settings()

    def test_pool_min_above_max(self):
        with mock.patch.dict(os.environ, _env(DB_USER="u", DB_PASSWORD="p", DB_POOL_MAX="2", DB_POOL_MIN="5"), clear=True):
            with self.assertRaises(ConfigurationError) as ctx:
                load_database_settings()
        self.assertIn("must not exceed", str(ctx.exception))

    def test_password_not_in_repr(self):
        settings = DatabaseSettings(user="app", password="hunter2")
        self.assertNotIn("hunter2", repr(settings))


class TestErrorDetailsFlag(unittest.TestCase):
    def test_only_exact_development_enables_details(self):
        self.assertTrue(error_details_enabled("development"))
        for value in ("Development", "DEVELOPMENT", " development ", "dev", "production", "", None):
            self.assertFalse(error_details_enabled(value), value)


if __name__ == "__main__":
    unittest.main()
