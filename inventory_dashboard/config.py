"""Configuration and settings."""

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, model_validator

from inventory_dashboard.errors import ConfigurationError

load_dotenv()

# Paths
PROJECT_ROOT = Path(__file__).resolve().parent.parent
OUTPUT_DIR = PROJECT_ROOT / "output"

# Logging
LOG_DIR = OUTPUT_DIR / "logs"
LOG_FILE = LOG_DIR / "app.jsonl"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
VERBOSE_LOGGING = os.getenv("VERBOSE_LOGGING", "false").lower() == "true"

# Ensure log directory exists
LOG_DIR.mkdir(parents=True, exist_ok=True)

# Environment. Only "development" exposes underlying error messages in API responses.
NODE_ENV = os.getenv("NODE_ENV", "production")


def error_details_enabled(node_env: str | None) -> bool:
    """Exact match only: "Development" or " development " do not count."""
    return node_env == "development"


EXPOSE_ERROR_DETAILS = error_details_enabled(NODE_ENV)

# HTTP server
SERVER_HOST = os.getenv("SERVER_HOST", "0.0.0.0")
SERVER_PORT = int(os.getenv("SERVER_PORT", "8000"))

# Database defaults (values are read from the environment when the pool is first requested)
DEFAULT_DB_DIALECT = "mysql"
DEFAULT_DB_SERVER = "localhost"
DEFAULT_DB_DATABASE = "SmartInventoryDB"
DEFAULT_ODBC_DRIVER = "ODBC Driver 18 for SQL Server"
SUPPORTED_DIALECTS = ("mysql", "mssql")


class PoolSettings(BaseModel):
    """Pool sizing and eviction."""

    max: int = Field(10, ge=1)
    min: int = Field(0, ge=0)
    idle_timeout_ms: int = Field(30_000, ge=0)
    acquire_timeout_seconds: float = Field(30.0, gt=0)

    @model_validator(mode="after")
    def _min_not_above_max(self) -> "PoolSettings":
        if self.min > self.max:
            raise ValueError(f"pool min ({self.min}) must not exceed pool max ({self.max})")
        return self


class DatabaseSettings(BaseModel):
    """Connection settings for the relational backend.

    When ``url`` is set (DATABASE_URL) it is used as-is and the individual
    server/credential fields are ignored.
    """

    url: str | None = None
    dialect: str = DEFAULT_DB_DIALECT
    server: str = DEFAULT_DB_SERVER
    port: int | None = None
    database: str = DEFAULT_DB_DATABASE
    user: str | None = None
    password: str | None = Field(None, repr=False)
    encrypt: bool = False
    trust_server_certificate: bool = False
    enable_arith_abort: bool = True
    odbc_driver: str = DEFAULT_ODBC_DRIVER
    pool: PoolSettings = Field(default_factory=PoolSettings)

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_required(self) -> "DatabaseSettings":
        if self.url:
            return self
        if self.dialect not in SUPPORTED_DIALECTS:
            raise ValueError(
                f"unsupported DB_DIALECT {self.dialect!r}; expected one of {', '.join(SUPPORTED_DIALECTS)}"
            )
        missing = [name for name, value in (("DB_USER", self.user), ("DB_PASSWORD", self.password)) if not value]
        if missing:
            raise ValueError(f"missing required database settings: {', '.join(missing)}")
        return self


def _getenv(name: str) -> str | None:
    value = os.getenv(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


def _env_flag(name: str, default: bool = False) -> bool:
    value = _getenv(name)
    if value is None:
        return default
    return value.lower() in ("1", "true", "yes", "on")


def load_database_settings() -> DatabaseSettings:
    """Read database settings from the environment. Raises ConfigurationError when missing or invalid."""
    raw: dict = {
        "url": _getenv("DATABASE_URL"),
        "dialect": (_getenv("DB_DIALECT") or DEFAULT_DB_DIALECT).lower(),
        "server": _getenv("DB_SERVER") or DEFAULT_DB_SERVER,
        "port": _getenv("DB_PORT"),
        "database": _getenv("DB_DATABASE") or DEFAULT_DB_DATABASE,
        "user": _getenv("DB_USER"),
        "password": os.getenv("DB_PASSWORD") or None,
        "encrypt": _env_flag("DB_ENCRYPT"),
        "trust_server_certificate": _env_flag("DB_TRUST_SERVER_CERTIFICATE"),
        "odbc_driver": _getenv("DB_ODBC_DRIVER") or DEFAULT_ODBC_DRIVER,
        "pool": {
            "max": _getenv("DB_POOL_MAX") or 10,
            "min": _getenv("DB_POOL_MIN") or 0,
            "idle_timeout_ms": _getenv("DB_POOL_IDLE_TIMEOUT_MS") or 30_000,
            "acquire_timeout_seconds": _getenv("DB_POOL_ACQUIRE_TIMEOUT_SECONDS") or 30.0,
        },
    }
    try:
        return DatabaseSettings.model_validate(raw)
    except ValidationError as e:
        problems = "; ".join(err["msg"] for err in e.errors())
        raise ConfigurationError(f"Invalid database configuration: {problems}", cause=e) from e
