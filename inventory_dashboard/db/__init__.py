"""Database package: process-wide connection pool, parameterised queries, stored procedures.

The pool is a SQLAlchemy Engine created lazily on first use and shared by every
handler in the process. Creation is single-flight: concurrent first callers
block on one lock and all receive the same engine.
"""

import asyncio
import enum
import re
import ssl
import threading
from dataclasses import dataclass, field
from typing import Any, Mapping

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import URL, Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool
from sqlalchemy.sql.base import Executable

from inventory_dashboard.config import DatabaseSettings, load_database_settings
from inventory_dashboard.errors import ConfigurationError, ConnectError, QueryError
from inventory_dashboard.utils.logger import get_logger

logger = get_logger("inventory_dashboard.db")

_MYSQL_DEFAULT_PORT = 3306
_MYSQL_STRICT_MODE = "SET SESSION sql_mode = 'STRICT_ALL_TABLES,ERROR_FOR_DIVISION_BY_ZERO,NO_ENGINE_SUBSTITUTION'"
_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)?$")
_PARAM_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class PoolState(str, enum.Enum):
    UNSET = "unset"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    CLOSING = "closing"


@dataclass
class QueryResult:
    """Rows (as plain dicts keyed by column label) and affected row count."""

    recordset: list[dict[str, Any]] = field(default_factory=list)
    rows_affected: int = 0


@dataclass
class ProcedureResult:
    """Every result set a stored procedure produced, in order."""

    recordsets: list[list[dict[str, Any]]] = field(default_factory=list)
    rows_affected: int = 0

    @property
    def recordset(self) -> list[dict[str, Any]]:
        return self.recordsets[0] if self.recordsets else []


_init_lock = threading.Lock()
_pool: Engine | None = None
_state = PoolState.UNSET


def _driver_message(exc: BaseException) -> str:
    """Message of the underlying DBAPI error when SQLAlchemy wrapped one."""
    orig = getattr(exc, "orig", None)
    return str(orig if orig is not None else exc)


def _split_server(server: str) -> tuple[str, int | None]:
    """Split 'host:port' into its parts. Named instances (HOST\\INSTANCE) are left intact."""
    host, sep, port = server.rpartition(":")
    if sep and port.isdigit():
        return host, int(port)
    return server, None


def build_url(settings: DatabaseSettings) -> URL:
    """Build the SQLAlchemy URL for the configured backend."""
    if settings.url:
        return make_url(settings.url)
    host, port = _split_server(settings.server)
    port = settings.port or port
    if settings.dialect == "mssql":
        return URL.create(
            "mssql+pyodbc",
            username=settings.user,
            password=settings.password,
            host=host,
            port=port,
            database=settings.database,
            query={
                "driver": settings.odbc_driver,
                "Encrypt": "yes" if settings.encrypt else "no",
                "TrustServerCertificate": "yes" if settings.trust_server_certificate else "no",
            },
        )
    return URL.create(
        "mysql+pymysql",
        username=settings.user,
        password=settings.password,
        host=host,
        port=port or _MYSQL_DEFAULT_PORT,
        database=settings.database,
        query={"charset": "utf8mb4"},
    )


def _mysql_connect_args(settings: DatabaseSettings) -> dict[str, Any]:
    args: dict[str, Any] = {}
    if settings.enable_arith_abort:
        args["init_command"] = _MYSQL_STRICT_MODE
    if settings.encrypt:
        ctx = ssl.create_default_context()
        if settings.trust_server_certificate:
            ctx.check_hostname = False
            ctx.verify_mode = ssl.CERT_NONE
        args["ssl"] = ctx
    return args


def engine_options(settings: DatabaseSettings, url: URL) -> dict[str, Any]:
    """Keyword arguments for create_engine: pool sizing plus driver-specific connect args."""
    backend = url.get_backend_name()
    options: dict[str, Any] = {"pool_pre_ping": True}
    if backend == "sqlite":
        options["connect_args"] = {"check_same_thread": False}
        if url.database in (None, "", ":memory:"):
            # One shared connection; an in-memory database is per connection.
            options["poolclass"] = StaticPool
            return options
    idle_seconds = settings.pool.idle_timeout_ms // 1000
    options.update(
        pool_size=settings.pool.max,
        max_overflow=0,
        pool_timeout=settings.pool.acquire_timeout_seconds,
        pool_recycle=idle_seconds if idle_seconds > 0 else -1,
    )
    if backend == "mysql":
        options["connect_args"] = _mysql_connect_args(settings)
    return options


def _enable_arith_abort(engine: Engine) -> None:
    @event.listens_for(engine, "connect")
    def _set_arithabort(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        try:
            cursor.execute("SET ARITHABORT ON")
        finally:
            cursor.close()


def _warm_up(engine: Engine, min_connections: int) -> None:
    """Check connectivity and open the configured minimum number of connections."""
    connections = []
    try:
        for _ in range(max(1, min_connections)):
            connections.append(engine.connect())
        connections[0].execute(text("SELECT 1"))
    finally:
        for conn in connections:
            conn.close()


def _create_pool(settings: DatabaseSettings) -> Engine:
    url = build_url(settings)
    logger.info(
        "db.pool.creating",
        backend=url.get_backend_name(),
        host=url.host,
        database=url.database,
        pool_max=settings.pool.max,
        pool_min=settings.pool.min,
    )
    try:
        engine = create_engine(url, **engine_options(settings, url))
    except (SQLAlchemyError, ImportError) as e:
        logger.error("db.pool.create_failed", error=str(e))
        raise ConfigurationError(f"Cannot build database pool: {e}", cause=e) from e
    if engine.dialect.name == "mssql" and settings.enable_arith_abort:
        _enable_arith_abort(engine)
    try:
        _warm_up(engine, settings.pool.min)
    except SQLAlchemyError as e:
        engine.dispose()
        logger.error("db.pool.connect_failed", host=url.host, database=url.database, error=_driver_message(e))
        raise ConnectError(f"Failed to connect to database: {_driver_message(e)}", cause=e) from e
    logger.info("db.pool.connected", backend=url.get_backend_name(), database=url.database)
    return engine


def get_pool() -> Engine:
    """Return the process-wide pool, creating it on first use.

    Raises ConfigurationError or ConnectError when creation fails; nothing is
    cached in that case, so the next call starts from scratch.
    """
    global _pool, _state
    pool = _pool
    if pool is not None:
        return pool
    with _init_lock:
        if _pool is not None:
            return _pool
        settings = load_database_settings()
        _state = PoolState.CONNECTING
        try:
            engine = _create_pool(settings)
        except BaseException:
            _state = PoolState.UNSET
            raise
        _pool = engine
        _state = PoolState.CONNECTED
        return engine


def pool_state() -> PoolState:
    """Current lifecycle state of the pool reference."""
    return _state


def close_pool() -> None:
    """Dispose the pool and forget it. No-op when there is no pool."""
    global _pool, _state
    with _init_lock:
        engine = _pool
        if engine is None:
            return
        _state = PoolState.CLOSING
        try:
            engine.dispose()
        finally:
            _pool = None
            _state = PoolState.UNSET
    logger.info("db.pool.closed")


def execute_query(sql: str | Executable, params: Mapping[str, Any] | None = None) -> QueryResult:
    """Execute a query in its own transaction, binding params by name.

    sql is either text with :name placeholders or a SQLAlchemy Core executable.
    Values are only ever sent as bound parameters.
    """
    statement = text(sql) if isinstance(sql, str) else sql
    bound = dict(params or {})
    engine = get_pool()
    try:
        with engine.begin() as conn:
            result = conn.execute(statement, bound)
            if result.returns_rows:
                recordset = [dict(row) for row in result.mappings()]
                return QueryResult(recordset=recordset, rows_affected=len(recordset))
            return QueryResult(recordset=[], rows_affected=max(result.rowcount, 0))
    except SQLAlchemyError as e:
        logger.error(
            "db.query.failed",
            query=str(statement),
            param_keys=sorted(bound),
            error=_driver_message(e),
        )
        raise QueryError(f"Query execution failed: {_driver_message(e)}", cause=e) from e


def _placeholder(paramstyle: str, name: str, index: int) -> str:
    if paramstyle == "qmark":
        return "?"
    if paramstyle == "format":
        return "%s"
    if paramstyle == "numeric":
        return f":{index + 1}"
    if paramstyle == "named":
        return f":{name}"
    if paramstyle == "pyformat":
        return f"%({name})s"
    raise QueryError(f"Unsupported DBAPI paramstyle: {paramstyle!r}")


def build_procedure_call(
    dialect_name: str,
    paramstyle: str,
    name: str,
    params: Mapping[str, Any],
) -> tuple[str, dict[str, Any] | tuple[Any, ...]]:
    """Build the driver-level CALL/EXEC statement and its bound parameters.

    Only the procedure and parameter names (validated identifiers) appear in the
    statement text; every value is passed through the driver's paramstyle.
    """
    if not _IDENTIFIER.match(name or ""):
        raise QueryError(f"Invalid stored procedure name: {name!r}")
    keys = list(params)
    bad = [k for k in keys if not _PARAM_NAME.match(k)]
    if bad:
        raise QueryError(f"Invalid stored procedure parameter names: {bad!r}")
    placeholders = [_placeholder(paramstyle, key, i) for i, key in enumerate(keys)]
    if dialect_name == "mysql":
        statement = f"CALL {name}({', '.join(placeholders)})"
    elif dialect_name == "mssql":
        assignments = ", ".join(f"@{key} = {ph}" for key, ph in zip(keys, placeholders))
        statement = f"EXEC {name} {assignments}" if assignments else f"EXEC {name}"
    else:
        raise QueryError(f"Stored procedures are not supported on dialect {dialect_name!r}")
    if paramstyle in ("named", "pyformat"):
        return statement, {key: params[key] for key in keys}
    return statement, tuple(params[key] for key in keys)


def _drain_result_sets(cursor) -> list[list[dict[str, Any]]]:
    recordsets: list[list[dict[str, Any]]] = []
    while True:
        if cursor.description:
            columns = [col[0] for col in cursor.description]
            recordsets.append([dict(zip(columns, row)) for row in cursor.fetchall()])
        if not cursor.nextset():
            break
    return recordsets


def execute_stored_procedure(name: str, params: Mapping[str, Any] | None = None) -> ProcedureResult:
    """Invoke a stored procedure by name with bound parameters; return all result sets."""
    bound_params = dict(params or {})
    engine = get_pool()
    statement, bound = build_procedure_call(engine.dialect.name, engine.dialect.paramstyle, name, bound_params)
    dbapi_error = engine.dialect.loaded_dbapi.Error
    try:
        raw = engine.raw_connection()
        try:
            cursor = raw.cursor()
            try:
                cursor.execute(statement, bound)
                recordsets = _drain_result_sets(cursor)
                rows_affected = max(cursor.rowcount or 0, 0)
            finally:
                cursor.close()
            raw.commit()
        finally:
            raw.close()
    except (SQLAlchemyError, dbapi_error) as e:
        logger.error(
            "db.procedure.failed",
            procedure=name,
            param_keys=sorted(bound_params),
            error=_driver_message(e),
        )
        raise QueryError(f"Stored procedure {name} failed: {_driver_message(e)}", cause=e) from e
    return ProcedureResult(recordsets=recordsets, rows_affected=rows_affected)


async def execute_query_async(sql: str | Executable, params: Mapping[str, Any] | None = None) -> QueryResult:
    """Run execute_query in a worker thread so the event loop is never blocked."""
    return await asyncio.to_thread(execute_query, sql, params)

