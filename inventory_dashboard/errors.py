"""Error taxonomy for the data access layer and the analytics services."""


class InventoryError(Exception):
    """Base class for errors raised by this package."""

    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(message)
        self.message = message
        self.cause = cause


class DatabaseError(InventoryError):
    """Raised by the data access layer."""


class ConfigurationError(DatabaseError):
    """The pool cannot be built because configuration is missing or invalid."""


class ConnectError(DatabaseError):
    """The backend is unreachable or rejected the credentials at pool creation."""


class QueryError(DatabaseError):
    """A query or stored procedure failed."""


class AggregationError(InventoryError):
    """An analytics query failed; no partial result is returned."""
