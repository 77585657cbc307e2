"""SQLAlchemy declarative base for the mirrored inventory schema."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all ORM models.

    The tables are owned by the inventory database; these models only describe
    the columns the service reads so queries can be built with SQLAlchemy Core.
    """

    pass
