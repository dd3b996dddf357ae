"""Custom database types shared by all models."""

import uuid

from sqlalchemy import CHAR, TypeDecorator
from sqlalchemy.dialects.postgresql import UUID as PG_UUID


class GUID(TypeDecorator):
    """Platform-independent UUID type.

    Uses Postgres' native UUID type (Supabase) and stores UUIDs as CHAR(36)
    strings on other backends such as the SQLite database used in tests.
    Always hands ``uuid.UUID`` objects back to Python.
    """

    impl = CHAR(36)
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            return dialect.type_descriptor(PG_UUID(as_uuid=True))
        return dialect.type_descriptor(CHAR(36))

    def process_bind_param(self, value, dialect):
        """Convert UUID to the storage representation."""
        if value is None:
            return value
        if not isinstance(value, uuid.UUID):
            value = uuid.UUID(str(value))
        if dialect.name == "postgresql":
            return value
        return str(value)

    def process_result_value(self, value, dialect):
        """Convert stored value back to uuid.UUID."""
        if value is None or isinstance(value, uuid.UUID):
            return value
        return uuid.UUID(str(value))
