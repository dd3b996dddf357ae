"""Core infrastructure for the Life OS backend."""

from .base_crud import BaseCRUD
from .database_types import GUID
from .exceptions import (
    AuthenticationError,
    BusinessLogicError,
    DatabaseError,
    ExternalServiceError,
    LifeOSException,
    NotFoundError,
    PermissionError,
    ResourceNotFoundError,
    ValidationError,
)

__all__ = [
    "BaseCRUD",
    "GUID",
    "LifeOSException",
    "ResourceNotFoundError",
    "NotFoundError",
    "ValidationError",
    "BusinessLogicError",
    "PermissionError",
    "DatabaseError",
    "AuthenticationError",
    "ExternalServiceError",
]
