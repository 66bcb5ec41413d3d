"""
Core module providing shared infrastructure.

Services (import from core.services):
    - ServiceResult: Result wrapper for expected failures
    - BaseService: Logging and transaction helpers

Exceptions (import from core.exceptions):
    - BaseApplicationError and its subclasses

Models (import directly, they need the app registry):
    - core.models.BaseModel
    - core.model_mixins.UUIDPrimaryKeyMixin
"""

from .exceptions import (
    BaseApplicationError,
    ExternalServiceError,
    NotFoundError,
    PermissionDeniedError,
    PersistenceError,
    RateLimitError,
    ValidationError,
)
from .services import BaseService, ServiceResult

__all__ = [
    "BaseService",
    "ServiceResult",
    "BaseApplicationError",
    "ValidationError",
    "NotFoundError",
    "PermissionDeniedError",
    "RateLimitError",
    "ExternalServiceError",
    "PersistenceError",
]
