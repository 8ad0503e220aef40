"""
Core utilities package for Plant Care Application.
Provides exceptions, the injectable clock and the sync retry executor.
"""

from .clock import Clock, FixedClock, SystemClock, system_clock

from .exceptions import (
    PlantCareException,
    AuthenticationError,
    AuthorizationError,
    NotFoundError,
    ConflictError,
    DuplicateOperationError,
    StorageError,
    RepositoryError,
    ReferenceScanError,
)

from .sync_retry import (
    ConflictAction,
    ConflictClassification,
    ConflictResolution,
    RetryConfig,
    RetryableOperation,
    SyncKind,
    SyncRetryService,
    get_sync_retry_service,
)

__all__ = [
    # Clock
    "Clock",
    "FixedClock",
    "SystemClock",
    "system_clock",

    # Exceptions
    "PlantCareException",
    "AuthenticationError",
    "AuthorizationError",
    "NotFoundError",
    "ConflictError",
    "DuplicateOperationError",
    "StorageError",
    "RepositoryError",
    "ReferenceScanError",

    # Sync retry
    "ConflictAction",
    "ConflictClassification",
    "ConflictResolution",
    "RetryConfig",
    "RetryableOperation",
    "SyncKind",
    "SyncRetryService",
    "get_sync_retry_service",
]
