# 📄 File: app/shared/core/exceptions.py
# 🧭 Purpose (Layman Explanation):
# Names every way a clean-up or deletion can go wrong (not logged in, not your post, storage down...)
# so the app can answer with a clear message and the right status code.
# 🧪 Purpose (Technical Summary):
# PlantCareException hierarchy carrying HTTP status, machine-readable error code and structured
# details. Rendered into the JSON error envelope by the handler registered in app.main.
# 🔗 Dependencies:
# FastAPI status constants, typing, datetime
# 🔄 Connected Modules / Calls From:
# Storage cleanup services, sync retry executor, repositories, API endpoints, app.main

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import status


def _with_fields(details: Optional[Dict[str, Any]], **fields: Any) -> Dict[str, Any]:
    """Merge the non-empty keyword fields into a details dict."""
    merged = dict(details or {})
    merged.update({key: value for key, value in fields.items() if value is not None})
    return merged


class PlantCareException(Exception):
    """
    Base exception class for Plant Care Application.
    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.error_code = error_code or self.__class__.__name__.upper()
        super().__init__(self.message)

    def to_dict(self, request_id: Optional[str] = None) -> Dict[str, Any]:
        """Error envelope returned to API clients."""
        return {
            "error": {
                "code": self.error_code,
                "message": self.message,
                "details": self.details,
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "request_id": request_id,
            }
        }


# =============================================================================
# AUTHENTICATION & AUTHORIZATION
# =============================================================================

class AuthenticationError(PlantCareException):
    """Missing, expired or malformed bearer token."""

    def __init__(self, message: str = "Authentication failed", details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            status_code=status.HTTP_401_UNAUTHORIZED,
            details=details,
            error_code="AUTHENTICATION_ERROR"
        )


class AuthorizationError(PlantCareException):
    """
    Raised when a user acts on a record they do not own.
    """

    def __init__(
        self,
        message: str = "Access denied",
        resource_type: Optional[str] = None,
        resource_id: Optional[str] = None,
        user_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_403_FORBIDDEN,
            details=_with_fields(
                details, resource_type=resource_type, resource_id=resource_id, user_id=user_id
            ),
            error_code="AUTHORIZATION_ERROR"
        )


# =============================================================================
# RESOURCE STATE
# =============================================================================

class NotFoundError(PlantCareException):
    """The post (or other record) does not exist in any table we looked in."""

    def __init__(
        self,
        message: str = "Resource not found",
        resource_type: Optional[str] = None,
        resource_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            details=_with_fields(details, resource_type=resource_type, resource_id=resource_id),
            error_code="NOT_FOUND"
        )


class ConflictError(PlantCareException):
    """Request collides with work already in progress."""

    def __init__(
        self,
        message: str = "Resource conflict",
        details: Optional[Dict[str, Any]] = None,
        error_code: str = "CONFLICT_ERROR"
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_409_CONFLICT,
            details=details,
            error_code=error_code
        )


class DuplicateOperationError(ConflictError):
    """
    Raised when a retryable operation id is already active.
    Two operations sharing an id would corrupt each other's attempt counters.
    """

    def __init__(self, operation_id: str):
        super().__init__(
            message=f"Operation {operation_id} is already in progress",
            details={"operation_id": operation_id},
            error_code="DUPLICATE_OPERATION"
        )
        self.operation_id = operation_id


# =============================================================================
# STORAGE & REPOSITORY
# =============================================================================

class StorageError(PlantCareException):
    """Object store list/remove failure, or a refused operation on an unknown bucket."""

    def __init__(
        self,
        message: str = "Storage operation failed",
        operation: Optional[str] = None,
        bucket: Optional[str] = None,
        storage_path: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            details=_with_fields(details, operation=operation, bucket=bucket, storage_path=storage_path),
            error_code="STORAGE_ERROR"
        )


class RepositoryError(PlantCareException):
    """Record store query failure."""

    def __init__(
        self,
        message: str = "Repository operation failed",
        operation: Optional[str] = None,
        entity: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            details=_with_fields(details, operation=operation, entity=entity),
            error_code="REPOSITORY_ERROR"
        )


class ReferenceScanError(RepositoryError):
    """
    Raised when the set of referenced assets for a user cannot be fully built.
    An incomplete reference set must never drive orphan deletion.
    """

    def __init__(self, user_id: str, failed_tables: Dict[str, str]):
        super().__init__(
            message=f"Reference scan incomplete for user {user_id}",
            operation="scan_all_for_user",
            details={"user_id": user_id, "failed_tables": failed_tables}
        )
        self.user_id = user_id
        self.failed_tables = failed_tables
