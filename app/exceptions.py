# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
# Errors should tell HOW to fix, not just WHAT failed.
#
# Core services raise these typed errors; the handler below maps each one to
# a stable HTTP status and a JSON body.
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse


class FileDropException(Exception):
    """
    Base exception for the FileDrop API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "FILEDROP_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Path Exceptions
# =============================================================================

class InvalidPathError(FileDropException):
    """Raised when a path is empty after sanitizing or escapes the storage root."""

    def __init__(self, path: str, reason: str = "Path required"):
        super().__init__(
            message=f"Invalid path: {reason}",
            code="INVALID_PATH",
            status_code=400,
            suggestion="Use a relative path made of letters, digits, '.', '_' and '-'",
            details={"path": path},
        )


class NotFoundError(FileDropException):
    """Raised when a file or folder doesn't exist."""

    def __init__(self, path: str, what: str = "File"):
        super().__init__(
            message=f"{what} not found: {path or '/'}",
            code="NOT_FOUND",
            status_code=404,
            suggestion="Refresh the file list, it may have been moved or deleted",
            details={"path": path},
        )


class InvalidTargetError(FileDropException):
    """Raised when an operation needs a folder but got something else."""

    def __init__(self, path: str, reason: str = "Only folders can be zipped"):
        super().__init__(
            message=reason,
            code="INVALID_TARGET",
            status_code=400,
            suggestion="Pick a folder instead of a file",
            details={"path": path},
        )


# =============================================================================
# Upload Exceptions
# =============================================================================

class FileTooLargeError(FileDropException):
    """Raised when uploaded file exceeds size limit."""

    def __init__(self, size_bytes: int, max_bytes: int):
        size_mb = size_bytes / (1024 * 1024)
        max_mb = max_bytes / (1024 * 1024)
        super().__init__(
            message=f"File too large: {size_mb:.1f}MB (max: {max_mb:.0f}MB)",
            code="FILE_TOO_LARGE",
            status_code=400,
            suggestion=f"Upload a file smaller than {max_mb:.0f}MB",
            details={"size_bytes": size_bytes, "max_bytes": max_bytes},
        )


class NoFilesUploadedError(FileDropException):
    """Raised when an upload request carries no files."""

    def __init__(self):
        super().__init__(
            message="No files uploaded",
            code="NO_FILES",
            status_code=400,
            suggestion="Send one or more files in the 'files' form field",
        )


class StorageIOError(FileDropException):
    """Raised when a filesystem operation fails for an unclassified reason."""

    def __init__(self, action: str, error: str):
        super().__init__(
            message=f"Could not {action}",
            code="STORAGE_IO_ERROR",
            status_code=500,
            suggestion="Try again later or check the server logs",
            details={"error": error},
        )


# =============================================================================
# Auth Exceptions
# =============================================================================

class SetupRequiredError(FileDropException):
    """Raised when no admin account has been configured yet."""

    def __init__(self):
        super().__init__(
            message="Setup required",
            code="SETUP_REQUIRED",
            status_code=401,
            suggestion="Create the admin account with POST /api/auth/setup",
        )


class AlreadyConfiguredError(FileDropException):
    """Raised when first-run setup is attempted a second time."""

    def __init__(self):
        super().__init__(
            message="Already configured",
            code="ALREADY_CONFIGURED",
            status_code=400,
            suggestion="Log in with the existing admin account",
        )


class InvalidCredentialsError(FileDropException):
    """Raised on a wrong username or password."""

    def __init__(self):
        super().__init__(
            message="Invalid credentials",
            code="INVALID_CREDENTIALS",
            status_code=401,
        )


class InvalidTokenError(FileDropException):
    """Raised when a bearer token is missing, forged, expired or revoked."""

    def __init__(self, reason: str = "Unauthorized"):
        super().__init__(
            message=reason,
            code="UNAUTHORIZED",
            status_code=401,
            suggestion="Log in again to get a fresh token",
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def filedrop_exception_handler(
    request: Request,
    exc: FileDropException
) -> JSONResponse:
    """
    Convert FileDropException to JSON response.

    Returns structured error with:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
        headers=headers,
    )


async def validation_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """
    Handle Pydantic validation errors.

    Converts validation errors to user-friendly messages.
    """
    return JSONResponse(
        status_code=422,
        content={
            "detail": "Validation error",
            "code": "VALIDATION_ERROR",
            "errors": str(exc)
        }
    )
