"""Custom exceptions for application-specific error handling."""

from __future__ import annotations

from typing import Optional, Dict, Any


class OnlineShopsException(Exception):
    """Base exception for all application errors."""

    def __init__(
        self,
        message: str,
        *,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 400,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code
        self.headers = headers
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "details": self.details,
        }


class BadRequestError(OnlineShopsException):
    """Raised when request is invalid."""

    def __init__(self, message: str = "Bad request", *, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code="BAD_REQUEST", details=details, status_code=400)


class UnauthorizedError(OnlineShopsException):
    """Raised when credentials or tokens are missing, invalid, expired or revoked."""

    def __init__(
        self,
        message: str = "Unauthorized",
        *,
        error_code: str = "UNAUTHORIZED",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message,
            error_code=error_code,
            details=details,
            status_code=401,
            headers={"WWW-Authenticate": "Bearer"},
        )


class ForbiddenError(OnlineShopsException):
    """Raised when an authenticated caller lacks the required role or permission."""

    def __init__(self, message: str = "Forbidden", *, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code="FORBIDDEN", details=details, status_code=403)


class NotFoundError(OnlineShopsException):
    """Raised when a requested resource is not found."""

    def __init__(self, message: str = "Not found", *, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code="NOT_FOUND", details=details, status_code=404)


class ConflictError(OnlineShopsException):
    """Raised when a request conflicts with current state."""

    def __init__(self, message: str = "Conflict", *, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code="CONFLICT", details=details, status_code=409)


class RateLimitExceeded(OnlineShopsException):
    """Raised when a client exceeds rate limits."""

    def __init__(self, *, retry_after: int, limit: int, window_seconds: int):
        headers = {
            "Retry-After": str(retry_after),
            "X-RateLimit-Limit": str(limit),
            "X-RateLimit-Window": str(window_seconds),
        }
        super().__init__(
            "Too many requests",
            error_code="RATE_LIMIT",
            details={"retry_after": retry_after, "limit": limit, "window_seconds": window_seconds},
            status_code=429,
            headers=headers,
        )
