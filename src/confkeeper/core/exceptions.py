"""
confkeeper.core.exceptions - Custom Exception Hierarchy
=========================================================

This module defines the structured exception hierarchy for ConfKeeper.
Components raise and catch specific exception types that carry contextual
information, so the transport layer can map each one to the right response
without parsing message strings.

Exception Hierarchy:
    ConfKeeperError (base)
        ├── ConfigurationError        - Invalid settings, unknown group/validator
        ├── ValidationError           - Content rejected by a validator
        ├── InvalidNameError          - Malformed artifact name
        ├── InvalidTimestampError     - Malformed version timestamp
        ├── RetryTimeoutError         - Retry schedule exhausted without an error
        └── BackendError              - Key-value backend failures
                ├── BackendReadError
                ├── BackendWriteError
                └── ConfirmationTimeoutError

Outcome Semantics:
    - ValidationError, InvalidNameError, InvalidTimestampError are always
      local: the backend is never touched.
    - BackendReadError / BackendWriteError mean the operation definitely
      failed at the backend and may be retried.
    - ConfirmationTimeoutError means the write was accepted but could not be
      observed within the deadline. The outcome is UNKNOWN: re-read before
      deciding what to do.

Usage:
    >>> from confkeeper.core.exceptions import ValidationError
    >>> raise ValidationError(
    ...     message="promtool rejected the rules file",
    ...     diagnostics="FAILED: group 'x': unknown field 'rulez'",
    ... )
"""

from __future__ import annotations

from typing import Any, Optional


# =============================================================================
# Base Exception
# =============================================================================
# All ConfKeeper exceptions inherit from this base class, so callers can catch
# every framework error with a single except clause:
#
#   try:
#       await store.put("a.rules", body)
#   except ConfKeeperError as e:
#       logger.error(e.message, error_code=e.error_code, details=e.details)
# =============================================================================
class ConfKeeperError(Exception):
    """Base exception for all ConfKeeper errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code (UPPER_SNAKE_CASE).
        details: Arbitrary dict with additional debugging context.
    """

    def __init__(
        self,
        message: str,
        error_code: str = "UNKNOWN_ERROR",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)

        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Serialize this exception to a dictionary.

        Returns:
            Dictionary with error_type, message, error_code, and details.
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "details": self.details,
        }

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )


# =============================================================================
# Configuration Error
# =============================================================================
class ConfigurationError(ConfKeeperError):
    """Raised when ConfKeeper configuration is invalid or incomplete.

    Common Causes:
        - Unknown artifact group requested from the facade
        - Unknown validator kind in an ArtifactGroup
        - Kubernetes client configuration could not be loaded
    """

    def __init__(
        self,
        message: str,
        error_code: str = "CONFIG_ERROR",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message=message, error_code=error_code, details=details)


# =============================================================================
# Validation Error
# =============================================================================
# Raised when a validator rejects new content. Reported verbatim to the
# caller; never accompanied by a backend mutation.
# =============================================================================
class ValidationError(ConfKeeperError):
    """Raised when a validator rejects artifact content.

    Attributes:
        diagnostics: The validator's combined diagnostic output (for an
            external tool this is stdout and stderr together).

    Example:
        >>> raise ValidationError(
        ...     message="Invalid rule file: it is empty",
        ...     diagnostics="",
        ... )
    """

    def __init__(
        self,
        message: str,
        diagnostics: str = "",
        error_code: str = "VALIDATION_FAILED",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        enriched_details = details or {}
        enriched_details["diagnostics"] = diagnostics

        super().__init__(message=message, error_code=error_code, details=enriched_details)

        self.diagnostics = diagnostics


class InvalidNameError(ConfKeeperError):
    """Raised when an artifact name is malformed or not allowed in its group."""

    def __init__(
        self,
        message: str,
        name: str,
        error_code: str = "INVALID_NAME",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        enriched_details = details or {}
        enriched_details["name"] = name

        super().__init__(message=message, error_code=error_code, details=enriched_details)

        self.name = name


class InvalidTimestampError(ConfKeeperError):
    """Raised when a version timestamp does not match ``YYYY-MM-DDThh-mm-ss``."""

    def __init__(
        self,
        message: str,
        timestamp: str,
        error_code: str = "INVALID_TIMESTAMP",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        enriched_details = details or {}
        enriched_details["timestamp"] = timestamp

        super().__init__(message=message, error_code=error_code, details=enriched_details)

        self.timestamp = timestamp


class RetryTimeoutError(ConfKeeperError):
    """Raised when a retry schedule is exhausted and no attempt raised."""

    def __init__(
        self,
        message: str,
        attempts: int,
        error_code: str = "RETRY_TIMEOUT",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        enriched_details = details or {}
        enriched_details["attempts"] = attempts

        super().__init__(message=message, error_code=error_code, details=enriched_details)

        self.attempts = attempts


# =============================================================================
# Backend Errors
# =============================================================================
# Everything that goes wrong while talking to the key-value backend. The
# collection_id is always recorded so operators can tell which half of a
# current/history pair failed.
# =============================================================================
class BackendError(ConfKeeperError):
    """Base class for key-value backend failures.

    Attributes:
        collection_id: The backend collection the failing call targeted.
    """

    def __init__(
        self,
        message: str,
        collection_id: str,
        error_code: str = "BACKEND_ERROR",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        enriched_details = details or {}
        enriched_details["collection_id"] = collection_id

        super().__init__(message=message, error_code=error_code, details=enriched_details)

        self.collection_id = collection_id


class BackendReadError(BackendError):
    """Raised when reading a collection from the backend fails."""

    def __init__(
        self,
        message: str,
        collection_id: str,
        error_code: str = "BACKEND_READ_FAILED",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            collection_id=collection_id,
            error_code=error_code,
            details=details,
        )


class BackendWriteError(BackendError):
    """Raised when the backend rejects a write outright.

    The single put call is authoritative: nothing was written.
    """

    def __init__(
        self,
        message: str,
        collection_id: str,
        error_code: str = "BACKEND_WRITE_FAILED",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            collection_id=collection_id,
            error_code=error_code,
            details=details,
        )


class ConfirmationTimeoutError(BackendError):
    """Raised when an accepted write could not be read back in time.

    The write may or may not have taken effect. Callers should re-read the
    collection rather than assume failure.

    Attributes:
        elapsed_seconds: How long the confirmation loop polled.

    Example:
        >>> raise ConfirmationTimeoutError(
        ...     message="verification of the updated configuration timed out",
        ...     collection_id="alertrules",
        ...     elapsed_seconds=10.0,
        ... )
    """

    def __init__(
        self,
        message: str,
        collection_id: str,
        elapsed_seconds: float,
        error_code: str = "CONFIRMATION_TIMEOUT",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        enriched_details = details or {}
        enriched_details["elapsed_seconds"] = elapsed_seconds

        super().__init__(
            message=message,
            collection_id=collection_id,
            error_code=error_code,
            details=enriched_details,
        )

        self.elapsed_seconds = elapsed_seconds
