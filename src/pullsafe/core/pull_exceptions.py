"""
Exception hierarchy for pull-authorization verification.

Provides typed exceptions for encoding, decoding and contract reads so callers
can tell a configuration mistake from a flaky node, and never mistake either
for an authorization status.
"""

from __future__ import annotations
from typing import Optional, Any, Dict, Sequence


class PullSafeError(Exception):
    """Base exception for all pullsafe errors.

    Attributes:
        message: Human-readable error description
        details: Additional context about the error
        recoverable: Whether the operation can be retried
    """

    recoverable = False

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        recoverable: Optional[bool] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}
        if recoverable is not None:
            self.recoverable = recoverable


# ==================== Value Errors ====================


class ValidationError(PullSafeError, ValueError):
    """Raised when an address, hash or amount is malformed or out of range."""
    pass


# ==================== Codec Errors ====================


class CodecError(PullSafeError):
    """Raised when ABI encoding or decoding fails."""
    pass


class EncodingError(CodecError):
    """Raised when an argument does not fit a 32-byte ABI word.

    This is a programmer or configuration error and is never retried.
    """
    pass


class DecodingError(CodecError):
    """Raised when a contract read returned non-hex data."""
    pass


# ==================== Read Errors ====================


class ReadError(PullSafeError):
    """Raised when one or more of the contract reads failed.

    No evaluation result is produced when this is raised.
    """

    recoverable = True

    def __init__(
        self,
        message: str,
        failed_reads: Sequence[str] = (),
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.failed_reads = tuple(failed_reads)


class TransportError(PullSafeError):
    """Raised when the node could not be reached or answered with an HTTP error."""
    recoverable = True


class RpcTimeoutError(TransportError):
    """Raised when an eth_call request timed out."""
    pass


class RpcResponseError(TransportError):
    """Raised when the node returned a JSON-RPC error or an unparseable body."""

    def __init__(
        self,
        message: str,
        code: Optional[int] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.code = code


# ==================== Configuration Errors ====================


class ConfigurationError(PullSafeError):
    """Raised when deployment configuration is missing or invalid."""
    recoverable = False


# ==================== Utility Functions ====================


def get_error_context(exc: BaseException) -> Dict[str, Any]:
    """Extract error context from an exception for logging.

    Args:
        exc: The exception to extract context from

    Returns:
        Dictionary containing error type, message, and any additional details
    """
    context: Dict[str, Any] = {
        "error_type": type(exc).__name__,
        "error_message": str(exc),
    }

    if isinstance(exc, PullSafeError):
        context["recoverable"] = exc.recoverable
        if exc.details:
            context["details"] = exc.details

    if isinstance(exc, ReadError) and exc.failed_reads:
        context["failed_reads"] = list(exc.failed_reads)

    if isinstance(exc, RpcResponseError) and exc.code is not None:
        context["rpc_code"] = exc.code

    return context
