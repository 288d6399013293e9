"""
core/results.py -- Uniform success/failure envelope returned by the workflow layer.

Every public AuthService operation returns a ServiceResult instead of raising.
Route handlers only inspect .success and map the rest onto an HTTP response.

Construct results with the success() / failure() factories rather than the
dataclass constructor so the success flag and the error code stay consistent:
a successful result never carries an error code.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")

INTERNAL_ERROR_MESSAGE = "Internal server error."


@dataclass(frozen=True)
class ServiceResult(Generic[T]):
    success: bool
    message: str
    data: Optional[T] = None
    error_code: Optional[str] = None


def success(message: str = "", data: Optional[T] = None) -> ServiceResult[T]:
    """Build a successful result, optionally carrying a payload."""
    return ServiceResult(success=True, message=message, data=data)


def failure(message: str, error_code: Optional[str] = None) -> ServiceResult:
    """Build a failed result. The payload is always None."""
    return ServiceResult(success=False, message=message, error_code=error_code)


def internal_error() -> ServiceResult:
    """The single opaque result every unexpected fault is converted into."""
    return failure(INTERNAL_ERROR_MESSAGE, "internal_error")
