"""
Core utilities for WebAudit.
"""
from webaudit.core.exceptions import (
    FetchFailedError,
    InvalidInputError,
    MethodNotAllowedError,
    RateLimitedError,
    UnauthorizedError,
    UnsafeTargetError,
)

__all__ = [
    "FetchFailedError",
    "InvalidInputError",
    "MethodNotAllowedError",
    "RateLimitedError",
    "UnauthorizedError",
    "UnsafeTargetError",
]
