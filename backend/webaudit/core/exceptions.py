"""
Custom HTTP exceptions for WebAudit.

Every error the audit endpoint can return is one of these. The public
message is fixed; internal detail stays in the logs.
"""
from fastapi import HTTPException, status


class RateLimitedError(HTTPException):
    """Client exceeded its request quota for the current window."""

    def __init__(self, retry_after: int = 60):
        super().__init__(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too many requests",
            headers={"Retry-After": str(retry_after)},
        )


class InvalidInputError(HTTPException):
    """Malformed JSON body or missing/non-http URL."""

    def __init__(self, detail: str = "Invalid URL"):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
        )


class UnsafeTargetError(HTTPException):
    """Target points at loopback or private network space."""

    def __init__(self, detail: str = "Blocked URL"):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail,
        )


class MethodNotAllowedError(HTTPException):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
            detail="Method not allowed",
            headers={"Allow": "POST, OPTIONS"},
        )


class FetchFailedError(HTTPException):
    """Outbound fetch failed.

    Timeouts, DNS, connection and TLS errors all collapse into this one
    response so callers learn nothing about the network behind us.
    """

    def __init__(self):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch website",
        )


class UnauthorizedError(HTTPException):
    """Unauthorized exception."""

    def __init__(self, detail: str = "Unauthorized"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )
