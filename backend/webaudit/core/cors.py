"""
CORS handling.

Preflights always get 204 with the configured CORS headers; the browser
decides from those headers whether the real request may follow.
Responses produced outside CORSMiddleware (rate-limit rejections and
unhandled errors) take their headers from cors_headers().
"""
import logging

from fastapi import Response, status
from fastapi.middleware.cors import CORSMiddleware
from starlette.datastructures import Headers

from webaudit.config import settings

logger = logging.getLogger(__name__)


def cors_headers(origin: str | None) -> dict[str, str]:
    """Allow-Origin header for a request from `origin`, if it is allowed."""
    if origin is None:
        return {}
    allowed = settings.cors_origins_list
    if "*" in allowed:
        return {"Access-Control-Allow-Origin": "*"}
    if origin in allowed:
        return {"Access-Control-Allow-Origin": origin, "Vary": "Origin"}
    return {}


class PreflightCORSMiddleware(CORSMiddleware):
    """CORSMiddleware that answers every preflight with 204 and no body."""

    def preflight_response(self, request_headers: Headers) -> Response:
        response = super().preflight_response(request_headers)
        if response.status_code != status.HTTP_200_OK:
            logger.info(f"Preflight not allowed: {response.body.decode()}")
        headers = {
            key: value
            for key, value in response.headers.items()
            if key not in ("content-length", "content-type")
        }
        return Response(status_code=status.HTTP_204_NO_CONTENT, headers=headers)
