"""
FastAPI dependencies for the audit pipeline and admin auth.

Shared services are created in the application lifespan and live on
app.state; these dependencies only look them up.
"""
import secrets
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from webaudit.config import settings
from webaudit.core.exceptions import UnauthorizedError
from webaudit.services.audit_pipeline import AuditPipeline
from webaudit.services.audit_recorder import AuditRecorder

security = HTTPBearer(auto_error=False)


def get_recorder(request: Request) -> AuditRecorder:
    return request.app.state.recorder


def get_audit_pipeline(request: Request) -> AuditPipeline:
    state = request.app.state
    return AuditPipeline(
        cache=state.audit_cache,
        fetcher=state.fetcher,
        recorder=state.recorder,
    )


async def require_admin(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> None:
    """Static bearer token check for the admin listing."""
    if not settings.ADMIN_TOKEN or credentials is None:
        raise UnauthorizedError()

    if credentials.scheme.lower() != "bearer" or not secrets.compare_digest(
        credentials.credentials.encode(), settings.ADMIN_TOKEN.encode()
    ):
        raise UnauthorizedError()


Pipeline = Annotated[AuditPipeline, Depends(get_audit_pipeline)]
Recorder = Annotated[AuditRecorder, Depends(get_recorder)]
AdminAccess = Depends(require_admin)
