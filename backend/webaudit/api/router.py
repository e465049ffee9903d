"""
API router aggregating all endpoints.
"""
from fastapi import APIRouter, Response, status

from webaudit.api.routes.audit import router as audit_router
from webaudit.api.routes.admin import router as admin_router

api_router = APIRouter()

api_router.include_router(audit_router)
api_router.include_router(admin_router)


@api_router.options("/{path:path}", include_in_schema=False)
async def options_any() -> Response:
    """OPTIONS on any API path; browser preflights never get this far."""
    return Response(status_code=status.HTTP_204_NO_CONTENT)
