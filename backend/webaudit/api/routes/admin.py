"""
Admin history listing.

Read-only view of the most recent audits, behind a static bearer token.
"""
from fastapi import APIRouter

from webaudit.config import settings
from webaudit.core.deps import AdminAccess, Recorder
from webaudit.schemas.audit import AuditHistoryResponse, AuditRecordResponse
from webaudit.schemas.common import ErrorResponse

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.get(
    "/audits",
    response_model=AuditHistoryResponse,
    dependencies=[AdminAccess],
    summary="List recent audits",
    responses={401: {"model": ErrorResponse, "description": "Missing or wrong token"}},
)
async def list_audits(recorder: Recorder) -> AuditHistoryResponse:
    """Most recent audits, newest first."""
    records = await recorder.list_recent(limit=settings.ADMIN_HISTORY_LIMIT)
    return AuditHistoryResponse(
        audits=[AuditRecordResponse.model_validate(record) for record in records],
    )
