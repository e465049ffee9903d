"""
Audit schemas.
"""
from datetime import datetime
from uuid import UUID

from pydantic import Field

from webaudit.schemas.common import BaseSchema
from webaudit.services.audit_engine import AuditResult


class AuditRequest(BaseSchema):
    """Audit request body."""

    url: str = Field(..., description="Absolute http(s) URL to audit", examples=["https://example.com"])


class AuditScoresSchema(BaseSchema):
    seo: int = Field(..., ge=0, le=100)
    security: int = Field(..., ge=0, le=100)
    performance: int = Field(..., ge=0, le=100)
    accessibility: int = Field(..., ge=0, le=100)


class IssueSchema(BaseSchema):
    type: str
    message: str


class AuditMetaSchema(BaseSchema):
    status: int
    html_size_kb: int = Field(..., alias="htmlSizeKb")
    response_time_ms: int = Field(..., alias="responseTimeMs")


class AuditResponse(BaseSchema):
    """Audit result as returned to the caller."""

    scores: AuditScoresSchema
    issues: list[IssueSchema]
    meta: AuditMetaSchema
    cached: bool

    @classmethod
    def from_result(cls, result: AuditResult, cached: bool) -> "AuditResponse":
        return cls.model_validate({**result.to_dict(), "cached": cached})


class AuditRecordResponse(BaseSchema):
    """Stored audit history row."""

    id: UUID
    url: str
    seo_score: int
    security_score: int
    performance_score: int
    accessibility_score: int
    issues: list[IssueSchema]
    response_time_ms: int
    cached: bool
    created_at: datetime


class AuditHistoryResponse(BaseSchema):
    audits: list[AuditRecordResponse]
