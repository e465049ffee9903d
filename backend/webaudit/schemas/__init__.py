"""
Pydantic schemas for API request/response validation.
"""
from webaudit.schemas.common import BaseSchema, ErrorResponse
from webaudit.schemas.audit import (
    AuditRequest,
    AuditScoresSchema,
    IssueSchema,
    AuditMetaSchema,
    AuditResponse,
    AuditRecordResponse,
    AuditHistoryResponse,
)

__all__ = [
    "BaseSchema",
    "ErrorResponse",
    "AuditRequest",
    "AuditScoresSchema",
    "IssueSchema",
    "AuditMetaSchema",
    "AuditResponse",
    "AuditRecordResponse",
    "AuditHistoryResponse",
]
