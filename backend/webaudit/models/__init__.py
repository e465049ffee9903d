"""
SQLAlchemy models for WebAudit.
"""
from webaudit.models.base import Base, BaseModel
from webaudit.models.audit import AuditRecord

__all__ = [
    "Base",
    "BaseModel",
    "AuditRecord",
]
