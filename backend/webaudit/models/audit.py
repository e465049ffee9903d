"""
Audit history model.

One row per non-cached audit. Rows are only ever inserted.
"""
from sqlalchemy import Boolean, Column, Integer, JSON, Text

from webaudit.models.base import Base, BaseModel


class AuditRecord(Base, BaseModel):
    """Durable record of a completed audit."""

    __tablename__ = "audits"

    url = Column(Text, nullable=False)
    seo_score = Column(Integer, nullable=False)
    security_score = Column(Integer, nullable=False)
    performance_score = Column(Integer, nullable=False)
    accessibility_score = Column(Integer, nullable=False)
    issues = Column(JSON, nullable=False, default=list)
    response_time_ms = Column(Integer, nullable=False)
    cached = Column(Boolean, nullable=False, default=False)

    def __repr__(self) -> str:
        return f"<AuditRecord {self.id} {self.url}>"
