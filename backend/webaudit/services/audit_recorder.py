"""
Audit history persistence.

Appends one AuditRecord per fresh audit. Writes are best-effort: the
audit has already been computed and served, so a failed insert is
logged and dropped.
"""
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from webaudit.database import AsyncSessionLocal
from webaudit.models.audit import AuditRecord
from webaudit.services.audit_engine import AuditResult

logger = logging.getLogger(__name__)


def build_record(url: str, result: AuditResult) -> AuditRecord:
    return AuditRecord(
        url=url,
        seo_score=result.scores.seo,
        security_score=result.scores.security,
        performance_score=result.scores.performance,
        accessibility_score=result.scores.accessibility,
        issues=[issue.to_dict() for issue in result.issues],
        response_time_ms=result.response_time_ms,
        cached=False,
    )


class AuditRecorder:
    """Append-only writer and reader for audit history."""

    def __init__(self, session_maker: async_sessionmaker | None = None):
        self.session_maker = session_maker or AsyncSessionLocal

    async def append(self, url: str, result: AuditResult) -> bool:
        """Insert one record in its own transaction. Returns False on failure."""
        try:
            async with self.session_maker() as session:
                session.add(build_record(url, result))
                await session.commit()
        except Exception:
            logger.exception(f"Failed to persist audit for {url}")
            return False
        return True

    async def list_recent(self, limit: int = 50) -> list[AuditRecord]:
        """Most recent records, newest first."""
        async with self.session_maker() as session:
            return await list_recent_audits(session, limit)


async def list_recent_audits(db: AsyncSession, limit: int = 50) -> list[AuditRecord]:
    result = await db.execute(
        select(AuditRecord)
        .order_by(AuditRecord.created_at.desc())
        .limit(limit)
    )
    return list(result.scalars().all())
