"""
Unit tests for audit history persistence.
"""
import pytest
from unittest.mock import MagicMock

from webaudit.models.audit import AuditRecord
from webaudit.services.audit_engine import audit_page
from webaudit.services.audit_recorder import AuditRecorder, build_record
from tests.fixtures.sample_pages import EMPTY_PAGE_HTML, INACCESSIBLE_PAGE_HTML


class TestBuildRecord:
    def test_maps_result_fields(self):
        result = audit_page(EMPTY_PAGE_HTML, {}, 500, 200)

        record = build_record("https://example.com", result)

        assert isinstance(record, AuditRecord)
        assert record.url == "https://example.com"
        assert record.seo_score == 60
        assert record.security_score == 50
        assert record.performance_score == 100
        assert record.accessibility_score == 80
        assert record.response_time_ms == 500
        assert record.cached is False
        assert record.issues[0] == {"type": "SEO", "message": "Missing <title> tag"}


class TestAuditRecorder:
    @pytest.mark.asyncio
    async def test_append_and_list(self, recorder):
        result = audit_page(EMPTY_PAGE_HTML, {}, 500, 200)

        assert await recorder.append("https://example.com", result) is True

        records = await recorder.list_recent()
        assert len(records) == 1
        assert records[0].url == "https://example.com"
        assert records[0].cached is False
        assert records[0].created_at is not None
        assert records[0].issues == [issue.to_dict() for issue in result.issues]

    @pytest.mark.asyncio
    async def test_list_is_newest_first_and_limited(self, recorder):
        result = audit_page(INACCESSIBLE_PAGE_HTML, {}, 100, 200)
        for i in range(5):
            await recorder.append(f"https://example.com/{i}", result)

        records = await recorder.list_recent(limit=3)

        assert [r.url for r in records] == [
            "https://example.com/4",
            "https://example.com/3",
            "https://example.com/2",
        ]

    @pytest.mark.asyncio
    async def test_append_failure_is_swallowed(self):
        broken = MagicMock(side_effect=RuntimeError("database unavailable"))
        recorder = AuditRecorder(session_maker=broken)

        result = audit_page(EMPTY_PAGE_HTML, {}, 500, 200)

        assert await recorder.append("https://example.com", result) is False
