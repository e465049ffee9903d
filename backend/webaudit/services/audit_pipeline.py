"""
Audit request pipeline.

Stages after rate limiting and method dispatch, each a possible exit:

    BodyParse -> InputValidate -> SafetyCheck -> CacheRead
        -> [Fetch -> Score -> CacheWrite + PersistWrite] -> Respond

The bracketed group only runs on a cache miss. Cache and history writes
are scheduled to run after the response and never affect it.
"""
import asyncio
import json
import logging

from fastapi import BackgroundTasks

from webaudit.core.exceptions import (
    FetchFailedError,
    InvalidInputError,
    UnsafeTargetError,
)
from webaudit.schemas.audit import AuditResponse
from webaudit.services.audit_engine import AuditResult, audit_page
from webaudit.services.audit_recorder import AuditRecorder
from webaudit.services.cache import AuditCache
from webaudit.services.fetcher import FetchError, PageFetcher
from webaudit.services.url_guard import is_blocked_url, is_valid_audit_url

logger = logging.getLogger(__name__)


def parse_audit_url(body: bytes) -> str:
    """Extract and validate the target URL from a raw request body."""
    try:
        payload = json.loads(body)
    except ValueError:
        raise InvalidInputError("Invalid JSON") from None

    url = payload.get("url") if isinstance(payload, dict) else None
    if not is_valid_audit_url(url):
        raise InvalidInputError("Invalid URL")

    return url


class AuditPipeline:
    """Runs one audit request end to end."""

    def __init__(
        self,
        cache: AuditCache,
        fetcher: PageFetcher,
        recorder: AuditRecorder,
    ):
        self.cache = cache
        self.fetcher = fetcher
        self.recorder = recorder

    async def handle(self, body: bytes, background_tasks: BackgroundTasks) -> AuditResponse:
        url = parse_audit_url(body)
        return await self.audit(url, background_tasks)

    async def audit(self, url: str, background_tasks: BackgroundTasks) -> AuditResponse:
        if is_blocked_url(url):
            logger.warning(f"Blocked audit target: {url}")
            raise UnsafeTargetError()

        cached = await self.cache.get(url)
        if cached is not None:
            logger.info(f"Cache hit for {url}")
            return AuditResponse.from_result(cached, cached=True)

        try:
            page = await self.fetcher.fetch(url)
        except FetchError:
            raise FetchFailedError()

        result = audit_page(page.body, page.headers, page.elapsed_ms, page.status_code)
        logger.info(
            f"Audited {url}: {result.scores.to_dict()} "
            f"({len(result.issues)} issues, {page.elapsed_ms}ms)"
        )

        background_tasks.add_task(self.store, url, result)

        return AuditResponse.from_result(result, cached=False)

    async def store(self, url: str, result: AuditResult):
        """Write the fresh result to cache and history, independently."""
        outcomes = await asyncio.gather(
            self.cache.put(url, result),
            self.recorder.append(url, result),
            return_exceptions=True,
        )
        for outcome in outcomes:
            if isinstance(outcome, Exception):
                logger.error(f"Audit side effect failed for {url}: {outcome!r}")
