"""
WebAudit Heuristic Audit Engine

Scores one fetched page in four independent categories:
1. SEO
2. Security
3. Performance
4. Accessibility

Each category starts at 100 and loses a fixed penalty per failed check,
floored at 0. Detection is substring/regex matching on the raw markup,
not a DOM parse. The rules are kept byte-stable so scores never drift
between releases.
"""

import logging
import re
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Mapping

logger = logging.getLogger(__name__)

SLOW_RESPONSE_MS = 2000
MAX_SCRIPTS = 10
MAX_STYLESHEETS = 5
MAX_HTML_BYTES = 500 * 1024

SCRIPT_RE = re.compile(r"<script\b", re.IGNORECASE)
STYLESHEET_RE = re.compile(
    r"<link\b[^>]*\brel\s*=\s*[\"']?stylesheet\b[^>]*>", re.IGNORECASE
)
HTML_LANG_RE = re.compile(r"<html\b[^>]*\blang\s*=", re.IGNORECASE)
IMG_TAG_RE = re.compile(r"<img\b[^>]*>", re.IGNORECASE)
IMG_ALT_RE = re.compile(r"\salt(?:\s*=|[\s/>])", re.IGNORECASE)
INPUT_TAG_RE = re.compile(r"<input\b[^>]*>", re.IGNORECASE)
INPUT_LABEL_RE = re.compile(
    r"\s(?:aria-label|aria-labelledby|id)\s*=", re.IGNORECASE
)


class IssueCategory(str, Enum):
    SEO = "SEO"
    SECURITY = "Security"
    PERFORMANCE = "Performance"
    ACCESSIBILITY = "Accessibility"


@dataclass(frozen=True)
class Issue:
    category: IssueCategory
    message: str

    def to_dict(self) -> dict:
        return {"type": self.category.value, "message": self.message}


@dataclass
class AuditScores:
    seo: int = 100
    security: int = 100
    performance: int = 100
    accessibility: int = 100

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class AuditResult:
    """Outcome of one audit, as cached and stored (no `cached` flag)."""
    scores: AuditScores
    issues: list[Issue] = field(default_factory=list)
    http_status: int = 0
    html_size_kb: int = 0
    response_time_ms: int = 0

    def to_dict(self) -> dict:
        return {
            "scores": self.scores.to_dict(),
            "issues": [issue.to_dict() for issue in self.issues],
            "meta": {
                "status": self.http_status,
                "htmlSizeKb": self.html_size_kb,
                "responseTimeMs": self.response_time_ms,
            },
        }

    @classmethod
    def from_dict(cls, data: dict) -> "AuditResult":
        meta = data.get("meta", {})
        return cls(
            scores=AuditScores(**data["scores"]),
            issues=[
                Issue(IssueCategory(item["type"]), item["message"])
                for item in data.get("issues", [])
            ],
            http_status=meta.get("status", 0),
            html_size_kb=meta.get("htmlSizeKb", 0),
            response_time_ms=meta.get("responseTimeMs", 0),
        )


def _round_kb(size: int) -> int:
    return int(size / 1024 + 0.5)


def html_size_bytes(html: str) -> int:
    return len(html.encode("utf-8"))


def html_size_kb(html: str) -> int:
    """Reported size: characters / 1024, rounded half up."""
    return _round_kb(len(html))


class PageAuditEngine:
    """Four-category heuristic audit of a single page."""

    def __init__(self, html: str, headers: Mapping[str, str], elapsed_ms: int):
        self.html = html
        self.headers = {k.lower(): v for k, v in headers.items()}
        self.elapsed_ms = elapsed_ms
        self.issues: list[Issue] = []
        self.scores = AuditScores()

    def run_all_checks(self) -> AuditScores:
        """Run every check in fixed order and return the scores."""
        self.scores.seo = self._run_seo_checks()
        self.scores.security = self._run_security_checks()
        self.scores.performance = self._run_performance_checks()
        self.scores.accessibility = self._run_accessibility_checks()
        return self.scores

    def _fail(self, category: IssueCategory, message: str, penalty: int) -> int:
        self.issues.append(Issue(category, message))
        return penalty

    # =========================================================================
    # SEO
    # =========================================================================
    def _run_seo_checks(self) -> int:
        cat = IssueCategory.SEO
        score = 100

        if "<title>" not in self.html:
            score -= self._fail(cat, "Missing <title> tag", 20)

        if 'meta name="description"' not in self.html:
            score -= self._fail(cat, "Missing meta description", 20)

        return max(score, 0)

    # =========================================================================
    # Security
    # =========================================================================
    def _run_security_checks(self) -> int:
        cat = IssueCategory.SECURITY
        score = 100

        if not self.headers.get("content-security-policy"):
            score -= self._fail(cat, "Missing CSP header", 25)

        if not self.headers.get("x-frame-options"):
            score -= self._fail(cat, "Missing X-Frame-Options header", 25)

        return max(score, 0)

    # =========================================================================
    # Performance
    # =========================================================================
    def _run_performance_checks(self) -> int:
        cat = IssueCategory.PERFORMANCE
        score = 100

        if self.elapsed_ms > SLOW_RESPONSE_MS:
            score -= self._fail(cat, f"Slow server response ({self.elapsed_ms} ms)", 30)

        scripts = len(SCRIPT_RE.findall(self.html))
        if scripts > MAX_SCRIPTS:
            score -= self._fail(cat, f"Too many scripts ({scripts})", 20)

        stylesheets = len(STYLESHEET_RE.findall(self.html))
        if stylesheets > MAX_STYLESHEETS:
            score -= self._fail(cat, f"Too many stylesheets ({stylesheets})", 15)

        size_bytes = html_size_bytes(self.html)
        if size_bytes > MAX_HTML_BYTES:
            score -= self._fail(cat, f"Large HTML document ({_round_kb(size_bytes)} KB)", 20)

        return max(score, 0)

    # =========================================================================
    # Accessibility
    # =========================================================================
    def _run_accessibility_checks(self) -> int:
        cat = IssueCategory.ACCESSIBILITY
        score = 100

        if not HTML_LANG_RE.search(self.html):
            score -= self._fail(cat, "Missing lang attribute on <html>", 20)

        unlabeled_images = [
            tag for tag in IMG_TAG_RE.findall(self.html) if not IMG_ALT_RE.search(tag)
        ]
        if unlabeled_images:
            score -= self._fail(cat, f"Images missing alt text ({len(unlabeled_images)})", 20)

        unlabeled_inputs = [
            tag for tag in INPUT_TAG_RE.findall(self.html) if not INPUT_LABEL_RE.search(tag)
        ]
        if unlabeled_inputs:
            score -= self._fail(
                cat, f"Form inputs missing accessible labels ({len(unlabeled_inputs)})", 20
            )

        return max(score, 0)


def audit_page(
    html: str,
    headers: Mapping[str, str],
    elapsed_ms: int,
    status_code: int = 0,
) -> AuditResult:
    """Score a fetched page. Pure: same input, same result."""
    engine = PageAuditEngine(html, headers, elapsed_ms)
    scores = engine.run_all_checks()
    return AuditResult(
        scores=scores,
        issues=list(engine.issues),
        http_status=status_code,
        html_size_kb=html_size_kb(html),
        response_time_ms=elapsed_ms,
    )
