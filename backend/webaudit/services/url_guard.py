"""
URL validation and SSRF guard.

Checks run on the literal URL string before any network call is made.
The private-range test is a coarse prefix match: every host starting
with "172." is blocked, not just 172.16.0.0/12. IPv6 literals and DNS
rebinding are not covered.
"""

import logging
from urllib.parse import urlparse

logger = logging.getLogger(__name__)

ALLOWED_SCHEMES = ("http", "https")

BLOCKED_HOSTS = {"localhost", "127.0.0.1"}
BLOCKED_SUFFIXES = (".local",)
BLOCKED_PREFIXES = ("10.", "192.168.", "172.")


def is_valid_audit_url(url) -> bool:
    """Return True when `url` is a non-empty string with an http(s) scheme.

    Only the scheme prefix is looked at. URLs that do not parse past it
    are left for is_blocked_url to reject.
    """
    if not isinstance(url, str) or ":" not in url:
        return False
    scheme = url.split(":", 1)[0].lower()
    return scheme in ALLOWED_SCHEMES


def is_blocked_url(url: str) -> bool:
    """
    Return True if the URL must not be fetched.

    Fails closed: anything that does not parse, or parses without a
    hostname, is blocked.
    """
    try:
        host = urlparse(url).hostname
    except ValueError:
        return True

    if not host:
        return True

    if host in BLOCKED_HOSTS or host.endswith(BLOCKED_SUFFIXES):
        return True

    if host.startswith(BLOCKED_PREFIXES):
        return True

    return False
