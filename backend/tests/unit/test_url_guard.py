"""
Unit tests for URL validation and the SSRF guard.
"""
import pytest

from webaudit.services.url_guard import is_blocked_url, is_valid_audit_url


class TestIsValidAuditUrl:
    """Scheme and shape checks on the submitted URL."""

    @pytest.mark.parametrize("url", [
        "http://example.com",
        "https://example.com/path?q=1",
        "HTTPS://EXAMPLE.COM",
    ])
    def test_accepts_http_and_https(self, url):
        assert is_valid_audit_url(url) is True

    @pytest.mark.parametrize("url", [
        None,
        "",
        42,
        ["http://example.com"],
        "example.com",
        "ftp://example.com",
        "javascript:alert(1)",
        "file:///etc/passwd",
        "httpx://example.com",
    ])
    def test_rejects_everything_else(self, url):
        assert is_valid_audit_url(url) is False

    @pytest.mark.parametrize("url", ["http://[bad", "https://[::1", "http:"])
    def test_malformed_http_urls_pass_to_the_guard(self, url):
        assert is_valid_audit_url(url) is True
        assert is_blocked_url(url) is True


class TestIsBlockedUrl:
    """Loopback/private host blocking."""

    @pytest.mark.parametrize("url", [
        "http://localhost",
        "http://localhost:8080/admin",
        "http://LOCALHOST/",
        "http://127.0.0.1",
        "https://127.0.0.1:443/",
        "http://printer.local",
        "http://nas.office.local/share",
        "http://10.0.0.1",
        "http://10.255.255.255:9000",
        "http://192.168.1.1",
        "http://172.16.0.1",
        "http://172.31.255.255",
        "http://172.200.1.1",
    ])
    def test_blocks_internal_hosts(self, url):
        assert is_blocked_url(url) is True

    @pytest.mark.parametrize("url", [
        "https://example.com",
        "http://8.8.8.8",
        "http://localhost.example.com",
        "http://local",
        "http://110.0.0.1",
        "http://192.169.0.1",
    ])
    def test_allows_public_hosts(self, url):
        assert is_blocked_url(url) is False

    @pytest.mark.parametrize("url", [
        "not a url",
        "http://",
        "http://[::1",
    ])
    def test_unparseable_urls_fail_closed(self, url):
        assert is_blocked_url(url) is True

    def test_prefix_check_is_coarse(self):
        """Any 172.* host is blocked, not just 172.16.0.0/12."""
        assert is_blocked_url("http://172.1.2.3") is True
