"""
Unit tests for URL helpers
"""

import pytest

from urlstat.common.errors import InvalidURLError
from urlstat.common.url import host_without_port, parse_url


class TestParseURL:
    """Tests for parse_url"""

    def test_full_url_kept(self):
        url = parse_url("http://example.com/path?q=1")
        assert url.scheme == "http"
        assert url.host == "example.com"
        assert url.path == "/path"
        assert url.query == b"q=1"

    def test_missing_scheme_defaults_to_https(self):
        url = parse_url("example.com/path")
        assert url.scheme == "https"
        assert url.host == "example.com"
        assert url.path == "/path"

    def test_missing_scheme_on_port_80_uses_http(self):
        url = parse_url("example.com:80/path")
        assert url.scheme == "http"
        assert url.host == "example.com"

    def test_scheme_relative_url(self):
        url = parse_url("//example.com:8443/")
        assert url.scheme == "https"
        assert url.port == 8443

    def test_surrounding_whitespace_ignored(self):
        assert parse_url("  https://example.com/  ").host == "example.com"

    def test_unknown_scheme_is_parsed(self):
        # Rejected later, when the transport is built
        assert parse_url("ftp://example.com/file").scheme == "ftp"

    def test_empty_url(self):
        with pytest.raises(InvalidURLError) as exc_info:
            parse_url("")
        assert exc_info.value.code == "invalid_url"

    def test_url_without_host(self):
        with pytest.raises(InvalidURLError):
            parse_url("http://")


class TestHostWithoutPort:
    """Tests for host_without_port"""

    def test_port_stripped(self):
        assert host_without_port("example.com:8443") == "example.com"

    def test_no_port_verbatim(self):
        assert host_without_port("example.com") == "example.com"

    def test_ipv6_with_port(self):
        assert host_without_port("[::1]:443") == "::1"

    def test_ipv6_without_port_verbatim(self):
        assert host_without_port("[::1]") == "[::1]"
