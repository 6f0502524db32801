"""
Unit tests for body summary and redirect classification
"""

import httpx
import pytest

from urlstat.common.body import summarize_body
from urlstat.common.redirects import is_redirect


class TestIsRedirect:
    """Tests for is_redirect"""

    @pytest.mark.parametrize("status_code", [301, 302, 303, 307, 308])
    def test_redirect_codes(self, status_code):
        assert is_redirect(status_code) is True

    @pytest.mark.parametrize("status_code", [200, 204, 300, 304, 305, 404, 500])
    def test_other_codes(self, status_code):
        assert is_redirect(status_code) is False


class TestSummarizeBody:
    """Tests for summarize_body"""

    def test_body_with_content_type(self):
        response = httpx.Response(200, headers={"Content-Type": "text/html"}, content=b"<p>hi</p>")
        assert summarize_body("GET", response) == "Body: 9 bytes (text/html)"

    def test_body_without_content_type(self):
        response = httpx.Response(200, content=b"abc")
        assert summarize_body("GET", response) == "Body: 3 bytes"

    def test_empty_body(self):
        response = httpx.Response(204)
        assert summarize_body("GET", response) == ""

    def test_head_request(self):
        response = httpx.Response(200, content=b"abc")
        assert summarize_body("HEAD", response) == ""

    def test_redirect(self):
        response = httpx.Response(302, headers={"Location": "/next"}, content=b"moved")
        assert summarize_body("GET", response) == ""

    def test_only_headers_suppresses_summary(self):
        response = httpx.Response(200, content=b"abc")
        assert summarize_body("GET", response, only_headers=True) == ""
