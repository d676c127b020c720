"""Tests for the Go Playground forwarder.

WHY: Sharing touches two remote services (Slack file download, the
Playground share endpoint); each failure mode has to end in a clear
PlaygroundError or a skipped share, never a half-posted reply.

HOW: httpx.MockTransport answers both the Slack download URL and the
share endpoint in-process; the Slack WebClient is a MagicMock.

RULES:
- No real network access
"""

from __future__ import annotations

from unittest.mock import MagicMock

import httpx
import pytest

from gopher_bot.core.errors import PlaygroundError
from gopher_bot.slack.playground import (
    MIN_LINES,
    USER_AGENT,
    download_file,
    share_file,
    share_snippet,
)

SHARE_URL = "https://play.golang.org/share"
DOWNLOAD_URL = "https://files.slack.com/files-pri/T1-F1/download/main.go"
SOURCE = b"package main\n\nimport \"fmt\"\n\nfunc main() {\n\tfmt.Println(\"hi\")\n}\n"


def _http(handler):
    return httpx.Client(transport=httpx.MockTransport(handler))


def _slack_client(lines=7, url=DOWNLOAD_URL):
    client = MagicMock()
    client.files_info.return_value = {
        "file": {"id": "F1", "lines": lines, "url_private_download": url},
    }
    return client


class TestDownloadFile:

    def test_sends_bot_token(self):
        seen = {}

        def handler(request):
            seen["auth"] = request.headers["Authorization"]
            seen["ua"] = request.headers["User-Agent"]
            return httpx.Response(200, content=SOURCE)

        assert download_file(_http(handler), DOWNLOAD_URL, "xoxb-test") == SOURCE
        assert seen == {"auth": "Bearer xoxb-test", "ua": USER_AGENT}

    def test_raises_on_error_status(self):
        http = _http(lambda request: httpx.Response(403))
        with pytest.raises(httpx.HTTPStatusError):
            download_file(http, DOWNLOAD_URL, "xoxb-test")


class TestShareSnippet:

    def test_returns_snippet_id(self):
        def handler(request):
            assert request.method == "POST"
            assert request.content == SOURCE
            return httpx.Response(200, text="Xy12AbC\n")

        assert share_snippet(_http(handler), SOURCE, SHARE_URL) == "Xy12AbC"

    def test_non_200_raises(self):
        http = _http(lambda request: httpx.Response(500, text="internal error"))
        with pytest.raises(PlaygroundError) as exc_info:
            share_snippet(http, SOURCE, SHARE_URL)
        assert exc_info.value.status_code == 500

    def test_transport_error_raises(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(PlaygroundError) as exc_info:
            share_snippet(_http(handler), SOURCE, SHARE_URL)
        assert exc_info.value.status_code == 0

    def test_empty_body_raises(self):
        http = _http(lambda request: httpx.Response(200, text=""))
        with pytest.raises(PlaygroundError):
            share_snippet(http, SOURCE, SHARE_URL)


class TestShareFile:

    def test_full_flow(self):
        def handler(request):
            if str(request.url) == DOWNLOAD_URL:
                return httpx.Response(200, content=SOURCE)
            return httpx.Response(200, text="snip42")

        client = _slack_client()
        assert share_file(client, _http(handler), "F1", "xoxb-test", SHARE_URL) == "snip42"
        client.files_info.assert_called_once_with(file="F1")

    def test_short_file_skipped(self):
        def handler(request):
            raise AssertionError("no HTTP call expected")

        client = _slack_client(lines=MIN_LINES - 1)
        assert share_file(client, _http(handler), "F1", "xoxb-test", SHARE_URL) is None

    def test_missing_url_raises(self):
        client = _slack_client(url="")
        with pytest.raises(PlaygroundError):
            share_file(client, _http(lambda r: httpx.Response(200)), "F1", "xoxb-test", SHARE_URL)
