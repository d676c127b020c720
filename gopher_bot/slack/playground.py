"""Forward an uploaded Slack file to the Go Playground.

WHY: Code pasted as a Slack snippet is hard to run or discuss. When
someone uploads a Go file, the bot shares it on play.golang.org and posts
the link so others can run and edit it.

HOW: Looks the file up with ``files.info``, downloads it from Slack's
private URL with the bot token, POSTs the bytes to the Playground share
endpoint and returns the snippet ID from the response body.

RULES:
- Files shorter than MIN_LINES are not shared (returns None)
- Download uses bearer auth plus the bot's User-Agent
- A non-200 share response raises PlaygroundError
- Uses a caller-supplied httpx.Client so timeouts are configured once
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from gopher_bot.config import PLAYGROUND_SHARE_URL
from gopher_bot.core.errors import PlaygroundError

logger = logging.getLogger(__name__)

USER_AGENT = "Gophers Slack bot"
MIN_LINES = 6


def download_file(http: httpx.Client, url: str, bot_token: str) -> bytes:
    """Fetch a private Slack file with the bot token."""
    resp = http.get(
        url,
        headers={
            "User-Agent": USER_AGENT,
            "Authorization": "Bearer {}".format(bot_token),
        },
    )
    resp.raise_for_status()
    return resp.content


def share_snippet(http: httpx.Client, content: bytes, share_url: str = PLAYGROUND_SHARE_URL) -> str:
    """Upload source code to the Playground and return the snippet ID."""
    try:
        resp = http.post(
            share_url,
            content=content,
            headers={
                "Content-Type": "application/x-www-form-urlencoded; charset=UTF-8",
                "User-Agent": USER_AGENT,
            },
        )
    except httpx.HTTPError as exc:
        raise PlaygroundError(0, str(exc)) from exc

    if resp.status_code != 200:
        raise PlaygroundError(resp.status_code, resp.text[:200])

    snippet_id = resp.text.strip()
    if not snippet_id:
        raise PlaygroundError(resp.status_code, "empty snippet id")
    return snippet_id


def share_file(
    client: Any,
    http: httpx.Client,
    file_id: str,
    bot_token: str,
    share_url: str = PLAYGROUND_SHARE_URL,
) -> Optional[str]:
    """Share a Slack file on the Playground.

    Args:
        client: Slack WebClient (``files_info`` is called on it).
        http: httpx client used for the download and the share request.
        file_id: Slack file ID from the message event.
        bot_token: Token authorizing the private file download.
        share_url: Playground share endpoint.

    Returns:
        The snippet ID, or None when the file is too short to bother.

    Raises:
        PlaygroundError: The Playground rejected or failed the upload.
        httpx.HTTPStatusError: The Slack download failed.
    """
    info = client.files_info(file=file_id)
    file_data = info.get("file", {})

    lines = file_data.get("lines", 0) or 0
    if lines < MIN_LINES:
        logger.debug("File %s has %d lines, not sharing", file_id, lines)
        return None

    url = file_data.get("url_private_download") or file_data.get("url_private", "")
    if not url:
        raise PlaygroundError(0, "no download URL for file {}".format(file_id))

    content = download_file(http, url, bot_token)
    return share_snippet(http, content, share_url)
