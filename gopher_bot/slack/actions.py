"""Execute dispatched actions against the Slack Web API.

WHY: The dispatcher returns a description of what to do; something has to
turn it into chat.postMessage / reactions.add calls and keep a failed call
from taking the bot down.

HOW: ``ActionExecutor.execute`` switches on the action type. Each branch
makes its Web API call(s) inside a try/except that logs the failure and
reports False.

RULES:
- Audience.CHANNEL posts to the message's channel, SENDER to the user's DM
- Reactions target the original message (channel + ts)
- Errors are logged with the traceback, never retried, never re-raised
- Forward posts the Playground link in the channel, then a DM notice
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from gopher_bot.config import PLAYGROUND_SHARE_URL
from gopher_bot.core import replies
from gopher_bot.core.models import (
    Action,
    Audience,
    Forward,
    IncomingMessage,
    PostAttachment,
    PostMessage,
    React,
)
from gopher_bot.slack.playground import share_file

logger = logging.getLogger(__name__)


class ActionExecutor:
    """Performs actions for one workspace.

    Args:
        client: Slack WebClient (``app.client``).
        http: httpx client for the Playground forwarder.
        bot_token: Token used to download private files.
        share_url: Playground share endpoint.
    """

    def __init__(
        self,
        client: Any,
        http: httpx.Client,
        bot_token: str,
        share_url: str = PLAYGROUND_SHARE_URL,
    ) -> None:
        self.client = client
        self.http = http
        self.bot_token = bot_token
        self.share_url = share_url

    def execute(self, action: Action, message: IncomingMessage) -> bool:
        """Perform an action in reply to a message; True on success."""
        if isinstance(action, PostMessage):
            return self._post(
                self._target(action.audience, message),
                action.text,
                unfurl_links=action.unfurl_links,
            )
        if isinstance(action, PostAttachment):
            return self._post(
                self._target(action.audience, message),
                action.text,
                attachments=[{"text": action.attachment}],
            )
        if isinstance(action, React):
            ok = True
            for name in action.names:
                ok = self._react(message, name) and ok
            return ok
        if isinstance(action, Forward):
            return self._forward(action, message)

        logger.error("Unknown action type %s", type(action).__name__)
        return False

    def send_direct(self, user_id: str, text: str, **kwargs: Any) -> bool:
        """Post a direct message to a user outside of any dispatch."""
        return self._post(user_id, text, **kwargs)

    @staticmethod
    def _target(audience: Audience, message: IncomingMessage) -> str:
        if audience is Audience.SENDER:
            return message.user
        return message.channel

    def _post(self, channel: str, text: str, **kwargs: Any) -> bool:
        try:
            self.client.chat_postMessage(channel=channel, text=text, **kwargs)
        except Exception:
            logger.exception("Failed to post message to %s", channel)
            return False
        return True

    def _react(self, message: IncomingMessage, name: str) -> bool:
        try:
            self.client.reactions_add(
                channel=message.channel,
                timestamp=message.ts,
                name=name,
            )
        except Exception:
            logger.exception("Failed to add reaction %s to %s", name, message.ts)
            return False
        return True

    def _forward(self, action: Forward, message: IncomingMessage) -> bool:
        try:
            snippet_id = share_file(
                self.client, self.http, action.file_id, self.bot_token, self.share_url,
            )
        except Exception:
            logger.exception("Failed to share file %s on the playground", action.file_id)
            return False

        if snippet_id is None:
            return True

        link = action.link_template.format(snippet_id)
        if not self._post(message.channel, replies.PLAYGROUND_POSTED.format(link)):
            return False
        return self._post(message.user, replies.PLAYGROUND_NOTICE)
