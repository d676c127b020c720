"""Shared test fixtures for the gopher_bot test suite.

WHY: Dispatcher, rule and Slack handler tests all need a resolved
BotConfig and a convenient way to build message events.

HOW: ``bot_config`` is a BotConfig with a fixed bot ID and a partially
resolved channel registry. ``make_message`` builds IncomingMessage
objects with sensible defaults for a public channel.

RULES:
- The bot's user ID is always BOT_ID
- Public channel messages come from PUBLIC_CHANNEL, DMs from DM_CHANNEL
"""

from typing import Any, Dict, List

import pytest

from gopher_bot.core.channels import DEFAULT_CHANNELS, resolve_channels
from gopher_bot.core.models import BotConfig, IncomingMessage

BOT_ID = "U0BOT"
USER_ID = "U0ALICE"
ADMIN_ID = "U0ADMIN"
PUBLIC_CHANNEL = "C0GENERAL"
DM_CHANNEL = "D0ALICE"

PUBLIC_CHANNELS: List[Dict[str, Any]] = [
    {"id": "C0NEWBIES", "name": "golang-newbies"},
    {"id": "C0REVIEWS", "name": "reviews"},
    {"id": "C0PERF", "name": "performance"},
    {"id": "C0GENERAL", "name": "general"},
]


def make_message(text: str, channel: str = PUBLIC_CHANNEL, **kwargs: Any) -> IncomingMessage:
    fields = {"user": USER_ID, "ts": "1500000000.000100"}
    fields.update(kwargs)
    return IncomingMessage(text=text, channel=channel, **fields)


@pytest.fixture
def bot_config():
    """BotConfig as produced by a successful startup."""
    return BotConfig(
        bot_id=BOT_ID,
        bot_name="gopher",
        version="1.2.3",
        admin_user_id=ADMIN_ID,
        channels=resolve_channels(DEFAULT_CHANNELS, PUBLIC_CHANNELS),
    )
