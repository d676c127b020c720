"""Dataclasses for messages, actions, rules, channels and bot configuration.

WHY: The dispatcher, the command table and the Slack executor all need a
shared vocabulary. Keeping it in plain frozen dataclasses means the core
can be exercised without Slack, and nothing can mutate a rule or the
resolved configuration after startup.

HOW: Five groups of types:
  IncomingMessage — the fields of a Slack message event the bot cares about
  Action          — PostMessage | PostAttachment | React | Forward
  Rule            — one (matcher, action) entry of the ordered command table
  ChannelInfo     — one entry of the channel registry
  BotConfig       — everything resolved at startup, passed by reference

RULES:
- Every type here is immutable (frozen dataclasses, tuples)
- A rule's action is either a ready Action or a builder callable
- Audience.SENDER means a direct message to whoever wrote the message
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Tuple, Union


class Audience(str, enum.Enum):
    """Where a reply goes."""

    CHANNEL = "channel"
    SENDER = "sender"


class MatchKind(str, enum.Enum):
    """How a rule's patterns are compared with the message.

    RULES:
    - contains: pattern appears anywhere in the text
    - prefix: text starts with the pattern
    - equals: text is exactly the pattern
    - file_type: the attached file's type is one of the patterns
    """

    CONTAINS = "contains"
    PREFIX = "prefix"
    EQUALS = "equals"
    FILE_TYPE = "file_type"


# ---------------------------------------------------------------------------
# Inbound message
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class IncomingMessage:
    """A Slack message event reduced to the fields the bot uses.

    RULES:
    - text is the raw text, case and whitespace preserved
    - file_id / file_type describe the first attached file, if any
    - bot_id / subtype are kept so bot and system messages can be dropped
    """

    text: str
    user: str = ""
    channel: str = ""
    ts: str = ""
    bot_id: str = ""
    subtype: str = ""
    file_id: str = ""
    file_type: str = ""

    @classmethod
    def from_event(cls, event: Dict[str, Any]) -> IncomingMessage:
        """Build a message from a Slack ``message`` event payload.

        Newer payloads carry uploads in a ``files`` list, older ones in a
        single ``file`` object; both are accepted.
        """
        files = event.get("files") or []
        file_data = files[0] if files else (event.get("file") or {})
        return cls(
            text=event.get("text") or "",
            user=event.get("user") or "",
            channel=event.get("channel") or "",
            ts=event.get("ts") or "",
            bot_id=event.get("bot_id") or "",
            subtype=event.get("subtype") or "",
            file_id=file_data.get("id", ""),
            file_type=file_data.get("filetype", ""),
        )

    @property
    def is_direct(self) -> bool:
        # Direct message channel IDs always start with "D"
        return self.channel.startswith("D")


# ---------------------------------------------------------------------------
# Actions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PostMessage:
    """Post a plain text message."""

    text: str
    audience: Audience = Audience.CHANNEL
    unfurl_links: bool = False


@dataclass(frozen=True)
class PostAttachment:
    """Post a short message with a longer text attachment."""

    text: str
    attachment: str
    audience: Audience = Audience.CHANNEL


@dataclass(frozen=True)
class React:
    """Add one or more emoji reactions to the message, in order."""

    names: Tuple[str, ...]


@dataclass(frozen=True)
class Forward:
    """Share an uploaded file with an external paste service.

    link_template receives the snippet ID returned by the service.
    """

    file_id: str
    link_template: str


Action = Union[PostMessage, PostAttachment, React, Forward]


# ---------------------------------------------------------------------------
# Channels and configuration
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ChannelInfo:
    """One entry of the channel registry.

    RULES:
    - name is lowercase, without the leading "#"
    - slack_id is empty until resolved at startup, then never changes
    - welcome channels are listed in the new member greeting
    - restricted channels are left out of "recommended channels"
    """

    name: str
    description: str
    slack_id: str = ""
    welcome: bool = False
    restricted: bool = False

    @property
    def link(self) -> str:
        """Slack channel link markup, ``<#C123|name>``."""
        return "<#{}|{}>".format(self.slack_id, self.name)


@dataclass(frozen=True)
class BotConfig:
    """Everything resolved once at startup.

    WHY: The bot identity and channel IDs are discovered from Slack before
    any message is handled. Freezing them in one object passed to the
    dispatcher and executor replaces package-level mutable state.

    RULES:
    - bot_id is always set (initialization fails otherwise)
    - admin_user_id is empty when the admin user was not found
    - channels keep registry order
    """

    bot_id: str
    bot_name: str = "gopher"
    version: str = "dev"
    admin_user_id: str = ""
    channels: Tuple[ChannelInfo, ...] = ()
    dev_mode: bool = False

    def channel(self, name: str) -> Optional[ChannelInfo]:
        for chn in self.channels:
            if chn.name == name:
                return chn
        return None


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------

ActionBuilder = Callable[[IncomingMessage, BotConfig], Optional[Action]]


@dataclass(frozen=True)
class Rule:
    """One entry of the ordered command table.

    WHY: The command table is a list of these evaluated top to bottom by
    a single loop; the first rule that matches decides the reply.

    RULES:
    - patterns are lowercase; any one matching is enough
    - addressed rules only apply once the bot has been addressed, and are
      matched against the text with the wake word removed
    - exclude vetoes the match when any of its substrings is in the text
    - action is a ready Action, or a builder computing it from the message;
      a builder returning None still ends dispatch
    """

    name: str
    kind: MatchKind
    patterns: Tuple[str, ...]
    action: Union[Action, ActionBuilder]
    addressed: bool = True
    exclude: Tuple[str, ...] = field(default=())
