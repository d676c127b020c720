"""Channel registry: the community channels the bot knows and talks about.

WHY: The welcome message and "recommended channels" reply link to real
channels, which needs each channel's Slack ID. IDs differ per workspace,
so only names and descriptions are static; IDs are looked up once at
startup.

HOW: DEFAULT_CHANNELS is an ordered tuple of ChannelInfo entries with
empty IDs. ``resolve_channels`` takes the platform's public and private
channel lists and returns a new tuple with IDs filled in. Rendering
helpers build the listings used in replies.

RULES:
- Names are matched case-insensitively
- Public channels win; private groups only fill IDs still unresolved
- Resolution never mutates its input; unmatched entries are unchanged
- Unresolved channels are left out of rendered listings
"""

from __future__ import annotations

import dataclasses
from typing import Any, Dict, Iterable, Tuple

from gopher_bot.core.models import ChannelInfo
from gopher_bot.core.replies import WELCOME_FOOTER, WELCOME_HEADER

DEFAULT_CHANNELS: Tuple[ChannelInfo, ...] = (
    ChannelInfo("golang-newbies", "for newbie resources", welcome=True),
    ChannelInfo("reviews", "for code reviews", welcome=True),
    ChannelInfo("gotimefm", "for the awesome live podcast", welcome=True),
    ChannelInfo("remotemeetup", "for remote meetup", welcome=True),
    ChannelInfo("golang-jobs", "for jobs related to Go", welcome=True),
    ChannelInfo("showandtell", "tell the world about the thing you are working on"),
    ChannelInfo("performance", "anything and everything performance related"),
    ChannelInfo("devops", "for devops related discussions"),
    ChannelInfo("security", "for security related discussions"),
    ChannelInfo("aws", "if you are interested in AWS"),
    ChannelInfo("bbq", "Go controlling your bbq grill? Yes, we have that"),
    ChannelInfo("general", "general channel", restricted=True),
    ChannelInfo("golang_cls", "https://twitter.com/golang_cls", restricted=True),
    ChannelInfo("golang-cls", "https://twitter.com/golang_cls", restricted=True),
)


def _ids_by_name(platform_channels: Iterable[Dict[str, Any]]) -> Dict[str, str]:
    ids = {}  # type: Dict[str, str]
    for chn in platform_channels:
        name = (chn.get("name") or "").lower()
        if name and chn.get("id") and name not in ids:
            ids[name] = chn["id"]
    return ids


def resolve_channels(
    registry: Iterable[ChannelInfo],
    public: Iterable[Dict[str, Any]] = (),
    private: Iterable[Dict[str, Any]] = (),
) -> Tuple[ChannelInfo, ...]:
    """Fill in Slack IDs from the platform's channel lists.

    Args:
        registry: Entries to resolve, usually DEFAULT_CHANNELS.
        public: ``conversations.list`` entries for public channels.
        private: ``conversations.list`` entries for private groups.

    Returns:
        A new tuple in registry order. Entries already carrying an ID, or
        absent from both lists, are returned unchanged.
    """
    public_ids = _ids_by_name(public)
    private_ids = _ids_by_name(private)

    resolved = []
    for chn in registry:
        if not chn.slack_id:
            slack_id = public_ids.get(chn.name) or private_ids.get(chn.name)
            if slack_id:
                chn = dataclasses.replace(chn, slack_id=slack_id)
        resolved.append(chn)
    return tuple(resolved)


def _listing(channels: Iterable[ChannelInfo], bullet: str) -> str:
    return "".join(
        "{}{} -> {}\n".format(bullet, chn.link, chn.description)
        for chn in channels
        if chn.slack_id
    )


def welcome_message(user_name: str, channels: Iterable[ChannelInfo]) -> str:
    """Greeting sent to a new member, listing the welcome channels."""
    listing = _listing((c for c in channels if c.welcome), bullet="")
    return WELCOME_HEADER.format(name=user_name) + listing + WELCOME_FOOTER


def recommended_channels_text(channels: Iterable[ChannelInfo]) -> str:
    """Attachment text for "recommended channels" (restricted ones excluded)."""
    return _listing((c for c in channels if not c.restricted), bullet="- ")
