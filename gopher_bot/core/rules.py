"""The ordered command table and the builders for computed replies.

WHY: Every behaviour of the bot is one line in DEFAULT_RULES. Order is
the contract: the dispatcher stops at the first match, so exact phrases
and prefixes sit above the broad substring rules that could swallow them
(``find_shadowed_rules`` in dispatcher.py checks this).

HOW: Ambient rules come first and react to anything said in a channel
the bot is in (table flips, beer, godoc shortcuts, uploaded Go files).
Addressed rules follow and only apply to messages for the bot. Replies
that depend on the message or on startup configuration are builders:
functions of (message, config) returning an Action or None.

RULES:
- Patterns are lowercase; matching happens on normalized text
- Builders read the raw message text when case matters (godoc paths,
  library search terms)
- A builder returning None swallows the message silently
"""

from __future__ import annotations

import logging
import re
import secrets
from typing import Optional, Tuple
from urllib.parse import quote_plus

from gopher_bot.core import replies
from gopher_bot.core.channels import recommended_channels_text
from gopher_bot.core.models import (
    Action,
    ActionBuilder,
    Audience,
    BotConfig,
    Forward,
    IncomingMessage,
    MatchKind,
    PostAttachment,
    PostMessage,
    React,
    Rule,
)

logger = logging.getLogger(__name__)

_EMOJI_RE = re.compile(r":[A-Za-z0-9]+:")
_SLACK_LINK_RE = re.compile(r"<(?:@u|#c)[0-9a-z]+>", re.IGNORECASE)
_LIBRARY_MARKERS = ("library for", "library in go for", "go library for")
_SEARCH_TERM_MAX = 100


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def godoc(prefix: str, trigger: str) -> ActionBuilder:
    """Link the package path following ``trigger`` on godoc.org.

    "d/net/http" -> <https://godoc.org/net/http>; the path ends at the
    first space. Case is taken from the raw text.
    """

    def build(message: IncomingMessage, config: BotConfig) -> Optional[Action]:
        path = message.text.strip(" \n\r")[len(trigger):]
        path = path.split(" ", 1)[0]
        return PostMessage(replies.GODOC_LINK.format(prefix + path))

    return build


def xkcd_comic(message: IncomingMessage, config: BotConfig) -> Optional[Action]:
    """Link a comic by number, "xkcd:42"; anything else is ignored."""
    raw = message.text.strip(" \n\r")
    number = raw[raw.lower().rfind("xkcd:") + len("xkcd:"):].strip()
    # Plain ASCII digits only; int() would also take "4_2" or "٤٢"
    if not (number.isascii() and number.isdigit()):
        logger.info("Ignoring xkcd request with a bad number: %r", number)
        return None
    num = int(number)
    if num < 1:
        return None
    return PostMessage(replies.XKCD_COMIC.format(num), unfurl_links=True)


def extract_search_term(text: str) -> str:
    """Pull the library search term out of "library for <term>".

    RULES:
    - Text after the first "library for" style marker is the term
    - Slack user / channel links and :emoji: codes are removed
    - One "in go" is removed, then "?;., " trimmed from both ends
    """
    lowered = text.lower()
    term = ""
    for marker in _LIBRARY_MARKERS:
        idx = lowered.find(marker)
        if idx != -1:
            term = text[idx + len(marker):]
            break

    term = _SLACK_LINK_RE.sub("", term)
    term = _EMOJI_RE.sub("", term)

    idx = term.lower().find("in go")
    if idx != -1:
        term = term[:idx] + term[idx + len("in go"):]

    return term.strip("?;., ")


def library_search(message: IncomingMessage, config: BotConfig) -> Optional[Action]:
    term = extract_search_term(message.text)
    if not term or len(term) > _SEARCH_TERM_MAX:
        return None
    return PostMessage(replies.LIBRARY_SEARCH.format(quote_plus(term)))


def flip_coin(message: IncomingMessage, config: BotConfig) -> Optional[Action]:
    return PostMessage(secrets.choice(("heads", "tail")))


def version(message: IncomingMessage, config: BotConfig) -> Optional[Action]:
    return PostMessage(replies.VERSION.format(config.version), audience=Audience.SENDER)


def recommended_channels(message: IncomingMessage, config: BotConfig) -> Optional[Action]:
    return PostAttachment(
        replies.RECOMMENDED_CHANNELS_INTRO,
        recommended_channels_text(config.channels),
        audience=Audience.SENDER,
    )


def share_on_playground(message: IncomingMessage, config: BotConfig) -> Optional[Action]:
    return Forward(file_id=message.file_id, link_template=replies.PLAYGROUND_LINK)


# ---------------------------------------------------------------------------
# Command table
# ---------------------------------------------------------------------------


def _ambient(name: str, kind: MatchKind, patterns: Tuple[str, ...], action, **kwargs) -> Rule:
    return Rule(name=name, kind=kind, patterns=patterns, action=action, addressed=False, **kwargs)


def _cmd(name: str, kind: MatchKind, patterns: Tuple[str, ...], action) -> Rule:
    return Rule(name=name, kind=kind, patterns=patterns, action=action)


def _say(text: str, **kwargs) -> PostMessage:
    return PostMessage(text, **kwargs)


_CONTAINS = MatchKind.CONTAINS
_PREFIX = MatchKind.PREFIX
_EQUALS = MatchKind.EQUALS

DEFAULT_RULES: Tuple[Rule, ...] = (
    # Ambient: anything said where the bot can hear it.
    # All the variations of table flip seem to include one of these glyphs.
    _ambient("table_unflip", _CONTAINS, ("︵", "彡"), _say(replies.TABLE_UNFLIP)),
    _ambient("adorable_gophers", _CONTAINS, ("my adorable little gophers",), React(("gopher",))),
    _ambient("bbq", _CONTAINS, ("bbq",), React(("bbqgopher",))),
    _ambient("ermergerd", _CONTAINS, ("ermergerd", "ermahgerd"), React(("dragon",))),
    _ambient("beer_me", _CONTAINS, ("beer me",), React(("beer", "beers"))),
    _ambient("godoc_github", _PREFIX, ("ghd/",), godoc("github.com/", "ghd/")),
    _ambient("godoc", _PREFIX, ("d/",), godoc("", "d/")),
    _ambient(
        "playground", MatchKind.FILE_TYPE, ("go", "text"), share_on_playground,
        exclude=("nolink",),
    ),
    # Addressed: "gopher <command>", "@gopher <command>" or a direct message.
    _cmd("newbie_resources", _EQUALS, ("newbie resources",),
         PostAttachment(replies.NEWBIE_RESOURCES_INTRO, replies.NEWBIE_RESOURCES)),
    _cmd("newbie_resources_pvt", _EQUALS, ("newbie resources pvt",),
         PostAttachment(replies.NEWBIE_RESOURCES_INTRO, replies.NEWBIE_RESOURCES, audience=Audience.SENDER)),
    _cmd("recommended_channels", _EQUALS, ("recommended channels",), recommended_channels),
    _cmd("oss_help", _EQUALS, ("oss help", "oss help wanted"), _say(replies.OSS_HELP)),
    _cmd("work_with_forks", _EQUALS, ("work with forks",), _say(replies.WORK_WITH_FORKS)),
    _cmd("block_forever", _EQUALS, ("block forever",), _say(replies.BLOCK_FOREVER)),
    _cmd("http_timeouts", _EQUALS, ("http timeouts",), _say(replies.HTTP_TIMEOUTS)),
    _cmd("slices", _EQUALS, ("slices",), _say(replies.SLICES)),
    _cmd("database_tutorial", _EQUALS, ("database tutorial",), _say(replies.DATABASE_TUTORIAL)),
    _cmd("xkcd_standards", _EQUALS, ("xkcd:standards",), _say(replies.XKCD_STANDARDS, unfurl_links=True)),
    _cmd("xkcd_compiling", _EQUALS, ("xkcd:compiling",), _say(replies.XKCD_COMPILING, unfurl_links=True)),
    _cmd("xkcd_optimization", _EQUALS, ("xkcd:optimization",), _say(replies.XKCD_OPTIMIZATION, unfurl_links=True)),
    _cmd("xkcd", _PREFIX, ("xkcd:",), xkcd_comic),
    _cmd("package_layout", _EQUALS, ("package layout",), _say(replies.PACKAGE_LAYOUT)),
    _cmd("idiomatic_go", _EQUALS, ("idiomatic go",), _say(replies.IDIOMATIC_GO)),
    _cmd("avoid_gotchas", _EQUALS, ("avoid gotchas",), _say(replies.AVOID_GOTCHAS)),
    _cmd("source_code", _EQUALS, ("source code",), _say(replies.SOURCE_CODE)),
    _cmd("library_search", _PREFIX, ("library for",), library_search),
    _cmd("thanks", _CONTAINS, ("thank",), React(("gopher",))),
    _cmd("greeting", _EQUALS, ("cheers", "hello"), React(("gopher",))),
    _cmd("wave", _EQUALS, ("wave",), React(("wave", "gopher"))),
    _cmd("flip_coin", _EQUALS, ("flip coin", "flip a coin"), flip_coin),
    _cmd("bot_location", _EQUALS, ("where do you live?", "stack"), _say(replies.BOT_LOCATION)),
    _cmd("version", _EQUALS, ("version",), version),
    _cmd("help", _EQUALS, ("help",),
         PostAttachment(replies.HELP_INTRO, replies.HELP, audience=Audience.SENDER)),
)
