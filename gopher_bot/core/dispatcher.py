"""Message normalization and first-match-wins rule dispatch.

WHY: Every inbound Slack message has to be turned into at most one reply.
The rules that decide this are ordered by hand (specific phrases before
broad substrings), so the matching loop has to honour that order exactly
and in one place.

HOW: ``dispatch`` normalizes the text, drops bot and system messages,
works out whether the bot was addressed (mention, wake word, or a direct
message channel), then walks the rule list once. Ambient rules see the
normalized text; addressed rules see the text with the wake word removed
and are skipped when the bot was not addressed. ``find_shadowed_rules``
checks a rule list for entries that an earlier rule would always catch
first.

RULES:
- Normalized text is lowercased and trimmed of spaces, newlines and CRs
- Bot messages, system subtypes and sender-less events never dispatch;
  only plain, file_share, thread_broadcast and me_message messages do
- First matching rule wins; no match returns None
- A builder returning None still ends the scan
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from gopher_bot.core.models import (
    Action,
    BotConfig,
    IncomingMessage,
    MatchKind,
    Rule,
)
from gopher_bot.core.rules import DEFAULT_RULES

logger = logging.getLogger(__name__)

_SURROUNDING_WHITESPACE = " \n\r"
_WAKE_TRIM = " :\n"

# Subtypes carrying content a person wrote; every other subtype is a
# system event (topic change, rename, join, edit, ...).
_USER_SUBTYPES = frozenset({"", "file_share", "thread_broadcast", "me_message"})


def normalize(text: str) -> str:
    """Lowercase and trim the surrounding whitespace of a message."""
    return text.lower().strip(_SURROUNDING_WHITESPACE)


def _mention(config: BotConfig) -> str:
    return "<@{}>".format(config.bot_id).lower()


def is_addressed(text: str, message: IncomingMessage, config: BotConfig) -> bool:
    """Tell whether a normalized message is meant for the bot.

    RULES:
    - "<@BOTID>" or "<@BOTID>:" at the start addresses the bot
    - "gopher " or "gopher: " at the start addresses the bot
    - anything sent in a direct message channel addresses the bot
    """
    wake = config.bot_name.lower()
    return (
        text.startswith(_mention(config))
        or text.startswith(wake + " ")
        or text.startswith(wake + ": ")
        or message.is_direct
    )


def strip_wake_word(text: str, config: BotConfig) -> str:
    """Remove the bot mention or leading wake word from a normalized message.

    >>> strip_wake_word("gopher: version", BotConfig(bot_id="U1"))
    'version'
    """
    text = text.replace(_mention(config), "", 1)
    wake = config.bot_name.lower()
    if text == wake or text.startswith(wake + " ") or text.startswith(wake + ":"):
        text = text[len(wake):]
    return text.strip(_WAKE_TRIM)


def is_ignored(message: IncomingMessage, config: BotConfig) -> bool:
    """Bot, system and self-authored messages never dispatch."""
    return (
        bool(message.bot_id)
        or not message.user
        or message.subtype not in _USER_SUBTYPES
        or message.user == config.bot_id
    )


def matches(rule: Rule, text: str, message: IncomingMessage) -> bool:
    """Evaluate one rule's matcher against already-prepared text."""
    if any(word in text for word in rule.exclude):
        return False

    if rule.kind is MatchKind.CONTAINS:
        return any(p in text for p in rule.patterns)
    if rule.kind is MatchKind.PREFIX:
        return any(text.startswith(p) for p in rule.patterns)
    if rule.kind is MatchKind.EQUALS:
        return text in rule.patterns
    if rule.kind is MatchKind.FILE_TYPE:
        return bool(message.file_id) and message.file_type in rule.patterns
    return False


def select_rule(
    message: IncomingMessage,
    config: BotConfig,
    rules: Sequence[Rule] = DEFAULT_RULES,
) -> Optional[Rule]:
    """Return the first rule matching the message, or None."""
    if is_ignored(message, config):
        return None

    text = normalize(message.text)
    addressed = is_addressed(text, message, config)
    command = strip_wake_word(text, config) if addressed else ""

    for rule in rules:
        if rule.addressed:
            if addressed and matches(rule, command, message):
                return rule
        elif matches(rule, text, message):
            return rule
    return None


def dispatch(
    message: IncomingMessage,
    config: BotConfig,
    rules: Sequence[Rule] = DEFAULT_RULES,
) -> Optional[Action]:
    """Produce the single action a message calls for, or None.

    WHY: This is the whole decision of the bot. Keeping it a pure function
    of (message, config, rules) makes every reply testable without Slack.

    HOW: Picks the first matching rule via ``select_rule`` and resolves
    its action, calling the builder when the rule carries one.
    """
    rule = select_rule(message, config, rules)
    if rule is None:
        return None

    logger.debug("Message %s matched rule %s", message.ts, rule.name)
    if callable(rule.action):
        return rule.action(message, config)
    return rule.action


def find_shadowed_rules(rules: Sequence[Rule]) -> List[Tuple[Rule, Rule]]:
    """Find equals/prefix rules that an earlier rule would always catch.

    WHY: The command table only works because it is ordered by hand; a
    broad "contains" rule moved above an exact phrase silently swallows it.

    HOW: For every later equals or prefix pattern, treat the pattern
    itself as a message and check whether an earlier rule matches it.
    Returns (earlier, later) pairs; file type rules are never compared.

    RULES:
    - Only equals and prefix rules can be reported as shadowed
    - An earlier rule whose exclude list hits the pattern does not shadow it
    - An earlier addressed rule never shadows a later ambient one, since
      unaddressed messages skip it
    """
    shadowed = []  # type: List[Tuple[Rule, Rule]]
    sample = IncomingMessage(text="")

    for idx, later in enumerate(rules):
        if later.kind not in (MatchKind.EQUALS, MatchKind.PREFIX):
            continue
        for earlier in rules[:idx]:
            if earlier.kind is MatchKind.FILE_TYPE:
                continue
            if earlier.addressed and not later.addressed:
                continue
            if any(matches(earlier, pattern, sample) for pattern in later.patterns):
                shadowed.append((earlier, later))
                break
    return shadowed
