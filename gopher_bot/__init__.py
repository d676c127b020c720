"""Gopher — community Slack bot for the Gophers workspace.

WHY: A busy community Slack gets the same questions over and over (where
do I start, which channels exist, how do I share code). The bot answers
them with canned replies, links and emoji reactions so people don't have
to.

HOW: Two layers — a platform-free core (ordered rule table, dispatcher,
channel registry) and a Slack layer (slack-bolt Socket Mode listeners,
startup initialization, action executor, Go Playground forwarding).

RULES:
- The core never talks to Slack; it only turns a message into an action
- Startup resolution happens once and yields an immutable BotConfig
- One inbound message produces at most one action
"""

__version__ = "0.1.0"
