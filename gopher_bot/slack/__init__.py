"""Slack integration for the Gopher bot.

WHY: The core only decides what to say. This package connects it to a
Slack workspace: it resolves the bot identity and channel IDs at startup,
listens for messages and new members, and performs the chosen action.

HOW: slack-bolt's Socket Mode adapter (no public URL needed) delivers
events; the Web API client posts messages and reactions; httpx forwards
uploaded files to the Go Playground.

RULES:
- Socket Mode requires SLACK_BOT_TOKEN and SLACK_APP_TOKEN
- Initialization finishes before any listener is registered
- Action failures are logged and dropped, never retried
"""
