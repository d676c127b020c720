"""Exception types shared across the bot."""

from __future__ import annotations


class GopherBotError(Exception):
    """Base class for errors raised by the bot itself."""


class BotInitError(GopherBotError):
    """Raised when startup cannot determine the bot's own identity.

    WHY: Without its user ID the bot cannot recognise mentions or skip its
    own messages, so this is the one condition that aborts startup.

    RULES:
    - Message names the bot user that was looked up
    """

    def __init__(self, bot_name: str) -> None:
        self.bot_name = bot_name
        super().__init__(
            'could not find bot in the list of users, check if the bot is called "{}"'.format(bot_name)
        )


class PlaygroundError(GopherBotError):
    """Raised when a file could not be shared on the Go Playground.

    HOW: Wraps the HTTP status code (0 for transport failures) and a
    human-readable message, like the API errors elsewhere in the codebase.
    """

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f"Playground error {status_code}: {message}")
