"""Configuration constants and .env loading.

WHY: Tokens, the bot's name, its version string and the external
endpoints differ between the production workspace and a test workspace.
Keeping them here, overridable from the environment, means nothing else
in the package reads os.environ.

HOW: python-dotenv loads the .env file on import. Constants are plain
module-level values. The load_*_token() functions give a clear error when
a token is missing.

RULES:
- Tokens are loaded from the environment (via .env), never hardcoded
- BOT_NAME is both the Slack user name looked up at startup and the wake word
- DEV_MODE makes the bot log messages instead of answering them
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

# Load .env from the working directory
load_dotenv()

BOT_NAME = os.getenv("BOT_NAME", "gopher")
BOT_VERSION = os.getenv("BOT_VERSION", "dev")
ADMIN_USER_NAME = os.getenv("ADMIN_USER_NAME", "dlsniper")
DEV_MODE = os.getenv("DEV_MODE", "false").lower() == "true"

PLAYGROUND_SHARE_URL = os.getenv("PLAYGROUND_SHARE_URL", "https://play.golang.org/share")
HTTP_TIMEOUT_S = float(os.getenv("HTTP_TIMEOUT_S", "30"))

LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"


def _load_token(var: str) -> str:
    token = os.getenv(var, "").strip()
    if not token:
        raise ValueError(
            "{} not configured. Add it to the environment or the .env file.".format(var)
        )
    return token


def load_bot_token() -> str:
    """Load the bot token (xoxb-...); raises ValueError when missing."""
    return _load_token("SLACK_BOT_TOKEN")


def load_app_token() -> str:
    """Load the Socket Mode app token (xapp-...); raises ValueError when missing."""
    return _load_token("SLACK_APP_TOKEN")
