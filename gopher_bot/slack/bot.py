"""Slack bot: startup initialization, event listeners and Socket Mode loop.

WHY: The bot has to know who it is (to spot mentions and skip its own
messages) and where the community channels are before it can answer
anything. After that, every message is classified by the core dispatcher
and the chosen action is executed.

HOW: ``initialize`` lists users and channels once and returns an
immutable BotConfig; it raises BotInitError when the bot user cannot be
found. ``create_app`` runs initialization, then registers the
``message`` and ``team_join`` listeners on a slack-bolt App, so no event
is handled before startup has finished. ``GopherBot`` holds the config,
the rule table and the executor and handles individual events.

RULES:
- Missing bot identity is the only fatal startup error
- Channel listing failures are logged; the affected IDs stay unresolved
- Dev mode logs each message and its match instead of acting
- New members get a welcome DM (not in dev mode)
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

import httpx
from slack_bolt import App
from slack_bolt.adapter.socket_mode import SocketModeHandler

from gopher_bot.config import (
    ADMIN_USER_NAME,
    BOT_NAME,
    BOT_VERSION,
    DEV_MODE,
    HTTP_TIMEOUT_S,
    load_app_token,
    load_bot_token,
)
from gopher_bot.core import replies
from gopher_bot.core.channels import DEFAULT_CHANNELS, resolve_channels, welcome_message
from gopher_bot.core.dispatcher import (
    dispatch,
    find_shadowed_rules,
    is_addressed,
    normalize,
    select_rule,
    strip_wake_word,
)
from gopher_bot.core.errors import BotInitError
from gopher_bot.core.models import Action, BotConfig, ChannelInfo, IncomingMessage, Rule
from gopher_bot.core.rules import DEFAULT_RULES
from gopher_bot.slack.actions import ActionExecutor

logger = logging.getLogger(__name__)

_PAGE_LIMIT = 200


# ---------------------------------------------------------------------------
# Startup
# ---------------------------------------------------------------------------


def _paginate(method: Callable[..., Any], key: str, **kwargs: Any) -> List[Dict[str, Any]]:
    """Collect every page of a cursor-paginated Web API list call."""
    items = []  # type: List[Dict[str, Any]]
    cursor = None  # type: Optional[str]
    while True:
        if cursor:
            kwargs["cursor"] = cursor
        resp = method(**kwargs)
        items.extend(resp.get(key) or [])
        cursor = (resp.get("response_metadata") or {}).get("next_cursor")
        if not cursor:
            return items


def _list_channels(client: Any, types: str) -> List[Dict[str, Any]]:
    try:
        return _paginate(
            client.conversations_list,
            "channels",
            types=types,
            exclude_archived=True,
            limit=_PAGE_LIMIT,
        )
    except Exception:
        logger.exception("Failed to list %s conversations", types)
        return []


def initialize(
    client: Any,
    bot_name: str = BOT_NAME,
    version: str = BOT_VERSION,
    admin_user_name: str = ADMIN_USER_NAME,
    dev_mode: bool = DEV_MODE,
    registry: Iterable[ChannelInfo] = DEFAULT_CHANNELS,
) -> BotConfig:
    """Resolve the bot identity and channel IDs from the workspace.

    WHY: User and channel IDs are workspace-specific; only names are
    known in advance.

    HOW: Lists all users to find the bot user (by name, flagged is_bot)
    and the admin user, then lists public channels and private groups and
    resolves the channel registry against them.

    RULES:
    - Raises BotInitError when the user list fails or has no such bot
    - Admin user is optional; an empty ID disables the deploy notice
    - Public channel IDs take precedence over private group IDs

    Returns:
        The frozen BotConfig every handler receives.
    """
    logger.info("Determining bot / user IDs")
    try:
        users = _paginate(client.users_list, "members", limit=_PAGE_LIMIT)
    except Exception as exc:
        raise BotInitError(bot_name) from exc

    bot_id = ""
    admin_user_id = ""
    for user in users:
        name = user.get("name", "")
        if name == bot_name and user.get("is_bot"):
            bot_id = user.get("id", "")
        elif name == admin_user_name:
            admin_user_id = user.get("id", "")

    if not bot_id:
        raise BotInitError(bot_name)

    logger.info("Determining channel IDs")
    public = _list_channels(client, "public_channel")
    private = _list_channels(client, "private_channel")
    channels = resolve_channels(registry, public, private)

    unresolved = [chn.name for chn in channels if not chn.slack_id]
    if unresolved:
        logger.warning("Channels not found in workspace: %s", ", ".join(unresolved))

    logger.info("Initialized %s with ID: %s", bot_name, bot_id)
    return BotConfig(
        bot_id=bot_id,
        bot_name=bot_name,
        version=version,
        admin_user_id=admin_user_id,
        channels=channels,
        dev_mode=dev_mode,
    )


def announce_version(executor: ActionExecutor, config: BotConfig) -> bool:
    """Tell the admin which version was just deployed."""
    if not config.admin_user_id:
        logger.info("No admin user found, skipping deploy notice")
        return False
    if not executor.send_direct(config.admin_user_id, replies.DEPLOYED_VERSION.format(config.version)):
        logger.warning("Failed to announce deployed version %s", config.version)
        return False
    return True


def warn_shadowed_rules(rules: Sequence[Rule]) -> None:
    for earlier, later in find_shadowed_rules(rules):
        logger.warning("Rule %r is shadowed by earlier rule %r", later.name, earlier.name)


# ---------------------------------------------------------------------------
# Event handling
# ---------------------------------------------------------------------------


class GopherBot:
    """Handles Slack events with a resolved config and a rule table.

    Args:
        config: BotConfig from ``initialize``.
        executor: Performs the chosen actions.
        rules: Ordered command table.
    """

    def __init__(
        self,
        config: BotConfig,
        executor: ActionExecutor,
        rules: Sequence[Rule] = DEFAULT_RULES,
    ) -> None:
        self.config = config
        self.executor = executor
        self.rules = rules

    def handle_message(self, event: Dict[str, Any]) -> Optional[Action]:
        """Dispatch a ``message`` event and execute the resulting action.

        Returns the executed action (None when nothing matched), which is
        handy for tests and dev-mode logging.
        """
        message = IncomingMessage.from_event(event)

        if self.config.dev_mode:
            self._log_dev(message)
            return None

        action = dispatch(message, self.config, self.rules)
        if action is None:
            return None

        self.executor.execute(action, message)
        return action

    def handle_team_join(self, event: Dict[str, Any]) -> None:
        """Send the welcome message to a new member."""
        if self.config.dev_mode:
            return

        user = event.get("user") or {}
        user_id = user.get("id", "")
        if not user_id:
            logger.warning("team_join event without a user id")
            return

        name = user.get("name") or user.get("real_name") or "gopher"
        self.executor.send_direct(
            user_id,
            welcome_message(name, self.config.channels),
            link_names=True,
        )

    def _log_dev(self, message: IncomingMessage) -> None:
        text = normalize(message.text)
        rule = select_rule(message, self.config, self.rules)
        logger.info("got message: %r", message)
        logger.info(
            "channel: %s -> message: %r addressed: %s rule: %s",
            message.channel,
            strip_wake_word(text, self.config),
            is_addressed(text, message, self.config),
            rule.name if rule else None,
        )


# ---------------------------------------------------------------------------
# App setup
# ---------------------------------------------------------------------------


def create_app(
    bot_token: Optional[str] = None,
    dev_mode: bool = DEV_MODE,
    http: Optional[httpx.Client] = None,
) -> App:
    """Create the Slack Bolt app, initialize the bot and register listeners.

    WHY: Initialization must finish before the first event is handled, so
    listeners are only attached once the BotConfig exists.

    RULES:
    - If bot_token is None, reads SLACK_BOT_TOKEN via load_bot_token()
    - Raises BotInitError when the bot identity cannot be resolved
    - A caller-supplied http client stays owned by the caller; without one,
      a client is created after initialization succeeds and lives as long
      as the app (run() passes its own and closes it on exit)
    """
    token = bot_token or load_bot_token()
    app = App(token=token)

    config = initialize(app.client, dev_mode=dev_mode)
    executor = ActionExecutor(
        app.client,
        http or httpx.Client(timeout=HTTP_TIMEOUT_S),
        token,
    )
    warn_shadowed_rules(DEFAULT_RULES)
    announce_version(executor, config)

    bot = GopherBot(config, executor)

    @app.event("message")
    def on_message(event):
        bot.handle_message(event)

    @app.event("team_join")
    def on_team_join(event):
        bot.handle_team_join(event)

    return app


def run(dev_mode: bool = DEV_MODE) -> None:
    """Start the bot in Socket Mode; blocks until interrupted.

    RULES:
    - Requires SLACK_BOT_TOKEN and SLACK_APP_TOKEN
    """
    bot_token = load_bot_token()
    app_token = load_app_token()

    with httpx.Client(timeout=HTTP_TIMEOUT_S) as http:
        app = create_app(bot_token=bot_token, dev_mode=dev_mode, http=http)

        logger.info("Starting Slack bot in Socket Mode...")
        if dev_mode:
            logger.info("Dev mode: messages are logged, not answered")

        handler = SocketModeHandler(app, app_token)
        handler.start()
