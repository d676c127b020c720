"""Tests for the command table builders (godoc, xkcd, library search, ...)."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from conftest import DM_CHANNEL, make_message
from gopher_bot.core import replies
from gopher_bot.core.dispatcher import dispatch
from gopher_bot.core.models import Audience, PostAttachment, PostMessage, Rule
from gopher_bot.core.rules import (
    DEFAULT_RULES,
    extract_search_term,
    flip_coin,
    godoc,
    library_search,
    recommended_channels,
    version,
    xkcd_comic,
)


class TestGodoc:

    def test_keeps_original_case(self, bot_config):
        build = godoc("", "d/")
        action = build(make_message("d/golang.org/x/net/HTML"), bot_config)
        assert action.text == "<https://godoc.org/golang.org/x/net/HTML>"

    def test_path_ends_at_space(self, bot_config):
        build = godoc("github.com/", "ghd/")
        action = build(make_message("ghd/pkg/errors is what you want"), bot_config)
        assert action.text == "<https://godoc.org/github.com/pkg/errors>"


class TestXkcd:

    def test_numbered_comic(self, bot_config):
        action = xkcd_comic(make_message("gopher xkcd:1234"), bot_config)
        assert action == PostMessage("https://xkcd.com/1234/", unfurl_links=True)

    def test_numbered_comic_in_dm(self, bot_config):
        action = dispatch(make_message("xkcd:42", channel=DM_CHANNEL), bot_config)
        assert action.text == "https://xkcd.com/42/"

    @pytest.mark.parametrize("text", [
        "gopher xkcd:abc",
        "gopher xkcd:",
        "gopher xkcd:0",
        "gopher xkcd:4_2",
        "gopher xkcd:\u0664\u0662",
        "gopher xkcd:+42",
        "gopher xkcd:-1",
    ])
    def test_invalid_number_ignored(self, bot_config, text):
        assert xkcd_comic(make_message(text), bot_config) is None


class TestLibrarySearch:

    def test_simple_term(self):
        assert extract_search_term("gopher library for json") == "json"

    def test_removes_in_go_and_punctuation(self):
        assert extract_search_term("gopher library for yaml parsing in go?") == "yaml parsing"

    def test_removes_emoji_and_links(self):
        text = "gopher library for <@U12345> websockets :smile:"
        assert extract_search_term(text) == "websockets"

    def test_keeps_case(self):
        assert extract_search_term("gopher library for OAuth2") == "OAuth2"

    def test_reply_is_query_escaped(self, bot_config):
        action = library_search(make_message("gopher library for http router"), bot_config)
        assert action.text == replies.LIBRARY_SEARCH.format("http+router")
        assert "<https://godoc.org/?q=http+router>" in action.text

    def test_empty_term_ignored(self, bot_config):
        assert library_search(make_message("gopher library for ?"), bot_config) is None

    def test_too_long_term_ignored(self, bot_config):
        text = "gopher library for " + "x" * 101
        assert library_search(make_message(text), bot_config) is None

    def test_dispatched_by_prefix(self, bot_config):
        action = dispatch(make_message("<@U0BOT> library for csv"), bot_config)
        assert "q=csv" in action.text


class TestComputedReplies:

    def test_flip_coin(self, bot_config):
        with patch("gopher_bot.core.rules.secrets.choice", return_value="heads"):
            assert flip_coin(make_message(""), bot_config) == PostMessage("heads")

    def test_flip_coin_values(self, bot_config):
        results = {flip_coin(make_message(""), bot_config).text for _ in range(50)}
        assert results <= {"heads", "tail"}

    def test_version_uses_config(self, bot_config):
        action = version(make_message(""), bot_config)
        assert action == PostMessage("My version is: 1.2.3", audience=Audience.SENDER)

    def test_recommended_channels_lists_resolved_unrestricted(self, bot_config):
        action = recommended_channels(make_message(""), bot_config)
        assert isinstance(action, PostAttachment)
        assert action.audience is Audience.SENDER
        assert "<#C0REVIEWS|reviews> -> for code reviews" in action.attachment
        assert "<#C0PERF|performance>" in action.attachment
        # general is restricted, aws is unresolved
        assert "general" not in action.attachment
        assert "aws" not in action.attachment


class TestDefaultTable:

    def test_rule_names_unique(self):
        names = [rule.name for rule in DEFAULT_RULES]
        assert len(names) == len(set(names))

    def test_patterns_are_lowercase(self):
        for rule in DEFAULT_RULES:
            for pattern in rule.patterns:
                assert pattern == pattern.lower(), rule.name

    def test_ambient_rules_come_first(self):
        flags = [rule.addressed for rule in DEFAULT_RULES]
        first_addressed = flags.index(True)
        assert all(flags[first_addressed:])

    def test_rules_are_immutable(self):
        rule = DEFAULT_RULES[0]
        with pytest.raises(AttributeError):
            rule.patterns = ("x",)  # type: ignore[misc]
        assert isinstance(rule, Rule)
