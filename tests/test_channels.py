"""Tests for channel registry resolution and the rendered listings."""

from __future__ import annotations

from conftest import PUBLIC_CHANNELS
from gopher_bot.core.channels import (
    DEFAULT_CHANNELS,
    recommended_channels_text,
    resolve_channels,
    welcome_message,
)
from gopher_bot.core.models import ChannelInfo


class TestResolveChannels:

    def test_only_matching_entry_gets_id(self):
        resolved = resolve_channels(DEFAULT_CHANNELS, [{"id": "C777", "name": "reviews"}])
        by_name = {chn.name: chn for chn in resolved}

        assert by_name["reviews"].slack_id == "C777"
        for original in DEFAULT_CHANNELS:
            if original.name != "reviews":
                assert by_name[original.name] == original

    def test_does_not_mutate_input(self):
        registry = (ChannelInfo("reviews", "for code reviews"),)
        resolve_channels(registry, [{"id": "C777", "name": "reviews"}])
        assert registry[0].slack_id == ""

    def test_preserves_registry_order(self):
        resolved = resolve_channels(DEFAULT_CHANNELS, PUBLIC_CHANNELS)
        assert [c.name for c in resolved] == [c.name for c in DEFAULT_CHANNELS]

    def test_name_match_is_case_insensitive(self):
        resolved = resolve_channels(
            (ChannelInfo("reviews", "x"),), [{"id": "C1", "name": "Reviews"}]
        )
        assert resolved[0].slack_id == "C1"

    def test_public_wins_over_private(self):
        resolved = resolve_channels(
            (ChannelInfo("security", "x"),),
            public=[{"id": "C1", "name": "security"}],
            private=[{"id": "G1", "name": "security"}],
        )
        assert resolved[0].slack_id == "C1"

    def test_private_fills_unresolved(self):
        resolved = resolve_channels(
            (ChannelInfo("golang_cls", "x", restricted=True),),
            private=[{"id": "G1", "name": "golang_cls"}],
        )
        assert resolved[0].slack_id == "G1"

    def test_already_resolved_is_write_once(self):
        registry = (ChannelInfo("reviews", "x", slack_id="C1"),)
        resolved = resolve_channels(registry, [{"id": "C2", "name": "reviews"}])
        assert resolved[0].slack_id == "C1"


class TestListings:

    def test_welcome_lists_welcome_channels(self):
        channels = resolve_channels(DEFAULT_CHANNELS, PUBLIC_CHANNELS)
        text = welcome_message("alice", channels)

        assert text.startswith("Hello alice,")
        assert "<#C0NEWBIES|golang-newbies> -> for newbie resources\n" in text
        assert "<#C0REVIEWS|reviews> -> for code reviews\n" in text
        # performance is resolved but not a welcome channel
        assert "performance" not in text
        assert text.endswith("Now, enjoy the community and have fun.")

    def test_recommended_skips_restricted(self):
        channels = resolve_channels(DEFAULT_CHANNELS, PUBLIC_CHANNELS)
        text = recommended_channels_text(channels)

        assert "- <#C0PERF|performance> -> anything and everything performance related\n" in text
        assert "C0GENERAL" not in text

    def test_unresolved_channels_left_out(self):
        assert recommended_channels_text(DEFAULT_CHANNELS) == ""
