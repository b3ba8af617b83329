"""Tests for the channel ID registry."""

from unittest.mock import Mock

import pytest

from broker_session.channel import ChannelRegistry
from broker_session.errors import BrokerChannelError, LibraryError


def open_channel():
    channel = Mock()
    channel.is_closed = False
    return channel


def test_ids_are_sorted():
    registry = ChannelRegistry()
    for channel_id in (5, 1, 3):
        registry.claim(channel_id, "Opening channel")
        registry.register(channel_id, open_channel())

    assert registry.ids == [1, 3, 5]
    assert 3 in registry
    assert len(registry) == 3


def test_claim_rejects_live_id():
    registry = ChannelRegistry()
    registry.register(1, open_channel())

    with pytest.raises(BrokerChannelError, match="channel 1 is already open"):
        registry.claim(1, "Opening channel")


def test_closed_channels_are_pruned():
    registry = ChannelRegistry()
    channel = open_channel()
    registry.register(1, channel)
    channel.is_closed = True

    assert registry.ids == []
    registry.claim(1, "Opening channel")


def test_channel_max_bounds_ids():
    registry = ChannelRegistry(channel_max=10)

    with pytest.raises(LibraryError):
        registry.claim(11, "Opening channel")


def test_get_missing_channel():
    registry = ChannelRegistry()

    with pytest.raises(LibraryError, match="channel 4 is not open"):
        registry.get(4, "Publishing")


def test_release_and_clear():
    registry = ChannelRegistry()
    registry.register(1, open_channel())
    registry.register(2, open_channel())

    registry.release(1)
    registry.release(1)
    assert registry.ids == [2]

    registry.clear()
    assert registry.ids == []
