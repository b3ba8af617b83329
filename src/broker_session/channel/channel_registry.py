"""Bookkeeping for the numbered channels of one connection."""

from __future__ import annotations

from typing import Dict, List

from pika.adapters.blocking_connection import BlockingChannel

from broker_session.errors import BrokerChannelError, LibraryError

MAX_CHANNEL_ID = 65535
CHANNEL_ERROR = 504


class ChannelRegistry:
    """Tracks which caller-chosen channel IDs are live on a connection.

    An ID is live from a successful open until its close is attempted. A channel
    the broker has closed no longer blocks its ID.
    """

    def __init__(self, channel_max: int = MAX_CHANNEL_ID) -> None:
        self.channel_max = channel_max
        self._channels: Dict[int, BlockingChannel] = {}

    def claim(self, channel_id: int, context: str) -> None:
        """Reject an ID that is out of range or still open."""
        if (
            isinstance(channel_id, bool)
            or not isinstance(channel_id, int)
            or not 1 <= channel_id <= self.channel_max
        ):
            raise LibraryError(
                context,
                "InvalidChannelNumber",
                f"channel id {channel_id!r} is outside 1..{self.channel_max}",
            )

        self._prune(channel_id)
        if channel_id in self._channels:
            raise BrokerChannelError(
                context,
                CHANNEL_ERROR,
                f"CHANNEL_ERROR - channel {channel_id} is already open",
            )

    def register(self, channel_id: int, channel: BlockingChannel) -> None:
        self._channels[channel_id] = channel

    def get(self, channel_id: int, context: str) -> BlockingChannel:
        try:
            return self._channels[channel_id]
        except KeyError:
            raise LibraryError(
                context, "ChannelWrongStateError", f"channel {channel_id} is not open"
            ) from None

    def release(self, channel_id: int) -> None:
        self._channels.pop(channel_id, None)

    def clear(self) -> None:
        self._channels.clear()

    @property
    def ids(self) -> List[int]:
        for channel_id in list(self._channels):
            self._prune(channel_id)
        return sorted(self._channels)

    def __contains__(self, channel_id: object) -> bool:
        return channel_id in self.ids

    def __len__(self) -> int:
        return len(self.ids)

    def _prune(self, channel_id: int) -> None:
        channel = self._channels.get(channel_id)
        if channel is not None and channel.is_closed:
            del self._channels[channel_id]
