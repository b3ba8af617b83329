"""Defines the contract for broker connections."""

from __future__ import annotations

from abc import ABC, abstractmethod
from types import TracebackType
from typing import List, Optional, Type

from pika.adapters.blocking_connection import BlockingChannel


class IBrokerConnection(ABC):
    """An authenticated broker connection multiplexed into numbered channels."""

    @abstractmethod
    def connect(self) -> None:
        """Open the transport and log in."""

    @abstractmethod
    def open_channel(self, channel_id: int) -> None:
        """Open the channel with the given caller-chosen ID."""

    @abstractmethod
    def close_channel(self, channel_id: int) -> None:
        """Close the channel with the given ID."""

    @abstractmethod
    def channel(self, channel_id: int, context: str = "Using channel") -> BlockingChannel:
        """Return the codec channel for an open channel ID."""

    @property
    @abstractmethod
    def open_channel_ids(self) -> List[int]:
        """IDs of the channels currently open on this connection."""

    @property
    @abstractmethod
    def is_open(self) -> bool:
        """Whether the connection can still be used."""

    @abstractmethod
    def process_events(self, time_limit: Optional[float] = 0) -> None:
        """Run codec I/O so that asynchronous broker notifications get dispatched."""

    @abstractmethod
    def close(self) -> None:
        """Close the connection and release the transport."""

    @abstractmethod
    def __enter__(self) -> IBrokerConnection:
        """Enter a managed connection context."""

    @abstractmethod
    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None:
        """Exit a managed connection context."""
