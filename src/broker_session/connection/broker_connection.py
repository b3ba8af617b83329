"""Broker connection lifecycle and channel management."""

from __future__ import annotations

import logging
from enum import Enum
from types import TracebackType
from typing import Any, Callable, List, Optional, Type

import pika
from pika.adapters.blocking_connection import BlockingChannel, BlockingConnection
from pika.connection import Parameters

from broker_session.channel import ChannelRegistry
from broker_session.classifier import CODEC_ERRORS, classify, translate_errors
from broker_session.contracts import IBrokerConnection
from broker_session.errors import ErrorKind, LibraryError

from .broker_config import BrokerConfig

REPLY_SUCCESS = 200
NORMAL_SHUTDOWN = "Normal shutdown"

ConnectionFactory = Callable[[Parameters], BlockingConnection]


class ConnectionState(Enum):
    NEW = "new"
    OPEN = "open"
    CLOSING = "closing"
    CLOSED = "closed"


class BrokerConnection(IBrokerConnection):
    """Owns one authenticated blocking connection and its numbered channels.

    Channels are addressed by ``(connection, channel_id)``; the caller picks the
    IDs. A connection and its channels belong to a single owner on a single
    thread. Once :meth:`close` has started, every operation fails with
    :class:`~broker_session.errors.LibraryError`.
    """

    def __init__(
        self,
        config: BrokerConfig,
        *,
        connection_factory: ConnectionFactory = pika.BlockingConnection,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.config = config
        self.state = ConnectionState.NEW
        self.logger = logger or logging.getLogger(__name__)
        self._connection_factory = connection_factory
        self._connection: Optional[BlockingConnection] = None
        self._channels = ChannelRegistry()

    @classmethod
    def open(
        cls,
        host: str,
        port: int,
        username: str,
        password: str,
        *,
        connection_factory: ConnectionFactory = pika.BlockingConnection,
        logger: Optional[logging.Logger] = None,
        **options: Any,
    ) -> BrokerConnection:
        """Connect to ``host:port`` and log in on the default virtual host."""
        config = BrokerConfig(
            host=host, port=port, username=username, password=password, **options
        )
        connection = cls(config, connection_factory=connection_factory, logger=logger)
        connection.connect()
        return connection

    def connect(self) -> None:
        if self.state is not ConnectionState.NEW:
            raise self._wrong_state("Logging in")

        self.logger.info("Connecting to RabbitMQ at %s", self.config.address)
        try:
            self._connection = self._connection_factory(self.config.to_parameters())
        except CODEC_ERRORS as exc:
            outcome = classify(exc)
            context = "Opening TCP socket" if outcome.kind is ErrorKind.TRANSPORT else "Logging in"
            error = outcome.to_error(context)
            self.logger.error("Failed to establish RabbitMQ connection: %s", error)
            raise error from exc

        self.state = ConnectionState.OPEN
        self.logger.info("Connected to RabbitMQ.")

    @property
    def is_open(self) -> bool:
        return (
            self.state is ConnectionState.OPEN
            and self._connection is not None
            and self._connection.is_open
        )

    @property
    def open_channel_ids(self) -> List[int]:
        return self._channels.ids

    def open_channel(self, channel_id: int) -> None:
        context = "Opening channel"
        connection = self._require_open(context)
        self._channels.claim(channel_id, context)

        with translate_errors(context):
            channel = connection.channel(channel_number=channel_id)

        self._channels.register(channel_id, channel)
        self.logger.info("Opened channel %s", channel_id)

    def close_channel(self, channel_id: int) -> None:
        context = "Closing channel"
        self._require_open(context)
        channel = self._channels.get(channel_id, context)

        try:
            with translate_errors(context):
                channel.close(reply_code=REPLY_SUCCESS, reply_text=NORMAL_SHUTDOWN)
        finally:
            self._channels.release(channel_id)

        self.logger.info("Closed channel %s", channel_id)

    def channel(self, channel_id: int, context: str = "Using channel") -> BlockingChannel:
        self._require_open(context)
        return self._channels.get(channel_id, context)

    def process_events(self, time_limit: Optional[float] = 0) -> None:
        context = "Processing events"
        connection = self._require_open(context)
        with translate_errors(context):
            connection.process_data_events(time_limit=time_limit)

    def close(self) -> None:
        context = "Closing connection"
        connection = self._require_open(context)
        self.state = ConnectionState.CLOSING

        leftover = self._channels.ids
        if leftover:
            self.logger.warning("Closing connection with channels still open: %s", leftover)

        try:
            if connection.is_closed:
                self.logger.info("RabbitMQ connection was already closed by the peer.")
            else:
                with translate_errors(context):
                    connection.close(reply_code=REPLY_SUCCESS, reply_text=NORMAL_SHUTDOWN)
        finally:
            self._channels.clear()
            self._connection = None
            self.state = ConnectionState.CLOSED

        self.logger.info("Closed RabbitMQ connection.")

    def _require_open(self, context: str) -> BlockingConnection:
        if self.state is not ConnectionState.OPEN or self._connection is None:
            raise self._wrong_state(context)
        return self._connection

    def _wrong_state(self, context: str) -> LibraryError:
        return LibraryError(
            context, "ConnectionWrongStateError", f"connection is {self.state.value}"
        )

    def __enter__(self) -> BrokerConnection:
        if self.state is ConnectionState.NEW:
            self.connect()
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None:
        if self.state is not ConnectionState.OPEN:
            return
        if self._connection is not None and self._connection.is_open:
            for channel_id in self.open_channel_ids:
                self.close_channel(channel_id)
        self.close()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.config.address} {self.state.value}>"
