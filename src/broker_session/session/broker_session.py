"""Single-channel session: connect, publish text, consume, close."""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Optional, TextIO, Type

from broker_session.consumer import MessageConsumer, listen
from broker_session.contracts import IBrokerConnection, IMessagePublisher, ITopologyDeclarator
from broker_session.delivery_mode import DeliveryMode
from broker_session.errors import SessionError

from .session_config import (
    DEFAULT_CHANNEL_ID,
    DEFAULT_EXCHANGE,
    DEFAULT_ROUTING_KEY,
    SessionDependencies,
)


class BrokerSession:
    """One broker connection with a single working channel.

    Covers the common case of a host application that opens a connection,
    publishes persistent ``text/plain`` messages, maybe listens on a queue and
    closes again. Everything goes through channel ``DEFAULT_CHANNEL_ID``.
    """

    def __init__(
        self,
        *,
        connection: IBrokerConnection,
        declarator: ITopologyDeclarator,
        publisher: IMessagePublisher,
        channel_id: int = DEFAULT_CHANNEL_ID,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.logger = logger or logging.getLogger(__name__)
        self.connection = connection
        self.declarator = declarator
        self.publisher = publisher
        self.channel_id = channel_id

    @classmethod
    def from_url(
        cls,
        rabbitmq_url: Optional[str] = None,
        *,
        dependencies: Optional[SessionDependencies] = None,
    ) -> "BrokerSession":
        deps = dependencies or SessionDependencies()
        connection = deps.make_connection(rabbitmq_url)

        return cls(
            connection=connection,
            declarator=deps.make_declarator(connection),
            publisher=deps.make_publisher(connection),
        )

    def open(self) -> None:
        """Connect, log in and open the working channel."""
        self.connection.connect()
        self.connection.open_channel(self.channel_id)
        self.logger.info("Session ready on channel %s", self.channel_id)

    def send_string(
        self,
        body: str,
        *,
        exchange: str = DEFAULT_EXCHANGE,
        routing_key: str = DEFAULT_ROUTING_KEY,
    ) -> None:
        self.publisher.publish(
            self.channel_id, exchange, routing_key, body, DeliveryMode.PERSISTENT
        )

    def consumer(self) -> MessageConsumer:
        return MessageConsumer(self.connection, self.channel_id, logger=self.logger)

    def listen(
        self,
        queue_name: str,
        *,
        exchange: Optional[str] = None,
        binding_key: Optional[str] = None,
        stream: Optional[TextIO] = None,
    ) -> SessionError:
        return listen(
            self.connection,
            self.channel_id,
            queue_name,
            exchange=exchange,
            binding_key=binding_key,
            stream=stream,
            declarator=self.declarator,
            logger=self.logger,
        )

    def close(self) -> None:
        """Close the working channel, then the connection."""
        self.connection.close_channel(self.channel_id)
        self.connection.close()

    def __enter__(self) -> "BrokerSession":
        self.open()
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None:
        if not self.connection.is_open:
            return
        if self.channel_id in self.connection.open_channel_ids:
            self.close()
        else:
            self.connection.close()
