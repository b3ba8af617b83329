"""Declares exchanges, queues and bindings over a broker connection."""

from __future__ import annotations

import logging
from typing import Optional

from broker_session.classifier import check_reply, translate_errors
from broker_session.contracts import IBrokerConnection, ITopologyDeclarator


class TopologyDeclarator(ITopologyDeclarator):
    """Broker-side entity declarations.

    Nothing is cached locally: exchanges, queues and bindings live on the
    broker, and redeclaring one with the same parameters is a no-op there.
    """

    def __init__(
        self, connection: IBrokerConnection, logger: Optional[logging.Logger] = None
    ) -> None:
        self.connection = connection
        self.logger = logger or logging.getLogger(__name__)

    def declare_exchange(
        self,
        channel_id: int,
        name: str,
        exchange_type: str,
        *,
        durable: bool = False,
        auto_delete: bool = False,
    ) -> None:
        context = "Declaring exchange"
        channel = self.connection.channel(channel_id, context)
        with translate_errors(context):
            reply = channel.exchange_declare(
                exchange=name,
                exchange_type=exchange_type,
                passive=False,
                durable=durable,
                auto_delete=auto_delete,
                internal=False,
            )
        check_reply(reply, context)
        self.logger.info("Exchange declared: %s (%s)", name, exchange_type)

    def declare_queue(
        self,
        channel_id: int,
        name: str = "",
        *,
        durable: bool = False,
        exclusive: bool = False,
        auto_delete: bool = False,
    ) -> str:
        context = "Declaring queue"
        channel = self.connection.channel(channel_id, context)
        with translate_errors(context):
            reply = channel.queue_declare(
                queue=name,
                passive=False,
                durable=durable,
                exclusive=exclusive,
                auto_delete=auto_delete,
            )
        check_reply(reply, context)

        # An empty name asks the broker to generate one; this reply is the only
        # place it is ever reported.
        declared_name: str = reply.method.queue
        self.logger.info("Queue declared: %s", declared_name)
        return declared_name

    def bind_queue(self, channel_id: int, queue: str, exchange: str, binding_key: str) -> None:
        context = "Binding queue"
        channel = self.connection.channel(channel_id, context)
        with translate_errors(context):
            reply = channel.queue_bind(queue=queue, exchange=exchange, routing_key=binding_key)
        check_reply(reply, context)
        self.logger.info(
            "Queue %s bound to exchange %s with routing key '%s'", queue, exchange, binding_key
        )
