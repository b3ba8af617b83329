"""Publishes plain-text messages on numbered channels."""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Any, Deque, Dict, List, Optional, Union

import pika
from pika.adapters.blocking_connection import BlockingChannel

from broker_session.classifier import translate_errors
from broker_session.contracts import IBrokerConnection, IMessagePublisher
from broker_session.delivery_mode import DeliveryMode
from broker_session.errors import LibraryError

TEXT_PLAIN = "text/plain"


@dataclass(frozen=True)
class ReturnedMessage:
    """A mandatory message the broker could not route and sent back."""

    channel_id: int
    reply_code: int
    reply_text: str
    exchange: str
    routing_key: str
    body: bytes


def build_properties(delivery_mode: Union[DeliveryMode, int]) -> pika.BasicProperties:
    """Properties for an outgoing message: ``text/plain`` plus the delivery mode."""
    mode = DeliveryMode(delivery_mode)
    return pika.BasicProperties(content_type=TEXT_PLAIN, delivery_mode=int(mode))


class MessagePublisher(IMessagePublisher):
    """Fire-and-forget publisher; nothing waits for a broker acknowledgment.

    Messages sent with ``mandatory=True`` that the broker cannot route come
    back asynchronously. They are picked up during a later blocking call on the
    same connection (or :meth:`drain_returned`) and kept until drained.
    """

    def __init__(
        self, connection: IBrokerConnection, logger: Optional[logging.Logger] = None
    ) -> None:
        self.connection = connection
        self.logger = logger or logging.getLogger(__name__)
        self._returned: Deque[ReturnedMessage] = deque()
        self._return_listeners: Dict[int, BlockingChannel] = {}

    def publish(
        self,
        channel_id: int,
        exchange: str,
        routing_key: str,
        body: Union[bytes, str],
        delivery_mode: Union[DeliveryMode, int] = DeliveryMode.PERSISTENT,
        *,
        mandatory: bool = False,
        immediate: bool = False,
    ) -> None:
        context = "Publishing"
        if immediate:
            raise LibraryError(
                context,
                "MethodNotImplemented",
                "the immediate flag is not supported (broker replies 540 NOT_IMPLEMENTED)",
            )

        channel = self.connection.channel(channel_id, context)
        payload = body.encode("utf-8") if isinstance(body, str) else bytes(body)

        with translate_errors(context):
            properties = build_properties(delivery_mode)
            if mandatory:
                self._listen_for_returns(channel_id, channel)
            channel.basic_publish(
                exchange=exchange,
                routing_key=routing_key,
                body=payload,
                properties=properties,
                mandatory=mandatory,
            )

        self.logger.debug(
            "Published %d bytes to exchange '%s' with routing key '%s' (delivery_mode=%s)",
            len(payload),
            exchange,
            routing_key,
            properties.delivery_mode,
        )

    def drain_returned(self) -> List[ReturnedMessage]:
        """Collect pending broker returns and hand them over, oldest first."""
        if self._return_listeners and self.connection.is_open:
            self.connection.process_events(time_limit=0)
        returned = list(self._returned)
        self._returned.clear()
        return returned

    def _listen_for_returns(self, channel_id: int, channel: BlockingChannel) -> None:
        if self._return_listeners.get(channel_id) is channel:
            return

        def on_return(_channel: Any, method: Any, _properties: Any, body: bytes) -> None:
            returned = ReturnedMessage(
                channel_id=channel_id,
                reply_code=method.reply_code,
                reply_text=method.reply_text,
                exchange=method.exchange,
                routing_key=method.routing_key,
                body=bytes(body),
            )
            self.logger.warning(
                "Message returned by broker on channel %s: %s %s (exchange '%s', routing key '%s')",
                channel_id,
                returned.reply_code,
                returned.reply_text,
                returned.exchange,
                returned.routing_key,
            )
            self._returned.append(returned)

        channel.add_on_return_callback(on_return)
        self._return_listeners[channel_id] = channel
