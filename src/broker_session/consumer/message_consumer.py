"""Blocking consumer state machine."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Iterator, Optional

from broker_session.classifier import check_reply, translate_errors
from broker_session.classifier.error_classifier import CONSUMER_CANCELLED_TEXT
from broker_session.contracts import IBrokerConnection
from broker_session.errors import BrokerChannelError, LibraryError, SessionError

from .envelope import Envelope


class ConsumerState(Enum):
    IDLE = "idle"
    CONSUMING = "consuming"
    TERMINATED = "terminated"


class MessageConsumer:
    """Receives deliveries from one queue on one channel.

    ``IDLE -> CONSUMING -> TERMINATED``. Any failure while consuming (broker
    closing the channel or connection, broker cancel, lost transport) is
    classified, moves the consumer to ``TERMINATED`` and is raised. A terminated
    consumer cannot be restarted; create a new one.
    """

    def __init__(
        self,
        connection: IBrokerConnection,
        channel_id: int,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.connection = connection
        self.channel_id = channel_id
        self.logger = logger or logging.getLogger(__name__)
        self.state = ConsumerState.IDLE
        self.queue_name: Optional[str] = None
        self.current: Optional[Envelope] = None
        self._deliveries: Optional[Iterator[Any]] = None

    def start(
        self,
        queue_name: str,
        *,
        inactivity_timeout: Optional[float] = None,
        auto_ack: bool = False,
    ) -> None:
        """Begin consuming ``queue_name`` with broker-default consumer flags.

        With ``inactivity_timeout`` set, :meth:`consume_one` gives up waiting
        after that many seconds and returns ``None``.
        """
        context = "Starting consumer"
        if self.state is not ConsumerState.IDLE:
            raise self._wrong_state(context)

        channel = self.connection.channel(self.channel_id, context)
        with translate_errors(context):
            reply = channel.queue_declare(queue=queue_name, passive=True)
        check_reply(reply, context)

        with translate_errors(context):
            self._deliveries = channel.consume(
                queue_name,
                auto_ack=auto_ack,
                exclusive=False,
                inactivity_timeout=inactivity_timeout,
            )

        self.queue_name = queue_name
        self.state = ConsumerState.CONSUMING
        self.logger.info("Started consuming from %s on channel %s", queue_name, self.channel_id)

    def consume_one(self) -> Optional[Envelope]:
        """Block until the next delivery arrives and return it.

        Returns ``None`` only when an inactivity timeout was requested and
        elapsed.
        """
        context = "Consuming"
        if self.state is not ConsumerState.CONSUMING or self._deliveries is None:
            raise self._wrong_state(context)

        self.current = None
        try:
            self.connection.channel(self.channel_id, context)
            with translate_errors(context):
                delivery = next(self._deliveries, None)
        except SessionError as exc:
            self._terminate(context, exc)
            raise

        if delivery is None:
            # The codec ends the delivery sequence when the broker cancels the consumer.
            self._terminate(context)
            raise BrokerChannelError(context, None, CONSUMER_CANCELLED_TEXT)

        method, properties, body = delivery
        if method is None:
            return None

        envelope = Envelope.from_delivery(method, properties, body)
        self.current = envelope
        self.logger.debug(
            "Delivery %s from exchange '%s' with routing key '%s'",
            envelope.delivery_tag,
            envelope.exchange,
            envelope.routing_key,
        )
        return envelope

    def ack(self, envelope: Envelope) -> None:
        context = "Acknowledging delivery"
        channel = self.connection.channel(self.channel_id, context)
        with translate_errors(context):
            channel.basic_ack(delivery_tag=envelope.delivery_tag)

    def cancel(self) -> int:
        """Stop consuming; returns the number of deliveries handed back to the queue."""
        context = "Cancelling consumer"
        if self.state is not ConsumerState.CONSUMING:
            raise self._wrong_state(context)

        try:
            channel = self.connection.channel(self.channel_id, context)
            with translate_errors(context):
                requeued: int = channel.cancel()
        finally:
            self._terminate(context)
        return requeued

    def __iter__(self) -> Iterator[Envelope]:
        while True:
            envelope = self.consume_one()
            if envelope is not None:
                yield envelope

    def _terminate(self, context: str, error: Optional[SessionError] = None) -> None:
        self.state = ConsumerState.TERMINATED
        self.current = None
        self._deliveries = None
        if error is None:
            self.logger.info("%s: consumer on %s terminated", context, self.queue_name)
        else:
            self.logger.info("Consumer on %s terminated: %s", self.queue_name, error)

    def _wrong_state(self, context: str) -> LibraryError:
        return LibraryError(context, "ConsumerWrongStateError", f"consumer is {self.state.value}")
