"""In-memory stand-in for a broker reached through pika's blocking adapter."""

import errno
import itertools
from collections import deque
from typing import Any, Callable, Deque, Dict, List, Tuple

import pika
import pytest

from broker_session.connection import BrokerConfig, BrokerConnection

Message = Tuple[str, str, Any, bytes]


class FakeBroker:
    """Exchanges, queues and bindings of a single virtual host.

    Routing covers the default exchange, direct and fanout exchanges; topic
    exchanges match routing keys exactly.
    """

    def __init__(self) -> None:
        self.users = {"guest": "guest"}
        self.exchanges: Dict[str, str] = {
            "": "direct",
            "amq.direct": "direct",
            "amq.fanout": "fanout",
            "amq.topic": "topic",
        }
        self.queues: Dict[str, Deque[Message]] = {}
        self.bindings: List[Tuple[str, str, str]] = []
        self.connections: List["FakeBlockingConnection"] = []
        self.refuse_connections = False
        self._generated_names = itertools.count(1)

    def connect(self, parameters: pika.ConnectionParameters) -> "FakeBlockingConnection":
        if self.refuse_connections:
            raise pika.exceptions.AMQPConnectionError(
                ConnectionRefusedError(errno.ECONNREFUSED, "Connection refused")
            )
        credentials = parameters.credentials
        if self.users.get(credentials.username) != credentials.password:
            raise pika.exceptions.ProbableAuthenticationError(
                "ACCESS_REFUSED - Login was refused using authentication mechanism PLAIN"
            )
        connection = FakeBlockingConnection(self)
        self.connections.append(connection)
        return connection

    def generate_queue_name(self) -> str:
        return f"amq.gen-{next(self._generated_names):06d}"

    def route(self, exchange: str, routing_key: str) -> List[str]:
        if exchange == "":
            return [routing_key] if routing_key in self.queues else []
        fanout = self.exchanges[exchange] == "fanout"
        return [
            queue
            for bound_exchange, binding_key, queue in self.bindings
            if bound_exchange == exchange and (fanout or binding_key == routing_key)
        ]


class FakeBlockingConnection:
    def __init__(self, broker: FakeBroker) -> None:
        self.broker = broker
        self.is_closed = False
        self.channels: Dict[int, FakeChannel] = {}
        self.pending_returns: List[Tuple[Callable[..., None], Tuple[Any, ...]]] = []

    @property
    def is_open(self) -> bool:
        return not self.is_closed

    def channel(self, channel_number: int) -> "FakeChannel":
        existing = self.channels.get(channel_number)
        if existing is not None and existing.is_open:
            self.is_closed = True
            raise pika.exceptions.ConnectionClosedByBroker(
                504, "CHANNEL_ERROR - second 'channel.open' seen"
            )
        channel = FakeChannel(self, channel_number)
        self.channels[channel_number] = channel
        return channel

    def process_data_events(self, time_limit: float = 0) -> None:
        pending, self.pending_returns = self.pending_returns, []
        for callback, args in pending:
            callback(*args)

    def close(self, reply_code: int = 200, reply_text: str = "Normal shutdown") -> None:
        if self.is_closed:
            raise pika.exceptions.ConnectionWrongStateError("Connection is closed.")
        for channel in self.channels.values():
            channel.is_closed = True
        self.is_closed = True


class FakeChannel:
    def __init__(self, connection: FakeBlockingConnection, channel_number: int) -> None:
        self.connection = connection
        self.broker = connection.broker
        self.channel_number = channel_number
        self.is_closed = False
        self.published: List[Message] = []
        self.unacked: Dict[int, Tuple[str, Message]] = {}
        self._return_callbacks: List[Callable[..., None]] = []
        self._delivery_tags = itertools.count(1)

    @property
    def is_open(self) -> bool:
        return not self.is_closed

    def close(self, reply_code: int = 0, reply_text: str = "Normal shutdown") -> None:
        self._ensure_open()
        self.is_closed = True

    def exchange_declare(
        self,
        exchange: str,
        exchange_type: str = "direct",
        passive: bool = False,
        durable: bool = False,
        auto_delete: bool = False,
        internal: bool = False,
        arguments: Any = None,
    ) -> pika.frame.Method:
        self._ensure_open()
        existing = self.broker.exchanges.get(exchange)
        if existing is not None and existing != exchange_type:
            self._close_by_broker(
                406,
                f"PRECONDITION_FAILED - inequivalent arg 'type' for exchange '{exchange}'"
                " in vhost '/'",
            )
        self.broker.exchanges[exchange] = exchange_type
        return pika.frame.Method(self.channel_number, pika.spec.Exchange.DeclareOk())

    def queue_declare(
        self,
        queue: str,
        passive: bool = False,
        durable: bool = False,
        exclusive: bool = False,
        auto_delete: bool = False,
        arguments: Any = None,
    ) -> pika.frame.Method:
        self._ensure_open()
        if passive:
            self._require_queue(queue)
        else:
            queue = queue or self.broker.generate_queue_name()
            self.broker.queues.setdefault(queue, deque())
        return pika.frame.Method(
            self.channel_number,
            pika.spec.Queue.DeclareOk(
                queue=queue, message_count=len(self.broker.queues[queue]), consumer_count=0
            ),
        )

    def queue_bind(
        self, queue: str, exchange: str, routing_key: Any = None, arguments: Any = None
    ) -> pika.frame.Method:
        self._ensure_open()
        self._require_exchange(exchange)
        self._require_queue(queue)
        binding = (exchange, queue if routing_key is None else routing_key, queue)
        if binding not in self.broker.bindings:
            self.broker.bindings.append(binding)
        return pika.frame.Method(self.channel_number, pika.spec.Queue.BindOk())

    def basic_publish(
        self,
        exchange: str,
        routing_key: str,
        body: bytes,
        properties: Any = None,
        mandatory: bool = False,
    ) -> None:
        self._ensure_open()
        self._require_exchange(exchange)
        message = (exchange, routing_key, properties, bytes(body))
        self.published.append(message)

        queues = self.broker.route(exchange, routing_key)
        for queue in queues:
            self.broker.queues[queue].append(message)
        if not queues and mandatory:
            method = pika.spec.Basic.Return(
                reply_code=312, reply_text="NO_ROUTE", exchange=exchange, routing_key=routing_key
            )
            for callback in self._return_callbacks:
                self.connection.pending_returns.append(
                    (callback, (self, method, properties, bytes(body)))
                )

    def add_on_return_callback(self, callback: Callable[..., None]) -> None:
        self._return_callbacks.append(callback)

    def consume(
        self,
        queue: str,
        auto_ack: bool = False,
        exclusive: bool = False,
        arguments: Any = None,
        inactivity_timeout: Any = None,
    ):
        """Deliver queued messages.

        With nothing queued and no inactivity timeout, nothing else could
        publish while a test blocks here, so the consumer is cancelled instead.
        """
        self._ensure_open()
        self._require_queue(queue)
        messages = self.broker.queues[queue]
        while not self.is_closed:
            if messages:
                message = messages.popleft()
                exchange, routing_key, properties, body = message
                tag = next(self._delivery_tags)
                if not auto_ack:
                    self.unacked[tag] = (queue, message)
                method = pika.spec.Basic.Deliver(
                    consumer_tag="ctag1.0",
                    delivery_tag=tag,
                    redelivered=False,
                    exchange=exchange,
                    routing_key=routing_key,
                )
                yield method, properties or pika.BasicProperties(), body
            elif inactivity_timeout is not None:
                yield None, None, None
            else:
                return

    def basic_ack(self, delivery_tag: int = 0, multiple: bool = False) -> None:
        self._ensure_open()
        self.unacked.pop(delivery_tag, None)

    def cancel(self) -> int:
        requeued = 0
        for queue, message in reversed(list(self.unacked.values())):
            self.broker.queues[queue].appendleft(message)
            requeued += 1
        self.unacked.clear()
        return requeued

    def _ensure_open(self) -> None:
        if self.is_closed:
            raise pika.exceptions.ChannelWrongStateError("Channel is closed.")

    def _require_exchange(self, exchange: str) -> None:
        if exchange not in self.broker.exchanges:
            self._close_by_broker(404, f"NOT_FOUND - no exchange '{exchange}' in vhost '/'")

    def _require_queue(self, queue: str) -> None:
        if queue not in self.broker.queues:
            self._close_by_broker(404, f"NOT_FOUND - no queue '{queue}' in vhost '/'")

    def _close_by_broker(self, reply_code: int, reply_text: str) -> None:
        self.is_closed = True
        raise pika.exceptions.ChannelClosedByBroker(reply_code, reply_text)


@pytest.fixture
def broker():
    return FakeBroker()


@pytest.fixture
def connection(broker):
    connection = BrokerConnection(BrokerConfig(), connection_factory=broker.connect)
    connection.connect()
    yield connection
    if connection.is_open:
        connection.close()
