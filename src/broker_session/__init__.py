"""Blocking AMQP 0-9-1 client session layer on top of pika."""

from .channel import ChannelRegistry
from .classifier import Outcome, check_reply, classify, method_name
from .connection import BrokerConfig, BrokerConnection, ConnectionState
from .consumer import ConsumerState, Envelope, MessageConsumer, listen
from .contracts import IBrokerConnection, IMessagePublisher, ITopologyDeclarator
from .delivery_mode import DeliveryMode
from .diagnostics import hexdump, render_envelope
from .errors import (
    BrokerChannelError,
    BrokerConnectionError,
    ErrorKind,
    LibraryError,
    MissingReply,
    SessionError,
    TransportError,
    UnknownServerError,
)
from .publisher import MessagePublisher, ReturnedMessage
from .session import BrokerSession, SessionDependencies
from .topology import TopologyDeclarator

__all__ = [
    "BrokerChannelError",
    "BrokerConfig",
    "BrokerConnection",
    "BrokerConnectionError",
    "BrokerSession",
    "ChannelRegistry",
    "ConnectionState",
    "ConsumerState",
    "DeliveryMode",
    "Envelope",
    "ErrorKind",
    "IBrokerConnection",
    "IMessagePublisher",
    "ITopologyDeclarator",
    "LibraryError",
    "MessageConsumer",
    "MessagePublisher",
    "MissingReply",
    "Outcome",
    "ReturnedMessage",
    "SessionDependencies",
    "SessionError",
    "TopologyDeclarator",
    "TransportError",
    "UnknownServerError",
    "check_reply",
    "classify",
    "hexdump",
    "listen",
    "method_name",
    "render_envelope",
]
