"""Consuming deliveries and tracing them."""

from .envelope import Envelope
from .listener import listen
from .message_consumer import ConsumerState, MessageConsumer

__all__ = ["ConsumerState", "Envelope", "MessageConsumer", "listen"]
