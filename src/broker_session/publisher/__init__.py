"""Message publishing."""

from broker_session.delivery_mode import DeliveryMode

from .message_publisher import TEXT_PLAIN, MessagePublisher, ReturnedMessage, build_properties

__all__ = [
    "DeliveryMode",
    "MessagePublisher",
    "ReturnedMessage",
    "TEXT_PLAIN",
    "build_properties",
]
