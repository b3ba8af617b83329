"""Single-channel session facade."""

from .broker_session import BrokerSession
from .session_config import (
    DEFAULT_CHANNEL_ID,
    DEFAULT_EXCHANGE,
    DEFAULT_ROUTING_KEY,
    SessionDependencies,
)

__all__ = [
    "BrokerSession",
    "SessionDependencies",
    "DEFAULT_CHANNEL_ID",
    "DEFAULT_EXCHANGE",
    "DEFAULT_ROUTING_KEY",
]
