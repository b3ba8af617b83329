"""Broker connection management."""

from .broker_config import BrokerConfig
from .broker_connection import REPLY_SUCCESS, BrokerConnection, ConnectionState

__all__ = ["BrokerConfig", "BrokerConnection", "ConnectionState", "REPLY_SUCCESS"]
