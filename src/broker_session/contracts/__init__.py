"""Contract interfaces for the broker session layer."""

from .broker_connection_interface import IBrokerConnection
from .message_publisher_interface import IMessagePublisher
from .topology_declarator_interface import ITopologyDeclarator

__all__ = [
    "IBrokerConnection",
    "IMessagePublisher",
    "ITopologyDeclarator",
]
