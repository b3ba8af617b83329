"""Configuration primitives for wiring a `BrokerSession`."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Optional

from broker_session.connection import BrokerConfig, BrokerConnection
from broker_session.contracts import IBrokerConnection, IMessagePublisher, ITopologyDeclarator
from broker_session.publisher import MessagePublisher
from broker_session.topology import TopologyDeclarator

DEFAULT_CHANNEL_ID = 1
DEFAULT_EXCHANGE = "amq.direct"
DEFAULT_ROUTING_KEY = "test"


@dataclass(frozen=True)
class SessionDependencies:
    """Bundles factory functions for session wiring."""

    make_connection: Callable[[Optional[str]], IBrokerConnection] = field(
        default=lambda rabbitmq_url: BrokerConnection(BrokerConfig.from_env(rabbitmq_url))
    )
    make_declarator: Callable[[IBrokerConnection], ITopologyDeclarator] = field(
        default=TopologyDeclarator
    )
    make_publisher: Callable[[IBrokerConnection], IMessagePublisher] = field(
        default=MessagePublisher
    )
