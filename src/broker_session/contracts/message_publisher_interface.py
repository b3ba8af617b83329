"""Defines the contract for publishing messages."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Union

from broker_session.delivery_mode import DeliveryMode


class IMessagePublisher(ABC):
    """Publishes messages on a numbered channel."""

    @abstractmethod
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
        """Send one message without waiting for a broker acknowledgment."""
