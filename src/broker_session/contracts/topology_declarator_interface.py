"""Defines the contract for declaring broker topology."""

from __future__ import annotations

from abc import ABC, abstractmethod


class ITopologyDeclarator(ABC):
    """Declares exchanges, queues and bindings on an open channel."""

    @abstractmethod
    def declare_exchange(
        self,
        channel_id: int,
        name: str,
        exchange_type: str,
        *,
        durable: bool = False,
        auto_delete: bool = False,
    ) -> None:
        """Declare a non-passive, non-internal exchange."""

    @abstractmethod
    def declare_queue(
        self,
        channel_id: int,
        name: str = "",
        *,
        durable: bool = False,
        exclusive: bool = False,
        auto_delete: bool = False,
    ) -> str:
        """Declare a queue and return its name, generated by the broker when ``name`` is empty."""

    @abstractmethod
    def bind_queue(self, channel_id: int, queue: str, exchange: str, binding_key: str) -> None:
        """Route messages published to ``exchange`` with ``binding_key`` into ``queue``."""
