"""A single received delivery."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class Envelope:
    """Body and routing metadata of one delivery.

    The body is copied out of the codec's buffer, so an envelope stays valid
    after the consumer has moved on to the next delivery.
    """

    body: bytes
    delivery_tag: int
    exchange: str
    routing_key: str
    content_type: Optional[str] = None
    redelivered: bool = False
    consumer_tag: str = ""

    @classmethod
    def from_delivery(cls, method: Any, properties: Any, body: bytes) -> Envelope:
        return cls(
            body=bytes(body),
            delivery_tag=method.delivery_tag,
            exchange=method.exchange or "",
            routing_key=method.routing_key or "",
            content_type=getattr(properties, "content_type", None),
            redelivered=bool(method.redelivered),
            consumer_tag=method.consumer_tag or "",
        )
