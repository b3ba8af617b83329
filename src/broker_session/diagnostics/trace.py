"""Human-readable trace of a received delivery."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .hexdump import hexdump

if TYPE_CHECKING:
    from broker_session.consumer.envelope import Envelope


def render_envelope(envelope: Envelope) -> str:
    lines = [
        f"Delivery {envelope.delivery_tag}, "
        f"exchange {envelope.exchange} routingkey {envelope.routing_key}"
    ]
    if envelope.content_type is not None:
        lines.append(f"Content-type: {envelope.content_type}")
    lines.append("----")
    return "\n".join(lines) + "\n" + hexdump(envelope.body)
