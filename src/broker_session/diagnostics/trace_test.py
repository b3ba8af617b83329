"""Tests for delivery traces."""

from broker_session.consumer import Envelope
from broker_session.diagnostics import hexdump, render_envelope


def test_render_envelope_with_content_type():
    envelope = Envelope(
        body=b"hello",
        delivery_tag=3,
        exchange="amq.direct",
        routing_key="test",
        content_type="text/plain",
    )

    assert render_envelope(envelope) == (
        "Delivery 3, exchange amq.direct routingkey test\n"
        "Content-type: text/plain\n"
        "----\n" + hexdump(b"hello")
    )


def test_render_envelope_without_content_type():
    envelope = Envelope(body=b"", delivery_tag=1, exchange="", routing_key="jobs")

    assert render_envelope(envelope) == (
        "Delivery 1, exchange  routingkey jobs\n----\n00000000:\n"
    )
