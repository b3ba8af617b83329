"""Static table of AMQP 0-9-1 method IDs the broker may send.

Keys are the 32-bit ``(class_id << 16) | method_id`` form, the same value the
codec exposes as ``method.INDEX``.
"""

from typing import Mapping

CONNECTION_CLOSE = 0x000A0032
CHANNEL_CLOSE = 0x00140028

METHOD_NAMES: Mapping[int, str] = {
    0x000A000A: "connection.start",
    0x000A0014: "connection.secure",
    0x000A001E: "connection.tune",
    0x000A0029: "connection.open-ok",
    CONNECTION_CLOSE: "connection.close",
    0x000A0033: "connection.close-ok",
    0x000A003C: "connection.blocked",
    0x000A003D: "connection.unblocked",
    0x0014000B: "channel.open-ok",
    0x00140014: "channel.flow",
    0x00140015: "channel.flow-ok",
    CHANNEL_CLOSE: "channel.close",
    0x00140029: "channel.close-ok",
    0x0028000B: "exchange.declare-ok",
    0x00280015: "exchange.delete-ok",
    0x0028001F: "exchange.bind-ok",
    0x00280033: "exchange.unbind-ok",
    0x0032000B: "queue.declare-ok",
    0x00320015: "queue.bind-ok",
    0x0032001F: "queue.purge-ok",
    0x00320029: "queue.delete-ok",
    0x00320033: "queue.unbind-ok",
    0x003C000B: "basic.qos-ok",
    0x003C0015: "basic.consume-ok",
    0x003C001E: "basic.cancel",
    0x003C001F: "basic.cancel-ok",
    0x003C0032: "basic.return",
    0x003C003C: "basic.deliver",
    0x003C0047: "basic.get-ok",
    0x003C0048: "basic.get-empty",
    0x003C0050: "basic.ack",
    0x003C006F: "basic.recover-ok",
    0x003C0078: "basic.nack",
    0x0055000B: "confirm.select-ok",
    0x005A000B: "tx.select-ok",
    0x005A0015: "tx.commit-ok",
    0x005A001F: "tx.rollback-ok",
}


def method_name(method_id: int) -> str:
    """Return the dotted method name, or an empty string for unknown IDs."""
    return METHOD_NAMES.get(method_id, "")
