"""Delivery mode property of a published message."""

from enum import IntEnum


class DeliveryMode(IntEnum):
    """Whether the broker must keep the message across a restart."""

    NON_PERSISTENT = 1
    PERSISTENT = 2
