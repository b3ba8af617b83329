"""Run-to-completion listener that traces every delivery of a queue."""

from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

from broker_session.contracts import IBrokerConnection, ITopologyDeclarator
from broker_session.diagnostics import render_envelope
from broker_session.errors import SessionError
from broker_session.topology import TopologyDeclarator

from .message_consumer import MessageConsumer


def listen(
    connection: IBrokerConnection,
    channel_id: int,
    queue_name: str,
    *,
    exchange: Optional[str] = None,
    binding_key: Optional[str] = None,
    stream: Optional[TextIO] = None,
    declarator: Optional[ITopologyDeclarator] = None,
    logger: Optional[logging.Logger] = None,
) -> SessionError:
    """Declare ``queue_name``, consume it and write a trace of each delivery.

    The queue is declared non-durable, non-exclusive and auto-deleted. When
    ``exchange`` is given the queue is bound to it first, with ``binding_key``
    defaulting to the queue name.

    Consuming only stops on an error, so this never returns normally: the
    error that ended it is logged and returned to the caller.
    """
    logger = logger or logging.getLogger(__name__)
    out = stream if stream is not None else sys.stdout
    declarator = declarator or TopologyDeclarator(connection, logger=logger)

    try:
        declared = declarator.declare_queue(
            channel_id, queue_name, durable=False, exclusive=False, auto_delete=True
        )
        if exchange is not None:
            key = binding_key if binding_key is not None else declared
            declarator.bind_queue(channel_id, declared, exchange, key)

        consumer = MessageConsumer(connection, channel_id, logger=logger)
        consumer.start(declared)
        logger.info("Listening on queue %s", declared)

        while True:
            envelope = consumer.consume_one()
            if envelope is None:
                continue
            out.write(render_envelope(envelope))
            out.flush()
    except SessionError as error:
        logger.error("Listener on %s stopped: %s", queue_name, error)
        return error
