"""Maps raw codec outcomes onto the fixed set of session error kinds."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator, List, Optional

from pika import exceptions as pika_exceptions
from pika.adapters.utils.connection_workflow import (
    AMQPConnectorSocketConnectError,
    AMQPConnectorStackTimeout,
    AMQPConnectorTransportSetupError,
)

from broker_session.errors import (
    BrokerChannelError,
    BrokerConnectionError,
    ErrorKind,
    LibraryError,
    MissingReply,
    SessionError,
    TransportError,
    UnknownServerError,
)

from .method_ids import CHANNEL_CLOSE, CONNECTION_CLOSE, method_name

ACCESS_REFUSED = 403
CONSUMER_CANCELLED_TEXT = "consumer cancelled by broker"

#: Exceptions the codec raises for protocol, socket and argument failures.
CODEC_ERRORS = (pika_exceptions.AMQPError, OSError, ValueError)

_AUTH_ERRORS = (
    pika_exceptions.AuthenticationError,
    pika_exceptions.ProbableAuthenticationError,
    pika_exceptions.ProbableAccessDeniedError,
)
_TRANSPORT_ERRORS = (
    OSError,
    pika_exceptions.StreamLostError,
    pika_exceptions.AMQPHeartbeatTimeout,
    AMQPConnectorSocketConnectError,
    AMQPConnectorTransportSetupError,
    AMQPConnectorStackTimeout,
)


@dataclass(frozen=True)
class Outcome:
    """Result of classifying one codec outcome."""

    kind: ErrorKind
    errno: Optional[int] = None
    library_code: str = ""
    reply_code: Optional[int] = None
    reply_text: str = ""
    method_id: Optional[int] = None
    reason: str = ""

    @property
    def ok(self) -> bool:
        return self.kind is ErrorKind.OK

    def to_error(self, context: str) -> SessionError:
        """Build the exception describing this outcome for ``context``."""
        if self.kind is ErrorKind.TRANSPORT:
            return TransportError(context, self.errno, self.reason)
        if self.kind is ErrorKind.LIBRARY:
            return LibraryError(context, self.library_code, self.reason)
        if self.kind is ErrorKind.BROKER_CONNECTION:
            return BrokerConnectionError(context, self.reply_code or 0, self.reply_text)
        if self.kind is ErrorKind.BROKER_CHANNEL:
            return BrokerChannelError(context, self.reply_code, self.reply_text)
        if self.kind is ErrorKind.UNKNOWN_SERVER:
            method_id = self.method_id or 0
            return UnknownServerError(context, method_id, method_name(method_id))
        if self.kind is ErrorKind.MISSING_REPLY:
            return MissingReply(context)
        raise ValueError(f"{context}: outcome is not an error")


OK = Outcome(ErrorKind.OK)


def classify(outcome: Any) -> Outcome:
    """Classify a codec exception, a reply record, or ``None`` (no reply)."""
    if outcome is None:
        return Outcome(ErrorKind.MISSING_REPLY)
    if not isinstance(outcome, BaseException):
        return OK

    chain = _exception_chain(outcome)

    # The outermost exception decides first; wrapped ones only when it says nothing.
    for candidates in ([outcome], chain[1:]):
        for exc in candidates:
            broker_outcome = _classify_broker(exc)
            if broker_outcome is not None:
                return broker_outcome
        if any(isinstance(exc, _TRANSPORT_ERRORS) for exc in candidates):
            return Outcome(
                ErrorKind.TRANSPORT,
                errno=_find_errno(chain),
                reason=_describe(outcome),
            )

    return Outcome(
        ErrorKind.LIBRARY,
        library_code=type(outcome).__name__,
        reason=_describe(outcome),
    )


def check_reply(reply: Any, context: str) -> Any:
    """Return ``reply`` unchanged, raising the classified error when it is absent."""
    outcome = classify(reply)
    if not outcome.ok:
        raise outcome.to_error(context)
    return reply


@contextmanager
def translate_errors(context: str) -> Iterator[None]:
    """Re-raise codec failures inside the block as classified session errors."""
    try:
        yield
    except CODEC_ERRORS as exc:
        raise classify(exc).to_error(context) from exc


def _classify_broker(exc: BaseException) -> Optional[Outcome]:
    if isinstance(exc, pika_exceptions.ChannelClosedByBroker):
        return Outcome(
            ErrorKind.BROKER_CHANNEL,
            reply_code=exc.reply_code,
            reply_text=exc.reply_text,
        )
    if isinstance(exc, pika_exceptions.ConnectionClosedByBroker):
        return Outcome(
            ErrorKind.BROKER_CONNECTION,
            reply_code=exc.reply_code,
            reply_text=exc.reply_text,
        )
    if isinstance(exc, pika_exceptions.ConsumerCancelled):
        return Outcome(ErrorKind.BROKER_CHANNEL, reply_text=CONSUMER_CANCELLED_TEXT)
    if isinstance(exc, _AUTH_ERRORS):
        return Outcome(
            ErrorKind.BROKER_CONNECTION,
            reply_code=ACCESS_REFUSED,
            reply_text=_describe(exc),
        )
    if isinstance(exc, pika_exceptions.UnexpectedFrameError):
        return _classify_unexpected_method(exc)
    return None


def _classify_unexpected_method(exc: BaseException) -> Optional[Outcome]:
    for arg in exc.args:
        method = getattr(arg, "method", None)
        index = getattr(method, "INDEX", None)
        if not isinstance(index, int):
            continue
        if index == CONNECTION_CLOSE:
            return Outcome(
                ErrorKind.BROKER_CONNECTION,
                reply_code=getattr(method, "reply_code", 0),
                reply_text=getattr(method, "reply_text", ""),
            )
        if index == CHANNEL_CLOSE:
            return Outcome(
                ErrorKind.BROKER_CHANNEL,
                reply_code=getattr(method, "reply_code", 0),
                reply_text=getattr(method, "reply_text", ""),
            )
        return Outcome(ErrorKind.UNKNOWN_SERVER, method_id=index)
    return None


def _exception_chain(exc: BaseException) -> List[BaseException]:
    """Flatten ``exc`` with the exceptions it wraps, outermost first.

    The codec nests connect failures in ``args``, in ``exception``/``exceptions``
    attributes of its connector errors, and in the usual ``__cause__`` chain.
    ``__context__`` is not followed: an exception raised while another one was
    being handled is unrelated to it.
    """
    chain: List[BaseException] = []
    pending: List[BaseException] = [exc]
    while pending:
        current = pending.pop(0)
        if any(current is seen for seen in chain):
            continue
        chain.append(current)
        nested: List[Any] = list(current.args)
        nested.append(getattr(current, "exception", None))
        nested.extend(getattr(current, "exceptions", None) or ())
        nested.append(current.__cause__)
        pending.extend(item for item in nested if isinstance(item, BaseException))
    return chain


def _find_errno(chain: List[BaseException]) -> Optional[int]:
    for exc in chain:
        if isinstance(exc, OSError) and exc.errno is not None:
            return exc.errno
    return None


def _describe(exc: BaseException) -> str:
    return str(exc) or repr(exc)
