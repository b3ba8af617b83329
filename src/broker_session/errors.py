"""Error kinds and the exceptions raised by the session layer."""

from __future__ import annotations

from enum import Enum
from typing import ClassVar, Optional


class ErrorKind(Enum):
    """Classification of a codec outcome."""

    OK = "ok"
    TRANSPORT = "transport"
    LIBRARY = "library"
    BROKER_CONNECTION = "broker-connection"
    BROKER_CHANNEL = "broker-channel"
    UNKNOWN_SERVER = "unknown-server"
    MISSING_REPLY = "missing-reply"


class SessionError(Exception):
    """Base class for every failure reported by the session layer.

    ``context`` names the operation that failed (for example "Opening channel"),
    ``detail`` carries the classified reason.
    """

    kind: ClassVar[ErrorKind]

    def __init__(self, context: str, detail: str) -> None:
        super().__init__(f"{context}: {detail}")
        self.context = context
        self.detail = detail


class TransportError(SessionError):
    """The socket could not be opened or the stream was lost."""

    kind = ErrorKind.TRANSPORT

    def __init__(self, context: str, code: Optional[int], reason: str) -> None:
        super().__init__(context, reason)
        self.code = code


class LibraryError(SessionError):
    """The codec failed locally, without the broker being involved."""

    kind = ErrorKind.LIBRARY

    def __init__(self, context: str, code: str, reason: str = "") -> None:
        super().__init__(context, f"{code}: {reason}" if reason else code)
        self.code = code


class BrokerConnectionError(SessionError):
    """The broker closed the whole connection."""

    kind = ErrorKind.BROKER_CONNECTION

    def __init__(self, context: str, reply_code: int, reply_text: str) -> None:
        super().__init__(
            context, f"server connection error {reply_code}, message: {reply_text}"
        )
        self.reply_code = reply_code
        self.reply_text = reply_text


class BrokerChannelError(SessionError):
    """The broker closed one channel, or cancelled a consumer on it.

    ``reply_code`` is ``None`` for a consumer cancel, which carries no code.
    """

    kind = ErrorKind.BROKER_CHANNEL

    def __init__(self, context: str, reply_code: Optional[int], reply_text: str) -> None:
        if reply_code is None:
            detail = f"server channel error, message: {reply_text}"
        else:
            detail = f"server channel error {reply_code}, message: {reply_text}"
        super().__init__(context, detail)
        self.reply_code = reply_code
        self.reply_text = reply_text


class UnknownServerError(SessionError):
    """The broker sent a method that is neither a connection nor a channel close."""

    kind = ErrorKind.UNKNOWN_SERVER

    def __init__(self, context: str, method_id: int, method_name: str = "") -> None:
        detail = f"unknown server error, method id 0x{method_id:08X}"
        if method_name:
            detail = f"{detail} ({method_name})"
        super().__init__(context, detail)
        self.method_id = method_id
        self.method_name = method_name


class MissingReply(SessionError):
    """The codec returned no reply record for a synchronous call."""

    kind = ErrorKind.MISSING_REPLY

    def __init__(self, context: str) -> None:
        super().__init__(context, "missing RPC reply type!")
