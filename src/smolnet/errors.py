"""Error types for the smolnet client core."""

from enum import Enum


class SmolnetError(Exception):
    """Base error for smolnet failures."""


class UrlParseError(SmolnetError):
    """The input could not be parsed into an absolute URL."""


class UnknownProtocol(SmolnetError):
    """The URL scheme does not name a supported protocol."""

    def __init__(self, scheme: str) -> None:
        super().__init__(f"Unsupported protocol: {scheme or '(none)'}")
        self.scheme = scheme


class TransportErrorKind(Enum):
    """Stage of the exchange at which a transport failure happened."""

    CONNECT = "connect"
    HANDSHAKE = "handshake"
    IO = "io"
    TIMEOUT = "timeout"


class TransportError(SmolnetError):
    """Network exchange with the server failed."""

    def __init__(self, kind: TransportErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message


class MalformedStatusLine(SmolnetError):
    """The server sent a status code outside the protocol's code space."""

    def __init__(self, protocol: str, line: str) -> None:
        super().__init__(f"Malformed {protocol} status line: {line!r}")
        self.protocol = protocol
        self.line = line


class IdentityError(SmolnetError):
    """A client identity could not be created, found or loaded."""


class TruncatedWireFormat(UserWarning):
    """A binary response ended in the middle of a block."""
