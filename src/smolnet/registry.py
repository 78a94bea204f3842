"""Protocol registry: URL scheme classification and wire request building."""

from dataclasses import dataclass
from enum import Enum
from urllib.parse import unquote

from .errors import UnknownProtocol
from .url import Url

PLAINTEXT_EXTENSIONS = (".txt",)

CRLF = "\r\n"


class Protocol(Enum):
    """Protocols understood by the client core."""

    FINGER = "finger"
    GOPHER = "gopher"
    GOPHERS = "gophers"
    GEMINI = "gemini"
    GUPPY = "guppy"
    NEX = "nex"
    SCORPION = "scorpion"
    SCROLL = "scroll"
    SPARTAN = "spartan"
    TEXT = "text"
    # Navigation hint only: render the body as one literal block
    PLAINTEXT = "plaintext"
    UNKNOWN = "unknown"

    @property
    def is_gopher(self) -> bool:
        return self in (Protocol.GOPHER, Protocol.GOPHERS)

    @property
    def secure(self) -> bool:
        """Whether requests for this protocol are TLS-wrapped."""
        return self in (Protocol.GEMINI, Protocol.GOPHERS, Protocol.SCROLL)

    @property
    def default_port(self) -> int | None:
        return DEFAULT_PORTS.get(self)


DEFAULT_PORTS = {
    Protocol.FINGER: 79,
    Protocol.GEMINI: 1965,
    Protocol.GOPHER: 70,
    Protocol.GOPHERS: 70,
    Protocol.GUPPY: 6775,
    Protocol.NEX: 1900,
    Protocol.SCORPION: 1517,
    Protocol.SCROLL: 5699,
    Protocol.SPARTAN: 300,
    Protocol.TEXT: 1961,
}

_SCHEMES = {
    protocol.value: protocol
    for protocol in Protocol
    if protocol not in (Protocol.PLAINTEXT, Protocol.UNKNOWN)
}


@dataclass(frozen=True)
class Request:
    """Wire request for one fetch."""

    body: str
    secure: bool
    port: int
    plaintext: bool = False
    payload: bytes = b""

    def to_bytes(self) -> bytes:
        """Encode the request line, its CRLF terminator and any payload."""
        return (self.body + CRLF).encode("utf-8") + self.payload


def classify(url: Url | str) -> Protocol:
    """Map a URL (or bare scheme) to its protocol."""
    if isinstance(url, Url):
        scheme = url.scheme
    else:
        scheme = url.split(":", 1)[0]
    return _SCHEMES.get(scheme.lower(), Protocol.UNKNOWN)


def is_plaintext_path(path: str) -> bool:
    """Check if a path names a document that should be shown literally."""
    return path.lower().endswith(PLAINTEXT_EXTENSIONS)


def build_request(
    url: Url,
    protocol: Protocol,
    plaintext: bool = False,
    language: str = "en",
) -> Request:
    """Build the wire request for a URL.

    ``plaintext`` is forced on when the path has a plaintext extension; it
    never changes the bytes sent, only how the body is parsed.
    """
    if protocol not in DEFAULT_PORTS:
        raise UnknownProtocol(url.scheme)

    full_url = str(url)
    path = url.path or "/"
    port = url.port or DEFAULT_PORTS[protocol]
    plaintext = plaintext or is_plaintext_path(url.path)
    payload = b""

    if protocol == Protocol.FINGER:
        body = path.removeprefix("/")
    elif protocol in (Protocol.GEMINI, Protocol.GUPPY, Protocol.TEXT):
        body = full_url
    elif protocol.is_gopher:
        body = f"{path}\t{unquote(url.query)}" if url.query else path
    elif protocol == Protocol.NEX:
        body = path
    elif protocol == Protocol.SCORPION:
        body = f"R {full_url}"
    elif protocol == Protocol.SCROLL:
        body = f"{full_url} {language}"
    elif protocol == Protocol.SPARTAN:
        payload = unquote(url.query or "").encode("utf-8")
        body = f"{url.host} {path} {len(payload)}"
    else:
        raise UnknownProtocol(url.scheme)

    return Request(
        body=body,
        secure=protocol.secure,
        port=port,
        plaintext=plaintext,
        payload=payload,
    )
