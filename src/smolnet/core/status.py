"""Response parser: status line split and per-protocol status taxonomies."""

import logging
from dataclasses import dataclass
from enum import Enum

from ..errors import MalformedStatusLine
from ..registry import Protocol

logger = logging.getLogger(__name__)


class StatusCategory(Enum):
    """What the navigation state machine should do with a status."""

    INPUT = "input"
    SUCCESS = "success"
    REDIRECT = "redirect"
    FAILURE = "failure"
    CERTIFICATE = "certificate"
    UNSUPPORTED = "unsupported"


class _StatusCode(Enum):
    """Status enum whose members carry their wire code and category."""

    def __init__(self, code: str, category: StatusCategory):
        self.code = code
        self.category = category

    @classmethod
    def from_code(cls, code: str):
        for member in cls:
            if member.code == code:
                return member
        return None


class GeminiStatus(_StatusCode):
    """Gemini (and Scroll) status codes."""

    INPUT_EXPECTED = ("10", StatusCategory.INPUT)
    SENSITIVE_INPUT = ("11", StatusCategory.INPUT)
    SUCCESS = ("20", StatusCategory.SUCCESS)
    TEMPORARY_REDIRECT = ("30", StatusCategory.REDIRECT)
    PERMANENT_REDIRECT = ("31", StatusCategory.REDIRECT)
    TEMPORARY_FAILURE = ("40", StatusCategory.FAILURE)
    SERVER_UNAVAILABLE = ("41", StatusCategory.FAILURE)
    CGI_ERROR = ("42", StatusCategory.FAILURE)
    PROXY_ERROR = ("43", StatusCategory.FAILURE)
    SLOW_DOWN = ("44", StatusCategory.FAILURE)
    PERMANENT_FAILURE = ("50", StatusCategory.FAILURE)
    NOT_FOUND = ("51", StatusCategory.FAILURE)
    GONE = ("52", StatusCategory.FAILURE)
    PROXY_REQUEST_REFUSED = ("53", StatusCategory.FAILURE)
    BAD_REQUEST = ("59", StatusCategory.FAILURE)
    CLIENT_CERTIFICATE_REQUIRED = ("60", StatusCategory.CERTIFICATE)
    CERTIFICATE_NOT_AUTHORIZED = ("61", StatusCategory.CERTIFICATE)
    CERTIFICATE_NOT_VALID = ("62", StatusCategory.CERTIFICATE)

    @classmethod
    def from_code(cls, code: str):
        # Scroll uses the whole 2x range for success variants
        if len(code) == 2 and code[0] == "2" and code[1].isdigit():
            return cls.SUCCESS
        return super().from_code(code)


class SpartanStatus(_StatusCode):
    """Spartan single-digit status codes."""

    SUCCESS = ("2", StatusCategory.SUCCESS)
    REDIRECT = ("3", StatusCategory.REDIRECT)
    CLIENT_ERROR = ("4", StatusCategory.FAILURE)
    SERVER_ERROR = ("5", StatusCategory.FAILURE)


class ScorpionStatus(_StatusCode):
    """Scorpion status codes."""

    INTERACTIVE = ("00", StatusCategory.UNSUPPORTED)
    INPUT_REQUIRED = ("10", StatusCategory.INPUT)
    OK = ("20", StatusCategory.SUCCESS)
    PARTIAL_OK = ("21", StatusCategory.SUCCESS)
    TEMPORARY_REDIRECT = ("30", StatusCategory.REDIRECT)
    PERMANENT_REDIRECT = ("31", StatusCategory.REDIRECT)
    TEMPORARY_ERROR = ("40", StatusCategory.FAILURE)
    DOWN_FOR_MAINTENANCE = ("41", StatusCategory.FAILURE)
    DYNAMIC_FILE_ERROR = ("42", StatusCategory.FAILURE)
    PROXY_ERROR = ("43", StatusCategory.FAILURE)
    SLOW_DOWN = ("44", StatusCategory.FAILURE)
    TEMPORARILY_LOCKED_FILE = ("45", StatusCategory.FAILURE)
    PERMANENT_ERROR = ("50", StatusCategory.FAILURE)
    FILE_NOT_FOUND = ("51", StatusCategory.FAILURE)
    FILE_REMOVED = ("52", StatusCategory.FAILURE)
    PROXY_REQUEST_REFUSED = ("53", StatusCategory.FAILURE)
    FORBIDDEN = ("54", StatusCategory.FAILURE)
    EDIT_CONFLICT = ("55", StatusCategory.FAILURE)
    CREDENTIALS_REQUIRED = ("56", StatusCategory.FAILURE)
    BAD_REQUEST = ("59", StatusCategory.FAILURE)
    CLIENT_CERTIFICATE_REQUIRED = ("60", StatusCategory.CERTIFICATE)
    CERTIFICATE_NOT_AUTHORIZED = ("61", StatusCategory.CERTIFICATE)
    CERTIFICATE_NOT_VALID = ("62", StatusCategory.CERTIFICATE)
    READY_NEW_FILE = ("70", StatusCategory.UNSUPPORTED)
    READY_MODIFY_FILE = ("71", StatusCategory.UNSUPPORTED)
    READY_OTHER = ("72", StatusCategory.UNSUPPORTED)
    ACCEPTED_NEW_FILE = ("80", StatusCategory.UNSUPPORTED)
    ACCEPTED_FILE_MODIFIED = ("81", StatusCategory.UNSUPPORTED)
    ACCEPTED_OTHER = ("82", StatusCategory.UNSUPPORTED)


class TextProtocolStatus(_StatusCode):
    """Text protocol status codes."""

    OK = ("20", StatusCategory.SUCCESS)
    REDIRECT = ("30", StatusCategory.REDIRECT)
    NOT_OK = ("40", StatusCategory.FAILURE)


class GuppyStatus(_StatusCode):
    """Guppy responses carry only a content type."""

    SUCCESS = ("", StatusCategory.SUCCESS)


class PlainStatus(_StatusCode):
    """Protocols without a status line (Finger, Gopher, Nex)."""

    SUCCESS = ("", StatusCategory.SUCCESS)


_STATUS_TABLES = {
    Protocol.GEMINI: GeminiStatus,
    Protocol.SCROLL: GeminiStatus,
    Protocol.SPARTAN: SpartanStatus,
    Protocol.SCORPION: ScorpionStatus,
    Protocol.TEXT: TextProtocolStatus,
}


@dataclass(frozen=True)
class ServerStatus:
    """A decoded status: the protocol-specific code plus its meta string."""

    code: _StatusCode
    meta: str = ""

    @property
    def category(self) -> StatusCategory:
        return self.code.category

    @property
    def sensitive(self) -> bool:
        """Whether requested input should be masked."""
        return self.code is GeminiStatus.SENSITIVE_INPUT


@dataclass(frozen=True)
class ServerResponse:
    """Raw response body with its decoded status."""

    content: bytes
    status: ServerStatus

    @property
    def text(self) -> str:
        """Decode content as UTF-8."""
        return self.content.decode("utf-8", errors="replace")


def split_status_line(raw: bytes) -> tuple[str, bytes]:
    """Split a response on its first newline into status line and body."""
    line, sep, body = raw.partition(b"\n")
    return line.decode("utf-8", errors="replace").rstrip("\r"), body


def parse_status(line: str, protocol: Protocol) -> ServerStatus:
    """Decode a status line for a protocol with a closed code space."""
    table = _STATUS_TABLES[protocol]
    code, _, meta = line.partition(" ")
    status = table.from_code(code.strip())
    if status is None:
        raise MalformedStatusLine(protocol.value, line)
    return ServerStatus(code=status, meta=meta.strip())


def parse_response(raw: bytes, protocol: Protocol) -> ServerResponse:
    """Parse raw response bytes into status and body."""
    if protocol == Protocol.GUPPY:
        content_type, body = split_status_line(raw)
        return ServerResponse(content=body, status=ServerStatus(GuppyStatus.SUCCESS, content_type))

    if protocol not in _STATUS_TABLES:
        return ServerResponse(content=raw, status=ServerStatus(PlainStatus.SUCCESS, "text/plain"))

    line, body = split_status_line(raw)
    status = parse_status(line, protocol)
    logger.debug("%s status %s %r", protocol.value, status.code.name, status.meta)
    return ServerResponse(content=body, status=status)
