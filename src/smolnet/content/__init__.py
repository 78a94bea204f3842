"""Content parsers and their dispatch table."""

from ..registry import Protocol
from ..url import Url
from .gemtext import parse_gemtext
from .gopher import parse_gopher
from .model import (
    CharacterEncoding,
    GemtextLine,
    GemtextLineType,
    GopherItemType,
    GopherLine,
    NexLine,
    Page,
    ScorpionBlock,
    ScorpionBlockType,
    TextBlock,
)
from .nex import parse_nex
from .scorpion import parse_scorpion


def _decode(body: bytes) -> str:
    return body.decode("utf-8", errors="replace")


def parse_plaintext(body: bytes, plaintext: bool = True) -> tuple[TextBlock, ...]:
    """The whole body as one literal block."""
    return (TextBlock(_decode(body)),)


def _text(parser):
    """Adapt a str-based parser to take raw body bytes."""
    return lambda body, plaintext: parser(_decode(body), plaintext)


_PARSERS = {
    Protocol.GEMINI: _text(parse_gemtext),
    Protocol.SPARTAN: _text(parse_gemtext),
    Protocol.GUPPY: _text(parse_gemtext),
    Protocol.SCROLL: _text(parse_gemtext),
    Protocol.GOPHER: _text(parse_gopher),
    Protocol.GOPHERS: _text(parse_gopher),
    Protocol.NEX: _text(parse_nex),
    Protocol.SCORPION: parse_scorpion,
    Protocol.FINGER: parse_plaintext,
    Protocol.TEXT: parse_plaintext,
    Protocol.PLAINTEXT: parse_plaintext,
}


def parse_content(body: bytes, protocol: Protocol, plaintext: bool = False, url: Url | None = None) -> Page:
    """Parse a response body with the parser registered for its protocol."""
    parser = _PARSERS.get(protocol, parse_plaintext)
    return Page(url=url, protocol=protocol, items=parser(body, plaintext))


def plaintext_page(message: str, url: Url | None = None) -> Page:
    """A literal page used for diagnostics."""
    return Page(url=url, protocol=Protocol.PLAINTEXT, items=(TextBlock(message),))


__all__ = [
    "CharacterEncoding",
    "GemtextLine",
    "GemtextLineType",
    "GopherItemType",
    "GopherLine",
    "NexLine",
    "Page",
    "ScorpionBlock",
    "ScorpionBlockType",
    "TextBlock",
    "parse_content",
    "parse_gemtext",
    "parse_gopher",
    "parse_nex",
    "parse_plaintext",
    "parse_scorpion",
    "plaintext_page",
]
