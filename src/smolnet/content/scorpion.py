"""Scorpion binary block decoder.

Each block is laid out as::

    1 byte   high nibble: character encoding, low nibble: block type
    2 bytes  attribute length (big-endian)
    n bytes  attribute data (link target or metadata)
    3 bytes  body length (big-endian)
    m bytes  body data
"""

import logging
import warnings

from ..errors import TruncatedWireFormat
from .model import CharacterEncoding, ScorpionBlock, ScorpionBlockType

logger = logging.getLogger(__name__)

HEADER_SIZE = 6

# Formatting control codes that carry no printable text
_IGNORED = frozenset(
    [0x02, 0x05, 0x06, 0x07, 0x1B, 0x8E, 0x8F, *range(0x11, 0x1A)]
)
_PREFORMATTED_ONLY = frozenset([0x09, 0x0A])
GRAPHIC_ESCAPE = 0x10

# Code page 437 glyphs for the C0 range and DEL, used by the 0x10 escape
_CP437_GRAPHICS = (
    "\x00☺☻♥♦♣♠•◘○◙♂♀♪♫☼"
    "►◄↕‼¶§▬↨↑↓→←∟↔▲▼"
)


def _cp437_graphic(value: int) -> str:
    if value < 0x20:
        return _CP437_GRAPHICS[value]
    if value == 0x7F:
        return "⌂"
    return bytes([value]).decode("cp437")


def decode_body(data: bytes, encoding: CharacterEncoding, preformatted: bool = False) -> str:
    """Decode block body bytes to text."""
    out = []
    pc = encoding == CharacterEncoding.PC
    offset = 0
    while offset < len(data):
        byte = data[offset]
        if byte == GRAPHIC_ESCAPE:
            if pc and offset + 1 < len(data):
                out.append(_cp437_graphic((data[offset + 1] - 0x40) & 0xFF))
                offset += 1
        elif byte in _PREFORMATTED_ONLY:
            if preformatted:
                out.append(chr(byte))
        elif byte in _IGNORED:
            pass
        elif pc:
            out.append(bytes([byte]).decode("cp437"))
        else:
            out.append(chr(byte))
        offset += 1
    return "".join(out)


def _truncated(offset: int, total: int) -> None:
    message = f"Scorpion block stream truncated at byte {offset} of {total}"
    logger.warning(message)
    warnings.warn(message, TruncatedWireFormat, stacklevel=3)


def parse_scorpion(data: bytes, plaintext: bool = False) -> tuple[ScorpionBlock, ...]:
    """Decode a Scorpion block stream.

    Decoding stops at the first incomplete block; the blocks decoded so far
    are returned and a TruncatedWireFormat warning is issued.
    """
    if plaintext:
        return (
            ScorpionBlock(
                block_type=ScorpionBlockType.PARAGRAPH,
                attribute="",
                body=data.decode("utf-8", errors="replace"),
                plaintext=True,
            ),
        )

    blocks = []
    offset = 0
    total = len(data)
    while offset < total:
        if offset + HEADER_SIZE > total:
            _truncated(offset, total)
            break

        start = offset
        kind = ScorpionBlockType.from_nibble(data[offset] & 0x0F)
        encoding = CharacterEncoding.from_nibble(data[offset] & 0xF0)
        offset += 1

        attribute_length = int.from_bytes(data[offset:offset + 2], "big")
        offset += 2
        if offset + attribute_length + 3 > total:
            _truncated(start, total)
            break
        attribute = data[offset:offset + attribute_length]
        offset += attribute_length

        body_length = int.from_bytes(data[offset:offset + 3], "big")
        offset += 3
        if offset + body_length > total:
            _truncated(start, total)
            break
        body = data[offset:offset + body_length]
        offset += body_length

        blocks.append(
            ScorpionBlock(
                block_type=kind,
                attribute=attribute.decode("utf-8", errors="replace"),
                body=decode_body(body, encoding, kind == ScorpionBlockType.PREFORMATTED),
                encoding=encoding,
            )
        )

    return tuple(blocks)
