"""Gophermap parser."""

import logging

from .lines import split_lines
from .model import GopherItemType, GopherLine

logger = logging.getLogger(__name__)

END_OF_BODY = "."
DEFAULT_PORT = 70

_NOT_LINKS = (GopherItemType.INFORMATIONAL, GopherItemType.SEARCH)


def _parse_port(value: str) -> int:
    try:
        return int(value.strip())
    except ValueError:
        logger.debug("invalid gopher port %r, using %d", value, DEFAULT_PORT)
        return DEFAULT_PORT


def parse_gopher_line(line: str) -> GopherLine:
    """Parse one tab-delimited gophermap line."""
    fields = line[1:].split("\t")
    if not line or len(fields) == 1:
        return GopherLine(GopherItemType.INFORMATIONAL, line)

    item_type = GopherItemType.from_char(line[0])
    display = fields[0]
    selector = fields[1]
    host = fields[2] if len(fields) > 2 else ""
    port = _parse_port(fields[3]) if len(fields) > 3 else DEFAULT_PORT

    return GopherLine(
        item_type=item_type,
        display=display,
        selector=selector,
        host=host,
        port=port,
        is_link=item_type not in _NOT_LINKS,
    )


def parse_gopher(body: str, plaintext: bool = False) -> tuple[GopherLine, ...]:
    """Parse a gophermap body; lines after a lone "." are ignored."""
    lines = []
    for line in split_lines(body):
        if line == END_OF_BODY:
            break
        lines.append(line)

    if plaintext:
        return (GopherLine(GopherItemType.INFORMATIONAL, "\n".join(lines)),)

    return tuple(parse_gopher_line(line) for line in lines)
