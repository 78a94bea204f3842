"""Nex directory parser."""

from .lines import split_lines
from .model import NexLine

LINK_PREFIX = "=> "


def parse_nex_line(line: str) -> NexLine:
    if not line.startswith(LINK_PREFIX):
        return NexLine(line)
    rest = line[len(LINK_PREFIX):].strip()
    parts = rest.split(None, 1)
    if not parts:
        return NexLine(line)
    target = parts[0]
    label = parts[1].strip() if len(parts) == 2 else target
    return NexLine(line, is_link=True, target=target, label=label)


def parse_nex(body: str, plaintext: bool = False) -> tuple[NexLine, ...]:
    if plaintext:
        return (NexLine(body),)
    return tuple(parse_nex_line(line) for line in split_lines(body))
