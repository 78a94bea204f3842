"""Gemtext parser shared by Gemini, Spartan, Guppy and Scroll."""

from .lines import split_lines
from .model import GemtextLine, GemtextLineType

END_OF_BODY = "."

_PREFIXES = (
    ("=>", GemtextLineType.LINK),
    ("###", GemtextLineType.HEADING3),
    ("##", GemtextLineType.HEADING2),
    ("#", GemtextLineType.HEADING1),
    (">", GemtextLineType.QUOTE),
    ("```", GemtextLineType.PREFORMAT_TOGGLE),
    ("*", GemtextLineType.LIST),
    ("=:", GemtextLineType.PROMPT),
)


def line_type(line: str) -> GemtextLineType:
    """Classify a line by its prefix."""
    for prefix, kind in _PREFIXES:
        if line.startswith(prefix):
            return kind
    return GemtextLineType.TEXT


def _split_link(rest: str) -> tuple[str, str]:
    """Split link content into (target, label); the label defaults to the target."""
    rest = rest.strip()
    parts = rest.split(None, 1)
    if len(parts) == 2:
        return parts[0], parts[1].strip()
    return rest, rest


def parse_gemtext(body: str, plaintext: bool = False) -> tuple[GemtextLine, ...]:
    """Parse a gemtext body into typed lines."""
    lines = [line for line in split_lines(body) if line != END_OF_BODY]

    if plaintext:
        return (GemtextLine(GemtextLineType.TEXT, "\n".join(lines)),)

    parsed = []
    preformatted = False
    for line in lines:
        kind = line_type(line)

        if kind == GemtextLineType.PREFORMAT_TOGGLE:
            preformatted = not preformatted
            parsed.append(GemtextLine(kind, line[3:].strip()))
        elif preformatted:
            parsed.append(GemtextLine(GemtextLineType.PREFORMATTED, line))
        elif kind in (GemtextLineType.LINK, GemtextLineType.PROMPT):
            target, label = _split_link(line[2:])
            parsed.append(GemtextLine(kind, label, target))
        elif kind == GemtextLineType.HEADING3:
            parsed.append(GemtextLine(kind, line[3:].strip()))
        elif kind == GemtextLineType.HEADING2:
            parsed.append(GemtextLine(kind, line[2:].strip()))
        elif kind in (GemtextLineType.HEADING1, GemtextLineType.QUOTE, GemtextLineType.LIST):
            parsed.append(GemtextLine(kind, line[1:].strip()))
        else:
            parsed.append(GemtextLine(kind, line))

    return tuple(parsed)
