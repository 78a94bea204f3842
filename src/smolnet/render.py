"""Plain terminal rendering of parsed pages with numbered links."""

from dataclasses import dataclass

from .content import (
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
from .registry import Protocol


@dataclass(frozen=True)
class LinkAction:
    """What selecting a numbered link does."""

    label: str
    target: str
    prompt: str | None = None
    plaintext: bool = False


_GEMTEXT_PREFIXES = {
    GemtextLineType.HEADING1: "# ",
    GemtextLineType.HEADING2: "## ",
    GemtextLineType.HEADING3: "### ",
    GemtextLineType.LIST: "• ",
    GemtextLineType.QUOTE: "| ",
}


def _gemtext(line: GemtextLine, links: list[LinkAction]) -> str | None:
    if line.kind == GemtextLineType.PREFORMAT_TOGGLE:
        return None
    if line.kind == GemtextLineType.LINK:
        links.append(LinkAction(line.text, line.target))
        return f"[{len(links)}] {line.text}"
    if line.kind == GemtextLineType.PROMPT:
        links.append(LinkAction(line.text, line.target, prompt=line.text))
        return f"[{len(links)}] {line.text} (input)"
    return _GEMTEXT_PREFIXES.get(line.kind, "") + line.text


def _gopher(line: GopherLine, links: list[LinkAction], secure: bool) -> str:
    if line.is_search:
        links.append(LinkAction(line.display, line.url(secure), prompt=line.display or "Search"))
        return f"{line.item_type.icon} [{len(links)}] {line.display} (search)"
    if line.is_link:
        plaintext = line.item_type == GopherItemType.TEXT
        links.append(LinkAction(line.display, line.url(secure), plaintext=plaintext))
        return f"{line.item_type.icon} [{len(links)}] {line.display}"
    return f"{line.item_type.icon} {line.display}"


def _scorpion(block: ScorpionBlock, links: list[LinkAction], page: Page) -> str | None:
    kind = block.block_type
    if block.plaintext:
        return block.body
    if kind == ScorpionBlockType.METADATA:
        return None
    if kind.is_link and page.url is not None:
        links.append(LinkAction(block.body or block.attribute, block.target(page.url)))
        return f"[{len(links)}] {block.body or block.attribute}"
    if ScorpionBlockType.HEADING1.value <= kind.value <= ScorpionBlockType.HEADING6.value:
        return "#" * kind.value + " " + block.body
    if kind == ScorpionBlockType.BLOCKQUOTE:
        return "| " + block.body
    return block.body


def _nex(line: NexLine, links: list[LinkAction]) -> str:
    if line.is_link:
        links.append(LinkAction(line.label, line.target))
        return f"[{len(links)}] {line.label}"
    return line.text


def render_page(page: Page) -> tuple[list[str], list[LinkAction]]:
    """Render a page to text lines and the list of its numbered links."""
    lines: list[str] = []
    links: list[LinkAction] = []
    secure = page.protocol == Protocol.GOPHERS

    for item in page.items:
        if isinstance(item, GemtextLine):
            rendered = _gemtext(item, links)
        elif isinstance(item, GopherLine):
            rendered = _gopher(item, links, secure)
        elif isinstance(item, ScorpionBlock):
            rendered = _scorpion(item, links, page)
        elif isinstance(item, NexLine):
            rendered = _nex(item, links)
        elif isinstance(item, TextBlock):
            rendered = item.text
        else:
            rendered = str(item)
        if rendered is not None:
            lines.append(rendered)

    return lines, links
