"""Content model records produced by the content parsers."""

from dataclasses import dataclass
from enum import Enum

from ..errors import UrlParseError
from ..registry import Protocol
from ..url import Url


class GemtextLineType(Enum):
    TEXT = "text"
    LINK = "link"
    HEADING1 = "heading1"
    HEADING2 = "heading2"
    HEADING3 = "heading3"
    LIST = "list"
    QUOTE = "quote"
    PREFORMAT_TOGGLE = "preformat_toggle"
    PREFORMATTED = "preformatted"
    PROMPT = "prompt"


@dataclass(frozen=True)
class GemtextLine:
    """One typed gemtext line."""

    kind: GemtextLineType
    text: str
    target: str | None = None

    @property
    def preformatted(self) -> bool:
        return self.kind == GemtextLineType.PREFORMATTED

    @property
    def is_link(self) -> bool:
        return self.kind in (GemtextLineType.LINK, GemtextLineType.PROMPT)


class GopherItemType(Enum):
    """Gopher item types keyed by their type character."""

    TEXT = "0"
    SUBMENU = "1"
    CCSO_NAMESERVER = "2"
    ERROR = "3"
    BINHEX_FILE = "4"
    DOS_FILE = "5"
    UUENCODED_FILE = "6"
    SEARCH = "7"
    TELNET = "8"
    BINARY_FILE = "9"
    MIRROR = "+"
    GIF_FILE = "g"
    IMAGE_FILE = "I"
    TELNET_3270 = "T"
    BITMAP_IMAGE = ":"
    MOVIE_FILE = ";"
    SOUND_FILE = "<"
    DOCUMENT = "d"
    HTML = "h"
    INFORMATIONAL = "i"
    PNG_FILE = "p"
    RTF_FILE = "r"
    SOUND = "s"
    PDF_FILE = "t"
    XML_FILE = "x"
    UNKNOWN = "?"

    @classmethod
    def from_char(cls, char: str) -> "GopherItemType":
        try:
            return cls(char)
        except ValueError:
            return cls.UNKNOWN

    @property
    def icon(self) -> str:
        return _GOPHER_ICONS.get(self, " ")


_GOPHER_ICONS = {
    GopherItemType.TEXT: "🖹",
    GopherItemType.SUBMENU: "🗁",
    GopherItemType.CCSO_NAMESERVER: "📞",
    GopherItemType.ERROR: "⚠",
    GopherItemType.SEARCH: "🔍",
    GopherItemType.HTML: "🌐",
}


@dataclass(frozen=True)
class GopherLine:
    """One gophermap line."""

    item_type: GopherItemType
    display: str
    selector: str = ""
    host: str = ""
    port: int = 70
    is_link: bool = False

    @property
    def is_search(self) -> bool:
        return self.item_type == GopherItemType.SEARCH

    def url(self, secure: bool = False) -> str:
        """URL of the item this line points at."""
        scheme = "gophers" if secure else "gopher"
        port = f":{self.port}" if self.port != 70 else ""
        selector = self.selector if self.selector.startswith("/") else f"/{self.selector}"
        return f"{scheme}://{self.host}{port}{selector}"


class ScorpionBlockType(Enum):
    PARAGRAPH = 0x00
    HEADING1 = 0x01
    HEADING2 = 0x02
    HEADING3 = 0x03
    HEADING4 = 0x04
    HEADING5 = 0x05
    HEADING6 = 0x06
    HYPERLINK = 0x08
    HYPERLINK_INPUT = 0x09
    HYPERLINK_INTERACTIVE = 0x0A
    ALTERNATE_SERVICE = 0x0B
    BLOCKQUOTE = 0x0C
    PREFORMATTED = 0x0D
    METADATA = 0x0F

    @classmethod
    def from_nibble(cls, value: int) -> "ScorpionBlockType":
        try:
            return cls(value)
        except ValueError:
            return cls.PARAGRAPH

    @property
    def is_link(self) -> bool:
        return self in (
            ScorpionBlockType.HYPERLINK,
            ScorpionBlockType.HYPERLINK_INPUT,
            ScorpionBlockType.HYPERLINK_INTERACTIVE,
            ScorpionBlockType.ALTERNATE_SERVICE,
        )


class CharacterEncoding(Enum):
    TRON8 = 0x00
    PC = 0x10
    ISO2022 = 0x20
    TRON8_RTL = 0x80
    ISO2022_RTL = 0xA0

    @classmethod
    def from_nibble(cls, value: int) -> "CharacterEncoding":
        try:
            return cls(value)
        except ValueError:
            return cls.TRON8


@dataclass(frozen=True)
class ScorpionBlock:
    """One decoded Scorpion block."""

    block_type: ScorpionBlockType
    attribute: str
    body: str
    encoding: CharacterEncoding = CharacterEncoding.TRON8
    plaintext: bool = False

    def target(self, base: Url) -> str:
        """Resolve a hyperlink's attribute against the page URL."""
        if "://" in self.attribute:
            return self.attribute
        try:
            return str(base.join(self.attribute))
        except UrlParseError:
            # Host-less URIs such as mailto: are kept as written
            return self.attribute


@dataclass(frozen=True)
class NexLine:
    """One Nex line: literal text or a link."""

    text: str
    is_link: bool = False
    target: str | None = None
    label: str | None = None


@dataclass(frozen=True)
class TextBlock:
    """A literal block of text, shown verbatim."""

    text: str


@dataclass(frozen=True)
class Page:
    """Parsed content of one document."""

    url: Url | None
    protocol: Protocol
    items: tuple

    @property
    def text(self) -> str:
        """Plain text projection of the page, one item per line."""
        parts = []
        for item in self.items:
            if isinstance(item, GopherLine):
                parts.append(item.display)
            elif isinstance(item, ScorpionBlock):
                parts.append(item.body)
            else:
                parts.append(item.text)
        return "\n".join(parts)
