"""Tests for the Scorpion block decoder."""

import warnings

import pytest

from smolnet.content import CharacterEncoding, ScorpionBlockType, parse_scorpion
from smolnet.errors import TruncatedWireFormat
from smolnet.url import Url


def block(type_byte: int, attribute: bytes = b"", body: bytes = b"") -> bytes:
    """Encode one block."""
    return (
        bytes([type_byte])
        + len(attribute).to_bytes(2, "big")
        + attribute
        + len(body).to_bytes(3, "big")
        + body
    )


class TestParseScorpion:
    def test_single_paragraph(self):
        """A minimal block decodes to a paragraph."""
        (decoded,) = parse_scorpion(bytes([0, 0, 0, 0, 0, 3]) + b"abc")
        assert decoded.block_type == ScorpionBlockType.PARAGRAPH
        assert decoded.attribute == ""
        assert decoded.body == "abc"
        assert decoded.encoding == CharacterEncoding.TRON8

    def test_multiple_blocks(self):
        """Blocks follow each other without separators."""
        data = block(0x01, body=b"Title") + block(0x00, body=b"Text") + block(0x0F, b"meta", b"")
        blocks = parse_scorpion(data)
        assert [b.block_type for b in blocks] == [
            ScorpionBlockType.HEADING1,
            ScorpionBlockType.PARAGRAPH,
            ScorpionBlockType.METADATA,
        ]
        assert blocks[2].attribute == "meta"
        assert blocks[2].body == ""

    def test_hyperlink_target(self):
        """Hyperlink attributes resolve against the page URL."""
        (link,) = parse_scorpion(block(0x08, b"other.txt", b"Other"))
        assert link.block_type.is_link
        assert link.body == "Other"
        base = Url.parse("scorpion://example.com/dir/page")
        assert link.target(base) == "scorpion://example.com/dir/other.txt"

    def test_absolute_hyperlink(self):
        """Absolute attributes are used as is."""
        (link,) = parse_scorpion(block(0x08, b"gemini://example.com/", b"G"))
        assert link.target(Url.parse("scorpion://a/")) == "gemini://example.com/"

    def test_unknown_type_is_paragraph(self):
        """Unassigned block types decode as paragraphs."""
        (decoded,) = parse_scorpion(block(0x07, body=b"x"))
        assert decoded.block_type == ScorpionBlockType.PARAGRAPH

    def test_empty_stream(self):
        """An empty body has no blocks and no warning."""
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            assert parse_scorpion(b"") == ()

    def test_short_stream(self):
        """Fewer bytes than a header decode to nothing, with a warning."""
        with pytest.warns(TruncatedWireFormat):
            assert parse_scorpion(b"\x00\x00\x00") == ()

    def test_truncated_body(self):
        """A body length beyond the data stops decoding."""
        with pytest.warns(TruncatedWireFormat):
            assert parse_scorpion(bytes([0, 0, 0, 0, 0, 9]) + b"abc") == ()

    def test_truncated_after_valid_block(self):
        """Blocks before the truncation are kept."""
        data = block(0x00, body=b"kept") + b"\x00\x00\x05ab"
        with pytest.warns(TruncatedWireFormat):
            blocks = parse_scorpion(data)
        assert [b.body for b in blocks] == ["kept"]

    def test_plaintext(self):
        """Plaintext mode shows the bytes as one block."""
        (decoded,) = parse_scorpion(b"raw text", plaintext=True)
        assert decoded.plaintext
        assert decoded.body == "raw text"


class TestDecodeBody:
    def test_pc_encoding(self):
        """PC encoded bodies use code page 437."""
        (decoded,) = parse_scorpion(block(0x10, body=bytes([0x82, 0x41])))
        assert decoded.encoding == CharacterEncoding.PC
        assert decoded.body == "éA"

    def test_pc_graphic_escape(self):
        """0x10 escapes a control-range graphic in PC encoding."""
        (decoded,) = parse_scorpion(block(0x10, body=bytes([0x10, 0x41])))
        assert decoded.body == "☺"

    def test_tab_only_in_preformatted(self):
        """Tabs and newlines survive only in preformatted blocks."""
        (paragraph,) = parse_scorpion(block(0x00, body=b"a\tb\nc"))
        (pre,) = parse_scorpion(block(0x0D, body=b"a\tb\nc"))
        assert paragraph.body == "abc"
        assert pre.body == "a\tb\nc"

    def test_formatting_codes_ignored(self):
        """Formatting control codes are dropped."""
        (decoded,) = parse_scorpion(block(0x00, body=b"\x1bbold\x11"))
        assert decoded.body == "bold"
