"""Tests for the gophermap parser."""

from smolnet.content import GopherItemType, parse_gopher
from smolnet.content.gopher import parse_gopher_line


class TestParseGopherLine:
    def test_submenu(self):
        """Menu lines carry selector, host and port."""
        line = parse_gopher_line("1Floodgap Home\t/home\tgopher.floodgap.com\t70")
        assert line.item_type == GopherItemType.SUBMENU
        assert line.display == "Floodgap Home"
        assert line.selector == "/home"
        assert line.host == "gopher.floodgap.com"
        assert line.port == 70
        assert line.is_link
        assert line.url() == "gopher://gopher.floodgap.com/home"

    def test_informational(self):
        """Info lines are not links."""
        line = parse_gopher_line("iWelcome to my hole\tfake\t(NULL)\t0")
        assert line.item_type == GopherItemType.INFORMATIONAL
        assert line.display == "Welcome to my hole"
        assert not line.is_link

    def test_search(self):
        """Search lines are not plain links."""
        line = parse_gopher_line("7Search\t/v2/vs\tgopher.example\t70")
        assert line.is_search
        assert not line.is_link
        assert line.url() == "gopher://gopher.example/v2/vs"

    def test_line_without_tabs(self):
        """Lines without tabs are shown whole as information."""
        line = parse_gopher_line("Just some text")
        assert line.item_type == GopherItemType.INFORMATIONAL
        assert line.display == "Just some text"
        assert not line.is_link

    def test_empty_line(self):
        """Empty lines are blank information lines."""
        line = parse_gopher_line("")
        assert line.item_type == GopherItemType.INFORMATIONAL
        assert line.display == ""

    def test_invalid_port_defaults(self):
        """An unparseable port falls back to 70."""
        line = parse_gopher_line("0About\t/about.txt\texample.com\tabc")
        assert line.port == 70

    def test_missing_port_defaults(self):
        """A missing port field falls back to 70."""
        line = parse_gopher_line("0About\t/about.txt\texample.com")
        assert line.port == 70

    def test_non_default_port_in_url(self):
        """Non-default ports appear in the URL."""
        line = parse_gopher_line("1Menu\t/\texample.com\t7070")
        assert line.url() == "gopher://example.com:7070/"

    def test_secure_url(self):
        """Secure pages link with the secure scheme."""
        line = parse_gopher_line("1Menu\t/m\texample.com\t70")
        assert line.url(secure=True) == "gophers://example.com/m"

    def test_selector_without_slash(self):
        """Selectors get a leading slash in the URL."""
        line = parse_gopher_line("0About\tabout.txt\texample.com\t70")
        assert line.url() == "gopher://example.com/about.txt"

    def test_unknown_type(self):
        """Unrecognised type characters are still links."""
        line = parse_gopher_line("ZThing\t/z\texample.com\t70")
        assert line.item_type == GopherItemType.UNKNOWN
        assert line.is_link


class TestParseGopher:
    def test_stops_at_end_marker(self):
        """Lines after a lone '.' are ignored."""
        body = "iHello\t\t\t0\r\n1Menu\t/m\th\t70\r\n.\r\niIgnored\t\t\t0\r\n"
        lines = parse_gopher(body)
        assert len(lines) == 2
        assert lines[1].display == "Menu"

    def test_plaintext(self):
        """Plaintext mode yields a single information line."""
        lines = parse_gopher("line one\nline two\n.\n", plaintext=True)
        assert len(lines) == 1
        assert lines[0].display == "line one\nline two"
        assert not lines[0].is_link

    def test_splits_on_line_feed_only(self):
        """Vertical tabs inside a display string do not split the line."""
        lines = parse_gopher("iOne\x0bTwo\t\t\t0\r\n.\r\n")
        assert len(lines) == 1
        assert lines[0].display == "One\x0bTwo"
