"""Tests for the URL model."""

import pytest

from smolnet.errors import UrlParseError
from smolnet.url import Url


class TestUrlParse:
    def test_parses_components(self):
        """All components should be split out."""
        url = Url.parse("gemini://example.com:1966/docs/index.gmi?lang=en")
        assert url.scheme == "gemini"
        assert url.host == "example.com"
        assert url.port == 1966
        assert url.path == "/docs/index.gmi"
        assert url.query == "lang=en"

    def test_lowercases_scheme(self):
        """Scheme should be lowercased."""
        assert Url.parse("GEMINI://example.com/").scheme == "gemini"

    def test_absent_query_is_none(self):
        """A URL without '?' has no query."""
        assert Url.parse("gemini://example.com/").query is None

    def test_empty_query_is_kept(self):
        """A bare '?' is an empty query, not an absent one."""
        assert Url.parse("gemini://example.com/?").query == ""

    def test_missing_scheme_raises(self):
        """Relative references are not URLs."""
        with pytest.raises(UrlParseError):
            Url.parse("example.com/page")

    def test_missing_host_raises(self):
        """URLs need a host."""
        with pytest.raises(UrlParseError):
            Url.parse("gemini:///page")

    def test_invalid_port_raises(self):
        """Non-numeric ports are rejected."""
        with pytest.raises(UrlParseError):
            Url.parse("gemini://example.com:abc/")

    def test_str_round_trip(self):
        """String form should match the input for normalized URLs."""
        text = "spartan://example.com:3000/form?name"
        assert str(Url.parse(text)) == text


class TestUrlJoin:
    @pytest.fixture
    def base(self):
        return Url.parse("gemini://example.com/docs/guide/index.gmi")

    def test_relative_sibling(self, base):
        """Relative targets resolve against the directory."""
        assert str(base.join("intro.gmi")) == "gemini://example.com/docs/guide/intro.gmi"

    def test_parent_directory(self, base):
        """Dot segments are resolved."""
        assert str(base.join("../faq.gmi")) == "gemini://example.com/docs/faq.gmi"

    def test_root_relative(self, base):
        """Absolute paths keep scheme and host."""
        assert str(base.join("/about")) == "gemini://example.com/about"

    def test_network_path(self, base):
        """Scheme-relative targets keep only the scheme."""
        assert str(base.join("//other.org/x")) == "gemini://other.org/x"

    def test_absolute_target(self, base):
        """Absolute URLs replace the base entirely."""
        assert str(base.join("gopher://gopher.example/1/")) == "gopher://gopher.example/1/"

    def test_with_query(self, base):
        """with_query replaces the query."""
        assert base.with_query("q").query == "q"
        assert base.with_query("q").with_query(None).query is None


class TestResolveRedirect:
    def test_slash_target_keeps_scheme_host_and_port(self):
        """A '/' target replaces only path and query."""
        url = Url.parse("gemini://example.com:1966/old?x=1")
        target = url.resolve_redirect("/new/path")
        assert target == Url("gemini", "example.com", 1966, "/new/path", None)

    def test_slash_target_with_query(self):
        """A query on a '/' target is carried over."""
        url = Url.parse("gemini://example.com/old")
        assert url.resolve_redirect("/new?q").query == "q"

    def test_absolute_target(self):
        """An absolute target replaces the URL."""
        url = Url.parse("gemini://example.com/old")
        target = url.resolve_redirect("spartan://other.org/page")
        assert target.scheme == "spartan"
        assert target.host == "other.org"

    def test_relative_target(self):
        """Other targets are joined like links."""
        url = Url.parse("gemini://example.com/dir/old")
        assert url.resolve_redirect("new").path == "/dir/new"
