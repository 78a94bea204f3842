"""Immutable URL model and link resolution."""

import urllib.parse
from dataclasses import dataclass, replace
from urllib.parse import urljoin, urlsplit, urlunsplit

from .errors import UrlParseError

SMALLNET_SCHEMES = (
    "finger", "gemini", "gopher", "gophers", "guppy",
    "nex", "scorpion", "scroll", "spartan", "text",
)

# urljoin only resolves relative references for schemes it knows about
for _scheme in SMALLNET_SCHEMES:
    if _scheme not in urllib.parse.uses_relative:
        urllib.parse.uses_relative.append(_scheme)
    if _scheme not in urllib.parse.uses_netloc:
        urllib.parse.uses_netloc.append(_scheme)


@dataclass(frozen=True)
class Url:
    """A parsed absolute URL."""

    scheme: str
    host: str
    port: int | None = None
    path: str = ""
    query: str | None = None

    @classmethod
    def parse(cls, text: str) -> "Url":
        """Parse an absolute URL, raising UrlParseError when it is not one."""
        text = text.strip()
        try:
            parts = urlsplit(text)
            port = parts.port
        except ValueError as e:
            raise UrlParseError(f"Invalid URL {text!r}: {e}") from e

        if not parts.scheme:
            raise UrlParseError(f"Invalid URL {text!r}: missing scheme")
        if not parts.hostname:
            raise UrlParseError(f"Invalid URL {text!r}: missing host")

        # urlsplit only yields None for an absent query; "?" alone is kept as ""
        query = parts.query if parts.query or "?" in text.split("#", 1)[0] else None

        return cls(
            scheme=parts.scheme.lower(),
            host=parts.hostname,
            port=port,
            path=parts.path,
            query=query,
        )

    @property
    def netloc(self) -> str:
        host = f"[{self.host}]" if ":" in self.host else self.host
        if self.port is None:
            return host
        return f"{host}:{self.port}"

    def __str__(self) -> str:
        return urlunsplit((self.scheme, self.netloc, self.path, self.query or "", ""))

    def with_query(self, query: str | None) -> "Url":
        return replace(self, query=query)

    def join(self, target: str) -> "Url":
        """Resolve a link target against this URL."""
        if "://" in target:
            return Url.parse(target)
        return Url.parse(urljoin(str(self), target))

    def resolve_redirect(self, target: str) -> "Url":
        """Resolve a redirect target.

        Absolute targets replace the URL, targets starting with "/" replace
        only the path (and query), anything else is joined like a link.
        """
        target = target.strip()
        if "://" in target:
            return Url.parse(target)
        if target.startswith("/") and not target.startswith("//"):
            path, sep, query = target.partition("?")
            return replace(self, path=path, query=query if sep else None)
        return self.join(target)
