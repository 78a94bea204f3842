"""Protocol definitions for client core collaborators."""

from dataclasses import dataclass
from typing import Protocol

from ..registry import Protocol as SmallnetProtocol
from ..registry import Request
from ..url import Url
from .status import ServerResponse


@dataclass(frozen=True)
class Identity:
    """Client certificate and private key presented for mutual TLS."""

    name: str
    cert_pem: str
    key_pem: str
    active: bool = False


class IdentityProvider(Protocol):
    """Protocol for the credential store consumed by the transport layer."""

    def get_active_identity(self) -> Identity | None:
        """Return the identity to present during TLS handshakes, if any."""
        ...

    def list_identities(self) -> list[Identity]:
        """Return every stored identity."""
        ...

    def create_identity(self, name: str) -> Identity:
        """Generate, store and activate a new identity."""
        ...

    def set_active(self, name: str) -> None:
        """Make the named identity the active one."""
        ...


class Fetcher(Protocol):
    """Protocol for response fetchers."""

    async def fetch(self, url: Url, request: Request, protocol: SmallnetProtocol) -> ServerResponse:
        """Perform the exchange for a request and return the parsed response."""
        ...
