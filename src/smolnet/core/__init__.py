"""Core client components: transport and response parsing."""

from .fetcher import SmallnetFetcher
from .guppy import GuppyReassembler
from .protocols import Fetcher, Identity, IdentityProvider
from .status import (
    GeminiStatus,
    GuppyStatus,
    PlainStatus,
    ScorpionStatus,
    ServerResponse,
    ServerStatus,
    SpartanStatus,
    StatusCategory,
    TextProtocolStatus,
    parse_response,
)

__all__ = [
    "Fetcher",
    "GeminiStatus",
    "GuppyReassembler",
    "GuppyStatus",
    "Identity",
    "IdentityProvider",
    "PlainStatus",
    "ScorpionStatus",
    "ServerResponse",
    "ServerStatus",
    "SmallnetFetcher",
    "SpartanStatus",
    "StatusCategory",
    "TextProtocolStatus",
    "parse_response",
]
