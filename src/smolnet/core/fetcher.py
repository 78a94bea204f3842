"""Transport layer: TCP, TLS and Guppy UDP exchanges using asyncio."""

import asyncio
import logging
import ssl
import tempfile
from pathlib import Path

from ..errors import IdentityError, TransportError, TransportErrorKind
from ..registry import Protocol, Request
from ..url import Url
from .guppy import GuppyReassembler
from .protocols import Identity, IdentityProvider
from .status import ServerResponse, parse_response

logger = logging.getLogger(__name__)

READ_CHUNK_SIZE = 65536


class _DatagramQueue(asyncio.DatagramProtocol):
    """Feeds received datagrams (and socket errors) into a queue."""

    def __init__(self, queue: asyncio.Queue):
        self.queue = queue

    def datagram_received(self, data: bytes, addr) -> None:
        self.queue.put_nowait(data)

    def error_received(self, exc: Exception) -> None:
        self.queue.put_nowait(exc)


class SmallnetFetcher:
    """Async fetcher speaking the small-internet protocol family."""

    def __init__(
        self,
        timeout: float | None = 30.0,
        identity_provider: IdentityProvider | None = None,
    ):
        self.timeout = timeout
        self.identity_provider = identity_provider

    async def fetch(self, url: Url, request: Request, protocol: Protocol) -> ServerResponse:
        """Fetch a URL and return the parsed response."""
        raw = await self.exchange(url, request, protocol)
        return parse_response(raw, protocol)

    async def exchange(self, url: Url, request: Request, protocol: Protocol) -> bytes:
        """Send the request and return the raw response bytes."""
        logger.debug("%s request to %s:%d: %r", protocol.value, url.host, request.port, request.body)
        if protocol == Protocol.GUPPY:
            exchange = self._exchange_udp(url.host, request)
        else:
            exchange = self._exchange_stream(url.host, request)

        try:
            return await asyncio.wait_for(exchange, self.timeout)
        except asyncio.TimeoutError:
            raise TransportError(
                TransportErrorKind.TIMEOUT,
                f"Timed out after {self.timeout:g}s waiting for {url.host}",
            ) from None

    def _tls_context(self) -> ssl.SSLContext:
        """Build a TLS client context that accepts any server certificate."""
        context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE

        if self.identity_provider is None:
            return context

        try:
            identity = self.identity_provider.get_active_identity()
            if identity is not None:
                _load_identity(context, identity)
        except (IdentityError, ssl.SSLError, OSError) as e:
            raise TransportError(
                TransportErrorKind.HANDSHAKE,
                f"Could not load client identity: {e}",
            ) from e
        return context

    async def _exchange_stream(self, host: str, request: Request) -> bytes:
        context = self._tls_context() if request.secure else None
        try:
            reader, writer = await asyncio.open_connection(
                host,
                request.port,
                ssl=context,
                server_hostname=host if context is not None else None,
            )
        except ssl.SSLError as e:
            raise TransportError(TransportErrorKind.HANDSHAKE, f"TLS handshake with {host} failed: {e}") from e
        except OSError as e:
            raise TransportError(TransportErrorKind.CONNECT, f"Failed to connect to {host}: {e}") from e

        try:
            writer.write(request.to_bytes())
            await writer.drain()
            return await _read_to_end(reader, host)
        except OSError as e:
            raise TransportError(TransportErrorKind.IO, f"Connection to {host} failed: {e}") from e
        finally:
            writer.close()
            try:
                await writer.wait_closed()
            except (OSError, ssl.SSLError) as e:
                logger.debug("error closing connection to %s: %s", host, e)

    async def _exchange_udp(self, host: str, request: Request) -> bytes:
        loop = asyncio.get_running_loop()
        queue: asyncio.Queue = asyncio.Queue()
        try:
            transport, _ = await loop.create_datagram_endpoint(
                lambda: _DatagramQueue(queue),
                remote_addr=(host, request.port),
            )
        except OSError as e:
            raise TransportError(TransportErrorKind.CONNECT, f"Failed to connect to {host}: {e}") from e

        reassembler = GuppyReassembler()
        try:
            transport.sendto(request.to_bytes())
            while not reassembler.complete:
                item = await queue.get()
                if isinstance(item, Exception):
                    raise TransportError(TransportErrorKind.IO, f"Connection to {host} failed: {item}")
                ack = reassembler.feed(item)
                if ack is not None:
                    transport.sendto(ack)
        finally:
            transport.close()

        return reassembler.result()


async def _read_to_end(reader: asyncio.StreamReader, host: str) -> bytes:
    """Read until the peer closes the connection."""
    chunks = []
    while True:
        try:
            chunk = await reader.read(READ_CHUNK_SIZE)
        except (ssl.SSLError, ConnectionResetError) as e:
            # Many servers drop the connection without a TLS close_notify
            if not chunks:
                raise TransportError(TransportErrorKind.IO, f"Connection to {host} failed: {e}") from e
            logger.debug("unclean close from %s after %d chunks: %s", host, len(chunks), e)
            break
        if not chunk:
            break
        chunks.append(chunk)
    return b"".join(chunks)


def _load_identity(context: ssl.SSLContext, identity: Identity) -> None:
    """Present an identity for mutual TLS.

    ``load_cert_chain`` only reads from files, so the PEM material is written
    to a private temporary directory for the duration of the call.
    """
    with tempfile.TemporaryDirectory(prefix="smolnet-") as tmpdir:
        certfile = Path(tmpdir) / "cert.pem"
        keyfile = Path(tmpdir) / "key.pem"
        certfile.write_text(identity.cert_pem)
        keyfile.write_text(identity.key_pem)
        context.load_cert_chain(certfile, keyfile)
    logger.debug("presenting client identity %r", identity.name)
