"""Guppy chunked UDP reassembly.

Guppy sends a response as a series of datagrams, each starting with a line
holding a sequence number (and, on the first datagram, the content type).
The client acknowledges every chunk by echoing its sequence number; a
datagram with nothing after its header line ends the transfer.
"""

import logging

logger = logging.getLogger(__name__)


class GuppyReassembler:
    """Receiver-side state machine for one Guppy response."""

    def __init__(self):
        self.header: str | None = None
        self.complete = False
        self._chunks: list[bytes] = []
        self._seen: set[str] = set()

    def feed(self, datagram: bytes) -> bytes | None:
        """Consume one datagram and return the acknowledgment to send, if any."""
        if self.complete:
            return None

        datagram = datagram.replace(b"\x00", b"")
        first_line, sep, content = datagram.partition(b"\n")
        fields = first_line.decode("utf-8", errors="replace").rstrip("\r").split(" ", 1)
        sequence = fields[0]

        if not sequence:
            # Nothing we can acknowledge: treat as end of stream
            self.complete = True
            return None

        if self.header is None and len(fields) > 1:
            self.header = fields[1]

        ack = f"{sequence}\r\n".encode("utf-8")

        if not content:
            logger.debug("guppy end of stream at sequence %s", sequence)
            self.complete = True
            return ack

        if sequence in self._seen:
            logger.debug("guppy duplicate chunk %s", sequence)
            return ack

        self._seen.add(sequence)
        self._chunks.append(content)
        return ack

    @property
    def body(self) -> bytes:
        return b"".join(self._chunks)

    def result(self) -> bytes:
        """Reassembled response: synthetic content-type line followed by the body."""
        header = self.header if self.header is not None else "text/gemini"
        return header.encode("utf-8") + b"\n" + self.body
