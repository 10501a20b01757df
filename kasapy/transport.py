"""UDP transport: one socket for sending frames and collecting replies."""

import logging
import selectors
import socket
import time
from typing import Callable

from kasapy.constants import DEFAULT_BIND_IP, RECV_BUFFER_SIZE
from kasapy.protocol.reply import Reply

logger = logging.getLogger(__name__)


class TransportError(RuntimeError):
    """Unrecoverable socket failure (create, bind, send, wait or receive)."""


class UdpTransport:
    """UDP socket bound to an ephemeral port.

    Frames are sent fire-and-forget; replies are read one datagram at a time
    with a readiness wait bounded by a timeout. Payloads are passed through
    untouched, encoding and decoding belong to the caller.
    """

    def __init__(self, bind_ip: str = DEFAULT_BIND_IP,
                 buf_size: int = RECV_BUFFER_SIZE,
                 clock: Callable[[], float] = time.monotonic):
        self._buf_size = buf_size
        self._clock = clock
        try:
            self._sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        except OSError as e:
            raise TransportError(f"socket: {e}") from e
        try:
            self._sock.setblocking(False)
            self._sock.bind((bind_ip, 0))
        except OSError as e:
            self._sock.close()
            raise TransportError(f"bind: {e}") from e
        self._selector = selectors.DefaultSelector()
        self._selector.register(self._sock, selectors.EVENT_READ)
        logger.debug(f"bound UDP socket to {self.local_address}")

    @property
    def local_address(self) -> tuple[str, int]:
        return self._sock.getsockname()

    def send(self, address: tuple[str, int], frame: bytes) -> None:
        """Send one datagram. No retry."""
        try:
            self._sock.sendto(frame, address)
        except OSError as e:
            raise TransportError(f"sendto {address[0]}:{address[1]}: {e}") from e

    def receive(self, timeout: float) -> Reply | None:
        """Wait up to *timeout* seconds for one datagram.

        Returns the raw datagram as a Reply, or None if nothing arrived.
        Datagrams larger than the buffer are truncated.
        """
        try:
            events = self._selector.select(timeout)
        except OSError as e:
            raise TransportError(f"select: {e}") from e
        if not events:
            return None
        try:
            data, addr = self._sock.recvfrom(self._buf_size)
        except BlockingIOError:
            return None
        except OSError as e:
            raise TransportError(f"recvfrom: {e}") from e
        return Reply(data=data, address=addr, received_at=self._clock())

    def close(self):
        if self._sock.fileno() == -1:
            return
        self._selector.close()
        self._sock.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
