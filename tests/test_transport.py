"""Tests for the UDP transport over loopback sockets."""

import socket
import time

import pytest

from kasapy.transport import TransportError, UdpTransport


@pytest.fixture
def peer():
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    sock.bind(("127.0.0.1", 0))
    sock.settimeout(2.0)
    yield sock
    sock.close()


@pytest.fixture
def transport():
    with UdpTransport(bind_ip="127.0.0.1") as t:
        yield t


class TestUdpTransport:
    def test_binds_ephemeral_port(self, transport):
        ip, port = transport.local_address
        assert ip == "127.0.0.1"
        assert port != 0

    def test_send_and_receive(self, transport, peer):
        transport.send(peer.getsockname(), b"ping")
        data, addr = peer.recvfrom(4096)
        assert data == b"ping"
        peer.sendto(b"pong", addr)
        reply = transport.receive(2.0)
        assert reply.data == b"pong"
        assert reply.address == peer.getsockname()

    def test_payload_untouched(self, transport, peer):
        peer.sendto(b"\x00\xff\xab", transport.local_address)
        assert transport.receive(2.0).data == b"\x00\xff\xab"

    def test_timeout_returns_none(self, transport):
        t0 = time.monotonic()
        assert transport.receive(0.1) is None
        assert time.monotonic() - t0 >= 0.09

    def test_truncates_to_buffer(self, peer):
        with UdpTransport(bind_ip="127.0.0.1", buf_size=8) as t:
            peer.sendto(b"0123456789abcdef", t.local_address)
            assert t.receive(2.0).data == b"01234567"

    def test_received_at_from_clock(self, peer):
        with UdpTransport(bind_ip="127.0.0.1", clock=lambda: 42.0) as t:
            peer.sendto(b"x", t.local_address)
            assert t.receive(2.0).received_at == 42.0

    def test_bind_failure(self):
        with pytest.raises(TransportError, match="bind"):
            UdpTransport(bind_ip="203.0.113.77")

    def test_send_failure(self, transport):
        with pytest.raises(TransportError, match="sendto"):
            transport.send(("127.0.0.1", 9999), b"x" * 70000)

    def test_close_idempotent(self):
        t = UdpTransport(bind_ip="127.0.0.1")
        t.close()
        t.close()
