"""Fake transport and clock for exercising the protocol without a network."""

import pytest

from kasapy.protocol.cipher import encrypt
from kasapy.protocol.reply import Reply


class FakeClock:
    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now


class FakeTransport:
    """Replays scripted replies at fixed clock times.

    *replies* is a list of (time, (ip, port), plaintext). A receive returns
    the next reply if it is due within the timeout, advancing the clock to
    its arrival; otherwise the clock advances by the full timeout.
    """

    def __init__(self, clock: FakeClock, replies=()):
        self.clock = clock
        self.pending = sorted(replies, key=lambda r: r[0])
        self.sent: list[tuple[tuple[str, int], bytes]] = []
        self.receive_calls = 0
        self.closed = False

    def send(self, address, frame):
        self.sent.append((address, frame))

    def receive(self, timeout):
        self.receive_calls += 1
        if self.pending and self.pending[0][0] <= self.clock.now + timeout:
            t, addr, plaintext = self.pending.pop(0)
            self.clock.now = max(self.clock.now, t)
            return Reply(data=encrypt(plaintext), address=addr,
                         received_at=self.clock.now)
        self.clock.now += timeout
        return None

    def close(self):
        self.closed = True


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_transport(clock):
    def _make(replies=()):
        return FakeTransport(clock, replies)
    return _make


def _sysinfo_reply(alias: str, model: str) -> str:
    return ('{"system":{"get_sysinfo":{"sw_ver":"1.5.4","hw_ver":"2.0",'
            f'"model":"{model}","alias":"{alias}","relay_state":1}}}}}}')


@pytest.fixture
def sysinfo_reply():
    return _sysinfo_reply
