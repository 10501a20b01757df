"""Kasa device discovery: probe every host of the local subnets with
get_sysinfo and collect replies until the network goes quiet."""

import logging
from dataclasses import dataclass
from enum import Enum

from kasapy.constants import (
    DEFAULT_TIMEOUT, KASA_PORT, MAX_RANGE_HOSTS, SYSINFO_COMMAND,
)
from kasapy.netrange import HostRange, local_ranges
from kasapy.protocol.cipher import decrypt, encrypt
from kasapy.protocol.reply import extract_sysinfo_fields
from kasapy.transport import UdpTransport

logger = logging.getLogger(__name__)


@dataclass
class DeviceInfo:
    ip: str
    port: int
    alias: str
    model: str


class ScanState(Enum):
    SENDING = "sending"
    COLLECTING = "collecting"
    DONE = "done"


class Scanner:
    """Open-loop probe fan-out followed by quiescence-bounded collection.

    All probes go out before anything is read. Each receive then waits the
    full *timeout* again, so the scan ends once *timeout* seconds pass
    without a reply.

    Usage:
        with UdpTransport() as t:
            devices = Scanner(t, timeout=2.0).run(ranges)
    """

    def __init__(self, transport, timeout: float = DEFAULT_TIMEOUT,
                 port: int = KASA_PORT, probe: bytes | str = SYSINFO_COMMAND):
        self.transport = transport
        self.timeout = timeout
        self.port = port
        self.probe = probe
        self.state = ScanState.SENDING
        self.devices: list[DeviceInfo] = []
        self.probes_sent = 0

    def send_probes(self, ranges: list[HostRange]) -> int:
        """Send the encoded probe to every host of every range, in order."""
        if self.state is not ScanState.SENDING:
            raise RuntimeError(f"cannot send probes in state {self.state.name}")
        frame = encrypt(self.probe)
        for r in ranges:
            logger.info(f"probing {r} ({len(r)} hosts)")
            for host in r.hosts():
                self.transport.send((str(host), self.port), frame)
                self.probes_sent += 1
        self.state = ScanState.COLLECTING
        return self.probes_sent

    def poll(self) -> DeviceInfo | None:
        """Wait for one reply. Returns the device it describes, if any."""
        if self.state is not ScanState.COLLECTING:
            raise RuntimeError(f"cannot collect in state {self.state.name}")
        reply = self.transport.receive(self.timeout)
        if reply is None:
            self.state = ScanState.DONE
            logger.debug(f"no reply for {self.timeout}s, scan done")
            return None
        text = decrypt(reply.data).decode("utf-8", errors="replace")
        fields = extract_sysinfo_fields(text)
        if fields is None:
            logger.debug(f"dropping reply from {reply.address[0]}: alias or model missing")
            return None
        alias, model = fields
        info = DeviceInfo(ip=reply.address[0], port=reply.address[1],
                          alias=alias, model=model)
        self.devices.append(info)
        return info

    def collect(self) -> list[DeviceInfo]:
        while self.state is ScanState.COLLECTING:
            self.poll()
        return self.devices

    def run(self, ranges: list[HostRange]) -> list[DeviceInfo]:
        self.send_probes(ranges)
        return self.collect()


def discover(ranges: list[HostRange] | None = None,
             timeout: float = DEFAULT_TIMEOUT,
             max_hosts: int = MAX_RANGE_HOSTS,
             port: int = KASA_PORT,
             transport=None) -> list[DeviceInfo]:
    """Probe local subnets (or *ranges*) and return the devices that answered.

    Args:
        ranges: host ranges to probe; defaults to those of the local NICs
        timeout: seconds of silence that end the scan
        max_hosts: widest subnet probed when ranges are computed locally
        transport: transport to use; a fresh UdpTransport otherwise
    """
    if ranges is None:
        ranges = local_ranges(max_hosts)
    if not ranges:
        logger.warning("no host ranges to probe")
    if transport is not None:
        return Scanner(transport, timeout, port).run(ranges)
    with UdpTransport() as t:
        return Scanner(t, timeout, port).run(ranges)
