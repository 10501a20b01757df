"""Subnet host ranges to probe, computed from local interface addresses."""

import ipaddress
import logging
import socket
from dataclasses import dataclass
from typing import Iterator

import psutil

from kasapy.constants import MAX_RANGE_HOSTS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HostRange:
    """Inclusive range of IPv4 hosts, stored as 32-bit integers."""
    start: int
    end: int

    def __post_init__(self):
        if self.start > self.end:
            raise ValueError(f"empty host range: {self.start} > {self.end}")

    def __len__(self) -> int:
        return self.end - self.start + 1

    def hosts(self) -> Iterator[ipaddress.IPv4Address]:
        for n in range(self.start, self.end + 1):
            yield ipaddress.IPv4Address(n)

    def __str__(self) -> str:
        return f"{ipaddress.IPv4Address(self.start)}-{ipaddress.IPv4Address(self.end)}"


def compute_range(address, netmask,
                  max_hosts: int = MAX_RANGE_HOSTS) -> HostRange | None:
    """Host range of the subnet *address* belongs to, without the network
    and broadcast addresses.

    Returns None for non-IPv4 or loopback input, subnets without usable
    hosts (/31, /32) and subnets wider than *max_hosts*.
    """
    try:
        addr = ipaddress.IPv4Address(address)
        mask = ipaddress.IPv4Address(netmask)
    except ValueError:
        logger.debug(f"skipping non-IPv4 address {address}/{netmask}")
        return None
    if addr.is_loopback:
        logger.debug(f"skipping loopback address {addr}")
        return None

    a, m = int(addr), int(mask)
    start = (a & m) + 1
    end = (a | (~m & 0xFFFFFFFF)) - 1
    if start > end:
        logger.debug(f"skipping {addr}/{mask}: no usable hosts")
        return None
    if end - start + 1 > max_hosts:
        logger.warning(f"skipping oversized range {ipaddress.IPv4Address(start)}-"
                       f"{ipaddress.IPv4Address(end)} ({end - start + 1} hosts > {max_hosts})")
        return None
    return HostRange(start, end)


def local_interfaces() -> list[tuple[str, str]]:
    """(address, netmask) for every IPv4 address of an up, non-loopback NIC."""
    stats = psutil.net_if_stats()
    pairs = []
    for name, addrs in psutil.net_if_addrs().items():
        st = stats.get(name)
        if st is not None and not st.isup:
            continue
        for addr in addrs:
            if addr.family != socket.AF_INET or not addr.netmask:
                continue
            if addr.address.startswith("127."):
                continue
            pairs.append((addr.address, addr.netmask))
    return pairs


def local_ranges(max_hosts: int = MAX_RANGE_HOSTS,
                 interfaces: list[tuple[str, str]] | None = None) -> list[HostRange]:
    """Ranges to probe for each local interface, duplicates removed."""
    if interfaces is None:
        interfaces = local_interfaces()
    ranges: list[HostRange] = []
    for address, netmask in interfaces:
        r = compute_range(address, netmask, max_hosts)
        if r is not None and r not in ranges:
            ranges.append(r)
    return ranges
