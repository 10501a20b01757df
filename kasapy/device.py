"""Direct commands to a single Kasa device."""

import ipaddress
import logging

from kasapy.constants import COMMANDS, DEFAULT_TIMEOUT, KASA_PORT
from kasapy.protocol.cipher import decrypt, encrypt
from kasapy.protocol.reply import Reply
from kasapy.transport import UdpTransport

logger = logging.getLogger(__name__)


def validate_ip(ip: str) -> str:
    """Normalized dotted-quad form of *ip*; ValueError if it is not IPv4."""
    try:
        return str(ipaddress.IPv4Address(ip))
    except ValueError:
        raise ValueError(f"Could not parse {ip!r} as an IP") from None


def exchange(transport, address: tuple[str, int], command: bytes | str,
             timeout: float) -> Reply | None:
    """Send one command frame and wait for one reply.

    Returns the reply with its payload decoded, or None if the device did
    not answer within *timeout*.
    """
    transport.send(address, encrypt(command))
    reply = transport.receive(timeout)
    if reply is None:
        logger.info(f"no response from {address[0]} within {timeout}s")
        return None
    reply.data = decrypt(reply.data)
    return reply


def run_command(ip: str, command: bytes | str, timeout: float = DEFAULT_TIMEOUT,
                port: int = KASA_PORT, transport=None) -> Reply | None:
    """Send *command* to the device at *ip* and return its decoded reply.

    The address is validated before any socket is opened. A silent device
    yields None, not an error.
    """
    address = (validate_ip(ip), port)
    if transport is not None:
        return exchange(transport, address, command, timeout)
    with UdpTransport() as t:
        return exchange(t, address, command, timeout)


class KasaDevice:
    """Blocking interface to a single Kasa plug or bulb.

    Usage:
        with KasaDevice("192.168.1.23") as plug:
            reply = plug.sysinfo()
            plug.turn_off()
    """

    def __init__(self, ip: str, timeout: float = DEFAULT_TIMEOUT,
                 port: int = KASA_PORT, transport=None):
        self.ip = validate_ip(ip)
        self.port = port
        self.timeout = timeout
        self._transport = transport
        self._owns_transport = transport is None

    def _ensure_open(self):
        if self._transport is None:
            self._transport = UdpTransport()

    def command(self, command: bytes | str) -> Reply | None:
        """Send raw JSON text, or the name of an entry in COMMANDS."""
        if isinstance(command, str) and command in COMMANDS:
            command = COMMANDS[command]
        self._ensure_open()
        return exchange(self._transport, (self.ip, self.port), command, self.timeout)

    def sysinfo(self) -> Reply | None:
        return self.command("info")

    def turn_on(self) -> Reply | None:
        return self.command("on")

    def turn_off(self) -> Reply | None:
        return self.command("off")

    def close(self):
        if self._owns_transport and self._transport is not None:
            self._transport.close()
            self._transport = None

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
