"""Command line entry point.

Usage::

    python -m kasapy 192.168.1.23 '{"system":{"get_sysinfo":{}}}'
    python -m kasapy 192.168.1.23 off
    python -m kasapy -s -t 2
"""

from __future__ import annotations

import argparse
import logging
import sys

from kasapy.constants import COMMANDS, DEFAULT_TIMEOUT, KASA_PORT, MAX_RANGE_HOSTS
from kasapy.device import run_command
from kasapy.protocol.discovery import discover
from kasapy.transport import TransportError

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="kasapy",
        description="Send a command to a Kasa device, or scan for devices",
    )
    p.add_argument("ip", nargs="?", help="device IPv4 address")
    p.add_argument("command", nargs="?",
                   help="JSON command, or one of: " + ", ".join(COMMANDS))
    p.add_argument("-s", "--scan", action="store_true",
                   help="discover devices on local subnets")
    p.add_argument("-t", "--timeout", type=float, default=DEFAULT_TIMEOUT,
                   help=f"seconds to wait for replies (default: {DEFAULT_TIMEOUT:g})")
    p.add_argument("-p", "--port", type=int, default=KASA_PORT,
                   help=f"device UDP port (default: {KASA_PORT})")
    p.add_argument("--max-hosts", type=int, default=MAX_RANGE_HOSTS,
                   help="skip subnets with more hosts than this")
    p.add_argument("-v", "--verbose", action="store_true",
                   help="debug logging")
    args = p.parse_args(argv)
    if args.scan:
        if args.ip or args.command:
            p.error("-s takes no positional arguments")
    elif not (args.ip and args.command):
        p.error("ip and command are required unless -s is given")
    return args


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.scan:
            for dev in discover(timeout=args.timeout, max_hosts=args.max_hosts,
                                port=args.port):
                print(f"{dev.ip}\t{dev.alias}\t{dev.model}")
            return 0

        command = COMMANDS.get(args.command, args.command)
        reply = run_command(args.ip, command, timeout=args.timeout, port=args.port)
    except (ValueError, TransportError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    if reply is None:
        print(f"no response from {args.ip}")
    else:
        print(reply.text)
    return 0


if __name__ == "__main__":
    sys.exit(main())
