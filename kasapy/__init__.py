from kasapy.device import KasaDevice, run_command
from kasapy.protocol.discovery import DeviceInfo, Scanner, discover
from kasapy.netrange import HostRange, compute_range

__all__ = ["KasaDevice", "run_command", "DeviceInfo", "Scanner", "discover",
           "HostRange", "compute_range"]
