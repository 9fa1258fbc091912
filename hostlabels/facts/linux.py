"""Linux fact provider backed by iproute2 and sysfs."""

import json
import logging
import subprocess
from pathlib import Path
from typing import Any, Optional

from .base import FactProvider, NetworkInfo, NetworkInterface, OSInfo
from .system import collect_os_info

logger = logging.getLogger(__name__)

SYS_CLASS_NET = Path("/sys/class/net")


def _run_ip_json(args: list[str]) -> list[dict[str, Any]]:
    """Run an `ip -j` command and decode its JSON output.

    Returns an empty list if the command is missing, fails or prints
    something that is not a JSON array.
    """
    cmd = ["ip", "-j", *args]
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, check=False)
    except (FileNotFoundError, PermissionError) as e:
        logger.warning("Cannot run %s: %s", " ".join(cmd), e)
        return []

    if result.returncode != 0:
        logger.warning("%s failed: %s", " ".join(cmd), result.stderr.strip())
        return []

    try:
        data = json.loads(result.stdout or "[]")
    except json.JSONDecodeError as e:
        logger.warning("Unexpected output from %s: %s", " ".join(cmd), e)
        return []

    return data if isinstance(data, list) else []


def _read_sysfs_mac(ifname: str, sys_class_net: Path = SYS_CLASS_NET) -> str:
    addr_file = sys_class_net / ifname / "address"
    try:
        return addr_file.read_text().strip()
    except OSError:
        return ""


def parse_ip_addr(
    entries: list[dict[str, Any]], sys_class_net: Path = SYS_CLASS_NET
) -> list[NetworkInterface]:
    """
    Convert `ip -j addr show` output into interfaces.

    Loopback interfaces are skipped. Missing MAC addresses fall back to
    sysfs.

    Args:
        entries: Decoded JSON array from iproute2
        sys_class_net: sysfs network class directory

    Returns:
        Interfaces in iproute2 order
    """
    interfaces = []
    for entry in entries:
        ifname = entry.get("ifname")
        if not ifname or entry.get("link_type") == "loopback":
            continue

        ipv4 = []
        ipv6 = []
        for addr in entry.get("addr_info", []):
            local = addr.get("local")
            if not local:
                continue
            if addr.get("family") == "inet":
                ipv4.append(local)
            elif addr.get("family") == "inet6":
                ipv6.append(local)

        mac = entry.get("address") or _read_sysfs_mac(ifname, sys_class_net)
        interfaces.append(
            NetworkInterface(name=ifname, mac=mac, ipv4=ipv4, ipv6=ipv6)
        )

    return interfaces


def find_primary_index(
    interfaces: list[NetworkInterface], routes: list[dict[str, Any]]
) -> Optional[int]:
    """
    Index of the interface carrying the default route.

    Falls back to the first interface when no default route matches.
    """
    names = [iface.name for iface in interfaces]
    for route in routes:
        dev = route.get("dev")
        if dev in names:
            return names.index(dev)

    return 0 if interfaces else None


class LinuxFactProvider(FactProvider):
    """Fact provider for Linux hosts."""

    def __init__(self, sys_class_net: Path = SYS_CLASS_NET):
        self.sys_class_net = sys_class_net

    def get_os_info(self) -> OSInfo:
        return collect_os_info()

    def list_network_interfaces(self) -> NetworkInfo:
        interfaces = parse_ip_addr(_run_ip_json(["addr", "show"]), self.sys_class_net)
        routes = _run_ip_json(["route", "show", "default"])
        primary = find_primary_index(interfaces, routes)

        logger.debug(
            "Found %d interfaces, primary: %s",
            len(interfaces),
            interfaces[primary].name if primary is not None else "none",
        )
        return NetworkInfo(interfaces=interfaces, primary_index=primary)
