"""Portable system fact collection and provider selection."""

import logging
import platform
import socket

from .base import FactProvider, NetworkInfo, OSInfo

logger = logging.getLogger(__name__)


def collect_os_info() -> OSInfo:
    """
    Collect OS identity using the platform module.

    On Linux the distribution name and version from os-release are
    preferred over the kernel name and release.

    Returns:
        OSInfo with name, version and hostname
    """
    name = platform.system()
    version = platform.release()

    if name == "Linux":
        try:
            release = platform.freedesktop_os_release()
        except OSError as e:
            logger.debug("os-release not available: %s", e)
        else:
            name = release.get("NAME", name)
            version = release.get("VERSION", release.get("VERSION_ID", version))

    hostname = platform.node() or socket.gethostname()
    return OSInfo(name=name, version=version, hostname=hostname)


class PortableFactProvider(FactProvider):
    """Provider for platforms without interface discovery support.

    Reports OS identity only; the interface list is always empty.
    """

    def get_os_info(self) -> OSInfo:
        return collect_os_info()

    def list_network_interfaces(self) -> NetworkInfo:
        return NetworkInfo()


def get_default_provider() -> FactProvider:
    """Pick the fact provider for the running platform."""
    if platform.system() == "Linux":
        from .linux import LinuxFactProvider

        return LinuxFactProvider()

    logger.debug(
        "No interface discovery for %s, using portable provider", platform.system()
    )
    return PortableFactProvider()
