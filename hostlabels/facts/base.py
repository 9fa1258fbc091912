"""System fact models and the provider interface."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class OSInfo(BaseModel):
    """Operating system identity."""

    name: str = Field(default="", description="Operating system name")
    version: str = Field(default="", description="OS version")
    hostname: str = Field(default="", description="Hostname")


class NetworkInterface(BaseModel):
    """A network interface and its addresses."""

    name: str = Field(..., description="Interface name (e.g. eth0)")
    mac: str = Field(default="", description="Hardware address")
    ipv4: list[str] = Field(default_factory=list, description="IPv4 addresses")
    ipv6: list[str] = Field(default_factory=list, description="IPv6 addresses")


class NetworkInfo(BaseModel):
    """Ordered interfaces plus the index of the primary one."""

    interfaces: list[NetworkInterface] = Field(default_factory=list)
    primary_index: Optional[int] = Field(
        default=None, description="Index of the primary interface, if any"
    )

    @property
    def primary(self) -> Optional[NetworkInterface]:
        """The primary interface, or None if unset or out of range."""
        if self.primary_index is None:
            return None
        if not 0 <= self.primary_index < len(self.interfaces):
            return None
        return self.interfaces[self.primary_index]

    @property
    def others(self) -> list[NetworkInterface]:
        """Every interface except the primary one, in provider order."""
        return [
            iface
            for i, iface in enumerate(self.interfaces)
            if i != self.primary_index
        ]


def local_utc_offset_hours() -> int:
    """Local UTC offset in whole hours, truncated toward zero."""
    offset = datetime.now().astimezone().utcoffset()
    if offset is None:
        return 0
    return int(offset.total_seconds() / 3600)


class FactProvider(ABC):
    """Source of live system facts for template expansion."""

    @abstractmethod
    def get_os_info(self) -> OSInfo:
        """Return OS name, version and hostname."""

    @abstractmethod
    def list_network_interfaces(self) -> NetworkInfo:
        """Return network interfaces and the primary interface index."""

    def utc_offset_hours(self) -> int:
        """Return the local UTC offset in whole hours."""
        return local_utc_offset_hours()


class StaticFactProvider(FactProvider):
    """
    Provider serving fixed facts.

    Used where facts come from configuration rather than the running
    system, and in tests.
    """

    def __init__(
        self,
        os_info: Optional[OSInfo] = None,
        network: Optional[NetworkInfo] = None,
        utc_offset: Optional[int] = None,
    ):
        self.os_info = os_info or OSInfo()
        self.network = network or NetworkInfo()
        self.utc_offset = utc_offset

    def get_os_info(self) -> OSInfo:
        return self.os_info

    def list_network_interfaces(self) -> NetworkInfo:
        return self.network

    def utc_offset_hours(self) -> int:
        if self.utc_offset is None:
            return super().utc_offset_hours()
        return self.utc_offset
