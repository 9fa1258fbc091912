"""System fact providers."""

from .base import (
    FactProvider,
    NetworkInfo,
    NetworkInterface,
    OSInfo,
    StaticFactProvider,
    local_utc_offset_hours,
)
from .system import PortableFactProvider, collect_os_info, get_default_provider

__all__ = [
    "FactProvider",
    "NetworkInfo",
    "NetworkInterface",
    "OSInfo",
    "PortableFactProvider",
    "StaticFactProvider",
    "collect_os_info",
    "get_default_provider",
    "local_utc_offset_hours",
]
