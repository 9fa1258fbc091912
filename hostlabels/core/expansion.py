"""Placeholder expansion for label values.

A label value may embed ``$(token)`` placeholders that are replaced with
live system facts when labels are rendered:

    "$(hostname)-x"     -> "myhost-x"
    "$(unknown_token)"  -> "unknown_token"   (unknown tokens pass through bare)
    "$(bar"             -> "$(bar"           (unterminated, kept literally)

Expansion is bounded: the result must stay shorter than ``max_length``
characters. When the next chunk would not fit, expansion stops and the
text built so far is returned with ``truncated`` set.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Optional

from ..facts.base import FactProvider, NetworkInfo, NetworkInterface, OSInfo
from .labels import Label

logger = logging.getLogger(__name__)

# Maximum length of an expanded label value, terminator included.
OS_COMMENT_MAX = 1024

PLACEHOLDER_OPEN = "$("
PLACEHOLDER_CLOSE = ")"


@dataclass
class ExpansionResult:
    """Expanded text of one label value."""

    text: str
    truncated: bool = False


class _Facts:
    """Facts for a single expansion, fetched lazily and at most once."""

    def __init__(self, provider: FactProvider):
        self._provider = provider
        self._os_info: Optional[OSInfo] = None
        self._network: Optional[NetworkInfo] = None
        self._utc_offset: Optional[int] = None

    @property
    def os_info(self) -> OSInfo:
        if self._os_info is None:
            self._os_info = self._provider.get_os_info()
        return self._os_info

    @property
    def network(self) -> NetworkInfo:
        if self._network is None:
            self._network = self._provider.list_network_interfaces()
        return self._network

    @property
    def utc_offset(self) -> int:
        if self._utc_offset is None:
            self._utc_offset = self._provider.utc_offset_hours()
        return self._utc_offset


def _first(values: list[str]) -> str:
    return values[0] if values else ""


def _primary(facts: _Facts, pick: Callable[[NetworkInterface], str]) -> str:
    iface = facts.network.primary
    return pick(iface) if iface is not None else ""


def _others(facts: _Facts, pick: Callable[[NetworkInterface], list[str]]) -> str:
    values: list[str] = []
    for iface in facts.network.others:
        values.extend(v for v in pick(iface) if v)
    return ",".join(values)


TOKEN_RESOLVERS: dict[str, Callable[[_Facts], str]] = {
    "os.name": lambda f: f.os_info.name,
    "os.version": lambda f: f.os_info.version,
    "hostname": lambda f: f.os_info.hostname,
    "timezone": lambda f: str(f.utc_offset),
    "ipv4.primary": lambda f: _primary(f, lambda i: _first(i.ipv4)),
    "ipv6.primary": lambda f: _primary(f, lambda i: _first(i.ipv6)),
    "mac.primary": lambda f: _primary(f, lambda i: i.mac),
    "ipv4.others": lambda f: _others(f, lambda i: i.ipv4),
    "ipv6.others": lambda f: _others(f, lambda i: i.ipv6),
    "mac.others": lambda f: _others(f, lambda i: [i.mac]),
}


class TemplateExpander:
    """
    Expands ``$(token)`` placeholders in label values.

    The expander holds no per-call state, so one instance can serve any
    number of calls.
    """

    def __init__(self, provider: FactProvider, max_length: int = OS_COMMENT_MAX):
        """
        Initialize expander.

        Args:
            provider: Source of system facts
            max_length: Capacity of the expansion buffer; results are
                always shorter than this
        """
        if max_length < 1:
            raise ValueError(f"max_length must be positive: {max_length}")
        self.provider = provider
        self.max_length = max_length

    def expand(self, label: Label) -> ExpansionResult:
        """
        Expand every placeholder in a label's value.

        Args:
            label: Label whose value is expanded; it is not modified

        Returns:
            ExpansionResult with the expanded text. ``truncated`` is True
            when the output hit ``max_length`` and the remaining chunks
            were dropped.
        """
        value = label.value[: self.max_length]
        facts = _Facts(self.provider)
        out: list[str] = []
        length = 0
        pos = 0

        while True:
            start = value.find(PLACEHOLDER_OPEN, pos)
            if start == -1:
                break

            literal = value[pos:start]
            if length + len(literal) >= self.max_length:
                return self._truncated(label, out)
            out.append(literal)
            length += len(literal)

            name_start = start + len(PLACEHOLDER_OPEN)
            end = value.find(PLACEHOLDER_CLOSE, name_start)
            if end == -1:
                # Unterminated placeholder stays as literal text
                pos = start
                break

            token = value[name_start:end]
            field = self.resolve(token, facts)
            if length + len(field) >= self.max_length:
                return self._truncated(label, out)
            out.append(field)
            length += len(field)
            pos = end + len(PLACEHOLDER_CLOSE)

        tail = value[pos:]
        if length + len(tail) >= self.max_length:
            return self._truncated(label, out)
        out.append(tail)

        return ExpansionResult("".join(out))

    def resolve(self, token: str, facts: Optional[_Facts] = None) -> str:
        """Resolve one token name; unknown tokens resolve to their own name."""
        resolver = TOKEN_RESOLVERS.get(token)
        if resolver is None:
            logger.debug("Unknown placeholder token: %s", token)
            return token
        return resolver(facts or _Facts(self.provider))

    def _truncated(self, label: Label, out: list[str]) -> ExpansionResult:
        logger.warning(
            "Expansion of label %r exceeds %d characters, output truncated",
            label.key,
            self.max_length,
        )
        return ExpansionResult("".join(out), truncated=True)


def expand_label(
    label: Label,
    provider: Optional[FactProvider] = None,
    max_length: int = OS_COMMENT_MAX,
) -> str:
    """
    Expand a label's value and return the text.

    Args:
        label: Label to expand
        provider: Fact provider; defaults to the one for this platform
        max_length: Expansion buffer capacity

    Returns:
        Expanded value (possibly truncated, see TemplateExpander.expand)
    """
    if provider is None:
        from ..facts.system import get_default_provider

        provider = get_default_provider()
    return TemplateExpander(provider, max_length).expand(label).text
