"""Address and CIDR rule parsing.

A rule is either a literal address or an IPv4 range in CIDR notation.
Range rules keep the network address exactly as it was supplied; host bits
are masked at match time, not here.

Example:
    rule = parse_rule(" 10.0.0.0/024 ")
    assert rule == RangeRule(network="10.0.0.0", prefix_length=24)
    assert rule.text == "10.0.0.0/24"
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from ipaddress import IPv4Address, IPv6Address, ip_address

_PREFIX_RE = re.compile(r"^[0-9]+$")

MAX_PREFIX_LENGTH = 32


class InvalidAddressError(ValueError):
    """Raised when a token is neither a valid address nor a valid IPv4 CIDR."""


@dataclass(frozen=True)
class LiteralRule:
    """A single blocked address."""

    address: str

    @property
    def text(self) -> str:
        return self.address

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class RangeRule:
    """A blocked IPv4 range, ``network/prefix_length``."""

    network: str
    prefix_length: int

    def __post_init__(self) -> None:
        if not 0 <= self.prefix_length <= MAX_PREFIX_LENGTH:
            raise InvalidAddressError(f"Prefix length out of range: {self.prefix_length}")

    @property
    def text(self) -> str:
        return f"{self.network}/{self.prefix_length}"

    def __str__(self) -> str:
        return self.text


Rule = LiteralRule | RangeRule


def parse_ip(value: str) -> IPv4Address | IPv6Address | None:
    """Parse an IPv4 or IPv6 address, returning None if it is not one."""
    try:
        return ip_address(value)
    except ValueError:
        return None


def parse_ipv4(value: str) -> IPv4Address | None:
    """Parse a dotted-quad IPv4 address, returning None if it is not one."""
    try:
        return IPv4Address(value)
    except ValueError:
        return None


def parse_rule(token: str) -> Rule:
    """Parse a single user-supplied token into a rule.

    Args:
        token: An address ("192.168.1.1", "2001:db8::1") or an IPv4 CIDR
            ("10.0.0.0/8"). Surrounding whitespace is ignored.

    Returns:
        A LiteralRule or a RangeRule.

    Raises:
        InvalidAddressError: If the token is malformed.
    """
    token = token.strip()
    if not token:
        raise InvalidAddressError("Empty address")

    if "/" in token:
        address, _, suffix = token.partition("/")
        address = address.strip()
        suffix = suffix.strip()
        if not _PREFIX_RE.match(suffix):
            raise InvalidAddressError(f"Invalid prefix length: {token}")
        prefix_length = int(suffix)
        if prefix_length > MAX_PREFIX_LENGTH:
            raise InvalidAddressError(f"Prefix length out of range: {token}")
        if parse_ipv4(address) is None:
            raise InvalidAddressError(f"Invalid network address: {token}")
        return RangeRule(network=address, prefix_length=prefix_length)

    if parse_ip(token) is None:
        raise InvalidAddressError(f"Invalid IP address: {token}")
    return LiteralRule(address=token)
