"""Membership test of an address against a rule set."""

from __future__ import annotations

from collections.abc import Iterable
from ipaddress import IPv4Address, IPv6Address

from ipblocker.security.address import LiteralRule, RangeRule, Rule, parse_ip

_FULL_MASK = 0xFFFFFFFF


def prefix_mask(prefix_length: int) -> int:
    """32-bit netmask for a prefix length (0 yields an all-zero mask)."""
    if prefix_length == 0:
        return 0
    return (_FULL_MASK << (32 - prefix_length)) & _FULL_MASK


def _in_range(candidate: IPv4Address | IPv6Address, rule: RangeRule) -> bool:
    if not isinstance(candidate, IPv4Address):
        return False
    # Both sides are masked, so a network with host bits set still matches.
    mask = prefix_mask(rule.prefix_length)
    network = int(IPv4Address(rule.network))
    return (int(candidate) & mask) == (network & mask)


def _is_literal(candidate: IPv4Address | IPv6Address, rule: LiteralRule) -> bool:
    return parse_ip(rule.address) == candidate


def match_rule(candidate: str | IPv4Address | IPv6Address, rules: Iterable[Rule]) -> Rule | None:
    """Return the first rule that covers ``candidate``, or None."""
    addr = parse_ip(candidate.strip()) if isinstance(candidate, str) else candidate
    if addr is None:
        return None

    for rule in rules:
        if isinstance(rule, RangeRule):
            if _in_range(addr, rule):
                return rule
        elif _is_literal(addr, rule):
            return rule
    return None


def matches(candidate: str | IPv4Address | IPv6Address, rules: Iterable[Rule]) -> bool:
    """Check whether ``candidate`` is covered by any rule.

    Example:
        >>> matches("10.0.0.5", [RangeRule("10.0.0.0", 24)])
        True
        >>> matches("10.0.1.5", [RangeRule("10.0.0.0", 24)])
        False
    """
    return match_rule(candidate, rules) is not None
