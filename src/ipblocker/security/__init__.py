"""Address matching for the IP blocker.

This module provides:
- Address and IPv4 CIDR rule parsing
- Block list sanitization (lossy, text-deduplicated)
- Literal and CIDR membership tests
- The forwarded/remote allow-deny decision
"""

from ipblocker.security.address import (
    InvalidAddressError,
    LiteralRule,
    RangeRule,
    Rule,
    parse_ip,
    parse_rule,
)
from ipblocker.security.decision import (
    FORBIDDEN_MESSAGE,
    FORBIDDEN_STATUS,
    AccessVerdict,
    AddressSource,
    RequestAddresses,
    Verdict,
    decide,
)
from ipblocker.security.matching import match_rule, matches, prefix_mask
from ipblocker.security.sanitize import RuleSet, sanitize

__all__ = [
    # Rules
    "InvalidAddressError",
    "LiteralRule",
    "RangeRule",
    "Rule",
    "parse_ip",
    "parse_rule",
    # Sanitizing
    "RuleSet",
    "sanitize",
    # Matching
    "match_rule",
    "matches",
    "prefix_mask",
    # Decision
    "FORBIDDEN_MESSAGE",
    "FORBIDDEN_STATUS",
    "AccessVerdict",
    "AddressSource",
    "RequestAddresses",
    "Verdict",
    "decide",
]
