"""Allow/deny decision for an incoming request.

Two independent lists are consulted in a fixed order:
1. The proxy-forwarded address (X-Forwarded-For) against the forwarded list.
2. The direct remote address against the remote list.

The first match denies the request. A missing or malformed address skips
its check, so a request without any address information is always allowed.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ipblocker.security.address import Rule, parse_ip
from ipblocker.security.matching import match_rule
from ipblocker.security.sanitize import RuleSet

FORBIDDEN_STATUS = 403
FORBIDDEN_MESSAGE = "Forbidden"


class Verdict(Enum):
    """Outcome of an access check."""

    ALLOW = "allow"
    DENY = "deny"


class AddressSource(Enum):
    """Which request address produced a denial."""

    FORWARDED_FOR = "forwarded_for"
    REMOTE_ADDRESS = "remote_address"


@dataclass(frozen=True)
class RequestAddresses:
    """Raw client addresses as presented by the request."""

    forwarded_for: str | None = None
    remote_address: str | None = None


@dataclass(frozen=True)
class AccessVerdict:
    """Result of an access check."""

    verdict: Verdict
    source: AddressSource | None = None
    address: str | None = None
    matched_rule: Rule | None = None

    @property
    def allowed(self) -> bool:
        return self.verdict is Verdict.ALLOW

    @property
    def status_code(self) -> int | None:
        """HTTP status the host should terminate with, None when allowed."""
        return None if self.allowed else FORBIDDEN_STATUS


ALLOWED = AccessVerdict(verdict=Verdict.ALLOW)


def _check(raw: str | None, rules: RuleSet) -> tuple[str, Rule] | None:
    if raw is None:
        return None
    address = raw.strip()
    addr = parse_ip(address)
    if addr is None:
        return None
    rule = match_rule(addr, rules)
    if rule is None:
        return None
    return address, rule


def decide(
    request: RequestAddresses,
    forwarded_rules: RuleSet,
    remote_rules: RuleSet,
) -> AccessVerdict:
    """Decide whether a request is allowed.

    Args:
        request: The forwarded and remote addresses of the request.
        forwarded_rules: Rules applied to the X-Forwarded-For address.
        remote_rules: Rules applied to the remote address.

    Returns:
        An AccessVerdict. Never raises for bad input.
    """
    hit = _check(request.forwarded_for, forwarded_rules)
    if hit is not None:
        return AccessVerdict(
            verdict=Verdict.DENY,
            source=AddressSource.FORWARDED_FOR,
            address=hit[0],
            matched_rule=hit[1],
        )

    hit = _check(request.remote_address, remote_rules)
    if hit is not None:
        return AccessVerdict(
            verdict=Verdict.DENY,
            source=AddressSource.REMOTE_ADDRESS,
            address=hit[0],
            matched_rule=hit[1],
        )

    return ALLOWED
