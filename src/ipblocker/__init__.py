"""IP blocker - deny requests by forwarded or remote address."""

from ipblocker.blocker import IPBlocker
from ipblocker.security import (
    AccessVerdict,
    LiteralRule,
    RangeRule,
    RequestAddresses,
    RuleSet,
    Verdict,
    decide,
    matches,
    parse_rule,
    sanitize,
)

__version__ = "1.0.0"

__all__ = [
    "AccessVerdict",
    "IPBlocker",
    "LiteralRule",
    "RangeRule",
    "RequestAddresses",
    "RuleSet",
    "Verdict",
    "__version__",
    "decide",
    "matches",
    "parse_rule",
    "sanitize",
]
