"""Sanitization of user-supplied block lists.

Sanitizing is lossy on purpose: malformed entries are dropped without
an error, duplicates are collapsed by their normalized text.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence

import structlog

from ipblocker.security.address import InvalidAddressError, Rule, parse_rule

logger = structlog.get_logger()


class RuleSet:
    """Ordered, text-deduplicated collection of rules."""

    __slots__ = ("_rules",)

    def __init__(self, rules: Iterable[Rule] = ()) -> None:
        seen: set[str] = set()
        unique: list[Rule] = []
        for rule in rules:
            if rule.text in seen:
                continue
            seen.add(rule.text)
            unique.append(rule)
        self._rules: tuple[Rule, ...] = tuple(unique)

    def __iter__(self) -> Iterator[Rule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __bool__(self) -> bool:
        return bool(self._rules)

    def __contains__(self, item: object) -> bool:
        return item in self._rules

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RuleSet):
            return NotImplemented
        return self._rules == other._rules

    def __hash__(self) -> int:
        return hash(self._rules)

    def __repr__(self) -> str:
        return f"RuleSet({list(self._rules)!r})"

    def to_list(self) -> list[str]:
        """Normalized text of every rule, for persistence."""
        return [rule.text for rule in self._rules]


def sanitize(value: str | Sequence[str] | None) -> RuleSet:
    """Turn a raw block list into a RuleSet.

    Args:
        value: A comma-separated string (as posted from a form) or a
            sequence of entries (as loaded from stored settings).

    Returns:
        The valid entries, deduplicated, in first-seen order.
    """
    if not value:
        return RuleSet()

    tokens = value.split(",") if isinstance(value, str) else value

    rules: list[Rule] = []
    for token in tokens:
        if not isinstance(token, str):
            logger.debug("Dropping non-string block list entry", entry=repr(token))
            continue
        try:
            rules.append(parse_rule(token))
        except InvalidAddressError:
            logger.debug("Dropping invalid block list entry", entry=token)

    return RuleSet(rules)
