"""Blocker adapter between a host application and the matching core.

The host supplies an OptionStore and the raw request addresses; the
blocker loads the stored lists, sanitizes them and returns a verdict.
Updating the htaccess-mirrored list also rewrites the rules file.

Usage:
    blocker = IPBlocker(JsonOptionStore("ipblocker.json"), htaccess_path=".htaccess")
    blocker.update_blocked_ips(BLOCKED_RA_IPS, "192.168.1.100, 10.0.0.0/8")

    verdict = blocker.check(forwarded_for=None, remote_address="10.1.2.3")
    if not verdict.allowed:
        return 403  # Forbidden
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import structlog

from ipblocker.core.config import BlockerConfig
from ipblocker.htaccess.file import HtaccessFile, sanitize_and_persist
from ipblocker.security.decision import AccessVerdict, RequestAddresses, decide
from ipblocker.security.sanitize import RuleSet, sanitize
from ipblocker.storage import (
    BLOCKED_HTACCESS_XFF_IPS,
    BLOCKED_RA_IPS,
    BLOCKED_XFF_IPS,
    OPTION_NAMES,
    JsonOptionStore,
    OptionStore,
)

logger = structlog.get_logger()


class IPBlocker:
    """Checks requests against the stored block lists."""

    def __init__(
        self,
        store: OptionStore,
        htaccess_path: str | Path | None = None,
        lock: bool = True,
        mirror: bool = True,
    ) -> None:
        """Initialize the blocker.

        Args:
            store: Where the block lists are persisted.
            htaccess_path: Rules file for the htaccess list. None disables
                the rules file entirely.
            lock: Hold an advisory lock while patching the rules file.
            mirror: Write the htaccess list into the rules file on update.
                Uninstalling strips the rule block either way.
        """
        self.store = store
        self.htaccess_path = Path(htaccess_path) if htaccess_path is not None else None
        self.lock = lock
        self.mirror = mirror

    @classmethod
    def from_config(cls, config: BlockerConfig) -> IPBlocker:
        return cls(
            JsonOptionStore(config.options_path),
            htaccess_path=config.htaccess_path,
            lock=config.htaccess_lock,
            mirror=config.htaccess_enabled,
        )

    def _rules(self, option: str) -> RuleSet:
        return sanitize(self.store.get_option(option, []))

    def blocked_ips(self, option: str) -> list[str]:
        """Stored entries of a block list."""
        return self._rules(option).to_list()

    def display_value(self, option: str) -> str:
        """Block list as the comma-separated text shown in a settings form."""
        return ", ".join(self.blocked_ips(option))

    def check(
        self,
        forwarded_for: str | None = None,
        remote_address: str | None = None,
    ) -> AccessVerdict:
        """Check request addresses against the forwarded and remote lists."""
        verdict = decide(
            RequestAddresses(forwarded_for=forwarded_for, remote_address=remote_address),
            forwarded_rules=self._rules(BLOCKED_XFF_IPS),
            remote_rules=self._rules(BLOCKED_RA_IPS),
        )
        if not verdict.allowed:
            logger.warning(
                "Request blocked by IP rule",
                ip=verdict.address,
                source=verdict.source.value if verdict.source else None,
                rule=str(verdict.matched_rule),
            )
        return verdict

    def update_blocked_ips(self, option: str, value: str | Sequence[str] | None) -> RuleSet:
        """Sanitize and store a block list.

        Storing the htaccess list also writes its rules into the rules file.

        Raises:
            ValueError: If ``option`` is not a known block list.
            RuleBlockError: If the rules file has a begin marker without an
                end marker. The file and the stored list are left unchanged.
            OSError: If the rules file cannot be written.
        """
        if option not in OPTION_NAMES:
            raise ValueError(f"Unknown block list: {option}")

        if option == BLOCKED_HTACCESS_XFF_IPS and self.mirror and self.htaccess_path is not None:
            rules = sanitize_and_persist(value, self.htaccess_path, lock=self.lock)
        else:
            rules = sanitize(value)

        self.store.update_option(option, rules.to_list())
        logger.info("Block list updated", option=option, entries=len(rules))
        return rules

    def uninstall(self) -> None:
        """Delete every stored block list and strip the rule block."""
        for option in OPTION_NAMES:
            self.store.delete_option(option)

        if self.htaccess_path is not None:
            HtaccessFile(self.htaccess_path, lock=self.lock).remove()
        logger.info("IP blocker uninstalled")
