"""Apache rule block generation for the IP blocker."""

from ipblocker.htaccess.block import (
    BEGIN_MARKER,
    END_MARKER,
    RuleBlockError,
    apply_rule_block,
    find_rule_block,
    remove_rule_block,
    render_rule_block,
    render_rule_line,
)
from ipblocker.htaccess.file import HtaccessFile, sanitize_and_persist

__all__ = [
    "BEGIN_MARKER",
    "END_MARKER",
    "HtaccessFile",
    "RuleBlockError",
    "apply_rule_block",
    "find_rule_block",
    "remove_rule_block",
    "render_rule_block",
    "render_rule_line",
    "sanitize_and_persist",
]
