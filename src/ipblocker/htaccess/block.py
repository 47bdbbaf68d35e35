"""Rendering and patching of the Apache rule block.

The block sits between fixed markers inside an otherwise free-form
``.htaccess`` file:

    # BEGIN Simple-IP-Blocker Rules

    <Files *>
    	SetEnvIF X-FORWARDED-FOR "^1\\.2\\.3\\.4" DenyIP
    	Order allow,deny
    	Allow from all
    	Deny from env=DenyIP
    </Files>

    # END Simple-IP-Blocker Rules

Range rules are rendered as a match on the first three octets of the
network address, whatever their prefix length. The generated rule is
therefore coarser than in-process matching for prefixes other than /24.
"""

from __future__ import annotations

from ipblocker.security.address import RangeRule, Rule
from ipblocker.security.sanitize import RuleSet

BEGIN_MARKER = "\n\n# BEGIN Simple-IP-Blocker Rules\n"
END_MARKER = "# END Simple-IP-Blocker Rules\n"

_BLOCK_HEADER = BEGIN_MARKER + "\n<Files *>\n"
_BLOCK_FOOTER = (
    "\tOrder allow,deny\n"
    "\tAllow from all\n"
    "\tDeny from env=DenyIP\n"
    "</Files>\n"
    "\n" + END_MARKER
)


class RuleBlockError(ValueError):
    """Raised when an existing rule block has no end marker."""


def _pattern(rule: Rule) -> str:
    if isinstance(rule, RangeRule):
        text = rule.network.rsplit(".", 1)[0] + "."
    else:
        text = rule.address
    return text.replace(".", "\\.")


def render_rule_line(rule: Rule) -> str:
    """Render one SetEnvIF line for a rule."""
    return f'\tSetEnvIF X-FORWARDED-FOR "^{_pattern(rule)}" DenyIP\n'


def render_rule_block(rules: RuleSet) -> str:
    """Render the full delimited block, markers included."""
    lines = "".join(render_rule_line(rule) for rule in rules)
    return _BLOCK_HEADER + lines + _BLOCK_FOOTER


def find_rule_block(content: str) -> tuple[int, int] | None:
    """Locate the existing block as a ``(start, end)`` slice, or None.

    Raises:
        RuleBlockError: If the begin marker is present without an end marker.
    """
    start = content.find(BEGIN_MARKER)
    if start == -1:
        return None
    end = content.find(END_MARKER, start + len(BEGIN_MARKER))
    if end == -1:
        raise RuleBlockError("Rule block begin marker found without end marker")
    return start, end + len(END_MARKER)


def apply_rule_block(content: str, rules: RuleSet) -> str:
    """Insert or replace the rule block in ``content``.

    An empty rule set leaves the content untouched; an existing block is
    never removed here. Everything outside the block span is preserved.
    """
    if not rules:
        return content

    block = render_rule_block(rules)
    span = find_rule_block(content)
    if span is None:
        return content + block

    start, end = span
    return content[:start] + block + content[end:]


def remove_rule_block(content: str) -> str:
    """Strip the rule block span from ``content`` if there is one."""
    span = find_rule_block(content)
    if span is None:
        return content
    start, end = span
    return content[:start] + content[end:]
