"""Tests for the match engine."""

from __future__ import annotations

from ipaddress import IPv4Address

import pytest

from ipblocker.security.address import LiteralRule, RangeRule
from ipblocker.security.matching import match_rule, matches, prefix_mask
from ipblocker.security.sanitize import RuleSet, sanitize


class TestPrefixMask:
    """Tests for prefix_mask()."""

    @pytest.mark.parametrize(
        ("prefix", "mask"),
        [(0, 0), (1, 0x80000000), (8, 0xFF000000), (24, 0xFFFFFF00), (32, 0xFFFFFFFF)],
    )
    def test_masks(self, prefix, mask):
        """Test masks for representative prefix lengths."""
        assert prefix_mask(prefix) == mask


class TestMatches:
    """Tests for matches()."""

    def test_range_contains(self):
        """Test an address inside a /24."""
        assert matches("10.0.0.5", RuleSet([RangeRule("10.0.0.0", 24)])) is True

    def test_range_excludes(self):
        """Test an address outside a /24."""
        assert matches("10.0.1.5", RuleSet([RangeRule("10.0.0.0", 24)])) is False

    def test_literal_equal(self):
        """Test literal equality."""
        assert matches("192.168.1.1", RuleSet([LiteralRule("192.168.1.1")])) is True
        assert matches("192.168.1.2", RuleSet([LiteralRule("192.168.1.1")])) is False

    def test_empty_rules(self):
        """Test nothing matches an empty rule set."""
        assert matches("1.2.3.4", RuleSet()) is False

    def test_host_bits_in_network(self):
        """Test a network with host bits set matches by masking both sides."""
        rules = RuleSet([RangeRule("10.0.0.77", 24)])
        assert matches("10.0.0.1", rules) is True
        assert matches("10.0.1.1", rules) is False

    def test_zero_prefix_matches_everything(self):
        """Test /0 covers every IPv4 address."""
        rules = RuleSet([RangeRule("1.2.3.4", 0)])
        assert matches("255.255.255.255", rules) is True
        assert matches("0.0.0.0", rules) is True

    def test_full_prefix_is_exact(self):
        """Test /32 only covers the one address."""
        rules = RuleSet([RangeRule("10.0.0.1", 32)])
        assert matches("10.0.0.1", rules) is True
        assert matches("10.0.0.2", rules) is False

    def test_odd_prefix(self):
        """Test a prefix that does not fall on an octet boundary."""
        rules = sanitize("172.16.0.0/12")
        assert matches("172.31.255.255", rules) is True
        assert matches("172.32.0.0", rules) is False

    def test_ipv6_candidate_skips_ranges(self):
        """Test IPv6 candidates never match IPv4 ranges."""
        assert matches("::1", RuleSet([RangeRule("0.0.0.0", 0)])) is False

    def test_ipv6_literal(self):
        """Test IPv6 literals compare by address, not text."""
        rules = sanitize("2001:db8::1")
        assert matches("2001:0db8:0000::1", rules) is True

    def test_accepts_address_objects(self):
        """Test an IPv4Address candidate is accepted."""
        assert matches(IPv4Address("10.0.0.5"), sanitize("10.0.0.0/8")) is True

    def test_invalid_candidate(self):
        """Test a malformed candidate never matches."""
        assert matches("garbage", sanitize("0.0.0.0/0")) is False


class TestMatchRule:
    """Tests for match_rule()."""

    def test_returns_first_match(self):
        """Test the first covering rule is returned."""
        rules = sanitize("10.0.0.0/8, 10.0.0.5")
        assert match_rule("10.0.0.5", rules) == RangeRule("10.0.0.0", 8)

    def test_no_match(self):
        """Test None when nothing matches."""
        assert match_rule("8.8.8.8", sanitize("10.0.0.0/8")) is None
