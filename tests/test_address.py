"""Tests for address and CIDR rule parsing."""

from __future__ import annotations

import pytest

from ipblocker.security.address import (
    InvalidAddressError,
    LiteralRule,
    RangeRule,
    parse_ip,
    parse_ipv4,
    parse_rule,
)


class TestParseLiteral:
    """Tests for literal address tokens."""

    @pytest.mark.parametrize("token", ["1.2.3.4", "0.0.0.0", "255.255.255.255", "192.168.1.100"])
    def test_ipv4_round_trips(self, token):
        """Test that valid IPv4 tokens render back to the same text."""
        rule = parse_rule(token)
        assert rule == LiteralRule(address=token)
        assert rule.text == token
        assert str(rule) == token

    def test_whitespace_trimmed(self):
        """Test surrounding whitespace is removed."""
        assert parse_rule("  10.0.0.1\n") == LiteralRule("10.0.0.1")

    def test_ipv6_literal_accepted(self):
        """Test plain IPv6 addresses are accepted as literals."""
        assert parse_rule("2001:db8::1") == LiteralRule("2001:db8::1")

    @pytest.mark.parametrize(
        "token",
        ["", "   ", "not-an-ip", "256.1.1.1", "1.2.3", "1.2.3.4.5", "01.2.3.4", "1.2.3.4 5"],
    )
    def test_invalid_rejected(self, token):
        """Test malformed literals raise InvalidAddressError."""
        with pytest.raises(InvalidAddressError):
            parse_rule(token)


class TestParseRange:
    """Tests for CIDR tokens."""

    def test_basic_cidr(self):
        """Test a canonical CIDR entry."""
        rule = parse_rule("10.0.0.0/8")
        assert rule == RangeRule(network="10.0.0.0", prefix_length=8)
        assert rule.text == "10.0.0.0/8"

    def test_host_bits_kept(self):
        """Test the network address is kept as supplied, not masked."""
        rule = parse_rule("5.6.7.8/24")
        assert rule.network == "5.6.7.8"
        assert rule.text == "5.6.7.8/24"

    def test_prefix_leading_zeros_stripped(self):
        """Test the prefix is re-rendered as a plain integer."""
        assert parse_rule("10.0.0.0/024").text == "10.0.0.0/24"

    def test_prefix_whitespace_stripped(self):
        """Test whitespace around the prefix is ignored."""
        assert parse_rule("10.0.0.0/ 16").text == "10.0.0.0/16"

    @pytest.mark.parametrize("prefix", [0, 1, 24, 32])
    def test_prefix_bounds(self, prefix):
        """Test prefixes 0 through 32 are accepted."""
        assert parse_rule(f"10.0.0.0/{prefix}").prefix_length == prefix

    @pytest.mark.parametrize(
        "token",
        [
            "10.0.0.0/33",
            "10.0.0.0/-1",
            "10.0.0.0/abc",
            "10.0.0.0/",
            "10.0.0.0/1_6",
            "10.0.0.0/+8",
            "300.0.0.0/8",
            "/8",
            "2001:db8::/32",
            "10.0.0.0/8/8",
        ],
    )
    def test_invalid_cidr_rejected(self, token):
        """Test malformed CIDR entries raise InvalidAddressError."""
        with pytest.raises(InvalidAddressError):
            parse_rule(token)

    def test_range_rule_validates_prefix(self):
        """Test RangeRule refuses an out-of-range prefix directly."""
        with pytest.raises(InvalidAddressError):
            RangeRule(network="10.0.0.0", prefix_length=40)


class TestParseHelpers:
    """Tests for address helpers."""

    def test_parse_ip_both_families(self):
        """Test parse_ip handles IPv4 and IPv6."""
        assert parse_ip("1.2.3.4") is not None
        assert parse_ip("::1") is not None
        assert parse_ip("bogus") is None

    def test_parse_ipv4_rejects_ipv6(self):
        """Test parse_ipv4 only accepts IPv4."""
        assert parse_ipv4("1.2.3.4") is not None
        assert parse_ipv4("::1") is None
