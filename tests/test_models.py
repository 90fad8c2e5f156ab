"""
Tests for roagen data models

- CIDR parsing, rendering and containment
- PolicyRule max-length clamping
- ROA dataset serialization shape
"""

import unittest
from ipaddress import ip_address

from roagen.models import (
    CIDR, DatasetMetadata, PolicyRule, ROADataset, ROAEntry, Verdict
)
from roagen.utils.error_handling import CIDRParseError


class TestCIDRParse(unittest.TestCase):
    """Test CIDR text parsing."""

    def test_parse_ipv4(self):
        cidr = CIDR.parse("172.20.0.0/14")
        self.assertEqual(cidr.address, ip_address("172.20.0.0"))
        self.assertEqual(cidr.prefix_length, 14)
        self.assertEqual(cidr.version, 4)
        self.assertEqual(cidr.bits, 32)

    def test_parse_ipv6(self):
        cidr = CIDR.parse("fd00::/8")
        self.assertEqual(cidr.version, 6)
        self.assertEqual(cidr.bits, 128)
        self.assertEqual(cidr.prefix_length, 8)

    def test_render_round_trip(self):
        for text in ("10.0.0.0/8", "0.0.0.0/0", "fd42:d42:d42::/48", "::/0"):
            self.assertEqual(str(CIDR.parse(text)), text)

    def test_host_bits_are_kept(self):
        cidr = CIDR.parse("10.1.2.3/8")
        self.assertEqual(str(cidr), "10.1.2.3/8")

    def test_length_is_not_range_checked(self):
        self.assertEqual(CIDR.parse("10.0.0.0/40").prefix_length, 40)

    def test_invalid_inputs(self):
        bad = [
            "10.0.0.0",
            "10.0.0.0/8/8",
            "10.0.0/8",
            "not-an-address/8",
            "10.0.0.0/",
            "10.0.0.0/-1",
            "10.0.0.0/abc",
            "10.0.0.0/ 8",
            "",
        ]
        for text in bad:
            with self.subTest(text=text):
                with self.assertRaises(CIDRParseError):
                    CIDR.parse(text)

    def test_parse_error_is_value_error(self):
        with self.assertRaises(ValueError):
            CIDR.parse("garbage")


class TestCIDRContains(unittest.TestCase):
    """Test prefix containment."""

    def test_contains_own_address(self):
        for text in ("10.0.0.0/8", "192.168.1.0/24", "fd00::/8", "2001:db8::1/128"):
            cidr = CIDR.parse(text)
            self.assertTrue(cidr.contains(cidr.address), text)

    def test_ipv4_containment(self):
        cidr = CIDR.parse("172.20.0.0/14")
        self.assertTrue(cidr.contains(ip_address("172.20.0.0")))
        self.assertTrue(cidr.contains(ip_address("172.23.255.255")))
        self.assertFalse(cidr.contains(ip_address("172.24.0.0")))
        self.assertFalse(cidr.contains(ip_address("172.19.255.255")))

    def test_ipv6_containment(self):
        cidr = CIDR.parse("fd00::/8")
        self.assertTrue(cidr.contains(ip_address("fd42:d42:d42::1")))
        self.assertFalse(cidr.contains(ip_address("fe80::1")))

    def test_zero_length_contains_whole_family(self):
        self.assertTrue(CIDR.parse("0.0.0.0/0").contains(ip_address("255.255.255.255")))
        self.assertTrue(CIDR.parse("::/0").contains(ip_address("ffff::1")))

    def test_zero_length_with_host_bits(self):
        self.assertTrue(CIDR.parse("10.0.0.0/0").contains(ip_address("192.0.2.1")))

    def test_cross_family_never_contained(self):
        self.assertFalse(CIDR.parse("0.0.0.0/0").contains(ip_address("::1")))
        self.assertFalse(CIDR.parse("::/0").contains(ip_address("10.0.0.1")))
        self.assertFalse(CIDR.parse("::ffff:0:0/96").contains(ip_address("10.0.0.1")))

    def test_full_length_is_exact_match(self):
        cidr = CIDR.parse("192.0.2.1/32")
        self.assertTrue(cidr.contains(ip_address("192.0.2.1")))
        self.assertFalse(cidr.contains(ip_address("192.0.2.2")))

    def test_out_of_range_length_contains_nothing(self):
        cidr = CIDR.parse("10.0.0.0/33")
        self.assertFalse(cidr.contains(ip_address("10.0.0.0")))


class TestPolicyRuleClamp(unittest.TestCase):
    """Test max-length clamping against rule bounds."""

    def setUp(self):
        self.rule = PolicyRule(CIDR.parse("10.0.0.0/8"), Verdict.PERMIT, 16, 24)

    def test_clamp_table(self):
        cases = [(None, 24), (30, 24), (10, 16), (20, 20), (16, 16), (24, 24)]
        for requested, expected in cases:
            with self.subTest(requested=requested):
                self.assertEqual(self.rule.clamp(requested), expected)

    def test_inverted_bounds_check_max_first(self):
        rule = PolicyRule(CIDR.parse("10.0.0.0/8"), Verdict.PERMIT, 24, 16)
        self.assertEqual(rule.clamp(30), 16)
        self.assertEqual(rule.clamp(10), 24)

    def test_permits(self):
        self.assertTrue(self.rule.permits)
        deny = PolicyRule(CIDR.parse("10.0.0.0/8"), Verdict.DENY, 0, 32)
        self.assertFalse(deny.permits)

    def test_str(self):
        self.assertEqual(str(self.rule), "permit 10.0.0.0/8 16 24")


class TestDatasetSerialization(unittest.TestCase):
    """Test the output JSON shape."""

    def test_entry_to_dict(self):
        entry = ROAEntry(prefix="10.1.0.0/16", max_length=24, asn="AS100")
        self.assertEqual(entry.to_dict(), {"prefix": "10.1.0.0/16", "maxLength": 24, "asn": "AS100"})

    def test_dataset_to_dict(self):
        dataset = ROADataset(
            metadata=DatasetMetadata(count=1, generated_at=100, valid_until=200),
            entries=(ROAEntry("fd00::/48", 64, "AS4242420000"),),
        )
        data = dataset.to_dict()

        self.assertEqual(list(data), ["metadata", "roas"])
        self.assertEqual(data["metadata"], {"counts": 1, "generated": 100, "valid": 200})
        self.assertEqual(data["roas"], [{"prefix": "fd00::/48", "maxLength": 64, "asn": "AS4242420000"}])

    def test_empty_dataset(self):
        dataset = ROADataset(metadata=DatasetMetadata(0, 5, 10))
        self.assertEqual(dataset.to_dict()["roas"], [])


if __name__ == '__main__':
    unittest.main()
