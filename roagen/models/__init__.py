"""
roagen Data Models

This module contains the value types shared by the policy engine: CIDR
prefixes, policy rules, parsed route objects, ROA entries and the final
dataset.
"""

from dataclasses import dataclass, field
from enum import Enum
from ipaddress import IPv4Address, IPv6Address, ip_address
from typing import Dict, Optional, Tuple, Union

from ..utils.error_handling import CIDRParseError

IPAddress = Union[IPv4Address, IPv6Address]


@dataclass(frozen=True)
class CIDR:
    """
    An address-family-aware prefix in address/length form.

    The address is kept exactly as written (host bits are not masked) and the
    length is not checked against the family width.
    """
    address: IPAddress
    prefix_length: int

    @classmethod
    def parse(cls, text: str) -> 'CIDR':
        """Parse "address/length" text, raising CIDRParseError on failure."""
        parts = text.split("/")
        if len(parts) != 2:
            raise CIDRParseError(text, "expected exactly one '/' separator")

        try:
            address = ip_address(parts[0])
        except ValueError as e:
            raise CIDRParseError(text, str(e)) from e

        length_text = parts[1]
        if not length_text.isascii() or not length_text.isdigit():
            raise CIDRParseError(text, f"prefix length '{length_text}' is not a non-negative integer")

        return cls(address, int(length_text))

    @property
    def bits(self) -> int:
        """Bit width of the address family (32 or 128)."""
        return self.address.max_prefixlen

    @property
    def version(self) -> int:
        return self.address.version

    def contains(self, other: IPAddress) -> bool:
        """
        True if the top prefix_length bits of other match this prefix.

        Addresses of a different family are never contained.
        """
        if other.version != self.address.version:
            return False

        if self.prefix_length == 0:
            return True

        shift = self.bits - self.prefix_length
        if shift < 0:
            return False

        return int(self.address) >> shift == int(other) >> shift

    def __str__(self) -> str:
        return f"{self.address}/{self.prefix_length}"


class Verdict(Enum):
    """Policy verdict for an address range"""
    PERMIT = "permit"
    DENY = "deny"


@dataclass(frozen=True)
class PolicyRule:
    """One filter line: a CIDR range, its verdict and the ROA max-length bounds."""
    cidr: CIDR
    verdict: Verdict
    min_length: int
    max_length: int

    @property
    def permits(self) -> bool:
        return self.verdict is Verdict.PERMIT

    def clamp(self, max_length: Optional[int]) -> int:
        """
        Resolve a requested max length against this rule's bounds.

        None yields the rule maximum; values above the maximum are lowered to
        it and values below the minimum are raised to it.
        """
        if max_length is None:
            return self.max_length
        if max_length > self.max_length:
            return self.max_length
        if max_length < self.min_length:
            return self.min_length
        return max_length

    def __str__(self) -> str:
        return f"{self.verdict.value} {self.cidr} {self.min_length} {self.max_length}"


@dataclass(frozen=True)
class RouteRecord:
    """
    Attributes extracted from one route or route6 object.

    prefix is the raw (lowercased) text of the route attribute; it is parsed
    as a CIDR only during resolution.
    """
    prefix: str
    origins: Tuple[str, ...] = ()
    max_length: Optional[int] = None
    source: Optional[str] = None


@dataclass(frozen=True)
class ROAEntry:
    """One authorization of asn to originate prefix up to max_length."""
    prefix: str
    max_length: int
    asn: str

    def to_dict(self) -> Dict:
        """Convert to the output JSON shape."""
        return {
            'prefix': self.prefix,
            'maxLength': self.max_length,
            'asn': self.asn,
        }


@dataclass(frozen=True)
class DatasetMetadata:
    """Cache validity metadata for a generated dataset"""
    count: int
    generated_at: int
    valid_until: int

    def to_dict(self) -> Dict:
        return {
            'counts': self.count,
            'generated': self.generated_at,
            'valid': self.valid_until,
        }


@dataclass(frozen=True)
class ROADataset:
    """The complete output document"""
    metadata: DatasetMetadata
    entries: Tuple[ROAEntry, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict:
        """Convert to a dictionary for JSON serialization."""
        return {
            'metadata': self.metadata.to_dict(),
            'roas': [entry.to_dict() for entry in self.entries],
        }


__all__ = [
    'IPAddress', 'CIDR', 'Verdict', 'PolicyRule', 'RouteRecord',
    'ROAEntry', 'DatasetMetadata', 'ROADataset',
]
