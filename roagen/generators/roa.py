"""
ROA Resolution - Route objects to ROA entries

Combines a parsed route object with the first matching policy rule:

1. parse the route prefix as a CIDR (hard error on failure)
2. find the first rule containing the prefix address (hard error if none)
3. deny rules drop the object
4. clamp the object's max-length into the rule's [min, max] bounds,
   defaulting to the rule maximum
5. drop the object if its own prefix is longer than the clamped max-length
6. emit one entry per origin

Drops in steps 3 and 5 are policy outcomes, not errors.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from ..models import CIDR, PolicyRule, ROAEntry, RouteRecord
from ..policy.ruleset import PolicyRuleSet
from ..utils.error_handling import NoPolicyError


class ResolutionOutcome(Enum):
    """How a route object was resolved"""
    EMITTED = "emitted"
    DENIED = "denied"
    TOO_SPECIFIC = "too-specific"


@dataclass(frozen=True)
class Resolution:
    """Full result of resolving one route object"""
    record: RouteRecord
    prefix: CIDR
    rule: PolicyRule
    outcome: ResolutionOutcome
    effective_max_length: Optional[int] = None
    entries: Tuple[ROAEntry, ...] = ()


class ROAResolver:
    """Resolve route objects against a policy rule set"""

    def __init__(self, ruleset: PolicyRuleSet, logger: Optional[logging.Logger] = None):
        self.ruleset = ruleset
        self.logger = logger or logging.getLogger(__name__)

    def explain(self, record: RouteRecord) -> Resolution:
        """
        Resolve a route object and report how the result was reached.

        Raises:
            CIDRParseError: the route prefix is malformed
            NoPolicyError: no rule covers the prefix address
        """
        prefix = CIDR.parse(record.prefix)

        rule = self.ruleset.match(prefix.address)
        if rule is None:
            raise NoPolicyError(prefix.address, record.source)

        if not rule.permits:
            return Resolution(record, prefix, rule, ResolutionOutcome.DENIED)

        effective = rule.clamp(record.max_length)

        if prefix.prefix_length > effective:
            return Resolution(record, prefix, rule, ResolutionOutcome.TOO_SPECIFIC,
                              effective_max_length=effective)

        entries = tuple(
            ROAEntry(prefix=record.prefix, max_length=effective, asn=origin)
            for origin in record.origins
        )

        return Resolution(record, prefix, rule, ResolutionOutcome.EMITTED,
                          effective_max_length=effective, entries=entries)

    def resolve(self, record: RouteRecord) -> Tuple[ROAEntry, ...]:
        """Resolve a route object to its ROA entries (possibly none)."""
        return self.explain(record).entries
