"""
Policy Rule Sets - Ordered permit/deny filters over address ranges

Filter files are line oriented. Only lines that start with a decimal digit
are candidate rules:

    <index>  (permit|deny)  <CIDR>  <min-length>  <max-length>

Everything else (headers, comments, blank lines) is ignored, and a candidate
line that fails to parse is dropped without error. Dropped candidates are
reported to the diagnostics sink so operators can still find them.
"""

import logging
from typing import Iterable, Iterator, Optional, Tuple

from ..models import CIDR, IPAddress, PolicyRule, Verdict
from ..reports.diagnostics import DiagnosticsSink, NullDiagnostics
from ..utils.error_handling import CIDRParseError

logger = logging.getLogger(__name__)

VERDICTS = {
    "permit": Verdict.PERMIT,
    "deny": Verdict.DENY,
}


def parse_rule_line(line: str) -> PolicyRule:
    """
    Parse one candidate filter line.

    Raises ValueError (CIDRParseError for a bad range) describing why the
    line is not a rule.
    """
    tokens = line.split()
    if len(tokens) < 5:
        raise ValueError(f"expected 5 fields, found {len(tokens)}")

    verdict = VERDICTS.get(tokens[1])
    if verdict is None:
        raise ValueError(f"unknown verdict '{tokens[1]}'")

    cidr = CIDR.parse(tokens[2])
    min_length = _parse_length(tokens[3], "min-length")
    max_length = _parse_length(tokens[4], "max-length")

    return PolicyRule(cidr, verdict, min_length, max_length)


def _parse_length(token: str, name: str) -> int:
    if not token.isascii() or not token.isdigit():
        raise ValueError(f"{name} '{token}' is not a non-negative integer")
    return int(token)


def _is_candidate(line: str) -> bool:
    return bool(line) and "0" <= line[0] <= "9"


class PolicyRuleSet:
    """
    Ordered, read-only sequence of policy rules.

    match() is first-match in declared order: the earliest rule containing an
    address wins even when a later rule is more specific.
    """

    def __init__(self, rules: Iterable[PolicyRule] = ()):
        self._rules: Tuple[PolicyRule, ...] = tuple(rules)

    @classmethod
    def from_text(cls, text: str, source: Optional[str] = None,
                  diagnostics: Optional[DiagnosticsSink] = None) -> 'PolicyRuleSet':
        """
        Build a rule set from the text of one filter file.

        Args:
            text: Raw filter file content
            source: Name of the file, used in diagnostics
            diagnostics: Sink for discarded candidate lines
        """
        diagnostics = diagnostics or NullDiagnostics()
        rules = []

        for line_number, line in enumerate(text.split("\n"), start=1):
            if not _is_candidate(line):
                continue

            try:
                rules.append(parse_rule_line(line))
            except (CIDRParseError, ValueError) as e:
                diagnostics.policy_line_discarded(source, line_number, line, str(e))

        logger.debug(f"Parsed {len(rules)} policy rules from {source or 'text'}")
        return cls(rules)

    @classmethod
    def concat(cls, *rulesets: 'PolicyRuleSet') -> 'PolicyRuleSet':
        """Concatenate rule sets, keeping each one's order."""
        rules = []
        for ruleset in rulesets:
            rules.extend(ruleset)
        return cls(rules)

    def match(self, address: IPAddress) -> Optional[PolicyRule]:
        """Return the first rule whose range contains address, or None."""
        for rule in self._rules:
            if rule.cidr.contains(address):
                return rule
        return None

    @property
    def rules(self) -> Tuple[PolicyRule, ...]:
        return self._rules

    def __iter__(self) -> Iterator[PolicyRule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __repr__(self) -> str:
        return f"PolicyRuleSet({len(self._rules)} rules)"
