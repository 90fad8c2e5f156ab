"""
roagen Policy Module

Ordered permit/deny filter rules loaded from the registry's filter files.
"""

from .ruleset import PolicyRuleSet, parse_rule_line

__all__ = ["PolicyRuleSet", "parse_rule_line"]
