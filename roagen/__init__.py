"""
roagen - ROA dataset generation for RPSL route object registries.

Provides policy-driven ROA generation with:
- Ordered permit/deny filter rules per address family
- RPSL route/route6 object parsing
- Max-length clamping against policy bounds
- JSON ROA export with cache validity metadata
"""

__version__ = "0.1.0"
__author__ = "roagen contributors"
