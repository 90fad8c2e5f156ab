"""
Diagnostics for Discarded Registry Input

The ROA output silently skips malformed filter lines, route objects that fail
to resolve, and route objects that policy drops on purpose. The sinks in this
module observe those events without changing the dataset:

- NullDiagnostics discards everything (library default)
- LoggingDiagnostics writes one debug line per event
- DiagnosticsCollector keeps events in memory and can write a YAML report
"""

import logging
from dataclasses import asdict, dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

import yaml

from ..utils.fileops import atomic_write_text


class DropReason:
    """Reasons for intentional empty results"""
    DENIED = "denied"
    TOO_SPECIFIC = "too-specific"


@dataclass
class PolicyLineEvent:
    """A candidate filter line that did not parse"""
    source: Optional[str]
    line_number: int
    line: str
    reason: str


@dataclass
class RecordErrorEvent:
    """A route object aborted by a hard error"""
    source: Optional[str]
    error_type: str
    message: str


@dataclass
class RecordDropEvent:
    """A route object that resolved to zero entries by policy"""
    source: Optional[str]
    prefix: str
    reason: str
    rule: Optional[str] = None


class DiagnosticsSink:
    """Observer interface for input the pipeline discards"""

    def policy_line_discarded(self, source: Optional[str], line_number: int,
                              line: str, reason: str) -> None:
        pass

    def record_error(self, source: Optional[str], error: Exception) -> None:
        pass

    def record_dropped(self, source: Optional[str], prefix: str, reason: str,
                       rule: Optional[str] = None) -> None:
        pass


class NullDiagnostics(DiagnosticsSink):
    """Sink that ignores every event"""


class LoggingDiagnostics(DiagnosticsSink):
    """Sink that logs every event at debug level"""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger("roagen.diagnostics")

    def policy_line_discarded(self, source, line_number, line, reason):
        self.logger.debug(f"Ignoring policy line {source}:{line_number} ({reason}): {line.strip()}")

    def record_error(self, source, error):
        self.logger.debug(f"Skipping route object {source}: {error}")

    def record_dropped(self, source, prefix, reason, rule=None):
        suffix = f" by rule '{rule}'" if rule else ""
        self.logger.debug(f"No ROA for {prefix} from {source}: {reason}{suffix}")


@dataclass
class DiagnosticsCollector(DiagnosticsSink):
    """
    In-memory sink that keeps every event for reporting.

    An optional downstream sink (usually LoggingDiagnostics) receives each
    event as well.
    """
    policy_lines: List[PolicyLineEvent] = field(default_factory=list)
    record_errors: List[RecordErrorEvent] = field(default_factory=list)
    record_drops: List[RecordDropEvent] = field(default_factory=list)
    forward_to: Optional[DiagnosticsSink] = None

    def policy_line_discarded(self, source, line_number, line, reason):
        self.policy_lines.append(PolicyLineEvent(source, line_number, line.rstrip("\r"), reason))
        if self.forward_to:
            self.forward_to.policy_line_discarded(source, line_number, line, reason)

    def record_error(self, source, error):
        message = getattr(error, "message", None) or str(error)
        self.record_errors.append(RecordErrorEvent(source, type(error).__name__, message))
        if self.forward_to:
            self.forward_to.record_error(source, error)

    def record_dropped(self, source, prefix, reason, rule=None):
        self.record_drops.append(RecordDropEvent(source, prefix, reason, rule))
        if self.forward_to:
            self.forward_to.record_dropped(source, prefix, reason, rule)

    def summary(self) -> Dict[str, int]:
        """Event counts by category"""
        drops_by_reason: Dict[str, int] = {}
        for drop in self.record_drops:
            drops_by_reason[drop.reason] = drops_by_reason.get(drop.reason, 0) + 1

        return {
            'policy_lines_discarded': len(self.policy_lines),
            'record_errors': len(self.record_errors),
            'records_denied': drops_by_reason.get(DropReason.DENIED, 0),
            'records_too_specific': drops_by_reason.get(DropReason.TOO_SPECIFIC, 0),
        }

    def to_dict(self) -> Dict:
        return {
            'summary': self.summary(),
            'policy_lines': [asdict(event) for event in self.policy_lines],
            'record_errors': [asdict(event) for event in self.record_errors],
            'record_drops': [asdict(event) for event in self.record_drops],
        }

    def write_report(self, path: Path) -> Path:
        """Write the collected events as a YAML report."""
        path = Path(path)
        header = (
            "# AUTO-GENERATED FILE - DO NOT EDIT MANUALLY\n"
            f"# Generated by roagen at {datetime.now().isoformat()}\n"
            "# Registry input that produced no ROA entries\n\n"
        )
        body = yaml.safe_dump(self.to_dict(), default_flow_style=False,
                              sort_keys=False, indent=2, allow_unicode=True)
        atomic_write_text(path, header + body)
        return path
