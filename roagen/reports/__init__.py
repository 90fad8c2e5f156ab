"""
roagen Reports Module

Diagnostics sinks for registry input that produced no ROA entries.
"""

from .diagnostics import (
    DiagnosticsCollector, DiagnosticsSink, DropReason, LoggingDiagnostics, NullDiagnostics
)

__all__ = [
    "DiagnosticsCollector", "DiagnosticsSink", "DropReason",
    "LoggingDiagnostics", "NullDiagnostics",
]
