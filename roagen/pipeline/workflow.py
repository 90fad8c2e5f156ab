#!/usr/bin/env python3
"""
Pipeline Orchestration - roagen Workflow Management

Implements the complete ROA generation run:
1. Load the IPv4 and IPv6 filter files into one ordered rule set
2. Parse and resolve every route and route6 object
3. Assemble the entries with cache validity metadata
4. Write the JSON dataset (and optionally a YAML discard report)

Failures reading a filter file or writing output abort the run. Failures on
a single route object only remove that object's entries.
"""

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from ..collectors.registry import Document, RegistrySource
from ..generators.dataset import DatasetAssembler
from ..generators.roa import ROAResolver, ResolutionOutcome
from ..models import ROADataset, ROAEntry
from ..policy.ruleset import PolicyRuleSet
from ..processors.rpsl import RouteObjectParser
from ..reports.diagnostics import DiagnosticsCollector, DiagnosticsSink, LoggingDiagnostics
from ..utils.config import RoagenConfig, get_config
from ..utils.error_handling import OutputError, RECORD_LOCAL_ERRORS
from ..utils.fileops import atomic_write_json
from ..utils.logging import LoggingTimer
from ..utils.parallel import ParallelExecutor


@dataclass
class PipelineConfig:
    """Pipeline execution configuration"""
    registry: str
    output_file: Optional[str] = None
    report_file: Optional[str] = None
    max_workers: int = 1
    indent: Optional[int] = None


@dataclass
class PipelineResult:
    """Complete pipeline execution results"""
    success: bool
    dataset: ROADataset
    rules_loaded: int
    records_processed: int
    records_emitted: int
    records_dropped: int
    records_failed: int
    execution_time: float
    output_files: List[str] = field(default_factory=list)

    def to_summary(self) -> str:
        """Generate a summary string of the pipeline result."""
        lines = [
            f"Pipeline {'succeeded' if self.success else 'failed'}",
            f"Policy rules loaded: {self.rules_loaded}",
            f"Route objects processed: {self.records_processed}",
            f"  With ROAs: {self.records_emitted}",
            f"  Dropped by policy: {self.records_dropped}",
            f"  Skipped (errors): {self.records_failed}",
            f"ROA entries: {self.dataset.metadata.count}",
            f"Execution time: {self.execution_time:.2f}s",
        ]
        return "\n".join(lines)


@dataclass
class RecordOutcome:
    """Per-object result used for accounting"""
    name: str
    entries: Tuple[ROAEntry, ...] = ()
    outcome: Optional[ResolutionOutcome] = None
    error: Optional[Exception] = None
    prefix: Optional[str] = None
    rule: Optional[str] = None


class ROAPipeline:
    """Complete ROA generation pipeline orchestrator"""

    def __init__(self, config: PipelineConfig,
                 app_config: Optional[RoagenConfig] = None,
                 clock=None,
                 diagnostics: Optional[DiagnosticsSink] = None,
                 logger: Optional[logging.Logger] = None):
        self.config = config
        self.app_config = app_config or get_config()
        self.logger = logger or logging.getLogger(__name__)

        self.source = RegistrySource(config.registry, logger=self.logger)
        self.parser = RouteObjectParser()
        self.assembler = DatasetAssembler(clock)

        if diagnostics is None:
            diagnostics = DiagnosticsCollector(forward_to=LoggingDiagnostics())
        self.diagnostics = diagnostics

    def load_rules(self) -> PolicyRuleSet:
        """
        Load the IPv4 then IPv6 filter files.

        Raises:
            DocumentSourceError: a filter file is missing or unreadable
        """
        registry = self.app_config.registry
        rulesets = []

        for filter_file in (registry.filter_file, registry.filter6_file):
            text = self.source.read_text(filter_file)
            rulesets.append(PolicyRuleSet.from_text(text, source=filter_file,
                                                    diagnostics=self.diagnostics))

        ruleset = PolicyRuleSet.concat(*rulesets)
        self.logger.info(f"Loaded {len(ruleset)} policy rules")
        return ruleset

    def process_document(self, document: Document, resolver: ROAResolver) -> RecordOutcome:
        """
        Parse and resolve one route object, absorbing record-local errors.

        Runs on worker threads, so nothing is reported to diagnostics here.
        """
        try:
            if document.error is not None:
                raise document.error

            record = self.parser.parse(document.text, source=document.name)
            resolution = resolver.explain(record)

        except RECORD_LOCAL_ERRORS as e:
            return RecordOutcome(name=document.name, error=e)

        return RecordOutcome(name=document.name, entries=resolution.entries,
                             outcome=resolution.outcome, prefix=record.prefix,
                             rule=str(resolution.rule))

    def report_outcome(self, outcome: RecordOutcome):
        """Forward a failed or dropped route object to the diagnostics sink."""
        if outcome.error is not None:
            self.diagnostics.record_error(outcome.name, outcome.error)
        elif outcome.outcome is not ResolutionOutcome.EMITTED:
            self.diagnostics.record_dropped(outcome.name, outcome.prefix,
                                            outcome.outcome.value, outcome.rule)

    def process_directory(self, directory: str, resolver: ROAResolver) -> List[RecordOutcome]:
        """Resolve every object of one route directory, in name order."""
        documents = list(self.source.iter_directory(directory))
        self.logger.info(f"Processing {len(documents)} route objects from {directory}")

        executor = ParallelExecutor(max_workers=self.config.max_workers)
        results = executor.execute_ordered(documents, self.process_document,
                                           task_name=f"Resolving {directory}",
                                           resolver=resolver)

        outcomes = []
        for result in results:
            if not result.success:
                raise result.exception
            self.report_outcome(result.result)
            outcomes.append(result.result)

        return outcomes

    def build_dataset(self) -> Tuple[ROADataset, List[RecordOutcome], int]:
        """Load rules, resolve every route object and assemble the dataset."""
        ruleset = self.load_rules()
        resolver = ROAResolver(ruleset, logger=self.logger)

        registry = self.app_config.registry
        outcomes: List[RecordOutcome] = []
        for directory in (registry.route_dir, registry.route6_dir):
            outcomes.extend(self.process_directory(directory, resolver))

        entries: List[ROAEntry] = []
        for outcome in outcomes:
            entries.extend(outcome.entries)

        return self.assembler.assemble(entries), outcomes, len(ruleset)

    def write_dataset(self, dataset: ROADataset, output_file: str) -> Path:
        """Atomically write the dataset as JSON."""
        path = Path(output_file)
        try:
            atomic_write_json(path, dataset.to_dict(),
                              mode=self.app_config.output.file_mode,
                              indent=self.config.indent)
        except OSError as e:
            raise OutputError(
                f"Cannot write ROA dataset to {path}: {e}",
                guidance="Check that the output directory exists and is writable"
            ) from e

        self.logger.info(f"Wrote {dataset.metadata.count} ROA entries to {path}")
        return path

    def run(self) -> PipelineResult:
        """Execute the full pipeline."""
        start_time = time.time()
        output_files = []

        with LoggingTimer(self.logger, "ROA generation"):
            dataset, outcomes, rules_loaded = self.build_dataset()

            if self.config.output_file:
                output_files.append(str(self.write_dataset(dataset, self.config.output_file)))

            if self.config.report_file:
                output_files.append(str(self._write_report(self.config.report_file)))

        emitted = sum(1 for o in outcomes if o.outcome is ResolutionOutcome.EMITTED)
        failed = sum(1 for o in outcomes if o.error is not None)

        return PipelineResult(
            success=True,
            dataset=dataset,
            rules_loaded=rules_loaded,
            records_processed=len(outcomes),
            records_emitted=emitted,
            records_dropped=len(outcomes) - emitted - failed,
            records_failed=failed,
            execution_time=time.time() - start_time,
            output_files=output_files,
        )

    def _write_report(self, report_file: str) -> Path:
        if not isinstance(self.diagnostics, DiagnosticsCollector):
            raise OutputError("A discard report needs a collecting diagnostics sink")

        try:
            path = self.diagnostics.write_report(Path(report_file))
        except OSError as e:
            raise OutputError(f"Cannot write discard report to {report_file}: {e}") from e

        self.logger.info(f"Wrote discard report to {path}")
        return path


def run_pipeline(registry: str, output_file: Optional[str] = None,
                 report_file: Optional[str] = None,
                 max_workers: Optional[int] = None,
                 indent: Optional[int] = None,
                 clock=None,
                 diagnostics: Optional[DiagnosticsSink] = None,
                 app_config: Optional[RoagenConfig] = None) -> PipelineResult:
    """
    Run ROA generation for a registry checkout.

    Unset options fall back to the loaded configuration.
    """
    app_config = app_config or get_config()

    config = PipelineConfig(
        registry=registry,
        output_file=output_file,
        report_file=report_file if report_file is not None else app_config.output.report_file,
        max_workers=max_workers if max_workers is not None else app_config.processing.max_workers,
        indent=indent if indent is not None else app_config.output.indent,
    )

    pipeline = ROAPipeline(config, app_config=app_config, clock=clock, diagnostics=diagnostics)
    return pipeline.run()
