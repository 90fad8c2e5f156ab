"""
Tests for roagen utilities

- Error hierarchy, exit codes and formatting
- Ordered parallel execution
- Atomic file writes
- Logging formatter and diagnostics logging
"""

import argparse
import io
import json
import logging
import os
import tempfile
import threading
import time
import unittest
from contextlib import redirect_stdout
from pathlib import Path

from roagen.reports.diagnostics import DiagnosticsCollector, LoggingDiagnostics
from roagen.utils.error_handling import (
    CIDRParseError, DocumentSourceError, ErrorFormatter, MaxLengthError, MissingRouteError,
    NoPolicyError, OutputError, ParameterValidator, RECORD_LOCAL_ERRORS, RecordError,
    ValidationError, handle_errors
)
from roagen.utils.exit_codes import RoagenExitCodes, get_exit_code_description
from roagen.utils.fileops import atomic_write_json, atomic_write_text
from roagen.utils.logging import LoggingTimer, RoagenFormatter
from roagen.utils.parallel import ParallelExecutor


class TestErrorHandling(unittest.TestCase):
    """Test error types and the command decorator."""

    def test_exit_codes(self):
        self.assertEqual(ValidationError("x").exit_code, RoagenExitCodes.USAGE_ERROR)
        self.assertEqual(DocumentSourceError("x").exit_code, RoagenExitCodes.NO_INPUT)
        self.assertEqual(OutputError("x").exit_code, RoagenExitCodes.CANT_CREATE)
        self.assertEqual(MissingRouteError().exit_code, RoagenExitCodes.DATA_ERROR)

    def test_record_local_errors(self):
        for error in (MissingRouteError("a"), MaxLengthError("x", "a"), NoPolicyError("10.0.0.1"),
                      CIDRParseError("x", "bad"), DocumentSourceError("x")):
            self.assertIsInstance(error, RECORD_LOCAL_ERRORS)
        self.assertNotIsInstance(OutputError("x"), RECORD_LOCAL_ERRORS)

    def test_record_error_messages(self):
        self.assertIsInstance(MaxLengthError("abc"), RecordError)
        self.assertIn("abc", MaxLengthError("abc").message)
        self.assertEqual(CIDRParseError("1.2.3.4", "no length").message,
                         "invalid CIDR '1.2.3.4': no length")

    def test_format_error(self):
        formatted = ErrorFormatter.format_error(ValidationError("bad workers", "workers", "use 1"))
        self.assertEqual(formatted, "✗ bad workers\n  Suggestion: use 1")

    def test_handle_errors_maps_exit_codes(self):
        @handle_errors('roagen.test')
        def failing(error):
            raise error

        self.assertEqual(failing(OutputError("nope")), RoagenExitCodes.CANT_CREATE)
        self.assertEqual(failing(RuntimeError("boom")), RoagenExitCodes.GENERAL_ERROR)
        self.assertEqual(failing(KeyboardInterrupt()), RoagenExitCodes.INTERRUPTED)

    def test_unexpected_error_details_need_verbose(self):
        @handle_errors('roagen.test')
        def failing(args):
            raise RuntimeError("boom")

        for verbose, expected in ((False, "Unexpected error occurred"),
                                  (True, "Unexpected RuntimeError: boom")):
            stdout = io.StringIO()
            with redirect_stdout(stdout):
                code = failing(argparse.Namespace(verbose=verbose))

            self.assertEqual(code, RoagenExitCodes.GENERAL_ERROR)
            self.assertIn(expected, stdout.getvalue())

    def test_validate_indent(self):
        self.assertEqual(ParameterValidator.validate_indent(0), 0)
        with self.assertRaises(ValidationError):
            ParameterValidator.validate_indent(-3)

    def test_descriptions(self):
        self.assertEqual(get_exit_code_description(RoagenExitCodes.NO_INPUT),
                         "Registry file could not be read")


class TestParallelExecutor(unittest.TestCase):
    """Test ordered execution."""

    def test_results_in_input_order(self):
        def slow_square(n):
            time.sleep(0.001 * (10 - n))
            return n * n

        results = ParallelExecutor(max_workers=4).execute_ordered(list(range(10)), slow_square)
        self.assertEqual([r.result for r in results], [n * n for n in range(10)])
        self.assertTrue(all(r.success for r in results))

    def test_sequential_runs_inline(self):
        seen = []
        ParallelExecutor(max_workers=1).execute_ordered(
            [1, 2], lambda n: seen.append(threading.current_thread()))
        self.assertEqual(seen, [threading.main_thread()] * 2)

    def test_exceptions_captured(self):
        def task(n, limit):
            if n > limit:
                raise ValueError(f"{n} too big")
            return n

        results = ParallelExecutor(max_workers=2).execute_ordered([1, 5, 2], task, limit=3)

        self.assertEqual([r.success for r in results], [True, False, True])
        self.assertIsInstance(results[1].exception, ValueError)
        self.assertEqual(results[1].error, "5 too big")


class TestFileOps(unittest.TestCase):
    """Test atomic writes."""

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)

    def tearDown(self):
        self._tmp.cleanup()

    def test_compact_json(self):
        path = self.tmp / "nested/out.json"
        atomic_write_json(path, {"a": [1, 2], "b": "c"})

        self.assertEqual(path.read_text(), '{"a":[1,2],"b":"c"}')
        self.assertEqual(os.stat(path).st_mode & 0o777, 0o644)

    def test_indented_json(self):
        path = self.tmp / "out.json"
        atomic_write_json(path, {"a": 1}, indent=2, mode=0o600)

        self.assertEqual(json.loads(path.read_text()), {"a": 1})
        self.assertIn('\n  "a": 1', path.read_text())
        self.assertEqual(os.stat(path).st_mode & 0o777, 0o600)

    def test_failed_write_leaves_no_temp_file(self):
        path = self.tmp / "out.json"
        with self.assertRaises(TypeError):
            atomic_write_json(path, {"a": object()})

        self.assertEqual(list(self.tmp.iterdir()), [])

    def test_text_written_as_utf8(self):
        path = self.tmp / "report.yaml"
        atomic_write_text(path, "source: r\u00e9seau\n")

        self.assertEqual(path.read_bytes(), "source: r\u00e9seau\n".encode("utf-8"))

    def test_replaces_existing(self):
        path = self.tmp / "out.txt"
        path.write_text("old")
        atomic_write_text(path, "new")

        self.assertEqual(path.read_text(), "new")
        self.assertEqual(sorted(p.name for p in self.tmp.iterdir()), ["out.txt"])


class TestLogging(unittest.TestCase):
    """Test formatter and diagnostics logging."""

    def test_formatter_duration(self):
        record = logging.LogRecord("roagen.test", logging.INFO, __file__, 1, "done", None, None)
        record.duration = 1.5

        formatted = RoagenFormatter(use_colors=False).format(record)
        self.assertTrue(formatted.endswith("roagen.test - INFO - done [took 1.500s]"))

    def test_formatter_without_module(self):
        record = logging.LogRecord("roagen.test", logging.WARNING, __file__, 1, "msg", None, None)
        formatted = RoagenFormatter(use_colors=False, include_module=False).format(record)
        self.assertNotIn("roagen.test", formatted)

    def test_logging_timer(self):
        logger = logging.getLogger("roagen.test.timer")
        with self.assertLogs(logger, level="INFO") as captured:
            with LoggingTimer(logger, "work") as timer:
                pass

        self.assertIsNotNone(timer.duration)
        self.assertIn("Completed work", captured.output[-1])

    def test_collector_forwards_to_logging(self):
        logger = logging.getLogger("roagen.test.diagnostics")
        collector = DiagnosticsCollector(forward_to=LoggingDiagnostics(logger))

        with self.assertLogs(logger, level="DEBUG") as captured:
            collector.record_dropped("obj", "10.0.0.0/16", "denied", "deny 10.0.0.0/8 0 32")
            collector.record_error("bad", MissingRouteError("bad"))

        self.assertEqual(len(captured.output), 2)
        self.assertIn("by rule 'deny 10.0.0.0/8 0 32'", captured.output[0])
        self.assertEqual(collector.summary()["records_denied"], 1)
        self.assertEqual(collector.record_errors[0].message, "no route specified")


if __name__ == '__main__':
    unittest.main()
