#!/usr/bin/env python3
"""
roagen Error Handling Utilities

Provides the exception hierarchy, standardized error formatting, parameter
validation, and user guidance for consistent error reporting across roagen.

Error Format Standards:
- INFO: "✓ {message}"                    # Success messages
- WARNING: "⚠ {message}"                 # Warning messages
- ERROR: "✗ {message}"                   # Error messages
- FATAL: "✗ Fatal: {message}"            # Critical errors
- USAGE: "Usage: {usage_help}"           # Usage guidance

Record-local errors (subclasses of RecordError, plus CIDRParseError and
DocumentSourceError raised while reading a record) abort a single route
object. Everything else is fatal to the run.
"""

import os
import logging
from pathlib import Path
from typing import Optional, Union
from functools import wraps

from .exit_codes import RoagenExitCodes


class ErrorSeverity:
    """Error severity levels for consistent classification"""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    FATAL = "fatal"
    USAGE = "usage"


class RoagenError(Exception):
    """Base exception class for roagen with standardized error handling"""

    exit_code = RoagenExitCodes.GENERAL_ERROR

    def __init__(self, message: str, severity: str = ErrorSeverity.ERROR,
                 guidance: Optional[str] = None):
        self.message = message
        self.severity = severity
        self.guidance = guidance
        super().__init__(message)


class ValidationError(RoagenError):
    """Raised when parameter validation fails"""

    exit_code = RoagenExitCodes.USAGE_ERROR

    def __init__(self, message: str, parameter: str = None, guidance: str = None):
        self.parameter = parameter
        super().__init__(message, ErrorSeverity.ERROR, guidance)


class ConfigurationError(RoagenError):
    """Raised when configuration is invalid or missing"""

    exit_code = RoagenExitCodes.CONFIG_ERROR


class DocumentSourceError(RoagenError):
    """Raised when a registry document cannot be found or read"""

    exit_code = RoagenExitCodes.NO_INPUT

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None,
                 guidance: Optional[str] = None):
        self.path = str(path) if path is not None else None
        super().__init__(message, ErrorSeverity.ERROR, guidance)


class OutputError(RoagenError):
    """Raised when the ROA dataset cannot be written"""

    exit_code = RoagenExitCodes.CANT_CREATE


class CIDRParseError(RoagenError, ValueError):
    """Raised when text is not a valid address/length pair"""

    exit_code = RoagenExitCodes.DATA_ERROR

    def __init__(self, text: str, reason: str):
        self.text = text
        self.reason = reason
        super().__init__(f"invalid CIDR '{text}': {reason}")


class RecordError(RoagenError):
    """Base class for errors that abort processing of one route object"""

    exit_code = RoagenExitCodes.DATA_ERROR

    def __init__(self, message: str, source: Optional[str] = None):
        self.source = source
        super().__init__(message)


class MissingRouteError(RecordError):
    """Route object has no route: or route6: attribute"""

    def __init__(self, source: Optional[str] = None):
        super().__init__("no route specified", source)


class MaxLengthError(RecordError):
    """max-length: attribute is not a valid length"""

    def __init__(self, value: str, source: Optional[str] = None):
        self.value = value
        super().__init__(f"invalid max-length '{value}'", source)


class NoPolicyError(RecordError):
    """Route prefix is outside every declared policy range"""

    def __init__(self, address, source: Optional[str] = None):
        self.address = address
        super().__init__(f"IP {address} is in an invalid range: "
                         f"address outside any declared policy range", source)


RECORD_LOCAL_ERRORS = (RecordError, CIDRParseError, DocumentSourceError)


class ErrorFormatter:
    """Centralized error message formatting with consistent symbols and styles"""

    SYMBOLS = {
        ErrorSeverity.INFO: "✓",
        ErrorSeverity.WARNING: "⚠",
        ErrorSeverity.ERROR: "✗",
        ErrorSeverity.FATAL: "✗ Fatal:",
        ErrorSeverity.USAGE: "Usage:"
    }

    @classmethod
    def format_message(cls, message: str, severity: str = ErrorSeverity.ERROR,
                       guidance: Optional[str] = None) -> str:
        """Format a message with the appropriate symbol and structure"""
        symbol = cls.SYMBOLS.get(severity, "•")
        formatted = f"{symbol} {message}"

        if guidance:
            formatted += f"\n  Suggestion: {guidance}"

        return formatted

    @classmethod
    def format_error(cls, error: Union[Exception, RoagenError],
                     hide_technical: bool = True) -> str:
        """Format an exception with appropriate level of detail"""
        if isinstance(error, RoagenError):
            return cls.format_message(error.message, error.severity, error.guidance)

        error_type = type(error).__name__
        message = str(error)

        if isinstance(error, FileNotFoundError):
            guidance = "Check that the file path is correct and the file exists"
            return cls.format_message(f"File not found: {message}",
                                      ErrorSeverity.ERROR, guidance)
        elif isinstance(error, PermissionError):
            guidance = "Check file permissions or run with appropriate privileges"
            return cls.format_message(f"Permission denied: {message}",
                                      ErrorSeverity.ERROR, guidance)
        elif isinstance(error, ValueError):
            guidance = "Verify input parameters and try again"
            return cls.format_message(f"Invalid input: {message}",
                                      ErrorSeverity.ERROR, guidance)
        elif isinstance(error, KeyboardInterrupt):
            return cls.format_message("Operation interrupted by user", ErrorSeverity.WARNING)
        else:
            if hide_technical:
                return cls.format_message("Unexpected error occurred", ErrorSeverity.ERROR,
                                          "Check logs for details or run with --verbose")
            else:
                return cls.format_message(f"Unexpected {error_type}: {message}",
                                          ErrorSeverity.ERROR)


class ParameterValidator:
    """Parameter validation with user guidance"""

    @staticmethod
    def validate_workers(workers: int, parameter_name: str = "workers") -> int:
        """Validate worker counts"""
        if workers < 1:
            raise ValidationError(
                f"Worker count must be at least 1, got {workers}",
                parameter_name,
                "Use 1 for sequential processing or a small positive integer"
            )

        if workers > 64:
            logger = logging.getLogger('roagen.validation')
            logger.warning(f"Very high worker count ({workers}) - record parsing is CPU bound")

        return workers

    @staticmethod
    def validate_indent(indent: int, parameter_name: str = "indent") -> int:
        """Validate a JSON indentation width"""
        if indent < 0:
            raise ValidationError(
                f"Indent must be a non-negative integer, got {indent}",
                parameter_name,
                "Use 0 or more spaces, or omit the option for compact JSON"
            )

        return indent

    @staticmethod
    def validate_directory_exists(dir_path: Union[str, Path],
                                  parameter_name: str = "directory") -> Path:
        """Validate that a directory exists and is readable"""
        path = Path(dir_path)

        if not path.exists():
            raise ValidationError(
                f"Directory does not exist: {path}",
                parameter_name,
                "Check the registry path and ensure it points at a registry checkout"
            )

        if not path.is_dir():
            raise ValidationError(
                f"Path is not a directory: {path}",
                parameter_name,
                "Provide a path to a directory, not a file"
            )

        if not os.access(path, os.R_OK | os.X_OK):
            raise ValidationError(
                f"Cannot read directory: {path}",
                parameter_name,
                "Check directory permissions or run with appropriate privileges"
            )

        return path

    @staticmethod
    def validate_file_exists(file_path: Union[str, Path], parameter_name: str = "file") -> Path:
        """Validate that a file exists and is readable"""
        path = Path(file_path)

        if not path.exists():
            raise ValidationError(
                f"File does not exist: {path}",
                parameter_name,
                "Check the file path and ensure the file exists"
            )

        if not path.is_file():
            raise ValidationError(
                f"Path is not a file: {path}",
                parameter_name,
                "Provide a path to a file, not a directory"
            )

        if not os.access(path, os.R_OK):
            raise ValidationError(
                f"Cannot read file: {path}",
                parameter_name,
                "Check file permissions or run with appropriate privileges"
            )

        return path

    @staticmethod
    def validate_output_file(file_path: Union[str, Path],
                             parameter_name: str = "output") -> Path:
        """Validate that an output file location is usable"""
        path = Path(file_path)

        if path.exists() and path.is_dir():
            raise ValidationError(
                f"Output path is a directory: {path}",
                parameter_name,
                "Provide a file name such as roa.json"
            )

        parent = path.parent if str(path.parent) else Path(".")
        if parent.exists() and not os.access(parent, os.W_OK):
            raise ValidationError(
                f"Cannot write to directory: {parent}",
                parameter_name,
                "Check directory permissions or choose a different location"
            )

        return path


def handle_errors(logger_name: str = None):
    """
    Decorator for standardized error handling in command functions

    Unexpected exceptions are shown with their type and message only when
    the command runs with --verbose.
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            logger = logging.getLogger(logger_name or f'roagen.{func.__name__}')
            hide_technical = not (args and getattr(args[0], 'verbose', False))

            try:
                return func(*args, **kwargs)
            except RoagenError as e:
                logger.error(f"{e.severity.title()} in {func.__name__}: {e.message}")
                print(ErrorFormatter.format_error(e))
                return int(e.exit_code)

            except KeyboardInterrupt:
                logger.info(f"Command {func.__name__} interrupted by user")
                print(ErrorFormatter.format_message("Operation interrupted by user",
                                                    ErrorSeverity.WARNING))
                return int(RoagenExitCodes.INTERRUPTED)

            except Exception as e:
                logger.error(f"Unexpected error in {func.__name__}: {e}")
                print(ErrorFormatter.format_error(e, hide_technical))
                return int(RoagenExitCodes.GENERAL_ERROR)

        return wrapper
    return decorator


def print_success(message: str):
    """Print a success message with consistent formatting"""
    print(ErrorFormatter.format_message(message, ErrorSeverity.INFO))


def print_warning(message: str, guidance: str = None):
    """Print a warning message with consistent formatting"""
    print(ErrorFormatter.format_message(message, ErrorSeverity.WARNING, guidance))


def validate_common_args(args):
    """Validate common command-line arguments"""
    validator = ParameterValidator()

    if getattr(args, 'workers', None) is not None:
        args.workers = validator.validate_workers(args.workers, "workers")

    if getattr(args, 'indent', None) is not None:
        args.indent = validator.validate_indent(args.indent, "indent")

    if getattr(args, 'registry', None):
        validator.validate_directory_exists(args.registry, "registry")

    if getattr(args, 'route_file', None):
        validator.validate_file_exists(args.route_file, "route_file")

    if getattr(args, 'output', None):
        validator.validate_output_file(args.output, "output")

    if getattr(args, 'report', None):
        validator.validate_output_file(args.report, "report")

    return args


__all__ = [
    'ErrorSeverity', 'RoagenError', 'ValidationError', 'ConfigurationError',
    'DocumentSourceError', 'OutputError', 'CIDRParseError', 'RecordError',
    'MissingRouteError', 'MaxLengthError', 'NoPolicyError', 'RECORD_LOCAL_ERRORS',
    'ErrorFormatter', 'ParameterValidator', 'handle_errors',
    'print_success', 'print_warning', 'validate_common_args'
]
