#!/usr/bin/env python3
"""
Configuration Management for roagen

Provides centralized configuration handling with:
- Environment variable support
- Configuration file support
- Default values and validation
- Runtime configuration management
"""

import os
import json
import threading
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Optional, List
import logging

from .error_handling import ConfigurationError


@dataclass
class RegistryConfig:
    """Registry layout, relative to the registry root"""

    filter_file: str = "data/filter.txt"
    filter6_file: str = "data/filter6.txt"
    route_dir: str = "data/route"
    route6_dir: str = "data/route6"

    def __post_init__(self):
        """Load from environment variables if set"""
        if os.getenv("ROAGEN_FILTER_FILE"):
            self.filter_file = os.getenv("ROAGEN_FILTER_FILE")
        if os.getenv("ROAGEN_FILTER6_FILE"):
            self.filter6_file = os.getenv("ROAGEN_FILTER6_FILE")
        if os.getenv("ROAGEN_ROUTE_DIR"):
            self.route_dir = os.getenv("ROAGEN_ROUTE_DIR")
        if os.getenv("ROAGEN_ROUTE6_DIR"):
            self.route6_dir = os.getenv("ROAGEN_ROUTE6_DIR")


@dataclass
class OutputConfig:
    """ROA dataset output configuration"""

    indent: Optional[int] = None  # None writes compact JSON
    report_file: Optional[str] = None  # YAML discard report
    file_mode: int = 0o644

    def __post_init__(self):
        """Load from environment variables if set"""
        if os.getenv("ROAGEN_OUTPUT_INDENT"):
            try:
                self.indent = int(os.getenv("ROAGEN_OUTPUT_INDENT"))
            except ValueError:
                pass
        if os.getenv("ROAGEN_REPORT_FILE"):
            self.report_file = os.getenv("ROAGEN_REPORT_FILE")


@dataclass
class ProcessingConfig:
    """Record processing configuration"""

    max_workers: int = 1

    def __post_init__(self):
        """Load from environment variables if set"""
        if os.getenv("ROAGEN_MAX_WORKERS"):
            try:
                self.max_workers = int(os.getenv("ROAGEN_MAX_WORKERS"))
            except ValueError:
                pass


@dataclass
class LoggingConfig:
    """Logging configuration"""

    level: str = "INFO"
    log_to_file: bool = False
    log_file: Optional[str] = None

    def __post_init__(self):
        """Load from environment variables if set"""
        if os.getenv("ROAGEN_LOG_LEVEL"):
            self.level = os.getenv("ROAGEN_LOG_LEVEL").upper()
        if os.getenv("ROAGEN_LOG_FILE"):
            self.log_file = os.getenv("ROAGEN_LOG_FILE")
            self.log_to_file = True


@dataclass
class RoagenConfig:
    """Main configuration container"""

    registry: RegistryConfig = None
    output: OutputConfig = None
    processing: ProcessingConfig = None
    logging: LoggingConfig = None

    def __post_init__(self):
        """Initialize subconfigs if not provided"""
        if self.registry is None:
            self.registry = RegistryConfig()
        if self.output is None:
            self.output = OutputConfig()
        if self.processing is None:
            self.processing = ProcessingConfig()
        if self.logging is None:
            self.logging = LoggingConfig()


VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _is_non_negative_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


class ConfigManager:
    """Configuration management for roagen"""

    DEFAULT_CONFIG_PATHS = [
        Path.home() / ".config/roagen/config.json",
        Path("/etc/roagen/config.json"),
        Path("./roagen.json"),
    ]

    SECTIONS = {
        "registry": RegistryConfig,
        "output": OutputConfig,
        "processing": ProcessingConfig,
        "logging": LoggingConfig,
    }

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize configuration manager

        Args:
            config_path: Optional path to configuration file
        """
        self.logger = logging.getLogger(__name__)
        self.config_path = Path(config_path) if config_path else None
        self.config = RoagenConfig()

        self._load_config()

    def _load_config(self):
        """Load configuration from file and environment"""
        if self.config_path and not self.config_path.exists():
            raise ConfigurationError(
                f"Configuration file not found: {self.config_path}",
                guidance="Check the --config path or remove the option to use defaults"
            )

        config_file = self._find_config_file()
        if config_file:
            try:
                self._load_from_file(config_file)
                self.logger.info(f"Loaded configuration from {config_file}")
            except (OSError, ValueError, TypeError) as e:
                if config_file == self.config_path:
                    raise ConfigurationError(
                        f"Failed to load config file {config_file}: {e}",
                        guidance="Fix the JSON syntax or unknown keys in the configuration file"
                    ) from e
                self.logger.warning(f"Failed to load config file {config_file}: {e}")

        # Environment variables are loaded in __post_init__ methods
        self.logger.debug("Configuration loaded with environment variable overrides")

    def _find_config_file(self) -> Optional[Path]:
        """Find configuration file in default locations"""
        if self.config_path and self.config_path.exists():
            return self.config_path

        for path in self.DEFAULT_CONFIG_PATHS:
            if path.exists():
                return path

        return None

    def _load_from_file(self, config_path: Path):
        """Load configuration from JSON file"""
        with open(config_path, "r") as f:
            data = json.load(f)
        self._load_from_dict(data)

    def _load_from_dict(self, data: dict):
        """Load configuration from dictionary (side-effect-free)"""
        if not isinstance(data, dict):
            raise ValueError("configuration root must be a JSON object")

        for section, section_cls in self.SECTIONS.items():
            if section in data:
                setattr(self.config, section, section_cls(**data[section]))

    def save_config(self, config_path: Optional[Path] = None) -> Path:
        """
        Save current configuration to file

        Args:
            config_path: Path to save configuration (default: first default path)

        Returns:
            Path where configuration was saved
        """
        if config_path is None:
            config_path = self.DEFAULT_CONFIG_PATHS[0]

        config_path.parent.mkdir(parents=True, exist_ok=True)

        config_dict = {
            section: asdict(getattr(self.config, section))
            for section in self.SECTIONS
        }

        with open(config_path, "w") as f:
            json.dump(config_dict, f, indent=2)

        self.logger.info(f"Configuration saved to {config_path}")
        return config_path

    def get_config(self) -> RoagenConfig:
        """Get current configuration"""
        return self.config

    @classmethod
    def validate_object(cls, data: dict) -> List[str]:
        """
        Validate configuration from dictionary without side effects

        Args:
            data: Configuration dictionary to validate

        Returns:
            List of validation error messages (empty if valid)
        """
        temp_manager = cls.__new__(cls)
        temp_manager.logger = logging.getLogger(__name__)
        temp_manager.config_path = None
        temp_manager.config = RoagenConfig()

        try:
            temp_manager._load_from_dict(data)
        except (TypeError, ValueError) as e:
            return [f"Failed to load configuration: {e}"]

        return temp_manager.validate_config()

    def validate_config(self) -> List[str]:
        """
        Validate configuration and return list of issues

        Returns:
            List of validation error messages
        """
        issues = []

        registry = self.config.registry
        for name in ("filter_file", "filter6_file", "route_dir", "route6_dir"):
            value = getattr(registry, name)
            if not isinstance(value, str):
                issues.append(f"Registry {name} must be a string, got {value!r}")
            elif not value:
                issues.append(f"Registry {name} must not be empty")
            elif Path(value).is_absolute():
                issues.append(f"Registry {name} must be relative to the registry root: {value}")

        output = self.config.output
        if output.indent is not None and not _is_non_negative_int(output.indent):
            issues.append(f"Output indent must be a non-negative integer, got {output.indent}")

        if output.report_file is not None and not isinstance(output.report_file, str):
            issues.append(f"Report file must be a path string, got {output.report_file!r}")
        elif output.report_file:
            report_dir = Path(output.report_file).parent
            if report_dir.exists() and not os.access(report_dir, os.W_OK):
                issues.append(f"Report directory is not writable: {report_dir}")

        workers = self.config.processing.max_workers
        if not _is_non_negative_int(workers) or workers < 1:
            issues.append(f"processing.max_workers must be a positive integer, got {workers}")

        level = self.config.logging.level
        if not isinstance(level, str) or level.upper() not in VALID_LOG_LEVELS:
            issues.append(
                f"Invalid log level: {level!r}. "
                f"Must be one of {', '.join(VALID_LOG_LEVELS)}"
            )

        log_file = self.config.logging.log_file
        if log_file is not None and not isinstance(log_file, str):
            issues.append(f"Log file must be a path string, got {log_file!r}")
        elif self.config.logging.log_to_file and not log_file:
            issues.append("File logging enabled but log_file not configured")

        return issues


# Global configuration instance
_config_manager = None
_config_manager_lock = threading.RLock()


def get_config_manager(config_path: Optional[Path] = None) -> ConfigManager:
    """
    Get global configuration manager instance using double-checked locking.

    The config_path is only honoured by the call that creates the instance.
    """
    global _config_manager

    if _config_manager is not None:
        return _config_manager

    with _config_manager_lock:
        if _config_manager is None:
            _config_manager = ConfigManager(config_path)

        return _config_manager


def reset_config_manager():
    """Drop the global configuration manager (used by the CLI and tests)"""
    global _config_manager

    with _config_manager_lock:
        _config_manager = None


def get_config() -> RoagenConfig:
    """Get current configuration"""
    return get_config_manager().get_config()
