"""
roagen Exit Codes - Standardized Exit Codes for Monitoring Integration

Provides standardized exit codes for roagen runs so cron jobs and service
units can distinguish bad input from failed output.
"""

from enum import IntEnum


class RoagenExitCodes(IntEnum):
    """
    Standardized exit codes for roagen operations

    Exit codes follow UNIX conventions:
    - 0: Success
    - 1-2: User/configuration errors
    - 64-78: System errors (sysexits.h convention)
    - 128+: Signal termination
    """

    # Success
    SUCCESS = 0

    # User/Configuration Errors (1-2)
    GENERAL_ERROR = 1
    INVALID_USAGE = 2

    # System Errors (64-78, following sysexits.h)
    USAGE_ERROR = 64           # Command line usage error
    DATA_ERROR = 65            # Data format error
    NO_INPUT = 66              # Cannot open input
    CANT_CREATE = 73           # Can't create (user) output file
    CONFIG_ERROR = 78          # Configuration error

    # Signal Termination (128+)
    INTERRUPTED = 130          # Ctrl+C (SIGINT = 2, 128+2)


EXIT_CODE_DESCRIPTIONS = {
    RoagenExitCodes.SUCCESS: "Operation completed successfully",
    RoagenExitCodes.GENERAL_ERROR: "General error occurred",
    RoagenExitCodes.INVALID_USAGE: "Invalid command line usage",
    RoagenExitCodes.USAGE_ERROR: "Invalid command line parameter",
    RoagenExitCodes.DATA_ERROR: "Route object could not be resolved",
    RoagenExitCodes.NO_INPUT: "Registry file could not be read",
    RoagenExitCodes.CANT_CREATE: "ROA dataset could not be written",
    RoagenExitCodes.CONFIG_ERROR: "Configuration error",
    RoagenExitCodes.INTERRUPTED: "Interrupted by user (Ctrl+C)",
}


def get_exit_code_description(exit_code: RoagenExitCodes) -> str:
    """Get human-readable description for exit code"""
    return EXIT_CODE_DESCRIPTIONS.get(exit_code, f"Unknown exit code {int(exit_code)}")
