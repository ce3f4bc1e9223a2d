"""
CXFER Logging Module

This module provides logging for the CXFER CLI. It includes structured
logging, runtime call tracking, cross-platform log storage and daily
rotation.

Key Features:
- Single log file with daily rotation
- Cross-platform log directory detection
- Runtime call logging (load/rebind/save) with timing
- Transaction and application event logging
- Configurable log levels and formatting
- Integration with existing console output
"""

from .logger import (
    get_logger,
    setup_logging,
    LogLevel,
    log_runtime_call,
    log_transaction,
    log_application_event,
)
from .config import LogConfig, get_log_directory

__all__ = [
    "get_logger",
    "setup_logging",
    "log_runtime_call",
    "log_transaction",
    "log_application_event",
    "LogLevel",
    "LogConfig",
    "get_log_directory",
]
