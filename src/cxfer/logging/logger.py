"""
Main logging module for CXFER CLI.

This module provides the primary logging interface, logger setup,
and integration with the existing console output system with daily rotation.
"""

import json
import logging
import logging.handlers
import sys
from typing import Optional, Dict, Any

from .config import LogConfig, LogLevel, get_log_file_path
from .formatters import CxferFormatter, MultiplexFormatter, RuntimeCallFormatter
from .utils import cleanup_old_logs


# Global logger registry
_loggers: Dict[str, logging.Logger] = {}
_logging_configured = False
_log_config: Optional[LogConfig] = None


def _read_user_log_level() -> Optional[LogLevel]:
    """Read the log level from the user settings file, if one is set"""
    from cxfer.utils.config_store import ConfigStore

    settings_file = ConfigStore().settings_file
    if not settings_file.exists():
        return None

    with open(settings_file, "r", encoding="utf-8") as f:
        settings = json.load(f)

    user_level = settings.get("log_level")
    if user_level and user_level in [lev.value for lev in LogLevel]:
        return LogLevel(user_level)
    return None


def setup_logging(config: Optional[LogConfig] = None, force_reconfigure: bool = False) -> None:
    """
    Set up the CXFER logging system.

    Args:
        config: LogConfig instance, uses default if None
        force_reconfigure: Force reconfiguration even if already set up
    """
    global _logging_configured, _log_config

    if _logging_configured and not force_reconfigure:
        return

    if config is None:
        config = LogConfig()
        try:
            user_level = _read_user_log_level()
            if user_level:
                config.default_level = user_level
        except (OSError, ValueError):
            # Unreadable settings fall back to the default level
            pass

    _log_config = config

    log_file_path = get_log_file_path(config)

    root_logger = logging.getLogger("cxfer")
    root_logger.setLevel(getattr(logging, config.default_level.value))
    root_logger.handlers.clear()

    file_handler = logging.handlers.TimedRotatingFileHandler(
        filename=log_file_path,
        when="midnight",
        interval=1,
        backupCount=config.log_retention_days,
        encoding="utf-8",
        utc=False,
    )
    file_handler.setLevel(getattr(logging, config.default_level.value))
    file_handler.suffix = "%Y-%m-%d"
    file_handler.setFormatter(
        CxferFormatter(
            include_timestamps=config.include_timestamps,
            include_thread_info=config.include_thread_info,
            include_process_info=config.include_process_info,
        )
    )
    root_logger.addHandler(file_handler)

    # Console handler for warnings/errors
    if config.console_level != LogLevel.ERROR or config.default_level == LogLevel.DEBUG:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(getattr(logging, config.console_level.value))
        console_handler.setFormatter(CxferFormatter(include_timestamps=False))
        root_logger.addHandler(console_handler)

    # Runtime call logger with its own line format
    runtime_logger = logging.getLogger("cxfer.runtime")
    runtime_logger.setLevel(logging.DEBUG)
    runtime_logger.handlers.clear()

    if config.log_runtime_calls:
        runtime_handler = logging.handlers.TimedRotatingFileHandler(
            filename=log_file_path,
            when="midnight",
            interval=1,
            backupCount=config.log_retention_days,
            encoding="utf-8",
            utc=False,
        )
        runtime_handler.setLevel(logging.DEBUG)
        runtime_handler.suffix = "%Y-%m-%d"
        # Module loggers under cxfer.runtime share this handler
        runtime_handler.setFormatter(
            MultiplexFormatter(
                CxferFormatter(include_timestamps=config.include_timestamps),
                RuntimeCallFormatter(),
            )
        )
        runtime_logger.addHandler(runtime_handler)

    # Prevent propagation to avoid duplicate entries
    runtime_logger.propagate = False

    try:
        cleanup_old_logs(log_file_path.parent, config.log_retention_days)
    except OSError:
        pass

    _logging_configured = True

    setup_logger = get_logger("cxfer.setup")
    setup_logger.info(f"Logging initialized - File: {log_file_path}, "
                      f"Level: {config.default_level.value}")


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for the specified name.

    Args:
        name: Logger name (e.g., 'cxfer.commands.imports')

    Returns:
        logging.Logger: Logger instance
    """
    if not _logging_configured:
        setup_logging()

    if name not in _loggers:
        _loggers[name] = logging.getLogger(name)

    return _loggers[name]


def log_runtime_call(
    operation: str,
    target: str,
    outcome: Optional[str] = None,
    duration: Optional[float] = None,
    error: Optional[str] = None,
    logger_name: str = "cxfer.runtime",
) -> None:
    """
    Log a call into a configuration runtime (load, rebind, unbind, save).

    Args:
        operation: Runtime operation name
        target: What the call acted on (file name, category=name)
        outcome: Outcome string (ok, not_found, ...)
        duration: Call duration in seconds
        error: Error message if the call failed
        logger_name: Logger name to use
    """
    logger = get_logger(logger_name)

    extra = {
        "runtime_operation": operation,
        "runtime_target": target,
        "runtime_outcome": outcome or ("error" if error else "ok"),
        "runtime_duration": duration or 0,
    }
    if error:
        extra["runtime_error"] = error

    if error:
        logger.warning("Runtime call failed", extra=extra)
    else:
        logger.debug("Runtime call completed", extra=extra)


def log_transaction(
    operation: str,
    details: Optional[Dict[str, Any]] = None,
    logger_name: str = "cxfer.transaction",
) -> None:
    """
    Log transaction data at DEBUG level.

    Args:
        operation: Description of the operation
        details: Additional transaction details
        logger_name: Logger name to use
    """
    logger = get_logger(logger_name)
    extra = {"transaction_operation": operation}

    if details:
        extra["transaction_details"] = details

    logger.debug(f"Transaction: {operation}", extra=extra)


def log_application_event(
    event: str,
    level: str = "info",
    details: Optional[Dict[str, Any]] = None,
    logger_name: str = "cxfer.app",
) -> None:
    """
    Log application-level events at appropriate levels.

    Args:
        event: Description of the event
        level: Log level (debug, info, warning, error)
        details: Additional event details
        logger_name: Logger name to use
    """
    logger = get_logger(logger_name)
    extra = {"app_event": event}

    if details:
        extra["app_details"] = details

    log_method = getattr(logger, level.lower(), logger.info)
    log_method(f"Application: {event}", extra=extra)
