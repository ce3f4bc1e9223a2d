"""
Custom formatters for CXFER logging.

This module provides specialized formatters for different types of log
entries, including runtime calls and general application logs.
"""

import logging
from datetime import datetime


class CxferFormatter(logging.Formatter):
    """
    Custom formatter for CXFER log entries.

    Provides structured formatting with optional thread and process info.
    """

    def __init__(
        self,
        include_timestamps: bool = True,
        include_thread_info: bool = False,
        include_process_info: bool = False,
    ):
        self.include_timestamps = include_timestamps
        self.include_thread_info = include_thread_info
        self.include_process_info = include_process_info
        fmt_parts = []
        if include_timestamps:
            fmt_parts.append("%(asctime)s")
        fmt_parts.extend(["%(levelname)s", "[%(name)s]", "%(message)s"])
        if include_thread_info:
            fmt_parts.insert(-1, "[Thread:%(thread)d]")
        if include_process_info:
            fmt_parts.insert(-1, "[PID:%(process)d]")
        fmt_string = " ".join(fmt_parts)
        super().__init__(fmt=fmt_string, datefmt="%Y-%m-%d %H:%M:%S")


class RuntimeCallFormatter(logging.Formatter):
    """
    Specialized formatter for configuration runtime calls.

    Creates one line per load/rebind/save call with its outcome and timing.
    """

    def format(self, record: logging.LogRecord) -> str:
        """
        Format a runtime call log record in a human-readable text format.
        """
        timestamp = datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S")
        operation = getattr(record, "runtime_operation", "UNKNOWN")
        target = getattr(record, "runtime_target", "")
        outcome = getattr(record, "runtime_outcome", "---")
        duration = round(getattr(record, "runtime_duration", 0) * 1000, 2)

        # Example: 2026-02-02 17:27:34 DEBUG [cxfer.runtime] rebind Pipe.itm material=Copper -> ok (1.2ms)
        log_msg = (
            f"{timestamp} {record.levelname} [{record.name}] "
            f"{operation} {target} -> {outcome} ({duration}ms)"
        )

        lines = [log_msg]

        if getattr(record, "runtime_error", None):
            lines.append(f"    Error: {record.runtime_error}")

        return "\n".join(lines)


class MultiplexFormatter(logging.Formatter):
    """
    Formatter that delegates to different formatters based on the log record.

    Uses RuntimeCallFormatter for runtime call logs and CxferFormatter for
    everything else.
    """

    def __init__(
        self, default_formatter: logging.Formatter, runtime_formatter: logging.Formatter
    ):
        self.default_formatter = default_formatter
        self.runtime_formatter = runtime_formatter
        super().__init__()

    def format(self, record: logging.LogRecord) -> str:
        if record.name == "cxfer.runtime" or hasattr(record, "runtime_operation"):
            return self.runtime_formatter.format(record)
        return self.default_formatter.format(record)
