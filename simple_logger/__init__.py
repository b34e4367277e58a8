"""File-persisted structured logging with per-source JSON files and size-bounded rotation."""

from simple_logger.config import Config, load_config
from simple_logger.errors import (
    CorruptFileError,
    DeleteError,
    DirectoryError,
    SimpleLoggerError,
    SnapshotError,
    WriteError,
    WriteErrorKind,
)
from simple_logger.facade import (
    clear_logs,
    configure,
    critical,
    debug,
    delete_log_file,
    error,
    export_logs,
    info,
    list_log_files,
    load_log_entries,
    log,
    log_file_stats,
    snapshot,
    warning,
)
from simple_logger.models import AggregateStats, LogEntry, LogFileSummary, LogLevel
from simple_logger.snapshot import Snapshottable

__all__ = [
    "AggregateStats",
    "Config",
    "CorruptFileError",
    "DeleteError",
    "DirectoryError",
    "LogEntry",
    "LogFileSummary",
    "LogLevel",
    "SimpleLoggerError",
    "SnapshotError",
    "Snapshottable",
    "WriteError",
    "WriteErrorKind",
    "clear_logs",
    "configure",
    "critical",
    "debug",
    "delete_log_file",
    "error",
    "export_logs",
    "info",
    "list_log_files",
    "load_config",
    "load_log_entries",
    "log",
    "log_file_stats",
    "snapshot",
    "warning",
]
