"""Error taxonomy for the logging engine."""

from __future__ import annotations

from enum import Enum


class SimpleLoggerError(Exception):
    """Base class for every error raised by simple_logger."""


class DirectoryError(SimpleLoggerError):
    """Raised when the logging root cannot be created or written."""

    def __init__(self, path: str, detail: str):
        self.path = path
        self.detail = detail
        super().__init__(f"Logging directory {path} is unusable: {detail}")


class WriteErrorKind(str, Enum):
    IO_FAILURE = "io_failure"
    SERIALIZATION_FAILURE = "serialization_failure"


class WriteError(SimpleLoggerError):
    """Raised when an append could not be persisted."""

    def __init__(self, kind: WriteErrorKind, detail: str):
        self.kind = kind
        self.detail = detail
        super().__init__(f"{kind.value}: {detail}")


class CorruptFileError(SimpleLoggerError):
    """Raised when a destination file exists but is not a valid entry array."""

    def __init__(self, path: str, detail: str):
        self.path = path
        self.detail = detail
        super().__init__(f"Corrupt log file {path}: {detail}")


class DeleteError(SimpleLoggerError):
    """Raised when one or more destination files could not be removed.

    ``failures`` maps each source identifier that failed to the reason.
    """

    def __init__(self, failures: dict[str, str]):
        self.failures = dict(failures)
        names = ", ".join(sorted(self.failures))
        super().__init__(f"Failed to delete {len(self.failures)} log file(s): {names}")


class SnapshotError(SimpleLoggerError):
    """Raised after a snapshot batch in which at least one object failed.

    ``failures`` is a list of ``(type_label, error)`` tuples in input order.
    Objects that did not fail were still written.
    """

    def __init__(self, failures: list[tuple[str, Exception]]):
        self.failures = list(failures)
        labels = ", ".join(label for label, _ in self.failures)
        super().__init__(f"Failed to snapshot {len(self.failures)} object(s): {labels}")
