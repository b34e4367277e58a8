"""Read, summarize, delete, and export destination files."""

import logging
import os
import zipfile
from collections import Counter
from datetime import datetime, timezone

from simple_logger.directory import LogDirectory
from simple_logger.errors import CorruptFileError, DeleteError
from simple_logger.models import (
    DESTINATION_SUFFIX,
    AggregateStats,
    LogEntry,
    LogFileSummary,
    LogLevel,
    destination_file_name,
    sanitize_identifier,
)
from simple_logger.writer import destination_lock, read_entries

logger = logging.getLogger(__name__)


def _is_destination(name: str) -> bool:
    # names that would not map back to themselves (a.b.json) are foreign files
    return name.endswith(DESTINATION_SUFFIX) and destination_file_name(name) == name


class LogStore:
    def __init__(self, directory: LogDirectory):
        self._directory = directory

    def _path(self, identifier: str) -> str:
        return os.path.join(self._directory.resolve(), destination_file_name(identifier))

    def _destination_names(self) -> list[str]:
        root = self._directory.resolve()
        names = []
        for name in os.listdir(root):
            if _is_destination(name) and os.path.isfile(os.path.join(root, name)):
                names.append(name)
        names.sort()
        return names

    def list_files(self) -> list[LogFileSummary]:
        """Summarize every destination file, sorted by name.

        Undecodable files are flagged ``corrupt`` instead of aborting the listing.
        """
        root = self._directory.resolve()
        summaries = []
        for name in self._destination_names():
            path = os.path.join(root, name)
            try:
                st = os.stat(path)
            except FileNotFoundError:
                # deleted between listdir and stat
                continue

            summary = LogFileSummary(
                file_name=name,
                identifier=name[: -len(DESTINATION_SUFFIX)],
                size=st.st_size,
                last_modified=datetime.fromtimestamp(st.st_mtime, tz=timezone.utc),
            )
            try:
                entries = read_entries(path)
            except (CorruptFileError, OSError) as e:
                logger.warning("Skipping contents of %s: %s", name, e)
                summary.corrupt = True
            else:
                counts = Counter(entry.level for entry in entries)
                summary.level_counts = {level: counts.get(level, 0) for level in LogLevel}
                summary.entry_count = len(entries)
            summaries.append(summary)
        return summaries

    def load_entries(self, identifier: str) -> list[LogEntry]:
        """Entries of one destination in file order; empty if the file is absent."""
        return read_entries(self._path(identifier))

    def delete_file(self, identifier: str):
        """Remove one destination file. Missing files are not an error."""
        identifier = sanitize_identifier(identifier)
        self._remove(self._path(identifier), identifier)

    def _remove(self, path: str, identifier: str):
        with destination_lock(path):
            try:
                os.remove(path)
            except FileNotFoundError:
                return
            except OSError as e:
                raise DeleteError({identifier: str(e)}) from e
        logger.info("Deleted log file %s", os.path.basename(path))

    def clear_all(self):
        """Remove every destination file, continuing past individual failures."""
        root = self._directory.resolve()
        failures = {}
        for name in self._destination_names():
            try:
                self._remove(os.path.join(root, name), name[: -len(DESTINATION_SUFFIX)])
            except DeleteError as e:
                failures.update(e.failures)
        if failures:
            raise DeleteError(failures)

    def stats(self) -> AggregateStats:
        summaries = self.list_files()
        return AggregateStats(
            file_count=len(summaries),
            total_size=sum(s.size for s in summaries),
        )

    def export_archive(self, destination: str) -> str:
        """Zip every destination file into ``destination``. Returns the archive path."""
        root = self._directory.resolve()
        parent = os.path.dirname(os.path.abspath(destination))
        os.makedirs(parent, exist_ok=True)

        names = self._destination_names()
        with zipfile.ZipFile(destination, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            for name in names:
                path = os.path.join(root, name)
                with destination_lock(path):
                    try:
                        zf.write(path, arcname=name)
                    except FileNotFoundError:
                        continue
        logger.info("Exported %d log file(s) to %s", len(names), destination)
        return destination
