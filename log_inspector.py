"""CLI log inspector — list, read, summarize, delete, and export stored log files."""

import argparse
import logging
import sys
from dataclasses import replace

import simple_logger
from simple_logger.config import load_config
from simple_logger.errors import CorruptFileError, DeleteError, DirectoryError

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [simple-logger] %(levelname)s %(message)s",
    stream=sys.stderr,
)


def _format_size(size: int) -> str:
    if size < 1024:
        return f"{size} B"
    elif size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


def _print_list():
    summaries = simple_logger.list_log_files()
    if not summaries:
        print("No log files found.")
        return
    for s in summaries:
        if s.corrupt:
            detail = "corrupt"
        else:
            detail = ", ".join(
                f"{level.value}={count}" for level, count in s.level_counts.items() if count
            ) or "empty"
        modified = s.last_modified.strftime("%Y-%m-%d %H:%M:%S")
        print(f"  {s.file_name}  ({_format_size(s.size)}, {modified})  {detail}")


def _print_entries(identifier: str):
    entries = simple_logger.load_log_entries(identifier)
    if not entries:
        print(f"No entries for '{identifier}'.")
        return
    for e in entries:
        ts = e.timestamp.strftime("%Y-%m-%d %H:%M:%S")
        where = f"{e.function}:{e.line}"
        suffix = f" <{e.object_name}, {len(e.object_data)} bytes>" if e.object_name else ""
        print(f"  {ts} [{e.level.value}] {where} {e.message}{suffix}")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Inspect stored log files")
    parser.add_argument("--storage-dir", default=None,
                        help="Storage root containing the logging/ directory")
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--list", action="store_true", help="List all log files")
    group.add_argument("--read", metavar="IDENTIFIER", help="Print the entries of one log file")
    group.add_argument("--stats", action="store_true", help="Show file count and total size")
    group.add_argument("--delete", metavar="IDENTIFIER", help="Delete one log file")
    group.add_argument("--clear", action="store_true", help="Delete all log files")
    group.add_argument("--export", metavar="PATH", help="Write all log files to a zip archive")
    args = parser.parse_args(argv)

    config = load_config()
    if args.storage_dir:
        config = replace(config, storage_dir=args.storage_dir)
    simple_logger.configure(config)

    try:
        if args.list:
            _print_list()
        elif args.read:
            _print_entries(args.read)
        elif args.stats:
            stats = simple_logger.log_file_stats()
            print(f"Files: {stats.file_count}")
            print(f"Total size: {_format_size(stats.total_size)}")
        elif args.delete:
            simple_logger.delete_log_file(args.delete)
            print(f"Deleted '{args.delete}'.")
        elif args.clear:
            simple_logger.clear_logs()
            print("All log files deleted.")
        elif args.export:
            path = simple_logger.export_logs(args.export)
            print(f"Exported to {path}")
    except (CorruptFileError, DeleteError, DirectoryError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
