"""Validates decoded wire entries against the log entry JSON schema."""

import json
import os

import jsonschema

DEFAULT_SCHEMA_PATH = os.path.join(os.path.dirname(__file__), "schemas", "log_entry.json")


class LogEntryValidator:
    """Validates wire dicts against a JSON schema."""

    def __init__(self, schema_path: str = DEFAULT_SCHEMA_PATH):
        with open(schema_path, "r", encoding="utf-8") as f:
            schema = json.load(f)

        self._validator = jsonschema.Draft202012Validator(schema)

    def validate(self, wire_entry) -> tuple[bool, list[str]]:
        """Validate one wire entry.

        Returns:
            tuple: (is_valid: bool, errors: list[str])
        """
        errors = sorted(self._validator.iter_errors(wire_entry), key=lambda e: [str(p) for p in e.path])
        if not errors:
            return True, []

        messages = []
        for error in errors:
            where = "/".join(str(p) for p in error.path)
            messages.append(f"{where}: {error.message}" if where else error.message)
        return False, messages
