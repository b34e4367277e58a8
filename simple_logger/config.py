"""Configuration — frozen dataclass from defaults, optional YAML file, and env vars."""

import logging
import os
from dataclasses import dataclass

import yaml

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_DIR = "~/.simple_logger"


def _parse_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("true", "1", "yes")


@dataclass(frozen=True)
class Config:
    storage_dir: str = os.path.expanduser(DEFAULT_STORAGE_DIR)
    enabled: bool = True


def load_yaml_config(path: str | None) -> dict:
    """Load settings from a YAML file. Returns empty dict if unusable."""
    if not path:
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.warning("Config file %s not found, using defaults", path)
        return {}
    except yaml.YAMLError as e:
        logger.warning("Invalid YAML in %s (%s), using defaults", path, e)
        return {}
    except OSError as e:
        logger.warning("Cannot read config file %s (%s), using defaults", path, e)
        return {}

    if not isinstance(data, dict):
        logger.warning("Config file %s is not a mapping, ignoring it", path)
        return {}
    logger.info("Loaded YAML config from %s", path)
    return data


def load_config() -> Config:
    """Build Config from defaults <- YAML file <- env vars (highest priority)."""
    yaml_data = load_yaml_config(os.environ.get("SIMPLE_LOGGER_CONFIG"))

    storage_dir = os.environ.get(
        "SIMPLE_LOGGER_STORAGE_DIR",
        yaml_data.get("storage_dir", DEFAULT_STORAGE_DIR),
    )
    enabled = os.environ.get("SIMPLE_LOGGER_ENABLED", yaml_data.get("enabled", True))

    return Config(
        storage_dir=os.path.expanduser(str(storage_dir)),
        enabled=_parse_bool(enabled),
    )
