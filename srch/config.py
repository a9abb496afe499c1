import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

import dotenv

from srch.line_source import DEFAULT_FLUSH_INTERVAL
from srch.worker_pool import DEFAULT_POOL_SIZE

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".srchrc" / "config.json"


@dataclass
class SrchConfig:
    ignore_dirs: List[str] = field(default_factory=list)
    pool_size: int = DEFAULT_POOL_SIZE
    flush_interval: float = DEFAULT_FLUSH_INTERVAL  # seconds


def _split_names(value: str) -> List[str]:
    return [name.strip() for name in value.split(",") if name.strip()]


def _read_config_file(path: Path) -> dict:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as e:
        logger.warning("Ignoring config file %s: %s", path, e)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring config file %s: expected a JSON object", path)
        return {}
    return data


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if not value:
        return default
    try:
        parsed = int(value)
    except ValueError:
        logger.warning("Ignoring %s=%r: not an integer", name, value)
        return default
    if parsed < 1:
        logger.warning("Ignoring %s=%r: must be positive", name, value)
        return default
    return parsed


def load_config(config_path: Optional[Path] = None) -> SrchConfig:
    """
    Loads user settings. Nothing here is fatal: a missing or broken source
    just leaves the defaults in place.

    Sources, later ones adding to or overriding earlier ones:
        1. The JSON config file (`SRCH_CONFIG`, default ~/.srchrc/config.json),
           whose "ignore-dir" list names directories to skip.
        2. Environment variables, including any set in a .env file:
           SRCH_IGNORE_DIRS, SRCH_POOL_SIZE, SRCH_FLUSH_INTERVAL_MS.
    """
    dotenv.load_dotenv()

    if config_path is None:
        config_path = Path(os.getenv("SRCH_CONFIG") or DEFAULT_CONFIG_PATH)
    data = _read_config_file(Path(config_path))

    config = SrchConfig()
    names = data.get("ignore-dir", data.get("ignore-dirs")) or []
    if isinstance(names, str):
        names = _split_names(names)
    elif not isinstance(names, list):
        logger.warning("Ignoring \"ignore-dir\" in %s: expected a list of names", config_path)
        names = []
    config.ignore_dirs = [str(name) for name in names if name]
    config.ignore_dirs += _split_names(os.getenv("SRCH_IGNORE_DIRS", ""))

    config.pool_size = _env_int("SRCH_POOL_SIZE", DEFAULT_POOL_SIZE)
    interval_ms = _env_int("SRCH_FLUSH_INTERVAL_MS", int(DEFAULT_FLUSH_INTERVAL * 1000))
    config.flush_interval = interval_ms / 1000.0

    logger.debug("Loaded config from %s: %s", config_path, config)
    return config
