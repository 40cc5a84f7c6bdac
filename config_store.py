"""Tracked-symbol list stored as a JSON array in the user's home directory."""

import json, logging
from pathlib import Path
from typing import List, Optional

from log_setup import LOGGER_NAME

log = logging.getLogger(LOGGER_NAME)

CONFIG_FILENAME = ".pricetrack.json"
DEFAULT_SYMBOLS = ("BTC", "ETH", "SOL")


class ConfigError(Exception):
    def __init__(self, path: Path, reason: str):
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason

class ConfigReadError(ConfigError):
    """The file exists but could not be opened or read."""

class ConfigParseError(ConfigError):
    """The file is not a non-empty JSON array of strings."""

class ConfigWriteError(ConfigError):
    """The default file could not be created."""


def config_path() -> Path:
    return Path.home() / CONFIG_FILENAME

def default_symbols() -> List[str]:
    return list(DEFAULT_SYMBOLS)

def write_default_config(path: Path) -> None:
    try:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(default_symbols(), f)
    except OSError as e:
        raise ConfigWriteError(path, f"create config file: {e}") from e

def parse_symbols(path: Path, raw: bytes) -> List[str]:
    try:
        data = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ConfigParseError(path, f"invalid JSON: {e}") from e
    if not isinstance(data, list):
        raise ConfigParseError(path, f"expected a JSON array, got {type(data).__name__}")
    for item in data:
        if not isinstance(item, str):
            raise ConfigParseError(path, f"symbol {item!r} is not a string")
    if not data:
        raise ConfigParseError(path, "no symbols listed")
    return data

def _read_config(path: Path) -> bytes:
    try:
        with open(path, "rb") as f:
            return f.read()
    except FileNotFoundError:
        raise
    except OSError as e:
        raise ConfigReadError(path, str(e)) from e

def load_symbols(path: Optional[Path] = None) -> List[str]:
    """Load the tracked symbols, creating the file with defaults when it is absent.

    Read failures degrade to the defaults. Malformed content raises
    ConfigParseError so the caller can pick a fallback.
    """
    path = Path(path) if path is not None else config_path()
    try:
        raw = _read_config(path)
    except FileNotFoundError:
        log.info("Config file not found, creating %s with default symbols: %s", path, list(DEFAULT_SYMBOLS))
        try:
            write_default_config(path)
        except ConfigWriteError as e:
            log.warning("Could not write default config: %s", e)
        return default_symbols()
    except ConfigReadError as e:
        log.error("Error opening config file: %s", e)
        return default_symbols()
    return parse_symbols(path, raw)

def load_symbols_or_default(path: Optional[Path] = None) -> List[str]:
    try:
        return load_symbols(path)
    except ConfigParseError as e:
        log.warning("Ignoring malformed config, using defaults %s: %s", list(DEFAULT_SYMBOLS), e)
        return default_symbols()
