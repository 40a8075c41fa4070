import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import find_dotenv, load_dotenv

DEFAULT_CONFIG: Dict[str, Any] = {
    "output_root": ".",
    "manifest": False,
    "archive": False,
    "progress": True,
    "log_level": "INFO",
}

ENV_PREFIX = "PDF2PNG_"
_BOOLEAN_KEYS = ("manifest", "archive", "progress")
_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


def _parse_bool(key: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"Invalid boolean value for '{key}': {value!r}")


def _read_yaml(config_path: Path) -> Dict[str, Any]:
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")
    with open(config_path, "r") as f:
        loaded = yaml.safe_load(f)
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ValueError(f"Configuration file '{config_path}' must contain a mapping, got {type(loaded).__name__}.")

    unknown = sorted(set(loaded) - set(DEFAULT_CONFIG))
    if unknown:
        raise ValueError(f"Unknown configuration keys in '{config_path}': {unknown}")
    for key in _BOOLEAN_KEYS:
        if key in loaded and not isinstance(loaded[key], bool):
            raise ValueError(f"Configuration key '{key}' must be true or false.")
    logging.info(f"Configuration loaded from '{config_path}'.")
    return loaded


def _read_env() -> Dict[str, Any]:
    load_dotenv(find_dotenv(usecwd=True))
    overrides = {}
    for key in DEFAULT_CONFIG:
        value = os.getenv(ENV_PREFIX + key.upper())
        if value is None or value == "":
            continue
        overrides[key] = _parse_bool(key, value) if key in _BOOLEAN_KEYS else value
    return overrides


def load_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Builds the run configuration.

    Values are layered: built-in defaults, then the optional YAML file, then
    PDF2PNG_* environment variables (a .env file is honoured). Command-line
    flags are applied on top of the result by the caller.

    Raises:
        FileNotFoundError: If `config_path` is given but missing.
        ValueError: If the file or an environment value is malformed.
    """
    config = dict(DEFAULT_CONFIG)
    if config_path is not None:
        config.update(_read_yaml(Path(config_path)))
    config.update(_read_env())
    config["output_root"] = Path(config["output_root"])
    config["log_level"] = str(config["log_level"]).upper()
    return config
