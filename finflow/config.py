"""Configuration file management for finflow."""

import copy
import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import tomli_w

from finflow.store.backends import BACKEND_NAMES
from finflow.store.transactions import STORAGE_KEY

DEFAULT_CONFIG: dict[str, Any] = {
    "storage": {
        "backend": "sqlite",
        "path": "",
        "key": STORAGE_KEY,
    },
    "display": {
        "currency_symbol": "$",
    },
}


@dataclass(frozen=True)
class Settings:
    """Resolved configuration values."""

    storage_backend: str
    storage_path: Path | None
    storage_key: str
    currency_symbol: str


def get_xdg_config_home() -> Path:
    """Get XDG config directory, with fallback to ~/.config."""
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config)
    return Path.home() / ".config"


def get_config_path() -> Path:
    """Get the config file path (XDG compliant).

    Returns:
        Path to the config file.
    """
    return get_xdg_config_home() / "finflow" / "config.toml"


def create_default_config(config_path: Path | None = None, backend: str = "sqlite") -> None:
    """Create default config file with secure permissions.

    Args:
        config_path: Path to config file. If None, uses default location.
        backend: Storage backend to record in the new config.

    Raises:
        ValueError: If backend is not a known backend name.
    """
    if backend not in BACKEND_NAMES:
        raise ValueError(f"Unknown storage backend: {backend}")

    if config_path is None:
        config_path = get_config_path()

    config_path.parent.mkdir(parents=True, exist_ok=True)

    default_config = copy.deepcopy(DEFAULT_CONFIG)
    default_config["storage"]["backend"] = backend

    save_config(default_config, config_path)


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """Load configuration from TOML file.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        Configuration dictionary.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        tomllib.TOMLDecodeError: If the file is not valid TOML.
    """
    if config_path is None:
        config_path = get_config_path()

    with open(config_path, "rb") as f:
        return tomllib.load(f)


def save_config(config: dict[str, Any], config_path: Path | None = None) -> None:
    """Save configuration to TOML file.

    Args:
        config: Configuration dictionary.
        config_path: Path to config file. If None, uses default location.
    """
    if config_path is None:
        config_path = get_config_path()

    with open(config_path, "wb") as f:
        tomli_w.dump(config, f)

    os.chmod(config_path, 0o600)


def load_settings(config_path: Path | None = None) -> Settings:
    """Load settings, falling back to defaults for a missing file or keys.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        Resolved Settings.

    Raises:
        tomllib.TOMLDecodeError: If the file exists but is not valid TOML.
        ValueError: If a section is not a table or the backend is unknown.
    """
    try:
        config = load_config(config_path)
    except FileNotFoundError:
        config = {}

    for section in ("storage", "display"):
        if not isinstance(config.get(section, {}), dict):
            raise ValueError(f"[{section}] in config must be a table")

    storage = {**DEFAULT_CONFIG["storage"], **config.get("storage", {})}
    display = {**DEFAULT_CONFIG["display"], **config.get("display", {})}

    backend = str(storage["backend"])
    if backend not in BACKEND_NAMES:
        raise ValueError(f"Unknown storage backend in config: {backend}")

    path = str(storage["path"])

    return Settings(
        storage_backend=backend,
        storage_path=Path(path).expanduser() if path else None,
        storage_key=str(storage["key"]) or STORAGE_KEY,
        currency_symbol=str(display["currency_symbol"]),
    )
