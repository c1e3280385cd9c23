"""Configuration management for fintrack."""

import json
import os
from pathlib import Path
from typing import Any

# Default config filename
CONFIG_FILENAME = "config.json"


def get_config_dir() -> Path:
    """Get the config directory path (XDG compliant)."""
    xdg_config_home = os.getenv("XDG_CONFIG_HOME", str(Path.home() / ".config"))
    return Path(xdg_config_home) / "fintrack"


def get_config_path() -> Path:
    """Get the default config file path."""
    return get_config_dir() / CONFIG_FILENAME


def find_config_file() -> Path | None:
    """Find the config file in standard locations.

    Searches for config in the following order:
    1. config.json in current directory
    2. XDG config: ~/.config/fintrack/config.json
    """
    config_paths = [
        Path(CONFIG_FILENAME),
        get_config_path(),
    ]

    for path in config_paths:
        if path.exists():
            return path

    return None


def load_json_config(config_path: Path) -> dict[str, Any]:
    """Load configuration from a JSON file."""
    with open(config_path) as f:
        return json.load(f)  # type: ignore[no-any-return]


def save_json_config(config: dict[str, Any], config_path: Path | None = None) -> Path:
    """Save configuration to a JSON file.

    Args:
        config: Configuration dictionary to save
        config_path: Path to save to (defaults to XDG config location)

    Returns:
        Path where config was saved
    """
    if config_path is None:
        config_path = get_config_path()

    # Ensure directory exists
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "w") as f:
        json.dump(config, f, indent=2)
        f.write("\n")

    return config_path


def load_config(config_path: Path | None = None) -> dict[str, Any] | None:
    """Load configuration from config file.

    Args:
        config_path: Explicit path to config.json file

    Returns:
        Loaded config dict or None if not found
    """
    if config_path:
        return load_json_config(config_path)

    config_file = find_config_file()
    if config_file:
        return load_json_config(config_file)

    return None


def config_exists() -> bool:
    """Check if any config file exists."""
    return find_config_file() is not None


def get_store_settings(
    config: dict[str, Any] | None = None,
    url: str | None = None,
    api_key: str | None = None,
) -> tuple[str, str] | None:
    """Get the data service URL and API key.

    Args:
        config: Loaded JSON config
        url: Optional URL to use instead of config
        api_key: Optional API key to use instead of config

    Returns:
        (url, api_key) or None if either is not configured
    """
    store_config = (config or {}).get("store", {})
    url = url or store_config.get("url")
    api_key = api_key or store_config.get("api_key")
    if url and api_key:
        return url, api_key
    return None


def get_access_token(
    config: dict[str, Any] | None = None,
    override: str | None = None,
) -> str | None:
    """Get the signed-in user's access token, if any."""
    if override:
        return override

    if config:
        if token := config.get("store", {}).get("access_token"):
            return token  # type: ignore[no-any-return]

    return None


def get_owner_id(
    config: dict[str, Any] | None = None,
    override: str | None = None,
) -> str | None:
    """Get the id of the user whose transactions are loaded.

    Args:
        config: Loaded JSON config
        override: Optional owner id to use instead of config

    Returns:
        Owner id string or None if not configured
    """
    if override:
        return override

    if config and (owner_id := config.get("owner_id")):
        return str(owner_id)

    return None


def create_default_config() -> dict[str, Any]:
    """Create a default empty configuration."""
    return {
        "owner_id": None,
        "store": {
            "url": None,
            "api_key": None,
            "access_token": None,
        },
    }
