"""Configuration file management for budgetbook."""

import os
import tomllib
from pathlib import Path
from typing import Any

import tomli_w

DEFAULT_IMPORT_SETTINGS: dict[str, Any] = {
    "api_base": "https://api.openai.com/v1",
    "model": "gpt-4o-mini",
    "timeout_seconds": 120,
    "api_key_env": "OPENAI_API_KEY",
}


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
    return get_xdg_config_home() / "budgetbook" / "config.toml"


def create_default_config(config_path: Path | None = None) -> None:
    """Create default config file with secure permissions.

    Args:
        config_path: Path to config file. If None, uses default location.
    """
    if config_path is None:
        config_path = get_config_path()

    config_path.parent.mkdir(parents=True, exist_ok=True)

    default_config: dict[str, Any] = {
        "import": dict(DEFAULT_IMPORT_SETTINGS),
    }

    with open(config_path, "wb") as f:
        tomli_w.dump(default_config, f)

    os.chmod(config_path, 0o600)


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """Load configuration from TOML file.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        Configuration dictionary.

    Raises:
        FileNotFoundError: If config file doesn't exist.
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

    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "wb") as f:
        tomli_w.dump(config, f)

    os.chmod(config_path, 0o600)


def _load_or_empty(config_path: Path | None) -> dict[str, Any]:
    try:
        return load_config(config_path)
    except FileNotFoundError:
        return {}


def get_session_user(config_path: Path | None = None) -> int | None:
    """Get the logged-in user id.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        User id, or None if nobody is logged in.
    """
    session = _load_or_empty(config_path).get("session", {})
    user_id = session.get("user_id") if isinstance(session, dict) else None
    return int(user_id) if user_id is not None else None


def set_session_user(user_id: int, config_path: Path | None = None) -> None:
    """Record the logged-in user id.

    Args:
        user_id: User id returned by login or register.
        config_path: Path to config file. If None, uses default location.
    """
    config = _load_or_empty(config_path)
    config["session"] = {"user_id": user_id}
    save_config(config, config_path)


def clear_session(config_path: Path | None = None) -> None:
    """Forget the logged-in user.

    Args:
        config_path: Path to config file. If None, uses default location.
    """
    config = _load_or_empty(config_path)
    if config.pop("session", None) is not None:
        save_config(config, config_path)


def get_import_settings(config_path: Path | None = None) -> dict[str, Any]:
    """Get statement import settings with defaults filled in.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        Dictionary with api_base, model, timeout_seconds and api_key_env.
    """
    settings = dict(DEFAULT_IMPORT_SETTINGS)
    configured = _load_or_empty(config_path).get("import", {})
    if isinstance(configured, dict):
        settings.update(configured)
    return settings
