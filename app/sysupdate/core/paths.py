"""XDG-compliant path management for sysupdate.

This module provides standardized paths following the XDG Base Directory
Specification for configuration storage.

XDG defaults:
- Config: ~/.config/sysupdate/
- Descriptors: ~/.config/sysupdate/apps/
"""

import os
from importlib import resources
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "sysupdate"


def _get_xdg_dir(env_var: str, default_subdir: str) -> Path:
    """Get XDG directory respecting environment variable override.

    Args:
        env_var: XDG environment variable name (e.g., "XDG_CONFIG_HOME").
        default_subdir: Default subdirectory under home (e.g., ".config").

    Returns:
        Path to the application-specific directory.
    """
    base = os.environ.get(env_var)
    if base:
        return Path(base) / APP_NAME
    return Path.home() / default_subdir / APP_NAME


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Path to ~/.config/sysupdate/ (or XDG_CONFIG_HOME/sysupdate/).
    """
    return _get_xdg_dir("XDG_CONFIG_HOME", ".config")


def get_settings_path() -> Path:
    """Get the settings file path.

    Returns:
        Path to ~/.config/sysupdate/config.toml.
    """
    return get_config_dir() / "config.toml"


def get_user_theme_path() -> Path:
    """Get the user theme configuration path.

    Returns:
        Path to ~/.config/sysupdate/theme.toml.
    """
    return get_config_dir() / "theme.toml"


def get_user_apps_dir() -> Path:
    """Get the directory holding user application descriptors.

    Returns:
        Path to ~/.config/sysupdate/apps/.
    """
    return get_config_dir() / "apps"


def get_bundled_apps_dir() -> Path:
    """Get the directory of descriptors shipped with the package.

    Returns:
        Path to the bundled data/apps directory.
    """
    return Path(str(resources.files("sysupdate.data").joinpath("apps")))


def get_bundled_theme_path() -> Path:
    """Get the bundled default theme path.

    Returns:
        Path to the bundled data/theme.toml.
    """
    return Path(str(resources.files("sysupdate.data").joinpath("theme.toml")))


def ensure_config_dir() -> Path:
    """Create the configuration directory if it doesn't exist.

    Returns:
        Path to the configuration directory.

    Raises:
        RuntimeError: If the directory cannot be created.
    """
    path = get_config_dir()
    try:
        path.mkdir(parents=True, exist_ok=True)
    except PermissionError as e:
        msg = f"Cannot create config directory {path}: Permission denied"
        raise RuntimeError(msg) from e
    except OSError as e:
        msg = f"Cannot create config directory {path}: {e}"
        raise RuntimeError(msg) from e
    return path
