"""Run settings.

This module provides the settings model and I/O functions. Settings are
stored in ~/.config/sysupdate/config.toml; command-line flags override
the stored values and the resulting object is passed explicitly to the
decision engine and update sessions.
"""

import logging
import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from sysupdate.core.errors import SettingsError
from sysupdate.core.paths import get_settings_path
from sysupdate.models.version import SuffixOrder

logger = logging.getLogger(__name__)


class Settings(BaseModel):
    """Settings for a sysupdate run.

    Attributes:
        quiet: Never prompt; descriptors decide whether updates proceed.
        verbose: Enable debug logging and full update output.
        use_system_comparator: Prefer ``dpkg --compare-versions`` when present.
        suffix_order: Ordering rule for bare versus suffixed version segments.
        timeout_seconds: Timeout for each remote version lookup.
        max_workers: Parallel version checks.
        github_retries: Attempts per GitHub request on 429/5xx responses.
    """

    model_config = ConfigDict(extra="forbid")

    quiet: Annotated[bool, Field(description="Run without prompts")] = False
    verbose: Annotated[bool, Field(description="Verbose output")] = False
    use_system_comparator: Annotated[
        bool,
        Field(description="Prefer dpkg version ordering"),
    ] = True
    suffix_order: Annotated[
        SuffixOrder,
        Field(description="Ordering of bare versus suffixed segments"),
    ] = SuffixOrder.SUFFIX_NEWER
    timeout_seconds: Annotated[
        float,
        Field(ge=1, le=120, description="Remote lookup timeout (1-120)"),
    ] = 15.0
    max_workers: Annotated[
        int,
        Field(ge=1, le=32, description="Parallel version checks (1-32)"),
    ] = 4
    github_retries: Annotated[
        int,
        Field(ge=1, le=5, description="GitHub attempts on 429/5xx (1-5)"),
    ] = 2

    @property
    def interactive(self) -> bool:
        """Check if prompts may be shown."""
        return not self.quiet

    def with_overrides(self, **overrides: object) -> "Settings":
        """Return a copy with non-None overrides applied.

        Args:
            **overrides: Field values, None meaning "keep current".

        Returns:
            New validated Settings.
        """
        values = {k: v for k, v in overrides.items() if v is not None}
        if not values:
            return self
        return Settings.model_validate({**self.model_dump(), **values})


def load_settings(path: Path | None = None) -> Settings:
    """Load settings from a TOML file.

    A missing file yields the defaults.

    Args:
        path: Path to the settings file. If None, uses the default path.

    Returns:
        Validated Settings.

    Raises:
        SettingsError: If the file cannot be read, parsed or validated.
    """
    settings_path = path or get_settings_path()

    if not settings_path.exists():
        logger.debug("No settings file at %s, using defaults", settings_path)
        return Settings()

    try:
        with open(settings_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise SettingsError(f"Invalid TOML syntax in {settings_path}: {e}") from e
    except OSError as e:
        raise SettingsError(f"Failed to read settings: {e}") from e

    try:
        return Settings.model_validate(data)
    except ValidationError as e:
        raise SettingsError(f"Invalid settings content: {e}") from e


def save_settings(settings: Settings, path: Path | None = None) -> Path:
    """Save settings to a TOML file.

    The file is written atomically by first writing to a temporary file
    and then using os.replace() for atomic rename.

    Args:
        settings: The Settings object to save.
        path: Path to save to. If None, uses the default path.

    Returns:
        Path where the settings were saved.

    Raises:
        SettingsError: If the file cannot be written.
    """
    settings_path = path or get_settings_path()
    settings_path.parent.mkdir(parents=True, exist_ok=True)

    data = settings.model_dump(mode="json")

    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="wb",
            dir=settings_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(settings_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise SettingsError(f"Failed to write settings: {e}") from e

    return settings_path
