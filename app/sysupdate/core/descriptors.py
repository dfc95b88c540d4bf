"""Application descriptor I/O.

This module loads application descriptors from TOML files and validates
them with the Pydantic models. Bundled descriptors ship with the package;
user descriptors in ~/.config/sysupdate/apps/ override bundled ones that
share the same file name.
"""

import logging
import tomllib
from pathlib import Path

from pydantic import ValidationError

from sysupdate.core.errors import (
    DescriptorError,
    DescriptorNotFoundError,
    DescriptorParseError,
    DescriptorValidationError,
)
from sysupdate.core.paths import get_bundled_apps_dir, get_user_apps_dir
from sysupdate.models.descriptor import ApplicationDescriptor

logger = logging.getLogger(__name__)


def load_descriptor(path: Path) -> ApplicationDescriptor:
    """Load and validate a single descriptor file.

    Args:
        path: Path to the descriptor TOML file.

    Returns:
        Validated ApplicationDescriptor.

    Raises:
        DescriptorNotFoundError: If the file doesn't exist.
        DescriptorParseError: If the TOML syntax is invalid.
        DescriptorValidationError: If the content doesn't match the schema.
    """
    if not path.exists():
        raise DescriptorNotFoundError(f"Descriptor not found: {path}")

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise DescriptorParseError(f"Invalid TOML syntax in {path.name}: {e}") from e
    except OSError as e:
        raise DescriptorError(f"Failed to read descriptor {path}: {e}") from e

    try:
        return ApplicationDescriptor.model_validate(data)
    except ValidationError as e:
        raise DescriptorValidationError(f"Invalid descriptor {path.name}: {e}") from e


def _descriptor_files(directory: Path) -> dict[str, Path]:
    if not directory.is_dir():
        return {}
    return {p.stem: p for p in sorted(directory.glob("*.toml"))}


def load_descriptors(
    directories: list[Path] | None = None,
    *,
    strict: bool = False,
) -> list[ApplicationDescriptor]:
    """Load all descriptors from the given directories.

    Later directories override earlier ones file by file. Invalid files are
    logged and skipped unless strict is set.

    Args:
        directories: Directories to read. Defaults to bundled then user apps.
        strict: If True, raise on the first invalid descriptor.

    Returns:
        Descriptors sorted by application name.

    Raises:
        DescriptorError: If strict is set and a descriptor is invalid.
    """
    dirs = directories if directories is not None else [get_bundled_apps_dir(), get_user_apps_dir()]

    files: dict[str, Path] = {}
    for directory in dirs:
        files.update(_descriptor_files(directory))

    descriptors: list[ApplicationDescriptor] = []
    for path in files.values():
        try:
            descriptors.append(load_descriptor(path))
        except DescriptorError as e:
            if strict:
                raise
            logger.warning("Skipping descriptor %s: %s", path, e)

    return sorted(descriptors, key=lambda d: d.name)


def select_descriptors(
    descriptors: list[ApplicationDescriptor],
    names: list[str] | None,
) -> list[ApplicationDescriptor]:
    """Select descriptors by application name.

    Args:
        descriptors: All loaded descriptors.
        names: Requested names. None or empty selects everything.

    Returns:
        Matching descriptors in the requested order.

    Raises:
        DescriptorNotFoundError: If a requested name is unknown.
    """
    if not names:
        return list(descriptors)

    by_name = {d.name: d for d in descriptors}
    unknown = [n for n in names if n not in by_name]
    if unknown:
        raise DescriptorNotFoundError(f"Unknown application(s): {', '.join(unknown)}")
    return [by_name[n] for n in names]
