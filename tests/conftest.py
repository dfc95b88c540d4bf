"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from sysupdate.models.decision import Decision
from sysupdate.models.descriptor import ApplicationDescriptor
from sysupdate.models.version import VersionStatus, VersionString


@pytest.fixture
def apt_upgrade_output() -> str:
    """Sample apt-get upgrade output with two kept-back packages."""
    return """Reading package lists...
Building dependency tree...
Reading state information...
Calculating upgrade...
The following packages have been kept back:
  linux-generic linux-headers-generic
The following packages will be upgraded:
  curl libcurl4
2 upgraded, 0 newly installed, 0 to remove and 2 not upgraded.
Need to get 1,234 kB of archives.
After this operation, 0 B of additional disk space will be used.
Get:1 http://archive.ubuntu.com/ubuntu noble-updates/main amd64 curl amd64 8.5.0-2ubuntu10.6 [227 kB]
Fetched 1,234 kB in 1s (1,100 kB/s)
Unpacking curl (8.5.0-2ubuntu10.6) over (8.5.0-2ubuntu10.5) ...
Setting up curl (8.5.0-2ubuntu10.6) ...
Processing triggers for man-db (2.12.0-4build2) ..."""


@pytest.fixture
def apt_clean_output() -> str:
    """Sample apt-get upgrade output with nothing to do."""
    return """Reading package lists...
Building dependency tree...
Reading state information...
Calculating upgrade...
0 upgraded, 0 newly installed, 0 to remove and 0 not upgraded."""


@pytest.fixture
def policy_output() -> str:
    """Sample apt-cache policy output for an installed package."""
    return """linux-generic:
  Installed: 6.8.0-45.45
  Candidate: 6.8.0-47.47
  Version table:
     6.8.0-47.47 500
        500 http://archive.ubuntu.com/ubuntu noble-updates/main amd64 Packages
 *** 6.8.0-45.45 100
        100 /var/lib/dpkg/status"""


@pytest.fixture
def chrome_policy_output() -> str:
    """Sample apt-cache policy output for google-chrome-stable."""
    return """google-chrome-stable:
  Installed: 131.0.6778.69-1
  Candidate: 131.0.6778.85-1
  Version table:
     131.0.6778.85-1 500
        500 https://dl.google.com/linux/chrome/deb stable/main amd64 Packages"""


def _descriptor_data(name: str, **sections: Any) -> dict[str, Any]:
    data: dict[str, Any] = {
        "application": {"name": name, "command": name},
        "version": {"command": f"{name} --version"},
        "source": {"kind": "github", "owner": name, "repo": name},
        "update": {"method": "command", "command": f"echo updating {name}"},
    }
    # application and version are merged; source and update are replaced
    for section in ("application", "version"):
        data[section].update(sections.get(section, {}))
    for section in ("source", "update"):
        if section in sections:
            data[section] = sections[section]
    if "dependencies" in sections:
        data["dependencies"] = sections["dependencies"]
    return data


@pytest.fixture
def make_descriptor() -> Callable[..., ApplicationDescriptor]:
    """Factory creating descriptors with overridable sections.

    Example:
        make_descriptor("kitty", source={"kind": "npm", "package": "kitty"})
    """

    def _make(name: str = "demo", **sections: Any) -> ApplicationDescriptor:
        return ApplicationDescriptor.model_validate(_descriptor_data(name, **sections))

    return _make


@pytest.fixture
def make_decision() -> Callable[..., Decision]:
    """Factory creating decisions from version text.

    Example:
        make_decision("tmux", "3.4", "3.5a", VersionStatus.UPDATE_AVAILABLE)
    """

    def _make(
        name: str,
        current: str,
        latest: str,
        status: VersionStatus = VersionStatus.UPDATE_AVAILABLE,
    ) -> Decision:
        return Decision(
            name=name,
            current=VersionString.parse(current),
            latest=VersionString.parse(latest),
            status=status,
        )

    return _make


@pytest.fixture
def config_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point XDG_CONFIG_HOME at a temporary directory."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    return tmp_path / "sysupdate"
