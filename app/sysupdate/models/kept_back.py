"""Kept-back package models.

APT keeps a package back when upgrading it would require installing or
removing other packages. These models describe such packages together with
the installed and candidate versions reported by ``apt-cache policy``.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class KeptBackEntry:
    """A single kept-back package.

    Attributes:
        name: Package name.
        installed: Installed version, if the policy lookup succeeded.
        candidate: Candidate version, if the policy lookup reported one.
    """

    name: str
    installed: str | None = None
    candidate: str | None = None

    def __post_init__(self) -> None:
        """Validate entry data after initialization."""
        if not self.name:
            msg = "Package name cannot be empty"
            raise ValueError(msg)

    @property
    def has_details(self) -> bool:
        """Check if version details are known."""
        return self.installed is not None


@dataclass(frozen=True, slots=True)
class KeptBackReport:
    """Kept-back packages found in one upgrade run.

    Attributes:
        entries: Kept-back packages in the order APT listed them.
    """

    entries: tuple[KeptBackEntry, ...] = field(default_factory=tuple)

    @property
    def is_empty(self) -> bool:
        """Check if no package was kept back."""
        return not self.entries

    @property
    def names(self) -> list[str]:
        """Names of all kept-back packages."""
        return [e.name for e in self.entries]

    @property
    def detailed(self) -> list[KeptBackEntry]:
        """Entries with a known installed/candidate version pair."""
        return [e for e in self.entries if e.has_details]

    def __len__(self) -> int:
        return len(self.entries)
