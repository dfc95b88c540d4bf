"""Application descriptor models.

This module defines the Pydantic models describing one managed
application: how to find its installed version, where its latest release
is published, and how to update it. Descriptors are stored as TOML files.
"""

import re
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# Type alias for the comparison mode
ComparisonMode = Literal["standard", "truncated"]

# Type alias for the update method
UpdateMethod = Literal["command", "package-manager", "callback"]


def _check_regex(value: str) -> str:
    try:
        re.compile(value)
    except re.error as e:
        msg = f"invalid regular expression {value!r}: {e}"
        raise ValueError(msg) from None
    return value


class ApplicationInfo(BaseModel):
    """Identity of the managed application.

    Attributes:
        name: Short identifier (e.g., "tmux").
        display_name: Name shown to the user. Defaults to name.
        command: Executable that must be on PATH for the app to count as installed.
        install_help: Hint printed when the application is not installed.
    """

    model_config = ConfigDict(extra="forbid")

    name: Annotated[str, Field(min_length=1, description="Application identifier")]
    display_name: Annotated[str | None, Field(description="Name shown to the user")] = None
    command: Annotated[str, Field(min_length=1, description="Executable name")]
    install_help: Annotated[str | None, Field(description="Installation hint")] = None


class DependencyInfo(BaseModel):
    """Another program that must be installed before the application is handled.

    Attributes:
        name: Name shown to the user (e.g., "Node.js").
        command: Executable that must be on PATH.
        help: Installation hint printed when the dependency is missing.
    """

    model_config = ConfigDict(extra="forbid")

    name: Annotated[str, Field(min_length=1, description="Dependency name")]
    command: Annotated[str, Field(min_length=1, description="Executable name")]
    help: Annotated[str | None, Field(description="Installation hint")] = None


class VersionConfig(BaseModel):
    """How the installed version is extracted.

    Attributes:
        command: Command printing the version (e.g., "tmux -V").
        regex: Regular expression whose first group is the version.
        comparison: "standard" ordering or "truncated" build-stamp comparison.
    """

    model_config = ConfigDict(extra="forbid")

    command: Annotated[str, Field(min_length=1, description="Version command")]
    regex: Annotated[str, Field(description="Version extraction regex")] = r"(\d+(?:\.\d+)+[a-z]?)"
    comparison: Annotated[ComparisonMode, Field(description="Comparison mode")] = "standard"

    @field_validator("regex")
    @classmethod
    def validate_regex(cls, v: str) -> str:
        """Validate that the regex compiles."""
        return _check_regex(v)


class GitHubSource(BaseModel):
    """Latest release of a GitHub repository."""

    model_config = ConfigDict(extra="forbid")

    kind: Literal["github"] = "github"
    owner: Annotated[str, Field(min_length=1)]
    repo: Annotated[str, Field(min_length=1)]


class NpmSource(BaseModel):
    """Latest version of a package on the npm registry."""

    model_config = ConfigDict(extra="forbid")

    kind: Literal["npm"] = "npm"
    package: Annotated[str, Field(min_length=1)]


class AptSource(BaseModel):
    """Candidate version of an APT package."""

    model_config = ConfigDict(extra="forbid")

    kind: Literal["apt"] = "apt"
    package: Annotated[str, Field(min_length=1)]


class RedirectSource(BaseModel):
    """Version embedded in the redirect target of a download URL.

    Attributes:
        url: Download URL answering with a redirect.
        regex: Regular expression applied to the Location header.
    """

    model_config = ConfigDict(extra="forbid")

    kind: Literal["redirect"] = "redirect"
    url: Annotated[str, Field(min_length=1)]
    regex: str

    @field_validator("regex")
    @classmethod
    def validate_regex(cls, v: str) -> str:
        """Validate that the regex compiles."""
        return _check_regex(v)


RemoteSource = Annotated[
    GitHubSource | NpmSource | AptSource | RedirectSource,
    Field(discriminator="kind"),
]


class UpdateConfig(BaseModel):
    """How the application is updated once the user confirms.

    Attributes:
        method: "command" (shell snippet), "package-manager" or "callback".
        command: Shell snippet for the command method.
        package: Package name for the package-manager method.
        callback: Registered callback name for the callback method.
        output_lines: Number of trailing output lines kept for display.
        use_temp_dir: Run the command inside a scratch directory removed afterwards.
        timeout_seconds: Maximum run time of the update.
        auto_confirm: Proceed without prompting in quiet mode.
    """

    model_config = ConfigDict(extra="forbid")

    method: Annotated[UpdateMethod, Field(description="Update method")] = "command"
    command: Annotated[str | None, Field(description="Shell snippet")] = None
    package: Annotated[str | None, Field(description="Package name")] = None
    callback: Annotated[str | None, Field(description="Callback name")] = None
    output_lines: Annotated[int, Field(ge=0, le=500)] = 20
    use_temp_dir: bool = False
    timeout_seconds: Annotated[int, Field(ge=10, le=7200)] = 1800
    auto_confirm: Annotated[bool, Field(description="Confirm automatically in quiet mode")] = False

    @model_validator(mode="after")
    def _check_method_fields(self) -> "UpdateConfig":
        field_name = {
            "command": "command",
            "package-manager": "package",
            "callback": "callback",
        }[self.method]
        if not getattr(self, field_name):
            msg = f"update method '{self.method}' requires '{field_name}'"
            raise ValueError(msg)
        return self


class ApplicationDescriptor(BaseModel):
    """Complete description of one managed application.

    Example TOML::

        [application]
        name = "tmux"
        command = "tmux"

        [version]
        command = "tmux -V"
        regex = 'tmux ([0-9]+\\.[0-9]+[a-z]?)'

        [source]
        kind = "github"
        owner = "tmux"
        repo = "tmux"

        [update]
        method = "package-manager"
        package = "tmux"

    Dependencies are listed as an array of tables::

        [[dependencies]]
        name = "Node.js"
        command = "node"
        help = "https://nodejs.org/"
    """

    model_config = ConfigDict(extra="forbid")

    application: ApplicationInfo
    version: VersionConfig
    source: RemoteSource
    update: UpdateConfig
    dependencies: list[DependencyInfo] = Field(default_factory=list)

    @property
    def name(self) -> str:
        """Application identifier."""
        return self.application.name

    @property
    def display_name(self) -> str:
        """Name shown to the user."""
        return self.application.display_name or self.application.name

    @property
    def source_label(self) -> str:
        """Short description of the remote source."""
        source = self.source
        if isinstance(source, GitHubSource):
            return f"github:{source.owner}/{source.repo}"
        if isinstance(source, RedirectSource):
            return "redirect"
        return f"{source.kind}:{source.package}"
