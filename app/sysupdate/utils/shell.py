"""Shell execution utilities.

Provides safe subprocess execution with proper error handling.
"""

import shlex
import shutil
import subprocess
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Result of a shell command execution.

    Attributes:
        stdout: Standard output from the command.
        stderr: Standard error from the command.
        returncode: Exit code of the command.
    """

    stdout: str
    stderr: str
    returncode: int

    @property
    def success(self) -> bool:
        """Check if command executed successfully."""
        return self.returncode == 0

    @property
    def output(self) -> str:
        """Combined stdout and stderr, stdout first."""
        return "\n".join(part for part in (self.stdout, self.stderr) if part)

    def tail(self, lines: int) -> str:
        """Return the last lines of the combined output."""
        if lines <= 0:
            return self.output
        return "\n".join(self.output.splitlines()[-lines:])


def run_command(
    args: list[str],
    *,
    check: bool = False,
    timeout: float | None = 60.0,
    cwd: str | None = None,
    env: dict[str, str] | None = None,
) -> CommandResult:
    """Execute a command and return the result.

    Args:
        args: Command and arguments to execute.
        check: If True, raise CalledProcessError on non-zero exit.
        timeout: Maximum time in seconds to wait for command.
        cwd: Working directory for the command. If None, uses current directory.
        env: Additional environment variables (merged with current env).

    Returns:
        CommandResult with stdout, stderr, and returncode.

    Raises:
        subprocess.CalledProcessError: If check=True and command fails.
        subprocess.TimeoutExpired: If command exceeds timeout.
        FileNotFoundError: If command executable is not found.
    """
    full_env = None
    if env:
        import os

        full_env = {**os.environ, **env}

    result = subprocess.run(
        args,
        capture_output=True,
        text=True,
        check=check,
        timeout=timeout,
        cwd=cwd,
        env=full_env,
    )
    return CommandResult(
        stdout=result.stdout,
        stderr=result.stderr,
        returncode=result.returncode,
    )


def run_shell(
    script: str,
    *,
    timeout: float | None = 600.0,
    cwd: str | None = None,
) -> CommandResult:
    """Execute a shell snippet with bash.

    Used for descriptor-supplied update commands which may contain pipes
    and redirections.

    Args:
        script: Shell snippet passed to ``bash -c``.
        timeout: Maximum time in seconds to wait.
        cwd: Working directory for the snippet.

    Returns:
        CommandResult with stdout, stderr, and returncode.

    Raises:
        subprocess.TimeoutExpired: If the snippet exceeds timeout.
        FileNotFoundError: If bash is not found.
    """
    return run_command(["bash", "-c", script], timeout=timeout, cwd=cwd)


def split_command(command: str) -> list[str]:
    """Split a command string into arguments using shell quoting rules."""
    return shlex.split(command)


def command_exists(name: str) -> bool:
    """Check if a command exists in the system PATH.

    Args:
        name: Command name to check.

    Returns:
        True if command exists, False otherwise.
    """
    return shutil.which(name) is not None
