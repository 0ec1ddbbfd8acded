"""Safe subprocess execution utilities.

Provides shell command execution with:
- ANSI escape code stripping (keeps pana JSON and version strings clean)
- Proper error handling and reporting
- Timeout support
- Environment variable injection (FLUTTER_ROOT, PATH)
- Naive whitespace splitting for user-supplied hook scripts
"""

import os
import re
import shlex
import shutil
import subprocess
from dataclasses import dataclass, field
from pathlib import Path


class ShellError(Exception):
    """Exception raised when a shell command fails.

    Attributes:
        cmd: The command that failed
        returncode: Exit code of the failed command
        stdout: Standard output (ANSI stripped)
        stderr: Standard error (ANSI stripped)
    """

    def __init__(
        self,
        cmd: str,
        returncode: int,
        stdout: str,
        stderr: str,
    ) -> None:
        self.cmd = cmd
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        super().__init__(f"Command failed with exit code {returncode}: {cmd}")

    def __str__(self) -> str:
        parts = [f"Command failed: {self.cmd}"]
        parts.append(f"Exit code: {self.returncode}")
        if self.stderr:
            parts.append(f"Stderr: {self.stderr}")
        if self.stdout:
            parts.append(f"Stdout: {self.stdout}")
        return "\n".join(parts)


# Matches: ESC[...m, ESC[...;...m, and other control sequences
ANSI_PATTERN = re.compile(
    r"\x1b\[[0-9;]*[a-zA-Z]|\x1b\][^\x07]*\x07|\x1b[PX^_][^\x1b]*\x1b\\"
)

CONTROL_CHARS_PATTERN = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f]")


def strip_ansi(text: str) -> str:
    """Remove ANSI escape sequences and control characters from text.

    Args:
        text: Input text potentially containing ANSI codes

    Returns:
        Clean text with all ANSI sequences removed
    """
    if not text:
        return ""
    result = ANSI_PATTERN.sub("", text)
    result = CONTROL_CHARS_PATTERN.sub("", result)
    return result


def run(
    cmd: str | list[str],
    cwd: Path | None = None,
    capture: bool = True,
    check: bool = True,
    timeout: int | None = 300,
    env: dict[str, str] | None = None,
    strip_output: bool = True,
) -> subprocess.CompletedProcess[str]:
    """Execute a command safely.

    Key security features:
    - Always uses shell=False to prevent shell injection
    - Strips ANSI codes from output by default
    - Raises ShellError with context on failure

    Args:
        cmd: Command to execute (string or list of arguments)
        cwd: Working directory for the command
        capture: Whether to capture stdout/stderr (False streams to the console)
        check: Whether to raise ShellError on non-zero exit
        timeout: Maximum execution time in seconds (None waits forever)
        env: Additional environment variables
        strip_output: Whether to strip ANSI codes from output

    Returns:
        CompletedProcess with stdout/stderr (ANSI stripped if requested)

    Raises:
        ShellError: If command fails (or cannot be started) and check=True
        subprocess.TimeoutExpired: If command exceeds timeout
    """
    cmd_list = shlex.split(cmd) if isinstance(cmd, str) else list(cmd)

    merged_env = {**os.environ}
    if env:
        merged_env.update(env)

    # Resolve against the merged PATH so freshly provisioned tools are found
    executable = shutil.which(cmd_list[0], path=merged_env.get("PATH")) if cmd_list else None
    if executable:
        cmd_list = [executable, *cmd_list[1:]]

    try:
        result = subprocess.run(
            cmd_list,
            cwd=cwd,
            capture_output=capture,
            text=True,
            timeout=timeout,
            env=merged_env,
        )
    except FileNotFoundError as e:
        if not check:
            raise
        raise ShellError(
            cmd=" ".join(cmd_list),
            returncode=127,
            stdout="",
            stderr=str(e),
        ) from e

    if capture and strip_output:
        result.stdout = strip_ansi(result.stdout) if result.stdout else ""
        result.stderr = strip_ansi(result.stderr) if result.stderr else ""

    if check and result.returncode != 0:
        raise ShellError(
            cmd=" ".join(cmd_list),
            returncode=result.returncode,
            stdout=result.stdout or "",
            stderr=result.stderr or "",
        )

    return result


@dataclass(frozen=True)
class HookCommand:
    """A user-supplied hook script split into command and arguments.

    Attributes:
        command_line: Executable name (first token)
        args: Remaining tokens, passed through verbatim
    """

    command_line: str
    args: list[str] = field(default_factory=list)

    def as_list(self) -> list[str]:
        return [self.command_line, *self.args]

    def __str__(self) -> str:
        return " ".join(self.as_list())


def split_command(script: str) -> HookCommand | None:
    """Split a hook script on whitespace.

    There is no quoting or escaping support: ``echo "hello world"`` yields
    the arguments ``['"hello', 'world"']``. Hooks that need quoting should
    call a script file instead.

    Args:
        script: Raw hook string from the action inputs

    Returns:
        HookCommand, or None when the script is empty
    """
    tokens = script.split()
    if not tokens:
        return None
    return HookCommand(command_line=tokens[0], args=tokens[1:])


def run_hook(
    script: str,
    cwd: Path | None = None,
    timeout: int | None = 300,
    env: dict[str, str] | None = None,
) -> HookCommand | None:
    """Run a hook script, streaming its output.

    Args:
        script: Raw hook string (may be empty)
        cwd: Working directory
        timeout: Maximum execution time in seconds
        env: Additional environment variables

    Returns:
        The command that ran, or None if the hook was empty

    Raises:
        ShellError: If the hook exits non-zero
    """
    command = split_command(script)
    if command is None:
        return None
    run(command.as_list(), cwd=cwd, capture=False, check=True, timeout=timeout, env=env)
    return command


def is_command_available(cmd: str) -> bool:
    """Check if a command is available in PATH.

    Args:
        cmd: Command name to check

    Returns:
        True if command is available
    """
    return shutil.which(cmd) is not None
