"""Unit tests for pub_release.utils.shell module.

Tests for:
- split_command() - naive whitespace splitting of hook scripts
- run_hook() - empty hooks are skipped, others streamed and checked
- run() - environment merging, ANSI stripping and error reporting
"""

import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from pub_release.utils.shell import (
    HookCommand,
    ShellError,
    run,
    run_hook,
    split_command,
    strip_ansi,
)


class TestSplitCommand:
    """Tests for split_command()."""

    def test_command_and_args(self) -> None:
        command = split_command("echo hello world")
        assert command == HookCommand(command_line="echo", args=["hello", "world"])
        assert command.as_list() == ["echo", "hello", "world"]

    def test_runs_of_whitespace_collapse(self) -> None:
        command = split_command("  dart   format\t. ")
        assert command is not None
        assert command.command_line == "dart"
        assert command.args == ["format", "."]

    def test_quotes_are_not_interpreted(self) -> None:
        """Quoted arguments are split like any other text."""
        command = split_command('echo "hello world"')
        assert command is not None
        assert command.args == ['"hello', 'world"']

    def test_single_word(self) -> None:
        command = split_command("make")
        assert command is not None
        assert command.args == []

    @pytest.mark.parametrize("script", ["", "   ", "\n"])
    def test_empty_script(self, script: str) -> None:
        assert split_command(script) is None


class TestRunHook:
    """Tests for run_hook()."""

    @patch("pub_release.utils.shell.run")
    def test_empty_hook_is_skipped(self, mock_run: MagicMock) -> None:
        assert run_hook("", cwd=Path(".")) is None
        mock_run.assert_not_called()

    @patch("pub_release.utils.shell.run")
    def test_hook_runs_split_command(self, mock_run: MagicMock, temp_dir: Path) -> None:
        command = run_hook("echo hello world", cwd=temp_dir, timeout=30, env={"A": "1"})

        assert command is not None
        mock_run.assert_called_once_with(
            ["echo", "hello", "world"],
            cwd=temp_dir,
            capture=False,
            check=True,
            timeout=30,
            env={"A": "1"},
        )

    @patch("pub_release.utils.shell.run")
    def test_hook_failure_propagates(self, mock_run: MagicMock) -> None:
        mock_run.side_effect = ShellError("false", 1, "", "")
        with pytest.raises(ShellError):
            run_hook("false")


class TestRun:
    """Tests for run()."""

    @patch("pub_release.utils.shell.subprocess.run")
    def test_env_merged_with_process_environment(
        self, mock_subprocess: MagicMock, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("PUB_RELEASE_TEST_VAR", "kept")
        mock_subprocess.return_value = subprocess.CompletedProcess([], 0, "out", "")

        run(["flutter", "--version"], env={"FLUTTER_ROOT": "/sdk"})

        env = mock_subprocess.call_args.kwargs["env"]
        assert env["FLUTTER_ROOT"] == "/sdk"
        assert env["PUB_RELEASE_TEST_VAR"] == "kept"

    @patch("pub_release.utils.shell.subprocess.run")
    def test_output_stripped_of_ansi(self, mock_subprocess: MagicMock) -> None:
        mock_subprocess.return_value = subprocess.CompletedProcess(
            [], 0, "\x1b[32m{}\x1b[0m", ""
        )
        result = run(["pana"])
        assert result.stdout == "{}"

    @patch("pub_release.utils.shell.subprocess.run")
    def test_non_zero_exit_raises(self, mock_subprocess: MagicMock) -> None:
        mock_subprocess.return_value = subprocess.CompletedProcess([], 2, "", "boom")
        with pytest.raises(ShellError) as exc_info:
            run(["flutter", "pub", "publish"])
        assert exc_info.value.returncode == 2
        assert exc_info.value.stderr == "boom"

    @patch("pub_release.utils.shell.subprocess.run")
    def test_non_zero_exit_without_check(self, mock_subprocess: MagicMock) -> None:
        mock_subprocess.return_value = subprocess.CompletedProcess([], 1, "", "")
        assert run(["false"], check=False).returncode == 1

    @patch("pub_release.utils.shell.subprocess.run")
    def test_missing_executable_is_shell_error(self, mock_subprocess: MagicMock) -> None:
        mock_subprocess.side_effect = FileNotFoundError("no such file")
        with pytest.raises(ShellError) as exc_info:
            run(["definitely-not-installed"])
        assert exc_info.value.returncode == 127


def test_strip_ansi() -> None:
    assert strip_ansi("\x1b[1mbold\x1b[0m") == "bold"
