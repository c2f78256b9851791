"""Unit tests for shell execution utilities."""

from unittest.mock import MagicMock, patch

from pipctl.utils.shell import CommandResult, command_exists, run_command


class TestCommandResult:
    """Tests for CommandResult."""

    def test_success(self) -> None:
        """Zero exit code means success."""
        assert CommandResult(stdout="", stderr="", returncode=0).success is True
        assert CommandResult(stdout="", stderr="", returncode=1).success is False

    def test_output_joins_stderr_and_stdout(self) -> None:
        """output puts stderr first and skips empty parts."""
        result = CommandResult(stdout="out\n", stderr="  err ", returncode=1)

        assert result.output == "err\nout"
        assert CommandResult(stdout="out", stderr="", returncode=1).output == "out"


class TestRunCommand:
    """Tests for run_command."""

    @patch("pipctl.utils.shell.subprocess.run")
    def test_captures_output(self, mock_run: MagicMock) -> None:
        """run_command returns captured stdout, stderr and exit code."""
        mock_run.return_value = MagicMock(stdout="hello", stderr="", returncode=0)

        result = run_command(["echo", "hello"])

        assert result == CommandResult(stdout="hello", stderr="", returncode=0)
        kwargs = mock_run.call_args.kwargs
        assert kwargs["capture_output"] is True
        assert kwargs["env"] is None
        assert kwargs["start_new_session"] is False

    @patch("pipctl.utils.shell.subprocess.run")
    def test_merges_env(self, mock_run: MagicMock, monkeypatch) -> None:
        """Extra environment variables are merged into the current environment."""
        monkeypatch.setenv("PIPCTL_TEST_VAR", "kept")
        mock_run.return_value = MagicMock(stdout="", stderr="", returncode=0)

        run_command(["pip"], env={"PYTHONNOUSERSITE": "1"}, new_session=True)

        kwargs = mock_run.call_args.kwargs
        assert kwargs["env"]["PYTHONNOUSERSITE"] == "1"
        assert kwargs["env"]["PIPCTL_TEST_VAR"] == "kept"
        assert kwargs["start_new_session"] is True


class TestCommandExists:
    """Tests for command_exists."""

    @patch("pipctl.utils.shell.shutil.which", return_value="/usr/bin/python3")
    def test_found(self, mock_which: MagicMock) -> None:
        """Commands on PATH exist."""
        assert command_exists("python3") is True

    @patch("pipctl.utils.shell.shutil.which", return_value=None)
    def test_missing(self, mock_which: MagicMock) -> None:
        """Missing commands do not exist."""
        assert command_exists("no-such-python") is False
