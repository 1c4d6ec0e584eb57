"""Tests for WSL-to-Windows path conversion."""

import subprocess
from unittest.mock import patch, MagicMock

import pytest

from reveal_explorer.path_utils import (
    convert_wsl_to_windows_path,
    get_windows_path,
    normalize_mount_drive,
    run_wslpath,
)


class TestNormalizeMountDrive:
    """Tests for normalize_mount_drive function."""

    def test_adds_missing_colon(self):
        """Drive without colon gets one."""
        assert normalize_mount_drive("Z") == "Z:"

    def test_keeps_existing_colon(self):
        """Drive with colon is unchanged."""
        assert normalize_mount_drive("Z:") == "Z:"

    def test_idempotent(self):
        """Normalizing twice gives the same result."""
        assert normalize_mount_drive(normalize_mount_drive("Y")) == "Y:"


class TestConvertWslToWindowsPath:
    """Tests for convert_wsl_to_windows_path function."""

    def test_mnt_path_converts_to_drive(self):
        """Standard /mnt/<drive>/ path maps to that drive."""
        result = convert_wsl_to_windows_path("/mnt/c/Users/me/file.txt")
        assert result == "C:\\Users\\me\\file.txt"

    def test_drive_letter_is_uppercased(self):
        """Drive letter is always uppercased."""
        assert convert_wsl_to_windows_path("/mnt/d/data") == "D:\\data"
        assert convert_wsl_to_windows_path("/mnt/D/data") == "D:\\data"

    def test_various_drive_letters(self):
        """Multiple drive letters are handled correctly."""
        for letter in ("c", "d", "x", "z"):
            result = convert_wsl_to_windows_path(f"/mnt/{letter}/data")
            assert result == f"{letter.upper()}:\\data"

    def test_mount_drive_ignored_for_mnt_paths(self):
        """The configured mount drive does not affect /mnt/<drive>/ paths."""
        result = convert_wsl_to_windows_path("/mnt/c/Windows", mount_drive="Y:")
        assert result == "C:\\Windows"

    def test_drive_root_only(self):
        """/mnt/c converts to the drive root."""
        assert convert_wsl_to_windows_path("/mnt/c") == "C:\\"

    def test_drive_root_with_trailing_slash(self):
        """/mnt/c/ converts to the drive root."""
        assert convert_wsl_to_windows_path("/mnt/c/") == "C:\\"

    def test_deep_path(self):
        """Deeply nested paths are converted correctly."""
        result = convert_wsl_to_windows_path("/mnt/d/a/b/c/d/e/f/file.py")
        assert result == "D:\\a\\b\\c\\d\\e\\f\\file.py"

    def test_path_with_spaces(self):
        """Paths with spaces are preserved."""
        result = convert_wsl_to_windows_path("/mnt/c/Program Files/Some App/app.exe")
        assert result == "C:\\Program Files\\Some App\\app.exe"

    def test_home_path_uses_default_mount_drive(self):
        """Non-/mnt/ paths go through the default Z: mount drive."""
        result = convert_wsl_to_windows_path("/home/me/project/file.txt")
        assert result == "Z:\\home\\me\\project\\file.txt"

    def test_custom_mount_drive(self):
        """Non-/mnt/ paths use the configured mount drive."""
        result = convert_wsl_to_windows_path("/home/me/file.txt", mount_drive="W:")
        assert result == "W:\\home\\me\\file.txt"

    @pytest.mark.parametrize("drive", ["Z", "Z:"])
    def test_mount_drive_with_or_without_colon(self, drive):
        """Mount drive gets exactly one colon either way."""
        result = convert_wsl_to_windows_path("/home/me/file.txt", mount_drive=drive)
        assert result == "Z:\\home\\me\\file.txt"

    def test_bare_mnt_falls_through(self):
        """/mnt/ without a drive segment uses the generic rule."""
        assert convert_wsl_to_windows_path("/mnt/") == "Z:\\mnt\\"

    def test_mnt_with_long_name_not_matched(self):
        """/mnt/wsl/... is not a drive mount (must be single letter)."""
        result = convert_wsl_to_windows_path("/mnt/wsl/docker/file")
        assert result == "Z:\\mnt\\wsl\\docker\\file"


def _completed(returncode=0, stdout="", stderr=""):
    return MagicMock(returncode=returncode, stdout=stdout, stderr=stderr)


class TestRunWslpath:
    """Tests for the wslpath helper wrapper."""

    @patch("reveal_explorer.path_utils.subprocess.run")
    def test_returns_stripped_output(self, mock_run):
        """Trailing newline from wslpath is stripped."""
        mock_run.return_value = _completed(stdout="C:\\Users\\me\\file.txt\n")
        assert run_wslpath("/mnt/c/Users/me/file.txt") == "C:\\Users\\me\\file.txt"

    @patch("reveal_explorer.path_utils.subprocess.run")
    def test_command_uses_windows_flag(self, mock_run):
        """wslpath is called with -w and the path as separate arguments."""
        mock_run.return_value = _completed(stdout="C:\\x\n")
        run_wslpath("/mnt/c/x")
        args = mock_run.call_args[0][0]
        assert args == ["wslpath", "-w", "/mnt/c/x"]

    @patch("reveal_explorer.path_utils.subprocess.run")
    def test_missing_binary_returns_none(self, mock_run):
        """wslpath not installed counts as unavailable."""
        mock_run.side_effect = FileNotFoundError("wslpath")
        assert run_wslpath("/home/me/file.txt") is None

    @patch("reveal_explorer.path_utils.subprocess.run")
    def test_timeout_returns_none(self, mock_run):
        """A hanging wslpath counts as unavailable."""
        mock_run.side_effect = subprocess.TimeoutExpired(cmd="wslpath", timeout=5)
        assert run_wslpath("/home/me/file.txt") is None

    @patch("reveal_explorer.path_utils.subprocess.run")
    def test_null_byte_returns_none(self, mock_run):
        """Arguments subprocess rejects count as unavailable."""
        mock_run.side_effect = ValueError("embedded null byte")
        assert run_wslpath("/home/me/a\x00b.txt") is None

    def test_null_byte_rejected_by_subprocess(self):
        """A real NUL byte never reaches wslpath and gives None."""
        assert run_wslpath("/home/me/a\x00b.txt") is None

    @patch("reveal_explorer.path_utils.subprocess.run")
    def test_null_byte_falls_back_to_static_rule(self, mock_run):
        """get_windows_path still answers when wslpath cannot be started."""
        mock_run.side_effect = ValueError("embedded null byte")
        assert get_windows_path("/mnt/c/a\x00b.txt") == "C:\\a\x00b.txt"

    @patch("reveal_explorer.path_utils.subprocess.run")
    def test_non_zero_exit_returns_none(self, mock_run):
        """A failing wslpath counts as unavailable."""
        mock_run.return_value = _completed(returncode=1, stderr="wslpath: /bad: No such file")
        assert run_wslpath("/bad") is None

    @patch("reveal_explorer.path_utils.subprocess.run")
    def test_error_message_in_output_returns_none(self, mock_run):
        """Output that is a wslpath error message is not a path."""
        mock_run.return_value = _completed(stdout="wslpath: /bad: Invalid argument\n")
        assert run_wslpath("/bad") is None

    @patch("reveal_explorer.path_utils.subprocess.run")
    def test_empty_output_returns_none(self, mock_run):
        """Blank output is ignored."""
        mock_run.return_value = _completed(stdout="  \n")
        assert run_wslpath("/home/me") is None


class TestGetWindowsPath:
    """Tests for get_windows_path function."""

    @patch("reveal_explorer.path_utils.subprocess.run")
    def test_prefers_wslpath(self, mock_run):
        """wslpath output wins over the static rules."""
        mock_run.return_value = _completed(stdout="\\\\wsl.localhost\\Ubuntu\\home\\me\\file.txt\n")
        result = get_windows_path("/home/me/file.txt")
        assert result == "\\\\wsl.localhost\\Ubuntu\\home\\me\\file.txt"

    @patch("reveal_explorer.path_utils.subprocess.run")
    def test_falls_back_when_wslpath_missing(self, mock_run):
        """Static rules are used when wslpath cannot be run."""
        mock_run.side_effect = FileNotFoundError("wslpath")
        assert get_windows_path("/mnt/c/Users/me/file.txt") == "C:\\Users\\me\\file.txt"
        assert get_windows_path("/home/me/file.txt", mount_drive="Y") == "Y:\\home\\me\\file.txt"

    @patch("reveal_explorer.path_utils.subprocess.run")
    def test_falls_back_on_error_output(self, mock_run):
        """Static rules are used when wslpath prints an error."""
        mock_run.return_value = _completed(stdout="wslpath: oops\n")
        assert get_windows_path("/home/me/file.txt") == "Z:\\home\\me\\file.txt"

    @patch("reveal_explorer.path_utils.subprocess.run")
    def test_wslpath_disabled(self, mock_run):
        """wslpath is never called when disabled."""
        result = get_windows_path("/home/me/file.txt", use_wslpath=False)
        assert result == "Z:\\home\\me\\file.txt"
        mock_run.assert_not_called()
