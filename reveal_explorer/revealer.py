"""Reveal files in Windows File Explorer from Windows or WSL."""

import logging
import os
import re
import subprocess
import sys
from collections.abc import Mapping
from pathlib import PurePosixPath, PureWindowsPath
from typing import Optional
from urllib.parse import unquote, urlparse

from reveal_explorer.models import HostPlatform, RevealConfig, RevealResult
from reveal_explorer.path_utils import get_windows_path

logger = logging.getLogger(__name__)

EXPLORER_BINARIES = {
    HostPlatform.WSL: "explorer.exe",
    HostPlatform.WINDOWS: "explorer",
}

NO_PATH_MESSAGE = "No file is currently selected or open."
UNSUPPORTED_PLATFORM_MESSAGE = "Reveal in Explorer is only supported on Windows and WSL environments."

# file:///c:/Users/... yields "/c:/Users/..." as URL path
_URI_DRIVE_PATTERN = re.compile(r"^/[a-zA-Z]:")


def detect_host_platform(
    platform: Optional[str] = None, environ: Optional[Mapping[str, str]] = None
) -> HostPlatform:
    """Detect whether we run on native Windows, inside WSL, or elsewhere.

    Args:
        platform: Value to use instead of ``sys.platform``.
        environ: Mapping to use instead of ``os.environ``.
    """
    platform = platform or sys.platform
    environ = os.environ if environ is None else environ

    if platform == "linux" and environ.get("WSL_DISTRO_NAME"):
        return HostPlatform.WSL
    if platform == "win32":
        return HostPlatform.WINDOWS
    return HostPlatform.UNSUPPORTED


def resolve_file_path(
    path: Optional[str] = None, active_document: Optional[str] = None
) -> Optional[str]:
    """Pick the file to reveal: the explicit path, else the host's active document.

    ``file://`` URIs are turned into plain file system paths.
    """
    candidate = path or active_document
    if not candidate:
        return None

    if candidate.startswith("file://"):
        parsed = urlparse(candidate)
        fs_path = unquote(parsed.path)
        if parsed.netloc and parsed.netloc != "localhost":
            # UNC share
            return f"//{parsed.netloc}{fs_path}"
        if _URI_DRIVE_PATTERN.match(fs_path):
            fs_path = fs_path[1:]
        return fs_path

    return candidate


def build_explorer_command(platform: HostPlatform, target_path: str) -> list[str]:
    """Build the argv that opens Explorer with ``target_path`` selected.

    Raises:
        ValueError: If the platform has no Explorer
    """
    try:
        binary = EXPLORER_BINARIES[platform]
    except KeyError:
        raise ValueError(UNSUPPORTED_PLATFORM_MESSAGE) from None
    return [binary, "/select,", target_path]


def format_command(command: list[str]) -> str:
    """Render an Explorer argv as a command line with the target path quoted."""
    binary, flag, target_path = command
    return f'{binary} {flag}"{target_path}"'


def _basename(file_path: str) -> str:
    if "\\" in file_path:
        return PureWindowsPath(file_path).name
    return PurePosixPath(file_path).name


class ExplorerRevealer:
    """Opens Explorer with a file selected."""

    def __init__(self, config: Optional[RevealConfig] = None, platform: Optional[HostPlatform] = None):
        """Initialize revealer.

        Args:
            config: Reveal settings. If None, defaults are used.
            platform: Host platform. If None, it is detected.
        """
        self.config = config or RevealConfig()
        self.platform = platform or detect_host_platform()

    def get_target_path(self, file_path: str) -> str:
        """Translate ``file_path`` into the path Explorer expects on this host."""
        if self.platform == HostPlatform.WSL:
            return get_windows_path(
                file_path,
                mount_drive=self.config.wsl_mount_drive,
                use_wslpath=self.config.use_wslpath,
                wslpath_timeout=self.config.wslpath_timeout_seconds,
            )
        # Explorer only understands backslash separators
        return file_path.replace("/", "\\")

    def reveal(
        self, path: Optional[str] = None, active_document: Optional[str] = None
    ) -> RevealResult:
        """Reveal a file in Explorer.

        Args:
            path: Explicit path to reveal
            active_document: Path of the host's active document, used when
                ``path`` is not given

        Returns:
            RevealResult with success/failure info and the user-facing message
        """
        file_path = resolve_file_path(path, active_document)
        if not file_path:
            return RevealResult(success=False, message=NO_PATH_MESSAGE, platform=self.platform)

        if self.platform == HostPlatform.UNSUPPORTED:
            return RevealResult(
                success=False,
                message=UNSUPPORTED_PLATFORM_MESSAGE,
                source_path=file_path,
                platform=self.platform,
            )

        target_path = self.get_target_path(file_path)
        command = build_explorer_command(self.platform, target_path)
        if self.platform == HostPlatform.WINDOWS:
            # CreateProcess gets the line verbatim, so the path stays quoted
            # even when it has no spaces (Explorer splits on commas)
            command_line = format_command(command)
            args = command_line
        else:
            # WSL interop builds the Windows command line from argv itself
            command_line = subprocess.list2cmdline(command)
            args = command
        logger.info("Executing command: %s", command_line)

        exit_code = None
        try:
            completed = subprocess.run(
                args,
                capture_output=True,
                timeout=self.config.explorer_timeout_seconds,
            )
            exit_code = completed.returncode
            if exit_code != 0:
                # explorer.exe reports non-zero exit codes even when the window opened
                logger.info("%s returned exit code %s (this is normal)", command[0], exit_code)
        except subprocess.TimeoutExpired:
            logger.info(
                "%s still running after %s seconds, assuming it opened",
                command[0],
                self.config.explorer_timeout_seconds,
            )
        except (OSError, ValueError) as e:
            # ValueError: NUL bytes or unencodable characters in the path
            logger.error("Failed to execute explorer command: %s", e)
            return RevealResult(
                success=False,
                message=f"Failed to reveal file in Explorer: {e}",
                source_path=file_path,
                target_path=target_path,
                command=command_line,
                platform=self.platform,
            )

        return RevealResult(
            success=True,
            message=f"Revealed file in Explorer: {_basename(file_path)}",
            source_path=file_path,
            target_path=target_path,
            command=command_line,
            platform=self.platform,
            exit_code=exit_code,
        )
