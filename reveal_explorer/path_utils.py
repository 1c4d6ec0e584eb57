"""Path utilities for WSL-to-Windows path conversion."""

import logging
import re
import subprocess
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_MOUNT_DRIVE = "Z:"

# Matches WSL mount paths: /mnt/<single drive letter>[/...]
_WSL_PATH_PATTERN = re.compile(r"^/mnt/([a-zA-Z])(?:/(.*))?$")

# Prefix wslpath uses for its own error messages
_WSLPATH_ERROR_MARKER = "wslpath:"


def normalize_mount_drive(mount_drive: str) -> str:
    """Return the mount drive with exactly one trailing colon ("Z" -> "Z:")."""
    return mount_drive if mount_drive.endswith(":") else f"{mount_drive}:"


def convert_wsl_to_windows_path(path_str: str, mount_drive: str = DEFAULT_MOUNT_DRIVE) -> str:
    """Convert a WSL-style path to the Windows path Explorer expects.

    Paths under an auto-mounted Windows drive
    (e.g. ``/mnt/c/Users/me/file.txt``) map to that drive
    (``C:\\Users\\me\\file.txt``).  Every other path is assumed to be reachable
    through ``mount_drive`` (e.g. ``/home/me/file.txt`` -> ``Z:\\home\\me\\file.txt``).

    Args:
        path_str: The Linux-style path as seen inside WSL.
        mount_drive: Drive letter the WSL filesystem is mapped to on Windows.

    Returns:
        The converted Windows path string.
    """
    match = _WSL_PATH_PATTERN.match(path_str)
    if match:
        drive_letter = match.group(1).upper()
        rest = match.group(2) or ""
        windows_rest = rest.replace("/", "\\")
        return f"{drive_letter}:\\{windows_rest}"

    windows_path = path_str.replace("/", "\\")
    return f"{normalize_mount_drive(mount_drive)}{windows_path}"


def run_wslpath(path_str: str, timeout: float = 5.0) -> Optional[str]:
    """Translate a path with the ``wslpath`` helper.

    Args:
        path_str: The Linux-style path to translate.
        timeout: Seconds to wait for the helper.

    Returns:
        The Windows path reported by wslpath, or None when the helper is
        missing, fails, or prints an error instead of a path.
    """
    try:
        result = subprocess.run(
            ["wslpath", "-w", path_str],
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=timeout,
        )
    except (OSError, ValueError, subprocess.SubprocessError) as e:
        logger.debug("wslpath unavailable for %s: %s", path_str, e)
        return None

    if result.returncode != 0:
        logger.debug("wslpath exited with %s: %s", result.returncode, result.stderr.strip())
        return None

    output = result.stdout.strip()
    if not output or _WSLPATH_ERROR_MARKER in output:
        return None
    return output


def get_windows_path(
    path_str: str,
    mount_drive: str = DEFAULT_MOUNT_DRIVE,
    use_wslpath: bool = True,
    wslpath_timeout: float = 5.0,
) -> str:
    """Resolve the Windows path for a WSL path.

    wslpath is asked first since it knows the real mount topology; the static
    rules of :func:`convert_wsl_to_windows_path` are the fallback.
    """
    if use_wslpath:
        translated = run_wslpath(path_str, timeout=wslpath_timeout)
        if translated:
            return translated

    return convert_wsl_to_windows_path(path_str, mount_drive)
