"""Data models for the Reveal in Explorer MCP Server."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from reveal_explorer.path_utils import DEFAULT_MOUNT_DRIVE, normalize_mount_drive


class HostPlatform(str, Enum):
    """Environment the server runs in, as far as revealing files is concerned."""

    WINDOWS = "windows"
    WSL = "wsl"
    UNSUPPORTED = "unsupported"


class RevealConfig(BaseModel):
    """Reveal settings."""

    wsl_mount_drive: str = Field(
        default=DEFAULT_MOUNT_DRIVE,
        description="Windows drive the WSL filesystem is mapped to (used for non-/mnt/ paths)",
    )
    use_wslpath: bool = Field(
        default=True, description="Ask wslpath to translate paths before the static rules"
    )
    wslpath_timeout_seconds: float = Field(default=5.0, gt=0)
    explorer_timeout_seconds: float = Field(default=30.0, gt=0)

    @field_validator("wsl_mount_drive", mode="before")
    @classmethod
    def ensure_trailing_colon(cls, v: str) -> str:
        """Normalize "Z" to "Z:"."""
        return normalize_mount_drive(str(v).strip())


class RevealResult(BaseModel):
    """Result of a reveal request."""

    success: bool = Field(description="Whether Explorer was launched")
    message: str = Field(description="Human-readable message for the user")
    source_path: Optional[str] = Field(default=None, description="Path as given by the host")
    target_path: Optional[str] = Field(default=None, description="Path handed to Explorer")
    command: Optional[str] = Field(default=None, description="Command line that was executed")
    platform: HostPlatform = Field(description="Detected host platform")
    exit_code: Optional[int] = Field(
        default=None, description="Explorer exit code (informational only)"
    )
