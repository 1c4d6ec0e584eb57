"""Configuration file loading and management."""

import logging
import os
import re
import sys
from pathlib import Path
from typing import Any, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from reveal_explorer.models import RevealConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = "reveal_config.toml"
CONFIG_ENV_VAR = "REVEAL_CONFIG"
PACKAGE_CONFIG_DIR = Path(__file__).parent.parent


def find_config_file(base_dir: Optional[Path] = None) -> tuple[Path, str]:
    """Find the config file in standard locations.

    Args:
        base_dir: Directory to search instead of the current working directory.

    Returns:
        Tuple of (config path, source) where source is "env", "cwd", "package"
        or "default". The path may not exist for the "default" source.

    Searches:
        1. REVEAL_CONFIG environment variable
        2. Current working directory (or base_dir)
        3. Directory containing the package
    """
    env_path = os.getenv(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path), "env"

    search_dir = base_dir or Path.cwd()
    cwd_config = search_dir / DEFAULT_CONFIG_NAME
    if cwd_config.exists():
        return cwd_config, "cwd"

    package_config = PACKAGE_CONFIG_DIR / DEFAULT_CONFIG_NAME
    if package_config.exists():
        return package_config, "package"

    return cwd_config, "default"


class ConfigLoader:
    """Loads reveal settings from a TOML file."""

    def __init__(self, config_path: Optional[Path] = None):
        """Initialize config loader.

        Args:
            config_path: Path to config file. If None, searches standard locations
                and falls back to built-in defaults when nothing is found.
        """
        if config_path is not None:
            self.config_path = config_path
            self.source = "explicit"
        else:
            self.config_path, self.source = find_config_file()
        self.config: Optional[RevealConfig] = None

    def load(self) -> RevealConfig:
        """Load and validate the configuration file.

        Returns:
            Loaded RevealConfig object

        Raises:
            FileNotFoundError: If an explicitly requested config file is missing
            ValueError: If config file is invalid
        """
        if not self.config_path.exists():
            if self.source in ("explicit", "env"):
                raise FileNotFoundError(f"Configuration file not found: {self.config_path}")
            logger.debug("No %s found, using defaults", DEFAULT_CONFIG_NAME)
            self.config = RevealConfig()
            return self.config

        try:
            with open(self.config_path, "rb") as f:
                raw_config = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Invalid TOML syntax in config file: {e}") from e

        expanded_config = self._expand_env_vars(raw_config)

        try:
            self.config = RevealConfig(**expanded_config.get("reveal", {}))
        except Exception as e:
            raise ValueError(f"Invalid configuration structure: {e}") from e

        logger.debug("Loaded configuration from %s", self.config_path)
        return self.config

    def _expand_env_vars(self, config: dict[str, Any]) -> dict[str, Any]:
        """Recursively expand ${VAR_NAME} references in config values."""

        def expand_value(value: Any) -> Any:
            if isinstance(value, str):
                pattern = r"\$\{([^}]+)\}"

                def replace_var(match: re.Match) -> str:
                    return os.getenv(match.group(1), match.group(0))

                return re.sub(pattern, replace_var, value)

            elif isinstance(value, dict):
                return {k: expand_value(v) for k, v in value.items()}

            elif isinstance(value, list):
                return [expand_value(item) for item in value]

            return value

        return expand_value(config)
