"""Configuration loader for the Minecraft toolkit

Loads configuration from multiple sources with the following priority:
1. Environment variables (highest priority)
2. .env file
3. Hardcoded defaults (lowest priority)
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from settings import DEFAULT_AUTH_CACHE_FILENAME, DEFAULT_CALLBACK_TIMEOUT, DEFAULT_REQUEST_TIMEOUT

# Set up logger for config loader
logger = logging.getLogger(__name__)

DEFAULT_HOME = "~/.mctoolkit"


class ConfigLoader:
    """Reads MCT_* settings from the environment after loading a .env file"""

    def __init__(self, env_path: Optional[str] = None):
        self.env_path = Path(env_path) if env_path else Path(".env")
        if self.env_path.exists():
            load_dotenv(dotenv_path=self.env_path)
            logger.debug(f"Loaded environment variables from {self.env_path}")
        else:
            logger.debug(f"No .env file at {self.env_path}")

    def get(self, env_var: str, default: Any) -> Any:
        """Return the environment value coerced to the type of the default

        Values that do not parse are logged and replaced by the default.
        Strings starting with '~/' are expanded to the home directory.
        """
        raw = os.getenv(env_var)
        if raw is None:
            return self._expand(default)

        if isinstance(default, bool):
            return raw.strip().lower() in ("true", "1", "yes")
        if isinstance(default, (int, float)):
            try:
                return type(default)(raw)
            except ValueError:
                logger.warning(f"Ignoring {env_var}={raw!r}, expected {type(default).__name__}")
                return default
        return self._expand(raw)

    @staticmethod
    def _expand(value: Any) -> Any:
        if isinstance(value, str) and value.startswith("~/"):
            return str(Path(value).expanduser())
        return value


@dataclass
class Settings:
    """Resolved runtime configuration

    Attributes:
        client_id: Azure application (client) id used for the Microsoft login
        redirect_uri: Loopback redirect registered for the application
        auth_cache_file: File holding the last Microsoft token response
        instances_dir: Root directory of the instance store
        callback_timeout: Seconds to wait for the browser redirect
        request_timeout: Seconds allowed per HTTP request
        log_level: Root logging level name
    """
    client_id: str
    redirect_uri: str
    auth_cache_file: Path
    instances_dir: Path
    callback_timeout: float
    request_timeout: float
    log_level: str


def load_settings(env_path: Optional[str] = None) -> Settings:
    """Build a Settings object from the .env file, environment and defaults

    Args:
        env_path: Optional path to a .env file

    Returns:
        Settings instance; nothing is cached at module level
    """
    config = ConfigLoader(env_path)
    return Settings(
        client_id=config.get("MCT_CLIENT_ID", ""),
        redirect_uri=config.get("MCT_REDIRECT_URI", "http://localhost:5000/auth"),
        auth_cache_file=Path(config.get("MCT_AUTH_CACHE_FILE", f"{DEFAULT_HOME}/{DEFAULT_AUTH_CACHE_FILENAME}")),
        instances_dir=Path(config.get("MCT_INSTANCES_DIR", f"{DEFAULT_HOME}/instances")),
        callback_timeout=config.get("MCT_CALLBACK_TIMEOUT", DEFAULT_CALLBACK_TIMEOUT),
        request_timeout=config.get("MCT_REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT),
        log_level=config.get("MCT_LOG_LEVEL", "info"),
    )
