"""On-disk cache for the Microsoft token response"""

import json
import logging
import os
import platform
from pathlib import Path
from typing import Optional, Union

from pydantic import ValidationError

from .exceptions import TokenCacheError
from .models import MicrosoftToken

logger = logging.getLogger(__name__)


class TokenCache:
    """Stores the raw body of the last successful Microsoft token exchange"""

    def __init__(self, token_file: Union[str, Path]):
        self.token_path = Path(token_file)

    def _ensure_secure_directory(self):
        """Create parent directory with secure permissions"""
        parent_dir = self.token_path.parent
        if not parent_dir.exists():
            parent_dir.mkdir(parents=True, exist_ok=True)
            # Set directory permissions to 700 on Unix-like systems
            if platform.system() != "Windows":
                os.chmod(parent_dir, 0o700)

    def exists(self) -> bool:
        """Check whether a cache file is present"""
        return self.token_path.is_file()

    def store(self, raw_body: str):
        """Overwrite the cache file with a token response body

        Args:
            raw_body: JSON body exactly as returned by the token endpoint
        """
        self._ensure_secure_directory()
        self.token_path.write_text(raw_body, encoding="utf-8")

        # Set file permissions to 600 on Unix-like systems
        if platform.system() != "Windows":
            os.chmod(self.token_path, 0o600)

        logger.debug(f"Saved Microsoft token to {self.token_path}")

    def load(self) -> Optional[MicrosoftToken]:
        """Load the cached token

        Returns:
            The cached token, or None if there is no cache file

        Raises:
            TokenCacheError: If the file exists but cannot be read or parsed
        """
        if not self.exists():
            logger.debug("No Microsoft token cache found")
            return None

        try:
            data = json.loads(self.token_path.read_text(encoding="utf-8"))
            return MicrosoftToken.model_validate(data)
        except (json.JSONDecodeError, UnicodeDecodeError, OSError, ValidationError) as e:
            raise TokenCacheError(self.token_path, str(e)) from e

    def clear(self):
        """Remove the cache file"""
        if self.token_path.exists():
            self.token_path.unlink()
            logger.info("Cleared Microsoft token cache")

    @property
    def path(self) -> Path:
        """Get the token file path"""
        return self.token_path
