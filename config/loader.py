"""Configuration loader for X Post Publisher

Values are looked up in this order:
1. Environment variables (highest priority)
2. .env file
3. Defaults passed by the caller (lowest priority)

Each getter parses the raw string into one type. A value that fails to
parse is logged and replaced by the default, so a typo in .env never stops
the CLI or server from starting.
"""

import logging
import os
from pathlib import Path
from typing import List, Optional
from dotenv import load_dotenv

logger = logging.getLogger(__name__)


class ConfigLoader:
    """Typed access to environment configuration"""

    def __init__(self, env_path: Optional[str] = None):
        """
        Args:
            env_path: Optional path to .env file.
                     Defaults to '.env' in the current directory.
        """
        self.env_path = Path(env_path) if env_path else Path(".env")
        self._load_env_file()

    def _load_env_file(self):
        if self.env_path.exists():
            # Real environment variables win over the file
            load_dotenv(dotenv_path=self.env_path, override=False)
            logger.debug(f"Loaded environment variables from {self.env_path}")
        else:
            logger.debug(f"No .env file at {self.env_path}")

    @staticmethod
    def _raw(env_var: str) -> Optional[str]:
        value = os.getenv(env_var)
        if value is None or not value.strip():
            return None
        return value.strip()

    def get_str(self, env_var: str, default: Optional[str] = None) -> Optional[str]:
        value = self._raw(env_var)
        return default if value is None else value

    def get_secret(self, env_var: str) -> Optional[str]:
        """Like get_str, but only ever logs whether the value is set"""
        value = self._raw(env_var)
        logger.debug(f"{env_var} is {'set' if value else 'not set'}")
        return value

    def get_int(self, env_var: str, default: int) -> int:
        value = self._raw(env_var)
        if value is None:
            return default
        try:
            return int(value)
        except ValueError:
            logger.warning(f"Failed to parse {env_var}={value} as int, using default: {default}")
            return default

    def get_float(self, env_var: str, default: float) -> float:
        value = self._raw(env_var)
        if value is None:
            return default
        try:
            return float(value)
        except ValueError:
            logger.warning(f"Failed to parse {env_var}={value} as float, using default: {default}")
            return default

    def get_list(self, env_var: str, default: Optional[List[str]] = None) -> List[str]:
        """Comma separated list; empty items are dropped"""
        value = self._raw(env_var)
        if value is None:
            return list(default or [])
        return [item.strip() for item in value.split(",") if item.strip()]

    def get_path(self, env_var: str, default: str) -> str:
        """Filesystem path with ``~`` expanded"""
        return str(Path(self.get_str(env_var, default)).expanduser())


_config_loader = None

def get_config_loader() -> ConfigLoader:
    """Get or create the global ConfigLoader instance"""
    global _config_loader
    if _config_loader is None:
        _config_loader = ConfigLoader()
    return _config_loader
