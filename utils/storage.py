import json
import logging
import os
import platform
import time
from datetime import datetime
from pathlib import Path
from typing import Optional, Dict, Any

from x_oauth.models import Identity, TokenPair

logger = logging.getLogger(__name__)


class TokenStorage:
    """Client-held token storage with restrictive file permissions

    Used by the CLI only; the server never stores tokens. ``expires_in`` is
    kept for display. Whether a token still works is decided by X, not by
    the local clock.
    """

    def __init__(self, token_file: Optional[str] = None):
        if token_file is None:
            from settings import TOKEN_FILE
            token_file = TOKEN_FILE
        self.token_path = Path(token_file)
        self._ensure_secure_directory()

    def _ensure_secure_directory(self):
        """Create parent directory with secure permissions"""
        parent_dir = self.token_path.parent
        if not parent_dir.exists():
            parent_dir.mkdir(parents=True, exist_ok=True)
            # Set directory permissions to 700 on Unix-like systems
            if platform.system() != "Windows":
                os.chmod(parent_dir, 0o700)

    def save_tokens(self, tokens: TokenPair, identity: Optional[Identity] = None):
        """Save a token pair, and the identity it belongs to if known

        Saving without an identity keeps the previously stored one, so a
        refresh does not forget who is logged in.
        """
        if identity is None:
            identity = self.get_identity()

        data = {
            "tokens": tokens.to_dict(),
            "identity": identity.to_dict() if identity else None,
            "saved_at": int(time.time()),
        }

        self.token_path.write_text(json.dumps(data, indent=2))

        # Set file permissions to 600 on Unix-like systems
        if platform.system() != "Windows":
            os.chmod(self.token_path, 0o600)
        logger.debug(f"Tokens saved to {self.token_path}")

    def load_tokens(self) -> Optional[Dict[str, Any]]:
        """Load the raw stored document"""
        if not self.token_path.exists():
            return None

        try:
            data = json.loads(self.token_path.read_text())
        except (json.JSONDecodeError, IOError) as e:
            logger.warning(f"Ignoring unreadable token file {self.token_path}: {e}")
            return None

        if not isinstance(data, dict) or not isinstance(data.get("tokens"), dict):
            return None
        return data

    def get_token_pair(self) -> Optional[TokenPair]:
        data = self.load_tokens()
        if not data or not data["tokens"].get("access_token"):
            return None
        return TokenPair.from_dict(data["tokens"])

    def get_identity(self) -> Optional[Identity]:
        data = self.load_tokens()
        if not data or not data.get("identity"):
            return None
        try:
            return Identity.from_dict(data["identity"])
        except KeyError:
            return None

    def get_access_token(self) -> Optional[str]:
        tokens = self.get_token_pair()
        return tokens.access_token if tokens else None

    def get_refresh_token(self) -> Optional[str]:
        tokens = self.get_token_pair()
        return tokens.refresh_token if tokens else None

    def clear_tokens(self):
        """Remove stored tokens"""
        if self.token_path.exists():
            self.token_path.unlink()

    def get_status(self) -> Dict[str, Any]:
        """Get token status without exposing secrets"""
        data = self.load_tokens()
        tokens = self.get_token_pair()
        if not tokens:
            return {
                "has_tokens": False,
                "has_refresh_token": False,
                "saved_at": None,
                "expires_in": None,
                "scope": None,
                "identity": None,
            }

        saved_at = data.get("saved_at")
        identity = self.get_identity()
        return {
            "has_tokens": True,
            "has_refresh_token": bool(tokens.refresh_token),
            "saved_at": datetime.fromtimestamp(saved_at).isoformat() if saved_at else None,
            "expires_in": tokens.expires_in,
            "scope": tokens.scope,
            "identity": identity.to_dict() if identity else None,
        }

    @property
    def token_file(self) -> Path:
        """Get the token file path"""
        return self.token_path
