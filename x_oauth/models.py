"""Data models for X OAuth authentication"""

from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Any, Dict, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from errors import IdentityLookupError


class AuthPhase(str, Enum):
    """Phases of a single login attempt (and of a refresh sub-flow)"""
    IDLE = "idle"
    INITIATED = "initiated"
    EXCHANGING = "exchanging"
    REFRESH_PENDING = "refresh_pending"
    AUTHENTICATED = "authenticated"
    FAILED = "failed"


@dataclass(frozen=True)
class PkceChallenge:
    """PKCE (Proof Key for Code Exchange) values for one authorization attempt

    Attributes:
        verifier: Random secret, only ever sent in the code exchange request
        challenge: SHA256 of the verifier, sent in the authorization URL
        method: Always S256
    """
    verifier: str = field(repr=False)
    challenge: str
    method: str = "S256"


@dataclass(frozen=True)
class AuthorizationRequest:
    """Everything the caller must hold until the provider redirects back

    Attributes:
        authorization_url: URL to redirect the user to
        state: CSRF token to compare with the redirect's state parameter
        verifier: PKCE verifier for the code exchange (never log this)
    """
    authorization_url: str
    state: str
    verifier: str = field(repr=False)


def _parse_expires_in(value: Any) -> Optional[int]:
    """Advisory lifetime in seconds, or None if the provider sent something unusable"""
    if isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class TokenPair:
    """OAuth tokens issued by X

    Attributes:
        access_token: Bearer token for API calls
        refresh_token: Token for obtaining a new access token, if issued
        expires_in: Advisory lifetime in seconds; never enforced locally
        scope: Scopes granted by the provider
    """
    access_token: str = field(repr=False)
    refresh_token: Optional[str] = field(default=None, repr=False)
    expires_in: Optional[int] = None
    scope: Optional[str] = None

    @classmethod
    def from_token_response(cls, payload: Dict[str, Any],
                            previous_refresh_token: Optional[str] = None) -> "TokenPair":
        """Build a TokenPair from a token endpoint response

        Args:
            payload: Parsed JSON body from the token endpoint
            previous_refresh_token: Kept when the response omits a new one

        Raises:
            KeyError: If the response has no access_token
        """
        return cls(
            access_token=payload["access_token"],
            refresh_token=payload.get("refresh_token") or previous_refresh_token,
            expires_in=_parse_expires_in(payload.get("expires_in")),
            scope=payload.get("scope"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TokenPair":
        return cls(
            access_token=data["access_token"],
            refresh_token=data.get("refresh_token"),
            expires_in=data.get("expires_in"),
            scope=data.get("scope"),
        )


@dataclass(frozen=True)
class Identity:
    """Authenticated X account"""
    id: str
    handle: str
    display_name: str
    avatar_url: Optional[str] = None
    verified: bool = False

    @classmethod
    def from_user_payload(cls, user: Dict[str, Any]) -> "Identity":
        """Build an Identity from the ``data`` object of /2/users/me"""
        return cls(
            id=str(user["id"]),
            handle=user["username"],
            display_name=user.get("name") or user["username"],
            avatar_url=user.get("profile_image_url"),
            verified=bool(user.get("verified", False)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Identity":
        return cls(
            id=data["id"],
            handle=data["handle"],
            display_name=data.get("display_name") or data["handle"],
            avatar_url=data.get("avatar_url"),
            verified=bool(data.get("verified", False)),
        )


@dataclass(frozen=True)
class ExchangeResult:
    """Outcome of a successful code exchange

    The token pair is always valid here. ``identity`` is None when the
    follow-up identity lookup failed, in which case ``identity_error`` says why.
    """
    tokens: TokenPair
    identity: Optional[Identity] = None
    identity_error: Optional["IdentityLookupError"] = None
