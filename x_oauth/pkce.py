"""PKCE (Proof Key for Code Exchange) and CSRF state generation"""

import base64
import hashlib
import hmac
import secrets
from typing import Optional

from .models import PkceChallenge

VERIFIER_BYTES = 32
STATE_BYTES = 16


def compute_challenge(code_verifier: str) -> str:
    """Compute the S256 code challenge for a verifier

    Args:
        code_verifier: The PKCE code verifier

    Returns:
        Base64url encoded SHA256 digest without padding
    """
    challenge_bytes = hashlib.sha256(code_verifier.encode('ascii')).digest()
    return base64.urlsafe_b64encode(challenge_bytes).decode('ascii').rstrip('=')


def generate_pkce() -> PkceChallenge:
    """Generate a fresh PKCE verifier and challenge

    Returns:
        PkceChallenge with a 43 character verifier
    """
    code_verifier = base64.urlsafe_b64encode(secrets.token_bytes(VERIFIER_BYTES)).decode('ascii').rstrip('=')
    return PkceChallenge(verifier=code_verifier, challenge=compute_challenge(code_verifier))


def generate_state() -> str:
    """Generate a random CSRF state token (hex encoded)"""
    return secrets.token_hex(STATE_BYTES)


def states_match(received_state: Optional[str], expected_state: Optional[str]) -> bool:
    """Compare the state returned by the provider with the one we issued

    Missing values never match.
    """
    if not received_state or not expected_state:
        return False
    return hmac.compare_digest(received_state.encode('utf-8'), expected_state.encode('utf-8'))
