"""PKCE (Proof Key for Code Exchange) generation"""

import base64
import hashlib
import secrets
import string
from typing import NamedTuple

# RFC 7636 unreserved characters
VERIFIER_ALPHABET = string.ascii_letters + string.digits + "-._~"
VERIFIER_LENGTH = 128


class PKCEPair(NamedTuple):
    """PKCE code verifier and challenge pair"""
    verifier: str
    challenge: str


def generate_code_verifier(length: int = VERIFIER_LENGTH) -> str:
    """Generate a random code verifier

    Args:
        length: Number of characters, between 43 and 128

    Returns:
        Verifier drawn from the unreserved alphabet
    """
    if not 43 <= length <= 128:
        raise ValueError(f"PKCE verifier length must be between 43 and 128, got {length}")
    return "".join(secrets.choice(VERIFIER_ALPHABET) for _ in range(length))


def generate_code_challenge(code_verifier: str) -> str:
    """Create the S256 code challenge for a verifier

    Args:
        code_verifier: The verifier sent later to the token endpoint

    Returns:
        base64url encoded SHA-256 digest without padding
    """
    challenge_bytes = hashlib.sha256(code_verifier.encode('ascii')).digest()
    return base64.urlsafe_b64encode(challenge_bytes).decode('ascii').rstrip('=')


def generate_pkce() -> PKCEPair:
    """Generate a fresh PKCE pair for one authentication attempt

    Returns:
        PKCEPair: Tuple of (verifier, challenge)
    """
    verifier = generate_code_verifier()
    return PKCEPair(verifier=verifier, challenge=generate_code_challenge(verifier))
