"""Microsoft OAuth authorization URL construction and code capture seam"""

import secrets
from typing import NamedTuple, Optional, Protocol
from urllib.parse import urlencode

from settings import MS_AUTHORIZE_URL, MS_COBRAND_ID, MS_PROMPT, MS_SCOPE
from .pkce import PKCEPair


class AuthorizationRequest(NamedTuple):
    """Everything the browser step needs for one login attempt"""
    url: str
    state: str
    redirect_uri: str


class AuthorizationCodeProvider(Protocol):
    """Obtains an authorization code for a constructed authorize URL

    Implementations may return None when no code can be produced; the chain
    then yields no token instead of raising.
    """

    async def obtain_code(self, request: AuthorizationRequest, timeout: float) -> Optional[str]:
        ...


def create_state() -> str:
    """Generate random state parameter for CSRF protection

    Returns:
        str: 32-byte random state string
    """
    return secrets.token_urlsafe(32)


def build_authorize_url(client_id: str, redirect_uri: str, code_challenge: str, state: str) -> str:
    """Construct the Microsoft OAuth authorize URL with PKCE

    Args:
        client_id: Azure application id
        redirect_uri: Loopback redirect URI registered for the application
        code_challenge: S256 PKCE challenge
        state: Opaque value echoed back on the redirect

    Returns:
        Full authorization URL
    """
    params = {
        "client_id": client_id,
        "response_type": "code",
        "redirect_uri": redirect_uri,
        "scope": MS_SCOPE,
        "state": state,
        "cobrandid": MS_COBRAND_ID,
        "prompt": MS_PROMPT,
        "code_challenge": code_challenge,
        "code_challenge_method": "S256",
    }
    return f"{MS_AUTHORIZE_URL}?{urlencode(params)}"


def create_authorization_request(client_id: str, redirect_uri: str, pkce: PKCEPair) -> AuthorizationRequest:
    """Build the authorize URL and its state for one attempt"""
    state = create_state()
    url = build_authorize_url(client_id, redirect_uri, pkce.challenge, state)
    return AuthorizationRequest(url=url, state=state, redirect_uri=redirect_uri)
