"""Microsoft authorization code exchange"""

import logging

import httpx
from pydantic import ValidationError

from settings import MS_TOKEN_URL
from .exceptions import MicrosoftAuthenticationException
from .models import MicrosoftToken
from .storage import TokenCache

logger = logging.getLogger(__name__)


async def exchange_code(
    client: httpx.AsyncClient,
    cache: TokenCache,
    client_id: str,
    redirect_uri: str,
    code: str,
    code_verifier: str,
) -> MicrosoftToken:
    """Exchange an authorization code for a Microsoft token

    Args:
        client: HTTP client scoped to the current authentication attempt
        cache: Token cache overwritten with the response on success
        client_id: Azure application id
        redirect_uri: Redirect URI used in the authorize request
        code: Authorization code captured from the redirect
        code_verifier: PKCE verifier matching the challenge sent earlier

    Returns:
        The parsed Microsoft token

    Raises:
        MicrosoftAuthenticationException: If the endpoint rejects the code
    """
    logger.info(f"Exchanging authorization code for tokens at {MS_TOKEN_URL}")
    response = await client.post(
        MS_TOKEN_URL,
        data={
            "client_id": client_id,
            "code": code,
            "code_verifier": code_verifier,
            "grant_type": "authorization_code",
            "redirect_uri": redirect_uri,
        },
        headers={"Content-Type": "application/x-www-form-urlencoded"},
    )

    logger.debug(f"Token exchange response status: {response.status_code}")
    if not response.is_success:
        logger.error(f"Token exchange failed with status {response.status_code}")
        raise MicrosoftAuthenticationException(client_id, code, response.text, response.status_code)

    try:
        token = MicrosoftToken.model_validate_json(response.text)
    except ValidationError as e:
        logger.error(f"Failed to parse token exchange response: {e}")
        raise MicrosoftAuthenticationException(client_id, code, response.text, response.status_code) from e

    cache.store(response.text)
    logger.info("Successfully exchanged authorization code for tokens")
    return token
