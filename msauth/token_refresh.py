"""Microsoft refresh token exchange"""

import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from settings import MS_TOKEN_URL
from .models import MicrosoftToken
from .storage import TokenCache

logger = logging.getLogger(__name__)


async def refresh_microsoft_token(
    client: httpx.AsyncClient,
    cache: TokenCache,
    client_id: str,
    redirect_uri: str,
) -> Optional[MicrosoftToken]:
    """Refresh the cached Microsoft token

    A rejected refresh is not an error: the caller falls back to the
    interactive login.

    Args:
        client: HTTP client scoped to the current authentication attempt
        cache: Token cache holding the previous response
        client_id: Azure application id
        redirect_uri: Redirect URI registered for the application

    Returns:
        The new token, or None if there is nothing to refresh or the endpoint refused

    Raises:
        TokenCacheError: If the cache file cannot be read
    """
    cached = cache.load()
    if cached is None:
        return None

    if not cached.refresh_token:
        logger.warning("Cached Microsoft token has no refresh token")
        return None

    logger.info("Attempting to refresh Microsoft token...")
    response = await client.post(
        MS_TOKEN_URL,
        data={
            "client_id": client_id,
            "refresh_token": cached.refresh_token,
            "grant_type": "refresh_token",
            "redirect_uri": redirect_uri,
        },
        headers={"Content-Type": "application/x-www-form-urlencoded"},
    )

    if not response.is_success:
        logger.warning(f"Token refresh failed with status {response.status_code}")
        return None

    try:
        token = MicrosoftToken.model_validate_json(response.text)
    except ValidationError as e:
        logger.warning(f"Token refresh returned an unreadable body: {e}")
        return None

    try:
        cache.store(response.text)
    except OSError as e:
        logger.warning(f"Refreshed Microsoft token could not be cached: {e}")
    logger.info("Successfully refreshed Microsoft token")
    return token
