"""Microsoft token acquisition: silent refresh first, interactive login second"""

import logging
from typing import Optional

import httpx

from .authorization import AuthorizationCodeProvider, create_authorization_request
from .exceptions import TokenCacheError
from .models import MicrosoftToken
from .pkce import generate_pkce
from .storage import TokenCache
from .token_exchange import exchange_code
from .token_refresh import refresh_microsoft_token

logger = logging.getLogger(__name__)


async def acquire_microsoft_token(
    client: httpx.AsyncClient,
    cache: TokenCache,
    client_id: str,
    redirect_uri: str,
    code_provider: AuthorizationCodeProvider,
    callback_timeout: float,
) -> Optional[MicrosoftToken]:
    """Get a Microsoft token, refreshing the cached one when possible

    Args:
        client: HTTP client scoped to the current authentication attempt
        cache: Token cache read before and written after each exchange
        client_id: Azure application id
        redirect_uri: Loopback redirect URI
        code_provider: Capability turning an authorize URL into a code
        callback_timeout: Seconds the code provider may wait for the redirect

    Returns:
        The Microsoft token, or None if the provider produced no code

    Raises:
        MicrosoftAuthenticationException: If the code exchange is rejected
        AuthorizationCodeError: If the browser step fails
    """
    pkce = generate_pkce()

    if cache.exists():
        try:
            token = await refresh_microsoft_token(client, cache, client_id, redirect_uri)
            if token is not None:
                return token
        except (TokenCacheError, httpx.HTTPError) as e:
            logger.warning(f"Silent refresh failed, falling back to interactive login: {e}")

    logger.info("Starting interactive Microsoft login")
    request = create_authorization_request(client_id, redirect_uri, pkce)
    code = await code_provider.obtain_code(request, callback_timeout)
    if not code:
        logger.error("No authorization code obtained from the browser login")
        return None

    return await exchange_code(client, cache, client_id, redirect_uri, code, pkce.verifier)
