"""Microsoft -> Xbox Live -> XSTS -> Minecraft authentication package"""

import asyncio
from pathlib import Path
from typing import Optional, Union

import httpx

from settings import DEFAULT_CALLBACK_TIMEOUT, DEFAULT_REQUEST_TIMEOUT
from .authorization import AuthorizationCodeProvider, AuthorizationRequest, build_authorize_url
from .callback_server import BrowserLoopbackCodeProvider, OAuthCallbackServer
from .exceptions import (
    AuthenticationError,
    AuthorizationCodeError,
    AuthorizationTimeoutError,
    DoesNotOwnMinecraftError,
    MicrosoftAuthenticationException,
    MinecraftBearerException,
    MinecraftProfileException,
    NoAuthorizationCodeError,
    TokenCacheError,
    XboxLiveAuthenticationException,
    XSTSException,
)
from .minecraft_services import fetch_profile, login_with_xbox
from .models import MicrosoftToken, MinecraftProfile, XboxLiveAuthResponse
from .pkce import PKCEPair, generate_code_challenge, generate_code_verifier, generate_pkce
from .storage import TokenCache
from .token_manager import acquire_microsoft_token
from .xbox_live import authenticate_xbox_live
from .xsts import authorize_xsts


class MinecraftAuthenticator:
    """Runs the Microsoft to Minecraft token chain

    This class orchestrates the authentication flow:
    - Microsoft token (cached refresh, or interactive PKCE login)
    - Xbox Live user token
    - XSTS token for the Minecraft relying party
    - Minecraft bearer access token

    Every stage runs sequentially on one HTTP client that lives for the
    duration of a single call.
    """

    def __init__(
        self,
        client_id: str,
        redirect_uri: str,
        cache_file: Union[str, Path],
        code_provider: Optional[AuthorizationCodeProvider] = None,
        callback_timeout: float = DEFAULT_CALLBACK_TIMEOUT,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.client_id = client_id
        self.redirect_uri = redirect_uri
        self.cache = TokenCache(cache_file)
        self.code_provider = code_provider or BrowserLoopbackCodeProvider()
        self.callback_timeout = callback_timeout
        self.request_timeout = request_timeout
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.request_timeout, transport=self.transport)

    async def get_minecraft_bearer_access_token(self) -> Optional[str]:
        """Authenticate and return a Minecraft bearer access token

        Returns:
            The bearer token, or None if the Microsoft step produced no token

        Raises:
            AuthenticationError: Subclass naming the stage that failed
        """
        async with self._client() as client:
            microsoft_token = await acquire_microsoft_token(
                client,
                self.cache,
                self.client_id,
                self.redirect_uri,
                self.code_provider,
                self.callback_timeout,
            )
            if microsoft_token is None:
                return None

            xbox_live_auth = await authenticate_xbox_live(client, microsoft_token)
            xsts_token = await authorize_xsts(client, xbox_live_auth)
            return await login_with_xbox(client, xbox_live_auth, xsts_token)

    def get_minecraft_bearer_access_token_sync(self) -> Optional[str]:
        """Blocking variant for callers without an event loop"""
        return asyncio.run(self.get_minecraft_bearer_access_token())

    async def get_profile(self, bearer: str) -> MinecraftProfile:
        """Fetch the Minecraft profile owned by a bearer token"""
        async with self._client() as client:
            return await fetch_profile(client, bearer)

    def logout(self):
        """Forget the cached Microsoft token"""
        self.cache.clear()


__all__ = [
    "MinecraftAuthenticator",
    # Stages
    "acquire_microsoft_token",
    "authenticate_xbox_live",
    "authorize_xsts",
    "login_with_xbox",
    "fetch_profile",
    # Code capture
    "AuthorizationCodeProvider",
    "AuthorizationRequest",
    "BrowserLoopbackCodeProvider",
    "OAuthCallbackServer",
    "build_authorize_url",
    # PKCE
    "PKCEPair",
    "generate_pkce",
    "generate_code_verifier",
    "generate_code_challenge",
    # Storage and models
    "TokenCache",
    "MicrosoftToken",
    "XboxLiveAuthResponse",
    "MinecraftProfile",
    # Errors
    "AuthenticationError",
    "AuthorizationCodeError",
    "AuthorizationTimeoutError",
    "NoAuthorizationCodeError",
    "MicrosoftAuthenticationException",
    "XboxLiveAuthenticationException",
    "XSTSException",
    "MinecraftBearerException",
    "MinecraftProfileException",
    "DoesNotOwnMinecraftError",
    "TokenCacheError",
]
