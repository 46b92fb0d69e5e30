"""Minecraft services login and profile lookup"""

import logging

import httpx
from pydantic import ValidationError

from settings import MINECRAFT_LOGIN_URL, MINECRAFT_PROFILE_URL
from .exceptions import DoesNotOwnMinecraftError, MinecraftBearerException, MinecraftProfileException
from .models import MinecraftLoginResponse, MinecraftProfile, XboxLiveAuthResponse

logger = logging.getLogger(__name__)


def build_identity_token(user_hash: str, xsts_token: str) -> str:
    """Format the XBL3.0 identity token expected by login_with_xbox"""
    return f"XBL3.0 x={user_hash};{xsts_token}"


async def login_with_xbox(client: httpx.AsyncClient, xbox_live_auth: XboxLiveAuthResponse, xsts_token: str) -> str:
    """Exchange the Xbox identity for a Minecraft bearer access token

    Args:
        client: HTTP client scoped to the current authentication attempt
        xbox_live_auth: Xbox Live response providing the user hash
        xsts_token: XSTS token for the Minecraft relying party

    Returns:
        The Minecraft bearer access token

    Raises:
        MinecraftBearerException: On a non-success status or an unreadable body
    """
    logger.info("Logging in to Minecraft services...")
    response = await client.post(
        MINECRAFT_LOGIN_URL,
        json={
            "identityToken": build_identity_token(xbox_live_auth.user_hash, xsts_token),
            "ensureLegacyEnabled": True,
        },
        headers={"Accept": "application/json"},
    )

    if not response.is_success:
        logger.error(f"Minecraft login failed with status {response.status_code}")
        raise MinecraftBearerException(xsts_token, response.text, response.status_code)

    try:
        login = MinecraftLoginResponse.model_validate_json(response.text)
    except ValidationError as e:
        logger.error(f"Failed to parse Minecraft login response: {e}")
        raise MinecraftBearerException(xsts_token, response.text, response.status_code) from e

    logger.info("Minecraft bearer token obtained")
    return login.access_token


async def fetch_profile(client: httpx.AsyncClient, bearer: str) -> MinecraftProfile:
    """Fetch the Java edition profile owned by a bearer token

    Raises:
        DoesNotOwnMinecraftError: If the account has no profile
        MinecraftProfileException: On any other failure
    """
    response = await client.get(MINECRAFT_PROFILE_URL, headers={"Authorization": f"Bearer {bearer}"})

    if response.status_code == 404:
        raise DoesNotOwnMinecraftError("The account does not own Minecraft", response.text, response.status_code)
    if not response.is_success:
        raise MinecraftProfileException(
            f"Unable to fetch the Minecraft profile (status {response.status_code})",
            response.text,
            response.status_code,
        )

    try:
        return MinecraftProfile.model_validate_json(response.text)
    except ValidationError as e:
        raise MinecraftProfileException("Unreadable Minecraft profile response", response.text, response.status_code) from e
