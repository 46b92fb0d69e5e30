"""Xbox Live user authentication"""

import logging

import httpx
from pydantic import ValidationError

from settings import XBOX_LIVE_AUTH_URL, XBOX_LIVE_RELYING_PARTY, XBOX_LIVE_SITE_NAME
from .exceptions import XboxLiveAuthenticationException
from .models import MicrosoftToken, XboxLiveAuthResponse

logger = logging.getLogger(__name__)


async def authenticate_xbox_live(client: httpx.AsyncClient, microsoft_token: MicrosoftToken) -> XboxLiveAuthResponse:
    """Exchange a Microsoft access token for an Xbox Live user token

    Raises:
        XboxLiveAuthenticationException: On a non-success status or an unreadable body
    """
    logger.info("Authenticating with Xbox Live...")
    response = await client.post(
        XBOX_LIVE_AUTH_URL,
        json={
            "Properties": {
                "AuthMethod": "RPS",
                "SiteName": XBOX_LIVE_SITE_NAME,
                "RpsTicket": f"d={microsoft_token.access_token}",
            },
            "RelyingParty": XBOX_LIVE_RELYING_PARTY,
            "TokenType": "JWT",
        },
        headers={"Accept": "application/json"},
    )

    if not response.is_success:
        logger.error(f"Xbox Live authentication failed with status {response.status_code}")
        raise XboxLiveAuthenticationException(microsoft_token, response.text, response.status_code)

    try:
        return XboxLiveAuthResponse.model_validate_json(response.text)
    except ValidationError as e:
        logger.error(f"Failed to parse Xbox Live response: {e}")
        raise XboxLiveAuthenticationException(microsoft_token, response.text, response.status_code) from e
