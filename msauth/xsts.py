"""XSTS authorization for the Minecraft relying party"""

import json
import logging
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError

from settings import XSTS_AUTHORIZE_URL, XSTS_RELYING_PARTY, XSTS_SANDBOX_ID
from .exceptions import XSTSException
from .models import XboxLiveAuthResponse, XSTSResponse

logger = logging.getLogger(__name__)


def _error_payload(body: str) -> Optional[Dict[str, Any]]:
    # XSTS errors come back as {"Identity": "0", "XErr": 2148916233, ...}
    try:
        payload = json.loads(body)
    except json.JSONDecodeError:
        return None
    return payload if isinstance(payload, dict) else None


async def authorize_xsts(client: httpx.AsyncClient, xbox_live_auth: XboxLiveAuthResponse) -> str:
    """Exchange the Xbox Live user token for an XSTS token

    Returns:
        The XSTS token string

    Raises:
        XSTSException: On a non-success status or an unreadable body
    """
    logger.info("Requesting XSTS token...")
    response = await client.post(
        XSTS_AUTHORIZE_URL,
        json={
            "Properties": {
                "SandboxId": XSTS_SANDBOX_ID,
                "UserTokens": [xbox_live_auth.token],
            },
            "RelyingParty": XSTS_RELYING_PARTY,
            "TokenType": "JWT",
        },
        headers={"Accept": "application/json"},
    )

    if not response.is_success:
        error = XSTSException(xbox_live_auth, response.text, response.status_code, _error_payload(response.text))
        logger.error(f"XSTS authorization failed with status {response.status_code} (XErr {error.xerr})")
        raise error

    try:
        xsts = XSTSResponse.model_validate_json(response.text)
    except ValidationError as e:
        logger.error(f"Failed to parse XSTS response: {e}")
        raise XSTSException(xbox_live_auth, response.text, response.status_code) from e

    if xsts.user_hash != xbox_live_auth.user_hash:
        logger.warning("XSTS user hash differs from the Xbox Live one")
    return xsts.token
