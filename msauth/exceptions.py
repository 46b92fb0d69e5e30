"""Exceptions raised by the Microsoft -> Minecraft authentication chain

Each exchange stage raises its own exception type carrying the payload it was
given and the raw body of the failed response, so a failure can be diagnosed
without replaying the request.
"""

from typing import Any, Dict, Mapping, Optional


class AuthenticationError(Exception):
    """Base class for every authentication chain failure"""

    def __init__(self, message: str, response_body: str = "", status_code: Optional[int] = None):
        super().__init__(message)
        self.response_body = response_body
        self.status_code = status_code


class MicrosoftAuthenticationException(AuthenticationError):
    """The Microsoft token endpoint rejected an authorization code"""

    def __init__(self, client_id: str, code: str, response_body: str, status_code: Optional[int] = None):
        super().__init__(
            f"Unable to get the Microsoft access token (client id '{client_id}', status {status_code})\n"
            f"Response Body:\n{response_body}",
            response_body,
            status_code,
        )
        self.client_id = client_id
        self.code = code


class XboxLiveAuthenticationException(AuthenticationError):
    """Xbox Live refused the Microsoft access token"""

    def __init__(self, microsoft_token: Any, response_body: str, status_code: Optional[int] = None):
        super().__init__(
            f"Unable to authenticate with Xbox Live (status {status_code})\nResponse Body:\n{response_body}",
            response_body,
            status_code,
        )
        self.microsoft_token = microsoft_token


# Well-known XErr codes returned by the XSTS endpoint
XSTS_ERRORS: Dict[int, str] = {
    2148916227: "The account is banned from Xbox",
    2148916233: "The account doesn't have an Xbox account",
    2148916235: "The account is from a country where Xbox Live is not available",
    2148916236: "The account needs adult verification on the Xbox page",
    2148916237: "The account needs adult verification on the Xbox page",
    2148916238: "The account is a child and must be added to a Family by an adult",
}


class XSTSException(AuthenticationError):
    """The XSTS endpoint refused to authorize the Xbox Live user token"""

    def __init__(
        self,
        xbox_live_auth: Any,
        response_body: str,
        status_code: Optional[int] = None,
        error_payload: Optional[Mapping[str, Any]] = None,
    ):
        self.xerr: Optional[int] = None
        if error_payload:
            try:
                self.xerr = int(error_payload.get("XErr"))
            except (TypeError, ValueError):
                self.xerr = None
        self.reason = XSTS_ERRORS.get(self.xerr) if self.xerr is not None else None

        message = f"Unable to get the XSTS authentication token from server (status {status_code})"
        if self.reason:
            message += f": {self.reason} (XErr {self.xerr})"
        super().__init__(f"{message}\nResponse Body:\n{response_body}", response_body, status_code)
        self.xbox_live_auth = xbox_live_auth


class MinecraftBearerException(AuthenticationError):
    """Minecraft services refused the XSTS identity token"""

    def __init__(self, xsts_token: str, response_body: str, status_code: Optional[int] = None):
        super().__init__(
            f"Unable to get the Minecraft bearer token (status {status_code})\nResponse Body:\n{response_body}",
            response_body,
            status_code,
        )
        self.xsts_token = xsts_token


class MinecraftProfileException(AuthenticationError):
    """The Minecraft profile could not be fetched with a bearer token"""


class DoesNotOwnMinecraftError(MinecraftProfileException):
    """The account authenticated but has no Minecraft profile"""


class AuthorizationCodeError(AuthenticationError):
    """The browser login did not produce an authorization code"""


class NoAuthorizationCodeError(AuthorizationCodeError):
    """The redirect reached the loopback listener without a usable code"""

    def __init__(self, message: str, query: Optional[Mapping[str, str]] = None):
        super().__init__(message)
        self.query = dict(query or {})
        self.error = self.query.get("error")
        self.error_description = self.query.get("error_description")


class AuthorizationTimeoutError(AuthorizationCodeError):
    """No redirect reached the loopback listener before the timeout"""

    def __init__(self, timeout: float):
        super().__init__(f"No authorization redirect received after {timeout} seconds")
        self.timeout = timeout


class TokenCacheError(Exception):
    """The token cache file exists but cannot be read or parsed"""

    def __init__(self, path: Any, reason: str):
        super().__init__(f"Unable to read token cache {path}: {reason}")
        self.path = path
        self.reason = reason
