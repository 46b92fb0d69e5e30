"""Response schemas for the endpoints of the authentication chain"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class MicrosoftToken(BaseModel):
    """Token response from the Microsoft identity endpoint

    The cache file stores the raw response body, so unknown keys are kept.
    """
    model_config = ConfigDict(extra="allow")

    access_token: str
    refresh_token: Optional[str] = None
    token_type: str = "bearer"
    expires_in: Optional[int] = None
    scope: Optional[str] = None
    user_id: Optional[str] = None


class XuiClaim(BaseModel):
    """Single entry of the xui display claims"""
    model_config = ConfigDict(extra="allow")

    uhs: str


class DisplayClaims(BaseModel):
    """Display claims attached to an Xbox token"""
    xui: List[XuiClaim] = Field(min_length=1)


class XboxLiveAuthResponse(BaseModel):
    """Xbox Live user token response"""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    token: str = Field(alias="Token")
    display_claims: DisplayClaims = Field(alias="DisplayClaims")
    issue_instant: Optional[str] = Field(default=None, alias="IssueInstant")
    not_after: Optional[str] = Field(default=None, alias="NotAfter")

    @property
    def user_hash(self) -> str:
        """UHS of the first xui claim"""
        return self.display_claims.xui[0].uhs


class XSTSResponse(XboxLiveAuthResponse):
    """XSTS token response, same shape as the Xbox Live one"""


class MinecraftLoginResponse(BaseModel):
    """Response of the login_with_xbox endpoint"""
    model_config = ConfigDict(extra="allow")

    access_token: str
    username: Optional[str] = None
    token_type: Optional[str] = None
    expires_in: Optional[int] = None


class MinecraftProfile(BaseModel):
    """Java edition profile of the authenticated player"""
    model_config = ConfigDict(extra="allow")

    id: str
    name: str
    skins: List[Dict[str, Any]] = Field(default_factory=list)
    capes: List[Dict[str, Any]] = Field(default_factory=list)
