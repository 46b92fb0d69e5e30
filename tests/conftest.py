import json
from typing import Callable, Dict, List, Optional, Tuple
from urllib.parse import parse_qs, urlparse

import httpx
import pytest

from msauth.authorization import AuthorizationRequest

CLIENT_ID = "00000000-test-client"
REDIRECT_URI = "http://localhost:5000/auth"

MS_TOKEN_BODY = {
    "token_type": "bearer",
    "expires_in": 86400,
    "scope": "XboxLive.signin offline_access",
    "access_token": "ms-access",
    "refresh_token": "ms-refresh",
    "user_id": "abc",
}
MS_REFRESHED_BODY = dict(MS_TOKEN_BODY, access_token="ms-access-refreshed", refresh_token="ms-refresh-2")
XBL_BODY = {
    "IssueInstant": "2024-01-01T00:00:00.0000000Z",
    "NotAfter": "2024-01-15T00:00:00.0000000Z",
    "Token": "xbl-token",
    "DisplayClaims": {"xui": [{"uhs": "uhs123"}]},
}
XSTS_BODY = {
    "IssueInstant": "2024-01-01T00:00:00.0000000Z",
    "NotAfter": "2024-01-02T00:00:00.0000000Z",
    "Token": "xsts-token",
    "DisplayClaims": {"xui": [{"uhs": "uhs123"}]},
}
MC_BODY = {
    "username": "8a7b6c5d",
    "roles": [],
    "access_token": "minecraft-bearer",
    "token_type": "Bearer",
    "expires_in": 86400,
}

Handler = Callable[[httpx.Request], httpx.Response]


class FakeServices:
    """Routes requests of the auth chain to canned responses and records them"""

    def __init__(self):
        self.calls: List[Tuple[str, httpx.Request]] = []
        self.routes: Dict[str, Handler] = {
            "authorization_code": lambda r: httpx.Response(200, json=MS_TOKEN_BODY),
            "refresh_token": lambda r: httpx.Response(200, json=MS_REFRESHED_BODY),
            "xbox_live": lambda r: httpx.Response(200, json=XBL_BODY),
            "xsts": lambda r: httpx.Response(200, json=XSTS_BODY),
            "minecraft": lambda r: httpx.Response(200, json=MC_BODY),
            "profile": lambda r: httpx.Response(200, json={"id": "069a79f4", "name": "Notch", "skins": [], "capes": []}),
        }

    def stage(self, request: httpx.Request) -> str:
        url = request.url
        if url.host == "login.live.com":
            return form(request)["grant_type"]
        if url.host == "user.auth.xboxlive.com":
            return "xbox_live"
        if url.host == "xsts.auth.xboxlive.com":
            return "xsts"
        if url.path.endswith("/login_with_xbox"):
            return "minecraft"
        if url.path.endswith("/minecraft/profile"):
            return "profile"
        raise AssertionError(f"Unexpected request {request.method} {url}")

    def handle(self, request: httpx.Request) -> httpx.Response:
        stage = self.stage(request)
        self.calls.append((stage, request))
        return self.routes[stage](request)

    def stages(self) -> List[str]:
        return [stage for stage, _ in self.calls]

    def request(self, stage: str) -> httpx.Request:
        return next(r for s, r in self.calls if s == stage)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)


class FakeCodeProvider:
    """Stands in for the browser + loopback capture"""

    def __init__(self, code: Optional[str] = "auth-code"):
        self.code = code
        self.requests: List[AuthorizationRequest] = []

    async def obtain_code(self, request: AuthorizationRequest, timeout: float) -> Optional[str]:
        self.requests.append(request)
        return self.code


def form(request: httpx.Request) -> Dict[str, str]:
    return {k: v[0] for k, v in parse_qs(request.content.decode()).items()}


def body(request: httpx.Request) -> dict:
    return json.loads(request.content)


def query(url: str) -> Dict[str, str]:
    return {k: v[0] for k, v in parse_qs(urlparse(url).query).items()}


@pytest.fixture
def services():
    return FakeServices()


@pytest.fixture
def code_provider():
    return FakeCodeProvider()


@pytest.fixture
def cache_file(tmp_path):
    return tmp_path / "auth" / "msa-auth.json"
