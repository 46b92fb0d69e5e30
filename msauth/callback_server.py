"""
Local loopback server capturing the Microsoft OAuth redirect
"""
import asyncio
import html
import logging
import webbrowser
from typing import Callable, Dict, Optional
from urllib.parse import urlparse

from aiohttp import web

from .authorization import AuthorizationRequest
from .exceptions import AuthorizationTimeoutError, NoAuthorizationCodeError

logger = logging.getLogger(__name__)

SUCCESS_PAGE = """
<html>
    <body>
        <h1>Authentication Successful!</h1>
        <p>You can now close this window and return to the launcher.</p>
        <script>
            setTimeout(function() {
                window.close();
            }, 2000);
        </script>
    </body>
</html>
"""

FAILURE_PAGE = """
<html>
    <body>
        <h1>Authentication Failed</h1>
        <p>{reason}</p>
        <p>You can close this window.</p>
    </body>
</html>
"""


class OAuthCallbackServer:
    """Single-shot HTTP listener bound to the redirect URI

    The first request on the redirect path resolves the wait, whether it
    carries a code or not.
    """

    def __init__(self, redirect_uri: str, expected_state: Optional[str] = None):
        parsed = urlparse(redirect_uri)
        self.host = parsed.hostname or "localhost"
        self.port = parsed.port or 80
        self.path = parsed.path.rstrip("/") or "/"
        self.expected_state = expected_state

        self.code: Optional[str] = None
        self.error: Optional[NoAuthorizationCodeError] = None
        self.app = web.Application()
        self.runner: Optional[web.AppRunner] = None
        self._event = asyncio.Event()

        # Register callback route, with and without a trailing slash
        self.app.router.add_get(self.path, self._handle_callback)
        if self.path != "/":
            self.app.router.add_get(self.path + "/", self._handle_callback)

    def _fail(self, reason: str, query: Dict[str, str]) -> web.Response:
        self.error = NoAuthorizationCodeError(reason, query)
        self._event.set()
        return web.Response(text=FAILURE_PAGE.format(reason=html.escape(reason)), content_type="text/html", status=400)

    async def _handle_callback(self, request: web.Request) -> web.Response:
        """Handle OAuth callback request"""
        if self._event.is_set():
            return web.Response(text="Authorization already processed", status=409)

        query = dict(request.query)
        error = query.get("error")
        code = query.get("code")

        if error:
            logger.error(f"OAuth error on redirect: {error} {query.get('error_description', '')}")
            return self._fail(f"Error: {error}", query)

        if not code:
            return self._fail("The redirect did not carry an authorization code", query)

        # Validate state (CSRF protection)
        if self.expected_state is not None and query.get("state") != self.expected_state:
            logger.error("State mismatch on OAuth redirect")
            return self._fail("Invalid state parameter", query)

        self.code = code
        self._event.set()
        return web.Response(text=SUCCESS_PAGE, content_type="text/html")

    async def start(self) -> None:
        """Start the callback server"""
        self.runner = web.AppRunner(self.app)
        await self.runner.setup()

        site = web.TCPSite(self.runner, host=self.host, port=self.port)
        try:
            await site.start()
        except OSError as e:
            logger.error(f"Cannot listen on {self.host}:{self.port}: {e}")
            await self.stop()
            raise
        logger.info(f"OAuth callback server listening on {self.host}:{self.port}{self.path}")

    async def wait_for_callback(self, timeout: float) -> str:
        """
        Wait for the OAuth redirect.

        Args:
            timeout: Maximum time to wait in seconds

        Returns:
            The authorization code

        Raises:
            AuthorizationTimeoutError: If no redirect arrives in time
            NoAuthorizationCodeError: If the redirect carries no usable code
        """
        try:
            await asyncio.wait_for(self._event.wait(), timeout=timeout)
        except asyncio.TimeoutError:
            logger.error(f"OAuth callback timeout after {timeout} seconds")
            raise AuthorizationTimeoutError(timeout) from None

        if self.error is not None:
            raise self.error
        return self.code

    async def stop(self) -> None:
        """Stop the callback server"""
        if self.runner:
            await self.runner.cleanup()
            self.runner = None


class BrowserLoopbackCodeProvider:
    """Opens the system browser and captures the code on the loopback redirect"""

    def __init__(self, open_browser: Callable[[str], bool] = webbrowser.open):
        self.open_browser = open_browser

    async def obtain_code(self, request: AuthorizationRequest, timeout: float) -> Optional[str]:
        server = OAuthCallbackServer(request.redirect_uri, request.state)
        try:
            await server.start()
            if not self.open_browser(request.url):
                logger.warning(f"Could not open browser automatically, open this URL manually: {request.url}")
            return await server.wait_for_callback(timeout)
        finally:
            await server.stop()
