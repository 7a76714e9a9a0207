"""
Local OAuth callback server for the CLI login flow
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from aiohttp import web

from .constants import OAUTH_CALLBACK_PATH, OAUTH_CALLBACK_PORT

logger = logging.getLogger(__name__)

SUCCESS_PAGE = """
<html>
    <body>
        <h1>Authorization received</h1>
        <p>You can now close this window and return to the terminal.</p>
    </body>
</html>
"""

FAILURE_PAGE = """
<html>
    <body>
        <h1>Authentication Failed</h1>
        <p>You can close this window.</p>
    </body>
</html>
"""


@dataclass
class CallbackResult:
    """Query parameters X sent back to the redirect URI"""
    code: Optional[str] = None
    state: Optional[str] = None
    error: Optional[str] = None
    error_description: Optional[str] = None


class OAuthCallbackServer:
    """Local HTTP server that captures a single OAuth redirect

    State validation is left to AuthSession.exchange, so the page shown to
    the user never reveals whether the state or the code was wrong.
    """

    def __init__(self, host: str = "localhost", port: int = OAUTH_CALLBACK_PORT,
                 path: str = OAUTH_CALLBACK_PATH):
        self.host = host
        self.port = port
        self.result: Optional[CallbackResult] = None
        self.app = web.Application()
        self.runner: Optional[web.AppRunner] = None
        self._event = asyncio.Event()

        self.app.router.add_get(path, self._handle_callback)

    async def _handle_callback(self, request: web.Request) -> web.Response:
        """Handle OAuth callback request"""
        error = request.query.get("error")
        self.result = CallbackResult(
            code=request.query.get("code"),
            state=request.query.get("state"),
            error=error,
            error_description=request.query.get("error_description"),
        )
        self._event.set()

        if error or not self.result.code or not self.result.state:
            logger.warning(f"OAuth callback without a usable code (error={error})")
            return web.Response(text=FAILURE_PAGE, content_type="text/html", status=400)

        return web.Response(text=SUCCESS_PAGE, content_type="text/html")

    async def start(self) -> None:
        """Start the callback server"""
        self.runner = web.AppRunner(self.app)
        await self.runner.setup()

        site = web.TCPSite(self.runner, host=self.host, port=self.port)
        await site.start()
        logger.info(f"OAuth callback server listening on port {self.port}")

    async def wait_for_callback(self, timeout: int = 300) -> Optional[CallbackResult]:
        """
        Wait for OAuth callback.

        Args:
            timeout: Maximum time to wait in seconds (default 5 minutes)

        Returns:
            CallbackResult, or None on timeout
        """
        try:
            await asyncio.wait_for(self._event.wait(), timeout=timeout)
            return self.result
        except asyncio.TimeoutError:
            logger.warning(f"OAuth callback timeout after {timeout} seconds")
            return None

    async def stop(self) -> None:
        """Stop the callback server"""
        if self.runner:
            await self.runner.cleanup()
            self.runner = None
