"""Authentication handlers for CLI"""

import logging
import webbrowser
from urllib.parse import urlparse

from errors import StateMismatchError, TokenExchangeError, XPublisherError
from settings import CALLBACK_PORT
from utils.storage import TokenStorage
from x_oauth import AuthSession
from x_oauth.callback_server import OAuthCallbackServer
from x_oauth.constants import OAUTH_CALLBACK_PATH

logger = logging.getLogger(__name__)


def callback_address(redirect_uri: str):
    """Host, port and path the local callback server must listen on"""
    parsed = urlparse(redirect_uri or "")
    return (
        parsed.hostname or "localhost",
        parsed.port or CALLBACK_PORT,
        parsed.path or OAUTH_CALLBACK_PATH,
    )


async def login(
    session: AuthSession,
    storage: TokenStorage,
    console,
    open_browser: bool = True,
    timeout: int = 300
) -> bool:
    """
    Run the browser login flow and store the resulting tokens

    Args:
        session: AuthSession instance
        storage: TokenStorage instance
        console: Rich console for output
        open_browser: Open the authorization URL automatically
        timeout: Seconds to wait for the redirect

    Returns:
        True if tokens were stored
    """
    try:
        auth_request = session.initiate()
    except XPublisherError as e:
        console.print(f"[red][ERROR][/red] {e.message}")
        console.print("Set X_CLIENT_ID (and X_REDIRECT_URI if needed) in your environment or .env file")
        return False

    host, port, path = callback_address(session.config.redirect_uri)
    callback_server = OAuthCallbackServer(host=host, port=port, path=path)
    await callback_server.start()

    try:
        console.print("\n[bold]Step 1:[/bold] Opening browser for authentication...")
        if open_browser and webbrowser.open(auth_request.authorization_url):
            console.print("[green][OK][/green] Browser opened successfully")
        else:
            console.print("Please open this URL in your browser:")
            console.print(auth_request.authorization_url, soft_wrap=True)

        console.print("\n[bold]Step 2:[/bold] Log in to X and authorize the application")
        console.print(f"[dim]Waiting for the redirect to {session.config.redirect_uri}...[/dim]")
        callback = await callback_server.wait_for_callback(timeout=timeout)
    finally:
        await callback_server.stop()

    if callback is None:
        console.print(f"[red][ERROR][/red] No authorization received within {timeout} seconds")
        return False

    if callback.error or not callback.code:
        console.print("[red][ERROR][/red] Authentication failed")
        logger.debug(f"Authorization denied or incomplete: {callback.error}")
        return False

    console.print("\n[bold]Step 3:[/bold] Exchanging code for tokens...")
    try:
        result = await session.exchange(
            code=callback.code,
            verifier=auth_request.verifier,
            redirect_uri=session.config.redirect_uri,
            received_state=callback.state,
            expected_state=auth_request.state,
        )
    except (StateMismatchError, TokenExchangeError) as e:
        console.print("[red][ERROR][/red] Authentication failed")
        logger.debug(f"Login rejected: {e.kind.value}: {e.message}")
        return False
    except XPublisherError as e:
        console.print(f"[red][ERROR][/red] {e.message}")
        return False

    storage.save_tokens(result.tokens, result.identity)
    console.print("[green][OK][/green] Authentication successful!")
    if result.identity:
        console.print(f"Logged in as [bold]@{result.identity.handle}[/bold] ({result.identity.display_name})")
    else:
        console.print(f"[yellow]Logged in, but the account lookup failed: {result.identity_error.message}[/yellow]")
    if not result.tokens.refresh_token:
        console.print("[yellow]No refresh token issued; you will need to log in again when the token expires[/yellow]")
    return True


async def refresh(session: AuthSession, storage: TokenStorage, console) -> bool:
    """
    Rotate the stored tokens

    Returns:
        True if new tokens were stored
    """
    refresh_token = storage.get_refresh_token()
    if not refresh_token:
        console.print("[red]No refresh token available - please login first[/red]")
        return False

    console.print("Refreshing access token...")
    try:
        tokens = await session.refresh(refresh_token)
    except XPublisherError as e:
        console.print(f"[red][ERROR][/red] {e.message}")
        return False

    storage.save_tokens(tokens)
    console.print("[green][OK][/green] Token refreshed successfully")
    return True


async def whoami(session: AuthSession, storage: TokenStorage, console) -> bool:
    """Show the account that owns the stored access token"""
    access_token = storage.get_access_token()
    if not access_token:
        console.print("[red]Not logged in - run 'login' first[/red]")
        return False

    try:
        identity = await session.whoami(access_token)
    except XPublisherError as e:
        console.print(f"[red][ERROR][/red] {e.message}")
        return False

    # Keep the stored identity current
    storage.save_tokens(storage.get_token_pair(), identity)
    verified = " [blue](verified)[/blue]" if identity.verified else ""
    console.print(f"@{identity.handle} - {identity.display_name}{verified}")
    console.print(f"[dim]id: {identity.id}[/dim]")
    return True


async def logout(session: AuthSession, storage: TokenStorage, console) -> bool:
    """Revoke the access token (best effort) and clear local storage"""
    access_token = storage.get_access_token()
    if access_token:
        await session.revoke(access_token)
    storage.clear_tokens()
    console.print("[green]Tokens cleared successfully[/green]")
    return True
