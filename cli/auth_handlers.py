"""Authentication handlers for CLI"""

import logging

import httpx
from rich.markup import escape

from config import Settings
from msauth import AuthenticationError, DoesNotOwnMinecraftError, MinecraftAuthenticator

logger = logging.getLogger(__name__)


async def run_login(settings: Settings, console) -> bool:
    """
    Run the full Microsoft to Minecraft login and report the profile

    Args:
        settings: Resolved configuration
        console: Rich console for output

    Returns:
        True if a bearer token was obtained
    """
    if not settings.client_id:
        console.print("[red]ERROR:[/red] No client id configured. Set MCT_CLIENT_ID or pass --client-id.")
        return False

    authenticator = MinecraftAuthenticator(
        client_id=settings.client_id,
        redirect_uri=settings.redirect_uri,
        cache_file=settings.auth_cache_file,
        callback_timeout=settings.callback_timeout,
        request_timeout=settings.request_timeout,
    )

    if authenticator.cache.exists():
        console.print("[dim]Found cached Microsoft token, trying silent refresh...[/dim]")
    else:
        console.print("\n[bold]Opening browser for Microsoft login...[/bold]")
        console.print(f"[dim]Waiting up to {settings.callback_timeout:.0f}s for the redirect on {settings.redirect_uri}[/dim]")

    try:
        bearer = await authenticator.get_minecraft_bearer_access_token()
    except AuthenticationError as e:
        logger.debug(f"Authentication failed: {e}")
        console.print(f"[red][ERROR][/red] {type(e).__name__}: {escape(str(e).splitlines()[0])}")
        return False
    except httpx.HTTPError as e:
        console.print(f"[red][ERROR][/red] Network error during authentication: {escape(str(e))}")
        return False

    if bearer is None:
        console.print("[yellow]Login did not produce a token[/yellow]")
        return False

    console.print("[green][OK][/green] Minecraft bearer token obtained")

    try:
        profile = await authenticator.get_profile(bearer)
    except DoesNotOwnMinecraftError:
        console.print("[yellow]This account does not own Minecraft: Java Edition[/yellow]")
        return True
    except (AuthenticationError, httpx.HTTPError) as e:
        console.print(f"[yellow]Could not fetch the profile: {escape(str(e).splitlines()[0])}[/yellow]")
        return True

    console.print(f"Logged in as [bold cyan]{profile.name}[/bold cyan] [dim]({profile.id})[/dim]")
    return True
