"""Status display functionality for CLI"""

from datetime import datetime

from rich.table import Table

from instances import InstanceStore
from msauth import TokenCache, TokenCacheError


def show_token_status(cache: TokenCache, console):
    """
    Display the state of the Microsoft token cache

    Args:
        cache: TokenCache instance
        console: Rich console for output
    """
    table = Table(title="Microsoft Token Cache")
    table.add_column("Property", style="cyan")
    table.add_column("Value")

    table.add_row("Token File", str(cache.path))

    if not cache.exists():
        table.add_row("Has Tokens", "No")
        console.print(table)
        return

    try:
        token = cache.load()
    except TokenCacheError as e:
        table.add_row("Has Tokens", "[red]Unreadable[/red]")
        table.add_row("Error", e.reason)
        console.print(table)
        return

    modified = datetime.fromtimestamp(cache.path.stat().st_mtime)
    table.add_row("Has Tokens", "Yes")
    table.add_row("Refreshable", "Yes" if token.refresh_token else "No")
    table.add_row("Scope", token.scope or "-")
    table.add_row("Last Written", modified.isoformat(timespec="seconds"))
    if token.expires_in is not None:
        table.add_row("Access Token Lifetime", f"{token.expires_in // 60}m")

    console.print(table)


def show_instances(store: InstanceStore, console):
    """
    Display every instance of a store

    Args:
        store: InstanceStore instance
        console: Rich console for output
    """
    if not len(store):
        console.print(f"[yellow]No instances in {store.root}[/yellow]")
        return

    table = Table(title=f"Instances in {store.root}")
    table.add_column("Name", style="cyan")
    table.add_column("Version")
    table.add_column("Loader")
    table.add_column("RAM (MB)")
    table.add_column("Mods", justify="right")
    table.add_column("Last Modified")
    table.add_column("Id", style="dim")

    for instance in sorted(store, key=lambda i: i.name.casefold()):
        loader = instance.mod_loader.modloader.value
        if instance.mod_loader.version:
            loader += f" {instance.mod_loader.version}"
        table.add_row(
            instance.name,
            instance.minecraft_version or "-",
            loader,
            f"{instance.ram.minimum_ram_mb}-{instance.ram.maximum_ram_mb}",
            str(len(instance.mods)),
            instance.last_modified.isoformat(timespec="seconds"),
            str(instance.id),
        )

    console.print(table)
