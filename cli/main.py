"""CLI entry point and argument parsing"""

import argparse
import asyncio
import sys
import traceback
from pathlib import Path

from pydantic import ValidationError
from rich.markup import escape

from config import load_settings
from instances import InstanceError, InstanceModel, InstanceStore, ModLoaderModel, ModLoaders, RAMInfo
from msauth import TokenCache
from utils import create_console, setup_logging
from cli.auth_handlers import run_login
from cli.status_display import show_instances, show_token_status

DEBUG_LOG_FILE = "mctoolkit_debug.log"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Minecraft account and instance toolkit")
    parser.add_argument("--debug", "-d", action="store_true", help="Enable debug logging")
    parser.add_argument("--env-file", default=None, help="Path to a .env file (default: ./.env)")
    parser.add_argument("--client-id", default=None, help="Override the Azure client id (default: from config)")
    parser.add_argument("--instances-dir", default=None, help="Override the instance store root")

    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("login", help="Sign in with a Microsoft account")
    commands.add_parser("status", help="Show the Microsoft token cache state")
    commands.add_parser("logout", help="Delete the Microsoft token cache")

    instances = commands.add_parser("instances", help="Manage instances")
    instance_commands = instances.add_subparsers(dest="instances_command", required=True)
    instance_commands.add_parser("list", help="List instances")

    create = instance_commands.add_parser("create", help="Create an instance")
    create.add_argument("name")
    create.add_argument("--description", default="")
    create.add_argument("--version", default="", help="Minecraft version")
    create.add_argument("--java", default="", help="Path to the java executable")
    create.add_argument("--min-ram", type=int, default=4096, help="Minimum heap in MB")
    create.add_argument("--max-ram", type=int, default=4096, help="Maximum heap in MB")
    create.add_argument("--loader", choices=[l.value for l in ModLoaders], default=ModLoaders.NONE.value)
    create.add_argument("--loader-version", default="")

    return parser


def main(argv=None):
    """Entry point for the CLI"""
    args = build_parser().parse_args(argv)

    settings = load_settings(args.env_file)
    if args.client_id:
        settings.client_id = args.client_id
    if args.instances_dir:
        settings.instances_dir = Path(args.instances_dir)

    setup_logging("debug" if args.debug else settings.log_level, DEBUG_LOG_FILE if args.debug else None)
    console = create_console(debug_enabled=args.debug)

    try:
        if args.command == "login":
            ok = asyncio.run(run_login(settings, console))
            sys.exit(0 if ok else 1)

        elif args.command == "status":
            show_token_status(TokenCache(settings.auth_cache_file), console)

        elif args.command == "logout":
            TokenCache(settings.auth_cache_file).clear()
            console.print("[green]✓ Microsoft token cache cleared[/green]")

        elif args.command == "instances":
            store = InstanceStore(settings.instances_dir)
            if args.instances_command == "list":
                show_instances(store, console)
            elif args.instances_command == "create":
                instance = store.create(InstanceModel(
                    name=args.name,
                    description=args.description,
                    minecraft_version=args.version,
                    java_path=args.java,
                    ram=RAMInfo(minimum_ram_mb=args.min_ram, maximum_ram_mb=args.max_ram),
                    mod_loader=ModLoaderModel(modloader=ModLoaders(args.loader), version=args.loader_version),
                ))
                console.print(f"[green]✓ Created instance '{instance.name}'[/green] in {instance.path}")

    except (InstanceError, ValidationError) as e:
        console.print(f"[red]ERROR:[/red] {escape(str(e))}")
        sys.exit(1)
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        sys.exit(130)
    except Exception as e:
        console.print(f"\n[red]Fatal error:[/red] {escape(str(e))}")
        if args.debug:
            traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
