"""CLI entry point and argument parsing"""

import sys
import argparse
from typing import List, Optional

from rich.console import Console

from customer_auth import AuthorizationURLBuilder, ConfigurationError, CustomerAuthConfig
from cli.status_display import show_config_status


console = Console()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Storefront Customer Auth CLI")
    subparsers = parser.add_subparsers(dest="command")

    serve = subparsers.add_parser("serve", help="Run the auth service (default)")
    serve.add_argument("--debug", "-d", action="store_true", help="Enable debug logging")
    serve.add_argument("--bind", "-b", default=None, help="Override bind address (default: from config)")
    serve.add_argument("--port", "-p", type=int, default=None, help="Override port (default: from config)")

    subparsers.add_parser("check-config", help="Validate the identity provider configuration")
    subparsers.add_parser("login-url", help="Print an authorization URL for provider setup checks")
    return parser


def check_config() -> int:
    """Render the configuration table; exit status 1 when anything is missing"""
    config = CustomerAuthConfig.from_settings()
    all_set = show_config_status(config, console)
    if not all_set:
        console.print(f"[red]Missing:[/red] {', '.join(config.missing_fields())}")
        return 1

    try:
        config.validate()
    except ConfigurationError as e:
        console.print(f"[red]Invalid configuration:[/red] {e}")
        return 1

    console.print("[green]✓ Configuration is complete[/green]")
    return 0


def print_login_url() -> int:
    try:
        builder = AuthorizationURLBuilder(CustomerAuthConfig.from_settings().validate())
    except ConfigurationError as e:
        console.print(f"[red]ERROR:[/red] {e}")
        return 1

    console.print(builder.build().url, soft_wrap=True)
    return 0


def serve(debug: bool = False, bind_address: Optional[str] = None, port: Optional[int] = None) -> int:
    from storefront import StorefrontServer

    try:
        server = StorefrontServer(debug=debug, bind_address=bind_address, port=port)
    except ConfigurationError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        console.print("Run [bold]python cli.py check-config[/bold] for details")
        return 1

    server.run()
    return 0


def main(argv: Optional[List[str]] = None):
    """Entry point for the CLI"""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        if args.command == "check-config":
            exit_code = check_config()
        elif args.command == "login-url":
            exit_code = print_login_url()
        else:
            exit_code = serve(
                debug=getattr(args, "debug", False),
                bind_address=getattr(args, "bind", None),
                port=getattr(args, "port", None),
            )
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        exit_code = 0

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
