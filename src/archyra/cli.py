"""
Command line interface for Archyra.

``archyra init`` registers the MCP server with a supported AI coding assistant,
``archyra serve`` runs the server on stdio, and ``archyra list`` prints the
bundled component catalogue.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any, Mapping, Optional

import typer
from typer.core import TyperGroup

from . import __version__
from .client_setup import (
    ClientProfile,
    ConfigWriteError,
    UnknownClientError,
    client_profiles,
    get_client_profile,
    init_client,
)
from .tooling.config import load_settings
from .tooling.handlers import dispatch_tool
from .tooling.registry import CatalogError


class ArchyraGroup(TyperGroup):
    """Top-level group that reports unrecognised commands as usage errors."""

    def resolve_command(self, ctx, args):  # type: ignore[no-untyped-def]
        if args and not args[0].startswith("-") and self.get_command(ctx, args[0]) is None:
            ctx.fail(f"Unknown command: {args[0]}. Run `archyra --help` for usage information.")
        return super().resolve_command(ctx, args)


def _supported_clients_line() -> str:
    entries = ", ".join(f"{key} ({profile.display_name})" for key, profile in client_profiles().items())
    return f"Supported clients: {entries}."


app = typer.Typer(
    cls=ArchyraGroup,
    help="Archyra MCP server and configuration tool for AI animation components.",
    epilog=_supported_clients_line(),
    context_settings={"help_option_names": ["-h", "--help"]},
    add_completion=False,
)


@app.callback(invoke_without_command=True)
def _root(ctx: typer.Context) -> None:
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def _banner() -> None:
    typer.secho(f"Archyra v{__version__}", fg=typer.colors.MAGENTA, bold=True)
    typer.secho("MCP Server Configuration", dim=True)
    typer.echo("")


def _select_client(profiles: Mapping[str, ClientProfile]) -> str:
    keys = list(profiles)
    typer.echo("Select your AI coding tool:\n")
    for index, key in enumerate(keys, start=1):
        profile = profiles[key]
        typer.echo(f"  {index}) {profile.display_name} ({profile.description})")
    typer.echo("")

    while True:
        answer = typer.prompt(f"Enter choice (1-{len(keys)})", default="", show_default=False)
        try:
            choice = int(answer.strip())
        except ValueError:
            choice = 0
        if 1 <= choice <= len(keys):
            return keys[choice - 1]
        typer.secho("Invalid selection. Please try again.", fg=typer.colors.RED)


def _confirm_overwrite(profile: ClientProfile, path: Path) -> bool:
    server_name = load_settings().server_name
    typer.secho(f"{server_name} is already configured in {path}.", fg=typer.colors.YELLOW)
    return typer.confirm("Overwrite existing configuration?", default=False)


@app.command()
def init(
    client: Optional[str] = typer.Option(
        None,
        "--client",
        "-c",
        help="Client to configure (claude, cursor, windsurf). Prompts when omitted.",
    ),
) -> None:
    """Configure MCP for an AI coding tool."""

    _banner()
    profiles = client_profiles()
    key = client if client is not None else _select_client(profiles)

    try:
        profile = get_client_profile(key, profiles)
    except UnknownClientError as exc:
        typer.secho(f"Unknown client: {exc.key}", fg=typer.colors.RED)
        typer.echo(f"Supported clients: {', '.join(exc.available)}")
        raise typer.Exit(code=2) from exc

    typer.echo(f"Configuring MCP for {profile.display_name}...")
    try:
        result = init_client(profile, confirm_overwrite=_confirm_overwrite)
    except ConfigWriteError as exc:
        typer.secho(str(exc), fg=typer.colors.RED)
        raise typer.Exit(code=1) from exc

    if result.status == "skipped":
        typer.echo("Skipping configuration.")
        return

    action = "Created new config at" if result.created else "Updated existing config at"
    typer.echo(f"{action}: {result.path}")
    typer.echo("")
    server_name = load_settings().server_name
    typer.secho(f"Successfully configured {server_name} for {profile.display_name}!", fg=typer.colors.GREEN)
    typer.echo("")
    typer.echo("Next steps:")
    typer.echo(f"  1. Restart {profile.display_name} to load the MCP server")
    typer.echo("  2. Ask your AI assistant:")
    typer.echo('     "List all animation components"')
    typer.echo('     "Add LoadingDots to my project"')
    typer.echo('     "Show me the AiCreating2 source code"')


def _configure_logging(level_name: str) -> None:
    level = logging.getLevelName(level_name.upper())
    if not isinstance(level, int):
        level = logging.WARNING
    logging.basicConfig(
        stream=sys.stderr,
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command()
def serve() -> None:
    """Start the MCP server on stdio."""

    settings = load_settings()
    _configure_logging(settings.log_level)
    try:
        from .server import run_stdio_server
    except ImportError as exc:
        typer.secho("MCP server not found. Please reinstall the package.", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc

    try:
        run_stdio_server(settings)
    except CatalogError as exc:
        typer.secho(str(exc), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc


@app.command("list")
def list_components(
    category: str = typer.Option("all", "--category", help="Category filter, or 'all'."),
    json_output: bool = typer.Option(False, "--json", help="Emit the list_components JSON payload."),
) -> None:
    """List components in the bundled catalogue."""

    try:
        response = dispatch_tool("list_components", {"category": category})
    except CatalogError as exc:
        typer.secho(str(exc), fg=typer.colors.RED)
        raise typer.Exit(code=1) from exc

    if response.is_error:
        typer.secho(response.message or "Invalid arguments.", fg=typer.colors.RED)
        raise typer.Exit(code=2)

    if json_output:
        typer.echo(response.to_text())
        return

    payload: Mapping[str, Any] = response.payload  # type: ignore[assignment]
    typer.echo(f"{payload['total']} component(s):")
    for item in payload["components"]:
        formats = "react, vanilla" if item["formats"]["vanilla"] else "react"
        typer.echo(f"- {item['name']} ({item['id']}) [{item['category']}] {formats}")


def main() -> None:
    """Entry point for python -m execution."""
    app()


if __name__ == "__main__":
    main()
