"""
Blockman CLI

Command-line interface for the Blockman contract call service.

Commands:
  serve      - Run the HTTP API
  functions  - List functions of a local ABI file
  call       - Run a single read-only call
  info       - Show configuration
"""

from __future__ import annotations

import os
import sys

import click
from dotenv import find_dotenv, load_dotenv

from . import __version__
from .config import (
    DEFAULT_CLEANUP_HOURS,
    DEFAULT_PORT,
    Settings,
)
from .errors import ConfigError


# ============ Banner ============


def _print_banner() -> None:
    border = click.style("  ◆ ═══════════════════════════════════════ ◆", fg="cyan")
    click.echo()
    click.echo(border)
    click.echo()
    click.echo(
        click.style("        B L O C K M A N", fg="bright_white", bold=True)
        + click.style(f"        v{__version__}", dim=True)
    )
    click.secho("        ─── Read-only Contract Calls ───", fg="cyan")
    click.echo()
    click.echo(border)
    click.echo()


# ============ Main CLI Group ============


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="blockman")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Blockman: upload contract ABIs and call read-only functions."""
    # Subcommand envvars are read after this callback, so .env values apply to them
    load_dotenv(find_dotenv(usecwd=True))
    if ctx.invoked_subcommand is None:
        _print_banner()
        click.echo(ctx.get_help())


# ============ Top-level Commands ============

from .commands.serve import serve
from .commands.functions import functions
from .commands.call import call

cli.add_command(serve)
cli.add_command(functions)
cli.add_command(call)


# ============ Info ============


@cli.command()
def info() -> None:
    """Show the effective configuration."""
    _print_banner()

    click.secho("  Configuration ──────────────────────────", fg="cyan")
    click.echo()

    try:
        settings = Settings.from_env(dict(os.environ))
    except ConfigError:
        click.echo(
            click.style("  Node URL:    ", dim=True)
            + click.style("not set", fg="yellow")
            + click.style("  (export ETH_NODE_URL)", dim=True)
        )
        click.echo(click.style("  Port:        ", dim=True) + str(DEFAULT_PORT))
        click.echo(click.style("  Cleanup:     ", dim=True) + f"enabled ({DEFAULT_CLEANUP_HOURS}h)")
        click.echo()
        return

    click.echo(
        click.style("  Node URL:    ", dim=True)
        + click.style(settings.eth_node_url, fg="bright_white")
    )
    click.echo(click.style("  Listen:      ", dim=True) + f"{settings.host}:{settings.port}")
    if settings.cleanup_enabled:
        cleanup_text = click.style(f"enabled ({settings.cleanup_hours:g}h)", fg="green")
    else:
        cleanup_text = click.style("disabled", fg="yellow")
    click.echo(click.style("  Cleanup:     ", dim=True) + cleanup_text)
    click.echo(click.style("  RPC timeout: ", dim=True) + f"{settings.rpc_timeout:g}s")
    click.echo()


# ============ Entry Points ============


def main() -> None:
    """Blockman CLI entry point."""
    # Ensure UTF-8 output on Windows (for Unicode box-drawing / symbols)
    if sys.platform == "win32":
        try:
            sys.stdout.reconfigure(encoding="utf-8")  # type: ignore[union-attr]
            sys.stderr.reconfigure(encoding="utf-8")  # type: ignore[union-attr]
        except (AttributeError, OSError):
            pass
    cli()


if __name__ == "__main__":
    main()
