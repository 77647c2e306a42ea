"""
Serve - Run the Blockman HTTP API.

Probes the node first so a wrong URL fails fast instead of on the
first call.
"""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import replace
from typing import Optional

import click
import uvicorn

from ..chain.rpc import EthClient
from ..config import Settings
from ..errors import ConfigError, RpcError
from ..server import create_app

logger = logging.getLogger(__name__)


@click.command()
@click.option("--node-url", envvar="ETH_NODE_URL", default=None, help="Ethereum JSON-RPC endpoint")
@click.option("--host", default=None, help="Bind address (default: HOST or 0.0.0.0)")
@click.option("--port", default=None, type=int, help="Bind port (default: PORT or 8080)")
@click.option(
    "--cleanup/--no-cleanup",
    default=None,
    help="Evict ABIs that have not been used for a while",
)
@click.option("--cleanup-hours", default=None, type=float, help="Idle hours before eviction")
@click.option(
    "--log-level",
    default="info",
    type=click.Choice(["critical", "error", "warning", "info", "debug"]),
    help="Log level for the server",
)
def serve(
    node_url: Optional[str],
    host: Optional[str],
    port: Optional[int],
    cleanup: Optional[bool],
    cleanup_hours: Optional[float],
    log_level: str,
) -> None:
    """Start the HTTP API."""
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    environ = dict(os.environ)
    if node_url:
        environ["ETH_NODE_URL"] = node_url
    try:
        settings = Settings.from_env(environ)
    except ConfigError as exc:
        click.secho(f"ERROR: {exc}", fg="red")
        sys.exit(1)

    overrides = {}
    if host is not None:
        overrides["host"] = host
    if port is not None:
        overrides["port"] = port
    if cleanup is not None:
        overrides["cleanup_enabled"] = cleanup
    if cleanup_hours is not None:
        if cleanup_hours <= 0:
            click.secho("ERROR: --cleanup-hours must be positive", fg="red")
            sys.exit(1)
        overrides["cleanup_hours"] = cleanup_hours
    settings = replace(settings, **overrides)

    client = EthClient(settings.eth_node_url, timeout=settings.rpc_timeout)
    try:
        chain_id = client.chain_id()
    except RpcError as exc:
        click.secho(f"Failed to connect to Ethereum node: {exc}", fg="red")
        sys.exit(1)
    logger.info("Connected to Ethereum node: %s (chain id %d)", settings.eth_node_url, chain_id)

    app = create_app(settings=settings, client=client)

    logger.info("Starting server on %s:%d", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=log_level)

