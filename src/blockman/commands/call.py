"""
Call - Run a single read-only call without starting the server.

Goes through the same validation and conversion path as the HTTP API.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from ..chain.abi import load_abi_file
from ..chain.rpc import EthClient
from ..errors import BlockmanError
from ..handlers.call import call_function
from ..store.abi_store import AbiStore


@click.command()
@click.argument("abi_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--contract", required=True, help="Target contract address")
@click.option("--function", "func_name", required=True, help="Function name to call")
@click.option("--args", "args_json", default="[]", help="Function args as JSON array")
@click.option("--block", default="latest", help="Block tag or 0x-prefixed number")
@click.option("--node-url", envvar="ETH_NODE_URL", required=True, help="Ethereum JSON-RPC endpoint")
@click.option("--timeout", default=30.0, type=float, help="RPC timeout in seconds")
def call(
    abi_file: Path,
    contract: str,
    func_name: str,
    args_json: str,
    block: str,
    node_url: str,
    timeout: float,
) -> None:
    """Call a view/pure FUNCTION from ABI_FILE on a contract."""
    try:
        args = json.loads(args_json)
        if not isinstance(args, list):
            raise ValueError("Args must be a JSON array")
    except (json.JSONDecodeError, ValueError) as exc:
        click.secho(f"ERROR: Invalid args: {exc}", fg="red")
        sys.exit(1)

    store = AbiStore()
    client = EthClient(node_url, timeout=timeout)

    try:
        abi_id = store.save(load_abi_file(abi_file))
        response = call_function(
            store,
            client,
            abi_id=abi_id,
            contract_address=contract,
            function_name=func_name,
            function_input=args,
            block=block,
        )
    except BlockmanError as exc:
        click.secho(f"ERROR: {exc.message}", fg="red")
        sys.exit(1)

    if response["raw"]:
        click.secho("Result could not be decoded, raw data:", fg="yellow")
    click.echo(json.dumps(response["result"], indent=2))
