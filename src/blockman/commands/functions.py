"""
Functions - List the callable functions of a local ABI file.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from ..chain.abi import load_abi_file
from ..errors import InvalidAbiError
from ..handlers.abi import describe_function


@click.command()
@click.argument("abi_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Print machine-readable JSON")
def functions(abi_file: Path, as_json: bool) -> None:
    """List functions declared in ABI_FILE (ABI array or compiler artifact)."""
    try:
        parsed = load_abi_file(abi_file)
    except InvalidAbiError as exc:
        click.secho(f"ERROR: {exc}", fg="red")
        sys.exit(1)

    described = [describe_function(fn) for fn in parsed.functions.values()]

    if as_json:
        click.echo(json.dumps({"functions": described, "total_functions": len(described)}, indent=2))
        return

    if not described:
        click.echo("No functions found.")
        return

    click.echo(f"Functions: {len(described)}")
    for fn in described:
        outputs = ",".join(o["type"] for o in fn["outputs"])
        tag = click.style(fn["state_mutability"], fg="green" if fn["constant"] else "yellow")
        click.echo(f"  {fn['selector']}  {fn['name']}: {fn['signature']} -> ({outputs})  [{tag}]")
