"""
ABI handlers - Upload, inspect, list and remove stored ABIs.
"""

from __future__ import annotations

from typing import Any

from ..chain.abi import AbiFunction, AbiParameter, parse_abi
from ..errors import AbiNotFoundError
from ..store.abi_store import AbiStore
from ..utils import rfc3339, to_hex


def upload_abi(store: AbiStore, abi: Any) -> dict[str, Any]:
    """Parse an uploaded ABI and store it."""
    parsed = parse_abi(abi)
    abi_id = store.save(parsed)
    return {
        "message": "ABI uploaded successfully",
        "abi_id": abi_id,
    }


def list_functions(store: AbiStore, abi_id: str) -> dict[str, Any]:
    """List every function of a stored ABI."""
    parsed = store.get(abi_id)
    if parsed is None:
        raise AbiNotFoundError(abi_id)

    functions = [describe_function(fn) for fn in parsed.functions.values()]
    return {
        "functions": functions,
        "total_functions": len(functions),
    }


def describe_function(fn: AbiFunction) -> dict[str, Any]:
    return {
        "name": fn.name,
        "signature": fn.signature,
        "selector": to_hex(fn.selector),
        "inputs": _describe_arguments(fn.inputs),
        "outputs": _describe_arguments(fn.outputs),
        "state_mutability": fn.state_mutability,
        "constant": fn.is_read_only,
        "payable": fn.is_payable,
        "stateful": not fn.is_read_only,
    }


def _describe_arguments(args: tuple[AbiParameter, ...]) -> list[dict[str, str]]:
    return [{"name": arg.name, "type": arg.type} for arg in args]


def list_abis(store: AbiStore) -> dict[str, Any]:
    records = store.list()
    abis = [
        {
            "abi_id": abi_id,
            "created_at": rfc3339(record.created_at),
            "last_used": rfc3339(record.last_used),
            "total_functions": len(record.abi),
        }
        for abi_id, record in sorted(records.items(), key=lambda item: item[1].created_at)
    ]
    return {"abis": abis, "total": len(abis)}


def remove_abi(store: AbiStore, abi_id: str) -> dict[str, Any]:
    store.remove(abi_id)
    return {
        "message": "ABI removed successfully",
        "abi_id": abi_id,
    }
