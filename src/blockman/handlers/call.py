"""
Call handler - Run a read-only contract function through eth_call.

JSON gives us strings, numbers, booleans and arrays; the ABI wants
addresses, integers, byte strings and so on. ``convert_argument`` bridges
the two for the primitive types (and arrays of them) before eth-abi does
the actual encoding.
"""

from __future__ import annotations

import re
from typing import Any

from eth_abi.exceptions import ParseError
from eth_abi.grammar import ABIType, TupleType, parse

from ..chain.abi import decode_result, encode_call
from ..chain.rpc import EthClient
from ..errors import AbiNotFoundError, ArgumentError, DecodeError, InvalidRequestError
from ..store.abi_store import AbiStore
from ..utils import hex_to_bytes, is_valid_address, to_hex

BLOCK_TAGS = frozenset({"latest", "earliest", "pending", "safe", "finalized"})
_DECIMAL = re.compile(r"[+-]?[0-9]+")
_HEX_QUANTITY = re.compile(r"0x[0-9a-fA-F]+")


def call_function(
    store: AbiStore,
    client: EthClient,
    abi_id: str,
    contract_address: str,
    function_name: str,
    function_input: list[Any],
    block: str = "latest",
) -> dict[str, Any]:
    """
    Call a read-only function from a stored ABI.

    Returns:
        ``{"result": ..., "raw": False}`` with the decoded value, or the raw
        hex with ``"raw": True`` when the result cannot be decoded
    """
    parsed = store.get(abi_id)
    if parsed is None:
        raise AbiNotFoundError(abi_id, include_id=False)

    if not contract_address or not is_valid_address(contract_address):
        raise InvalidRequestError("Valid contract address is required")

    function = parsed.function(function_name)
    if function is None:
        raise InvalidRequestError("Function not found in ABI")

    if len(function_input) != len(function.inputs):
        raise InvalidRequestError(
            f"Expected {len(function.inputs)} arguments, got {len(function_input)}"
        )

    args = []
    for i, (value, param) in enumerate(zip(function_input, function.inputs)):
        try:
            args.append(convert_argument(value, param.type))
        except ArgumentError as exc:
            raise ArgumentError(f"Failed to convert argument {i}: {exc}") from exc

    calldata = encode_call(function, args)

    if not function.is_read_only:
        raise InvalidRequestError(
            "State-changing functions require transaction signing, which is not yet supported"
        )

    if block not in BLOCK_TAGS and not _HEX_QUANTITY.fullmatch(block):
        raise InvalidRequestError(f"Invalid block: {block}")

    result = client.eth_call(contract_address, to_hex(calldata), block=block)

    try:
        decoded = decode_result(result, function.outputs)
    except DecodeError:
        return {"result": result, "raw": True}
    return {"result": decoded, "raw": False}


def convert_argument(value: Any, abi_type: str) -> Any:
    """
    Convert a JSON value into what eth-abi expects for ``abi_type``.

    Raises:
        ArgumentError: If the value cannot represent the type
    """
    try:
        typ = parse(abi_type)
    except ParseError as exc:
        raise ArgumentError(f"invalid ABI type {abi_type!r}") from exc
    return _convert(value, typ)


def _convert(value: Any, typ: ABIType) -> Any:
    type_str = typ.to_type_str()

    if typ.is_array:
        if not isinstance(value, list):
            raise _unsupported(value, type_str)
        dimension = typ.arrlist[-1]
        if dimension and len(value) != dimension[0]:
            raise ArgumentError(
                f"expected {dimension[0]} elements for {type_str}, got {len(value)}"
            )
        return [_convert(item, typ.item_type) for item in value]

    if isinstance(typ, TupleType):
        if not isinstance(value, list):
            raise _unsupported(value, type_str)
        if len(value) != len(typ.components):
            raise ArgumentError(
                f"expected {len(typ.components)} components for {type_str}, got {len(value)}"
            )
        return tuple(_convert(item, component) for item, component in zip(value, typ.components))

    return _convert_primitive(value, type_str)


def _convert_primitive(value: Any, abi_type: str) -> Any:
    if isinstance(value, str):
        return _convert_string(value, abi_type)

    # bool is an int subclass, so it has to be ruled out before numbers
    if isinstance(value, bool):
        if abi_type == "bool":
            return value
        raise _unsupported(value, abi_type)

    if isinstance(value, (int, float)):
        if abi_type == "bool":
            return value != 0
        if abi_type.startswith(("uint", "int")):
            try:
                return int(value)
            except (OverflowError, ValueError) as exc:
                raise ArgumentError(f"invalid integer value: {value}") from exc

    raise _unsupported(value, abi_type)


def _convert_string(value: str, abi_type: str) -> Any:
    if abi_type.startswith("address"):
        if not is_valid_address(value):
            raise ArgumentError(f"invalid Ethereum address: {value}")
        return value.lower()

    if abi_type.startswith("uint"):
        if not _DECIMAL.fullmatch(value):
            raise ArgumentError(f"failed to parse uint: {value}")
        return int(value, 10)

    if abi_type.startswith("int"):
        if not _DECIMAL.fullmatch(value):
            raise ArgumentError(f"failed to parse int: {value}")
        return int(value, 10)

    if abi_type == "bool":
        lowered = value.lower()
        if lowered in ("true", "1"):
            return True
        if lowered in ("false", "0"):
            return False
        raise ArgumentError(f"invalid boolean value: {value}")

    if abi_type == "string":
        return value

    if abi_type.startswith("bytes"):
        try:
            return hex_to_bytes(value)
        except ValueError as exc:
            raise ArgumentError(f"invalid hex bytes: {value}") from exc

    raise _unsupported(value, abi_type)


def _json_type(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def _unsupported(value: Any, abi_type: str) -> ArgumentError:
    return ArgumentError(f"unsupported type conversion from {_json_type(value)} to {abi_type}")
