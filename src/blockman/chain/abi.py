"""
ABI Parser - Turns a contract ABI document into callable function descriptions.

Encoding and decoding of call data is delegated to eth-abi; selectors are
Keccak-256 hashes from eth-hash. Nothing here talks to a node.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

from eth_abi import decode, encode, is_encodable_type
from eth_abi.exceptions import DecodingError as AbiDecodingError
from eth_abi.exceptions import EncodingError as AbiEncodingError
from eth_hash.auto import keccak
from jsonschema import Draft202012Validator, ValidationError

from ..errors import DecodeError, EncodingError, InvalidAbiError
from ..utils import hex_to_bytes, to_hex

READ_ONLY_MUTABILITY = frozenset({"view", "pure"})
ABI_SCHEMA_PATH = Path(__file__).resolve().parent / "abi.schema.json"


@dataclass(frozen=True)
class AbiParameter:
    name: str
    type: str


@dataclass(frozen=True)
class AbiFunction:
    """A callable contract method.

    ``name`` is the lookup key inside its ABI (overloads get a numeric
    suffix), ``raw_name`` is the Solidity name used for the selector.
    """

    name: str
    raw_name: str
    inputs: tuple[AbiParameter, ...]
    outputs: tuple[AbiParameter, ...]
    state_mutability: str

    @property
    def input_types(self) -> list[str]:
        return [p.type for p in self.inputs]

    @property
    def output_types(self) -> list[str]:
        return [p.type for p in self.outputs]

    @property
    def signature(self) -> str:
        return f"{self.raw_name}({','.join(self.input_types)})"

    @property
    def selector(self) -> bytes:
        # Keccak-256, not NIST SHA3-256
        return keccak(self.signature.encode("utf-8"))[:4]

    @property
    def is_read_only(self) -> bool:
        return self.state_mutability in READ_ONLY_MUTABILITY

    @property
    def is_payable(self) -> bool:
        return self.state_mutability == "payable"


@dataclass(frozen=True)
class ContractAbi:
    functions: dict[str, AbiFunction] = field(default_factory=dict)

    def function(self, name: str) -> Optional[AbiFunction]:
        return self.functions.get(name)

    def __len__(self) -> int:
        return len(self.functions)


def canonical_type(param: dict[str, Any]) -> str:
    """Render a parameter type the way it appears in a signature.

    Tuples are expanded from their components, keeping any array suffix:
    ``tuple[]`` with components (uint256, address) becomes ``(uint256,address)[]``.
    """
    type_str = param["type"]
    if type_str.startswith("tuple"):
        suffix = type_str[len("tuple"):]
        inner = ",".join(canonical_type(c) for c in param.get("components", []))
        return f"({inner}){suffix}"
    return type_str


def _state_mutability(entry: dict[str, Any]) -> str:
    mutability = entry.get("stateMutability")
    if mutability:
        return mutability
    # Pre-0.4.16 compilers only emitted constant/payable flags
    if entry.get("constant"):
        return "view"
    if entry.get("payable"):
        return "payable"
    return "nonpayable"


def _parameters(function_name: str, params: list[dict[str, Any]]) -> tuple[AbiParameter, ...]:
    result = []
    for param in params:
        type_str = canonical_type(param)
        if not is_encodable_type(type_str):
            raise InvalidAbiError(f"unsupported type {type_str!r} in function {function_name}")
        result.append(AbiParameter(name=param.get("name", ""), type=type_str))
    return tuple(result)


def _resolve_name_conflict(raw_name: str, used: dict[str, AbiFunction]) -> str:
    name = raw_name
    idx = 0
    while name in used:
        name = f"{raw_name}{idx}"
        idx += 1
    return name


@lru_cache(maxsize=1)
def abi_validator() -> Draft202012Validator:
    """Load the ABI JSON Schema once and return a validator for it."""
    with ABI_SCHEMA_PATH.open("r", encoding="utf-8") as f:
        schema = json.load(f)
    Draft202012Validator.check_schema(schema)
    return Draft202012Validator(schema)


def _format_error(error: ValidationError) -> str:
    location = "/".join(str(part) for part in error.path) or "<root>"
    return f"{location}: {error.message}"


def schema_errors(payload: Any) -> list[str]:
    """Structural problems in an ABI document, as ``location: message`` strings."""
    errors = sorted(abi_validator().iter_errors(payload), key=lambda e: [str(part) for part in e.path])
    return [_format_error(err) for err in errors]


def parse_abi(payload: Any) -> ContractAbi:
    """
    Parse an ABI document.

    Args:
        payload: A list of ABI entries, a compiler artifact dict holding an
            ``abi`` list, or either of those as a JSON string

    Returns:
        ContractAbi with its functions in declaration order

    Raises:
        InvalidAbiError: If the document is not a usable ABI
    """
    if isinstance(payload, (str, bytes)):
        try:
            payload = json.loads(payload)
        except json.JSONDecodeError as exc:
            raise InvalidAbiError(f"invalid JSON: {exc}") from exc

    if isinstance(payload, dict) and "abi" in payload:
        payload = payload["abi"]

    errors = schema_errors(payload)
    if errors:
        raise InvalidAbiError("; ".join(errors))

    functions: dict[str, AbiFunction] = {}
    for entry in payload:
        if entry.get("type", "function") != "function":
            continue
        raw_name = entry["name"]
        name = _resolve_name_conflict(raw_name, functions)
        functions[name] = AbiFunction(
            name=name,
            raw_name=raw_name,
            inputs=_parameters(raw_name, entry.get("inputs", [])),
            outputs=_parameters(raw_name, entry.get("outputs", [])),
            state_mutability=_state_mutability(entry),
        )

    return ContractAbi(functions=functions)


def load_abi_file(path: Path) -> ContractAbi:
    """Load and parse an ABI or compiler artifact from disk."""
    if not path.exists():
        raise FileNotFoundError(f"ABI not found: {path}")

    with path.open("r", encoding="utf-8") as f:
        try:
            payload = json.load(f)
        except json.JSONDecodeError as exc:
            raise InvalidAbiError(f"invalid JSON in {path}: {exc}") from exc

    return parse_abi(payload)


def encode_call(function: AbiFunction, args: list[Any]) -> bytes:
    """
    ABI-encode a function call.

    Returns:
        4-byte selector followed by the encoded arguments
    """
    try:
        encoded_args = encode(function.input_types, args) if args else b""
    except (AbiEncodingError, TypeError, ValueError, OverflowError) as exc:
        raise EncodingError(f"Failed to encode function call: {exc}") from exc
    return function.selector + encoded_args


def to_jsonable(value: Any) -> Any:
    if isinstance(value, (bytes, bytearray)):
        return to_hex(bytes(value))
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    return value


def decode_result(raw_hex: str, outputs: tuple[AbiParameter, ...]) -> Any:
    """
    Decode the hex returned by eth_call.

    Returns:
        None for an empty result, the raw hex when no outputs are declared,
        the bare value for a single output, otherwise a dict keyed by output
        name (``output{i}`` for unnamed outputs)

    Raises:
        DecodeError: If the data does not match the output types
    """
    if not raw_hex or raw_hex in ("0x", "0X"):
        return None

    try:
        data = hex_to_bytes(raw_hex)
    except ValueError as exc:
        raise DecodeError(f"failed to decode hex result: {exc}") from exc

    if not outputs:
        return to_hex(data)

    try:
        decoded = decode([p.type for p in outputs], data)
    except (AbiDecodingError, ValueError, OverflowError) as exc:
        raise DecodeError(f"failed to unpack result: {exc}") from exc

    values = [to_jsonable(v) for v in decoded]
    if len(values) == 1:
        return values[0]

    named: dict[str, Any] = {}
    for i, (param, value) in enumerate(zip(outputs, values)):
        named[param.name or f"output{i}"] = value
    return named
