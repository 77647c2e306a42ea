from __future__ import annotations

import re
import time
from datetime import datetime, timezone

# Whole-string patterns; always use fullmatch
ADDRESS_PATTERN = re.compile(r"0x[0-9a-fA-F]{40}")
HEX_DIGITS = re.compile(r"[0-9a-fA-F]*")


def is_valid_address(address: str) -> bool:
    return ADDRESS_PATTERN.fullmatch(address) is not None


def strip_0x(value: str) -> str:
    if value.startswith(("0x", "0X")):
        return value[2:]
    return value


def to_hex(data: bytes) -> str:
    return "0x" + data.hex()


def hex_to_bytes(value: str) -> bytes:
    digits = strip_0x(value)
    # bytes.fromhex skips whitespace between bytes
    if not HEX_DIGITS.fullmatch(digits):
        raise ValueError(f"non-hexadecimal input: {value!r}")
    return bytes.fromhex(digits)


def rfc3339(ts: float) -> str:
    return datetime.fromtimestamp(ts, timezone.utc).isoformat().replace("+00:00", "Z")


def utc_now_rfc3339() -> str:
    return rfc3339(time.time())
