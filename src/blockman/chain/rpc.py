"""
JSON-RPC Client for an Ethereum node.

Lightweight alternative to web3.py: uses httpx for HTTP. Only read calls
are supported; nothing here signs or sends transactions.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, field
from typing import Any, Optional

import httpx

from ..errors import RpcError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


@dataclass
class EthClient:
    """
    Minimal JSON-RPC 2.0 client.

    Args:
        url: Node endpoint (http/https)
        timeout: Per-request timeout in seconds
        transport: Optional httpx transport, mostly for tests
    """

    url: str
    timeout: float = DEFAULT_TIMEOUT
    transport: Optional[httpx.BaseTransport] = None
    _ids: itertools.count = field(default_factory=lambda: itertools.count(1), repr=False)

    def call(self, method: str, params: list) -> Any:
        """
        Make a JSON-RPC call.

        Returns:
            Result field from the RPC response

        Raises:
            RpcError: If the transport fails or the node returns an error
        """
        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params,
            "id": next(self._ids),
        }

        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.post(self.url, json=payload)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as exc:
            raise RpcError(f"RPC HTTP error: {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise RpcError(f"RPC transport error: {exc}") from exc
        except ValueError as exc:
            raise RpcError(f"RPC returned invalid JSON: {exc}") from exc

        if not isinstance(data, dict):
            raise RpcError(f"RPC returned unexpected payload: {data!r}")

        if data.get("error") is not None:
            error = data["error"]
            if isinstance(error, dict) and "message" in error:
                # Node message is passed through unchanged
                raise RpcError(str(error["message"]))
            raise RpcError(f"RPC error: {error}")

        return data.get("result")

    def eth_call(self, address: str, data: str, block: str = "latest") -> str:
        """
        Execute a read-only contract call.

        Args:
            address: 0x-prefixed contract address
            data: 0x-prefixed call data
            block: Block tag or hex number

        Returns:
            0x-prefixed hex of the returned bytes ("0x" when empty)
        """
        logger.debug("eth_call to=%s block=%s", address, block)
        result = self.call("eth_call", [{"to": address, "data": data}, block])
        if result is None:
            return "0x"
        if not isinstance(result, str):
            raise RpcError(f"RPC returned non-hex eth_call result: {result!r}")
        return result

    def chain_id(self) -> int:
        result = self.call("eth_chainId", [])
        try:
            return int(result, 16)
        except (TypeError, ValueError) as exc:
            raise RpcError(f"RPC returned invalid chain id: {result!r}") from exc
