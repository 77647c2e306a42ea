"""Shared fixtures: a sample ERC-20 ABI and an in-process fake node."""

from __future__ import annotations

import json
from typing import Any

import httpx
import pytest

from blockman.chain.rpc import EthClient
from blockman.store.abi_store import AbiStore

TOKEN_ADDRESS = "0x1111111111111111111111111111111111111111"
HOLDER_ADDRESS = "0x2222222222222222222222222222222222222222"

ERC20_ABI: list[dict[str, Any]] = [
    {
        "type": "constructor",
        "inputs": [{"name": "supply", "type": "uint256"}],
        "stateMutability": "nonpayable",
    },
    {
        "type": "function",
        "name": "name",
        "inputs": [],
        "outputs": [{"name": "", "type": "string"}],
        "stateMutability": "view",
    },
    {
        "type": "function",
        "name": "decimals",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint8"}],
        "stateMutability": "view",
    },
    {
        "type": "function",
        "name": "totalSupply",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
    },
    {
        "type": "function",
        "name": "balanceOf",
        "inputs": [{"name": "account", "type": "address"}],
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
    },
    {
        "type": "function",
        "name": "transfer",
        "inputs": [
            {"name": "to", "type": "address"},
            {"name": "amount", "type": "uint256"},
        ],
        "outputs": [{"name": "", "type": "bool"}],
        "stateMutability": "nonpayable",
    },
    {
        "type": "function",
        "name": "reserves",
        "inputs": [],
        "outputs": [
            {"name": "reserve0", "type": "uint112"},
            {"name": "", "type": "uint112"},
        ],
        "stateMutability": "view",
    },
    {
        "type": "event",
        "name": "Transfer",
        "anonymous": False,
        "inputs": [
            {"name": "from", "type": "address", "indexed": True},
            {"name": "to", "type": "address", "indexed": True},
            {"name": "value", "type": "uint256", "indexed": False},
        ],
    },
]

# First 4 bytes of keccak256 of each signature
SELECTORS = {
    "name()": "0x06fdde03",
    "decimals()": "0x313ce567",
    "totalSupply()": "0x18160ddd",
    "balanceOf(address)": "0x70a08231",
    "transfer(address,uint256)": "0xa9059cbb",
}


class FakeNode:
    """Answers JSON-RPC requests through httpx.MockTransport.

    ``results`` maps a 0x-prefixed selector to the hex returned by eth_call.
    """

    def __init__(self) -> None:
        self.results: dict[str, str] = {}
        self.requests: list[dict[str, Any]] = []
        self.error: Any = None
        self.status_code = 200
        self.chain_id = "0xaa36a7"

    def __call__(self, request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        self.requests.append(payload)

        if self.status_code != 200:
            return httpx.Response(self.status_code, text="upstream unavailable")
        if self.error is not None:
            return httpx.Response(
                200, json={"jsonrpc": "2.0", "id": payload["id"], "error": self.error}
            )

        if payload["method"] == "eth_chainId":
            result: Any = self.chain_id
        elif payload["method"] == "eth_call":
            data = payload["params"][0]["data"]
            result = self.results.get(data[:10], "0x")
        else:
            return httpx.Response(
                200,
                json={
                    "jsonrpc": "2.0",
                    "id": payload["id"],
                    "error": {"code": -32601, "message": "method not found"},
                },
            )

        return httpx.Response(200, json={"jsonrpc": "2.0", "id": payload["id"], "result": result})

    @property
    def calls(self) -> list[dict[str, Any]]:
        return [r for r in self.requests if r["method"] == "eth_call"]

    def client(self) -> EthClient:
        return EthClient("http://node.test", transport=httpx.MockTransport(self))


class FakeClock:
    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture()
def erc20_abi() -> list[dict[str, Any]]:
    return json.loads(json.dumps(ERC20_ABI))


@pytest.fixture()
def fake_node() -> FakeNode:
    return FakeNode()


@pytest.fixture()
def eth_client(fake_node: FakeNode) -> EthClient:
    return fake_node.client()


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def store(clock: FakeClock) -> AbiStore:
    return AbiStore(clock=clock)
