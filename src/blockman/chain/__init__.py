"""
Chain - Contract interface and node access layer for Blockman.

Provides ABI parsing/encoding on top of eth-abi and a JSON-RPC client
for read-only calls.

Uses httpx + eth-abi instead of the heavyweight web3.py.
"""
