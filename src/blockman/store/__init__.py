"""
Store - In-memory ABI registry and its background eviction.

- abi_store: thread-safe map from ABI ID to parsed ABI with usage timestamps
- sweeper:   daemon thread that periodically evicts idle ABIs
"""
