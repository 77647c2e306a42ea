"""Tests for the in-memory ABI store."""

from __future__ import annotations

import re
import threading
from typing import Any

import pytest

from blockman.chain.abi import ContractAbi, parse_abi
from blockman.errors import AbiNotFoundError
from blockman.store.abi_store import AbiStore

from conftest import FakeClock

UUID_PATTERN = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$")


@pytest.fixture()
def token_abi(erc20_abi: list[dict[str, Any]]) -> ContractAbi:
    return parse_abi(erc20_abi)


class TestSaveAndGet:
    def test_save_returns_unique_uuid(self, store: AbiStore, token_abi: ContractAbi) -> None:
        first = store.save(token_abi)
        second = store.save(token_abi)
        assert UUID_PATTERN.match(first)
        assert first != second
        assert len(store) == 2

    def test_get_returns_abi(self, store: AbiStore, token_abi: ContractAbi) -> None:
        abi_id = store.save(token_abi)
        assert store.get(abi_id) is token_abi

    def test_get_unknown(self, store: AbiStore) -> None:
        assert store.get("missing") is None

    def test_get_touches_last_used(self, store: AbiStore, clock: FakeClock, token_abi: ContractAbi) -> None:
        abi_id = store.save(token_abi)
        created = clock.now
        clock.advance(60)
        store.get(abi_id)
        record = store.list()[abi_id]
        assert record.created_at == created
        assert record.last_used == created + 60


class TestList:
    def test_list_is_a_copy(self, store: AbiStore, token_abi: ContractAbi) -> None:
        abi_id = store.save(token_abi)
        snapshot = store.list()
        snapshot.clear()
        assert abi_id in store

    def test_list_does_not_touch(self, store: AbiStore, clock: FakeClock, token_abi: ContractAbi) -> None:
        abi_id = store.save(token_abi)
        clock.advance(30)
        store.list()
        assert store.list()[abi_id].last_used == store.list()[abi_id].created_at


class TestRemove:
    def test_remove(self, store: AbiStore, token_abi: ContractAbi) -> None:
        abi_id = store.save(token_abi)
        store.remove(abi_id)
        assert store.get(abi_id) is None
        assert len(store) == 0

    def test_remove_unknown(self, store: AbiStore) -> None:
        with pytest.raises(AbiNotFoundError) as exc_info:
            store.remove("missing")
        assert exc_info.value.status_code == 404
        assert exc_info.value.body == {"error": "ABI not found", "abi_id": "missing"}


class TestCleanup:
    def test_removes_only_idle_records(self, store: AbiStore, clock: FakeClock, token_abi: ContractAbi) -> None:
        stale = store.save(token_abi)
        fresh = store.save(token_abi)
        clock.advance(100)
        store.get(fresh)
        clock.advance(50)

        assert store.cleanup(120) == 1
        assert stale not in store
        assert fresh in store

    def test_boundary_is_exclusive(self, store: AbiStore, clock: FakeClock, token_abi: ContractAbi) -> None:
        abi_id = store.save(token_abi)
        clock.advance(120)
        assert store.cleanup(120) == 0
        clock.advance(0.001)
        assert store.cleanup(120) == 1
        assert abi_id not in store

    def test_empty_store(self, store: AbiStore) -> None:
        assert store.cleanup(1) == 0


class TestConcurrency:
    def test_get_never_revives_removed_record(self, token_abi: ContractAbi) -> None:
        store = AbiStore()
        ids = [store.save(token_abi) for _ in range(200)]
        barrier = threading.Barrier(2)

        def reader() -> None:
            barrier.wait()
            for _ in range(5):
                for abi_id in ids:
                    store.get(abi_id)

        def remover() -> None:
            barrier.wait()
            for abi_id in ids:
                store.remove(abi_id)

        threads = [threading.Thread(target=reader), threading.Thread(target=remover)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(store) == 0
        assert all(store.get(abi_id) is None for abi_id in ids)
