"""
ABI Store - In-memory registry of uploaded contract ABIs.

Each record tracks when it was created and when it was last looked up,
so that idle ABIs can be evicted by the sweeper.
"""

from __future__ import annotations

import threading
import time
import uuid
from dataclasses import dataclass, replace
from typing import Callable, Optional

from ..chain.abi import ContractAbi
from ..errors import AbiNotFoundError


@dataclass(frozen=True)
class AbiRecord:
    abi: ContractAbi
    created_at: float
    last_used: float


class AbiStore:
    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._lock = threading.Lock()
        self._records: dict[str, AbiRecord] = {}
        self._clock = clock

    def save(self, abi: ContractAbi) -> str:
        """Store an ABI and return its new ID."""
        abi_id = str(uuid.uuid4())
        now = self._clock()
        with self._lock:
            self._records[abi_id] = AbiRecord(abi=abi, created_at=now, last_used=now)
        return abi_id

    def get(self, abi_id: str) -> Optional[ContractAbi]:
        """Look up an ABI and mark it as used."""
        with self._lock:
            record = self._records.get(abi_id)
            if record is None:
                return None
            # Lookup and touch share the lock, so a concurrent remove cannot be undone here
            self._records[abi_id] = replace(record, last_used=self._clock())
        return record.abi

    def list(self) -> dict[str, AbiRecord]:
        with self._lock:
            return dict(self._records)

    def remove(self, abi_id: str) -> None:
        with self._lock:
            if abi_id not in self._records:
                raise AbiNotFoundError(abi_id)
            del self._records[abi_id]

    def cleanup(self, max_age: float) -> int:
        """
        Drop ABIs that have not been used for more than ``max_age`` seconds.

        Returns:
            Number of records removed
        """
        with self._lock:
            now = self._clock()
            stale = [
                abi_id
                for abi_id, record in self._records.items()
                if now - record.last_used > max_age
            ]
            for abi_id in stale:
                del self._records[abi_id]
        return len(stale)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __contains__(self, abi_id: object) -> bool:
        with self._lock:
            return abi_id in self._records
