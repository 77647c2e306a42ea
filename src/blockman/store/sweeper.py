from __future__ import annotations

import logging
import threading
from typing import Optional

from .abi_store import AbiStore

logger = logging.getLogger(__name__)


class Sweeper:
    """Background thread that evicts idle ABIs.

    Runs ``store.cleanup(max_age)`` every ``max_age / 2`` seconds unless an
    explicit interval is given.
    """

    def __init__(self, store: AbiStore, max_age: float, interval: Optional[float] = None) -> None:
        if max_age <= 0:
            raise ValueError(f"max_age must be positive, got {max_age}")
        self.store = store
        self.max_age = max_age
        self.interval = interval if interval is not None else max_age / 2
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="abi-sweeper", daemon=True)
        self._thread.start()
        logger.info(
            "ABI cleanup enabled, will remove ABIs unused for %.0fs (sweep every %.0fs)",
            self.max_age,
            self.interval,
        )

    def stop(self, timeout: Optional[float] = 5.0) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    def sweep(self) -> int:
        count = self.store.cleanup(self.max_age)
        if count > 0:
            logger.info("Cleaned up %d unused ABIs", count)
        return count

    def _run(self) -> None:
        while not self._stop.wait(self.interval):
            self.sweep()
