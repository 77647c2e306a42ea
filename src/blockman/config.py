"""
Process configuration.

Settings come from the environment, optionally seeded from a ``.env``
file in the working directory. Malformed optional values fall back to
their defaults with a warning; a missing node URL is fatal.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import find_dotenv, load_dotenv

from .errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8080
DEFAULT_CLEANUP_ENABLED = True
DEFAULT_CLEANUP_HOURS = 24
DEFAULT_RPC_TIMEOUT = 30.0

_TRUE = {"1", "t", "T", "TRUE", "true", "True"}
_FALSE = {"0", "f", "F", "FALSE", "false", "False"}


@dataclass(frozen=True)
class Settings:
    eth_node_url: str
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    cleanup_enabled: bool = DEFAULT_CLEANUP_ENABLED
    cleanup_hours: float = DEFAULT_CLEANUP_HOURS
    rpc_timeout: float = DEFAULT_RPC_TIMEOUT

    @property
    def cleanup_max_age(self) -> float:
        """Idle time in seconds after which an ABI is evicted."""
        return self.cleanup_hours * 3600

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        env_file: Optional[Path] = None,
    ) -> "Settings":
        if environ is None:
            load_dotenv(env_file or find_dotenv(usecwd=True))
            environ = os.environ

        eth_node_url = environ.get("ETH_NODE_URL", "").strip()
        if not eth_node_url:
            raise ConfigError("ETH_NODE_URL environment variable must be set")

        return cls(
            eth_node_url=eth_node_url,
            host=environ.get("HOST") or DEFAULT_HOST,
            port=_parse_int(environ, "PORT", DEFAULT_PORT),
            cleanup_enabled=_parse_bool(environ, "CLEANUP_ENABLED", DEFAULT_CLEANUP_ENABLED),
            cleanup_hours=_parse_positive(environ, "CLEANUP_HOURS", DEFAULT_CLEANUP_HOURS),
            rpc_timeout=_parse_positive(environ, "RPC_TIMEOUT", DEFAULT_RPC_TIMEOUT),
        )


def parse_bool(value: str) -> bool:
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"invalid boolean: {value!r}")


def _parse_bool(environ: Mapping[str, str], key: str, default: bool) -> bool:
    raw = environ.get(key, "")
    if not raw:
        return default
    try:
        return parse_bool(raw)
    except ValueError:
        logger.warning("Invalid %s value %r, using default (%s)", key, raw, default)
        return default


def _parse_int(environ: Mapping[str, str], key: str, default: int) -> int:
    raw = environ.get(key, "")
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Invalid %s value %r, using default (%d)", key, raw, default)
        return default


def _parse_positive(environ: Mapping[str, str], key: str, default: float) -> float:
    raw = environ.get(key, "")
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        value = 0.0
    if value <= 0:
        logger.warning("Invalid %s value %r, using default (%s)", key, raw, default)
        return default
    return value
