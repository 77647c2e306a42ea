"""
Error hierarchy shared by the handlers, the HTTP layer and the CLI.

Each error knows the HTTP status it maps to and the JSON body a client
receives, so handlers only raise and the transport only renders.
"""

from __future__ import annotations

from typing import Any, Optional


class BlockmanError(RuntimeError):
    status_code: int = 500

    def __init__(self, message: str, body: Optional[dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self._body = body

    @property
    def body(self) -> dict[str, Any]:
        if self._body is not None:
            return self._body
        return {"error": self.message}


class ConfigError(BlockmanError):
    pass


class InvalidRequestError(BlockmanError):
    status_code = 400


class InvalidAbiError(BlockmanError):
    status_code = 400

    def __init__(self, details: str) -> None:
        super().__init__(
            f"Invalid ABI format: {details}",
            body={"error": "Invalid ABI format", "details": details},
        )
        self.details = details


class AbiNotFoundError(BlockmanError):
    status_code = 404

    def __init__(self, abi_id: str, include_id: bool = True) -> None:
        body: dict[str, Any] = {"error": "ABI not found"}
        if include_id:
            body["abi_id"] = abi_id
        super().__init__("ABI not found", body=body)
        self.abi_id = abi_id


class ArgumentError(BlockmanError):
    status_code = 400


class EncodingError(BlockmanError):
    status_code = 500


class DecodeError(BlockmanError):
    status_code = 500


class RpcError(BlockmanError):
    status_code = 500
