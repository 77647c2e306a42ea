from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from . import __version__
from .chain.rpc import EthClient
from .config import Settings
from .errors import BlockmanError
from .handlers import call_function, list_abis, list_functions, remove_abi, upload_abi
from .store.abi_store import AbiStore
from .store.sweeper import Sweeper

logger = logging.getLogger(__name__)


class UploadAbiRequest(BaseModel):
    abi: Any = Field(...)


class ListFunctionsRequest(BaseModel):
    abi_id: str


class CallFunctionRequest(BaseModel):
    abi_id: str = ""
    contract_address: str = ""
    function_name: str = ""
    # JSON null is accepted as an empty argument list
    function_input: Optional[list[Any]] = None
    block: str = "latest"


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[AbiStore] = None,
    client: Optional[EthClient] = None,
) -> FastAPI:
    """Create the API app.

    ``store`` and ``client`` default to fresh instances built from
    ``settings``; tests pass their own.
    """
    if client is None:
        if settings is None:
            settings = Settings.from_env()
        client = EthClient(settings.eth_node_url, timeout=settings.rpc_timeout)
    store = store if store is not None else AbiStore()

    sweeper: Optional[Sweeper] = None
    if settings is not None and settings.cleanup_enabled:
        sweeper = Sweeper(store, max_age=settings.cleanup_max_age)

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        if sweeper is not None:
            sweeper.start()
        try:
            yield
        finally:
            if sweeper is not None:
                sweeper.stop()

    app = FastAPI(title="blockman", version=__version__, lifespan=lifespan)
    app.state.store = store
    app.state.client = client
    app.state.sweeper = sweeper

    @app.exception_handler(BlockmanError)
    async def _blockman_error(_: Request, exc: BlockmanError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s", exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.body)

    @app.exception_handler(RequestValidationError)
    async def _validation_error(_: Request, exc: RequestValidationError) -> JSONResponse:
        details = "; ".join(
            f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg', '')}"
            for err in exc.errors()
        )
        return JSONResponse(status_code=400, content={"error": "Invalid request", "details": details})

    @app.get("/healthz")
    def healthz() -> dict[str, Any]:
        return {"ok": True, "abis": len(store)}

    @app.post("/upload-abi")
    def upload_abi_route(body: UploadAbiRequest) -> dict[str, Any]:
        return upload_abi(store, body.abi)

    @app.post("/list-functions")
    def list_functions_route(body: ListFunctionsRequest) -> dict[str, Any]:
        return list_functions(store, body.abi_id)

    @app.post("/call-function")
    def call_function_route(body: CallFunctionRequest) -> dict[str, Any]:
        return call_function(
            store,
            client,
            abi_id=body.abi_id,
            contract_address=body.contract_address,
            function_name=body.function_name,
            function_input=body.function_input or [],
            block=body.block,
        )

    @app.get("/abis")
    def list_abis_route() -> dict[str, Any]:
        return list_abis(store)

    @app.delete("/abis/{abi_id}")
    def remove_abi_route(abi_id: str) -> dict[str, Any]:
        return remove_abi(store, abi_id)

    return app
