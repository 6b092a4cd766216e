import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from ..errors import MissingParameterError
from ..processors import TokenSearchIndex
from .coordinator import BatchCoordinator

logger = logging.getLogger(__name__)


def create_app(
    coordinator: Optional[BatchCoordinator] = None,
    search_index: Optional[TokenSearchIndex] = None,
    preload: bool = True,
) -> FastAPI:
    """
    Build the HTTP service.

    Collaborators that are not passed in are created at startup, where the
    token list for /api/search is also preloaded (unless preload=False).
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if app.state.coordinator is None:
            app.state.coordinator = BatchCoordinator()
        if app.state.search_index is None:
            app.state.search_index = TokenSearchIndex()
        if preload:
            await run_in_threadpool(app.state.search_index.load)
        yield

    app = FastAPI(title="tokeninfo", lifespan=lifespan)
    app.state.coordinator = coordinator
    app.state.search_index = search_index

    @app.exception_handler(MissingParameterError)
    async def missing_parameter_handler(request: Request, exc: MissingParameterError):
        return JSONResponse(status_code=400, content={"error": str(exc)})

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unexpected error handling {request.method} {request.url.path}: {exc}")
        return JSONResponse(status_code=500, content={"error": str(exc)})

    @app.get("/health")
    def health(request: Request):
        return {"status": "ok", "tokens": len(request.app.state.search_index)}

    @app.get("/api/tokeninfo")
    def token_info(request: Request, chain: Optional[str] = None, address: Optional[str] = None):
        if not address or not address.strip():
            raise MissingParameterError("address")
        record = request.app.state.coordinator.resolve(address.strip(), chain)
        return record.to_dict()

    @app.get("/api/tokeninfo/batch")
    def token_info_batch(request: Request, chain: Optional[str] = None, addresses: Optional[str] = None):
        if addresses is None:
            raise MissingParameterError("addresses")
        wanted = [a.strip() for a in addresses.split(",") if a.strip()]
        records = request.app.state.coordinator.resolve_batch(wanted, chain)
        return [r.to_dict() for r in records]

    @app.get("/api/search")
    def search(request: Request, query: Optional[str] = None):
        if not query:
            raise MissingParameterError("query")
        return request.app.state.search_index.search(query)

    return app


app = create_app()
