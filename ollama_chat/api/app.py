from __future__ import annotations

import time
import logging
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from dotenv import load_dotenv

from .routes import router
from ..bootstrap import ServiceContainer, build_container
from ..domain.exceptions import (
    BackendInvocationError,
    ChatError,
    EmptyMessageError,
    ExchangeInProgressError,
    InvalidModelIdentifierError,
)


def _error(status_code: int, error: str, details: Optional[str] = None) -> JSONResponse:
    content = {"error": error}
    if details:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


def create_app(container: Optional[ServiceContainer] = None) -> FastAPI:
    # Ensure environment variables from .env are loaded when running the API server
    load_dotenv()
    app = FastAPI(title="Ollama Chat API", version="0.1.0")
    app.state.container = container or build_container()

    logger = logging.getLogger("ollama_chat_api")
    logger.setLevel(logging.INFO)

    @app.middleware("http")
    async def request_logger(request: Request, call_next):
        start = time.perf_counter()
        response = None
        try:
            response = await call_next(request)
            return response
        finally:
            dur_ms = (time.perf_counter() - start) * 1000.0
            logger.info(
                "%s %s -> %s in %.1fms",
                request.method,
                request.url.path,
                getattr(response, 'status_code', 'NA'),
                dur_ms,
            )

    @app.exception_handler(EmptyMessageError)
    async def empty_message(request: Request, exc: EmptyMessageError):
        return _error(422, str(exc))

    @app.exception_handler(InvalidModelIdentifierError)
    async def invalid_model(request: Request, exc: InvalidModelIdentifierError):
        return _error(422, str(exc))

    @app.exception_handler(ExchangeInProgressError)
    async def exchange_in_progress(request: Request, exc: ExchangeInProgressError):
        return _error(409, str(exc))

    @app.exception_handler(BackendInvocationError)
    async def backend_failed(request: Request, exc: BackendInvocationError):
        return _error(502, str(exc), exc.details)

    @app.exception_handler(ChatError)
    async def chat_error(request: Request, exc: ChatError):
        return _error(500, str(exc))

    @app.get("/health")
    async def root_health() -> dict:
        return {"status": "ok"}

    app.include_router(router)
    return app
