from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from blog import repository as blog_repository
from blog import router as blog_router
from core.config import Settings, load_settings
from core.db import Database
from core.errors import InvalidArgument, NotFound, StorageFault
from core.logging_config import setup_logging

logger = logging.getLogger(__name__)


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": message})


async def _invalid_argument_handler(_: Request, exc: InvalidArgument) -> JSONResponse:
    return _error_response(status.HTTP_400_BAD_REQUEST, exc.message)


async def _not_found_handler(_: Request, exc: NotFound) -> JSONResponse:
    return _error_response(status.HTTP_404_NOT_FOUND, exc.message)


async def _storage_fault_handler(_: Request, exc: StorageFault) -> JSONResponse:
    return _error_response(status.HTTP_400_BAD_REQUEST, exc.message)


async def _request_validation_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("request_rejected errors=%s", len(exc.errors()))
    return _error_response(status.HTTP_400_BAD_REQUEST, "Invalid request body.")


def create_app(settings: Settings | None = None, database: Database | None = None) -> FastAPI:
    settings = settings or load_settings()
    setup_logging(settings.log_level)

    database = database or Database(settings.database)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # One pool per process, opened before the first request.
        await database.connect()
        if settings.database.synchronize:
            async with database.acquire() as session:
                await blog_repository.create_schema(session)
            logger.info("schema_synchronized table=blog_posts")
        try:
            yield
        finally:
            await database.close()

    app = FastAPI(title="blogspace api", lifespan=lifespan)
    app.state.settings = settings
    app.state.database = database

    # Allow the browser client's dev server to call this API.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(InvalidArgument, _invalid_argument_handler)
    app.add_exception_handler(NotFound, _not_found_handler)
    app.add_exception_handler(StorageFault, _storage_fault_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)

    app.include_router(blog_router.router, tags=["blog"])

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    @app.get("/")
    def root() -> dict:
        return {"message": "blogspace api"}

    return app


app = create_app()


def serve() -> None:
    settings: Settings = app.state.settings
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())
