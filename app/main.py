"""
FastAPI Application Entry Point
Main application setup and route registration
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import Settings, get_settings
from app.database import build_database, build_engine
from app.dependencies import connect_database
from app.errors import ApiError
from app.logging_config import configure_logging
from app.routes import admin, presidents, public
from app.services.rate_limiter import InMemoryAttemptStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    state = app.state
    # A database outage must not stop the server from starting
    if await connect_database(state):
        logger.info("[START] %s started in %s mode", state.settings.APP_NAME, state.settings.APP_ENV)
    else:
        logger.warning("[START] %s started without a database connection", state.settings.APP_NAME)
    try:
        yield
    finally:
        if state.database.is_connected:
            await state.database.disconnect()
        state.engine.dispose()
        logger.info("[STOP] database disconnected")


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError):
        return JSONResponse(status_code=exc.status_code, content=exc.payload)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        detail = [
            {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
            for err in exc.errors()
        ]
        return JSONResponse(status_code=400, content={"error": "invalid_request", "detail": detail})

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        error = "not_found" if exc.status_code == 404 else str(exc.detail).lower().replace(" ", "_")
        return JSONResponse(status_code=exc.status_code, content={"error": error}, headers=exc.headers)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": "internal_error"})


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application around one settings object"""
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title=settings.APP_NAME,
        description="School club directory: browse, president submissions, admin panel",
        version="1.0.0",
        debug=settings.DEBUG,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.engine = build_engine(settings)
    app.state.database = build_database(settings)
    app.state.schema_ready = False
    app.state.connect_lock = asyncio.Lock()
    app.state.attempt_store = InMemoryAttemptStore(
        window_seconds=settings.rate_limit_window_seconds,
        max_attempts=settings.RATE_LIMIT_MAX_ATTEMPTS,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    @app.get("/healthz")
    async def health_check():
        """Liveness check; does not touch the database"""
        return {"ok": True}

    app.include_router(public.router, prefix="/api", tags=["Public"])
    app.include_router(presidents.router, prefix="/api", tags=["Presidents"])
    app.include_router(admin.router, prefix="/api", tags=["Admin"])

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = app.state.settings
    uvicorn.run(
        "app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        proxy_headers=settings.TRUST_PROXY,
    )
