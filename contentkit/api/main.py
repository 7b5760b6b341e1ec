from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from contentkit import __version__
from contentkit.api.deps import Settings, configure_logging, get_settings
from contentkit.api.envelope import (
    BAD_REQUEST,
    INTERNAL_SERVER_ERROR,
    METHOD_NOT_ALLOWED,
    NOT_FOUND,
    fail,
)
from contentkit.api.router import ApiRouter
from contentkit.rules.loader import load_rules
from contentkit.services.engine import ContentEngine

_HTTP_ERROR_CODES = {404: NOT_FOUND, 405: METHOD_NOT_ALLOWED}


def create_app(settings: Settings | None = None, engine: ContentEngine | None = None) -> FastAPI:
    """
    Build the HTTP application.

    Args:
        settings: Process settings; read from the environment when omitted.
        engine: Prebuilt engine (tests); built from settings and rules when omitted.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        active = settings or get_settings()
        configure_logging(active.log_level)

        content_engine = engine
        if content_engine is None:
            # Rules are validated on startup (fail-fast)
            rules = load_rules(active.rules_path)
            content_engine = ContentEngine.create(
                rules=rules,
                backend=active.backend,
                db_path=active.db_path,
            )

        app.state.engine = content_engine
        app.state.api_router = ApiRouter(
            content_engine.schemas,
            content_engine.entries,
            rules=content_engine.rules.api,
            time_port=content_engine.time,
        )
        content_engine.start()
        try:
            yield
        finally:
            content_engine.shutdown()

    app = FastAPI(
        title="contentkit API",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # --- Routers ---
    from contentkit.api.routes import content_types, entries_api, workflow

    app.include_router(content_types.router, prefix="/admin/content-types", tags=["Content Types"])
    app.include_router(workflow.router, prefix="/admin/entries", tags=["Workflow"])
    app.include_router(entries_api.router, prefix="/api", tags=["Content API"])

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        details = [
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
        ]
        response = fail(BAD_REQUEST, "Invalid request", details)
        return JSONResponse(status_code=response.status_code, content=response.body)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        code = _HTTP_ERROR_CODES.get(exc.status_code, BAD_REQUEST)
        if exc.status_code >= 500:
            code = INTERNAL_SERVER_ERROR
        response = fail(code, str(exc.detail))
        return JSONResponse(
            status_code=exc.status_code, content=response.body, headers=exc.headers
        )

    @app.get("/health")
    def health_check() -> dict[str, Any]:
        """Health check endpoint."""
        return {"status": "ok", "service": "api"}

    return app


app = create_app()
