import logging
import os
from functools import lru_cache
from pathlib import Path

from fastapi import Request
from fastapi.responses import JSONResponse

from contentkit.api.envelope import ApiResponse
from contentkit.api.router import ApiRouter
from contentkit.services.engine import Backend, ContentEngine


# --- Settings ---
class Settings:
    def __init__(self) -> None:
        self.base_dir = Path(os.getcwd())
        self.data_dir = Path(os.environ.get("CONTENTKIT_DATA_DIR", "./data"))
        self.db_path = str(self.data_dir / "contentkit.db")
        self.backend: Backend = _backend(os.environ.get("CONTENTKIT_BACKEND", "memory"))
        self.rules_path = Path(
            os.environ.get("CONTENTKIT_RULES_PATH", str(self.base_dir / "rules.yaml"))
        )
        self.log_level = os.environ.get("CONTENTKIT_LOG_LEVEL", "INFO").upper()


def _backend(value: str) -> Backend:
    value = value.strip().lower()
    if value == "memory":
        return "memory"
    if value == "sqlite":
        return "sqlite"
    raise ValueError(f"CONTENTKIT_BACKEND must be 'memory' or 'sqlite', got '{value}'")


@lru_cache
def get_settings() -> Settings:
    return Settings()


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# --- Engine ---
def get_engine(request: Request) -> ContentEngine:
    engine: ContentEngine = request.app.state.engine
    return engine


def get_api_router(request: Request) -> ApiRouter:
    router: ApiRouter = request.app.state.api_router
    return router


# --- Responses ---
def envelope_response(
    response: ApiResponse, headers: dict[str, str] | None = None
) -> JSONResponse:
    return JSONResponse(status_code=response.status_code, content=response.body, headers=headers)
