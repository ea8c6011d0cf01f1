"""FastAPI application entry point."""

import asyncio
import os
import sys
import logging
import tomllib
from contextlib import asynccontextmanager
from pathlib import Path
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Add src to path
# main.py is at /app/src/api/main.py
# src is at /app/src, so we go up 2 levels
_src_path = Path(__file__).parent.parent
sys.path.insert(0, str(_src_path))

from api.errors import register_exception_handlers
from api.routes import advice, auth, health
from adapter.mongodb.connection import connect_mongodb
from adapter.mongodb.indexes import ensure_all_indexes
from config import Settings, get_settings
from utils.logging import setup_structured_logging

# Set up structured JSON logging
setup_structured_logging()

logger = logging.getLogger(__name__)

# Read version from pyproject.toml (single source of truth)
_project_root = _src_path.parent
with open(_project_root / "pyproject.toml", "rb") as f:
    VERSION = tomllib.load(f)["project"]["version"]

SERVICE_NAME = "Finmon API"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: open the credential store, close it on shutdown."""
    settings: Settings = app.state.settings
    client = await asyncio.to_thread(
        connect_mongodb, settings.mongo_url, settings.store_timeout_seconds
    )
    app.state.mongo_client = client

    if client:
        db = client[settings.mongo_database]
        if await asyncio.to_thread(ensure_all_indexes, db):
            logger.info("MongoDB indexes verified/created successfully")
        else:
            logger.warning("Failed to create some MongoDB indexes")
    else:
        logger.error("Starting server without database connection")

    yield  # App runs here

    if client:
        client.close()
        app.state.mongo_client = None


def _configure_cors(app: FastAPI, origins: list[str]) -> None:
    # Cookies need credentials, which browsers refuse together with a wildcard origin
    if origins == ["*"]:
        allow_origins, allow_credentials = ["*"], False
        logger.warning(
            "CORS configured with wildcard origin ('*'). "
            "For production, set CORS_ORIGINS to specific domains"
        )
    else:
        allow_origins, allow_credentials = origins, True
        logger.info("CORS configured with specific origins", extra={"origins": origins})

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_credentials=allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application. Fails fast if configuration is unusable."""
    settings = settings or get_settings()

    app = FastAPI(
        title=SERVICE_NAME,
        description="Account management and finance advice API",
        version=VERSION,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.mongo_client = None
    app.state.mongo_database = settings.mongo_database

    _configure_cors(app, settings.cors_origins)
    register_exception_handlers(app)

    app.include_router(auth.router)
    app.include_router(advice.router)
    app.include_router(health.router)

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "service": SERVICE_NAME,
            "version": VERSION,
            "status": "running"
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 8000))
    # Application logs go through structured logging; uvicorn's access log would duplicate them
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=port,
        access_log=False
    )
