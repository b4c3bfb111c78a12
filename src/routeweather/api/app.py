"""FastAPI app factory."""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from routeweather.api.deps import get_api_keys
from routeweather.api.places import router as places_router
from routeweather.api.routes import router as routes_router
from routeweather.api.saved_routes import router as saved_routes_router
from routeweather.config import ApiKeys, load_settings
from routeweather.db.engine import open_database
from routeweather.errors import ConfigLoadFailed
from routeweather.session import ControllerRegistry

logger = logging.getLogger(__name__)


def is_dev_mode() -> bool:
    return os.environ.get("ENVIRONMENT", "development") != "production"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = app.state.settings
    if not is_dev_mode() and not settings.database_url:
        raise ConfigLoadFailed("DATABASE_URL must be set in production")

    engine = open_database(settings, create_tables=is_dev_mode())
    if is_dev_mode():
        logger.info("Dev mode: tables created at startup")

    yield

    engine.dispose()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    load_dotenv()

    app = FastAPI(
        title="Route Weather API",
        description="Weather conditions along a driving route",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state.settings = load_settings()
    app.state.controllers = ControllerRegistry()

    if is_dev_mode():
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.include_router(routes_router, prefix="/api")
    app.include_router(saved_routes_router, prefix="/api")
    app.include_router(places_router, prefix="/api")

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.get("/api/config")
    def client_config(keys: ApiKeys = Depends(get_api_keys)):
        """Credentials the browser needs for map tiles and place search."""
        return {"mapbox_api_key": keys.mapbox, "google_api_key": keys.google}

    # Mount static files for web UI (if directory exists)
    web_dir = Path(__file__).resolve().parent.parent.parent.parent / "web"
    if web_dir.exists():
        app.mount("/", StaticFiles(directory=str(web_dir), html=True), name="web")

    return app
