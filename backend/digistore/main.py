from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from starlette.middleware.sessions import SessionMiddleware
from supabase import Client

from .catalog import CatalogState
from .config import Settings, get_settings
from .logging_config import configure_logging
from .routers import admin, storefront
from .supabase_client import build_client


def create_app(settings: Optional[Settings] = None, db: Optional[Client] = None) -> FastAPI:
    """App factory; serve with ``uvicorn digistore.main:create_app --factory``."""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings.log_level)
        app.state.db = db or build_client(settings)
        yield

    app = FastAPI(title="Digistore", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.catalog_state = CatalogState()
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.session_secret,
        session_cookie="digistore_session",
        same_site="lax",
        https_only=settings.env == "production",
    )

    @app.get("/health")
    def healthcheck(request: Request):
        return {"status": "ok", "env": request.app.state.settings.env}

    app.include_router(storefront.router, tags=["storefront"])
    app.include_router(admin.router, prefix="/admin", tags=["admin"])
    return app
