from pathlib import Path
from typing import Optional

from fastapi import Depends, Request
from fastapi.responses import RedirectResponse
from fastapi.templating import Jinja2Templates
from starlette.responses import Response
from supabase import Client

from .catalog import CatalogClient, CatalogState
from .config import Settings
from .notifications import Notifier
from .session import CookieStorage, SessionGate

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent / "templates"))


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_db(request: Request) -> Client:
    return request.app.state.db


def get_catalog_state(request: Request) -> CatalogState:
    return request.app.state.catalog_state


def get_notifier(request: Request) -> Notifier:
    return Notifier.from_request(request)


def get_catalog(
    db: Client = Depends(get_db),
    state: CatalogState = Depends(get_catalog_state),
    notifier: Notifier = Depends(get_notifier),
    settings: Settings = Depends(get_app_settings),
) -> CatalogClient:
    return CatalogClient(db, state, notifier, table=settings.products_table)


def get_cookie_storage(request: Request) -> CookieStorage:
    return CookieStorage(request)


def get_gate(storage: CookieStorage = Depends(get_cookie_storage)) -> SessionGate:
    return SessionGate(storage)


def redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url, status_code=303)


def finish(response: Response, notifier: Notifier, storage: Optional[CookieStorage] = None) -> Response:
    """Write pending flash messages and session changes onto the response."""
    if storage is not None:
        storage.apply(response)
    notifier.persist()
    return response
