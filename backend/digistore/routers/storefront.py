from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from ..catalog import CatalogClient
from ..config import Settings
from ..dependencies import finish, get_app_settings, get_catalog, get_gate, get_notifier, templates
from ..notifications import Notifier
from ..purchase import purchase_link
from ..session import SessionGate

router = APIRouter()


@router.get("/", response_class=HTMLResponse)
def storefront(
    request: Request,
    catalog: CatalogClient = Depends(get_catalog),
    notifier: Notifier = Depends(get_notifier),
    gate: SessionGate = Depends(get_gate),
    settings: Settings = Depends(get_app_settings),
):
    """
    Public product listing; each card links to a prefilled WhatsApp chat.
    """
    products, fetch_failed = catalog.refresh()
    items = [
        {"product": product, "buy_url": purchase_link(product, settings.whatsapp_contact)}
        for product in products
    ]
    response = templates.TemplateResponse(
        request,
        "storefront.html",
        {
            "items": items,
            "fetch_failed": fetch_failed,
            "contact": settings.whatsapp_contact,
            "is_admin": gate.is_admin,
            "messages": notifier.drain(),
        },
    )
    return finish(response, notifier)
