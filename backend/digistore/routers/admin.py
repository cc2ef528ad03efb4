import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile, status
from fastapi.responses import HTMLResponse

from ..catalog import CatalogClient, Snapshot, find_product
from ..dependencies import (
    finish,
    get_catalog,
    get_cookie_storage,
    get_gate,
    get_notifier,
    redirect,
    templates,
)
from ..images import ImageUploadError, resolve_image
from ..models import ProductFields
from ..notifications import Notifier
from ..session import CookieStorage, SessionGate

logger = logging.getLogger(__name__)

router = APIRouter()

LOGIN_URL = "/admin/login"
DASHBOARD_URL = "/admin/dashboard"

MISSING_FIELDS_MESSAGE = "Please fill in all fields, including the image."


def _render_login(request: Request, notifier: Notifier, username: str = "", status_code: int = 200):
    response = templates.TemplateResponse(
        request,
        "login.html",
        {"username": username, "messages": notifier.drain()},
        status_code=status_code,
    )
    return finish(response, notifier)


def _render_dashboard(
    request: Request,
    catalog: CatalogClient,
    notifier: Notifier,
    snapshot: Optional[Snapshot] = None,
    form: Optional[ProductFields] = None,
    editing_id: Optional[str] = None,
    status_code: int = 200,
):
    if snapshot is None:
        # Error re-renders show the last fetch; a fresh worker has none yet.
        snapshot = catalog.state.snapshot() if catalog.state.loaded else catalog.refresh()
    products, fetch_failed = snapshot
    editing = find_product(products, editing_id) if editing_id else None
    if form is None:
        form = ProductFields.from_product(editing) if editing else ProductFields()
    response = templates.TemplateResponse(
        request,
        "dashboard.html",
        {
            "products": products,
            "fetch_failed": fetch_failed,
            "form": form,
            "editing_id": editing_id,
            "messages": notifier.drain(),
        },
        status_code=status_code,
    )
    return finish(response, notifier)


def _read_form(
    title: str,
    description: str,
    price: str,
    image: Optional[UploadFile],
    current_image: str,
) -> ProductFields:
    content = image.file.read() if image is not None else b""
    resolved = resolve_image(
        content,
        image.content_type if image is not None else None,
        image.filename if image is not None else None,
        current=current_image,
    )
    return ProductFields(title=title, description=description, image=resolved, price=price)


@router.get("")
def admin_root(gate: SessionGate = Depends(get_gate)):
    return redirect(DASHBOARD_URL if gate.is_admin else LOGIN_URL)


@router.get("/login", response_class=HTMLResponse)
def login_form(
    request: Request,
    gate: SessionGate = Depends(get_gate),
    notifier: Notifier = Depends(get_notifier),
):
    if gate.is_admin:
        return finish(redirect(DASHBOARD_URL), notifier)
    return _render_login(request, notifier)


@router.post("/login", response_class=HTMLResponse)
def login(
    request: Request,
    username: str = Form(default=""),
    password: str = Form(default=""),
    storage: CookieStorage = Depends(get_cookie_storage),
    gate: SessionGate = Depends(get_gate),
    notifier: Notifier = Depends(get_notifier),
):
    if gate.is_admin:
        return finish(redirect(DASHBOARD_URL), notifier)
    if gate.login(username, password):
        notifier.success("Welcome back, Admin!")
        return finish(redirect(DASHBOARD_URL), notifier, storage)
    notifier.error("Invalid credentials. Please try again.")
    # Username is kept, password is never echoed back.
    return _render_login(request, notifier, username=username, status_code=status.HTTP_401_UNAUTHORIZED)


@router.get("/logout", response_class=HTMLResponse)
def logout_confirm(
    request: Request,
    gate: SessionGate = Depends(get_gate),
    notifier: Notifier = Depends(get_notifier),
):
    if not gate.is_admin:
        return finish(redirect(LOGIN_URL), notifier)
    response = templates.TemplateResponse(
        request,
        "confirm.html",
        {
            "prompt": "Are you sure you want to logout?",
            "action": "/admin/logout",
            "confirm_label": "Logout",
            "messages": notifier.drain(),
        },
    )
    return finish(response, notifier)


@router.post("/logout")
def logout(
    confirm: str = Form(default=""),
    storage: CookieStorage = Depends(get_cookie_storage),
    gate: SessionGate = Depends(get_gate),
    notifier: Notifier = Depends(get_notifier),
):
    if not gate.is_admin:
        return finish(redirect(LOGIN_URL), notifier)
    if confirm != "yes":
        return finish(redirect(DASHBOARD_URL), notifier)
    gate.logout()
    notifier.success("Logged out successfully!")
    return finish(redirect(LOGIN_URL), notifier, storage)


@router.get("/dashboard", response_class=HTMLResponse)
def dashboard(
    request: Request,
    edit: Optional[str] = None,
    gate: SessionGate = Depends(get_gate),
    catalog: CatalogClient = Depends(get_catalog),
    notifier: Notifier = Depends(get_notifier),
):
    if not gate.is_admin:
        return finish(redirect(LOGIN_URL), notifier)
    snapshot = catalog.refresh()
    products, fetch_failed = snapshot
    if edit and find_product(products, edit) is None:
        if not fetch_failed:
            notifier.error("Product not found.")
        edit = None
    return _render_dashboard(request, catalog, notifier, snapshot=snapshot, editing_id=edit)


@router.post("/products", response_class=HTMLResponse)
def create_product(
    request: Request,
    title: str = Form(default=""),
    description: str = Form(default=""),
    price: str = Form(default=""),
    current_image: str = Form(default=""),
    image: Optional[UploadFile] = File(default=None),
    gate: SessionGate = Depends(get_gate),
    catalog: CatalogClient = Depends(get_catalog),
    notifier: Notifier = Depends(get_notifier),
):
    if not gate.is_admin:
        return finish(redirect(LOGIN_URL), notifier)
    try:
        fields = _read_form(title, description, price, image, current_image)
    except ImageUploadError as exc:
        notifier.error(str(exc))
        form = ProductFields(title=title, description=description, image=current_image, price=price)
        return _render_dashboard(request, catalog, notifier, form=form, status_code=status.HTTP_400_BAD_REQUEST)

    if not fields.is_complete():
        notifier.error(MISSING_FIELDS_MESSAGE)
        return _render_dashboard(request, catalog, notifier, form=fields, status_code=status.HTTP_400_BAD_REQUEST)

    if catalog.create(fields) is None:
        return _render_dashboard(request, catalog, notifier, form=fields, status_code=status.HTTP_502_BAD_GATEWAY)
    notifier.success("Product added successfully!")
    return finish(redirect(DASHBOARD_URL), notifier)


@router.post("/products/{product_id}", response_class=HTMLResponse)
def update_product(
    request: Request,
    product_id: str,
    title: str = Form(default=""),
    description: str = Form(default=""),
    price: str = Form(default=""),
    current_image: str = Form(default=""),
    image: Optional[UploadFile] = File(default=None),
    gate: SessionGate = Depends(get_gate),
    catalog: CatalogClient = Depends(get_catalog),
    notifier: Notifier = Depends(get_notifier),
):
    if not gate.is_admin:
        return finish(redirect(LOGIN_URL), notifier)
    try:
        fields = _read_form(title, description, price, image, current_image)
    except ImageUploadError as exc:
        notifier.error(str(exc))
        form = ProductFields(title=title, description=description, image=current_image, price=price)
        return _render_dashboard(
            request, catalog, notifier, form=form, editing_id=product_id, status_code=status.HTTP_400_BAD_REQUEST
        )

    if not fields.is_complete():
        notifier.error(MISSING_FIELDS_MESSAGE)
        return _render_dashboard(
            request, catalog, notifier, form=fields, editing_id=product_id, status_code=status.HTTP_400_BAD_REQUEST
        )

    if not catalog.update(product_id, fields):
        return _render_dashboard(
            request, catalog, notifier, form=fields, editing_id=product_id, status_code=status.HTTP_502_BAD_GATEWAY
        )
    notifier.success("Product updated successfully!")
    return finish(redirect(DASHBOARD_URL), notifier)


@router.get("/products/{product_id}/delete", response_class=HTMLResponse)
def delete_confirm(
    request: Request,
    product_id: str,
    gate: SessionGate = Depends(get_gate),
    catalog: CatalogClient = Depends(get_catalog),
    notifier: Notifier = Depends(get_notifier),
):
    if not gate.is_admin:
        return finish(redirect(LOGIN_URL), notifier)
    products, _ = catalog.refresh()
    product = find_product(products, product_id)
    if product is None:
        notifier.error("Product not found.")
        return finish(redirect(DASHBOARD_URL), notifier)
    response = templates.TemplateResponse(
        request,
        "confirm.html",
        {
            "prompt": f'Are you sure you want to delete "{product.title}"?',
            "action": f"/admin/products/{product.id}/delete",
            "confirm_label": "Delete",
            "messages": notifier.drain(),
        },
    )
    return finish(response, notifier)


@router.post("/products/{product_id}/delete")
def delete_product(
    product_id: str,
    confirm: str = Form(default=""),
    gate: SessionGate = Depends(get_gate),
    catalog: CatalogClient = Depends(get_catalog),
    notifier: Notifier = Depends(get_notifier),
):
    if not gate.is_admin:
        return finish(redirect(LOGIN_URL), notifier)
    if confirm != "yes":
        logger.info("Delete of %s not confirmed; nothing sent to the store", product_id)
        return finish(redirect(DASHBOARD_URL), notifier)
    if catalog.delete(product_id):
        notifier.success("Product deleted successfully!")
    return finish(redirect(DASHBOARD_URL), notifier)
