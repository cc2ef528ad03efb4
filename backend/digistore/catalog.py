"""Catalog client: the only code that talks to the products table.

Every operation reports failures through the request's :class:`Notifier` and
returns a falsy value instead of raising. Every confirmed mutation is followed
by a full re-fetch that replaces the shared snapshot in :class:`CatalogState`;
the snapshot is never patched in place.
"""

import logging
from typing import Any, Iterable, List, Optional, Tuple

from postgrest.exceptions import APIError
from supabase import Client

from .models import Product, ProductFields
from .notifications import Notifier

logger = logging.getLogger(__name__)


Snapshot = Tuple[Tuple[Product, ...], bool]


class CatalogState:
    """Process-wide snapshot of the products table, newest first."""

    def __init__(self):
        # (products, last_fetch_failed), swapped as one object so readers never mix two fetches.
        self._snapshot: Snapshot = ((), False)
        self.loaded = False

    @property
    def products(self) -> Tuple[Product, ...]:
        return self._snapshot[0]

    @property
    def last_fetch_failed(self) -> bool:
        return self._snapshot[1]

    def snapshot(self) -> Snapshot:
        return self._snapshot

    def get(self, product_id: str) -> Optional[Product]:
        return find_product(self._snapshot[0], product_id)

    def replace(self, products: List[Product], failed: bool = False) -> Snapshot:
        self._snapshot = (tuple(products), failed)
        self.loaded = True
        return self._snapshot


def find_product(products: Iterable[Product], product_id: str) -> Optional[Product]:
    return next((p for p in products if p.id == product_id), None)


def _store_message(exc: APIError) -> str:
    return getattr(exc, "message", None) or str(exc)


class CatalogClient:
    def __init__(self, db: Client, state: CatalogState, notifier: Notifier, table: str = "products"):
        self.db = db
        self.state = state
        self.notifier = notifier
        self.table = table

    def _fail(self, action: str, error: Any) -> None:
        self.notifier.error(f"Error {action}: {error}")
        logger.error("Error %s: %s", action, error)

    def _unexpected(self, action: str) -> None:
        self.notifier.error(f"An unexpected error occurred while {action}.")
        logger.exception("Unexpected error %s", action)

    def list(self) -> List[Product]:
        """All products ordered by created_at descending; [] on any failure."""
        products, _ = self._fetch()
        return products

    def _fetch(self) -> Tuple[List[Product], bool]:
        try:
            resp = (
                self.db.table(self.table)
                .select("*")
                .order("created_at", desc=True)
                .execute()
            )
            error = getattr(resp, "error", None)
            if error:
                self._fail("fetching products", error)
                return [], True
            rows = getattr(resp, "data", None) or []
            return [Product.model_validate(row) for row in rows], False
        except APIError as exc:
            self._fail("fetching products", _store_message(exc))
        except Exception:
            self._unexpected("fetching products")
        return [], True

    def refresh(self) -> Snapshot:
        """Re-fetch and swap the shared snapshot; returns (products, failed)."""
        products, failed = self._fetch()
        logger.debug("Catalog snapshot refreshed: %d products", len(products))
        return self.state.replace(products, failed=failed)

    def create(self, fields: ProductFields) -> Optional[Product]:
        try:
            resp = self.db.table(self.table).insert(fields.to_record()).execute()
            error = getattr(resp, "error", None)
            if error:
                self._fail("adding product", error)
                return None
            data = getattr(resp, "data", None) or []
            if not data:
                self._fail("adding product", "no row was returned")
                return None
            created = Product.model_validate(data[0])
        except APIError as exc:
            self._fail("adding product", _store_message(exc))
            return None
        except Exception:
            self._unexpected("adding product")
            return None

        logger.info("Added product %s (%s)", created.id, created.title)
        self.refresh()
        return created

    def update(self, product_id: str, fields: ProductFields) -> bool:
        try:
            resp = (
                self.db.table(self.table)
                .update(fields.to_record())
                .eq("id", product_id)
                .execute()
            )
            error = getattr(resp, "error", None)
            if error:
                self._fail("updating product", error)
                return False
            data = getattr(resp, "data", None) or []
        except APIError as exc:
            self._fail("updating product", _store_message(exc))
            return False
        except Exception:
            self._unexpected("updating product")
            return False

        if not data:
            # The store answered without error but matched no row.
            self.notifier.error("Product not found.")
            logger.warning("Update matched no product with id %s", product_id)
            return False

        logger.info("Updated product %s", product_id)
        self.refresh()
        return True

    def delete(self, product_id: str) -> bool:
        try:
            resp = self.db.table(self.table).delete().eq("id", product_id).execute()
            error = getattr(resp, "error", None)
            if error:
                self._fail("deleting product", error)
                return False
            data = getattr(resp, "data", None) or []
        except APIError as exc:
            self._fail("deleting product", _store_message(exc))
            return False
        except Exception:
            self._unexpected("deleting product")
            return False

        if not data:
            self.notifier.error("Product not found.")
            logger.warning("Delete matched no product with id %s", product_id)
            return False

        logger.info("Deleted product %s", product_id)
        self.refresh()
        return True
