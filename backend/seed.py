#!/usr/bin/env python
"""
Seed script to insert demo products for local smoke tests.
"""
from __future__ import annotations

import argparse
import sys

from digistore.catalog import CatalogClient, CatalogState
from digistore.config import get_settings
from digistore.logging_config import configure_logging
from digistore.models import ProductFields
from digistore.notifications import Notifier
from digistore.supabase_client import get_supabase

DEMO_PRODUCTS = [
    ProductFields(
        title="E-book: Getting Started",
        description="A short guide for first-time buyers.",
        image="https://placehold.co/600x400/png?text=E-book",
        price="$9",
    ),
    ProductFields(
        title="Icon Pack",
        description="120 line icons in SVG and PNG.",
        image="https://placehold.co/600x400/png?text=Icon+Pack",
        price="$15",
    ),
]


def seed(count: int) -> int:
    settings = get_settings()
    notifier = Notifier()
    catalog = CatalogClient(get_supabase(), CatalogState(), notifier, table=settings.products_table)
    created = 0
    for fields in DEMO_PRODUCTS[:count]:
        if catalog.create(fields) is not None:
            created += 1
    errors = notifier.texts("error")
    if errors:
        raise RuntimeError("; ".join(errors))
    print(f"Seeded {created} demo products; catalog now holds {len(catalog.state.products)}")
    return created


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed demo products into the Supabase products table.")
    parser.add_argument("--count", type=int, default=len(DEMO_PRODUCTS), help="how many demo products to insert")
    args = parser.parse_args()
    configure_logging("INFO")
    try:
        seed(args.count)
    except Exception as exc:
        print(
            "Seed failed:",
            exc,
            "\nCommon fixes:",
            "\n- Ensure .env has real SUPABASE_URL and SUPABASE_KEY (not placeholders)."
            "\n- Check that the table's insert policy allows this key."
            "\n- Verify network access to Supabase.",
            file=sys.stderr,
        )
        sys.exit(1)
