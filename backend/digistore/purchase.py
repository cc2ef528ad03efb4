from urllib.parse import quote

from .models import Product

WHATSAPP_BASE_URL = "https://wa.me"

# Characters JavaScript's encodeURIComponent leaves untouched besides alphanumerics.
_URI_COMPONENT_SAFE = "-_.!~*'()"


def purchase_message(product: Product) -> str:
    return (
        f'Hi! I\'m interested in purchasing "{product.title}" for {product.price}. '
        "Could you please provide more details?"
    )


def purchase_link(product: Product, contact: str) -> str:
    """Deep link opening a chat with ``contact`` prefilled with the purchase message."""
    text = quote(purchase_message(product), safe=_URI_COMPONENT_SAFE)
    return f"{WHATSAPP_BASE_URL}/{contact}?text={text}"
