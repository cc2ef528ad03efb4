from urllib.parse import parse_qs, urlparse

from digistore.models import Product
from digistore.purchase import purchase_link, purchase_message


def _product(**overrides) -> Product:
    values = {"id": "p1", "title": "E-book", "description": "Guide", "image": "", "price": "$9"}
    values.update(overrides)
    return Product(**values)


def test_message_mentions_title_and_price():
    assert purchase_message(_product()) == (
        'Hi! I\'m interested in purchasing "E-book" for $9. Could you please provide more details?'
    )


def test_link_targets_contact_and_round_trips_message():
    product = _product(title="Tips & Tricks #1", price="€5 / 10%")

    link = purchase_link(product, "15550100000")

    parsed = urlparse(link)
    assert (parsed.scheme, parsed.netloc, parsed.path) == ("https", "wa.me", "/15550100000")
    assert parse_qs(parsed.query)["text"] == [purchase_message(product)]


def test_link_encodes_like_encode_uri_component():
    link = purchase_link(_product(title="A B", price="$1"), "1")

    text = link.split("?text=", 1)[1]
    assert text.startswith("Hi!%20I'm%20interested")
    assert "%22A%20B%22" in text
    assert "%241" in text
    assert "+" not in text
