from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel

REQUIRED_FIELDS = ("title", "description", "image", "price")


# --- public.products ---
# id is a uuid assigned by the store; created_at defaults to now() and drives ordering.
class Product(BaseModel):
    id: str  # PRIMARY KEY
    title: str
    description: str = ""
    image: str = ""  # remote URL or data: URL
    price: str = ""  # free text, e.g. "$9"
    created_at: Optional[datetime] = None


class ProductFields(BaseModel):
    """The four columns an admin may write."""

    title: str = ""
    description: str = ""
    image: str = ""
    price: str = ""

    def missing(self) -> List[str]:
        return [name for name in REQUIRED_FIELDS if not getattr(self, name).strip()]

    def is_complete(self) -> bool:
        return not self.missing()

    def to_record(self) -> Dict[str, Any]:
        return self.model_dump(include=set(REQUIRED_FIELDS))

    @classmethod
    def from_product(cls, product: Product) -> "ProductFields":
        return cls(
            title=product.title,
            description=product.description,
            image=product.image,
            price=product.price,
        )
