"""Cart models with Decimal-based pricing."""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Union

from fashionhive.services.money import multiply, parse_price, to_decimal

OTHER_BRAND = "Other"

Price = Union[str, int, float, None]


@dataclass(frozen=True)
class ProductSnapshot:
    """Catalog record as it looked when the item was added. Never refreshed."""
    id: str
    name: str = ""
    price: Price = None
    images: tuple[str, ...] = ()
    brand: str = ""
    category: str = ""

    @classmethod
    def from_catalog(cls, product: dict) -> "ProductSnapshot":
        """Build a snapshot from a catalog product record."""
        product_id = product.get("_id", product.get("id"))
        images = product.get("image_urls") or product.get("images") or []
        return cls(
            id=str(product_id) if product_id is not None else "",
            name=product.get("name") or "",
            price=product.get("price"),
            images=tuple(str(url) for url in images),
            brand=product.get("brandCollection") or product.get("brand") or "",
            category=product.get("category") or "",
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "images": list(self.images),
            "brand": self.brand,
            "category": self.category,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ProductSnapshot":
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            price=data.get("price"),
            images=tuple(data.get("images") or ()),
            brand=data.get("brand", ""),
            category=data.get("category", ""),
        )


@dataclass(frozen=True)
class LineItem:
    """One product variant (size + color) and its quantity."""
    product_id: str
    product: ProductSnapshot
    quantity: int
    size: str
    color: str = ""
    numeric_price: Decimal = Decimal("0")
    brand_collection: str = ""

    def __post_init__(self):
        # Normalize numeric fields (frozen, so bypass __setattr__)
        object.__setattr__(self, "numeric_price", to_decimal(self.numeric_price))
        object.__setattr__(self, "color", self.color or "")

    @classmethod
    def from_product(cls, product: dict, quantity: int, size: str, color: str = "") -> "LineItem":
        """Snapshot a catalog product; the numeric price is fixed here for good."""
        snapshot = ProductSnapshot.from_catalog(product)
        return cls(
            product_id=snapshot.id,
            product=snapshot,
            quantity=quantity,
            size=size,
            color=color or "",
            numeric_price=parse_price(snapshot.price),
            brand_collection=snapshot.brand,
        )

    @property
    def key(self) -> tuple[str, str, str]:
        """Identity key: (product_id, size, color)."""
        return (self.product_id, self.size, self.color)

    @property
    def line_total(self) -> Decimal:
        """numeric_price * quantity."""
        return multiply(self.numeric_price, self.quantity)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "product_id": self.product_id,
            "product": self.product.to_dict(),
            "quantity": self.quantity,
            "size": self.size,
            "color": self.color,
            "numeric_price": str(self.numeric_price),
            "brand_collection": self.brand_collection,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "LineItem":
        """Create from dictionary. Raises KeyError/ValueError on malformed data."""
        quantity = int(data["quantity"])
        size = str(data["size"])
        if quantity < 1 or not size:
            raise ValueError(f"Invalid stored line item: quantity={quantity}, size={size!r}")
        return cls(
            product_id=str(data["product_id"]),
            product=ProductSnapshot.from_dict(data["product"]),
            quantity=quantity,
            size=size,
            color=data.get("color") or "",
            numeric_price=to_decimal(data.get("numeric_price", 0)),
            brand_collection=data.get("brand_collection") or "",
        )


def item_key(product_id: Any, size: str, color: str | None = "") -> tuple[str, str, str]:
    """Identity key for lookups by (product_id, size, color)."""
    return (str(product_id), size, color or "")


@dataclass(frozen=True)
class CartState:
    """Ordered line items; every total is derived from them."""
    items: tuple[LineItem, ...] = field(default_factory=tuple)

    @property
    def total_items(self) -> int:
        """Total number of units in cart."""
        return sum(item.quantity for item in self.items)

    @property
    def total_price(self) -> Decimal:
        """Sum of numeric_price * quantity over all items."""
        return sum((item.line_total for item in self.items), Decimal("0"))

    def find(self, key: tuple[str, str, str]) -> LineItem | None:
        return next((item for item in self.items if item.key == key), None)

    def to_dict(self) -> dict:
        """Summary for display and JSON output."""
        return {
            "items": [item.to_dict() for item in self.items],
            "total_items": self.total_items,
            "total_price": str(self.total_price),
        }
