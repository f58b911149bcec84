"""
Per-brand checkout simulation.

Checkout happens one brand at a time. Nothing is stored or sent anywhere:
a valid form yields a receipt and the brand's lines are cleared from the cart.
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, field_validator

from fashionhive.errors import ERROR_CHECKOUT_EMPTY_BRAND
from fashionhive.logging import get_logger, sanitize_string_for_logging
from .models import LineItem
from .service import CartEngine

logger = get_logger(__name__)


class CheckoutError(Exception):
    """Checkout could not be simulated (e.g. nothing to buy for the brand)."""


class CheckoutForm(BaseModel):
    """Delivery details collected at checkout."""
    full_name: str
    email: str
    phone: str
    city: str
    address: str
    postal_code: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("full_name", "email", "phone", "city", "address")
    @classmethod
    def required_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @field_validator("email")
    @classmethod
    def email_has_at(cls, v: str) -> str:
        if "@" not in v:
            raise ValueError("must be an email address")
        return v


@dataclass(frozen=True)
class CheckoutReceipt:
    brand: str
    items: tuple[LineItem, ...]
    total: Decimal
    customer: CheckoutForm
    placed_at: str

    @property
    def total_items(self) -> int:
        return sum(item.quantity for item in self.items)


def checkout_brand(engine: CartEngine, brand_name: str, form: CheckoutForm) -> CheckoutReceipt:
    """Snapshot the brand's lines and total, then clear them from the cart."""
    items = tuple(item for item in engine.items if item.brand_collection == brand_name)
    if not items:
        raise CheckoutError(ERROR_CHECKOUT_EMPTY_BRAND)

    receipt = CheckoutReceipt(
        brand=brand_name,
        items=items,
        total=engine.brand_total(brand_name),
        customer=form,
        placed_at=datetime.now(timezone.utc).isoformat(),
    )

    engine.clear_brand(brand_name)
    logger.info(
        f"Simulated checkout for {sanitize_string_for_logging(brand_name)}: "
        f"{receipt.total_items} units, total {receipt.total}"
    )
    return receipt
