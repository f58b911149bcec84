"""Cart engine: state owner with write-through persistence."""
import json
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from fashionhive.errors import (
    ERROR_INVALID_QUANTITY,
    ERROR_MISSING_SIZE,
    MESSAGE_INVALID_QUANTITY,
    MESSAGE_ITEM_ADDED,
    MESSAGE_SELECT_SIZE,
)
from fashionhive.logging import get_logger, sanitize_string_for_logging
from .commands import (
    AddItem,
    CartCommand,
    ClearBrand,
    ClearCart,
    RemoveItem,
    SetCart,
    UpdateQuantity,
    apply,
)
from .models import OTHER_BRAND, CartState, LineItem
from .storage import CartStorage

logger = get_logger(__name__)


@dataclass(frozen=True)
class AddItemResult:
    """Outcome of CartEngine.add_item."""
    success: bool
    message: str
    total_items: int
    total_price: Decimal
    reason: Optional[str] = None


def serialize_items(items: tuple[LineItem, ...]) -> bytes:
    """Encode line items for storage. Totals are never stored."""
    return json.dumps([item.to_dict() for item in items]).encode("utf-8")


def deserialize_items(data: bytes) -> tuple[LineItem, ...]:
    """Decode stored line items. Raises ValueError/KeyError/TypeError on malformed data."""
    raw = json.loads(data)
    if not isinstance(raw, list):
        raise ValueError("Stored cart is not a list of items")

    items = tuple(LineItem.from_dict(entry) for entry in raw)
    if len({item.key for item in items}) != len(items):
        raise ValueError("Stored cart repeats a (product_id, size, color) key")
    return items


class CartEngine:
    """
    Owns one cart for one client session.

    Features:
    - Restores once from storage at construction; unreadable data means an empty cart
    - Every mutation goes through a command folded by commands.apply
    - Write-through: the item list is saved after every mutation, and a failed
      save never rolls back the in-memory state
    - Brand partitioning for per-brand checkout
    """

    def __init__(self, storage: CartStorage, restore: bool = True):
        self.storage = storage
        self._state = CartState()
        self.history: list[CartCommand] = []
        if restore:
            self._restore()

    # ==================== STATE ====================

    @property
    def state(self) -> CartState:
        return self._state

    @property
    def items(self) -> tuple[LineItem, ...]:
        return self._state.items

    @property
    def total_items(self) -> int:
        return self._state.total_items

    @property
    def total_price(self) -> Decimal:
        return self._state.total_price

    # ==================== PERSISTENCE ====================

    def _restore(self) -> None:
        try:
            data = self.storage.load()
        except Exception as e:
            logger.error(f"Failed to read saved cart: {e}", exc_info=True)
            return

        if not data:
            return

        try:
            items = deserialize_items(data)
        except (ValueError, KeyError, TypeError, RecursionError) as e:
            # Corrupted data - start with an empty cart
            logger.warning(f"Ignoring malformed saved cart: {e}")
            return

        self._state = apply(self._state, SetCart(items=items))
        logger.debug(f"Restored cart with {len(items)} line items")

    def _persist(self) -> None:
        try:
            saved = self.storage.save(serialize_items(self._state.items))
        except Exception as e:
            logger.error(f"Failed to save cart: {e}", exc_info=True)
            return

        if not saved:
            logger.warning("Cart save failed; in-memory cart remains authoritative")

    def dispatch(self, command: CartCommand) -> CartState:
        """Apply a command, record it and write the result through to storage."""
        self._state = apply(self._state, command)
        self.history.append(command)
        self._persist()
        return self._state

    # ==================== OPERATIONS ====================

    def add_item(self, product: dict, quantity: int = 1, size: str = "", color: str = "") -> AddItemResult:
        """Add a product variant, merging into an existing line with the same key."""
        if not size:
            return AddItemResult(
                success=False,
                message=MESSAGE_SELECT_SIZE,
                total_items=self.total_items,
                total_price=self.total_price,
                reason=ERROR_MISSING_SIZE,
            )
        if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity < 1:
            return AddItemResult(
                success=False,
                message=MESSAGE_INVALID_QUANTITY,
                total_items=self.total_items,
                total_price=self.total_price,
                reason=ERROR_INVALID_QUANTITY,
            )

        self.dispatch(AddItem(product=product, quantity=quantity, size=size, color=color or ""))
        return AddItemResult(
            success=True,
            message=MESSAGE_ITEM_ADDED,
            total_items=self.total_items,
            total_price=self.total_price,
        )

    def update_quantity(self, product_id: str, size: str, color: str, quantity: int) -> None:
        """Overwrite a line's quantity; quantity <= 0 removes the line."""
        self.dispatch(UpdateQuantity(product_id=str(product_id), size=size, color=color or "", quantity=quantity))

    def remove_item(self, product_id: str, size: str, color: str = "") -> None:
        self.dispatch(RemoveItem(product_id=str(product_id), size=size, color=color or ""))

    def clear_cart(self) -> None:
        self.dispatch(ClearCart())

    def clear_brand(self, brand_name: str) -> None:
        """Drop every line whose brand_collection equals brand_name exactly."""
        logger.info(f"Clearing cart items for brand {sanitize_string_for_logging(brand_name)}")
        self.dispatch(ClearBrand(brand_name=brand_name))

    # ==================== DERIVED VIEWS ====================

    def group_by_brand(self) -> dict[str, list[LineItem]]:
        """Items partitioned by brand, items without one under "Other"."""
        grouped: dict[str, list[LineItem]] = {}
        for item in self._state.items:
            grouped.setdefault(item.brand_collection or OTHER_BRAND, []).append(item)
        return grouped

    def brand_total(self, brand_name: str) -> Decimal:
        """Total of the lines whose brand_collection equals brand_name."""
        return sum(
            (item.line_total for item in self._state.items if item.brand_collection == brand_name),
            Decimal("0"),
        )

    def get_cart_summary(self) -> dict:
        """Cart summary with per-brand totals."""
        if not self._state.items:
            return {"is_empty": True, "total_items": 0, "total_price": Decimal("0"), "brands": []}

        return {
            "is_empty": False,
            "total_items": self.total_items,
            "total_price": self.total_price,
            "brands": [
                {
                    "brand": brand,
                    "items": len(items),
                    "total": sum((item.line_total for item in items), Decimal("0")),
                }
                for brand, items in self.group_by_brand().items()
            ],
        }
