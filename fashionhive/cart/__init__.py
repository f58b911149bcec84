"""Cart package: models, commands, storage, engine and checkout."""
from .models import OTHER_BRAND, CartState, LineItem, ProductSnapshot
from .commands import (
    AddItem,
    ClearBrand,
    ClearCart,
    RemoveItem,
    SetCart,
    UpdateQuantity,
    apply,
    replay,
)
from .storage import CartStorage, FileStorage, MemoryStorage, RedisStorage
from .service import AddItemResult, CartEngine
from .checkout import CheckoutError, CheckoutForm, CheckoutReceipt, checkout_brand

__all__ = [
    "OTHER_BRAND",
    "CartState",
    "LineItem",
    "ProductSnapshot",
    "AddItem",
    "ClearBrand",
    "ClearCart",
    "RemoveItem",
    "SetCart",
    "UpdateQuantity",
    "apply",
    "replay",
    "CartStorage",
    "FileStorage",
    "MemoryStorage",
    "RedisStorage",
    "AddItemResult",
    "CartEngine",
    "CheckoutError",
    "CheckoutForm",
    "CheckoutReceipt",
    "checkout_brand",
]
