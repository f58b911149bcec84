"""
Cart commands and the pure transition function.

Every cart mutation is one of the command types below, folded over CartState
by apply(). Commands are plain values, so a session can be audited or
replayed without the engine.
"""
from dataclasses import dataclass, replace
from functools import reduce
from typing import Iterable, Union

from .models import CartState, LineItem, item_key


@dataclass(frozen=True)
class SetCart:
    """Replace all items (used when restoring from storage)."""
    items: tuple[LineItem, ...]


@dataclass(frozen=True)
class AddItem:
    product: dict
    quantity: int
    size: str
    color: str = ""


@dataclass(frozen=True)
class UpdateQuantity:
    product_id: str
    size: str
    color: str
    quantity: int


@dataclass(frozen=True)
class RemoveItem:
    product_id: str
    size: str
    color: str = ""


@dataclass(frozen=True)
class ClearCart:
    pass


@dataclass(frozen=True)
class ClearBrand:
    brand_name: str


CartCommand = Union[SetCart, AddItem, UpdateQuantity, RemoveItem, ClearCart, ClearBrand]


def _add(state: CartState, command: AddItem) -> CartState:
    new_item = LineItem.from_product(command.product, command.quantity, command.size, command.color)
    existing = state.find(new_item.key)

    if existing is None:
        return CartState(items=state.items + (new_item,))

    merged = replace(existing, quantity=existing.quantity + command.quantity)
    return CartState(items=tuple(merged if item is existing else item for item in state.items))


def _update(state: CartState, command: UpdateQuantity) -> CartState:
    key = item_key(command.product_id, command.size, command.color)

    if command.quantity <= 0:
        return CartState(items=tuple(item for item in state.items if item.key != key))

    return CartState(items=tuple(
        replace(item, quantity=command.quantity) if item.key == key else item
        for item in state.items
    ))


def apply(state: CartState, command: CartCommand) -> CartState:
    """Return the state after command. Never mutates state; unknown keys are no-ops."""
    if isinstance(command, SetCart):
        return CartState(items=tuple(command.items))

    if isinstance(command, AddItem):
        return _add(state, command)

    if isinstance(command, UpdateQuantity):
        return _update(state, command)

    if isinstance(command, RemoveItem):
        key = item_key(command.product_id, command.size, command.color)
        return CartState(items=tuple(item for item in state.items if item.key != key))

    if isinstance(command, ClearCart):
        return CartState()

    if isinstance(command, ClearBrand):
        return CartState(items=tuple(
            item for item in state.items if item.brand_collection != command.brand_name
        ))

    raise TypeError(f"Unknown cart command: {type(command).__name__}")


def replay(commands: Iterable[CartCommand], state: CartState | None = None) -> CartState:
    """Fold a command sequence over state (empty cart by default)."""
    return reduce(apply, commands, state if state is not None else CartState())
