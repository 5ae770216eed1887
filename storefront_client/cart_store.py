"""Cart state machine and its persistence."""

import itertools
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Optional, Union

from pydantic import ValidationError

from .models import CartItem, CartState, Product
from .storage import KeyValueStorage

logger = logging.getLogger(__name__)

CART_KEY = "cart"


@dataclass(frozen=True)
class AddItem:
    product: Product
    quantity: int = 1


@dataclass(frozen=True)
class RemoveItem:
    item_id: int


@dataclass(frozen=True)
class UpdateQuantity:
    item_id: int
    quantity: int


@dataclass(frozen=True)
class ClearCart:
    pass


@dataclass(frozen=True)
class LoadCart:
    state: CartState


CartAction = Union[AddItem, RemoveItem, UpdateQuantity, ClearCart, LoadCart]


def build_state(items: list[CartItem]) -> CartState:
    """Create a state whose totals are derived from its items."""
    total = sum((item.product.price * item.quantity for item in items), Decimal("0"))
    item_count = sum(item.quantity for item in items)
    return CartState(items=items, total=total, item_count=item_count)


def cart_reducer(state: CartState, action: CartAction, new_id: Callable[[], int]) -> CartState:
    """
    Apply one action to the cart state.

    Args:
        state: Current state (not modified)
        action: Action to apply
        new_id: Factory for local ids of new cart lines

    Returns:
        The next state
    """
    if isinstance(action, AddItem):
        quantity = max(1, action.quantity)
        if any(item.product.id == action.product.id for item in state.items):
            items = [
                item.model_copy(update={"quantity": item.quantity + quantity})
                if item.product.id == action.product.id
                else item
                for item in state.items
            ]
        else:
            items = [*state.items, CartItem(id=new_id(), product=action.product, quantity=quantity)]
        return build_state(items)

    if isinstance(action, RemoveItem):
        return build_state([item for item in state.items if item.id != action.item_id])

    if isinstance(action, UpdateQuantity):
        quantity = max(1, action.quantity)
        return build_state([
            item.model_copy(update={"quantity": quantity}) if item.id == action.item_id else item
            for item in state.items
        ])

    if isinstance(action, ClearCart):
        return CartState()

    if isinstance(action, LoadCart):
        return action.state

    raise TypeError(f"Unknown cart action: {action!r}")


class CartStore:
    """Owns the cart state and keeps the persisted snapshot in sync.

    State changes only through `dispatch`. Listeners registered with
    `subscribe` are called with the new state after every action.
    """

    def __init__(self, storage: KeyValueStorage, key: str = CART_KEY) -> None:
        """
        Initialize the store, restoring any persisted cart.

        Args:
            storage: Storage holding the cart slot
            key: Slot name
        """
        self.storage = storage
        self.key = key
        self._state = CartState()
        self._listeners: list[Callable[[CartState], None]] = []
        self._ids = itertools.count(1)

        saved = self._restore()
        if saved is not None:
            self.dispatch(LoadCart(saved))

    @property
    def state(self) -> CartState:
        return self._state

    def _next_id(self) -> int:
        return next(self._ids)

    def _restore(self) -> Optional[CartState]:
        raw = self.storage.get(self.key)
        if raw is None:
            return None
        try:
            state = CartState.model_validate_json(raw)
        except ValidationError as e:
            logger.warning(f"Discarding unreadable saved cart: {e}")
            self.storage.delete(self.key)
            return None
        logger.info(f"Restored cart with {len(state.items)} line(s)")
        return state

    def _persist(self) -> None:
        self.storage.set(self.key, self._state.model_dump_json(by_alias=True))

    def dispatch(self, action: CartAction) -> CartState:
        """Apply an action, persist the result and notify listeners."""
        self._state = cart_reducer(self._state, action, self._next_id)

        if isinstance(action, LoadCart):
            # Continue numbering above restored lines
            start = max((item.id for item in self._state.items), default=0) + 1
            self._ids = itertools.count(start)
        elif isinstance(action, ClearCart):
            self.storage.delete(self.key)
        else:
            self._persist()

        for listener in list(self._listeners):
            listener(self._state)
        return self._state

    def subscribe(self, listener: Callable[[CartState], None]) -> Callable[[], None]:
        """Register a listener; returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def to_json(self) -> str:
        """Serialize the current state in the persisted layout."""
        return self._state.model_dump_json(by_alias=True, indent=2)
