"""Shopping cart operations."""

import logging
from decimal import Decimal
from typing import Optional

from .cart_store import AddItem, CartStore, ClearCart, RemoveItem, UpdateQuantity
from .models import CartItem, CartState, OrderCreate, OrderLineCreate, Product
from .notifications import LoggingNotifier, Notifier

logger = logging.getLogger(__name__)

FREE_SHIPPING_THRESHOLD = Decimal("50")
SHIPPING_COST = Decimal("10")


class Cart:
    """Cart operations used by the catalog, product and cart views."""

    def __init__(self, store: CartStore, notifier: Optional[Notifier] = None) -> None:
        """
        Initialize the cart.

        Args:
            store: Store owning the cart state
            notifier: Sink for confirmation messages (default: log only)
        """
        self.store = store
        self.notifier = notifier or LoggingNotifier()

    @property
    def state(self) -> CartState:
        return self.store.state

    @property
    def items(self) -> list[CartItem]:
        return self.store.state.items

    @property
    def total(self) -> Decimal:
        return self.store.state.total

    @property
    def item_count(self) -> int:
        return self.store.state.item_count

    def add_item(self, product: Product, quantity: int = 1) -> None:
        logger.info(f"Adding product {product.id} to cart (qty: {quantity})")
        self.store.dispatch(AddItem(product, quantity))
        self.notifier.success(f"{product.name} added to cart!")

    def remove_item(self, item_id: int) -> None:
        item = self._find_line(item_id)
        if item is None:
            logger.warning(f"Cart line {item_id} not in cart")
            return
        self.store.dispatch(RemoveItem(item_id))
        self.notifier.success(f"{item.product.name} removed from cart!")

    def update_quantity(self, item_id: int, quantity: int) -> None:
        self.store.dispatch(UpdateQuantity(item_id, quantity))

    def clear_cart(self) -> None:
        self.store.dispatch(ClearCart())
        self.notifier.success("Cart cleared!")

    def is_in_cart(self, product_id: int) -> bool:
        return any(item.product.id == product_id for item in self.items)

    def get_item_quantity(self, product_id: int) -> int:
        for item in self.items:
            if item.product.id == product_id:
                return item.quantity
        return 0

    def _find_line(self, item_id: int) -> Optional[CartItem]:
        for item in self.items:
            if item.id == item_id:
                return item
        return None

    def shipping_cost(self) -> Decimal:
        """Shipping is free above the threshold."""
        return Decimal("0") if self.total > FREE_SHIPPING_THRESHOLD else SHIPPING_COST

    def final_total(self) -> Decimal:
        return self.total + self.shipping_cost()

    def checkout(self) -> bool:
        """
        Simulate checkout.

        No payment is taken: a non-empty cart is confirmed and cleared.

        Returns:
            True if the order was finalized, False for an empty cart
        """
        if not self.items:
            self.notifier.error("Add items to the cart before checking out")
            return False

        logger.info(f"Checking out {self.item_count} item(s), total {self.final_total()}")
        self.notifier.success("Order placed successfully!")
        self.clear_cart()
        return True

    def order_request(self, customer_name: str, customer_email: str) -> OrderCreate:
        """Build the order body for the current cart contents."""
        return OrderCreate(
            customer_name=customer_name,
            customer_email=customer_email,
            total_amount=self.total,
            items=[
                OrderLineCreate(product_id=item.product.id, quantity=item.quantity, price=item.product.price)
                for item in self.items
            ],
        )
