"""Tests for the cart facade."""

from decimal import Decimal

from storefront_client.cart import Cart
from storefront_client.cart_store import CartStore
from storefront_client.storage import MemoryStorage


class TestCartOperations:
    def test_add_item_notifies(self, cart, notifier, product):
        cart.add_item(product, 2)
        cart.add_item(product)

        assert cart.get_item_quantity(product.id) == 3
        assert cart.total == Decimal("75.00")
        assert cart.item_count == 3
        assert len(cart.items) == 1
        assert notifier.drain() == [
            ("success", "Product 1 added to cart!"),
            ("success", "Product 1 added to cart!"),
        ]

    def test_remove_item_notifies(self, cart, notifier, product):
        cart.add_item(product)
        notifier.drain()

        cart.remove_item(cart.items[0].id)

        assert cart.items == []
        assert notifier.drain() == [("success", "Product 1 removed from cart!")]

    def test_remove_unknown_line_is_silent(self, cart, notifier, storage, product):
        cart.add_item(product)
        notifier.drain()
        before = storage.get("cart")

        cart.remove_item(999)

        assert len(cart.items) == 1
        assert notifier.drain() == []
        assert storage.get("cart") == before

    def test_update_quantity_is_silent(self, cart, notifier, product):
        cart.add_item(product)
        notifier.drain()

        cart.update_quantity(cart.items[0].id, 0)

        assert cart.items[0].quantity == 1
        assert notifier.drain() == []

    def test_clear_cart(self, cart, notifier, storage, product):
        cart.add_item(product)
        notifier.drain()

        cart.clear_cart()

        assert cart.items == []
        assert cart.total == 0
        assert storage.get("cart") is None
        assert notifier.drain() == [("success", "Cart cleared!")]

    def test_queries(self, cart, product_factory):
        cart.add_item(product_factory(1), 2)

        assert cart.is_in_cart(1)
        assert not cart.is_in_cart(2)
        assert cart.get_item_quantity(1) == 2
        assert cart.get_item_quantity(2) == 0

    def test_state_survives_restart(self, storage, product):
        Cart(CartStore(storage)).add_item(product, 4)

        reloaded = Cart(CartStore(storage))

        assert reloaded.get_item_quantity(product.id) == 4
        assert reloaded.total == Decimal("100")


class TestShippingAndCheckout:
    def test_shipping_charged_up_to_threshold(self, cart, product_factory):
        cart.add_item(product_factory(1, price="50.00"))

        assert cart.shipping_cost() == Decimal("10")
        assert cart.final_total() == Decimal("60.00")

    def test_free_shipping_above_threshold(self, cart, product_factory):
        cart.add_item(product_factory(1, price="50.01"))

        assert cart.shipping_cost() == 0
        assert cart.final_total() == Decimal("50.01")

    def test_checkout_empty_cart(self, cart, notifier):
        assert cart.checkout() is False
        assert notifier.drain() == [("error", "Add items to the cart before checking out")]

    def test_checkout_clears_cart(self, cart, notifier, storage, product):
        cart.add_item(product)
        notifier.drain()

        assert cart.checkout() is True

        assert cart.items == []
        assert storage.get("cart") is None
        assert ("success", "Order placed successfully!") in notifier.drain()

    def test_order_request(self, cart, product_factory):
        cart.add_item(product_factory(1, price="25.00"), 2)
        cart.add_item(product_factory(2, price="5.50"))

        order = cart.order_request("Ana", "ana@example.com")

        assert order.total_amount == Decimal("55.50")
        assert [(line.product_id, line.quantity, line.price) for line in order.items] == [
            (1, 2, Decimal("25.00")),
            (2, 1, Decimal("5.50")),
        ]
        assert order.model_dump(mode="json")["total_amount"] == 55.5


def test_default_notifier_logs(caplog, product):
    cart = Cart(CartStore(MemoryStorage()))

    with caplog.at_level("INFO"):
        cart.add_item(product)

    assert "Product 1 added to cart!" in caplog.text
