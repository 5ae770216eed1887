"""Shared fixtures for storefront client tests."""

from decimal import Decimal

import httpx
import pytest

from storefront_client.api import ApiClient
from storefront_client.cart import Cart
from storefront_client.cart_store import CartStore
from storefront_client.models import Product
from storefront_client.notifications import BufferedNotifier
from storefront_client.storage import MemoryStorage
from storefront_client.storefront import StorefrontClient

BASE_URL = "https://api.test"


def make_product(product_id: int = 1, price: str = "25.00", stock: int = 5, name: str = "") -> Product:
    return Product(
        id=product_id,
        name=name or f"Product {product_id}",
        description="A product",
        price=Decimal(price),
        stock=stock,
    )


@pytest.fixture
def product_factory():
    return make_product


@pytest.fixture
def product():
    return make_product()


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def notifier():
    return BufferedNotifier()


@pytest.fixture
def store(storage):
    return CartStore(storage)


@pytest.fixture
def cart(store, notifier):
    return Cart(store, notifier)


class Router:
    """Maps (method, path) to canned responses and records requests."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], tuple[int, dict]] = {}
        self.requests: list[httpx.Request] = []

    def add(self, method: str, path: str, status_code: int = 200, **kwargs) -> None:
        self.routes[(method, path)] = (status_code, kwargs)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"error": "Not found"})
        status_code, kwargs = route
        return httpx.Response(status_code, **kwargs)


@pytest.fixture
def router():
    return Router()


@pytest.fixture
async def api(router, notifier):
    client = ApiClient(BASE_URL, notifier=notifier, transport=httpx.MockTransport(router))
    yield client
    await client.aclose()


@pytest.fixture
def storefront(api):
    return StorefrontClient(api)
