"""Typed storefront endpoints."""

import logging
from typing import Any, Optional, Union

from pydantic import ValidationError

from .api import ApiClient, ApiError, InvalidPayloadError
from .config import Settings
from .models import (
    Alert,
    HealthStatus,
    Order,
    OrderCreate,
    OrderStatus,
    Product,
    ProductCreate,
    TraceSummary,
)
from .normalize import (
    extract_data,
    extract_orders,
    sanitize_alerts,
    sanitize_health,
    sanitize_order,
    sanitize_orders,
    sanitize_product,
    sanitize_products,
    sanitize_traces,
)
from .notifications import Notifier

logger = logging.getLogger(__name__)

OrderId = Union[int, str]


class StorefrontClient:
    """Client for the catalog, order, admin and metrics endpoints."""

    def __init__(self, api: ApiClient) -> None:
        self.api = api

    @classmethod
    def from_settings(cls, settings: Settings, notifier: Optional[Notifier] = None) -> "StorefrontClient":
        """Build a client for the configured backend."""
        return cls(ApiClient(settings.api_url, notifier=notifier, timeout=settings.timeout))

    async def close(self) -> None:
        await self.api.aclose()

    # Catalog

    async def list_products(self) -> list[Product]:
        """
        Fetch the catalog.

        Invalid records are dropped and a response that is not a list
        yields an empty catalog.
        """
        payload = await self.api.get("/products")
        products = sanitize_products(extract_data(payload))
        logger.info(f"Fetched {len(products)} product(s)")
        return products

    async def get_product(self, product_id: int) -> Product:
        """
        Fetch one product.

        Raises:
            ApiError: If the request fails
            InvalidPayloadError: If the product record is invalid
        """
        payload = await self.api.get(f"/products/{product_id}")
        product = sanitize_product(extract_data(payload))
        if product is None:
            raise InvalidPayloadError(f"Product {product_id} not found or invalid")
        return product

    async def create_product(self, data: ProductCreate) -> Optional[Product]:
        """Create a product; returns the stored product if the echo is valid."""
        payload = await self.api.post(
            "/products", json=data.model_dump(mode="json", by_alias=True, exclude_none=True)
        )
        return sanitize_product(extract_data(payload))

    # Orders

    async def list_orders(self) -> list[Order]:
        payload = await self.api.get("/orders")
        return sanitize_orders(extract_data(payload))

    async def create_order(self, data: OrderCreate) -> Order:
        payload = await self.api.post("/orders", json=data.model_dump(mode="json"))
        return sanitize_order(extract_data(payload))

    async def update_order_status(self, order_id: OrderId, status: OrderStatus) -> Any:
        return await self.api.put(f"/orders/{order_id}/status", json={"status": OrderStatus(status).value})

    # Health

    async def health_check(self) -> HealthStatus:
        """Report backend health, degrading to an error status on failure."""
        try:
            return sanitize_health(await self.api.get("/health"))
        except (ApiError, ValidationError) as e:
            logger.error(f"Health check failed: {e}")
            return HealthStatus(status="error", uptime=0, version="unknown", database="error")

    # Admin

    async def admin_list_orders(self) -> list[Order]:
        payload = await self.api.get("/admin/orders")
        return sanitize_orders(extract_orders(payload))

    async def admin_update_order_status(self, order_id: OrderId, status: OrderStatus) -> Any:
        return await self.api.patch(
            f"/admin/orders/{order_id}/status", json={"status": OrderStatus(status).value}
        )

    # Metrics

    async def metrics_dashboard(self) -> dict[str, Any]:
        """Fetch the raw metrics dashboard."""
        payload = await self.api.get("/metrics/dashboard")
        data = extract_data(payload)
        if not isinstance(data, dict):
            return {}
        system = data.get("system")
        return system if isinstance(system, dict) else data

    async def metrics_alerts(self) -> list[Alert]:
        return sanitize_alerts(await self.api.get("/metrics/alerts"))

    async def traces_summary(self) -> list[TraceSummary]:
        return sanitize_traces(await self.api.get("/metrics/traces/summary"))
