"""Validation and coercion of raw API payloads.

Products fail closed: a record that does not pass `validate_product` is
dropped. Orders fail open: missing or invalid fields fall back to defaults.
Catalog prices and stock feed purchase actions, order metadata is only
displayed.
"""

import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Optional, Union

from .models import Alert, HealthStatus, Order, OrderStatus, Product, TraceSummary

logger = logging.getLogger(__name__)


def _to_decimal(value: Any) -> Optional[Decimal]:
    """Parse a number or numeric string, None when not a finite number."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        text = str(value)
    elif isinstance(value, str):
        text = value.strip()
    else:
        return None

    try:
        number = Decimal(text)
    except InvalidOperation:
        return None

    if not number.is_finite():
        return None
    return number


def _is_integral(number: Decimal) -> bool:
    return number == number.to_integral_value()


def _first(raw: dict, *keys: str) -> Any:
    """Return the first non-empty value among the given key spellings."""
    for key in keys:
        value = raw.get(key)
        if value is not None and value != "":
            return value
    return None


def _timestamp(raw: dict, *keys: str) -> Optional[str]:
    value = _first(raw, *keys)
    return str(value) if value is not None else None


def extract_data(payload: Any) -> Any:
    """Unwrap a `{success, data}` envelope, falling back to the bare payload."""
    if isinstance(payload, dict) and payload.get("data"):
        return payload["data"]
    return payload


def validate_product(raw: Any) -> bool:
    """Check the shape and types of a raw product record."""
    if not isinstance(raw, dict):
        return False

    product_id = _to_decimal(raw.get("id"))
    if product_id is None or not _is_integral(product_id) or product_id <= 0:
        return False

    if not isinstance(raw.get("name"), str) or not isinstance(raw.get("description"), str):
        return False

    price = _to_decimal(raw.get("price"))
    if price is None or price < 0:
        return False

    stock = _to_decimal(raw.get("stock"))
    if stock is None or stock < 0 or not _is_integral(stock):
        return False

    return True


def sanitize_product(raw: Any) -> Optional[Product]:
    """
    Convert a raw product record into a Product.

    Args:
        raw: Record as decoded from the API response

    Returns:
        Product with canonical types, or None if the record is invalid
    """
    if not validate_product(raw):
        logger.warning(f"Invalid product received: {raw!r}")
        return None

    return Product(
        id=int(_to_decimal(raw["id"])),
        name=raw["name"].strip(),
        description=raw["description"].strip(),
        price=_to_decimal(raw["price"]),
        stock=int(_to_decimal(raw["stock"])),
        created_at=_timestamp(raw, "createdAt", "created_at"),
        updated_at=_timestamp(raw, "updatedAt", "updated_at"),
    )


def sanitize_products(payload: Any) -> list[Product]:
    """Sanitize a product listing, dropping invalid records."""
    if not isinstance(payload, list):
        logger.warning(f"Product listing is not a list: {type(payload).__name__}")
        return []

    products = []
    for raw in payload:
        product = sanitize_product(raw)
        if product is not None:
            products.append(product)

    dropped = len(payload) - len(products)
    if dropped:
        logger.warning(f"Dropped {dropped} invalid product(s) from listing")
    return products


def _order_id(value: Any) -> Union[int, str]:
    number = _to_decimal(value)
    if number is not None and _is_integral(number):
        return int(number)
    # Admin endpoints may issue opaque string ids
    if isinstance(value, str) and value.strip():
        return value.strip()
    return 0


def _order_status(value: Any) -> OrderStatus:
    if not value:
        return OrderStatus.PENDING
    try:
        return OrderStatus(str(value).lower())
    except ValueError:
        logger.warning(f"Unknown order status {value!r}, using pending")
        return OrderStatus.PENDING


def sanitize_order(raw: Any) -> Order:
    """Convert a raw order record into an Order, defaulting bad fields."""
    if not isinstance(raw, dict):
        raw = {}

    total_amount = _to_decimal(_first(raw, "total_amount", "totalAmount", "total"))
    if total_amount is None:
        total_amount = Decimal("0")

    total_calculated = _to_decimal(_first(raw, "total_calculated", "totalCalculated"))
    if total_calculated is None:
        total_calculated = total_amount

    items_count = _to_decimal(_first(raw, "items_count", "itemsCount"))
    if items_count is None and isinstance(raw.get("items"), list):
        items_count = Decimal(len(raw["items"]))

    name = _first(raw, "customer_name", "customerName")
    email = _first(raw, "customer_email", "customerEmail")
    tracking = _first(raw, "tracking_number", "trackingNumber")
    address = _first(raw, "shipping_address", "shippingAddress")

    return Order(
        id=_order_id(raw.get("id")),
        customer_name=str(name).strip() if name is not None else "",
        customer_email=str(email).strip() if email is not None else "",
        total_amount=total_amount,
        status=_order_status(raw.get("status")),
        items_count=int(items_count) if items_count is not None else 0,
        total_calculated=total_calculated,
        created_at=_timestamp(raw, "created_at", "createdAt"),
        updated_at=_timestamp(raw, "updated_at", "updatedAt"),
        tracking_number=str(tracking) if tracking is not None else None,
        shipping_address=str(address) if address is not None else None,
    )


def extract_orders(payload: Any) -> Any:
    """Find the order list in either the admin or the public response shape."""
    if isinstance(payload, dict) and "orders" in payload:
        return payload["orders"]
    data = extract_data(payload)
    if isinstance(data, dict) and "orders" in data:
        return data["orders"]
    return data


def sanitize_orders(payload: Any) -> list[Order]:
    """Sanitize an order listing; a non-list payload yields no orders."""
    if not isinstance(payload, list):
        logger.warning(f"Order listing is not a list: {type(payload).__name__}")
        return []

    orders = []
    for raw in payload:
        if not isinstance(raw, dict):
            logger.warning(f"Skipping non-object order entry: {raw!r}")
            continue
        orders.append(sanitize_order(raw))
    return orders


def sanitize_health(payload: Any) -> HealthStatus:
    """Read a health report, keeping any extra keys the backend sends."""
    data = extract_data(payload)
    if not isinstance(data, dict):
        return HealthStatus(status=str(data) if data else "unknown")

    fields = dict(data)
    uptime = _to_decimal(fields.get("uptime"))
    fields["uptime"] = float(uptime) if uptime is not None else 0
    for key in ("status", "version", "database"):
        if key in fields:
            fields[key] = str(fields[key])
    return HealthStatus.model_validate(fields)


def sanitize_alerts(payload: Any) -> list[Alert]:
    """Read metric alerts from a `{success, data: [...]}` response."""
    if not isinstance(payload, dict) or not payload.get("success"):
        return []
    data = payload.get("data")
    if not isinstance(data, list):
        return []

    alerts = []
    for raw in data:
        if not isinstance(raw, dict):
            continue
        value = _to_decimal(raw.get("value"))
        alerts.append(
            Alert(
                level=str(raw.get("level") or "info"),
                message=str(raw.get("message") or ""),
                metric=str(raw.get("metric") or ""),
                value=float(value) if value is not None else 0,
            )
        )
    return alerts


def sanitize_traces(payload: Any) -> list[TraceSummary]:
    """Read trace summaries; anything but a successful list yields none."""
    if not isinstance(payload, dict) or not payload.get("success"):
        return []
    data = payload.get("data")
    if not isinstance(data, list):
        return []

    traces = []
    for raw in data:
        if not isinstance(raw, dict) or not raw.get("traceID"):
            continue
        start_time = _to_decimal(raw.get("startTime"))
        duration = _to_decimal(raw.get("duration"))
        spans = raw.get("spans")
        traces.append(
            TraceSummary(
                trace_id=str(raw["traceID"]),
                spans=[s for s in spans if isinstance(s, dict)] if isinstance(spans, list) else [],
                start_time=float(start_time) if start_time is not None else 0,
                duration=float(duration) if duration is not None else 0,
                service_name=str(raw.get("serviceName") or "elven-api"),
                operation_name=str(raw.get("operationName") or "unknown"),
                status=str(raw.get("status") or "success"),
            )
        )
    return traces
