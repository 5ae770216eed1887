"""Display helpers for prices, dates and order statuses."""

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from .models import OrderStatus

STATUS_LABELS = {
    OrderStatus.PENDING: "Pending",
    OrderStatus.CONFIRMED: "Confirmed",
    OrderStatus.PROCESSING: "Processing",
    OrderStatus.SHIPPED: "Shipped",
    OrderStatus.DELIVERED: "Delivered",
    OrderStatus.CANCELLED: "Cancelled",
}


def format_price(price: Any) -> str:
    """Format a price in Brazilian reais, e.g. `R$ 1.234,56`."""
    if isinstance(price, bool) or not isinstance(price, (int, float, Decimal)):
        return "R$ 0,00"
    amount = Decimal(str(price))
    if not amount.is_finite() or amount < 0:
        return "R$ 0,00"

    amount = amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    text = f"{amount:,.2f}"
    # Swap separators: 1,234.56 -> 1.234,56
    text = text.replace(",", "_").replace(".", ",").replace("_", ".")
    return f"R$ {text}"


def format_date(value: Any) -> str:
    """Format an ISO timestamp as `dd/mm/YYYY HH:MM`."""
    if not value:
        return "Invalid date"
    try:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return "Invalid date"
    return parsed.strftime("%d/%m/%Y %H:%M")


def status_label(status: Any) -> str:
    """Human-readable order status; unknown values are shown as given."""
    try:
        return STATUS_LABELS[OrderStatus(status)]
    except ValueError:
        return str(status)
