"""Data models for storefront entities."""

from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Optional, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, PlainSerializer


def _float_to_str(value: Any) -> Any:
    # JSON numbers come back as floats; going through str keeps Decimal exact
    if isinstance(value, float):
        return str(value)
    return value


def _money_to_json(value: Decimal) -> Union[float, str]:
    # Strings for values a float cannot hold exactly
    number = float(value)
    if Decimal(str(number)) == value:
        return number
    return str(value)


Money = Annotated[
    Decimal,
    BeforeValidator(_float_to_str),
    PlainSerializer(_money_to_json, return_type=Union[float, str], when_used="json"),
]


class OrderStatus(str, Enum):
    """Order lifecycle states (admin view adds processing and cancelled)."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class Product(BaseModel):
    """Represents a catalog product."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(gt=0, description="Product ID")
    name: str = Field(description="Product name")
    description: str = Field(description="Product description")
    price: Money = Field(ge=0, description="Unit price")
    stock: int = Field(ge=0, description="Units in stock")
    created_at: Optional[str] = Field(None, description="Creation timestamp")
    updated_at: Optional[str] = Field(None, description="Last update timestamp")


class CartItem(BaseModel):
    """Represents a line in the shopping cart."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(description="Local cart line ID")
    product: Product
    quantity: int = Field(ge=1, description="Quantity of the product")

    @property
    def subtotal(self) -> Decimal:
        return self.product.price * self.quantity


class CartState(BaseModel):
    """Represents the shopping cart."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    items: list[CartItem] = Field(default_factory=list, description="Cart lines")
    total: Money = Field(default=Decimal("0"), description="Total cart value")
    item_count: int = Field(default=0, alias="itemCount", description="Total number of units")


class Order(BaseModel):
    """Represents an order."""

    model_config = ConfigDict(frozen=True)

    id: Union[int, str] = Field(description="Order ID")
    customer_name: str = ""
    customer_email: str = ""
    total_amount: Money = Decimal("0")
    status: OrderStatus = OrderStatus.PENDING
    items_count: int = 0
    total_calculated: Money = Decimal("0")
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    tracking_number: Optional[str] = None
    shipping_address: Optional[str] = None


class ProductCreate(BaseModel):
    """Request body for creating a product."""

    name: str
    description: str
    price: Money = Field(ge=0)
    stock: int = Field(ge=0)
    category: Optional[str] = None
    image_url: Optional[str] = Field(None, serialization_alias="imageUrl")


class OrderLineCreate(BaseModel):
    """One line of a new order."""

    product_id: int
    quantity: int = Field(ge=1)
    price: Money


class OrderCreate(BaseModel):
    """Request body for creating an order."""

    customer_name: str
    customer_email: str
    total_amount: Money
    items: list[OrderLineCreate] = Field(default_factory=list)


class HealthStatus(BaseModel):
    """Backend health report."""

    model_config = ConfigDict(extra="allow")

    status: str = "unknown"
    uptime: float = 0
    version: str = "unknown"
    database: str = "unknown"


class Alert(BaseModel):
    """Metrics alert."""

    level: str = Field("info", description="info, warning or error")
    message: str = ""
    metric: str = ""
    value: float = 0


class TraceSummary(BaseModel):
    """Summary of one distributed trace."""

    trace_id: str
    spans: list[dict[str, Any]] = Field(default_factory=list)
    start_time: float = 0
    duration: float = 0
    service_name: str = "elven-api"
    operation_name: str = "unknown"
    status: str = "success"
