"""MCP Server for the storefront."""

import asyncio
import logging
from typing import Any, Optional

from mcp.server import Server
from mcp.types import Resource, TextContent, Tool
from pydantic import AnyUrl

from .api import StorefrontError
from .cart import Cart
from .cart_store import CartStore
from .config import Settings
from .formatting import format_date, format_price, status_label
from .models import Order, OrderStatus, ProductCreate
from .notifications import BufferedNotifier
from .storage import FileStorage
from .storefront import StorefrontClient

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("storefront-mcp-server")

# Initialize server
app = Server("storefront-mcp-server")

# Global state
settings: Settings
notifier: BufferedNotifier
client: StorefrontClient
cart: Cart


def setup(
    config: Settings,
    storefront: Optional[StorefrontClient] = None,
    shopping_cart: Optional[Cart] = None,
    sink: Optional[BufferedNotifier] = None,
) -> None:
    """Create the client and cart used by the tool handlers."""
    global settings, notifier, client, cart

    settings = config
    notifier = sink or BufferedNotifier()
    client = storefront or StorefrontClient.from_settings(config, notifier)
    cart = shopping_cart or Cart(CartStore(FileStorage(config.data_dir)), notifier)


def _order_lines(orders: list[Order]) -> list[str]:
    lines = []
    for order in orders:
        lines.append(f"\n#{order.id} - {order.customer_name} <{order.customer_email}>")
        lines.append(f"   Status: {status_label(order.status)}")
        lines.append(f"   Total: {format_price(order.total_amount)} ({order.items_count} item(s))")
        if order.created_at:
            lines.append(f"   Created: {format_date(order.created_at)}")
        if order.tracking_number:
            lines.append(f"   Tracking: {order.tracking_number}")
    return lines


def render_cart() -> str:
    """Render the cart as text."""
    if not cart.items:
        return "Your cart is empty"

    result_lines = [f"Shopping Cart ({cart.item_count} item(s)):\n"]
    for item in cart.items:
        result_lines.append(
            f"  - [line {item.id}] {item.product.name} x{item.quantity} "
            f"@ {format_price(item.product.price)} = {format_price(item.subtotal)}"
        )
    result_lines.append(f"\nSubtotal: {format_price(cart.total)}")
    shipping = cart.shipping_cost()
    result_lines.append(f"Shipping: {'Free' if not shipping else format_price(shipping)}")
    result_lines.append(f"Total: {format_price(cart.final_total())}")
    return "\n".join(result_lines)


@app.list_resources()
async def list_resources() -> list[Resource]:
    """List available resources."""
    return [
        Resource(
            uri=AnyUrl("storefront://cart"),
            name="Shopping Cart",
            mimeType="application/json",
            description="Current shopping cart contents",
        )
    ]


@app.read_resource()
async def read_resource(uri: AnyUrl) -> str:
    """Read a resource by URI."""
    if str(uri) == "storefront://cart":
        return cart.store.to_json()

    raise ValueError(f"Unknown resource: {uri}")


@app.list_tools()
async def list_tools() -> list[Tool]:
    """List available tools."""
    empty = {"type": "object", "properties": {}}
    line_id = {"type": "integer", "description": "Cart line ID (from storefront_get_cart)"}
    order_status = {
        "type": "string",
        "enum": [status.value for status in OrderStatus],
        "description": "New order status",
    }
    return [
        Tool(
            name="storefront_list_products",
            description="List the products in the catalog",
            inputSchema=empty,
        ),
        Tool(
            name="storefront_get_product",
            description="Get product details",
            inputSchema={
                "type": "object",
                "properties": {"product_id": {"type": "integer", "description": "Product ID"}},
                "required": ["product_id"],
            },
        ),
        Tool(
            name="storefront_add_to_cart",
            description="Add a product to the cart (adding it again increases the quantity)",
            inputSchema={
                "type": "object",
                "properties": {
                    "product_id": {"type": "integer", "description": "Product ID from the catalog"},
                    "quantity": {"type": "integer", "description": "Quantity to add (default: 1)", "default": 1},
                },
                "required": ["product_id"],
            },
        ),
        Tool(
            name="storefront_remove_from_cart",
            description="Remove a line from the cart",
            inputSchema={"type": "object", "properties": {"item_id": line_id}, "required": ["item_id"]},
        ),
        Tool(
            name="storefront_update_quantity",
            description="Set the quantity of a cart line (minimum 1)",
            inputSchema={
                "type": "object",
                "properties": {
                    "item_id": line_id,
                    "quantity": {"type": "integer", "description": "New quantity"},
                },
                "required": ["item_id", "quantity"],
            },
        ),
        Tool(name="storefront_get_cart", description="Get current shopping cart contents", inputSchema=empty),
        Tool(name="storefront_clear_cart", description="Empty the shopping cart", inputSchema=empty),
        Tool(
            name="storefront_checkout",
            description="Finalize the cart (simulated, no payment) and empty it",
            inputSchema=empty,
        ),
        Tool(
            name="storefront_place_order",
            description="Submit the cart as an order to the backend and empty it",
            inputSchema={
                "type": "object",
                "properties": {
                    "customer_name": {"type": "string", "description": "Customer name"},
                    "customer_email": {"type": "string", "description": "Customer email"},
                },
                "required": ["customer_name", "customer_email"],
            },
        ),
        Tool(name="storefront_list_orders", description="List orders", inputSchema=empty),
        Tool(name="storefront_health", description="Check backend health", inputSchema=empty),
        Tool(name="storefront_admin_list_orders", description="List all orders (admin)", inputSchema=empty),
        Tool(
            name="storefront_admin_update_order_status",
            description="Change the status of an order (admin)",
            inputSchema={
                "type": "object",
                "properties": {
                    "order_id": {"type": ["integer", "string"], "description": "Order ID"},
                    "status": order_status,
                },
                "required": ["order_id", "status"],
            },
        ),
        Tool(
            name="storefront_admin_create_product",
            description="Add a product to the catalog (admin)",
            inputSchema={
                "type": "object",
                "properties": {
                    "name": {"type": "string", "description": "Product name"},
                    "description": {"type": "string", "description": "Product description"},
                    "price": {"type": "number", "description": "Unit price"},
                    "stock": {"type": "integer", "description": "Units in stock"},
                    "category": {"type": "string", "description": "Category (optional)"},
                    "image_url": {"type": "string", "description": "Image URL (optional)"},
                },
                "required": ["name", "description", "price", "stock"],
            },
        ),
        Tool(name="storefront_metrics_dashboard", description="Show system metrics", inputSchema=empty),
        Tool(name="storefront_metrics_alerts", description="List active metric alerts", inputSchema=empty),
        Tool(name="storefront_traces", description="List recent request traces", inputSchema=empty),
    ]


async def run_tool(name: str, arguments: dict[str, Any]) -> str:
    """Execute a tool and return its text output."""
    if name == "storefront_list_products":
        products = await client.list_products()
        if not products:
            return "No products available"

        result_lines = [f"Found {len(products)} product(s):\n"]
        for i, product in enumerate(products, 1):
            result_lines.append(f"\n{i}. {product.name}")
            result_lines.append(f"   ID: {product.id}")
            result_lines.append(f"   Price: {format_price(product.price)}")
            result_lines.append(f"   Stock: {product.stock}")
            if cart.is_in_cart(product.id):
                result_lines.append(f"   In cart: {cart.get_item_quantity(product.id)}")
        return "\n".join(result_lines)

    elif name == "storefront_get_product":
        product = await client.get_product(int(arguments["product_id"]))
        result_lines = [
            product.name,
            f"ID: {product.id}",
            f"Price: {format_price(product.price)}",
            f"Stock: {product.stock}",
            f"Description: {product.description}",
        ]
        if product.created_at:
            result_lines.append(f"Added: {format_date(product.created_at)}")
        return "\n".join(result_lines)

    elif name == "storefront_add_to_cart":
        product_id = int(arguments["product_id"])
        quantity = int(arguments.get("quantity", 1))
        product = await client.get_product(product_id)
        cart.add_item(product, quantity)
        return f"Cart now holds {cart.get_item_quantity(product_id)} x {product.name}\n\n{render_cart()}"

    elif name == "storefront_remove_from_cart":
        item_id = int(arguments["item_id"])
        before = len(cart.items)
        cart.remove_item(item_id)
        if len(cart.items) == before:
            return f"❌ Line {item_id} is not in the cart"
        return render_cart()

    elif name == "storefront_update_quantity":
        cart.update_quantity(int(arguments["item_id"]), int(arguments["quantity"]))
        return render_cart()

    elif name == "storefront_get_cart":
        return render_cart()

    elif name == "storefront_clear_cart":
        cart.clear_cart()
        return render_cart()

    elif name == "storefront_checkout":
        total = cart.final_total()
        if cart.checkout():
            return f"Order total: {format_price(total)}"
        return "Checkout not completed"

    elif name == "storefront_place_order":
        if not cart.items:
            return "Your cart is empty"
        order = await client.create_order(
            cart.order_request(arguments["customer_name"], arguments["customer_email"])
        )
        cart.clear_cart()
        return "\n".join(["Order created:"] + _order_lines([order]))

    elif name == "storefront_list_orders":
        orders = await client.list_orders()
        if not orders:
            return "No orders found"
        return "\n".join([f"Found {len(orders)} order(s):"] + _order_lines(orders))

    elif name == "storefront_health":
        health = await client.health_check()
        return (
            f"Status: {health.status}\nUptime: {health.uptime:.0f}s\n"
            f"Version: {health.version}\nDatabase: {health.database}"
        )

    elif name == "storefront_admin_list_orders":
        orders = await client.admin_list_orders()
        if not orders:
            return "No orders found"
        return "\n".join([f"Found {len(orders)} order(s):"] + _order_lines(orders))

    elif name == "storefront_admin_update_order_status":
        status = OrderStatus(arguments["status"])
        order_id = arguments["order_id"]
        await client.admin_update_order_status(order_id, status)
        return f"✅ Order {order_id} is now {status_label(status)}"

    elif name == "storefront_admin_create_product":
        product = await client.create_product(
            ProductCreate(
                name=arguments["name"],
                description=arguments["description"],
                price=arguments["price"],
                stock=arguments["stock"],
                category=arguments.get("category"),
                image_url=arguments.get("image_url"),
            )
        )
        if product is None:
            return "Product submitted, but the backend did not return a valid product"
        return f"✅ Created product {product.id}: {product.name} ({format_price(product.price)}, stock {product.stock})"

    elif name == "storefront_metrics_dashboard":
        metrics = await client.metrics_dashboard()
        if not metrics:
            return "No metrics available"
        result_lines = ["System metrics:"]
        for key, value in metrics.items():
            if isinstance(value, dict):
                result_lines.append(f"  {key}:")
                result_lines.extend(f"    {sub}: {sub_value}" for sub, sub_value in value.items())
            else:
                result_lines.append(f"  {key}: {value}")
        return "\n".join(result_lines)

    elif name == "storefront_metrics_alerts":
        alerts = await client.metrics_alerts()
        if not alerts:
            return "No active alerts"
        return "\n".join(f"[{alert.level.upper()}] {alert.metric}: {alert.message} ({alert.value})" for alert in alerts)

    elif name == "storefront_traces":
        traces = await client.traces_summary()
        if not traces:
            return f"No traces available. Full trace viewer: {settings.trace_viewer_url}"
        result_lines = [f"{len(traces)} trace(s) (viewer: {settings.trace_viewer_url}):"]
        for trace in traces:
            result_lines.append(
                f"  - {trace.trace_id} {trace.service_name} {trace.operation_name} "
                f"{trace.duration:.0f}ms [{trace.status}] {len(trace.spans)} span(s)"
            )
        return "\n".join(result_lines)

    return f"Unknown tool: {name}"


def _with_notifications(text: str) -> str:
    messages = notifier.drain()
    if not messages:
        return text
    marks = {"success": "✅", "error": "❌"}
    return "\n".join([text, ""] + [f"{marks[kind]} {message}" for kind, message in messages])


@app.call_tool()
async def call_tool(name: str, arguments: Any) -> list[TextContent]:
    """Handle tool calls."""
    try:
        text = await run_tool(name, arguments or {})
    except StorefrontError as e:
        logger.error(f"Tool {name} failed: {e}")
        text = f"Error: {e}"
    except Exception as e:
        logger.error(f"Error executing tool {name}: {e}", exc_info=True)
        text = f"Error: {str(e)}"

    return [TextContent(type="text", text=_with_notifications(text))]


async def main(config: Optional[Settings] = None) -> None:
    """Main entry point."""
    setup(config or Settings.from_env())

    logger.info(f"Backend: {settings.api_url}")
    logger.info(f"Cart data directory: {settings.data_dir}")
    logger.info("Starting Storefront MCP Server...")

    from mcp.server.stdio import stdio_server

    try:
        async with stdio_server() as (read_stream, write_stream):
            await app.run(
                read_stream,
                write_stream,
                app.create_initialization_options(),
            )
    finally:
        await client.close()


if __name__ == "__main__":
    asyncio.run(main())
