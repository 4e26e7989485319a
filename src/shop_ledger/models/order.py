"""Order data model for shop sales."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum

from shop_ledger.models._fields import _pick
from shop_ledger.utils.date_utils import normalize_date, normalize_datetime
from shop_ledger.utils.decimal_utils import to_decimal


class OrderStatus(Enum):
    """Fulfillment status of an order."""

    PENDING = "Pending"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"

    @property
    def is_active(self) -> bool:
        """Cancelled orders are excluded from every financial total."""
        return self is not OrderStatus.CANCELLED


@dataclass
class Order:
    """A single customer purchase tracked through fulfillment.

    Profit is never stored; it is derived from the price and cost fields
    by the order calculator.

    Attributes:
        id: Document identifier in the store.
        external_order_id: Marketplace order reference (e.g., "ORD12345").
        order_date: Calendar date of the order, or None if the stored value
            could not be read.
        status: Fulfillment status.
        price: Amount charged to the customer.
        cost: Cost of goods for the order.
        shipping_cost: Shipping paid by the shop.
        additional_fees: Marketplace and payment fees.
        tracking_number: Optional carrier tracking reference.
        notes: Optional free-text notes.
        created_at: Store creation timestamp.
        updated_at: Store last-update timestamp.
    """

    id: str
    external_order_id: str
    order_date: date | None
    status: OrderStatus
    price: Decimal
    cost: Decimal = field(default_factory=lambda: Decimal("0"))
    shipping_cost: Decimal = field(default_factory=lambda: Decimal("0"))
    additional_fees: Decimal = field(default_factory=lambda: Decimal("0"))
    tracking_number: str | None = None
    notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_active(self) -> bool:
        """Whether the order counts toward revenue and expenses."""
        return self.status.is_active

    @property
    def total_expenses(self) -> Decimal:
        """Cost plus shipping plus fees."""
        return self.cost + self.shipping_cost + self.additional_fees

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "Order":
        """Create an Order from a store document.

        Accepts the store's camelCase field names or their snake_case
        equivalents. Dates are normalized; an unreadable order date becomes
        None rather than an error.

        Args:
            data: Dictionary containing order data.

        Returns:
            A new Order instance.

        Raises:
            KeyError: If the id or price is missing.
            ValueError: If the status or an amount is invalid.
        """
        status_str = str(_pick(data, "status", default="Pending"))
        try:
            status = OrderStatus(status_str)
        except ValueError:
            raise ValueError(f"Unknown order status: {status_str!r}") from None

        price = _pick(data, "orderPrice", "price")
        if price is None:
            raise KeyError("orderPrice")

        tracking = _pick(data, "trackingNumber", "tracking_number")
        notes = _pick(data, "notes")

        return cls(
            id=str(data["id"]),
            external_order_id=str(_pick(data, "etsyOrderId", "external_order_id", default="")),
            order_date=normalize_date(_pick(data, "orderDate", "order_date")),
            status=status,
            price=to_decimal(price),
            cost=to_decimal(_pick(data, "orderCost", "cost", default=0)),
            shipping_cost=to_decimal(_pick(data, "shippingCost", "shipping_cost", default=0)),
            additional_fees=to_decimal(_pick(data, "additionalFees", "additional_fees", default=0)),
            tracking_number=str(tracking) if tracking else None,
            notes=str(notes) if notes else None,
            created_at=normalize_datetime(_pick(data, "createdAt", "created_at")),
            updated_at=normalize_datetime(_pick(data, "updatedAt", "updated_at")),
        )

    def __repr__(self) -> str:
        return (
            f"Order(id={self.id!r}, external_order_id={self.external_order_id!r}, "
            f"status={self.status.value}, price={self.price})"
        )
