from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any

from shop_orders.core.utils import iso_utc

CENT = Decimal("0.01")


class OrderStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"

    @classmethod
    def values(cls) -> list[str]:
        return [status.value for status in cls]


def to_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # str() first so 8.9 becomes Decimal("8.9"), not its binary expansion.
    return Decimal(str(value))


def round2(value: Decimal) -> Decimal:
    """Round to cents, halves away from zero."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def format_money(value: Decimal) -> str:
    return format(round2(value), "f")


def format_order_number(order_id: str | None) -> str | None:
    if not order_id:
        return None
    return f"ORD-{order_id[-8:].upper()}"


@dataclass(frozen=True)
class CustomerInfo:
    first_name: str
    last_name: str
    email: str
    address: str

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


@dataclass(frozen=True)
class OrderLineItem:
    product_id: int
    product_name: str
    category_id: int
    category_name: str
    unit_price: Decimal
    quantity: int
    unit: str

    @property
    def line_total(self) -> Decimal:
        return round2(self.unit_price * self.quantity)


@dataclass(frozen=True)
class OrderSummary:
    total_items: int
    total_amount: Decimal
    currency: str


@dataclass(frozen=True)
class OrderSummaryView:
    order_number: str | None
    customer_full_name: str
    total_items: int
    total_amount: Decimal
    status: OrderStatus
    order_date: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "orderNumber": self.order_number,
            "customerName": self.customer_full_name,
            "totalItems": self.total_items,
            "totalAmount": format_money(self.total_amount),
            "status": self.status.value,
            "orderDate": iso_utc(self.order_date),
        }


@dataclass(frozen=True)
class Order:
    customer: CustomerInfo
    items: tuple[OrderLineItem, ...]
    summary: OrderSummary
    status: OrderStatus
    order_date: datetime
    updated_at: datetime
    id: str | None = None

    @property
    def order_number(self) -> str | None:
        return format_order_number(self.id)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "orderNumber": self.order_number,
            "customerInfo": {
                "firstName": self.customer.first_name,
                "lastName": self.customer.last_name,
                "fullName": self.customer.full_name,
                "email": self.customer.email,
                "address": self.customer.address,
            },
            "items": [
                {
                    "productId": item.product_id,
                    "productName": item.product_name,
                    "categoryId": item.category_id,
                    "categoryName": item.category_name,
                    "price": format_money(item.unit_price),
                    "quantity": item.quantity,
                    "unit": item.unit,
                    "totalPrice": format_money(item.line_total),
                }
                for item in self.items
            ],
            "orderSummary": {
                "totalItems": self.summary.total_items,
                "totalAmount": format_money(self.summary.total_amount),
                "currency": self.summary.currency,
            },
            "status": self.status.value,
            "orderDate": iso_utc(self.order_date),
            "updatedAt": iso_utc(self.updated_at),
        }


@dataclass
class OrderPage:
    items: list[OrderSummaryView] = field(default_factory=list)
    page: int = 1
    page_size: int = 10
    total: int = 0

    @property
    def total_pages(self) -> int:
        return -(-self.total // self.page_size)

    @property
    def has_next_page(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_prev_page(self) -> bool:
        return self.page > 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "orders": [view.to_dict() for view in self.items],
            "pagination": {
                "currentPage": self.page,
                "pageSize": self.page_size,
                "totalPages": self.total_pages,
                "totalOrders": self.total,
                "hasNextPage": self.has_next_page,
                "hasPrevPage": self.has_prev_page,
            },
        }
