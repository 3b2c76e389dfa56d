from __future__ import annotations

from typing import Any

from shop_orders.core.config import DEFAULT_CURRENCY, DEFAULT_UNIT
from shop_orders.core.utils import as_utc
from shop_orders.domain.orders.aggregates import (
    CustomerInfo,
    Order,
    OrderLineItem,
    OrderStatus,
    OrderSummary,
    OrderSummaryView,
    format_order_number,
    round2,
    to_decimal,
)
from shop_orders.persistence.models import OrderModel

# Money leaves the process as JSON numbers so existing documents stay readable
# by other consumers. The submission limits in schemas.py keep every amount
# under 15 significant digits, so to_decimal(float) gives back the same value.


def customer_to_document(customer: CustomerInfo) -> dict[str, Any]:
    return {
        "firstName": customer.first_name,
        "lastName": customer.last_name,
        "email": customer.email,
        "address": customer.address,
    }


def item_to_document(item: OrderLineItem) -> dict[str, Any]:
    return {
        "productId": item.product_id,
        "productName": item.product_name,
        "categoryId": item.category_id,
        "categoryName": item.category_name,
        "price": float(item.unit_price),
        "quantity": item.quantity,
        "unit": item.unit,
        "totalPrice": float(item.line_total),
    }


def summary_to_document(order: Order) -> dict[str, Any]:
    return {
        "totalItems": order.summary.total_items,
        "totalAmount": float(order.summary.total_amount),
        "currency": order.summary.currency,
    }


def order_to_row(order: Order) -> OrderModel:
    row = OrderModel(
        customer_email=order.customer.email,
        customer_info=customer_to_document(order.customer),
        items=[item_to_document(item) for item in order.items],
        order_summary=summary_to_document(order),
        status=order.status.value,
        order_date=order.order_date,
        updated_at=order.updated_at,
    )
    if order.id is not None:
        row.id = order.id
    return row


def customer_from_document(document: dict[str, Any]) -> CustomerInfo:
    return CustomerInfo(
        first_name=document["firstName"],
        last_name=document["lastName"],
        email=document["email"],
        address=document["address"],
    )


def item_from_document(document: dict[str, Any]) -> OrderLineItem:
    # Stored totalPrice is ignored; OrderLineItem.line_total recomputes it.
    return OrderLineItem(
        product_id=int(document["productId"]),
        product_name=document["productName"],
        category_id=int(document["categoryId"]),
        category_name=document["categoryName"],
        unit_price=to_decimal(document["price"]),
        quantity=int(document["quantity"]),
        unit=document.get("unit") or DEFAULT_UNIT,
    )


def summary_from_document(document: dict[str, Any]) -> OrderSummary:
    return OrderSummary(
        total_items=int(document["totalItems"]),
        total_amount=round2(to_decimal(document["totalAmount"])),
        currency=document.get("currency") or DEFAULT_CURRENCY,
    )


def order_from_row(row: OrderModel) -> Order:
    return Order(
        id=row.id,
        customer=customer_from_document(row.customer_info),
        items=tuple(item_from_document(item) for item in row.items),
        summary=summary_from_document(row.order_summary),
        status=OrderStatus(row.status),
        order_date=as_utc(row.order_date),
        updated_at=as_utc(row.updated_at),
    )


def summary_view_from_row(row: OrderModel) -> OrderSummaryView:
    """Listing projection that skips rebuilding the line items."""
    customer = row.customer_info
    return OrderSummaryView(
        order_number=format_order_number(row.id),
        customer_full_name=f"{customer['firstName']} {customer['lastName']}",
        total_items=int(row.order_summary["totalItems"]),
        total_amount=round2(to_decimal(row.order_summary["totalAmount"])),
        status=OrderStatus(row.status),
        order_date=as_utc(row.order_date),
    )
