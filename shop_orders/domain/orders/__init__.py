from shop_orders.domain.orders.aggregates import (
    CustomerInfo,
    Order,
    OrderLineItem,
    OrderPage,
    OrderStatus,
    OrderSummary,
    OrderSummaryView,
    round2,
)
from shop_orders.domain.orders.aggregator import OrderAggregator
from shop_orders.domain.orders.errors import (
    Conflict,
    EmptyOrder,
    IllegalTransition,
    InvalidOrderData,
    NotFound,
    OrderError,
    ValidationFailed,
    describe_error,
)
from shop_orders.domain.orders.validation import ValidationResult, validate_submission

__all__ = [
    "Conflict",
    "CustomerInfo",
    "EmptyOrder",
    "IllegalTransition",
    "InvalidOrderData",
    "NotFound",
    "Order",
    "OrderAggregator",
    "OrderError",
    "OrderLineItem",
    "OrderPage",
    "OrderStatus",
    "OrderSummary",
    "OrderSummaryView",
    "ValidationFailed",
    "ValidationResult",
    "describe_error",
    "round2",
    "validate_submission",
]
