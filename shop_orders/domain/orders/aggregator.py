from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Callable

from shop_orders.core.config import DEFAULT_CURRENCY, DEFAULT_UNIT, Settings, TransitionPolicy, get_settings
from shop_orders.core.utils import now_utc
from shop_orders.domain.orders.aggregates import (
    CustomerInfo,
    Order,
    OrderLineItem,
    OrderStatus,
    OrderSummary,
    OrderSummaryView,
    round2,
)
from shop_orders.domain.orders.errors import EmptyOrder, IllegalTransition, InvalidOrderData
from shop_orders.domain.orders.lifecycle import allowed_targets, can_transition, parse_status
from shop_orders.domain.orders.validation import ValidationResult, validate_submission


@dataclass(frozen=True)
class OrderAggregator:
    """
    Builds orders from validated submissions and guards their status changes.

    Holds configuration only. Every method works on the values it is given
    and returns new values, so one instance can serve any number of callers.
    """

    currency: str = DEFAULT_CURRENCY
    default_unit: str = DEFAULT_UNIT
    transition_policy: TransitionPolicy = "monotonic"
    clock: Callable[[], datetime] = now_utc

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> OrderAggregator:
        settings = settings or get_settings()
        return cls(
            currency=settings.currency,
            default_unit=settings.default_unit,
            transition_policy=settings.transition_policy,
        )

    def validate(self, customer_info: Any, line_items: Any) -> ValidationResult:
        return validate_submission(customer_info, line_items, default_unit=self.default_unit)

    def build_order(self, customer: CustomerInfo, items: Sequence[OrderLineItem]) -> Order:
        if not items:
            raise EmptyOrder()
        if not isinstance(customer, CustomerInfo):
            raise InvalidOrderData("build_order needs the customer returned by validate()")
        if not all(isinstance(item, OrderLineItem) for item in items):
            raise InvalidOrderData("build_order needs the line items returned by validate()")

        total_items = 0
        total_amount = Decimal("0")
        try:
            for item in items:
                total_items += item.quantity
                total_amount += item.line_total
            total_amount = round2(total_amount)
        except InvalidOperation as exc:
            raise InvalidOrderData("order amounts exceed the supported precision") from exc

        now = self.clock()
        return Order(
            customer=customer,
            items=tuple(items),
            summary=OrderSummary(
                total_items=total_items,
                total_amount=total_amount,
                currency=self.currency,
            ),
            status=OrderStatus.PENDING,
            order_date=now,
            updated_at=now,
        )

    def build_from_result(self, result: ValidationResult) -> Order:
        if not result.valid or result.customer is None:
            raise InvalidOrderData("build_order called with a submission that failed validation")
        return self.build_order(result.customer, result.items)

    def allowed_transitions(self, order: Order) -> list[OrderStatus]:
        return allowed_targets(order.status, self.transition_policy)

    def transition(self, order: Order, new_status: OrderStatus | str) -> Order:
        target = parse_status(new_status)
        if target is None or not can_transition(order.status, target, self.transition_policy):
            raise IllegalTransition(
                current=order.status.value,
                requested=target.value if target is not None else str(new_status),
                allowed=[status.value for status in self.allowed_transitions(order)],
            )
        return replace(order, status=target, updated_at=self.clock())

    def cancel(self, order: Order) -> Order:
        return self.transition(order, OrderStatus.CANCELLED)

    def summarize(self, order: Order) -> OrderSummaryView:
        return OrderSummaryView(
            order_number=order.order_number,
            customer_full_name=order.customer.full_name,
            total_items=order.summary.total_items,
            total_amount=order.summary.total_amount,
            status=order.status,
            order_date=order.order_date,
        )
