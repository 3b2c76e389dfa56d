from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from typing import Any

from pydantic import ValidationError
from sqlalchemy.orm import Session

from shop_orders.core.config import Settings, get_settings
from shop_orders.domain.orders.aggregates import Order, OrderPage, OrderStatus, OrderSummaryView, to_decimal
from shop_orders.domain.orders.aggregator import OrderAggregator
from shop_orders.domain.orders.errors import Conflict, ValidationFailed
from shop_orders.domain.orders.schemas import OrderSubmission
from shop_orders.persistence.store import OrderStore

logger = logging.getLogger(__name__)


def _claimed_total_differs(order_summary: dict[str, Any], computed: Decimal) -> bool:
    claimed = order_summary.get("totalAmount")
    if claimed is None:
        return False
    try:
        return to_decimal(claimed) != computed
    except (InvalidOperation, TypeError, ValueError):
        return True


class OrderService:
    """Request-handling layer: aggregator rules plus the order store, one session per request."""

    def __init__(
        self,
        session: Session,
        aggregator: OrderAggregator | None = None,
        settings: Settings | None = None,
    ):
        self.settings = settings or get_settings()
        self.aggregator = aggregator or OrderAggregator.from_settings(self.settings)
        self.store = OrderStore(session)

    def submit(self, payload: Any) -> Order:
        try:
            submission = OrderSubmission.model_validate(payload)
        except ValidationError as exc:
            raise ValidationFailed({"order": "order payload is malformed"}) from exc

        result = self.aggregator.validate(submission.customer_info, submission.items)
        if not result.valid:
            logger.info("order rejected: fields=%s", sorted(result.errors))
            result.raise_for_errors()

        order = self.aggregator.build_from_result(result)
        if submission.order_summary and _claimed_total_differs(submission.order_summary, order.summary.total_amount):
            logger.warning(
                "client order summary ignored: claimed_total=%s computed_total=%s",
                submission.order_summary.get("totalAmount"),
                order.summary.total_amount,
            )

        order_id = self.store.create(order)
        saved = self.store.find_by_id(order_id)
        logger.info(
            "order saved: order_number=%s total_items=%s total_amount=%s",
            saved.order_number,
            saved.summary.total_items,
            saved.summary.total_amount,
        )
        return saved

    def get(self, order_id: str) -> Order:
        return self.store.find_by_id(order_id)

    def orders_for_customer(self, email: str) -> list[OrderSummaryView]:
        return [self.aggregator.summarize(order) for order in self.store.find_by_email(email)]

    def list_orders(self, page: int = 1, page_size: int | None = None) -> OrderPage:
        page = max(page, 1)
        size = page_size or self.settings.default_page_size
        size = max(1, min(size, self.settings.max_page_size))
        views, total = self.store.list(page, size)
        return OrderPage(items=views, page=page, page_size=size, total=total)

    def change_status(self, order_id: str, status: OrderStatus | str) -> OrderSummaryView:
        attempts = self.settings.status_update_attempts
        attempt = 0
        while True:
            attempt += 1
            # Re-read on every attempt so the transition is checked against fresh state.
            current = self.store.find_by_id(order_id)
            updated = self.aggregator.transition(current, status)
            try:
                saved = self.store.update_status(
                    order_id,
                    expected=current.status,
                    new=updated.status,
                    updated_at=updated.updated_at,
                )
            except Conflict as exc:
                logger.warning(
                    "status update raced: order_id=%s attempt=%s/%s actual=%s",
                    order_id,
                    attempt,
                    attempts,
                    exc.actual,
                )
                if attempt >= attempts:
                    raise
                continue

            logger.info(
                "order status changed: order_number=%s from=%s to=%s",
                saved.order_number,
                current.status.value,
                saved.status.value,
            )
            return self.aggregator.summarize(saved)

    def cancel(self, order_id: str) -> OrderSummaryView:
        return self.change_status(order_id, OrderStatus.CANCELLED)
