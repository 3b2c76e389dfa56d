from __future__ import annotations

from datetime import datetime

from sqlalchemy import desc, func, select, update
from sqlalchemy.orm import Session

from shop_orders.domain.orders.aggregates import Order, OrderStatus, OrderSummaryView
from shop_orders.domain.orders.errors import Conflict, NotFound
from shop_orders.domain.orders.projections import order_from_row, order_to_row, summary_view_from_row
from shop_orders.persistence.models import OrderModel


class OrderStore:
    """Order documents keyed by an opaque id; the store owns id assignment."""

    def __init__(self, session: Session):
        self.session = session

    def _get_row(self, order_id: str) -> OrderModel | None:
        # populate_existing: a status may have changed since this session last loaded the row.
        stmt = select(OrderModel).where(OrderModel.id == order_id).execution_options(populate_existing=True)
        return self.session.scalar(stmt)

    def create(self, order: Order) -> str:
        row = order_to_row(order)
        self.session.add(row)
        self.session.flush()
        return row.id

    def find_by_id(self, order_id: str) -> Order:
        row = self._get_row(order_id)
        if row is None:
            raise NotFound(order_id)
        return order_from_row(row)

    def find_by_email(self, email: str) -> list[Order]:
        stmt = (
            select(OrderModel)
            .where(OrderModel.customer_email == email.strip().lower())
            .order_by(desc(OrderModel.order_date), desc(OrderModel.id))
        )
        return [order_from_row(row) for row in self.session.scalars(stmt).all()]

    def update_status(
        self,
        order_id: str,
        expected: OrderStatus,
        new: OrderStatus,
        updated_at: datetime,
    ) -> Order:
        # Conditional write: only succeeds while the stored status is still `expected`.
        stmt = (
            update(OrderModel)
            .where(OrderModel.id == order_id)
            .where(OrderModel.status == expected.value)
            .values(status=new.value, updated_at=updated_at)
            .execution_options(synchronize_session=False)
        )
        result = self.session.execute(stmt)
        if result.rowcount == 1:
            return order_from_row(self._get_row(order_id))

        row = self._get_row(order_id)
        if row is None:
            raise NotFound(order_id)
        raise Conflict(order_id, expected=expected.value, actual=row.status)

    def list(self, page: int, page_size: int) -> tuple[list[OrderSummaryView], int]:
        if page < 1 or page_size < 1:
            raise ValueError("page and page_size must be positive")

        total = self.session.scalar(select(func.count()).select_from(OrderModel)) or 0
        stmt = (
            select(OrderModel)
            .order_by(desc(OrderModel.order_date), desc(OrderModel.id))
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        rows = self.session.scalars(stmt).all()
        return [summary_view_from_row(row) for row in rows], int(total)
