from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import DateTime, Index, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import JSON


def _json_type():
    return JSON().with_variant(JSONB(astext_type=Text()), "postgresql")


def new_order_id() -> str:
    return uuid.uuid4().hex


class Base(DeclarativeBase):
    pass


class OrderModel(Base):
    """One order document; the JSON columns keep the stored shape of the original order collection."""

    __tablename__ = "orders"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_order_id)
    customer_email: Mapped[str] = mapped_column(String(254), nullable=False)
    customer_info: Mapped[dict] = mapped_column(_json_type(), nullable=False)
    items: Mapped[list] = mapped_column(_json_type(), nullable=False)
    order_summary: Mapped[dict] = mapped_column(_json_type(), nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="pending")
    order_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


Index("ix_orders_customer_email", OrderModel.customer_email)
Index("ix_orders_order_date", OrderModel.order_date.desc())
Index("ix_orders_status", OrderModel.status)
