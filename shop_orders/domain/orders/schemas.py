from __future__ import annotations

from decimal import Decimal
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, StrictInt, StrictStr, field_validator

from shop_orders.domain.orders.aggregates import to_decimal

EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"

# Keeps every line total and order total exactly representable as a JSON number.
MAX_UNIT_PRICE = Decimal("1000000")
MAX_PRICE_PLACES = 4
MAX_QUANTITY = 10_000
MAX_LINE_ITEMS = 100


class OrderSubmission(BaseModel):
    """
    Envelope of an order request as the shopping frontend sends it.

    Only the outer shape is checked here; ``customerInfo`` and each entry
    of ``items`` go through their own models so every violation can be
    reported per field. ``orderSummary`` and per-item ``totalPrice`` are
    accepted for compatibility and never trusted.
    """

    model_config = ConfigDict(extra="ignore")

    customer_info: Any = Field(default=None, alias="customerInfo")
    items: Any = None
    order_summary: dict[str, Any] | None = Field(default=None, alias="orderSummary")


class CustomerInfoIn(BaseModel):
    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    first_name: StrictStr = Field(alias="firstName", min_length=2, max_length=50)
    last_name: StrictStr = Field(alias="lastName", min_length=2, max_length=50)
    email: StrictStr = Field(pattern=EMAIL_PATTERN)
    address: StrictStr = Field(min_length=10, max_length=200)

    @field_validator("email")
    @classmethod
    def _lower_email(cls, value: str) -> str:
        return value.lower()


class LineItemIn(BaseModel):
    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    product_id: StrictInt = Field(alias="productId", gt=0)
    product_name: StrictStr = Field(alias="productName", min_length=1)
    category_id: StrictInt = Field(alias="categoryId", gt=0)
    category_name: StrictStr = Field(alias="categoryName", min_length=1)
    unit_price: Decimal = Field(
        validation_alias=AliasChoices("unitPrice", "price"),
        gt=0,
        le=MAX_UNIT_PRICE,
        decimal_places=MAX_PRICE_PLACES,
        allow_inf_nan=False,
    )
    quantity: StrictInt = Field(ge=1, le=MAX_QUANTITY)
    unit: StrictStr | None = None

    @field_validator("unit_price", mode="before")
    @classmethod
    def _price_as_decimal(cls, value: Any) -> Any:
        if isinstance(value, bool):
            raise ValueError("booleans are not prices")
        if isinstance(value, float):
            return to_decimal(value)
        return value
