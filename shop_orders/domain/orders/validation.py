from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ValidationError

from shop_orders.core.config import DEFAULT_UNIT
from shop_orders.domain.orders.aggregates import CustomerInfo, OrderLineItem
from shop_orders.domain.orders.errors import ValidationFailed
from shop_orders.domain.orders.schemas import MAX_LINE_ITEMS, CustomerInfoIn, LineItemIn

# public key -> (label, message when the value has the wrong type)
CUSTOMER_FIELDS: dict[str, tuple[str, str]] = {
    "firstName": ("first name", "must be text"),
    "lastName": ("last name", "must be text"),
    "email": ("email", "must be text"),
    "address": ("address", "must be text"),
}

ITEM_FIELDS: dict[str, tuple[str, str]] = {
    "productId": ("product id", "must be an integer"),
    "productName": ("product name", "must be text"),
    "categoryId": ("category id", "must be an integer"),
    "categoryName": ("category name", "must be text"),
    "unitPrice": ("unit price", "must be a number"),
    "quantity": ("quantity", "must be an integer"),
    "unit": ("unit", "must be text"),
}

FIELD_ALIASES = {"price": "unitPrice"}

MESSAGE_OVERRIDES = {
    ("email", "string_pattern_mismatch"): "email address is not valid",
    ("productId", "greater_than"): "product id must be positive",
    ("categoryId", "greater_than"): "category id must be positive",
}


@dataclass(frozen=True)
class ValidationResult:
    errors: dict[str, str] = field(default_factory=dict)
    customer: CustomerInfo | None = None
    items: tuple[OrderLineItem, ...] = ()

    @property
    def valid(self) -> bool:
        return not self.errors

    def raise_for_errors(self) -> None:
        if self.errors:
            raise ValidationFailed(self.errors)


def _message(key: str, label: str, wrong_type: str, error: dict[str, Any]) -> str:
    kind = error["type"]
    value = error.get("input")
    ctx = error.get("ctx") or {}

    if kind == "missing" or value is None or (isinstance(value, str) and not value.strip()):
        return f"{label} is required"
    if (key, kind) in MESSAGE_OVERRIDES:
        return MESSAGE_OVERRIDES[(key, kind)]
    if kind == "string_too_short":
        return f"{label} must contain at least {ctx['min_length']} characters"
    if kind == "string_too_long":
        return f"{label} cannot contain more than {ctx['max_length']} characters"
    if kind == "greater_than":
        return f"{label} must be greater than {ctx['gt']}"
    if kind == "greater_than_equal":
        return f"{label} must be at least {ctx['ge']}"
    if kind == "less_than_equal":
        return f"{label} cannot exceed {ctx['le']}"
    if kind == "decimal_max_places":
        return f"{label} cannot have more than {ctx['decimal_places']} decimal places"
    return f"{label} {wrong_type}"


def _check(
    model: type[BaseModel],
    value: Any,
    fields: dict[str, tuple[str, str]],
    prefix: str,
    block_key: str,
    block_message: str,
    errors: dict[str, str],
) -> BaseModel | None:
    try:
        return model.model_validate(value)
    except ValidationError as exc:
        for error in exc.errors():
            loc = error["loc"]
            if not loc:
                errors.setdefault(block_key, block_message)
                continue
            key = FIELD_ALIASES.get(str(loc[0]), str(loc[0]))
            label, wrong_type = fields.get(key, (key, "is not valid"))
            # First reported problem owns the field.
            errors.setdefault(f"{prefix}{key}", _message(key, label, wrong_type, error))
    return None


def validate_submission(
    customer_info: Any,
    line_items: Any,
    default_unit: str = DEFAULT_UNIT,
) -> ValidationResult:
    """
    Checks a raw submission against every customer and line-item rule.

    All fields are checked so the caller gets every problem at once; each
    field reports only the first rule it broke. A valid result carries the
    trimmed, typed customer and items that ``build_order`` expects.
    Client-supplied ``totalPrice`` and order summaries are ignored here and
    recomputed later.
    """
    errors: dict[str, str] = {}
    customer = _check(
        CustomerInfoIn,
        customer_info,
        CUSTOMER_FIELDS,
        prefix="",
        block_key="customerInfo",
        block_message="customer information is required",
        errors=errors,
    )

    items: list[LineItemIn] = []
    if isinstance(line_items, (str, bytes)) or not isinstance(line_items, Sequence):
        errors.setdefault("items", "items must be a list")
    elif not line_items:
        errors.setdefault("items", "an order must contain at least one item")
    elif len(line_items) > MAX_LINE_ITEMS:
        errors.setdefault("items", f"an order cannot contain more than {MAX_LINE_ITEMS} items")
    else:
        for index, raw in enumerate(line_items):
            item = _check(
                LineItemIn,
                raw,
                ITEM_FIELDS,
                prefix=f"items[{index}].",
                block_key=f"items[{index}]",
                block_message="item must be an object",
                errors=errors,
            )
            if item is not None:
                items.append(item)

    if errors:
        return ValidationResult(errors=errors)

    return ValidationResult(
        customer=CustomerInfo(
            first_name=customer.first_name,
            last_name=customer.last_name,
            email=customer.email,
            address=customer.address,
        ),
        items=tuple(
            OrderLineItem(
                product_id=item.product_id,
                product_name=item.product_name,
                category_id=item.category_id,
                category_name=item.category_name,
                unit_price=item.unit_price,
                quantity=item.quantity,
                unit=item.unit or default_unit,
            )
            for item in items
        ),
    )
