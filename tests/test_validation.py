from __future__ import annotations

from decimal import Decimal

import pytest

from shop_orders.domain.orders.errors import ValidationFailed
from shop_orders.domain.orders.validation import validate_submission


def test_valid_submission_normalizes_customer_and_items(aggregator, customer_info, line_items):
    customer_info["email"] = "  Dana@Example.COM "
    customer_info["firstName"] = "  Dana "
    result = aggregator.validate(customer_info, line_items)

    assert result.valid
    assert result.errors == {}
    assert result.customer.email == "dana@example.com"
    assert result.customer.first_name == "Dana"
    assert result.customer.full_name == "Dana Levi"
    assert result.items[0].unit_price == Decimal("8.9")
    assert result.items[0].unit == "kg"


def test_short_address_reports_only_address(aggregator, customer_info, line_items):
    customer_info["address"] = "short"
    result = aggregator.validate(customer_info, line_items)

    assert not result.valid
    assert list(result.errors) == ["address"]
    assert "10" in result.errors["address"]
    assert result.customer is None
    assert result.items == ()


@pytest.mark.parametrize(
    ("field", "value"),
    [
        ("firstName", "D"),
        ("firstName", "x" * 51),
        ("lastName", None),
        ("lastName", "   "),
        ("email", "dana@example"),
        ("email", "dana example@x.com"),
        ("email", "@example.com"),
        ("address", "x" * 201),
        ("address", "  123 Main  "),
    ],
)
def test_single_customer_violation_is_reported_for_that_field(aggregator, customer_info, line_items, field, value):
    customer_info[field] = value
    result = aggregator.validate(customer_info, line_items)

    assert set(result.errors) == {field}
    assert result.errors[field]


@pytest.mark.parametrize(
    ("field", "value"),
    [
        ("firstName", "Al"),
        ("firstName", "x" * 50),
        ("address", "x" * 10),
        ("address", "x" * 200),
    ],
)
def test_length_boundaries_are_inclusive(aggregator, customer_info, line_items, field, value):
    customer_info[field] = value
    assert aggregator.validate(customer_info, line_items).valid


def test_missing_customer_field_is_required(aggregator, customer_info, line_items):
    del customer_info["email"]
    result = aggregator.validate(customer_info, line_items)
    assert result.errors == {"email": "email is required"}


def test_first_violated_rule_wins(aggregator, customer_info, line_items):
    customer_info["firstName"] = ""
    customer_info["lastName"] = 42
    result = aggregator.validate(customer_info, line_items)

    assert result.errors["firstName"] == "first name is required"
    assert result.errors["lastName"] == "last name must be text"


@pytest.mark.parametrize(
    ("field", "value", "message"),
    [
        ("productId", 0, "product id must be positive"),
        ("productId", "1", "product id must be an integer"),
        ("productId", True, "product id must be an integer"),
        ("categoryId", -4, "category id must be positive"),
        ("productName", "", "product name is required"),
        ("categoryName", "  ", "category name is required"),
        ("unitPrice", 0, "unit price must be greater than 0"),
        ("unitPrice", -1.5, "unit price must be greater than 0"),
        ("unitPrice", "abc", "unit price must be a number"),
        ("quantity", 0, "quantity must be at least 1"),
        ("quantity", 1.5, "quantity must be an integer"),
        ("quantity", None, "quantity is required"),
        ("unit", 7, "unit must be text"),
    ],
)
def test_item_rules(aggregator, customer_info, line_items, field, value, message):
    line_items[0][field] = value
    result = aggregator.validate(customer_info, line_items)

    assert result.errors == {f"items[0].{field}": message}


def test_empty_items_rejected(aggregator, customer_info):
    result = aggregator.validate(customer_info, [])
    assert result.errors == {"items": "an order must contain at least one item"}


def test_items_must_be_a_list(aggregator, customer_info):
    assert aggregator.validate(customer_info, "apples").errors == {"items": "items must be a list"}
    assert aggregator.validate(customer_info, None).errors == {"items": "items must be a list"}


def test_non_mapping_item_reported_by_index(aggregator, customer_info, line_items):
    result = aggregator.validate(customer_info, [line_items[0], "oops"])
    assert result.errors == {"items[1]": "item must be an object"}


def test_all_violations_reported_together(aggregator, customer_info, line_items):
    customer_info["firstName"] = "D"
    customer_info["email"] = "not-an-email"
    line_items[0]["quantity"] = 0
    line_items.append(dict(line_items[0], productId=0, quantity=2))

    result = aggregator.validate(customer_info, line_items)

    assert set(result.errors) == {
        "firstName",
        "email",
        "items[0].quantity",
        "items[1].productId",
    }


def test_missing_customer_block(aggregator, line_items):
    result = aggregator.validate(None, line_items)
    assert result.errors == {"customerInfo": "customer information is required"}


def test_price_alias_and_default_unit(customer_info, line_items):
    item = line_items[0]
    item["price"] = item.pop("unitPrice")
    del item["unit"]

    result = validate_submission(customer_info, line_items, default_unit="pcs")

    assert result.valid
    assert result.items[0].unit_price == Decimal("8.9")
    assert result.items[0].unit == "pcs"


def test_client_line_total_is_not_validated_or_kept(aggregator, customer_info, line_items):
    line_items[0]["totalPrice"] = -999
    result = aggregator.validate(customer_info, line_items)

    assert result.valid
    assert result.items[0].line_total == Decimal("26.70")


def test_raise_for_errors(aggregator, customer_info, line_items):
    customer_info["address"] = "short"
    result = aggregator.validate(customer_info, line_items)

    with pytest.raises(ValidationFailed) as exc_info:
        result.raise_for_errors()
    assert exc_info.value.errors == result.errors
    assert exc_info.value.status_code == 400


@pytest.mark.parametrize(
    ("field", "value", "message"),
    [
        ("unitPrice", 1e30, "unit price cannot exceed 1000000"),
        ("unitPrice", "1000000.01", "unit price cannot exceed 1000000"),
        ("unitPrice", "12345678901234567.01", "unit price cannot exceed 1000000"),
        ("unitPrice", "8.12345", "unit price cannot have more than 4 decimal places"),
        ("unitPrice", True, "unit price must be a number"),
        ("unitPrice", float("inf"), "unit price must be a number"),
        ("quantity", 10_001, "quantity cannot exceed 10000"),
    ],
)
def test_item_amount_limits(aggregator, customer_info, line_items, field, value, message):
    line_items[0][field] = value
    result = aggregator.validate(customer_info, line_items)

    assert result.errors == {f"items[0].{field}": message}


def test_item_amount_limits_are_inclusive(aggregator, customer_info, line_items):
    line_items[0]["unitPrice"] = "1000000"
    line_items[0]["quantity"] = 10_000

    result = aggregator.validate(customer_info, line_items)

    assert result.valid
    assert result.items[0].line_total == Decimal("10000000000.00")


def test_too_many_line_items(aggregator, customer_info, line_items):
    result = aggregator.validate(customer_info, line_items * 101)
    assert result.errors == {"items": "an order cannot contain more than 100 items"}


def test_blank_email_is_required_not_malformed(aggregator, customer_info, line_items):
    customer_info["email"] = "   "
    result = aggregator.validate(customer_info, line_items)
    assert result.errors == {"email": "email is required"}


def test_price_alias_reports_under_unit_price(aggregator, customer_info, line_items):
    line_items[0].pop("unitPrice")
    line_items[0]["price"] = "free"

    result = aggregator.validate(customer_info, line_items)

    assert result.errors == {"items[0].unitPrice": "unit price must be a number"}
