from __future__ import annotations

from typing import Any


class OrderError(Exception):
    """Base for every failure kind an order operation can report."""

    kind = "order_error"
    status_code = 500

    def details(self) -> Any:
        return None


class ValidationFailed(OrderError):
    kind = "validation_failed"
    status_code = 400

    def __init__(self, errors: dict[str, str]):
        self.errors = dict(errors)
        fields = ", ".join(sorted(self.errors))
        super().__init__(f"order data is invalid: {fields}")

    def details(self) -> dict[str, str]:
        return self.errors


class EmptyOrder(OrderError):
    kind = "empty_order"
    status_code = 400

    def __init__(self, message: str = "an order must contain at least one item"):
        super().__init__(message)


class InvalidOrderData(OrderError):
    # Raised when build_order is handed data that never passed validate();
    # that is a bug in the caller, not something an end user can fix.
    kind = "invalid_order_data"
    status_code = 500


class IllegalTransition(OrderError):
    kind = "illegal_transition"
    status_code = 409

    def __init__(self, current: str, requested: str, allowed: list[str]):
        self.current = current
        self.requested = requested
        self.allowed = list(allowed)
        super().__init__(f"cannot move order from {current!r} to {requested!r}")

    def details(self) -> dict[str, Any]:
        return {"current": self.current, "requested": self.requested, "allowed": self.allowed}


class NotFound(OrderError):
    kind = "not_found"
    status_code = 404

    def __init__(self, order_id: str):
        self.order_id = order_id
        super().__init__(f"order not found: {order_id}")

    def details(self) -> dict[str, str]:
        return {"order_id": self.order_id}


class Conflict(OrderError):
    kind = "conflict"
    status_code = 409

    def __init__(self, order_id: str, expected: str, actual: str | None):
        self.order_id = order_id
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"order {order_id} changed concurrently: expected status {expected!r}, found {actual!r}"
        )

    def details(self) -> dict[str, Any]:
        return {"order_id": self.order_id, "expected": self.expected, "actual": self.actual}


USER_MESSAGES: dict[str, str] = {
    ValidationFailed.kind: "Order data is invalid",
    EmptyOrder.kind: "An order must contain at least one item",
    InvalidOrderData.kind: "Internal error while saving the order",
    IllegalTransition.kind: "The requested status change is not allowed",
    NotFound.kind: "Order not found",
    Conflict.kind: "The order was changed by someone else, reload and try again",
}


def describe_error(exc: OrderError) -> dict[str, Any]:
    """Response envelope for a failed request; internal errors keep their details private."""
    body: dict[str, Any] = {
        "success": False,
        "error": exc.kind,
        "status_code": exc.status_code,
        "message": USER_MESSAGES.get(exc.kind, "Unexpected order error"),
    }
    if exc.status_code < 500:
        details = exc.details()
        if details is not None:
            body["details"] = details
    return body
