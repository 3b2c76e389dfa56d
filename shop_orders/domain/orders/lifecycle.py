from __future__ import annotations

from shop_orders.core.config import TransitionPolicy
from shop_orders.domain.orders.aggregates import OrderStatus

FULFILMENT_SEQUENCE: tuple[OrderStatus, ...] = (
    OrderStatus.PENDING,
    OrderStatus.CONFIRMED,
    OrderStatus.PROCESSING,
    OrderStatus.SHIPPED,
    OrderStatus.DELIVERED,
)

TERMINAL_STATUSES = frozenset({OrderStatus.CANCELLED})


def parse_status(value: OrderStatus | str) -> OrderStatus | None:
    if isinstance(value, OrderStatus):
        return value
    try:
        return OrderStatus(str(value).strip().lower())
    except ValueError:
        return None


def allowed_targets(current: OrderStatus, policy: TransitionPolicy = "monotonic") -> list[OrderStatus]:
    if current in TERMINAL_STATUSES:
        return []
    if policy == "permissive":
        return list(OrderStatus)

    targets: list[OrderStatus] = []
    position = FULFILMENT_SEQUENCE.index(current)
    if position + 1 < len(FULFILMENT_SEQUENCE):
        targets.append(FULFILMENT_SEQUENCE[position + 1])
    targets.append(OrderStatus.CANCELLED)
    return targets


def can_transition(
    current: OrderStatus,
    target: OrderStatus,
    policy: TransitionPolicy = "monotonic",
) -> bool:
    return target in allowed_targets(current, policy)
