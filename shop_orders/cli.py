from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Callable

from shop_orders.core.logging import configure_logging
from shop_orders.domain.orders.aggregates import OrderStatus
from shop_orders.domain.orders.errors import OrderError, ValidationFailed, describe_error
from shop_orders.persistence.pg import init_db, session_scope
from shop_orders.services.orders import OrderService

logger = logging.getLogger(__name__)


def _print(payload: dict[str, Any]) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2))


def _read_payload(source: str) -> Any:
    if source == "-":
        return json.load(sys.stdin)
    return json.loads(Path(source).read_text(encoding="utf-8"))


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Shop orders CLI")
    parser.add_argument("--log-level", default=None, help="Override SO_LOG_LEVEL")
    top = parser.add_subparsers(dest="command", required=True)

    top.add_parser("init-db", help="Create the order tables")
    top.add_parser("statuses", help="List the order statuses")

    submit = top.add_parser("submit", help="Validate, price and store a new order")
    submit.add_argument("payload", help="Path to an order JSON document, or - for stdin")

    show = top.add_parser("show", help="Show one order")
    show.add_argument("order_id")

    listing = top.add_parser("list", help="List orders, newest first")
    listing.add_argument("--page", type=int, default=1)
    listing.add_argument("--limit", type=int, default=None)

    customer = top.add_parser("customer", help="Orders placed with an email address")
    customer.add_argument("email")

    status = top.add_parser("status", help="Move an order to another status")
    status.add_argument("order_id")
    status.add_argument("status", help=f"One of: {', '.join(OrderStatus.values())}")

    cancel = top.add_parser("cancel", help="Cancel an order")
    cancel.add_argument("order_id")

    return parser


def _submit(service: OrderService, args: argparse.Namespace) -> dict[str, Any]:
    try:
        payload = _read_payload(args.payload)
    except json.JSONDecodeError as exc:
        raise ValidationFailed({"order": f"order payload is not valid JSON: {exc.msg}"}) from exc
    except UnicodeDecodeError as exc:
        raise ValidationFailed({"order": "order payload is not valid UTF-8"}) from exc
    except OSError as exc:
        raise ValidationFailed({"order": f"order payload could not be read: {exc.strerror or exc}"}) from exc
    order = service.submit(payload)
    return {
        "message": "order saved",
        "orderNumber": order.order_number,
        "orderId": order.id,
        "summary": service.aggregator.summarize(order).to_dict(),
    }


def _show(service: OrderService, args: argparse.Namespace) -> dict[str, Any]:
    return service.get(args.order_id).to_dict()


def _list(service: OrderService, args: argparse.Namespace) -> dict[str, Any]:
    return service.list_orders(page=args.page, page_size=args.limit).to_dict()


def _customer(service: OrderService, args: argparse.Namespace) -> dict[str, Any]:
    email = args.email.strip().lower()
    views = service.orders_for_customer(email)
    return {
        "email": email,
        "orderCount": len(views),
        "orders": [view.to_dict() for view in views],
    }


def _status(service: OrderService, args: argparse.Namespace) -> dict[str, Any]:
    return service.change_status(args.order_id, args.status).to_dict()


def _cancel(service: OrderService, args: argparse.Namespace) -> dict[str, Any]:
    return service.cancel(args.order_id).to_dict()


HANDLERS: dict[str, Callable[[OrderService, argparse.Namespace], dict[str, Any]]] = {
    "submit": _submit,
    "show": _show,
    "list": _list,
    "customer": _customer,
    "status": _status,
    "cancel": _cancel,
}


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    configure_logging(level=args.log_level)

    if args.command == "statuses":
        _print({"success": True, "data": {"statuses": OrderStatus.values()}})
        return 0

    init_db()
    if args.command == "init-db":
        _print({"success": True, "data": {"message": "order tables ready"}})
        return 0

    handler = HANDLERS[args.command]
    try:
        with session_scope() as session:
            data = handler(OrderService(session), args)
    except OrderError as exc:
        if exc.status_code >= 500:
            logger.error("order command failed: command=%s error=%s", args.command, exc, exc_info=True)
        else:
            logger.info("order command rejected: command=%s kind=%s", args.command, exc.kind)
        _print(describe_error(exc))
        return 1

    _print({"success": True, "data": data})
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
