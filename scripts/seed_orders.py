#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json

from shop_orders.core.logging import configure_logging
from shop_orders.persistence.pg import init_db, session_scope
from shop_orders.services.orders import OrderService

SAMPLE_ORDER = {
    "customerInfo": {
        "firstName": "ישראל",
        "lastName": "ישראלי",
        "email": "test@example.com",
        "address": "רחוב הרצל 1, תל אביב",
    },
    "items": [
        {
            "productId": 1,
            "productName": "מוצר לדוגמה",
            "categoryId": 1,
            "categoryName": "קטגוריה לדוגמה",
            "price": 29.99,
            "quantity": 2,
            "unit": "יח׳",
        }
    ],
}


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed the order store with sample orders")
    parser.add_argument("--count", type=int, default=1)
    args = parser.parse_args()

    configure_logging()
    init_db()
    created = []
    with session_scope() as session:
        service = OrderService(session)
        for _ in range(args.count):
            order = service.submit(SAMPLE_ORDER)
            created.append({"orderId": order.id, "orderNumber": order.order_number})
    print(json.dumps({"created": created}, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
