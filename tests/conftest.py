from __future__ import annotations

import copy
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

import shop_orders.persistence.pg as pg
from shop_orders.domain.orders.aggregator import OrderAggregator
from shop_orders.persistence.models import Base

SAMPLE_CUSTOMER = {
    "firstName": "Dana",
    "lastName": "Levi",
    "email": "dana@example.com",
    "address": "123 Main Street Apt 4",
}

SAMPLE_ITEMS = [
    {
        "productId": 1,
        "productName": "Apples",
        "categoryId": 1,
        "categoryName": "Produce",
        "unitPrice": 8.90,
        "quantity": 3,
        "unit": "kg",
    }
]


class StepClock:
    """Deterministic clock: every call is one second after the previous one."""

    def __init__(self, start: datetime | None = None):
        self.current = start or datetime(2026, 1, 10, 9, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        value = self.current
        self.current = self.current + timedelta(seconds=1)
        return value


@pytest.fixture(scope="session")
def test_db_path(tmp_path_factory: pytest.TempPathFactory) -> Path:
    return tmp_path_factory.mktemp("db") / "test.sqlite"


@pytest.fixture(scope="session", autouse=True)
def configure_test_engine(test_db_path: Path):
    engine = create_engine(
        f"sqlite+pysqlite:///{test_db_path}",
        future=True,
        connect_args={"check_same_thread": False},
    )
    TestSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)

    pg.engine = engine
    pg.SessionLocal = TestSessionLocal

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def clean_orders(configure_test_engine):
    yield
    with configure_test_engine.begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            conn.execute(table.delete())


@pytest.fixture()
def session(configure_test_engine):
    with pg.session_scope() as s:
        yield s


@pytest.fixture()
def clock() -> StepClock:
    return StepClock()


@pytest.fixture()
def aggregator(clock) -> OrderAggregator:
    return OrderAggregator(clock=clock)


@pytest.fixture()
def customer_info() -> dict:
    return copy.deepcopy(SAMPLE_CUSTOMER)


@pytest.fixture()
def line_items() -> list[dict]:
    return copy.deepcopy(SAMPLE_ITEMS)


@pytest.fixture()
def order_payload(customer_info, line_items) -> dict:
    return {"customerInfo": customer_info, "items": line_items}
