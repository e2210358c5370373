"""Shared fixtures for the onboard-flow tests."""

from __future__ import annotations

from typing import Any

import pytest

from fakes import FakePaymentClient
from integrations import Integrations
from repositories.order_repository import OrderRepository


@pytest.fixture
def repository(tmp_path) -> OrderRepository:
    repo = OrderRepository(str(tmp_path / "data" / "orders.db"))
    repo.initialize()
    return repo


@pytest.fixture
def payment() -> FakePaymentClient:
    return FakePaymentClient()


@pytest.fixture
def integrations(payment: FakePaymentClient) -> Integrations:
    return Integrations(payment=payment)


@pytest.fixture
def order_payload() -> dict[str, Any]:
    return {"name": "Ada", "email": "ada@x.com", "product": "Plan A", "price": 49.99}
