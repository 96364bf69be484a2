from __future__ import annotations

import itertools
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from pizzeria.adapters.outbound.in_memory_purchases import InMemoryPurchaseRepository
from pizzeria.core.domain.model.purchase import Money, Pizza
from pizzeria.core.domain.service.pricing import DiscountEngine, default_rules
from pizzeria.core.domain.service.purchase_service import (
    PurchaseLifecycleDeps,
    PurchaseLifecycleService,
)

T0 = datetime(2024, 3, 1, 18, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock():
    """Each call is one minute after the previous one."""
    ticks = itertools.count()
    return lambda: T0 + timedelta(minutes=next(ticks))


@pytest.fixture
def purchases() -> InMemoryPurchaseRepository:
    return InMemoryPurchaseRepository()


@pytest.fixture
def engine() -> DiscountEngine:
    return DiscountEngine(rules=default_rules())


@pytest.fixture
def service(purchases, engine, clock) -> PurchaseLifecycleService:
    return PurchaseLifecycleService(
        PurchaseLifecycleDeps(purchases=purchases, pricing=engine, clock=clock)
    )


@pytest.fixture
def pizza():
    ids = itertools.count(1)

    def make(price: str, *toppings: str) -> Pizza:
        return Pizza(
            pizza_id=f"pizza-{next(ids)}",
            price=Money.of(Decimal(price)),
            toppings=tuple(toppings),
        )

    return make
