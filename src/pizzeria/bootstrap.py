from __future__ import annotations

from dataclasses import dataclass

from pizzeria.adapters.outbound.in_memory_purchases import InMemoryPurchaseRepository
from pizzeria.adapters.outbound.static_identity import StaticIdentityProvider
from pizzeria.config import Settings
from pizzeria.core.domain.service.pricing import DiscountEngine, default_rules
from pizzeria.core.domain.service.purchase_service import (
    PurchaseLifecycleDeps,
    PurchaseLifecycleService,
)


@dataclass(frozen=True)
class UseCases:
    lifecycle: PurchaseLifecycleService
    identity: StaticIdentityProvider


def build_discount_engine(settings: Settings) -> DiscountEngine:
    return DiscountEngine(
        rules=default_rules(
            bundle_size=settings.bundle_size,
            relief_topping=settings.relief_topping,
            relief_rate=settings.relief_rate,
        ),
        currency=settings.currency,
    )


def build_usecases(settings: Settings | None = None) -> UseCases:
    settings = settings or Settings.from_env()
    purchases = InMemoryPurchaseRepository()

    lifecycle = PurchaseLifecycleService(
        PurchaseLifecycleDeps(
            purchases=purchases,
            pricing=build_discount_engine(settings),
            currency=settings.currency,
        )
    )
    identity = StaticIdentityProvider(customer_id=settings.customer_id)

    return UseCases(lifecycle=lifecycle, identity=identity)
