from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Protocol, Sequence

from returns.result import Result

from pizzeria.core.domain.model.errors import PurchaseError
from pizzeria.core.domain.model.purchase import Purchase


@dataclass(frozen=True)
class AddPizzaCommand:
    customer_id: str
    pizza_id: str
    price: Decimal
    toppings: Sequence[str] = ()


@dataclass(frozen=True)
class ConfirmPurchaseCommand:
    customer_id: str


@dataclass(frozen=True)
class PickPurchaseCommand:
    staff_id: str


@dataclass(frozen=True)
class CompletePurchaseCommand:
    purchase_id: str  # UUID string


class PurchaseLifecycleUseCase(Protocol):
    def add_pizza(self, command: AddPizzaCommand) -> Result[Purchase, PurchaseError]: ...

    def confirm(
        self, command: ConfirmPurchaseCommand
    ) -> Result[Purchase, PurchaseError]: ...

    def pick_next(
        self, command: PickPurchaseCommand
    ) -> Result[Purchase | None, PurchaseError]: ...

    def complete(
        self, command: CompletePurchaseCommand
    ) -> Result[Purchase, PurchaseError]: ...
