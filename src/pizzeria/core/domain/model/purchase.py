from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Iterable, Tuple
from uuid import UUID, uuid4

from returns.result import Failure, Result, Success

from pizzeria.core.domain.model.errors import InvalidStateError, PurchaseError

CENT = Decimal("0.01")
MAX_PRICE = Decimal("1000000.00")


@dataclass(frozen=True)
class PurchaseId:
    value: UUID

    @staticmethod
    def new() -> "PurchaseId":
        return PurchaseId(uuid4())


@dataclass(frozen=True)
class CustomerId:
    value: str


@dataclass(frozen=True)
class StaffId:
    value: str


@dataclass(frozen=True)
class Money:
    amount: Decimal
    currency: str = "EUR"

    @staticmethod
    def of(amount: Decimal | int | str, currency: str = "EUR") -> "Money":
        dec = Decimal(str(amount)).quantize(CENT, rounding=ROUND_HALF_UP)
        return Money(dec, currency)

    def __add__(self, other: "Money") -> "Money":
        self._assert_same_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def __sub__(self, other: "Money") -> "Money":
        self._assert_same_currency(other)
        return Money(self.amount - other.amount, self.currency)

    def scaled(self, rate: Decimal) -> "Money":
        # exact; callers round once on the final figure
        return Money(self.amount * rate, self.currency)

    def rounded(self) -> "Money":
        return Money.of(self.amount, self.currency)

    def _assert_same_currency(self, other: "Money") -> None:
        if self.currency != other.currency:
            raise ValueError(f"currency_mismatch: {self.currency} vs {other.currency}")


def fold_money(values: Iterable[Money], currency: str = "EUR") -> Money:
    total = Money.of(0, currency=currency)
    for v in values:
        total = total + v
    return total


@dataclass(frozen=True)
class Pizza:
    pizza_id: str
    price: Money
    toppings: Tuple[str, ...] = ()

    def has_topping(self, topping: str) -> bool:
        """Exact, case-sensitive match."""
        return topping in self.toppings


class PurchaseState(str, Enum):
    DRAFT = "DRAFT"
    PLACED = "PLACED"
    ONGOING = "ONGOING"
    SERVED = "SERVED"

    def successor(self) -> "PurchaseState | None":
        order = list(PurchaseState)
        idx = order.index(self)
        return order[idx + 1] if idx + 1 < len(order) else None

    @property
    def is_terminal(self) -> bool:
        return self.successor() is None


@dataclass(frozen=True)
class Purchase:
    """A customer's order moving through DRAFT -> PLACED -> ONGOING -> SERVED.

    Transitions return a new ``Purchase`` in a ``Result``; calling one from
    the wrong source state yields ``InvalidStateError``.
    ``amount`` stays ``None`` until the purchase is served.
    """

    purchase_id: PurchaseId
    customer_id: CustomerId
    pizzas: Tuple[Pizza, ...]
    state: PurchaseState
    created_at: datetime
    placed_at: datetime | None = None
    picked_by: StaffId | None = None
    served_at: datetime | None = None
    amount: Money | None = None
    version: int = 0  # bumped by every change; stores compare it on save

    @staticmethod
    def open(customer_id: CustomerId, pizza: Pizza, created_at: datetime) -> "Purchase":
        return Purchase(
            purchase_id=PurchaseId.new(),
            customer_id=customer_id,
            pizzas=(pizza,),
            state=PurchaseState.DRAFT,
            created_at=created_at,
        )

    def add_pizza(self, pizza: Pizza) -> Result["Purchase", PurchaseError]:
        if self.state is not PurchaseState.DRAFT:
            return Failure(self._invalid(PurchaseState.DRAFT.value, "only drafts accept pizzas"))
        grown = replace(self, pizzas=self.pizzas + (pizza,), version=self.version + 1)
        return Success(grown)

    def place(self, at: datetime) -> Result["Purchase", PurchaseError]:
        return self._advance(PurchaseState.PLACED).map(
            lambda p: replace(p, placed_at=at)
        )

    def start(self, staff: StaffId) -> Result["Purchase", PurchaseError]:
        return self._advance(PurchaseState.ONGOING).map(
            lambda p: replace(p, picked_by=staff)
        )

    def serve(self, amount: Money, at: datetime) -> Result["Purchase", PurchaseError]:
        return self._advance(PurchaseState.SERVED).map(
            lambda p: replace(p, amount=amount, served_at=at)
        )

    def _advance(self, target: PurchaseState) -> Result["Purchase", PurchaseError]:
        if self.state.successor() is not target:
            source = [s for s in PurchaseState if s.successor() is target]
            expected = source[0].value if source else "<none>"
            return Failure(self._invalid(expected, f"cannot move to {target.value}"))
        return Success(replace(self, state=target, version=self.version + 1))

    def _invalid(self, expected: str, message: str) -> InvalidStateError:
        return InvalidStateError(
            message=message,
            purchase_id=str(self.purchase_id.value),
            state=self.state.value,
            expected=expected,
        )


def now_utc() -> datetime:
    return datetime.now(timezone.utc)
