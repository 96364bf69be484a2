from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Callable, Sequence
from uuid import UUID

from returns.pipeline import flow
from returns.pointfree import bind, map_
from returns.result import Failure, Result, Success

from pizzeria.core.domain.model.errors import (
    ConsistencyError,
    NotFoundError,
    PurchaseError,
    ValidationError,
)
from pizzeria.core.domain.model.purchase import (
    CENT,
    MAX_PRICE,
    CustomerId,
    Money,
    Pizza,
    Purchase,
    PurchaseId,
    PurchaseState,
    StaffId,
    now_utc,
)
from pizzeria.core.domain.service.pricing import DiscountEngine
from pizzeria.core.ports.inbound.purchase_lifecycle import (
    AddPizzaCommand,
    CompletePurchaseCommand,
    ConfirmPurchaseCommand,
    PickPurchaseCommand,
    PurchaseLifecycleUseCase,
)
from pizzeria.core.ports.outbound.purchases import PurchaseRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PurchaseLifecycleDeps:
    purchases: PurchaseRepository
    pricing: DiscountEngine
    currency: str = "EUR"
    clock: Callable[[], datetime] = now_utc


@dataclass(frozen=True)
class PurchaseLifecycleService(PurchaseLifecycleUseCase):
    deps: PurchaseLifecycleDeps

    # ---- customer side -----------------------------------------------------

    def add_pizza(self, command: AddPizzaCommand) -> Result[Purchase, PurchaseError]:
        return flow(
            command,
            _validate_add_pizza,
            bind(self._append_to_draft),
            map_(_log_saved("pizza added")),
        )

    def confirm(self, command: ConfirmPurchaseCommand) -> Result[Purchase, PurchaseError]:
        customer_id = command.customer_id.strip()
        if not customer_id:
            return Failure(ValidationError("customer_id is required"))
        customer = CustomerId(customer_id)

        return flow(
            self.deps.purchases.find_drafts(customer),
            bind(lambda drafts: _single_draft(customer, drafts)),
            bind(lambda draft: draft.place(self.deps.clock())),
            bind(lambda placed: self._save(placed, PurchaseState.DRAFT)),
            map_(_log_saved("purchase placed")),
        )

    # ---- staff side --------------------------------------------------------

    def pick_next(
        self, command: PickPurchaseCommand
    ) -> Result[Purchase | None, PurchaseError]:
        staff_id = command.staff_id.strip()
        if not staff_id:
            return Failure(ValidationError("staff_id is required"))
        staff = StaffId(staff_id)

        def claim(candidate: Purchase | None) -> Result[Purchase | None, PurchaseError]:
            if candidate is None:
                logger.debug("no placed purchase to pick")
                return Success(None)
            return (
                candidate.start(staff)
                .bind(lambda started: self._save(started, PurchaseState.PLACED))
                .map(_log_saved(f"purchase picked by {staff.value}"))
            )

        return self.deps.purchases.find_placed().bind(claim)

    def complete(
        self, command: CompletePurchaseCommand
    ) -> Result[Purchase, PurchaseError]:
        try:
            pid = PurchaseId(UUID(command.purchase_id))
        except ValueError:
            return Failure(ValidationError(message="purchase_id must be a valid UUID"))

        return flow(
            self.deps.purchases.find(pid),
            bind(lambda found: _require_found(pid, found)),
            bind(self._serve),
            bind(lambda served: self._save(served, PurchaseState.ONGOING)),
            map_(_log_saved("purchase served")),
        )

    # ---- side effects ------------------------------------------------------

    def _append_to_draft(
        self, command: AddPizzaCommand
    ) -> Result[Purchase, PurchaseError]:
        customer = CustomerId(command.customer_id.strip())
        pizza = Pizza(
            pizza_id=command.pizza_id.strip(),
            price=Money.of(command.price, currency=self.deps.currency),
            toppings=tuple(command.toppings),
        )

        def extend(drafts: Sequence[Purchase]) -> Result[Purchase, PurchaseError]:
            if len(drafts) > 1:
                return _too_many_drafts(customer, drafts)
            if not drafts:
                fresh = Purchase.open(customer, pizza, created_at=self.deps.clock())
                return self._save(fresh, None)
            return drafts[0].add_pizza(pizza).bind(
                lambda grown: self._save(grown, PurchaseState.DRAFT)
            )

        return self.deps.purchases.find_drafts(customer).bind(extend)

    def _serve(self, purchase: Purchase) -> Result[Purchase, PurchaseError]:
        quote = self.deps.pricing.quote(purchase.pizzas)
        rule = quote.discount.rule if quote.discount is not None else "none"
        logger.info(
            "pricing %s: subtotal=%s rule=%s total=%s",
            purchase.purchase_id.value,
            quote.subtotal.amount,
            rule,
            quote.total.amount,
        )
        return purchase.serve(quote.total, at=self.deps.clock())

    def _save(
        self, purchase: Purchase, expected_state: PurchaseState | None
    ) -> Result[Purchase, PurchaseError]:
        result = self.deps.purchases.save(purchase, expected_state)
        if isinstance(result, Failure):
            logger.warning(
                "save failed for purchase %s: %s",
                purchase.purchase_id.value,
                result.failure(),
            )
        return result


# ---- pure helpers ----------------------------------------------------------


def _validate_add_pizza(
    cmd: AddPizzaCommand,
) -> Result[AddPizzaCommand, PurchaseError]:
    if not cmd.customer_id.strip():
        return Failure(ValidationError("customer_id is required"))
    if not cmd.pizza_id.strip():
        return Failure(ValidationError("pizza_id is required"))
    try:
        price = Decimal(str(cmd.price))
    except InvalidOperation:
        return Failure(ValidationError("price must be a decimal"))
    if not price.is_finite() or price < 0:
        return Failure(ValidationError("price must be >= 0"))
    if price > MAX_PRICE:
        return Failure(ValidationError(f"price must be <= {MAX_PRICE}"))
    if price != price.quantize(CENT):
        return Failure(ValidationError("price must have at most 2 decimal places"))
    for i, topping in enumerate(cmd.toppings):
        if not topping.strip():
            return Failure(ValidationError(f"toppings[{i}] must be non-empty"))
    return Success(cmd)


def _single_draft(
    customer: CustomerId, drafts: Sequence[Purchase]
) -> Result[Purchase, PurchaseError]:
    if not drafts:
        return Failure(
            NotFoundError(message="no draft purchase to confirm", purchase_id="<draft>")
        )
    if len(drafts) > 1:
        return _too_many_drafts(customer, drafts)
    return Success(drafts[0])


def _too_many_drafts(
    customer: CustomerId, drafts: Sequence[Purchase]
) -> Result[Purchase, PurchaseError]:
    logger.warning(
        "customer %s has %d draft purchases", customer.value, len(drafts)
    )
    return Failure(
        ConsistencyError(
            message="more than one draft purchase",
            customer_id=customer.value,
            drafts=len(drafts),
        )
    )


def _require_found(
    pid: PurchaseId, found: Purchase | None
) -> Result[Purchase, PurchaseError]:
    if found is None:
        return Failure(
            NotFoundError(message="purchase not found", purchase_id=str(pid.value))
        )
    return Success(found)


def _log_saved(event: str) -> Callable[[Purchase], Purchase]:
    def log(purchase: Purchase) -> Purchase:
        logger.info(
            "%s: purchase=%s customer=%s state=%s pizzas=%d",
            event,
            purchase.purchase_id.value,
            purchase.customer_id.value,
            purchase.state.value,
            len(purchase.pizzas),
        )
        return purchase

    return log
