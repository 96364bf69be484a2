from __future__ import annotations

from decimal import Decimal
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter
from pydantic import ValidationError as InputError
from returns.result import Failure, Result, Success

from pizzeria.core.domain.model.errors import PurchaseError, ValidationError
from pizzeria.core.domain.model.purchase import MAX_PRICE, CustomerId, Purchase
from pizzeria.core.ports.inbound.purchase_lifecycle import (
    AddPizzaCommand,
    CompletePurchaseCommand,
    ConfirmPurchaseCommand,
    PickPurchaseCommand,
    PurchaseLifecycleUseCase,
)
from pizzeria.core.ports.outbound.identity import IdentityProvider

# ---- CLI DTOs (adapter layer) ----------------------------------------------


class PizzaIn(BaseModel):
    pizza_id: str = Field(min_length=1, examples=["margherita-1"])
    price: Decimal = Field(ge=0, le=MAX_PRICE, decimal_places=2, examples=["10.00"])
    toppings: list[str] = Field(default_factory=list, examples=[["pineapple"]])


class AddStep(BaseModel):
    op: Literal["add"]
    pizza: PizzaIn
    customer_id: str | None = None


class ConfirmStep(BaseModel):
    op: Literal["confirm"]
    customer_id: str | None = None


class PickStep(BaseModel):
    op: Literal["pick"]
    staff_id: str = Field(min_length=1)


class CompleteStep(BaseModel):
    op: Literal["complete"]
    purchase_id: str | None = None  # defaults to the last picked purchase


Step = Annotated[
    Union[AddStep, ConfirmStep, PickStep, CompleteStep], Field(discriminator="op")
]
_STEPS = TypeAdapter(list[Step])


def run_cli(
    lifecycle: PurchaseLifecycleUseCase, identity: IdentityProvider, raw: str
) -> int:
    """
    raw: JSON array of steps, executed in order against one store.
    Example:
      [{"op":"add","pizza":{"pizza_id":"p-1","price":"10.00","toppings":["pineapple"]}},
       {"op":"confirm"},
       {"op":"pick","staff_id":"chef-1"},
       {"op":"complete"}]
    """
    try:
        steps = _STEPS.validate_json(raw)
    except InputError as e:
        print(f"invalid_input: {e.error_count()} error(s): {e.errors()[0]['msg']}")
        return 2

    last_picked: str | None = None
    for i, step in enumerate(steps):
        result = _run_step(lifecycle, identity, step, last_picked)

        if isinstance(result, Failure):
            print("[ng]", f"step[{i}] {step.op}:", str(result.failure()))
            return 1

        purchase = result.unwrap()
        if isinstance(step, PickStep) and purchase is not None:
            last_picked = str(purchase.purchase_id.value)
        print("[ok]", step.op, _to_payload(purchase))

    return 0


def _run_step(
    lifecycle: PurchaseLifecycleUseCase,
    identity: IdentityProvider,
    step: Any,
    last_picked: str | None,
) -> Result[Purchase | None, PurchaseError]:
    if isinstance(step, AddStep):
        return _customer(identity, step.customer_id).bind(
            lambda c: lifecycle.add_pizza(
                AddPizzaCommand(
                    customer_id=c.value,
                    pizza_id=step.pizza.pizza_id,
                    price=step.pizza.price,
                    toppings=tuple(step.pizza.toppings),
                )
            )
        )

    if isinstance(step, ConfirmStep):
        return _customer(identity, step.customer_id).bind(
            lambda c: lifecycle.confirm(ConfirmPurchaseCommand(customer_id=c.value))
        )

    if isinstance(step, PickStep):
        return lifecycle.pick_next(PickPurchaseCommand(staff_id=step.staff_id))

    purchase_id = step.purchase_id or last_picked
    if purchase_id is None:
        return Failure(ValidationError("no purchase_id given and nothing picked yet"))
    return lifecycle.complete(CompletePurchaseCommand(purchase_id=purchase_id))


def _customer(
    identity: IdentityProvider, explicit: str | None
) -> Result[CustomerId, PurchaseError]:
    if explicit:
        return Success(CustomerId(explicit))
    return identity.current_customer()


def _to_payload(purchase: Purchase | None) -> dict[str, Any] | None:
    if purchase is None:
        return None
    return {
        "purchase_id": str(purchase.purchase_id.value),
        "customer_id": purchase.customer_id.value,
        "state": purchase.state.value,
        "pizzas": [p.pizza_id for p in purchase.pizzas],
        "amount": str(purchase.amount.amount) if purchase.amount is not None else None,
    }
