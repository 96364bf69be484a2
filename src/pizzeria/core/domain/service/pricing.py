from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Sequence, Tuple

from returns.maybe import Maybe, Nothing, Some

from pizzeria.core.domain.model.purchase import Money, Pizza, fold_money

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Discount:
    rule: str
    amount: Money
    pizza_ids: Tuple[str, ...] = ()  # pizzas the discount was taken from


@dataclass(frozen=True)
class PriceQuote:
    subtotal: Money
    discount: Discount | None
    total: Money


# A rule either declines (Nothing) or offers a discount; rules never stack.
PricingRule = Callable[[Sequence[Pizza]], Maybe[Discount]]


def cheapest_free_for_bundle(size: int = 3) -> PricingRule:
    """Exactly ``size`` pizzas: the cheapest one (first on ties) is free."""

    def rule(pizzas: Sequence[Pizza]) -> Maybe[Discount]:
        if len(pizzas) != size:
            return Nothing
        cheapest = min(pizzas, key=lambda p: p.price.amount)
        return Some(
            Discount(
                rule=f"cheapest_free_of_{size}",
                amount=cheapest.price,
                pizza_ids=(cheapest.pizza_id,),
            )
        )

    return rule


def topping_relief(topping: str = "pineapple", rate: Decimal = Decimal("0.10")) -> PricingRule:
    """Any pizza with ``topping`` present: ``rate`` off every pizza without it."""

    def rule(pizzas: Sequence[Pizza]) -> Maybe[Discount]:
        if not any(p.has_topping(topping) for p in pizzas):
            return Nothing
        others = [p for p in pizzas if not p.has_topping(topping)]
        base = fold_money((p.price for p in others), currency=pizzas[0].price.currency)
        return Some(
            Discount(
                rule=f"{topping}_relief",
                amount=base.scaled(rate),
                pizza_ids=tuple(p.pizza_id for p in others),
            )
        )

    return rule


@dataclass(frozen=True)
class DiscountEngine:
    rules: Tuple[PricingRule, ...]
    currency: str = "EUR"

    def quote(self, pizzas: Sequence[Pizza]) -> PriceQuote:
        subtotal = fold_money((p.price for p in pizzas), currency=self.currency)
        for rule in self.rules:
            offered = rule(pizzas)
            if isinstance(offered, Some):
                discount = offered.unwrap()
                total = (subtotal - discount.amount).rounded()
                logger.debug(
                    "rule %s applied: subtotal=%s discount=%s total=%s",
                    discount.rule,
                    subtotal.amount,
                    discount.amount.amount,
                    total.amount,
                )
                return PriceQuote(subtotal=subtotal, discount=discount, total=total)

        logger.debug("no rule applied: total=%s", subtotal.amount)
        return PriceQuote(subtotal=subtotal, discount=None, total=subtotal)

    def price(self, pizzas: Sequence[Pizza]) -> Money:
        return self.quote(pizzas).total


def default_rules(
    bundle_size: int = 3,
    relief_topping: str = "pineapple",
    relief_rate: Decimal = Decimal("0.10"),
) -> Tuple[PricingRule, ...]:
    # priority order: first applicable rule wins
    return (
        cheapest_free_for_bundle(bundle_size),
        topping_relief(relief_topping, relief_rate),
    )
