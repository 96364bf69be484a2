from datetime import datetime, timezone

import pytest

from pizzeria.core.domain.model.errors import InvalidStateError
from pizzeria.core.domain.model.purchase import (
    CustomerId,
    Money,
    Purchase,
    PurchaseState,
    StaffId,
)

NOW = datetime(2024, 3, 1, 18, 0, tzinfo=timezone.utc)


def _draft(pizza) -> Purchase:
    return Purchase.open(CustomerId("c-1"), pizza("10.00"), created_at=NOW)


def test_states_follow_the_lifecycle_order():
    assert PurchaseState.DRAFT.successor() is PurchaseState.PLACED
    assert PurchaseState.PLACED.successor() is PurchaseState.ONGOING
    assert PurchaseState.ONGOING.successor() is PurchaseState.SERVED
    assert PurchaseState.SERVED.successor() is None
    assert PurchaseState.SERVED.is_terminal
    assert not PurchaseState.DRAFT.is_terminal


def test_transitions_walk_forward_and_leave_the_original_untouched(pizza):
    draft = _draft(pizza)

    served = (
        draft.place(NOW)
        .bind(lambda p: p.start(StaffId("chef-1")))
        .bind(lambda p: p.serve(Money.of("10.00"), at=NOW))
        .unwrap()
    )

    assert draft.state is PurchaseState.DRAFT
    assert draft.amount is None
    assert served.state is PurchaseState.SERVED
    assert served.amount == Money.of("10.00")
    assert served.picked_by == StaffId("chef-1")


@pytest.mark.parametrize(
    "step, expected",
    [
        (lambda p: p.start(StaffId("chef-1")), "PLACED"),
        (lambda p: p.serve(Money.of("1.00"), at=NOW), "ONGOING"),
    ],
)
def test_stages_cannot_be_skipped(pizza, step, expected):
    err = step(_draft(pizza)).failure()

    assert isinstance(err, InvalidStateError)
    assert err.state == "DRAFT"
    assert err.expected == expected


def test_placed_purchase_cannot_go_back_or_grow(pizza):
    placed = _draft(pizza).place(NOW).unwrap()

    assert isinstance(placed.place(NOW).failure(), InvalidStateError)
    assert isinstance(placed.add_pizza(pizza("5.00")).failure(), InvalidStateError)


def test_money_rejects_mixed_currencies():
    with pytest.raises(ValueError, match="currency_mismatch"):
        Money.of("1.00", "EUR") + Money.of("1.00", "USD")


def test_money_quantizes_to_cents():
    assert Money.of("2.345").amount == Money.of("2.35").amount
    assert str(Money.of(3).amount) == "3.00"


def test_every_change_bumps_the_version(pizza):
    draft = _draft(pizza)
    grown = draft.add_pizza(pizza("5.00")).unwrap()
    placed = grown.place(NOW).unwrap()

    assert (draft.version, grown.version, placed.version) == (0, 1, 2)
