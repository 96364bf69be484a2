from __future__ import annotations

from typing import Protocol, Sequence

from returns.result import Result

from pizzeria.core.domain.model.errors import PurchaseError
from pizzeria.core.domain.model.purchase import (
    CustomerId,
    Purchase,
    PurchaseId,
    PurchaseState,
)


class PurchaseRepository(Protocol):
    """
    A real store backs ``save`` with a conditional update
    (``UPDATE ... WHERE state = :expected AND version = :version - 1``)
    so concurrent writers cannot both win.
    """

    def find_drafts(
        self, customer_id: CustomerId
    ) -> Result[Sequence[Purchase], PurchaseError]: ...

    def find_placed(self) -> Result[Purchase | None, PurchaseError]:
        """Oldest PLACED purchase by ``placed_at``; ties by insertion order."""
        ...

    def find(self, purchase_id: PurchaseId) -> Result[Purchase | None, PurchaseError]: ...

    def save(
        self, purchase: Purchase, expected_state: PurchaseState | None
    ) -> Result[Purchase, PurchaseError]:
        """Insert when ``expected_state`` is None.

        Otherwise the stored purchase must be in ``expected_state`` at
        ``purchase.version - 1``, or ``ConcurrentModificationError`` is returned.
        """
        ...
