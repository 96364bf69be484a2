from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Dict, Sequence

from returns.result import Failure, Result, Success

from pizzeria.core.domain.model.errors import (
    ConcurrentModificationError,
    PurchaseError,
)
from pizzeria.core.domain.model.purchase import (
    CustomerId,
    Purchase,
    PurchaseId,
    PurchaseState,
)
from pizzeria.core.ports.outbound.purchases import PurchaseRepository


@dataclass
class InMemoryPurchaseRepository(PurchaseRepository):
    _store: Dict[str, Purchase] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def find_drafts(
        self, customer_id: CustomerId
    ) -> Result[Sequence[Purchase], PurchaseError]:
        with self._lock:
            drafts = tuple(
                p
                for p in self._store.values()
                if p.state is PurchaseState.DRAFT and p.customer_id == customer_id
            )
        return Success(drafts)

    def find_placed(self) -> Result[Purchase | None, PurchaseError]:
        with self._lock:
            placed = [p for p in self._store.values() if p.state is PurchaseState.PLACED]
        if not placed:
            return Success(None)
        # min() keeps the first of equal keys, i.e. insertion order
        return Success(min(placed, key=lambda p: p.placed_at or p.created_at))

    def find(self, purchase_id: PurchaseId) -> Result[Purchase | None, PurchaseError]:
        with self._lock:
            return Success(self._store.get(str(purchase_id.value)))

    def save(
        self, purchase: Purchase, expected_state: PurchaseState | None
    ) -> Result[Purchase, PurchaseError]:
        key = str(purchase.purchase_id.value)
        with self._lock:
            current = self._store.get(key)
            if expected_state is None and current is not None:
                return Failure(
                    ConcurrentModificationError(
                        message="purchase already exists", purchase_id=key
                    )
                )
            if expected_state is not None and (
                current is None or current.state is not expected_state
            ):
                found = current.state.value if current is not None else "missing"
                return Failure(
                    ConcurrentModificationError(
                        message=f"expected {expected_state.value}, found {found}",
                        purchase_id=key,
                    )
                )
            if current is not None and current.version + 1 != purchase.version:
                return Failure(
                    ConcurrentModificationError(
                        message=(
                            f"stale write: stored version {current.version}, "
                            f"saving version {purchase.version}"
                        ),
                        purchase_id=key,
                    )
                )
            self._store[key] = purchase
        return Success(purchase)
