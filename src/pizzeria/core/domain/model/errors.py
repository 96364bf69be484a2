from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PurchaseError(Exception):
    message: str

    def __str__(self) -> str:  # pragma: no cover
        return self.message


@dataclass(frozen=True)
class ValidationError(PurchaseError):
    pass


@dataclass(frozen=True)
class ConsistencyError(PurchaseError):
    customer_id: str
    drafts: int

    def __str__(self) -> str:  # pragma: no cover
        return f"consistency: customer={self.customer_id} drafts={self.drafts} ({self.message})"


@dataclass(frozen=True)
class NotFoundError(PurchaseError):
    purchase_id: str

    def __str__(self) -> str:  # pragma: no cover
        return f"not_found: {self.purchase_id} ({self.message})"


@dataclass(frozen=True)
class InvalidStateError(PurchaseError):
    purchase_id: str
    state: str
    expected: str

    def __str__(self) -> str:  # pragma: no cover
        return (
            f"invalid_state: {self.purchase_id} is {self.state}, "
            f"expected {self.expected} ({self.message})"
        )


@dataclass(frozen=True)
class PersistenceError(PurchaseError):
    pass


@dataclass(frozen=True)
class ConcurrentModificationError(PersistenceError):
    purchase_id: str

    def __str__(self) -> str:  # pragma: no cover
        return f"concurrent_modification: {self.purchase_id} ({self.message})"
