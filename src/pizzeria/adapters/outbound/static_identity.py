from __future__ import annotations

from dataclasses import dataclass

from returns.result import Failure, Result, Success

from pizzeria.core.domain.model.errors import PurchaseError, ValidationError
from pizzeria.core.domain.model.purchase import CustomerId
from pizzeria.core.ports.outbound.identity import IdentityProvider


@dataclass
class StaticIdentityProvider(IdentityProvider):
    customer_id: str | None = None

    def current_customer(self) -> Result[CustomerId, PurchaseError]:
        if not self.customer_id or not self.customer_id.strip():
            return Failure(ValidationError(message="no authenticated customer"))
        return Success(CustomerId(self.customer_id.strip()))
