from __future__ import annotations

from typing import Protocol

from returns.result import Result

from pizzeria.core.domain.model.errors import PurchaseError
from pizzeria.core.domain.model.purchase import CustomerId


class IdentityProvider(Protocol):
    def current_customer(self) -> Result[CustomerId, PurchaseError]: ...
