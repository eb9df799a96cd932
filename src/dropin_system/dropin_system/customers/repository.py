from __future__ import annotations

from datetime import date
from typing import Any, Optional, Protocol, Sequence

from .model import Customer, CustomerListRow


class CustomerRepository(Protocol):
    def get_by_id(self, customer_id: int) -> Optional[Customer]:
        raise NotImplementedError

    def search(
        self,
        *,
        today: date,
        customer_id: Optional[int] = None,
        name: Optional[str] = None,
        gender: Optional[str] = None,
        eligible: Optional[bool] = None,
        interpreter: Optional[int] = None,
    ) -> Sequence[CustomerListRow]:
        """Ordered by name ascending."""

        raise NotImplementedError

    def create(self, customer: Customer) -> int:
        """Insert and return the new id; ``customer.customer_id`` is ignored."""

        raise NotImplementedError

    def update(self, customer: Customer) -> bool:
        raise NotImplementedError

    def delete(self, customer_id: int) -> bool:
        """Delete the customer together with their attendance rows."""

        raise NotImplementedError

    def list_all(self) -> Sequence[Customer]:
        raise NotImplementedError

    def list_observations(self) -> Sequence[dict[str, Any]]:
        raise NotImplementedError
