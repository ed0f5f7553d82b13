"""Interfaces of the external collaborators the configurator talks to.

Any object with the right async methods can be injected, including mocks
in tests.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Protocol, runtime_checkable

from armora.schemas.booking import ConfirmedAssignment, PaymentOutcome


@runtime_checkable
class PaymentCollaborator(Protocol):
    """Charges the final fee. Returns a success token or a failure reason."""

    async def charge(self, amount: Decimal, summary: dict[str, Any]) -> PaymentOutcome:
        ...


@runtime_checkable
class HistoryCollaborator(Protocol):
    """Receives the read-only confirmed assignment after a successful payment."""

    async def record(self, assignment: ConfirmedAssignment) -> None:
        ...
