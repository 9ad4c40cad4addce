"""
fiscal_services._lifecycle_types -- Result DTOs of the fiscal-year orchestrators.

Responsibility:
    Frozen result objects returned across the public boundary of
    FiscalYearOrchestrator and CarryForwardOrchestrator.  Failures are
    reported in the result (success=False, one human-readable error plus
    a machine error_code) instead of raised.

Architecture position:
    Services -- the types live here because the orchestrators that produce
    them live here.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import TypeVar
from uuid import UUID

from fiscal_kernel.domain.dtos import FiscalYearInfo

UNEXPECTED_ERROR = "UNEXPECTED_ERROR"

ResultT = TypeVar("ResultT", bound="_Outcome")


@dataclass(frozen=True)
class _Outcome:
    success: bool
    error: str | None = None
    error_code: str | None = None

    @property
    def is_success(self) -> bool:
        return self.success

    @classmethod
    def failed(cls: type[ResultT], exc: Exception) -> ResultT:
        """Failure result carrying the exception message and its code."""
        return cls(
            success=False,
            error=str(exc) or type(exc).__name__,
            error_code=getattr(exc, "code", UNEXPECTED_ERROR),
        )


@dataclass(frozen=True)
class OperationResult(_Outcome):
    """Outcome of create / set-current / update / reopen."""

    fiscal_year: FiscalYearInfo | None = None


@dataclass(frozen=True)
class CloseResult(_Outcome):
    """
    Outcome of a year close.

    closing_entry_id is None on success when the year had no revenue or
    expense activity.
    """

    closing_entry_id: UUID | None = None
    fiscal_year: FiscalYearInfo | None = None
    net_income: Decimal | None = None


@dataclass(frozen=True)
class OpenResult(_Outcome):
    fiscal_year_id: UUID | None = None
    opening_entry_id: UUID | None = None
    fiscal_year: FiscalYearInfo | None = None


@dataclass(frozen=True)
class DeleteResult(_Outcome):
    fiscal_year_id: UUID | None = None


@dataclass(frozen=True)
class RefreshResult(_Outcome):
    """Outcome of refresh_all_carry_forward_balances."""

    opening_balances_updated: bool = False
    opening_entry_id: UUID | None = None
    inventory_count: int = 0
    customer_count: int = 0
    supplier_count: int = 0


@dataclass(frozen=True)
class InventoryResult(_Outcome):
    count: int | None = None
