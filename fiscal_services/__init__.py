"""
fiscal_services -- transaction-owning public API of the fiscal-year engine.

Usage::

    orchestrator = FiscalYearOrchestrator(session, clock=clock)
    result = orchestrator.close_fiscal_year(fiscal_year_id, company_id, closed_by=actor_id)
    if not result.success:
        print(result.error_code, result.error)
"""

from fiscal_services._lifecycle_types import (
    CloseResult,
    DeleteResult,
    InventoryResult,
    OpenResult,
    OperationResult,
    RefreshResult,
)
from fiscal_services.carry_forward_orchestrator import CarryForwardOrchestrator
from fiscal_services.fiscal_year_orchestrator import FiscalYearOrchestrator

__all__ = [
    "FiscalYearOrchestrator",
    "CarryForwardOrchestrator",
    "OperationResult",
    "CloseResult",
    "OpenResult",
    "DeleteResult",
    "RefreshResult",
    "InventoryResult",
]
