"""Flush-only kernel services."""

from fiscal_kernel.services.balance_forward_service import BalanceForwardService
from fiscal_kernel.services.base import BaseService
from fiscal_kernel.services.fiscal_year_service import FiscalYearService
from fiscal_kernel.services.inventory_service import InventoryService
from fiscal_kernel.services.journal_writer import JournalWriter
from fiscal_kernel.services.year_lock import YearLockRegistry, default_year_locks

__all__ = [
    "BaseService",
    "FiscalYearService",
    "JournalWriter",
    "InventoryService",
    "BalanceForwardService",
    "YearLockRegistry",
    "default_year_locks",
]
