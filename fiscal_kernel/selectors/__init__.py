"""Read-only selectors returning domain DTOs."""

from fiscal_kernel.selectors.account_selector import AccountSelector
from fiscal_kernel.selectors.base import BaseSelector
from fiscal_kernel.selectors.fiscal_year_selector import FiscalYearSelector
from fiscal_kernel.selectors.ledger_selector import LedgerSelector

__all__ = [
    "BaseSelector",
    "LedgerSelector",
    "AccountSelector",
    "FiscalYearSelector",
]
