"""Pure domain types and the injectable clock."""

from fiscal_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from fiscal_kernel.domain.dtos import (
    BALANCE_SHEET_TYPES,
    CREDIT_NORMAL_TYPES,
    INCOME_STATEMENT_TYPES,
    AccountInfo,
    AccountType,
    DraftEntry,
    EntryLine,
    FiscalYearInfo,
    FiscalYearStatus,
    LedgerLine,
    ReferenceType,
    generated_entry_key,
)

__all__ = [
    "Clock",
    "SystemClock",
    "DeterministicClock",
    "AccountType",
    "CREDIT_NORMAL_TYPES",
    "BALANCE_SHEET_TYPES",
    "INCOME_STATEMENT_TYPES",
    "FiscalYearStatus",
    "FiscalYearInfo",
    "AccountInfo",
    "LedgerLine",
    "EntryLine",
    "DraftEntry",
    "ReferenceType",
    "generated_entry_key",
]
