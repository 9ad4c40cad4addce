"""ORM models for the fiscal kernel."""

from fiscal_kernel.models.account import Account, AccountType
from fiscal_kernel.models.company_settings import CompanySettings
from fiscal_kernel.models.fiscal_year import FiscalYear, FiscalYearStatus
from fiscal_kernel.models.inventory import InventoryItem, InventoryStatus
from fiscal_kernel.models.journal import (
    JournalEntry,
    JournalLine,
    ReferenceType,
)
from fiscal_kernel.models.party import Party, PartyType

__all__ = [
    "Account",
    "AccountType",
    "CompanySettings",
    "FiscalYear",
    "FiscalYearStatus",
    "InventoryItem",
    "InventoryStatus",
    "JournalEntry",
    "JournalLine",
    "ReferenceType",
    "Party",
    "PartyType",
]
