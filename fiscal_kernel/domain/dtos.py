"""
DTOs -- Pure domain data transfer objects.

Responsibility:
    Immutable data structures that flow between the selectors, the pure
    engines and the services: FiscalYearInfo and AccountInfo (snapshots of
    persisted rows), LedgerLine (ledger reader output), EntryLine and
    DraftEntry (generator output, persistence input).

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.  from_model() class
    methods are boundary converters invoked only from selectors and
    services.

Invariants enforced:
    - EntryLine debit and credit are never negative.
    - DraftEntry carries at least one line.

Failure modes:
    - ValueError on a negative EntryLine amount.
    - ValueError on a DraftEntry with no lines.

Data flow:
    JournalLine rows -> LedgerLine -> (engines) -> DraftEntry -> JournalWriter
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID

if TYPE_CHECKING:
    from fiscal_kernel.models.account import Account as AccountModel
    from fiscal_kernel.models.fiscal_year import FiscalYear as FiscalYearModel


class AccountType(str, Enum):
    """Account classification used by the engines."""

    ASSETS = "assets"
    LIABILITIES = "liabilities"
    EQUITY = "equity"
    REVENUE = "revenue"
    EXPENSES = "expenses"


# Balance grows on the credit side
CREDIT_NORMAL_TYPES = frozenset(
    {AccountType.LIABILITIES, AccountType.EQUITY, AccountType.REVENUE}
)

# Carried forward into the next fiscal year
BALANCE_SHEET_TYPES = frozenset(
    {AccountType.ASSETS, AccountType.LIABILITIES, AccountType.EQUITY}
)

# Zeroed into retained earnings at year end
INCOME_STATEMENT_TYPES = frozenset({AccountType.REVENUE, AccountType.EXPENSES})


class FiscalYearStatus(str, Enum):
    OPEN = "open"
    CLOSED = "closed"


class ReferenceType(str, Enum):
    """Origin of a journal entry."""

    OPENING = "opening"
    CLOSING = "closing"
    SALE = "sale"
    PURCHASE = "purchase"
    CUSTOMER_BALANCE_FORWARD = "customer_balance_forward"
    SUPPLIER_BALANCE_FORWARD = "supplier_balance_forward"
    MANUAL = "manual"


def generated_entry_key(reference_type: ReferenceType | str, fiscal_year_id: UUID) -> str:
    """Idempotency key of the closing/opening entry generated for a year."""
    return f"{ReferenceType(reference_type).value}:{fiscal_year_id}"


@dataclass(frozen=True)
class FiscalYearInfo:
    """
    Pure domain representation of a fiscal year.

    Contract:
        Immutable snapshot of fiscal-year state.  Generators read the date
        boundaries and id from it; the orchestrators return it to callers.

    Non-goals:
        - Does NOT enforce lifecycle rules (FiscalYearService does that).
    """

    id: UUID
    company_id: UUID
    name: str
    start_date: date
    end_date: date
    status: FiscalYearStatus
    is_current: bool = False
    opening_balance_entry_id: UUID | None = None
    closing_balance_entry_id: UUID | None = None
    closed_at: datetime | None = None
    closed_by: UUID | None = None
    notes: str | None = None

    @property
    def is_open(self) -> bool:
        return self.status == FiscalYearStatus.OPEN

    @property
    def is_closed(self) -> bool:
        return self.status == FiscalYearStatus.CLOSED

    def contains_date(self, check_date: date) -> bool:
        """Check if a date falls within this year."""
        return self.start_date <= check_date <= self.end_date

    @classmethod
    def from_model(cls, model: FiscalYearModel) -> FiscalYearInfo:
        return cls(
            id=model.id,
            company_id=model.company_id,
            name=model.name,
            start_date=model.start_date,
            end_date=model.end_date,
            status=FiscalYearStatus(model.status),
            is_current=bool(model.is_current),
            opening_balance_entry_id=model.opening_balance_entry_id,
            closing_balance_entry_id=model.closing_balance_entry_id,
            closed_at=model.closed_at,
            closed_by=model.closed_by,
            notes=model.notes,
        )


@dataclass(frozen=True)
class AccountInfo:
    """
    Pure domain representation of a chart-of-accounts entry.

    Guarantees:
        - account_type is always an AccountType member.
    """

    id: UUID
    code: str
    name: str
    account_type: AccountType
    company_id: UUID | None = None
    parent_id: UUID | None = None
    is_system: bool = False

    @property
    def is_credit_normal(self) -> bool:
        return self.account_type in CREDIT_NORMAL_TYPES

    @property
    def is_balance_sheet(self) -> bool:
        return self.account_type in BALANCE_SHEET_TYPES

    @property
    def is_income_statement(self) -> bool:
        return self.account_type in INCOME_STATEMENT_TYPES

    @classmethod
    def from_model(cls, model: AccountModel) -> AccountInfo:
        return cls(
            id=model.id,
            code=model.code,
            name=model.name,
            account_type=AccountType(model.account_type),
            company_id=model.company_id,
            parent_id=model.parent_id,
            is_system=bool(model.is_system),
        )


@dataclass(frozen=True)
class LedgerLine:
    """One posted journal line, flattened with its entry's date and origin."""

    journal_entry_id: UUID
    account_id: UUID
    debit: Decimal
    credit: Decimal
    entry_date: date
    reference_type: str


@dataclass(frozen=True)
class EntryLine:
    """
    A line of a generated entry.

    Contract:
        Exactly one of debit/credit is nonzero on generated lines.

    Raises:
        ValueError: If debit or credit is negative.
    """

    account_id: UUID
    debit: Decimal = Decimal("0")
    credit: Decimal = Decimal("0")
    description: str | None = None

    def __post_init__(self) -> None:
        if self.debit < 0 or self.credit < 0:
            raise ValueError(
                f"Entry line amounts must be non-negative: "
                f"debit={self.debit}, credit={self.credit}"
            )


@dataclass(frozen=True)
class DraftEntry:
    """
    A balanced, not-yet-persisted journal entry produced by a generator.

    Contract:
        total_debit and total_credit are the line sums.  The generators
        verify balance before returning a draft; JournalWriter verifies it
        again before writing.
    """

    company_id: UUID
    fiscal_year_id: UUID
    entry_date: date
    reference_type: str
    description: str
    lines: tuple[EntryLine, ...]
    idempotency_key: str | None = None

    def __post_init__(self) -> None:
        if not self.lines:
            raise ValueError("DraftEntry requires at least one line")

    @property
    def total_debit(self) -> Decimal:
        return sum((line.debit for line in self.lines), Decimal("0"))

    @property
    def total_credit(self) -> Decimal:
        return sum((line.credit for line in self.lines), Decimal("0"))

    @property
    def is_balanced(self) -> bool:
        return self.total_debit == self.total_credit
