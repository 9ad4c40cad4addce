"""
Module: fiscal_kernel.models.journal
Responsibility: ORM persistence for journal entries and journal lines, the
    append-only ledger every balance is derived from.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - idempotency_key is unique when present; generated closing and opening
      entries carry "closing:<fiscal_year_id>" / "opening:<fiscal_year_id>",
      so a year can never hold two of either.
    - total_debit == total_credit for every posted entry, at header and
      line-sum level (checked by the generators and JournalWriter before
      flush; is_balanced is the read-side check).
    - debit >= 0 and credit >= 0 on every line (CHECK constraints).

Failure modes:
    - IntegrityError on duplicate idempotency_key.
    - IntegrityError on a negative debit or credit.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from uuid import UUID

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fiscal_kernel.db.base import TrackedBase, UUIDString


class ReferenceType(str, Enum):
    """Origin of a journal entry."""

    OPENING = "opening"
    CLOSING = "closing"
    SALE = "sale"
    PURCHASE = "purchase"
    CUSTOMER_BALANCE_FORWARD = "customer_balance_forward"
    SUPPLIER_BALANCE_FORWARD = "supplier_balance_forward"
    MANUAL = "manual"


class JournalEntry(TrackedBase):
    """
    Journal entry header.

    Contract:
        total_debit and total_credit are denormalized line sums written
        together with the lines.  created_by_id records the actor.

    Non-goals:
        - Balance is not enforced at the ORM level.
    """

    __tablename__ = "journal_entries"

    __table_args__ = (
        Index("idx_journal_company_date", "company_id", "entry_date"),
        Index("idx_journal_fiscal_year", "fiscal_year_id"),
        Index("idx_journal_reference_type", "reference_type"),
    )

    company_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        nullable=False,
    )

    description: Mapped[str | None] = mapped_column(
        String(500),
        nullable=True,
    )

    entry_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
    )

    total_debit: Mapped[Decimal] = mapped_column(
        Numeric(38, 9),
        default=Decimal("0"),
        nullable=False,
    )

    total_credit: Mapped[Decimal] = mapped_column(
        Numeric(38, 9),
        default=Decimal("0"),
        nullable=False,
    )

    is_posted: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )

    reference_type: Mapped[str] = mapped_column(
        String(50),
        default=ReferenceType.MANUAL.value,
        nullable=False,
    )

    reference_id: Mapped[UUID | None] = mapped_column(
        UUIDString(),
        nullable=True,
    )

    fiscal_year_id: Mapped[UUID | None] = mapped_column(
        UUIDString(),
        ForeignKey("fiscal_years.id"),
        nullable=True,
    )

    idempotency_key: Mapped[str | None] = mapped_column(
        String(300),
        nullable=True,
        unique=True,
    )

    lines: Mapped[list["JournalLine"]] = relationship(
        back_populates="entry",
        cascade="all, delete-orphan",
        order_by="JournalLine.line_seq",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<JournalEntry {self.id} {self.reference_type} {self.entry_date}>"

    @property
    def line_debits(self) -> Decimal:
        return sum((line.debit for line in self.lines), Decimal("0"))

    @property
    def line_credits(self) -> Decimal:
        return sum((line.credit for line in self.lines), Decimal("0"))

    @property
    def is_balanced(self) -> bool:
        """Header totals agree with each other and with the line sums."""
        return (
            self.total_debit == self.total_credit
            and self.line_debits == self.total_debit
            and self.line_credits == self.total_credit
        )


class JournalLine(TrackedBase):
    """
    One debit or credit line of a journal entry.

    Guarantees:
        - debit >= 0 and credit >= 0.
        - line_seq gives a deterministic order within the entry.
    """

    __tablename__ = "journal_lines"

    __table_args__ = (
        CheckConstraint("debit >= 0", name="ck_line_debit_non_negative"),
        CheckConstraint("credit >= 0", name="ck_line_credit_non_negative"),
        Index("idx_line_entry", "journal_entry_id"),
        Index("idx_line_account", "account_id"),
    )

    journal_entry_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("journal_entries.id"),
        nullable=False,
    )

    account_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("accounts.id"),
        nullable=False,
    )

    debit: Mapped[Decimal] = mapped_column(
        Numeric(38, 9),
        default=Decimal("0"),
        nullable=False,
    )

    credit: Mapped[Decimal] = mapped_column(
        Numeric(38, 9),
        default=Decimal("0"),
        nullable=False,
    )

    description: Mapped[str | None] = mapped_column(
        String(500),
        nullable=True,
    )

    line_seq: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
    )

    entry: Mapped[JournalEntry] = relationship(back_populates="lines")

    def __repr__(self) -> str:
        return f"<JournalLine {self.account_id} Dr {self.debit} Cr {self.credit}>"
