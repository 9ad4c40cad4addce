"""
Module: fiscal_kernel.models.fiscal_year
Responsibility: ORM persistence for the fiscal-year lifecycle of a company.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - end_date > start_date (checked by FiscalYearService).
    - At most one year per company has is_current = True (partial unique
      index uq_fiscal_year_one_current).  FiscalYearService unsets the
      previous current year in the same transaction and only designates
      open years.
    - Years of one company never overlap (checked by FiscalYearService).
    - open -> closed is one-way.  A closed year is immutable.

Failure modes:
    - ValueError from close() when the year is already closed.

Audit relevance:
    opening_balance_entry_id and closing_balance_entry_id link the year to
    the generated carry-forward and closing entries; closed_at / closed_by
    record who closed the year and when.
"""

from datetime import date, datetime
from enum import Enum
from uuid import UUID

from sqlalchemy import Boolean, Date, DateTime, Index, String, text
from sqlalchemy.orm import Mapped, mapped_column

from fiscal_kernel.db.base import TrackedBase, UUIDString


class FiscalYearStatus(str, Enum):
    """Lifecycle status of a fiscal year.  OPEN -> CLOSED only."""

    OPEN = "open"
    CLOSED = "closed"


class FiscalYear(TrackedBase):
    """
    Fiscal year of one company.

    Contract:
        Journal entries, inventory items and generated closing/opening
        entries refer to the year by id.  The entry id columns are plain
        references (no foreign key) because journal_entries also points back
        at fiscal_years.

    Non-goals:
        - Overlap is checked by FiscalYearService, not by the model.
    """

    __tablename__ = "fiscal_years"

    __table_args__ = (
        Index("idx_fiscal_year_company_dates", "company_id", "start_date", "end_date"),
        # One current year per company, also under concurrent designation
        Index(
            "uq_fiscal_year_one_current",
            "company_id",
            unique=True,
            postgresql_where=text("is_current"),
            sqlite_where=text("is_current = 1"),
        ),
    )

    company_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        nullable=False,
    )

    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )

    # Inclusive boundaries
    start_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
    )

    end_date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
    )

    status: Mapped[FiscalYearStatus] = mapped_column(
        String(20),
        default=FiscalYearStatus.OPEN,
        nullable=False,
    )

    is_current: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )

    opening_balance_entry_id: Mapped[UUID | None] = mapped_column(
        UUIDString(),
        nullable=True,
    )

    closing_balance_entry_id: Mapped[UUID | None] = mapped_column(
        UUIDString(),
        nullable=True,
    )

    closed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    closed_by: Mapped[UUID | None] = mapped_column(
        UUIDString(),
        nullable=True,
    )

    notes: Mapped[str | None] = mapped_column(
        String(2000),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<FiscalYear {self.name}: {FiscalYearStatus(self.status).value}>"

    @property
    def is_open(self) -> bool:
        return self.status == FiscalYearStatus.OPEN

    @property
    def is_closed(self) -> bool:
        return self.status == FiscalYearStatus.CLOSED

    def contains_date(self, check_date: date) -> bool:
        """Check if a date falls within this year."""
        return self.start_date <= check_date <= self.end_date

    def close(
        self,
        actor_id: UUID,
        closed_at: datetime,
        closing_entry_id: UUID | None,
    ) -> None:
        """Close the year.

        Preconditions: Year must be open.
        Postconditions: status is CLOSED; closed_at, closed_by and closing_balance_entry_id are populated.

        Note: closed_at comes from the injected clock.
        """
        if self.is_closed:
            raise ValueError(f"Fiscal year {self.name} is already closed")

        self.status = FiscalYearStatus.CLOSED
        self.closed_at = closed_at
        self.closed_by = actor_id
        self.closing_balance_entry_id = closing_entry_id
        self.updated_by_id = actor_id
