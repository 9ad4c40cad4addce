"""
Module: fiscal_kernel.selectors.ledger_selector
Responsibility: Read-only ledger queries.  Balances are never stored; every
    figure the engines use is derived from posted journal lines at query
    time.
Architecture position: Kernel > Selectors.

Invariants enforced:
    - Only lines of posted entries of the requested company are returned.
    - Date windows are inclusive on both ends.

Failure modes:
    - FetchError on any database read failure.  Callers abort the operation
      instead of computing balances from partial data.
"""

from collections.abc import Collection
from datetime import date
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from fiscal_kernel.domain.dtos import LedgerLine, ReferenceType, generated_entry_key
from fiscal_kernel.exceptions import FetchError
from fiscal_kernel.logging_config import get_logger
from fiscal_kernel.models.journal import JournalEntry, JournalLine
from fiscal_kernel.selectors.base import BaseSelector

logger = get_logger("selectors.ledger")


class LedgerSelector(BaseSelector[JournalLine]):
    """
    Selector for ledger lines.

    Contract:
        lines_between() returns the lines of one fiscal window;
        lines_through() returns the cumulative ledger up to a date.  Both
        order results by entry_date, entry id and line_seq so callers see a
        deterministic sequence.

    Non-goals:
        - No aggregation here; fiscal_engines.balances owns the sign rules.
    """

    def __init__(self, session: Session):
        super().__init__(session)

    def _base_query(self, company_id: UUID):
        return (
            select(
                JournalLine.journal_entry_id,
                JournalLine.account_id,
                JournalLine.debit,
                JournalLine.credit,
                JournalEntry.entry_date,
                JournalEntry.reference_type,
            )
            .join(JournalEntry, JournalLine.journal_entry_id == JournalEntry.id)
            .where(JournalEntry.company_id == company_id)
            .where(JournalEntry.is_posted.is_(True))
            .order_by(
                JournalEntry.entry_date,
                JournalEntry.id,
                JournalLine.line_seq,
            )
        )

    def _fetch(self, query, what: str) -> list[LedgerLine]:
        try:
            rows = self.session.execute(query).all()
        except SQLAlchemyError as exc:
            logger.error("ledger_fetch_failed", extra={"what": what, "error": str(exc)})
            raise FetchError(what, str(exc)) from exc

        return [
            LedgerLine(
                journal_entry_id=row.journal_entry_id,
                account_id=row.account_id,
                debit=row.debit,
                credit=row.credit,
                entry_date=row.entry_date,
                reference_type=row.reference_type,
            )
            for row in rows
        ]

    def lines_between(
        self,
        company_id: UUID,
        start_date: date,
        end_date: date,
    ) -> list[LedgerLine]:
        """
        Posted lines with start_date <= entry_date <= end_date.

        Args:
            company_id: Company whose ledger is read.
            start_date: First day of the window (inclusive).
            end_date: Last day of the window (inclusive).

        Returns:
            LedgerLine DTOs in deterministic order.

        Raises:
            FetchError: If the read fails.
        """
        query = (
            self._base_query(company_id)
            .where(JournalEntry.entry_date >= start_date)
            .where(JournalEntry.entry_date <= end_date)
        )
        return self._fetch(query, "journal lines")

    def lines_through(
        self,
        company_id: UUID,
        end_date: date,
        exclude_entry_ids: Collection[UUID] = (),
        include_generated_openings: bool = True,
    ) -> list[LedgerLine]:
        """
        Cumulative posted lines with entry_date <= end_date.

        exclude_entry_ids drops specific entries, e.g. the opening entry a
        refresh is about to replace.  With include_generated_openings=False
        the carry-forward entries generated for earlier years are skipped:
        they restate balances the cumulative history already holds.
        """
        query = self._base_query(company_id).where(JournalEntry.entry_date <= end_date)
        if exclude_entry_ids:
            query = query.where(JournalEntry.id.not_in(list(exclude_entry_ids)))
        if not include_generated_openings:
            query = query.where(
                or_(
                    JournalEntry.idempotency_key.is_(None),
                    ~JournalEntry.idempotency_key.startswith(
                        f"{ReferenceType.OPENING.value}:", autoescape=True
                    ),
                )
            )
        return self._fetch(query, "cumulative journal lines")

    def generated_entry_id(
        self,
        reference_type: str,
        fiscal_year_id: UUID,
    ) -> UUID | None:
        """Id of the closing/opening entry generated for a year, if any."""
        key = generated_entry_key(reference_type, fiscal_year_id)
        try:
            return self.session.execute(
                select(JournalEntry.id).where(JournalEntry.idempotency_key == key)
            ).scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise FetchError("generated entry", str(exc)) from exc

    def entry_count_for_fiscal_year(self, fiscal_year_id: UUID) -> int:
        """Number of journal entries that reference the fiscal year."""
        try:
            return self.session.execute(
                select(func.count(JournalEntry.id)).where(
                    JournalEntry.fiscal_year_id == fiscal_year_id
                )
            ).scalar_one()
        except SQLAlchemyError as exc:
            raise FetchError("journal entry count", str(exc)) from exc
