"""
FiscalYearService -- fiscal-year lifecycle persistence.

Responsibility:
    Creates, updates, designates-current, closes, stamps and deletes fiscal
    years, enforcing the lifecycle rules on the rows themselves.

Architecture position:
    Kernel > Services -- imperative shell.  Called by the fiscal_services
    orchestrators, which own the transaction.

Invariants enforced:
    - end_date > start_date.
    - Years of one company never overlap.
    - Exactly one current year per company: designating a year current
      unsets the previous current year in the same flush.  Only open years
      can be designated current.
    - open -> closed is one-way; closed years cannot be updated, deleted or
      reopened.
    - Flush-only: never commits or rolls back.

Failure modes:
    - FiscalYearNotFoundError, InvalidFiscalYearRangeError,
      FiscalYearOverlapError, FiscalYearClosedError,
      FiscalYearAlreadyClosedError, FiscalYearImmutableError,
      FiscalYearNotEmptyError.
    - PersistError when a concurrent transaction designated another current
      year for the company first.

Audit relevance:
    Creation, designation, close and delete are logged with structured
    fields (fiscal_year_id, company_id, actor_id, dates).
"""

from datetime import date
from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from fiscal_kernel.domain.clock import Clock, SystemClock
from fiscal_kernel.domain.dtos import FiscalYearInfo
from fiscal_kernel.exceptions import (
    FiscalYearAlreadyClosedError,
    FiscalYearClosedError,
    FiscalYearImmutableError,
    FiscalYearNotEmptyError,
    FiscalYearNotFoundError,
    FiscalYearOverlapError,
    InvalidFiscalYearRangeError,
    PersistError,
)
from fiscal_kernel.logging_config import get_logger
from fiscal_kernel.models.fiscal_year import FiscalYear, FiscalYearStatus
from fiscal_kernel.selectors.fiscal_year_selector import FiscalYearSelector
from fiscal_kernel.selectors.ledger_selector import LedgerSelector
from fiscal_kernel.services.base import BaseService
from fiscal_kernel.services.inventory_service import InventoryService

logger = get_logger("services.fiscal_year")


class FiscalYearService(BaseService[FiscalYear]):
    """
    Persistence of the fiscal-year state machine.

    Contract:
        Every mutating method flushes and returns a FiscalYearInfo snapshot
        (delete returns nothing).  lock_year() returns the ORM row locked
        FOR UPDATE for callers that re-check status under the lock.

    Non-goals:
        - Does NOT generate closing or opening entries (fiscal_engines).
        - Does NOT commit (fiscal_services orchestrators do).
    """

    def __init__(self, session: Session, clock: Clock | None = None):
        super().__init__(session)
        self._clock = clock or SystemClock()
        self._years = FiscalYearSelector(session)

    def create_year(
        self,
        company_id: UUID,
        name: str,
        start_date: date,
        end_date: date,
        actor_id: UUID,
        notes: str | None = None,
        is_current: bool = False,
    ) -> FiscalYearInfo:
        """
        Create an open fiscal year.

        Args:
            company_id: Owning company.
            name: Display name, e.g. "FY2024".
            start_date: First day (inclusive).
            end_date: Last day (inclusive), strictly after start_date.
            actor_id: Who is creating the year.
            notes: Free text.
            is_current: Designate the new year current, unsetting the
                previous current year.

        Raises:
            InvalidFiscalYearRangeError: If end_date <= start_date.
            FiscalYearOverlapError: If the range overlaps another year.
        """
        self._validate_range(start_date, end_date)
        self._validate_no_overlap(company_id, name, start_date, end_date)

        fiscal_year = FiscalYear(
            company_id=company_id,
            name=name,
            start_date=start_date,
            end_date=end_date,
            status=FiscalYearStatus.OPEN,
            is_current=False,
            notes=notes,
            created_by_id=actor_id,
        )
        self.session.add(fiscal_year)
        self.session.flush()

        if is_current:
            self._make_current(fiscal_year, actor_id)

        logger.info(
            "fiscal_year_created",
            extra={
                "fiscal_year_id": str(fiscal_year.id),
                "company_id": str(company_id),
                "fiscal_year_name": name,
                "start_date": str(start_date),
                "end_date": str(end_date),
                "is_current": is_current,
            },
        )
        return FiscalYearInfo.from_model(fiscal_year)

    def set_current(self, fiscal_year_id: UUID, actor_id: UUID) -> FiscalYearInfo:
        """
        Designate an open year as the company's current year.

        Raises:
            FiscalYearNotFoundError: If the year does not exist.
            FiscalYearClosedError: If the year is closed.
        """
        fiscal_year = self.lock_year(fiscal_year_id)
        if fiscal_year.is_closed:
            raise FiscalYearClosedError(str(fiscal_year_id), "set current")

        self._make_current(fiscal_year, actor_id)

        logger.info(
            "fiscal_year_set_current",
            extra={
                "fiscal_year_id": str(fiscal_year_id),
                "company_id": str(fiscal_year.company_id),
            },
        )
        return FiscalYearInfo.from_model(fiscal_year)

    def update_year(
        self,
        fiscal_year_id: UUID,
        actor_id: UUID,
        name: str | None = None,
        notes: str | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> FiscalYearInfo:
        """
        Edit an open year.  Dates are re-validated against range and overlap.

        Raises:
            FiscalYearImmutableError: If the year is closed.
        """
        fiscal_year = self.lock_year(fiscal_year_id)
        if fiscal_year.is_closed:
            raise FiscalYearImmutableError(str(fiscal_year_id), "update")

        new_start = start_date or fiscal_year.start_date
        new_end = end_date or fiscal_year.end_date
        if start_date is not None or end_date is not None:
            self._validate_range(new_start, new_end)
            self._validate_no_overlap(
                fiscal_year.company_id,
                name or fiscal_year.name,
                new_start,
                new_end,
                exclude_id=fiscal_year.id,
            )

        if name is not None:
            fiscal_year.name = name
        if notes is not None:
            fiscal_year.notes = notes
        fiscal_year.start_date = new_start
        fiscal_year.end_date = new_end
        fiscal_year.updated_by_id = actor_id
        self.session.flush()

        logger.info("fiscal_year_updated", extra={"fiscal_year_id": str(fiscal_year_id)})
        return FiscalYearInfo.from_model(fiscal_year)

    def close_year(
        self,
        fiscal_year_id: UUID,
        actor_id: UUID,
        closing_entry_id: UUID | None,
    ) -> FiscalYearInfo:
        """
        Mark a year closed and link its closing entry.

        closed_at comes from the injected clock.

        Raises:
            FiscalYearAlreadyClosedError: If the year is already closed.
        """
        fiscal_year = self.lock_year(fiscal_year_id)
        if fiscal_year.is_closed:
            raise FiscalYearAlreadyClosedError(str(fiscal_year_id))

        fiscal_year.close(actor_id, self._clock.now(), closing_entry_id)
        self.session.flush()

        logger.info(
            "fiscal_year_closed",
            extra={
                "fiscal_year_id": str(fiscal_year_id),
                "closing_entry_id": str(closing_entry_id) if closing_entry_id else None,
            },
        )
        return FiscalYearInfo.from_model(fiscal_year)

    def stamp_opening_entry(
        self,
        fiscal_year_id: UUID,
        opening_entry_id: UUID | None,
        actor_id: UUID,
    ) -> FiscalYearInfo:
        """Record (or clear, with None) the year's opening entry."""
        fiscal_year = self.lock_year(fiscal_year_id)
        fiscal_year.opening_balance_entry_id = opening_entry_id
        fiscal_year.updated_by_id = actor_id
        self.session.flush()
        return FiscalYearInfo.from_model(fiscal_year)

    def delete_year(self, fiscal_year_id: UUID) -> None:
        """
        Delete an open year that no journal entry references.  Inventory
        items assigned to the year are detached first.

        Raises:
            FiscalYearClosedError: If the year is closed.
            FiscalYearNotEmptyError: If journal entries reference the year.
        """
        fiscal_year = self.lock_year(fiscal_year_id)
        if fiscal_year.is_closed:
            raise FiscalYearClosedError(str(fiscal_year_id), "delete")

        entry_count = LedgerSelector(self.session).entry_count_for_fiscal_year(
            fiscal_year_id
        )
        if entry_count:
            raise FiscalYearNotEmptyError(str(fiscal_year_id), entry_count)

        InventoryService(self.session).detach_year(fiscal_year_id)
        self.session.execute(
            delete(FiscalYear)
            .where(FiscalYear.id == fiscal_year_id)
            .where(FiscalYear.status == FiscalYearStatus.OPEN.value)
        )
        self.session.flush()

        logger.info("fiscal_year_deleted", extra={"fiscal_year_id": str(fiscal_year_id)})

    def reopen_year(self, fiscal_year_id: UUID, actor_id: UUID) -> FiscalYearInfo:
        """
        Attempt to reopen a year.  Closing is one-way, so this always fails
        for a closed year; an open year is returned unchanged.

        Raises:
            FiscalYearImmutableError: Always, for a closed year.
        """
        fiscal_year = self._get(fiscal_year_id)
        if fiscal_year.is_closed:
            logger.warning(
                "fiscal_year_reopen_refused",
                extra={"fiscal_year_id": str(fiscal_year_id), "actor_id": str(actor_id)},
            )
            raise FiscalYearImmutableError(str(fiscal_year_id), "reopen")
        return FiscalYearInfo.from_model(fiscal_year)

    def lock_year(self, fiscal_year_id: UUID) -> FiscalYear:
        """
        Load the year with SELECT ... FOR UPDATE.

        Raises:
            FiscalYearNotFoundError: If the year does not exist.
        """
        fiscal_year = self.session.execute(
            select(FiscalYear)
            .where(FiscalYear.id == fiscal_year_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()
        if fiscal_year is None:
            raise FiscalYearNotFoundError(str(fiscal_year_id))
        return fiscal_year

    def _get(self, fiscal_year_id: UUID) -> FiscalYear:
        fiscal_year = self.session.get(FiscalYear, fiscal_year_id)
        if fiscal_year is None:
            raise FiscalYearNotFoundError(str(fiscal_year_id))
        return fiscal_year

    def _make_current(self, fiscal_year: FiscalYear, actor_id: UUID) -> None:
        """
        Unset the company's current year and designate this one.

        Raises:
            PersistError: If another transaction designated a current year
                for the company concurrently (uq_fiscal_year_one_current).
        """
        try:
            self.session.execute(
                update(FiscalYear)
                .where(FiscalYear.company_id == fiscal_year.company_id)
                .where(FiscalYear.id != fiscal_year.id)
                .where(FiscalYear.is_current.is_(True))
                .values(is_current=False, updated_by_id=actor_id)
            )
            fiscal_year.is_current = True
            fiscal_year.updated_by_id = actor_id
            self.session.flush()
        except IntegrityError as exc:
            logger.warning(
                "current_fiscal_year_conflict",
                extra={
                    "fiscal_year_id": str(fiscal_year.id),
                    "company_id": str(fiscal_year.company_id),
                },
            )
            raise PersistError("current fiscal year designation", str(exc.orig)) from exc

    @staticmethod
    def _validate_range(start_date: date, end_date: date) -> None:
        if end_date <= start_date:
            raise InvalidFiscalYearRangeError(str(start_date), str(end_date))

    def _validate_no_overlap(
        self,
        company_id: UUID,
        name: str,
        start_date: date,
        end_date: date,
        exclude_id: UUID | None = None,
    ) -> None:
        """Two ranges overlap if start1 <= end2 and start2 <= end1."""
        overlapping = self._years.overlapping(company_id, start_date, end_date, exclude_id)
        if overlapping:
            existing = overlapping[0]
            raise FiscalYearOverlapError(
                new_name=name,
                existing_name=existing.name,
                overlap_start=str(max(start_date, existing.start_date)),
                overlap_end=str(min(end_date, existing.end_date)),
            )
