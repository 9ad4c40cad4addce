"""
Module: fiscal_kernel.selectors.fiscal_year_selector
Responsibility: Read-only fiscal-year queries (lookup, listing, the current
    year, overlap detection).
Architecture position: Kernel > Selectors.
"""

from datetime import date
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from fiscal_kernel.domain.dtos import FiscalYearInfo
from fiscal_kernel.exceptions import FetchError
from fiscal_kernel.models.fiscal_year import FiscalYear
from fiscal_kernel.selectors.base import BaseSelector


class FiscalYearSelector(BaseSelector[FiscalYear]):
    """Selector for fiscal years."""

    def __init__(self, session: Session):
        super().__init__(session)

    def get(self, fiscal_year_id: UUID) -> FiscalYearInfo | None:
        try:
            row = self.session.get(FiscalYear, fiscal_year_id)
        except SQLAlchemyError as exc:
            raise FetchError("fiscal year", str(exc)) from exc
        return FiscalYearInfo.from_model(row) if row is not None else None

    def list_for_company(self, company_id: UUID) -> list[FiscalYearInfo]:
        """All years of the company, newest first."""
        try:
            rows = self.session.scalars(
                select(FiscalYear)
                .where(FiscalYear.company_id == company_id)
                .order_by(FiscalYear.start_date.desc())
            ).all()
        except SQLAlchemyError as exc:
            raise FetchError("fiscal years", str(exc)) from exc
        return [FiscalYearInfo.from_model(row) for row in rows]

    def current_for_company(self, company_id: UUID) -> FiscalYearInfo | None:
        try:
            row = self.session.scalars(
                select(FiscalYear)
                .where(FiscalYear.company_id == company_id)
                .where(FiscalYear.is_current.is_(True))
            ).first()
        except SQLAlchemyError as exc:
            raise FetchError("current fiscal year", str(exc)) from exc
        return FiscalYearInfo.from_model(row) if row is not None else None

    def overlapping(
        self,
        company_id: UUID,
        start_date: date,
        end_date: date,
        exclude_id: UUID | None = None,
    ) -> list[FiscalYearInfo]:
        """Years of the company whose inclusive range intersects [start, end]."""
        query = (
            select(FiscalYear)
            .where(FiscalYear.company_id == company_id)
            .where(FiscalYear.start_date <= end_date)
            .where(FiscalYear.end_date >= start_date)
            .order_by(FiscalYear.start_date)
        )
        if exclude_id is not None:
            query = query.where(FiscalYear.id != exclude_id)
        try:
            rows = self.session.scalars(query).all()
        except SQLAlchemyError as exc:
            raise FetchError("overlapping fiscal years", str(exc)) from exc
        return [FiscalYearInfo.from_model(row) for row in rows]
