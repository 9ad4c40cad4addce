"""
FiscalYearOrchestrator -- Fiscal Year Lifecycle Manager.

Responsibility:
    Public API for the fiscal-year state machine: create, designate current,
    update, close (with the closing entry), open the next year (with the
    opening entry), delete, and the read operations.

Architecture position:
    Services -- stateful orchestration over engines + kernel.
    Composes FiscalYearService, JournalWriter, the selectors and the pure
    engines.  Owns the transaction boundary of every write: commit on
    success, rollback on any failure.

Invariants enforced:
    - Atomicity: a year is never left closed without its closing entry, and
      a new year never exists without the opening entry it was asked to
      carry.
    - Serialization: close runs under the in-process YearLockRegistry and
      the fiscal-year row lock; status is re-checked after locking.
    - One-way close: reopen is always refused for a closed year.

Failure modes:
    - No write operation raises across this boundary.  Kernel errors are
      logged at WARNING and returned as success=False with their code;
      anything else is logged with its traceback and returned with
      UNEXPECTED_ERROR.

Audit relevance:
    Start, commit and failure of every operation are logged with the
    company, fiscal year and actor bound in LogContext.
"""

from __future__ import annotations

from datetime import date
from uuid import UUID

from sqlalchemy.orm import Session

from fiscal_config import LedgerConfig, get_active_config
from fiscal_engines import aggregate_balances, build_closing_entry, calculate_net_income
from fiscal_kernel.domain.clock import Clock, SystemClock
from fiscal_kernel.domain.dtos import AccountType, FiscalYearInfo
from fiscal_kernel.exceptions import (
    FiscalKernelError,
    FiscalYearAlreadyClosedError,
    FiscalYearNotFoundError,
)
from fiscal_kernel.logging_config import LogContext, get_logger
from fiscal_kernel.selectors.account_selector import AccountSelector
from fiscal_kernel.selectors.fiscal_year_selector import FiscalYearSelector
from fiscal_kernel.selectors.ledger_selector import LedgerSelector
from fiscal_kernel.services.fiscal_year_service import FiscalYearService
from fiscal_kernel.services.journal_writer import JournalWriter
from fiscal_kernel.services.year_lock import YearLockRegistry, default_year_locks
from fiscal_services._lifecycle_types import (
    CloseResult,
    DeleteResult,
    OpenResult,
    OperationResult,
    ResultT,
)
from fiscal_services._opening_entry import build_opening_draft, line_descriptions

logger = get_logger("services.fiscal_year_orchestrator")


class FiscalYearOrchestrator:
    """
    Fiscal-year lifecycle over one session.

    Contract:
        Every write method runs in one transaction on the given session and
        returns a result object.  Read methods return FiscalYearInfo DTOs.

    Non-goals:
        - Carry-forward refresh of an existing year lives in
          CarryForwardOrchestrator.
    """

    def __init__(
        self,
        session: Session,
        clock: Clock | None = None,
        config: LedgerConfig | None = None,
        year_locks: YearLockRegistry | None = None,
    ):
        self._session = session
        self._clock = clock or SystemClock()
        self._config = config or get_active_config()
        self._year_locks = year_locks or default_year_locks
        self._years = FiscalYearService(session, self._clock)
        self._writer = JournalWriter(session)
        self._year_selector = FiscalYearSelector(session)

    # =========================================================================
    # Create / designate / update
    # =========================================================================

    def create_fiscal_year(
        self,
        company_id: UUID,
        name: str,
        start_date: date,
        end_date: date,
        actor_id: UUID,
        notes: str | None = None,
        is_current: bool = False,
    ) -> OperationResult:
        """Create an open year; optionally designate it current."""
        with LogContext.bind(company_id=company_id, actor_id=actor_id,
                             operation="create_fiscal_year"):
            return self._run(
                "create_fiscal_year",
                OperationResult,
                lambda: OperationResult(
                    success=True,
                    fiscal_year=self._years.create_year(
                        company_id, name, start_date, end_date, actor_id,
                        notes=notes, is_current=is_current,
                    ),
                ),
            )

    def set_current_fiscal_year(self, fiscal_year_id: UUID, actor_id: UUID) -> OperationResult:
        """Designate an open year current, unsetting the previous one."""
        with LogContext.bind(fiscal_year_id=fiscal_year_id, actor_id=actor_id,
                             operation="set_current_fiscal_year"):
            return self._run(
                "set_current_fiscal_year",
                OperationResult,
                lambda: OperationResult(
                    success=True,
                    fiscal_year=self._years.set_current(fiscal_year_id, actor_id),
                ),
            )

    def update_fiscal_year(
        self,
        fiscal_year_id: UUID,
        actor_id: UUID,
        name: str | None = None,
        notes: str | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> OperationResult:
        """Edit name, notes or dates of an open year."""
        with LogContext.bind(fiscal_year_id=fiscal_year_id, actor_id=actor_id,
                             operation="update_fiscal_year"):
            return self._run(
                "update_fiscal_year",
                OperationResult,
                lambda: OperationResult(
                    success=True,
                    fiscal_year=self._years.update_year(
                        fiscal_year_id, actor_id, name=name, notes=notes,
                        start_date=start_date, end_date=end_date,
                    ),
                ),
            )

    def reopen_fiscal_year(self, fiscal_year_id: UUID, actor_id: UUID) -> OperationResult:
        """Refused for closed years (FISCAL_YEAR_IMMUTABLE); closing is one-way."""
        with LogContext.bind(fiscal_year_id=fiscal_year_id, actor_id=actor_id,
                             operation="reopen_fiscal_year"):
            return self._run(
                "reopen_fiscal_year",
                OperationResult,
                lambda: OperationResult(
                    success=True,
                    fiscal_year=self._years.reopen_year(fiscal_year_id, actor_id),
                ),
            )

    # =========================================================================
    # Close
    # =========================================================================

    def close_fiscal_year(
        self,
        fiscal_year_id: UUID,
        company_id: UUID,
        closed_by: UUID,
    ) -> CloseResult:
        """
        Close a year, zeroing revenue and expenses into retained earnings.

        Steps (one transaction): lock the year and re-check it is open; read
        the year's ledger window; aggregate balances; build and write the
        closing entry (skipped when there is no income activity); mark the
        year closed with the entry id.
        """
        with LogContext.bind(company_id=company_id, fiscal_year_id=fiscal_year_id,
                             actor_id=closed_by, operation="close_fiscal_year"):
            logger.info("fiscal_year_close_started")
            try:
                with self._year_locks.hold(company_id, fiscal_year_id):
                    result = self._close(fiscal_year_id, company_id, closed_by)
                    self._session.commit()
            except FiscalKernelError as exc:
                self._session.rollback()
                logger.warning(
                    "fiscal_year_close_failed",
                    extra={"error_code": exc.code, "error": str(exc)},
                )
                return CloseResult.failed(exc)
            except Exception as exc:
                self._session.rollback()
                logger.exception("fiscal_year_close_error")
                return CloseResult.failed(exc)

            logger.info(
                "fiscal_year_close_committed",
                extra={
                    "closing_entry_id": str(result.closing_entry_id)
                    if result.closing_entry_id else None,
                    "net_income": str(result.net_income),
                },
            )
            return result

    def _close(self, fiscal_year_id: UUID, company_id: UUID, closed_by: UUID) -> CloseResult:
        year_row = self._years.lock_year(fiscal_year_id)
        if year_row.company_id != company_id:
            raise FiscalYearNotFoundError(str(fiscal_year_id))
        if year_row.is_closed:
            raise FiscalYearAlreadyClosedError(str(fiscal_year_id))
        fiscal_year = FiscalYearInfo.from_model(year_row)

        account_selector = AccountSelector(self._session)
        accounts = account_selector.accounts_for_company(company_id)
        lines = LedgerSelector(self._session).lines_between(
            company_id, fiscal_year.start_date, fiscal_year.end_date
        )
        balances = aggregate_balances(
            lines=lines, accounts_by_id={a.id: a for a in accounts}
        )
        income = calculate_net_income(balances=balances, accounts=accounts)

        draft = build_closing_entry(
            fiscal_year=fiscal_year,
            balances=balances,
            revenue_accounts=[a for a in accounts if a.account_type == AccountType.REVENUE],
            expense_accounts=[a for a in accounts if a.account_type == AccountType.EXPENSES],
            retained_earnings_account=account_selector.retained_earnings_account(
                company_id, self._config.retained_earnings.code_prefix
            ),
            description=self._config.descriptions.closing_entry.format(
                fiscal_year_name=fiscal_year.name
            ),
            line_descriptions=line_descriptions(self._config),
            decimal_places=self._config.money.decimal_places,
        )

        closing_entry_id = self._writer.write(draft, closed_by) if draft is not None else None
        if draft is None:
            logger.info("closing_entry_skipped", extra={"reason": "no_income_activity"})

        closed = self._years.close_year(fiscal_year_id, closed_by, closing_entry_id)
        return CloseResult(
            success=True,
            closing_entry_id=closing_entry_id,
            fiscal_year=closed,
            net_income=income.net_income,
        )

    # =========================================================================
    # Open next year
    # =========================================================================

    def open_new_fiscal_year(
        self,
        company_id: UUID,
        name: str,
        start_date: date,
        end_date: date,
        actor_id: UUID,
        previous_year_id: UUID | None = None,
        auto_carry_forward: bool = True,
        notes: str | None = None,
    ) -> OpenResult:
        """
        Create a new current year and, when asked, carry balance-sheet
        balances forward from previous_year_id (cumulative through its end
        date) into an opening entry dated start_date.
        """
        with LogContext.bind(company_id=company_id, actor_id=actor_id,
                             operation="open_new_fiscal_year"):
            logger.info(
                "fiscal_year_open_started",
                extra={
                    "fiscal_year_name": name,
                    "previous_fiscal_year_id": str(previous_year_id) if previous_year_id else None,
                    "auto_carry_forward": auto_carry_forward,
                },
            )
            try:
                result = self._open_new(
                    company_id, name, start_date, end_date, actor_id,
                    previous_year_id, auto_carry_forward, notes,
                )
                self._session.commit()
            except FiscalKernelError as exc:
                self._session.rollback()
                logger.warning(
                    "fiscal_year_open_failed",
                    extra={"error_code": exc.code, "error": str(exc)},
                )
                return OpenResult.failed(exc)
            except Exception as exc:
                self._session.rollback()
                logger.exception("fiscal_year_open_error")
                return OpenResult.failed(exc)

            logger.info(
                "fiscal_year_open_committed",
                extra={
                    "new_fiscal_year_id": str(result.fiscal_year_id),
                    "opening_entry_id": str(result.opening_entry_id)
                    if result.opening_entry_id else None,
                },
            )
            return result

    def _open_new(
        self,
        company_id: UUID,
        name: str,
        start_date: date,
        end_date: date,
        actor_id: UUID,
        previous_year_id: UUID | None,
        auto_carry_forward: bool,
        notes: str | None,
    ) -> OpenResult:
        target = self._years.create_year(
            company_id, name, start_date, end_date, actor_id,
            notes=notes, is_current=True,
        )

        opening_entry_id = None
        if auto_carry_forward and previous_year_id is not None:
            previous = self._year_selector.get(previous_year_id)
            if previous is None or previous.company_id != company_id:
                raise FiscalYearNotFoundError(str(previous_year_id))

            draft = build_opening_draft(self._session, self._config, target, previous)
            if draft is not None:
                opening_entry_id = self._writer.write(draft, actor_id)
                target = self._years.stamp_opening_entry(target.id, opening_entry_id, actor_id)

        return OpenResult(
            success=True,
            fiscal_year_id=target.id,
            opening_entry_id=opening_entry_id,
            fiscal_year=target,
        )

    # =========================================================================
    # Delete
    # =========================================================================

    def delete_fiscal_year(self, fiscal_year_id: UUID) -> DeleteResult:
        """Delete an open year that has no journal entries."""
        with LogContext.bind(fiscal_year_id=fiscal_year_id, operation="delete_fiscal_year"):
            return self._run(
                "delete_fiscal_year",
                DeleteResult,
                lambda: self._delete(fiscal_year_id),
            )

    def _delete(self, fiscal_year_id: UUID) -> DeleteResult:
        self._years.delete_year(fiscal_year_id)
        return DeleteResult(success=True, fiscal_year_id=fiscal_year_id)

    # =========================================================================
    # Reads
    # =========================================================================

    def get_fiscal_year(self, fiscal_year_id: UUID) -> FiscalYearInfo | None:
        return self._year_selector.get(fiscal_year_id)

    def list_fiscal_years(self, company_id: UUID) -> list[FiscalYearInfo]:
        """All years of the company, newest first."""
        return self._year_selector.list_for_company(company_id)

    def get_current_fiscal_year(self, company_id: UUID) -> FiscalYearInfo | None:
        return self._year_selector.current_for_company(company_id)

    # =========================================================================
    # Transaction boundary
    # =========================================================================

    def _run(self, operation: str, result_type: type[ResultT], action) -> ResultT:
        try:
            result = action()
            self._session.commit()
        except FiscalKernelError as exc:
            self._session.rollback()
            logger.warning(
                f"{operation}_failed",
                extra={"error_code": exc.code, "error": str(exc)},
            )
            return result_type.failed(exc)
        except Exception as exc:
            self._session.rollback()
            logger.exception(f"{operation}_error")
            return result_type.failed(exc)

        logger.info(f"{operation}_committed")
        return result
